from typing import List, Literal, TypedDict

Level = Literal["Beginner", "Intermediate", "Advanced"]
Difficulty = Literal["Easy", "Medium", "Hard"]

LEVELS = ("Beginner", "Intermediate", "Advanced")
DIFFICULTIES = ("Easy", "Medium", "Hard")


# total=False: a failed normalization produces the empty variant ``{}``.
class ResumeAnalysis(TypedDict, total=False):
    score: float
    strengths: List[str]
    improvements: List[str]


class InterviewFeedback(TypedDict, total=False):
    feedback: str
    betterAnswer: str
    rating: float


class Assignment(TypedDict):
    title: str
    description: str
    difficulty: Difficulty


class TutorPlan(TypedDict, total=False):
    level: Level
    feedback: str
    weakAreas: List[str]
    assignments: List[Assignment]
    recommendedSkills: List[str]


RESUME_ANALYSIS_FIELDS = ("score", "strengths", "improvements")
INTERVIEW_FEEDBACK_FIELDS = ("feedback", "betterAnswer", "rating")
TUTOR_PLAN_FIELDS = ("level", "feedback", "weakAreas", "assignments", "recommendedSkills")


def _string_list():
    return {"type": "ARRAY", "items": {"type": "STRING"}}


# Gemini responseSchema (OpenAPI subset).
RESUME_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "strengths": _string_list(),
        "improvements": _string_list(),
    },
    "required": list(RESUME_ANALYSIS_FIELDS),
}

INTERVIEW_FEEDBACK_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "feedback": {"type": "STRING"},
        "betterAnswer": {"type": "STRING"},
        "rating": {"type": "NUMBER"},
    },
    "required": list(INTERVIEW_FEEDBACK_FIELDS),
}

TUTOR_PLAN_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "level": {"type": "STRING", "enum": list(LEVELS)},
        "feedback": {"type": "STRING"},
        "weakAreas": _string_list(),
        "assignments": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "difficulty": {"type": "STRING", "enum": list(DIFFICULTIES)},
                },
                "required": ["title", "description", "difficulty"],
            },
        },
        "recommendedSkills": _string_list(),
    },
    "required": list(TUTOR_PLAN_FIELDS),
}
