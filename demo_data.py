# Canned results served when no model credential is configured.

CHAT_DELAY_SEC = 1.0
RESUME_DELAY_SEC = 0.5
FEEDBACK_DELAY_SEC = 1.5
TUTOR_DELAY_SEC = 1.5

DEMO_CHAT_REPLY = "I'm running in Demo Mode (no API Key)."


def resume_analysis():
    return {
        "score": 82,
        "strengths": [
            "Strong action verbs used throughout experience section",
            "Clear quantification of achievements (e.g., 'increased efficiency by 20%')",
            "Skills section is well-categorized and relevant",
        ],
        "improvements": [
            "Add a brief professional summary at the top",
            "Ensure consistent date formatting across all entries",
            "Include links to GitHub or portfolio projects",
        ],
    }


def interview_feedback(question):
    return {
        "feedback": (
            "Great start! You structured your answer using the STAR method which is excellent. "
            "However, try to focus more on the 'Result' aspect. Quantify the impact of your actions where possible."
        ),
        "betterAnswer": (
            "In my previous role, I encountered a conflict where two team members disagreed on the API "
            "architecture. I facilitated a meeting to list pros and cons of each approach. We realized a hybrid "
            "solution was best. This decision reduced our technical debt by 15% and accelerated delivery by 2 weeks."
        ),
        "rating": 8.5,
    }


def tutor_plan(score, domain):
    return {
        "level": "Intermediate" if score > 3 else "Beginner",
        "feedback": f"You have a solid grasp of {domain} fundamentals, but could improve on advanced concepts.",
        "weakAreas": ["State Management Patterns", "Performance Optimization"],
        "assignments": [
            {
                "title": "Refactor Context API",
                "description": "Take a prop-drilled component tree and refactor it to use React Context efficiently.",
                "difficulty": "Medium",
            },
            {
                "title": "Implement Memoization",
                "description": "Use React.memo and useMemo to optimize a heavy rendering list.",
                "difficulty": "Hard",
            },
            {
                "title": "Custom Hooks 101",
                "description": "Create a custom hook useFetch that handles loading, error, and data states.",
                "difficulty": "Easy",
            },
        ],
        "recommendedSkills": ["Redux Toolkit", "Next.js", "Jest Testing"],
    }
