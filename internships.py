LOCATION_FILTERS = ("All", "Remote", "On-site")

INTERVIEW_QUESTIONS = [
    "Tell me about a challenging project you've worked on.",
    "What is your greatest technical strength?",
    "How do you handle conflict in a team setting?",
    "Where do you see yourself in 5 years?",
    "Explain a complex concept to a non-technical person.",
]

MOCK_INTERNSHIPS = [
    {
        "id": "int-001",
        "title": "Frontend Developer Intern",
        "company": "Zeta Labs",
        "location": "Bengaluru",
        "stipend": "INR 25,000 / month",
        "duration": "6 months",
        "tags": ["React", "TypeScript", "Tailwind CSS"],
        "matchScore": 92,
    },
    {
        "id": "int-002",
        "title": "Backend Engineering Intern",
        "company": "Razorpay",
        "location": "Remote",
        "stipend": "INR 30,000 / month",
        "duration": "3 months",
        "tags": ["Python", "FastAPI", "PostgreSQL"],
        "matchScore": 85,
    },
    {
        "id": "int-003",
        "title": "Data Analyst Intern",
        "company": "Swiggy",
        "location": "Hyderabad",
        "stipend": "INR 20,000 / month",
        "duration": "4 months",
        "tags": ["SQL", "Pandas", "Power BI"],
        "matchScore": 78,
    },
    {
        "id": "int-004",
        "title": "Machine Learning Intern",
        "company": "Sarvam AI",
        "location": "Remote (India)",
        "stipend": "INR 40,000 / month",
        "duration": "6 months",
        "tags": ["PyTorch", "NLP", "Python"],
        "matchScore": 74,
    },
    {
        "id": "int-005",
        "title": "UI/UX Design Intern",
        "company": "Cred",
        "location": "Pune",
        "stipend": "INR 18,000 / month",
        "duration": "3 months",
        "tags": ["Figma", "Prototyping", "User Research"],
        "matchScore": None,
    },
    {
        "id": "int-006",
        "title": "Cloud & DevOps Intern",
        "company": "Freshworks",
        "location": "Chennai",
        "stipend": "INR 22,000 / month",
        "duration": "6 months",
        "tags": ["AWS", "Docker", "CI/CD"],
        "matchScore": 68,
    },
]


def _matches_search(internship, term):
    if not term:
        return True
    return (
        term in internship["title"].lower()
        or term in internship["company"].lower()
        or any(term in tag.lower() for tag in internship.get("tags", []))
    )


def _matches_location(internship, location_filter):
    remote = "Remote" in internship["location"]
    if location_filter == "Remote":
        return remote
    if location_filter == "On-site":
        return not remote
    return True


def filter_internships(search="", location_filter="All", internships=None):
    """Case-insensitive substring match on title, company and tags, plus a remote/on-site filter."""
    if location_filter not in LOCATION_FILTERS:
        raise ValueError(f"Unknown location filter: {location_filter}")
    items = MOCK_INTERNSHIPS if internships is None else internships
    term = (search or "").lower()
    return [i for i in items if _matches_search(i, term) and _matches_location(i, location_filter)]


def interview_question(index=0):
    total = len(INTERVIEW_QUESTIONS)
    index = index % total
    return {
        "index": index,
        "total": total,
        "question": INTERVIEW_QUESTIONS[index],
        "next_index": (index + 1) % total,
    }
