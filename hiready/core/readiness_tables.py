"""
Readiness and practice plan reference tables.

Dimension keys are snake_case (``problem_solving``); analysis dimension names
such as "Problem Solving" are normalized with ``dimension_key`` before lookup.
Everything here is immutable.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


def dimension_key(name: str) -> str:
    """ "Problem Solving" / "problem-solving" -> "problem_solving"."""
    return "_".join(name.strip().lower().replace("-", " ").replace("/", " ").split())


def dimension_label(key: str) -> str:
    return key.replace("_", " ")


DEFAULT_DIMENSION_WEIGHT = 10

DIMENSION_WEIGHTS: Mapping[str, int] = MappingProxyType({
    "clarity_structure": 12,
    "depth_evidence": 15,
    "problem_solving": 15,
    "role_fit": 12,
    "confidence_composure": 10,
    "communication_hygiene": 8,
    "ownership_impact": 12,
    "consistency_honesty": 8,
    "technical_depth": 10,
    "behavioral_examples": 8,
})

# JD-critical dimensions count 1.5x in the weighted skill coverage.
JD_CRITICAL_MULTIPLIER = 1.5

DEFAULT_CRITICAL_DIMENSIONS: Tuple[str, ...] = ("clarity_structure", "depth_evidence", "problem_solving", "role_fit")

JD_CRITICAL_DIMENSIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "tech": ("problem_solving", "technical_depth", "depth_evidence", "ownership_impact"),
    "data": ("technical_depth", "depth_evidence", "problem_solving", "clarity_structure"),
    "product": ("clarity_structure", "problem_solving", "role_fit", "behavioral_examples"),
    "sales": ("confidence_composure", "communication_hygiene", "behavioral_examples", "role_fit"),
    "business": ("behavioral_examples", "ownership_impact", "clarity_structure", "role_fit"),
})

# First match wins; used when a job target has no resolved role family.
ROLE_FAMILY_TITLE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("tech", ("engineer", "developer", "swe")),
    ("product", ("product", "pm")),
    ("data", ("data", "analyst", "scientist")),
    ("sales", ("sales", "account")),
    ("business", ("manager", "director", "lead", "consultant")),
)


def critical_dimensions_for(role_family: Optional[str]) -> Tuple[str, ...]:
    return JD_CRITICAL_DIMENSIONS.get(role_family or "", DEFAULT_CRITICAL_DIMENSIONS)


def detect_role_family(role_title: Optional[str]) -> Optional[str]:
    """Keyword match on the title; short keywords ("pm", "swe") must be whole words."""
    title = (role_title or "").lower()
    words = title.replace("/", " ").replace("-", " ").split()
    for family, keywords in ROLE_FAMILY_TITLE_KEYWORDS:
        for keyword in keywords:
            if (keyword in words) if len(keyword) <= 3 else (keyword in title):
                return family
    return None


# Readiness bands for a single job target, highest first.
JOB_READINESS_BANDS = (
    (85, "strong"),
    (70, "ready"),
    (55, "almost_ready"),
    (40, "needs_work"),
)

GAP_TARGET_SCORE = 75
GAP_MIN_DELTA = 5

BASE_PREP_HOURS: Mapping[str, float] = MappingProxyType({
    "not_ready": 15,
    "needs_work": 10,
    "almost_ready": 5,
    "ready": 2,
    "strong": 1,
})
PREP_HOURS_PER_GAP = 1.5


def score_level(score: float) -> str:
    """0-100 score -> low / medium / high tier used by focus tips and activities."""
    if score < 50:
        return "low"
    if score < 70:
        return "medium"
    return "high"


FOCUS_TIPS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "clarity_structure": MappingProxyType({
        "low": "Practice the STAR method for all answers. Record yourself and check for clear beginning-middle-end.",
        "medium": "Focus on concise openings. Time yourself and aim for 90-120 second responses.",
        "high": "Fine-tune your answer flow. Add signposting phrases like 'First... Second... Finally...'",
    }),
    "depth_evidence": MappingProxyType({
        "low": "Prepare 5 strong stories with specific metrics. Use the CAR format (Challenge-Action-Result).",
        "medium": "Add more numbers to your stories: percentages, timelines, team sizes, revenue impact.",
        "high": "Polish your evidence. Make metrics memorable and tie them to business outcomes.",
    }),
    "problem_solving": MappingProxyType({
        "low": "Practice thinking out loud. Use structured frameworks for case questions.",
        "medium": "Work on articulating trade-offs. Explain why you chose one approach over another.",
        "high": "Deepen your reasoning. Anticipate follow-up questions and address edge cases early.",
    }),
    "role_fit": MappingProxyType({
        "low": "Research the role deeply. Prepare specific examples showing you've done similar work.",
        "medium": "Connect your experience more explicitly to the job requirements.",
        "high": "Prepare thoughtful questions that show deep understanding of the role's challenges.",
    }),
    "confidence_composure": MappingProxyType({
        "low": "Practice with mock interviews. Keep a steady pace and avoid filler words.",
        "medium": "Record yourself answering tough questions. Work on vocal variety.",
        "high": "Prepare for curveball questions. Practice pivoting gracefully when caught off-guard.",
    }),
    "ownership_impact": MappingProxyType({
        "low": "Use 'I' instead of 'we'. Identify your specific contribution in every story.",
        "medium": "Quantify your impact more precisely. Prepare backup details for follow-ups.",
        "high": "Connect your actions to larger business outcomes. Show strategic thinking.",
    }),
})


def focus_tip(dimension: str, score: float) -> str:
    tip = FOCUS_TIPS.get(dimension, {}).get(score_level(score))
    return tip or f"Focus on improving {dimension_label(dimension)} through targeted practice sessions."


@dataclass(frozen=True)
class ActivityTemplate:
    type: str  # mock_interview / exercise / review / research / self_practice
    title: str
    description: str
    minutes: int


ACTIVITY_TEMPLATES: Mapping[str, Mapping[str, Tuple[ActivityTemplate, ...]]] = MappingProxyType({
    "clarity_structure": MappingProxyType({
        "low": (
            ActivityTemplate("exercise", "STAR Method Practice",
                             "Write out 5 stories using STAR format (Situation, Task, Action, Result)", 30),
            ActivityTemplate("self_practice", "Record & Review",
                             "Record yourself answering a behavioral question. Check for clear beginning-middle-end", 20),
            ActivityTemplate("review", "Watch Strong Examples",
                             "Watch 2-3 sample interview answers and note their structure", 15),
        ),
        "medium": (
            ActivityTemplate("self_practice", "Timed Responses",
                             "Practice answering questions in 90-120 seconds with a timer", 20),
            ActivityTemplate("exercise", "Signposting Practice",
                             "Rewrite 3 of your stories adding transition phrases (First..., Additionally..., Finally...)", 15),
        ),
        "high": (
            ActivityTemplate("mock_interview", "Quick Mock Round",
                             "Do a 3-question mock focusing on answer structure", 25),
        ),
    }),
    "depth_evidence": MappingProxyType({
        "low": (
            ActivityTemplate("exercise", "Metrics Brainstorm",
                             "List 10+ quantifiable impacts from your work (%, $, time saved, users helped)", 25),
            ActivityTemplate("exercise", "CAR Story Writing",
                             "Write 3 stories using Challenge-Action-Result format with specific numbers", 35),
            ActivityTemplate("review", "Evidence Audit",
                             "Review your resume and prepare backup details for each bullet point", 20),
        ),
        "medium": (
            ActivityTemplate("self_practice", "Number Recall Practice",
                             "Practice reciting your key metrics from memory naturally", 15),
            ActivityTemplate("exercise", "Impact Translation",
                             "Translate 3 technical achievements into business impact", 20),
        ),
        "high": (
            ActivityTemplate("mock_interview", "Deep Dive Mock",
                             "Practice being questioned in depth on your strongest story", 25),
        ),
    }),
    "problem_solving": MappingProxyType({
        "low": (
            ActivityTemplate("research", "Framework Study",
                             "Learn 2-3 problem-solving frameworks (MECE, Issue Tree, Hypothesis-driven)", 25),
            ActivityTemplate("exercise", "Think Aloud Practice",
                             "Practice solving 2 case problems while narrating your thought process", 40),
            ActivityTemplate("review", "Case Study Examples",
                             "Review 3 sample case interviews and note the reasoning patterns", 20),
        ),
        "medium": (
            ActivityTemplate("exercise", "Trade-off Articulation",
                             "For 3 past decisions, practice explaining the trade-offs you considered", 20),
            ActivityTemplate("mock_interview", "Case Practice Session",
                             "Do one full case question with a structured approach", 30),
        ),
        "high": (
            ActivityTemplate("self_practice", "Edge Case Prep",
                             "For your strongest problem-solving story, prepare for 5 follow-up questions", 20),
        ),
    }),
    "role_fit": MappingProxyType({
        "low": (
            ActivityTemplate("research", "Company Research",
                             "Research the company's recent news, culture, and challenges", 25),
            ActivityTemplate("exercise", "Experience Mapping",
                             "Map your experiences to specific JD requirements", 30),
            ActivityTemplate("exercise", "Why Questions",
                             "Prepare authentic answers for 'Why this role?' and 'Why this company?'", 20),
        ),
        "medium": (
            ActivityTemplate("research", "Team Research",
                             "Research the team you'd join and their key projects", 20),
            ActivityTemplate("exercise", "Gap Stories",
                             "Prepare stories showing you can learn skills you're missing", 25),
        ),
        "high": (
            ActivityTemplate("exercise", "Thoughtful Questions",
                             "Prepare 5 insightful questions that show you understand the role deeply", 20),
        ),
    }),
    "confidence_composure": MappingProxyType({
        "low": (
            ActivityTemplate("self_practice", "Mirror Practice",
                             "Practice your introduction and key stories in front of a mirror", 20),
            ActivityTemplate("exercise", "Filler Word Audit",
                             "Record yourself and count filler words. Aim to reduce them by half", 15),
            ActivityTemplate("self_practice", "Warm-up Routine",
                             "Run a 2-minute breathing and posture routine before mock sessions", 10),
        ),
        "medium": (
            ActivityTemplate("mock_interview", "Pressure Practice",
                             "Do a mock interview with shorter answer time limits", 25),
            ActivityTemplate("exercise", "Curveball Prep",
                             "Prepare responses for 5 unexpected or difficult questions", 20),
        ),
        "high": (
            ActivityTemplate("mock_interview", "Stress Interview",
                             "Do a mock with a stress-style interviewer", 30),
        ),
    }),
    "ownership_impact": MappingProxyType({
        "low": (
            ActivityTemplate("exercise", "I vs We Rewrite",
                             "Rewrite 5 stories replacing 'we' with 'I' and adding your specific role", 25),
            ActivityTemplate("exercise", "Contribution Clarity",
                             "For each major project, write one sentence explaining your unique contribution", 20),
            ActivityTemplate("review", "Resume Ownership Audit",
                             "Review your resume and make sure every bullet shows your action and impact", 15),
        ),
        "medium": (
            ActivityTemplate("self_practice", "Ownership Drill",
                             "Practice telling stories emphasizing 'I decided...', 'I built...', 'I led...'", 20),
            ActivityTemplate("exercise", "Impact Quantification",
                             "Add specific impact numbers to 3 of your stories", 15),
        ),
        "high": (
            ActivityTemplate("mock_interview", "Follow-up Practice",
                             "Practice being questioned on exactly what you did in team projects", 25),
        ),
    }),
})

WARMUP_ACTIVITIES: Tuple[ActivityTemplate, ...] = (
    ActivityTemplate("self_practice", "Quick Intro Practice", "Practice your 60-second elevator pitch", 10),
    ActivityTemplate("review", "Resume Review", "Re-read your resume to refresh on details", 10),
    ActivityTemplate("research", "News Check", "Check company and industry news for conversation points", 10),
)

BASELINE_ACTIVITY = ActivityTemplate(
    "review", "Baseline Assessment", "Review your readiness report and identify top 3 focus areas", 15)
WEEK_RECAP_ACTIVITY = ActivityTemplate(
    "review", "Week Recap", "Compare your performance to Day 1. Identify gaps for next week", 10)

PLAN_DAYS = 7
MOCK_DAYS = (3, 6)
WARMUP_DAYS = (1, 4, 7)
MOCK_MINUTES = 25
DEFAULT_DAILY_MINUTES = 45
# Days 1-3 carry critical/high gaps, repeated on days 4-6; days 4-7 take the rest.
PRIORITY_GAP_DAYS = 3
MAX_MINOR_GAPS_PER_DAY = 2
TARGET_READINESS_LIFT = 15


def commitment_level(daily_minutes: int) -> str:
    if daily_minutes <= 30:
        return "light"
    if daily_minutes <= 60:
        return "moderate"
    return "intensive"
