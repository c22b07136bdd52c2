"""
Interview plan reference tables.

Single source of truth for interview components, canonical rounds, phase
categories, family default templates, task-type routing and interview-type
weights. Everything here is immutable; ``InterviewPlanTables`` bundles the
tables the plan synthesizer reads so tests can inject a substitute set.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class InterviewComponent(str, Enum):
    """Interview round kinds a company may run (Company.interview_components keys)."""
    APTITUDE = "aptitude"
    HR_SCREEN = "hrScreen"
    CODING_CHALLENGE = "codingChallenge"
    TECHNICAL_DSA_SQL = "technicalDsaSql"
    SYSTEM_DESIGN = "systemDesign"
    CASE_STUDY = "caseStudy"
    BEHAVIORAL = "behavioral"
    HIRING_MANAGER = "hiringManager"
    GROUP_DISCUSSION = "groupDiscussion"
    PRESENTATION = "presentation"
    PANEL = "panel"

    @classmethod
    def from_key(cls, key: str) -> Optional["InterviewComponent"]:
        """
        Parse a stored component key.

        Accepts both ``codingChallenge`` and the flag spelling
        ``hasCodingChallenge``. Returns None for unknown keys.
        """
        if not key:
            return None
        if key.startswith("has") and len(key) > 3 and key[3].isupper():
            key = key[3].lower() + key[4:]
        try:
            return cls(key)
        except ValueError:
            return None


class PhaseCategory(str, Enum):
    APTITUDE_ASSESSMENT = "aptitude_assessment"
    HR_SCREENING = "hr_screening"
    HIRING_MANAGER = "hiring_manager"
    TECHNICAL_INTERVIEW = "technical_interview"
    CODING_ASSESSMENT = "coding_assessment"
    SYSTEM_DESIGN = "system_design"
    CASE_STUDY = "case_study"
    BEHAVIORAL = "behavioral"
    CULTURE_VALUES = "culture_values"
    BAR_RAISER = "bar_raiser"
    GROUP_DISCUSSION = "group_discussion"


class PracticeMode(str, Enum):
    LIVE_INTERVIEW = "live_interview"
    CODING_LAB = "coding_lab"
    CASE_STUDY = "case_study"
    PRESENTATION = "presentation"


@dataclass(frozen=True)
class RoundConfig:
    name: str
    mins: int
    priority: int


@dataclass(frozen=True)
class PhaseCategoryInfo:
    category: PhaseCategory
    practice_mode: PracticeMode
    description: str


@dataclass(frozen=True)
class DefaultPhase:
    name: str
    mins: int


@dataclass(frozen=True)
class EmployerPhaseTemplate:
    name: str
    base_mins: int
    category: str
    description: str


# ============================================
# Components -> rounds
# ============================================

COMPONENT_ROUNDS: Mapping[InterviewComponent, RoundConfig] = MappingProxyType({
    InterviewComponent.APTITUDE: RoundConfig("Aptitude Assessment", 60, 1),
    InterviewComponent.HR_SCREEN: RoundConfig("HR Screening", 30, 2),
    InterviewComponent.CODING_CHALLENGE: RoundConfig("Coding Round", 60, 3),
    InterviewComponent.TECHNICAL_DSA_SQL: RoundConfig("Technical Interview", 45, 4),
    InterviewComponent.SYSTEM_DESIGN: RoundConfig("System Design", 45, 5),
    InterviewComponent.CASE_STUDY: RoundConfig("Case Study", 45, 6),
    InterviewComponent.BEHAVIORAL: RoundConfig("Behavioral", 45, 7),
    InterviewComponent.HIRING_MANAGER: RoundConfig("Hiring Manager", 45, 8),
    InterviewComponent.GROUP_DISCUSSION: RoundConfig("Group Discussion", 60, 9),
    InterviewComponent.PRESENTATION: RoundConfig("Case Study", 45, 6),
})

# Components recorded for a company that never become a practice round
ROUNDLESS_COMPONENTS: FrozenSet[InterviewComponent] = frozenset({InterviewComponent.PANEL})

COMPONENT_ROLE_TYPES: Mapping[InterviewComponent, FrozenSet[str]] = MappingProxyType({
    InterviewComponent.APTITUDE: frozenset({"aptitude"}),
    InterviewComponent.HR_SCREEN: frozenset({"hr"}),
    InterviewComponent.CODING_CHALLENGE: frozenset({"technical", "coding"}),
    InterviewComponent.TECHNICAL_DSA_SQL: frozenset({"technical", "coding"}),
    InterviewComponent.SYSTEM_DESIGN: frozenset({"technical"}),
    InterviewComponent.CASE_STUDY: frozenset({"case", "product", "portfolio"}),
    InterviewComponent.BEHAVIORAL: frozenset({"behavioral", "sales_roleplay"}),
    InterviewComponent.HIRING_MANAGER: frozenset({"hiring_manager", "sales_roleplay"}),
    InterviewComponent.GROUP_DISCUSSION: frozenset({"group"}),
    InterviewComponent.PRESENTATION: frozenset({"case", "product", "portfolio"}),
})

ROLE_TYPE_COMPONENTS: Mapping[str, Tuple[InterviewComponent, ...]] = MappingProxyType({
    "technical": (
        InterviewComponent.TECHNICAL_DSA_SQL,
        InterviewComponent.CODING_CHALLENGE,
        InterviewComponent.SYSTEM_DESIGN,
    ),
    "coding": (InterviewComponent.CODING_CHALLENGE, InterviewComponent.TECHNICAL_DSA_SQL),
    "hiring_manager": (InterviewComponent.HIRING_MANAGER,),
    "behavioral": (InterviewComponent.BEHAVIORAL,),
    "hr": (InterviewComponent.HR_SCREEN,),
    "case": (InterviewComponent.CASE_STUDY, InterviewComponent.PRESENTATION),
    "product": (InterviewComponent.CASE_STUDY, InterviewComponent.PRESENTATION),
    "portfolio": (InterviewComponent.CASE_STUDY, InterviewComponent.PRESENTATION),
    "sales_roleplay": (InterviewComponent.BEHAVIORAL, InterviewComponent.HIRING_MANAGER),
    "aptitude": (InterviewComponent.APTITUDE,),
    "group": (InterviewComponent.GROUP_DISCUSSION,),
})

# Always kept from company data even when the role never asks for them
UNIVERSAL_COMPONENTS: FrozenSet[InterviewComponent] = frozenset({
    InterviewComponent.HR_SCREEN,
    InterviewComponent.BEHAVIORAL,
    InterviewComponent.HIRING_MANAGER,
})

# Role interview types synthesized when the company covers none of them
CORE_ROLE_TYPES: FrozenSet[str] = frozenset({"case", "product", "technical", "coding", "portfolio"})

# ============================================
# Phase name -> category / practice mode
# ============================================

PHASE_CATEGORIES: Mapping[str, PhaseCategoryInfo] = MappingProxyType({
    "Aptitude Assessment": PhaseCategoryInfo(
        PhaseCategory.APTITUDE_ASSESSMENT, PracticeMode.CODING_LAB,
        "Quantitative, logical, and verbal reasoning assessment"),
    "HR Screening": PhaseCategoryInfo(
        PhaseCategory.HR_SCREENING, PracticeMode.LIVE_INTERVIEW,
        "Behavioral assessment, motivation, background, and cultural fit"),
    "Phone Screen": PhaseCategoryInfo(
        PhaseCategory.HR_SCREENING, PracticeMode.LIVE_INTERVIEW,
        "Initial screening call covering background and basic fit"),
    "Technical Interview": PhaseCategoryInfo(
        PhaseCategory.TECHNICAL_INTERVIEW, PracticeMode.LIVE_INTERVIEW,
        "Technical discussion covering domain expertise and problem-solving"),
    "Coding Round": PhaseCategoryInfo(
        PhaseCategory.CODING_ASSESSMENT, PracticeMode.CODING_LAB,
        "Hands-on coding problems to demonstrate programming skills"),
    "DSA Round": PhaseCategoryInfo(
        PhaseCategory.CODING_ASSESSMENT, PracticeMode.CODING_LAB,
        "Data structures and algorithms problem solving"),
    "System Design": PhaseCategoryInfo(
        PhaseCategory.SYSTEM_DESIGN, PracticeMode.CASE_STUDY,
        "Design scalable systems and discuss architectural tradeoffs"),
    "Hiring Manager": PhaseCategoryInfo(
        PhaseCategory.HIRING_MANAGER, PracticeMode.LIVE_INTERVIEW,
        "Deep-dive into role requirements, domain expertise, and team fit"),
    "Behavioral": PhaseCategoryInfo(
        PhaseCategory.BEHAVIORAL, PracticeMode.LIVE_INTERVIEW,
        "STAR-format questions about past experiences and competencies"),
    "Case Study": PhaseCategoryInfo(
        PhaseCategory.CASE_STUDY, PracticeMode.CASE_STUDY,
        "Analyze business problems, structure approach, present recommendations"),
    "Product Sense": PhaseCategoryInfo(
        PhaseCategory.CASE_STUDY, PracticeMode.CASE_STUDY,
        "Product thinking, prioritization, and user-focused problem solving"),
    "Analytics Case": PhaseCategoryInfo(
        PhaseCategory.CASE_STUDY, PracticeMode.CASE_STUDY,
        "Data-driven problem solving and metric analysis"),
    "SQL Round": PhaseCategoryInfo(
        PhaseCategory.CODING_ASSESSMENT, PracticeMode.CODING_LAB,
        "SQL query writing and database problem solving"),
    "ML Round": PhaseCategoryInfo(
        PhaseCategory.TECHNICAL_INTERVIEW, PracticeMode.LIVE_INTERVIEW,
        "Machine learning concepts, algorithms, and implementation"),
    "Culture Fit": PhaseCategoryInfo(
        PhaseCategory.CULTURE_VALUES, PracticeMode.LIVE_INTERVIEW,
        "Assessment of values alignment and collaboration style"),
    "Bar Raiser": PhaseCategoryInfo(
        PhaseCategory.BAR_RAISER, PracticeMode.LIVE_INTERVIEW,
        "Cross-functional interview focused on raising the hiring bar"),
    "Group Discussion": PhaseCategoryInfo(
        PhaseCategory.GROUP_DISCUSSION, PracticeMode.LIVE_INTERVIEW,
        "Group discussion evaluating communication and teamwork"),
    "Presentation": PhaseCategoryInfo(
        PhaseCategory.CASE_STUDY, PracticeMode.CASE_STUDY,
        "Present analysis, recommendations, or technical work to interviewers"),
})

UNKNOWN_PHASE_CATEGORY = PhaseCategoryInfo(
    PhaseCategory.TECHNICAL_INTERVIEW, PracticeMode.LIVE_INTERVIEW, "Interview round")

DEFAULT_ROLE_FAMILY = "tech"

FAMILY_DEFAULT_PHASES: Mapping[str, Tuple[DefaultPhase, ...]] = MappingProxyType({
    "tech": (
        DefaultPhase("HR Screening", 30),
        DefaultPhase("Technical Interview", 45),
        DefaultPhase("Coding Round", 60),
        DefaultPhase("System Design", 45),
        DefaultPhase("Hiring Manager", 45),
    ),
    "data": (
        DefaultPhase("HR Screening", 30),
        DefaultPhase("Technical Interview", 45),
        DefaultPhase("SQL Round", 45),
        DefaultPhase("Analytics Case", 45),
        DefaultPhase("Hiring Manager", 45),
    ),
    "product": (
        DefaultPhase("HR Screening", 30),
        DefaultPhase("Product Sense", 45),
        DefaultPhase("Case Study", 45),
        DefaultPhase("Behavioral", 45),
        DefaultPhase("Hiring Manager", 45),
    ),
    "sales": (
        DefaultPhase("HR Screening", 30),
        DefaultPhase("Behavioral", 45),
        DefaultPhase("Case Study", 30),
        DefaultPhase("Hiring Manager", 45),
    ),
    "business": (
        DefaultPhase("HR Screening", 30),
        DefaultPhase("Case Study", 45),
        DefaultPhase("Behavioral", 45),
        DefaultPhase("Hiring Manager", 45),
    ),
})

# ============================================
# Blueprint routing
# ============================================

PHASE_TASK_TYPES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Case Study": ("case_interview", "metrics_case", "execution_scenario"),
    "HR Screening": ("behavioral_star",),
    "Behavioral": ("behavioral_star",),
    "Hiring Manager": ("behavioral_star", "execution_scenario"),
    "Technical Interview": ("coding_explain", "debugging", "code_review"),
    "Coding Round": ("coding_explain", "debugging", "code_modification"),
    "System Design": ("code_review",),
    "Presentation": ("portfolio_walkthrough", "insight_storytelling"),
    "Panel Interview": ("behavioral_star", "case_interview"),
    "Aptitude Assessment": (),
    "Group Discussion": (),
})

INTERVIEW_TYPE_METADATA: Mapping[str, Mapping[str, object]] = MappingProxyType({
    "technical": MappingProxyType({
        "label": "Technical Interview",
        "description": "Deep-dive into technical skills, problem-solving, and domain expertise",
        "icon": "code", "practice_mode": "live_interview",
        "task_types": ("coding_explain", "debugging", "code_review"),
    }),
    "coding": MappingProxyType({
        "label": "Coding Round",
        "description": "Hands-on coding problems with explanation of your approach",
        "icon": "terminal", "practice_mode": "coding_lab",
        "task_types": ("coding_explain", "debugging", "code_modification"),
    }),
    "hiring_manager": MappingProxyType({
        "label": "Hiring Manager Round",
        "description": "Role fit, ownership, and how you would execute in the team",
        "icon": "briefcase", "practice_mode": "live_interview",
        "task_types": ("behavioral_star", "execution_scenario"),
    }),
    "behavioral": MappingProxyType({
        "label": "Behavioral Interview",
        "description": "STAR-format questions about past experiences and competencies",
        "icon": "users", "practice_mode": "live_interview",
        "task_types": ("behavioral_star",),
    }),
    "hr": MappingProxyType({
        "label": "HR Screening",
        "description": "Background, motivation, and cultural fit",
        "icon": "user-check", "practice_mode": "live_interview",
        "task_types": ("behavioral_star",),
    }),
    "case": MappingProxyType({
        "label": "Case Interview",
        "description": "Structure an ambiguous business problem and recommend a path",
        "icon": "clipboard", "practice_mode": "case_study",
        "task_types": ("case_interview", "metrics_case"),
    }),
    "product": MappingProxyType({
        "label": "Product Sense",
        "description": "Product thinking, prioritization, and user-focused problem solving",
        "icon": "box", "practice_mode": "case_study",
        "task_types": ("case_interview", "metrics_case", "execution_scenario"),
    }),
    "portfolio": MappingProxyType({
        "label": "Portfolio Review",
        "description": "Walk through past work and the decisions behind it",
        "icon": "image", "practice_mode": "presentation",
        "task_types": ("portfolio_walkthrough", "insight_storytelling"),
    }),
    "sales_roleplay": MappingProxyType({
        "label": "Sales Roleplay",
        "description": "Discovery, objection handling, and closing in a simulated call",
        "icon": "phone", "practice_mode": "live_interview",
        "task_types": ("behavioral_star", "execution_scenario"),
    }),
    "aptitude": MappingProxyType({
        "label": "Aptitude Assessment",
        "description": "Quantitative, logical, and verbal reasoning",
        "icon": "calculator", "practice_mode": "coding_lab",
        "task_types": (),
    }),
    "group": MappingProxyType({
        "label": "Group Discussion",
        "description": "Communication and teamwork in a moderated group topic",
        "icon": "message-circle", "practice_mode": "live_interview",
        "task_types": (),
    }),
    "sql": MappingProxyType({
        "label": "SQL Round",
        "description": "Query writing and database problem solving",
        "icon": "database", "practice_mode": "coding_lab",
        "task_types": ("coding_explain", "debugging"),
    }),
    "analytics": MappingProxyType({
        "label": "Analytics Case",
        "description": "Metric design, root-cause analysis, and data storytelling",
        "icon": "bar-chart", "practice_mode": "case_study",
        "task_types": ("metrics_case", "insight_storytelling"),
    }),
    "ml": MappingProxyType({
        "label": "ML Round",
        "description": "Machine learning concepts, modelling choices, and evaluation",
        "icon": "cpu", "practice_mode": "live_interview",
        "task_types": ("coding_explain", "code_review"),
    }),
})

PRACTICE_OPTION_DURATION = "10-15 min"
DEFAULT_PRACTICE_TYPES: Tuple[str, ...] = ("technical", "hiring_manager", "behavioral")

# ============================================
# Employer screening plan (fixed total duration)
# ============================================

DEFAULT_EMPLOYER_FAMILY = "business"

EMPLOYER_PHASE_TEMPLATES: Mapping[str, Tuple[EmployerPhaseTemplate, ...]] = MappingProxyType({
    "tech": (
        EmployerPhaseTemplate("Introduction", 2, "warmup", "Brief introduction and background"),
        EmployerPhaseTemplate("Technical Assessment", 5, "technical", "Core technical problem solving"),
        EmployerPhaseTemplate("Behavioral", 3, "behavioral", "Teamwork and past experience"),
        EmployerPhaseTemplate("Wrap-up", 2, "closing", "Candidate questions and next steps"),
    ),
    "data": (
        EmployerPhaseTemplate("Introduction", 2, "warmup", "Brief introduction and background"),
        EmployerPhaseTemplate("Analytical Assessment", 5, "technical", "Data reasoning and analysis approach"),
        EmployerPhaseTemplate("Behavioral", 3, "behavioral", "Stakeholder work and past experience"),
        EmployerPhaseTemplate("Wrap-up", 2, "closing", "Candidate questions and next steps"),
    ),
    "product": (
        EmployerPhaseTemplate("Introduction", 2, "warmup", "Brief introduction and background"),
        EmployerPhaseTemplate("Product Thinking", 5, "case_study", "Product sense and prioritization"),
        EmployerPhaseTemplate("Behavioral", 3, "behavioral", "Cross-functional collaboration"),
        EmployerPhaseTemplate("Wrap-up", 2, "closing", "Candidate questions and next steps"),
    ),
    "sales": (
        EmployerPhaseTemplate("Introduction", 2, "warmup", "Greeting and rapport building"),
        EmployerPhaseTemplate("Sales Assessment", 5, "behavioral", "Pipeline, targets, and deal experience"),
        EmployerPhaseTemplate("Role Play", 3, "situational", "Short simulated customer conversation"),
        EmployerPhaseTemplate("Wrap-up", 2, "closing", "Candidate questions and next steps"),
    ),
    "business": (
        EmployerPhaseTemplate("Introduction", 2, "warmup", "Brief introduction and background"),
        EmployerPhaseTemplate("Case Discussion", 5, "case_study", "Structured business problem solving"),
        EmployerPhaseTemplate("Behavioral", 3, "behavioral", "Ownership and past experience"),
        EmployerPhaseTemplate("Wrap-up", 2, "closing", "Candidate questions and next steps"),
    ),
})

EMPLOYER_INTERVIEW_STYLES: Mapping[str, str] = MappingProxyType({
    "tech": "Technical Interview",
    "product": "Product Thinking Interview",
    "data": "Analytical Interview",
    "sales": "Sales Assessment",
})
DEFAULT_EMPLOYER_INTERVIEW_STYLE = "Standard Assessment"

BEHAVIORAL_FOCUS_AREAS: Tuple[str, ...] = ("Communication", "Collaboration", "Problem-solving")

# ============================================
# Interview-type weights (Hiready Index)
# ============================================

INTERVIEW_TYPE_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "technical": 3.0,
    "coding": 2.5,
    "system_design": 2.5,
    "case_study": 2.0,
    "case": 2.0,
    "hiring_manager": 2.0,
    "panel": 2.0,
    "hr": 1.5,
    "behavioral": 1.5,
    "general": 1.0,
})
DEFAULT_INTERVIEW_TYPE_WEIGHT = 1.0


def normalize_interview_type(interview_type: Optional[str]) -> str:
    """``Technical-Interview`` / ``technical_interview`` -> ``technical``."""
    normalized = (interview_type or "general").strip().lower().replace("-", "_")
    if normalized.endswith("_interview"):
        normalized = normalized[: -len("_interview")]
    return normalized or "general"


def get_interview_type_weight(interview_type: Optional[str]) -> float:
    return INTERVIEW_TYPE_WEIGHTS.get(normalize_interview_type(interview_type), DEFAULT_INTERVIEW_TYPE_WEIGHT)


# Types accepted when recording a practice attempt
KNOWN_INTERVIEW_TYPES: FrozenSet[str] = frozenset(
    set(INTERVIEW_TYPE_WEIGHTS) | set(INTERVIEW_TYPE_METADATA)
)


def _check_component_coverage():
    """Every component either has a round or is explicitly roundless."""
    for component in InterviewComponent:
        has_round = component in COMPONENT_ROUNDS
        if has_round == (component in ROUNDLESS_COMPONENTS):
            raise RuntimeError(f"Interview component {component.value} must have exactly one of: round, roundless")
        if has_round and component not in COMPONENT_ROLE_TYPES:
            raise RuntimeError(f"Interview component {component.value} has a round but no role types")
    for role_type, components in ROLE_TYPE_COMPONENTS.items():
        for component in components:
            if component not in COMPONENT_ROUNDS:
                raise RuntimeError(f"Role type {role_type} maps to roundless component {component.value}")


_check_component_coverage()


@dataclass(frozen=True)
class InterviewPlanTables:
    """Injectable bundle of every table the plan synthesizers read."""
    component_rounds: Mapping[InterviewComponent, RoundConfig] = field(default_factory=lambda: COMPONENT_ROUNDS)
    component_role_types: Mapping[InterviewComponent, FrozenSet[str]] = field(default_factory=lambda: COMPONENT_ROLE_TYPES)
    role_type_components: Mapping[str, Tuple[InterviewComponent, ...]] = field(default_factory=lambda: ROLE_TYPE_COMPONENTS)
    universal_components: FrozenSet[InterviewComponent] = UNIVERSAL_COMPONENTS
    core_role_types: FrozenSet[str] = CORE_ROLE_TYPES
    phase_categories: Mapping[str, PhaseCategoryInfo] = field(default_factory=lambda: PHASE_CATEGORIES)
    family_default_phases: Mapping[str, Tuple[DefaultPhase, ...]] = field(default_factory=lambda: FAMILY_DEFAULT_PHASES)
    phase_task_types: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: PHASE_TASK_TYPES)
    employer_templates: Mapping[str, Tuple[EmployerPhaseTemplate, ...]] = field(default_factory=lambda: EMPLOYER_PHASE_TEMPLATES)

    def phase_category(self, phase_name: str) -> PhaseCategoryInfo:
        return self.phase_categories.get(phase_name, UNKNOWN_PHASE_CATEGORY)


DEFAULT_PLAN_TABLES = InterviewPlanTables()


def parse_interview_components(raw: Optional[Dict[str, object]]) -> Tuple[InterviewComponent, ...]:
    """
    Turn a stored ``{"codingChallenge": true, ...}`` map into active components.

    Order of the stored map is kept. Unknown keys are ignored.
    """
    if not raw or not isinstance(raw, dict):
        return ()
    active = []
    for key, enabled in raw.items():
        component = InterviewComponent.from_key(key)
        if component is None:
            logger.debug(f"Ignoring unknown interview component key={key}")
            continue
        if enabled and component not in active:
            active.append(component)
    return tuple(active)
