"""
Pydantic schemas for synthesized interview plans.

None of these are persisted; they are built per request from reference data.
"""
from typing import Optional, Dict, List, Any, Literal
from pydantic import BaseModel, Field

Provenance = Literal["both", "company", "role"]


class InterviewPhase(BaseModel):
    name: str = Field(..., description="Round name, e.g. 'Coding Round'")
    category: str = Field(..., description="Phase category, e.g. coding_assessment")
    mins: int = Field(..., ge=0, description="Duration in minutes")
    practice_mode: str = Field(..., description="live_interview / coding_lab / case_study / presentation")
    description: str = ""
    emphasis_weight: float = 1.0
    subphases: Optional[List[Any]] = None
    focus_areas: Optional[List[str]] = None
    provenance: Optional[Provenance] = Field(None, description="Set on plans built from company + role intersection")


class RoleArchetypeSummary(BaseModel):
    id: str
    name: str
    family: str


class CompanyArchetypeSummary(BaseModel):
    type: str
    confidence: str = "low"


class UnifiedInterviewPlan(BaseModel):
    role_archetype: Optional[RoleArchetypeSummary] = None
    company_archetype: Optional[CompanyArchetypeSummary] = None
    phases: List[InterviewPhase] = Field(default_factory=list)
    emphasis_weights: Dict[str, float] = Field(default_factory=dict)
    company_notes: Optional[str] = None
    seniority: Literal["entry", "mid", "senior"] = "mid"
    source: Literal["intersection", "company", "role_defaults", "family_defaults"] = Field(
        ..., description="Which data the phases were built from"
    )


class TaskBlueprint(BaseModel):
    id: int
    task_type: str
    difficulty_band: str = "entry-mid"
    prompt_template: str
    expected_signals: Optional[Any] = None
    probe_tree: Optional[Any] = None
    tags: List[str] = Field(default_factory=list)


class EnrichedInterviewPhase(InterviewPhase):
    phase_id: str = Field(..., description="'<category>-<index>'")
    blueprints: List[TaskBlueprint] = Field(default_factory=list)


class EnrichedInterviewPlan(UnifiedInterviewPlan):
    phases: List[EnrichedInterviewPhase] = Field(default_factory=list)


class UnifiedPlanRequest(BaseModel):
    """Inputs for plan synthesis; every field is optional."""
    role_archetype_id: Optional[str] = None
    role_family: Optional[str] = None
    company_archetype: Optional[str] = None
    archetype_confidence: Optional[str] = None
    experience_level: Optional[str] = None
    company_notes: Optional[str] = None
    company_name: Optional[str] = None
    job_target_id: Optional[int] = Field(None, description="Fill missing fields from a saved job target")


# ============================================
# Employer screening plan
# ============================================

class ExtractedSkill(BaseModel):
    name: str
    category: str
    weight: float = 1.0


class SkillSummary(BaseModel):
    primary: List[str] = Field(default_factory=list)
    secondary: List[str] = Field(default_factory=list)
    domains: List[str] = Field(default_factory=list)


class EmployerPhase(BaseModel):
    name: str
    mins: int = Field(..., ge=1)
    category: str
    description: str = ""
    focus_areas: List[str] = Field(default_factory=list)


class EmployerInterviewPlan(BaseModel):
    role_archetype_id: Optional[str] = None
    role_archetype_name: Optional[str] = None
    role_family: str
    company_archetype: Optional[str] = None
    company_confidence: str = "low"
    seniority: str = "mid"
    interview_style: str
    phases: List[EmployerPhase]
    total_mins: int
    focus_areas: List[str] = Field(default_factory=list)
    skill_summary: SkillSummary = Field(default_factory=SkillSummary)
    extracted_skills: List[ExtractedSkill] = Field(default_factory=list)


class EmployerPlanRequest(BaseModel):
    role_title: str = Field(..., min_length=1, max_length=300)
    jd_text: str = Field("", max_length=50000)
    company_name: Optional[str] = Field(None, max_length=300)
    seniority: str = "mid"


# ============================================
# Practice options
# ============================================

class PracticeOption(BaseModel):
    id: str
    interview_type: str
    label: str
    description: str
    typical_duration: str
    icon: str
    practice_mode: str
    task_types: List[str] = Field(default_factory=list)
    focus_areas: List[str] = Field(default_factory=list)
    blueprints: List[TaskBlueprint] = Field(default_factory=list)


class RolePracticeOptions(BaseModel):
    role_archetype: RoleArchetypeSummary
    options: List[PracticeOption] = Field(default_factory=list)
