"""
Pydantic schemas for job readiness, skill trends and seven-day practice plans.

All of these are computed per request from analyzed sessions; none are persisted.
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

Direction = Literal["improving", "stable", "declining"]
JobReadinessLevel = Literal["strong", "ready", "almost_ready", "needs_work", "not_ready"]
GapPriority = Literal["critical", "high", "medium", "low"]
ActivityType = Literal["mock_interview", "exercise", "review", "research", "self_practice"]


class SkillTrend(BaseModel):
    dimension: str = Field(..., description="snake_case dimension key")
    baseline: int = Field(..., ge=0, le=100)
    latest: int = Field(..., ge=0, le=100)
    direction: Direction = "stable"
    history: List[int] = Field(default_factory=list, description="Oldest first, last 10 sessions")
    last_practiced_at: Optional[datetime] = None


class SkillTrendsResult(BaseModel):
    dimensions: List[SkillTrend] = Field(default_factory=list)
    overall_trend: Direction = "stable"
    strongest_dimensions: List[str] = Field(default_factory=list)
    weakest_dimensions: List[str] = Field(default_factory=list)
    session_count: int = 0


class ReadinessBreakdown(BaseModel):
    skill_coverage: int
    recent_performance: int
    jd_alignment: int
    practice_volume: int
    trend_bonus: int


class ReadinessDimension(BaseModel):
    dimension: str
    score: int
    weight: float
    trend: Direction
    jd_relevance: bool


class ReadinessGap(BaseModel):
    dimension: str
    current_score: int
    target_score: int
    priority: GapPriority
    suggested_focus: str


class ReadinessReport(BaseModel):
    job_target_id: Optional[int] = None
    role_family: Optional[str] = None
    overall: int = Field(..., ge=0, le=100)
    readiness_level: JobReadinessLevel
    breakdown: ReadinessBreakdown
    dimensions: List[ReadinessDimension] = Field(default_factory=list)
    gaps: List[ReadinessGap] = Field(default_factory=list, description="Most urgent first")
    recommendations: List[str] = Field(default_factory=list)
    estimated_prep_time_hours: float
    last_practiced_at: Optional[datetime] = None
    practice_session_count: int = 0

    class Config:
        json_schema_extra = {
            "example": {
                "job_target_id": 12,
                "role_family": "data",
                "overall": 58,
                "readiness_level": "almost_ready",
                "breakdown": {
                    "skill_coverage": 61, "recent_performance": 60, "jd_alignment": 55,
                    "practice_volume": 45, "trend_bonus": 2,
                },
                "gaps": [{
                    "dimension": "technical_depth", "current_score": 48, "target_score": 75,
                    "priority": "critical", "suggested_focus": "Focus on improving technical depth...",
                }],
                "estimated_prep_time_hours": 6.5,
                "practice_session_count": 3,
            }
        }


class JobReadinessEntry(BaseModel):
    job_target_id: int
    role_title: str
    company_name: Optional[str] = None
    readiness_score: int
    readiness_level: JobReadinessLevel
    top_gaps: List[str] = Field(default_factory=list)
    days_to_ready: int


class JobReadinessSummary(BaseModel):
    jobs: List[JobReadinessEntry] = Field(default_factory=list)
    overall_focus: List[str] = Field(default_factory=list)
    common_weaknesses: List[str] = Field(default_factory=list)


class PlanActivity(BaseModel):
    type: ActivityType
    title: str
    description: str
    estimated_minutes: int
    dimension: Optional[str] = None


class PracticePlanDay(BaseModel):
    day: int = Field(..., ge=1, le=7)
    focus: str
    activities: List[PlanActivity] = Field(default_factory=list)
    expected_outcome: str
    total_minutes: int


class SevenDayPracticePlan(BaseModel):
    job_target_id: Optional[int] = None
    role_family: Optional[str] = None
    current_readiness: int
    target_readiness: int
    focus_areas: List[str] = Field(default_factory=list)
    days: List[PracticePlanDay] = Field(default_factory=list)
    weekly_goal: str
    commitment_level: Literal["light", "moderate", "intensive"]
    estimated_total_hours: float
    generated_at: datetime
