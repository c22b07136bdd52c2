"""
Pydantic schemas for the Hiready Index and attempt tracking.
"""
from typing import Optional, Dict, List, Any, Literal
from datetime import datetime
from pydantic import BaseModel, Field

ReadinessLevel = Literal["exceptional", "strong", "ready", "developing", "not_ready"]


class DimensionScore(BaseModel):
    dimension: str
    score: float = Field(..., ge=0, le=5, description="Type-weighted average, 0-5")
    evidence: List[str] = Field(default_factory=list)
    weight: float = Field(..., description="Share of this dimension in the breakdown (1/n)")


class SessionBreakdown(BaseModel):
    session_id: int
    interview_type: str
    score: int = Field(..., ge=0, le=100)
    weight: float
    created_at: Optional[datetime] = None


class RoleContext(BaseModel):
    role_title: Optional[str] = None
    company_name: Optional[str] = None
    role_archetype_id: Optional[str] = None
    role_kit_name: Optional[str] = None


class HireadyIndexResult(BaseModel):
    overall_score: int = Field(..., ge=0, le=100)
    readiness_level: ReadinessLevel
    dimension_scores: List[DimensionScore] = Field(default_factory=list)
    completed_interview_types: List[str] = Field(default_factory=list)
    total_sessions: int = 0
    session_breakdown: List[SessionBreakdown] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    trend: Literal["improving", "declining", "stable"] = "stable"
    previous_score: Optional[float] = None
    momentum: Optional[Literal["accelerating", "steady", "slowing"]] = None
    consistency_score: Optional[int] = None
    role_context: Optional[RoleContext] = None

    class Config:
        json_schema_extra = {
            "example": {
                "overall_score": 68,
                "readiness_level": "ready",
                "dimension_scores": [
                    {"dimension": "Communication", "score": 3.6, "evidence": ["Clear STAR structure"], "weight": 0.5},
                ],
                "completed_interview_types": ["technical", "behavioral"],
                "total_sessions": 3,
                "trend": "improving",
                "previous_score": 61.0,
                "momentum": None,
                "consistency_score": 88,
            }
        }


class RecordAttemptRequest(BaseModel):
    """Schema for recording a scored practice attempt."""
    interview_type: str = Field(..., min_length=1, description="Interview type, e.g. technical, behavioral")
    score: float = Field(..., ge=0, le=100, description="Attempt score, 0-100")
    session_id: Optional[int] = Field(None, description="Interview session that produced the score")
    role_kit_id: Optional[int] = None
    job_target_id: Optional[int] = None


class AssignmentResponse(BaseModel):
    id: int
    interview_type: str
    role_kit_id: Optional[int] = None
    job_target_id: Optional[int] = None
    attempt_count: int
    latest_session_id: Optional[int] = None
    latest_score: Optional[float] = None
    best_session_id: Optional[int] = None
    best_score: Optional[float] = None

    class Config:
        from_attributes = True


class SnapshotResponse(BaseModel):
    id: int
    consolidated_index: float
    attempt_score: Optional[float] = None
    interview_type: Optional[str] = None
    weighted_scores: Optional[Dict[str, Any]] = None
    is_latest: bool
    is_best: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecordAttemptResponse(BaseModel):
    assignment: AssignmentResponse
    snapshot: SnapshotResponse
    milestones: List[str] = Field(default_factory=list)


class BestAttempt(BaseModel):
    score: float
    session_id: Optional[int] = None
    interview_type: str


class AttemptHistoryResponse(BaseModel):
    assignments: List[AssignmentResponse] = Field(default_factory=list)
    total_attempts: int = 0
    coverage_percentage: int = Field(0, description="Share of the role's interview types with at least one attempt")
    best_attempt: Optional[BestAttempt] = None
    snapshots: List[SnapshotResponse] = Field(default_factory=list)
    latest: Optional[SnapshotResponse] = None
    best: Optional[SnapshotResponse] = None


class JudgedDimension(BaseModel):
    """One dimension as scored by the session judge, before aggregation."""
    dimension: str = Field(..., min_length=1)
    score: float = Field(..., ge=0, le=5)
    evidence: List[str] = Field(default_factory=list)
