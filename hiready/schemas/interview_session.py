"""
Pydantic schemas for practice sessions and their analysis.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from hiready.schemas.hiready import JudgedDimension


class SessionCreate(BaseModel):
    interview_type: str = Field(..., min_length=1, description="technical, behavioral, case, ...")
    role_kit_id: Optional[int] = None
    job_target_id: Optional[int] = None
    employer_job_id: Optional[int] = None


class SessionResponse(BaseModel):
    id: int
    interview_type: str
    status: str
    role_kit_id: Optional[int] = None
    job_target_id: Optional[int] = None
    employer_job_id: Optional[int] = None
    assignment_id: Optional[int] = None
    attempt_number: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AnalyzeSessionRequest(BaseModel):
    transcript: Optional[str] = Field(None, description="Full transcript; falls back to the stored one")
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)


class SessionAnalysisResponse(BaseModel):
    session: SessionResponse
    dimension_scores: List[JudgedDimension] = Field(default_factory=list)
    attempt_score: Optional[int] = Field(None, description="0-100, None when the judge produced no dimensions")
    scoring_failed: bool = False
