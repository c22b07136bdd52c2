"""
Pydantic schemas for job target endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class JobTargetCreate(BaseModel):
    """Schema for adding a job target."""
    role_title: str = Field(..., min_length=1, max_length=300, description="Role title as written in the posting")
    company_name: Optional[str] = Field(None, max_length=300, description="Company name")
    jd_text: Optional[str] = Field(None, max_length=50000, description="Job description text")
    experience_level: Optional[str] = Field(None, description="entry / mid / senior / lead / executive")

    class Config:
        json_schema_extra = {
            "example": {
                "role_title": "Senior Data Analyst",
                "company_name": "Swiggy",
                "jd_text": "We are looking for a data analyst with strong SQL...",
                "experience_level": "senior",
            }
        }


class JobTargetResponse(BaseModel):
    id: int
    role_title: str
    company_name: Optional[str] = None
    experience_level: Optional[str] = None
    company_archetype: Optional[str] = None
    role_archetype_id: Optional[str] = None
    role_family: Optional[str] = None
    archetype_confidence: Optional[str] = None
    status: str
    readiness_score: Optional[float] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
