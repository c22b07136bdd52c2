"""
Pydantic schemas for archetype resolution.
"""
from typing import Optional, Dict, List, Literal
from pydantic import BaseModel, Field

Confidence = Literal["high", "medium", "low"]


class CompanyResolution(BaseModel):
    """Result of mapping a company name (and optional JD) to a company archetype."""
    archetype: Optional[str] = Field(None, description="Company archetype, null when unresolved")
    confidence: Confidence = Field("low", description="Resolution confidence")
    match_type: Literal["direct", "alias", "inference", "none"] = Field("none", description="Which resolution step matched")
    company_id: Optional[int] = Field(None, description="Matched company row, if any")
    company_name: Optional[str] = Field(None, description="Canonical company name, if matched")
    interview_components: Optional[Dict[str, bool]] = Field(None, description="Matched company's interview components")

    class Config:
        json_schema_extra = {
            "example": {
                "archetype": "it_services",
                "confidence": "high",
                "match_type": "direct",
                "company_id": 12,
                "company_name": "Infosys",
                "interview_components": {"aptitude": True, "hrScreen": True, "technicalDsaSql": True},
            }
        }


class RoleResolution(BaseModel):
    """Result of mapping a role title (and optional JD) to a role archetype."""
    role_archetype_id: Optional[str] = Field(None, description="Role archetype key, null when unresolved")
    role_archetype_name: Optional[str] = Field(None, description="Display name of the archetype")
    role_family: Optional[str] = Field(None, description="tech / data / product / sales / business")
    confidence: Confidence = Field("low", description="Resolution confidence")
    match_type: Literal["keyword", "jd_inference", "none"] = Field("none", description="Which resolution step matched")
    primary_skill_dimensions: List[str] = Field(default_factory=list, description="Skill dimensions of the archetype")


class ResolveArchetypesRequest(BaseModel):
    """Schema for resolving a company + role pair."""
    role_title: str = Field(..., min_length=1, max_length=300, description="Free-text role title")
    company_name: Optional[str] = Field(None, max_length=300, description="Free-text company name")
    jd_text: Optional[str] = Field(None, max_length=50000, description="Job description text")


class ResolveArchetypesResponse(BaseModel):
    company: Optional[CompanyResolution] = None
    role: RoleResolution


class RoleArchetypeResponse(BaseModel):
    id: str
    name: str
    role_family: str
    common_interview_types: Optional[List[str]] = None
    primary_skill_dimensions: Optional[List[str]] = None
    common_failure_modes: Optional[List[str]] = None

    class Config:
        from_attributes = True


class CompanyArchetypeCount(BaseModel):
    archetype: str
    company_count: int
