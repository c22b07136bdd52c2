"""
Pydantic schemas for answer classification and probe selection.
"""
from typing import Optional, Dict, List, Literal
from pydantic import BaseModel, Field

AnswerQuality = Literal["strong", "adequate", "weak", "vague"]


class AnswerClassification(BaseModel):
    """LLM judgement of a single candidate answer."""
    quality: AnswerQuality = "adequate"
    has_metrics: bool = False
    has_specific_example: bool = False
    has_ownership: bool = False
    missing_elements: List[str] = Field(default_factory=list)
    claims_extracted: List[str] = Field(default_factory=list)
    confidence: float = Field(0.5, ge=0, le=1)


class ProbeTree(BaseModel):
    always: Optional[List[str]] = None
    if_vague: Optional[List[str]] = Field(None, alias="ifVague")
    if_strong: Optional[List[str]] = Field(None, alias="ifStrong")
    follow_up: Optional[List[str]] = Field(None, alias="followUp")

    class Config:
        populate_by_name = True


class LoadedPattern(BaseModel):
    """A question pattern with its template already filled for the candidate."""
    id: Optional[int] = None
    pattern_type: str
    question: str
    probe_tree: ProbeTree = Field(default_factory=ProbeTree)
    tags: List[str] = Field(default_factory=list)


class ProbeDecision(BaseModel):
    should_probe: bool
    probe_question: Optional[str] = None
    probe_reason: Optional[str] = None
    move_to_next_pattern: bool


class ProbeRequest(BaseModel):
    """One interview turn: the question asked, the answer, and the probe state so far."""
    question: str = Field(..., min_length=1)
    answer: str = Field(..., description="Candidate answer transcript for this turn")
    probe_count: int = Field(0, ge=0)
    max_probes: Optional[int] = Field(None, ge=0)
    pattern_id: Optional[int] = Field(None, description="Stored question pattern supplying the probe tree")
    probe_tree: Optional[ProbeTree] = Field(None, description="Inline probe tree, used when pattern_id is absent")
    context: Dict[str, str] = Field(default_factory=dict, description="roleTitle, company, interviewType, ...")


class ProbeResponse(BaseModel):
    classification: AnswerClassification
    classification_failed: bool = False
    decision: ProbeDecision
