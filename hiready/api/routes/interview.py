"""
Live interview endpoints: sessions, analysis and probe selection.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hiready.core.auth_dependency import get_current_user_obj
from hiready.db.models.user import User
from hiready.db.session import get_db
from hiready.schemas.interview_session import (
    AnalyzeSessionRequest,
    SessionAnalysisResponse,
    SessionCreate,
    SessionResponse,
)
from hiready.schemas.probe import LoadedPattern, ProbeRequest, ProbeResponse
from hiready.services.probe_service import load_question_patterns, probe_answer
from hiready.services.session_service import analyze_session, create_session, get_user_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interview", tags=["Interview"])


@router.post("/sessions", status_code=status.HTTP_201_CREATED, response_model=SessionResponse)
def start_session(
    request: SessionCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        return create_session(
            db, user.id, request.interview_type,
            role_kit_id=request.role_kit_id,
            job_target_id=request.job_target_id,
            employer_job_id=request.employer_job_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/sessions/{session_id}/analyze", response_model=SessionAnalysisResponse)
def analyze(
    session_id: int,
    request: AnalyzeSessionRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Score a finished session and record it as an attempt."""
    session = get_user_session(db, user.id, session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    try:
        return analyze_session(db, session, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Session analysis failed: session_id={session_id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze session. Please try again."
        )


@router.post("/probe", response_model=ProbeResponse)
def probe(
    request: ProbeRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Classify the candidate's last answer and decide the next probe.

    Classification failures degrade to a neutral "adequate" judgement.
    """
    try:
        return probe_answer(db, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/patterns", response_model=List[LoadedPattern])
def get_patterns(
    role_category: str = Query(..., description="tech / data / product / sales / business"),
    interview_type: str = Query(...),
    pattern_types: List[str] = Query(..., description="behavioral, resume_claim, technical, ..."),
    role_title: Optional[str] = Query(None),
    company: Optional[str] = Query(None),
    seniority: Optional[str] = Query(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Question patterns for an interview, templates filled from the given context."""
    context = {
        "role_title": role_title,
        "company": company,
        "seniority": seniority,
        "interview_type": interview_type,
    }
    return load_question_patterns(
        db, role_category, interview_type, pattern_types,
        context={key: value for key, value in context.items() if value},
    )
