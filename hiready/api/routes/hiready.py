"""
Hiready Index, attempt tracking, skill trend and readiness summary endpoints.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hiready.api.routes.job_targets import get_owned_job_target
from hiready.core.auth_dependency import get_current_user_obj
from hiready.db.models.user import User
from hiready.db.session import get_db
from hiready.schemas.hiready import (
    AssignmentResponse,
    AttemptHistoryResponse,
    HireadyIndexResult,
    RecordAttemptRequest,
    RecordAttemptResponse,
    SnapshotResponse,
)
from hiready.schemas.readiness import JobReadinessSummary, SkillTrendsResult
from hiready.services.assignment_service import attempt_milestones, get_attempt_history, record_attempt
from hiready.services.hiready_index_service import calculate_consolidated_hiready_index
from hiready.services.readiness_service import get_job_readiness_summary, get_user_skill_trends

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hiready", tags=["Hiready Index"])


@router.get("/index", response_model=Optional[HireadyIndexResult])
def get_hiready_index(
    job_target_id: Optional[int] = Query(None),
    role_kit_id: Optional[int] = Query(None),
    employer_job_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Consolidated readiness over the user's analyzed sessions.

    Returns null when the scope has no analyzed session yet.
    """
    return calculate_consolidated_hiready_index(
        db, user.id,
        job_target_id=job_target_id,
        role_kit_id=role_kit_id,
        employer_job_id=employer_job_id,
    )


@router.post("/attempts", status_code=status.HTTP_201_CREATED, response_model=RecordAttemptResponse)
def post_attempt(
    request: RecordAttemptRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    if request.job_target_id is not None:
        get_owned_job_target(db, user, request.job_target_id)

    try:
        assignment, snapshot = record_attempt(
            db, user.id, request.interview_type, request.score,
            session_id=request.session_id,
            role_kit_id=request.role_kit_id,
            job_target_id=request.job_target_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to record attempt: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record attempt. Please try again."
        )

    return RecordAttemptResponse(
        assignment=AssignmentResponse.model_validate(assignment),
        snapshot=SnapshotResponse.model_validate(snapshot),
        milestones=attempt_milestones(assignment, snapshot),
    )


@router.get("/attempts", response_model=AttemptHistoryResponse)
def get_attempts(
    job_target_id: Optional[int] = Query(None),
    role_kit_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return get_attempt_history(db, user.id, role_kit_id=role_kit_id, job_target_id=job_target_id)


@router.get("/skill-trends", response_model=SkillTrendsResult)
def get_skill_trends(
    job_target_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Per-dimension score history, oldest first, with improving / declining direction."""
    return get_user_skill_trends(db, user.id, job_target_id=job_target_id)


@router.get("/readiness-summary", response_model=JobReadinessSummary)
def get_readiness_summary(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Readiness across all saved job targets and the weaknesses they share."""
    return get_job_readiness_summary(db, user.id)
