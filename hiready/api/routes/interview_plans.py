"""
Interview plan endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hiready.api.routes.job_targets import get_owned_job_target
from hiready.core.auth_dependency import get_current_user_obj
from hiready.db.models.user import User
from hiready.db.session import get_db
from hiready.schemas.interview_plan import (
    EmployerInterviewPlan,
    EmployerPlanRequest,
    EnrichedInterviewPlan,
    RolePracticeOptions,
    UnifiedInterviewPlan,
    UnifiedPlanRequest,
)
from hiready.services.employer_plan_service import build_employer_interview_plan
from hiready.services.interview_plan_service import (
    get_enriched_interview_plan,
    get_role_practice_options,
    get_unified_interview_plan,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interview-plans", tags=["Interview Plans"])


def _plan_arguments(request: UnifiedPlanRequest, user: User, db: Session) -> dict:
    """Request fields, with gaps filled from the job target when one is given."""
    arguments = request.model_dump(exclude={"job_target_id"})
    if request.job_target_id is not None:
        job_target = get_owned_job_target(db, user, request.job_target_id)
        cached = {
            "role_archetype_id": job_target.role_archetype_id,
            "role_family": job_target.role_family,
            "company_archetype": job_target.company_archetype,
            "archetype_confidence": job_target.archetype_confidence,
            "experience_level": job_target.experience_level,
            "company_name": job_target.company_name,
        }
        for key, value in cached.items():
            if arguments.get(key) is None:
                arguments[key] = value
    return arguments


@router.post("/unified", response_model=UnifiedInterviewPlan)
def unified_plan(
    request: UnifiedPlanRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return get_unified_interview_plan(db, **_plan_arguments(request, user, db))


@router.post("/enriched", response_model=EnrichedInterviewPlan)
def enriched_plan(
    request: UnifiedPlanRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return get_enriched_interview_plan(db, **_plan_arguments(request, user, db))


@router.post("/employer", response_model=EmployerInterviewPlan)
def employer_plan(
    request: EmployerPlanRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Fixed-length screening plan an employer runs for an opening."""
    try:
        return build_employer_interview_plan(
            db,
            role_title=request.role_title,
            jd_text=request.jd_text,
            company_name=request.company_name,
            seniority=request.seniority,
        )
    except Exception as e:
        logger.error(f"Employer plan failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build interview plan. Please try again."
        )


@router.get("/practice-options/{role_archetype_id}", response_model=RolePracticeOptions)
def practice_options(
    role_archetype_id: str,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    options = get_role_practice_options(db, role_archetype_id)
    if options is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Role archetype not found"
        )
    return options
