"""
Job target endpoints: save a job, read it back, re-run archetype resolution,
score readiness and build a seven-day practice plan.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hiready.core.auth_dependency import get_current_user_obj
from hiready.db.models.job_target import JobTarget
from hiready.db.models.user import User
from hiready.db.session import get_db
from hiready.schemas.job_target import JobTargetCreate, JobTargetResponse
from hiready.schemas.readiness import ReadinessReport, SevenDayPracticePlan
from hiready.services.practice_plan_service import generate_seven_day_plan
from hiready.services.readiness_service import calculate_job_readiness
from hiready.services.role_resolver import resolve_and_save_job_archetypes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-targets", tags=["Job Targets"])


def get_owned_job_target(db: Session, user: User, job_target_id: int) -> JobTarget:
    job_target = (
        db.query(JobTarget)
        .filter(JobTarget.id == job_target_id, JobTarget.user_id == user.id)
        .first()
    )
    if not job_target:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job target not found"
        )
    return job_target


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobTargetResponse)
def create_job_target(
    request: JobTargetCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Save a job target and resolve its company/role archetypes."""
    try:
        job_target = JobTarget(
            user_id=user.id,
            role_title=request.role_title,
            company_name=request.company_name,
            jd_text=request.jd_text,
            experience_level=request.experience_level,
            status="saved",
        )
        db.add(job_target)
        db.flush()
        job_target = resolve_and_save_job_archetypes(db, job_target)
        logger.info(f"Job target created: job_target_id={job_target.id}, user_id={user.id}")
        return job_target
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job target: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save job target. Please try again."
        )


@router.get("/{job_target_id}", response_model=JobTargetResponse)
def get_job_target(
    job_target_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return get_owned_job_target(db, user, job_target_id)


@router.post("/{job_target_id}/resolve", response_model=JobTargetResponse)
def resolve_job_target(
    job_target_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Re-run archetype resolution, e.g. after new companies were seeded."""
    job_target = get_owned_job_target(db, user, job_target_id)
    try:
        return resolve_and_save_job_archetypes(db, job_target)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to resolve job target {job_target_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve job target. Please try again."
        )


@router.get("/{job_target_id}/readiness", response_model=ReadinessReport)
def get_job_target_readiness(
    job_target_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Readiness for this job, with prioritized skill gaps and recommendations."""
    job_target = get_owned_job_target(db, user, job_target_id)
    return calculate_job_readiness(db, user.id, job_target)


@router.get("/{job_target_id}/practice-plan", response_model=SevenDayPracticePlan)
def get_job_target_practice_plan(
    job_target_id: int,
    daily_minutes: int = Query(45, ge=15, le=240, description="Minutes the user can practice per day"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Seven-day practice plan targeting this job's readiness gaps."""
    job_target = get_owned_job_target(db, user, job_target_id)
    readiness = calculate_job_readiness(db, user.id, job_target)
    return generate_seven_day_plan(readiness, daily_minutes=daily_minutes)
