"""
Practice session lifecycle: create, then analyze once with the LLM judge.

Analysis writes the immutable InterviewAnalysis row and records the attempt
against the session's assignment.
"""
import logging
from statistics import mean
from typing import Optional
from sqlalchemy.orm import Session

from hiready.db.models.interview_session import InterviewAnalysis, InterviewSession
from hiready.db.models.job_target import JobTarget
from hiready.llm.judge import score_session_or_default
from hiready.llm.provider import LLMProvider
from hiready.schemas.interview_session import AnalyzeSessionRequest, SessionAnalysisResponse, SessionResponse
from hiready.services.assignment_service import record_attempt, validate_interview_type
from hiready.services.hiready_index_service import normalize_dimension_score

logger = logging.getLogger(__name__)


def create_session(
    db: Session,
    user_id: int,
    interview_type: str,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
    employer_job_id: Optional[int] = None,
) -> InterviewSession:
    """Raises ValueError for an unknown interview type or a job target the user does not own."""
    interview_type = validate_interview_type(interview_type)
    if job_target_id is not None:
        owned = db.query(JobTarget.id).filter(JobTarget.id == job_target_id, JobTarget.user_id == user_id).first()
        if not owned:
            raise ValueError(f"Job target {job_target_id} not found")

    session = InterviewSession(
        user_id=user_id,
        interview_type=interview_type,
        role_kit_id=role_kit_id,
        job_target_id=job_target_id,
        employer_job_id=employer_job_id,
        status="created",
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info(f"Interview session created: session_id={session.id}, user_id={user_id}, type={interview_type}")
    return session


def get_user_session(db: Session, user_id: int, session_id: int) -> Optional[InterviewSession]:
    return (
        db.query(InterviewSession)
        .filter(InterviewSession.id == session_id, InterviewSession.user_id == user_id)
        .first()
    )


def analyze_session(
    db: Session,
    session: InterviewSession,
    request: AnalyzeSessionRequest,
    provider: Optional[LLMProvider] = None,
) -> SessionAnalysisResponse:
    """
    Score a session and record it as an attempt.

    A judge failure still marks the session analyzed with no dimensions (it
    then counts as 0 in the Hiready Index) but records no attempt.

    Raises:
        ValueError: session already analyzed or no transcript available
    """
    if session.analysis is not None:
        raise ValueError(f"Session {session.id} has already been analyzed")
    transcript = request.transcript or session.transcript
    if not transcript:
        raise ValueError("Transcript is required to analyze a session")

    context = {"interview_type": session.interview_type}
    if session.job_target_id:
        job_target = db.query(JobTarget).filter(JobTarget.id == session.job_target_id).first()
        if job_target:
            context["role_title"] = job_target.role_title

    dimensions, scoring_failed = score_session_or_default(transcript, context, provider=provider)

    session.transcript = transcript
    session.status = "analyzed"
    db.add(InterviewAnalysis(
        session_id=session.id,
        dimension_scores=[d.model_dump() for d in dimensions],
        strengths=request.strengths,
        improvements=request.improvements,
    ))
    db.flush()

    attempt_score = None
    if dimensions:
        attempt_score = normalize_dimension_score(mean(d.score for d in dimensions))
        assignment, snapshot = record_attempt(
            db,
            session.user_id,
            session.interview_type,
            attempt_score,
            session_id=session.id,
            role_kit_id=session.role_kit_id,
            job_target_id=session.job_target_id,
        )
        session.assignment_id = assignment.id
        session.attempt_number = assignment.attempt_count
        if session.job_target_id:
            db.query(JobTarget).filter(JobTarget.id == session.job_target_id).update(
                {JobTarget.readiness_score: snapshot.consolidated_index}, synchronize_session=False
            )
    db.commit()
    db.refresh(session)

    logger.info(
        f"Session analyzed: session_id={session.id}, dimensions={len(dimensions)}, "
        f"attempt_score={attempt_score}, scoring_failed={scoring_failed}"
    )
    return SessionAnalysisResponse(
        session=SessionResponse.model_validate(session),
        dimension_scores=dimensions,
        attempt_score=attempt_score,
        scoring_failed=scoring_failed,
    )
