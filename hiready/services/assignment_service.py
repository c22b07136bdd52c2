"""
Attempt/assignment tracking.

One InterviewAssignment exists per (user, role kit or none, job target or
none, interview type). Every recorded attempt bumps its counters and writes a
HireadyIndexSnapshot holding the consolidated index for the scope. All writes
of one attempt are committed together.
"""
import logging
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hiready.core.interview_tables import (
    KNOWN_INTERVIEW_TYPES,
    get_interview_type_weight,
    normalize_interview_type,
)
from hiready.core.rounding import round_half_up, round_score
from hiready.db.models.interview_progress import HireadyIndexSnapshot, InterviewAssignment, build_scope_key
from hiready.db.models.job_target import JobTarget
from hiready.db.models.role_archetype import RoleArchetype, RoleKit
from hiready.schemas.hiready import (
    AssignmentResponse,
    AttemptHistoryResponse,
    BestAttempt,
    SnapshotResponse,
)

logger = logging.getLogger(__name__)

ASSIGNMENT_UNIQUE_COLUMNS = ["user_id", "scope_key", "interview_type"]


def validate_interview_type(interview_type: str) -> str:
    """Normalize and check an interview type; raises ValueError when unknown."""
    normalized = normalize_interview_type(interview_type)
    if normalized not in KNOWN_INTERVIEW_TYPES:
        raise ValueError(
            f"Unknown interview type '{interview_type}'. Expected one of: {', '.join(sorted(KNOWN_INTERVIEW_TYPES))}"
        )
    return normalized


def _assignment_query(db: Session, user_id: int, scope_key: str, interview_type: str):
    return db.query(InterviewAssignment).filter(
        InterviewAssignment.user_id == user_id,
        InterviewAssignment.scope_key == scope_key,
        InterviewAssignment.interview_type == interview_type,
    )


def _insert_ignoring_conflict(db: Session, values: Dict[str, object]) -> None:
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        # No ON CONFLICT support: rely on the unique constraint inside a savepoint
        try:
            with db.begin_nested():
                db.add(InterviewAssignment(**values))
        except IntegrityError:
            logger.debug(f"Assignment already exists: scope={values['scope_key']}, type={values['interview_type']}")
        return

    statement = insert(InterviewAssignment).values(**values).on_conflict_do_nothing(
        index_elements=ASSIGNMENT_UNIQUE_COLUMNS
    )
    db.execute(statement)


def get_or_create_assignment(
    db: Session,
    user_id: int,
    interview_type: str,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> InterviewAssignment:
    """
    Upsert the assignment for an exact scope tuple and return it locked.

    Null scope ids only match null scope ids. Does not commit.
    """
    scope_key = build_scope_key(role_kit_id, job_target_id)
    _insert_ignoring_conflict(db, {
        "user_id": user_id,
        "role_kit_id": role_kit_id,
        "job_target_id": job_target_id,
        "scope_key": scope_key,
        "interview_type": interview_type,
        "attempt_count": 0,
    })
    return _assignment_query(db, user_id, scope_key, interview_type).with_for_update().one()


def compute_consolidated_index(
    db: Session,
    user_id: int,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> Tuple[float, Dict[str, Dict[str, float]]]:
    """
    Type-weighted mean of the latest score of every assignment in scope.

    Returns:
        (index rounded to 1 decimal, per-type contributions)
    """
    assignments = (
        db.query(InterviewAssignment)
        .filter(
            InterviewAssignment.user_id == user_id,
            InterviewAssignment.scope_key == build_scope_key(role_kit_id, job_target_id),
        )
        .order_by(InterviewAssignment.id)
        .all()
    )

    weighted_scores: Dict[str, Dict[str, float]] = {}
    weighted_sum = 0.0
    total_weight = 0.0
    for assignment in assignments:
        if assignment.latest_score is None:
            continue
        weight = get_interview_type_weight(assignment.interview_type)
        weighted_sum += assignment.latest_score * weight
        total_weight += weight
        weighted_scores[assignment.interview_type] = {
            "score": assignment.latest_score,
            "weight": weight,
            "weighted_score": assignment.latest_score * weight,
        }

    if total_weight == 0:
        return 0.0, weighted_scores
    return round_half_up(weighted_sum / total_weight, 1), weighted_scores


def create_hiready_snapshot(
    db: Session,
    user_id: int,
    interview_type: str,
    score: float,
    session_id: Optional[int] = None,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> HireadyIndexSnapshot:
    """
    Insert a snapshot for the scope and move the latest/best flags onto the right rows.

    The best flag goes to the snapshot with the highest consolidated index;
    on a tie the earliest one keeps it. Does not commit: the caller commits
    the flag flips together with the insert.
    """
    scope_key = build_scope_key(role_kit_id, job_target_id)
    in_scope = (HireadyIndexSnapshot.user_id == user_id, HireadyIndexSnapshot.scope_key == scope_key)

    db.query(HireadyIndexSnapshot).filter(*in_scope, HireadyIndexSnapshot.is_latest.is_(True)).update(
        {HireadyIndexSnapshot.is_latest: False}, synchronize_session=False
    )

    consolidated_index, weighted_scores = compute_consolidated_index(db, user_id, role_kit_id, job_target_id)
    snapshot = HireadyIndexSnapshot(
        user_id=user_id,
        role_kit_id=role_kit_id,
        job_target_id=job_target_id,
        scope_key=scope_key,
        interview_session_id=session_id,
        interview_type=interview_type,
        attempt_score=score,
        consolidated_index=consolidated_index,
        weighted_scores=weighted_scores,
        is_latest=True,
        is_best=False,
    )
    db.add(snapshot)
    db.flush()

    best = (
        db.query(HireadyIndexSnapshot)
        .filter(*in_scope)
        .order_by(
            HireadyIndexSnapshot.consolidated_index.desc(),
            HireadyIndexSnapshot.created_at.asc(),
            HireadyIndexSnapshot.id.asc(),
        )
        .first()
    )
    db.query(HireadyIndexSnapshot).filter(*in_scope, HireadyIndexSnapshot.is_best.is_(True)).update(
        {HireadyIndexSnapshot.is_best: False}, synchronize_session=False
    )
    db.query(HireadyIndexSnapshot).filter(HireadyIndexSnapshot.id == best.id).update(
        {HireadyIndexSnapshot.is_best: True}, synchronize_session=False
    )
    db.flush()

    logger.info(
        f"Hiready snapshot created: user_id={user_id}, scope={scope_key}, snapshot_id={snapshot.id}, "
        f"consolidated_index={consolidated_index}, best_snapshot_id={best.id}"
    )
    return snapshot


def record_attempt(
    db: Session,
    user_id: int,
    interview_type: str,
    score: float,
    session_id: Optional[int] = None,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> Tuple[InterviewAssignment, HireadyIndexSnapshot]:
    """
    Record one scored attempt.

    attempt_count and the latest score always update; the best score only
    moves on a strictly higher score.

    Raises:
        ValueError: unknown interview type or score outside 0-100
    """
    interview_type = validate_interview_type(interview_type)
    if score is None or not 0 <= score <= 100:
        raise ValueError(f"Score must be between 0 and 100, got {score}")

    try:
        assignment = get_or_create_assignment(db, user_id, interview_type, role_kit_id, job_target_id)
        assignment.attempt_count = (assignment.attempt_count or 0) + 1
        assignment.latest_score = score
        assignment.latest_session_id = session_id
        is_new_best = assignment.best_score is None or score > assignment.best_score
        if is_new_best:
            assignment.best_score = score
            assignment.best_session_id = session_id
        db.flush()

        snapshot = create_hiready_snapshot(
            db, user_id, interview_type, score,
            session_id=session_id, role_kit_id=role_kit_id, job_target_id=job_target_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    db.refresh(snapshot)
    logger.info(
        f"Attempt recorded: user_id={user_id}, type={interview_type}, score={score}, "
        f"attempt={assignment.attempt_count}, best={assignment.best_score}, new_best={is_new_best}"
    )
    return assignment, snapshot


def attempt_milestones(assignment: InterviewAssignment, snapshot: HireadyIndexSnapshot) -> List[str]:
    milestones = []
    if assignment.attempt_count == 1:
        milestones.append("first_attempt")
    elif assignment.best_session_id == assignment.latest_session_id and assignment.best_score == assignment.latest_score:
        milestones.append("personal_best")
    if snapshot.is_best and assignment.attempt_count > 1:
        milestones.append("best_index")
    return milestones


def get_latest_snapshot(
    db: Session,
    user_id: int,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> Optional[HireadyIndexSnapshot]:
    """Most recent snapshot in scope, derived from created_at rather than the flag."""
    return (
        db.query(HireadyIndexSnapshot)
        .filter(
            HireadyIndexSnapshot.user_id == user_id,
            HireadyIndexSnapshot.scope_key == build_scope_key(role_kit_id, job_target_id),
        )
        .order_by(HireadyIndexSnapshot.created_at.desc(), HireadyIndexSnapshot.id.desc())
        .first()
    )


def get_best_snapshot(
    db: Session,
    user_id: int,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> Optional[HireadyIndexSnapshot]:
    """Highest consolidated index in scope; earliest wins ties."""
    return (
        db.query(HireadyIndexSnapshot)
        .filter(
            HireadyIndexSnapshot.user_id == user_id,
            HireadyIndexSnapshot.scope_key == build_scope_key(role_kit_id, job_target_id),
        )
        .order_by(
            HireadyIndexSnapshot.consolidated_index.desc(),
            HireadyIndexSnapshot.created_at.asc(),
            HireadyIndexSnapshot.id.asc(),
        )
        .first()
    )


def _expected_interview_types(
    db: Session,
    role_kit_id: Optional[int],
    job_target_id: Optional[int],
) -> List[str]:
    role_archetype_id = None
    if job_target_id is not None:
        job_target = db.query(JobTarget).filter(JobTarget.id == job_target_id).first()
        role_archetype_id = job_target.role_archetype_id if job_target else None
    elif role_kit_id is not None:
        role_kit = db.query(RoleKit).filter(RoleKit.id == role_kit_id).first()
        role_archetype_id = role_kit.role_archetype_id if role_kit else None
    if not role_archetype_id:
        return []
    role = db.query(RoleArchetype).filter(RoleArchetype.id == role_archetype_id).first()
    return [normalize_interview_type(t) for t in (role.common_interview_types or [])] if role else []


def get_attempt_history(
    db: Session,
    user_id: int,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
    snapshot_limit: int = 50,
) -> AttemptHistoryResponse:
    """
    Assignments and snapshots for one scope, with coverage and best attempt.

    Coverage is measured against the role's common interview types when the
    scope resolves to a role archetype, otherwise against the assigned types.
    """
    scope_key = build_scope_key(role_kit_id, job_target_id)
    assignments = (
        db.query(InterviewAssignment)
        .filter(InterviewAssignment.user_id == user_id, InterviewAssignment.scope_key == scope_key)
        .order_by(InterviewAssignment.id)
        .all()
    )
    snapshots = (
        db.query(HireadyIndexSnapshot)
        .filter(HireadyIndexSnapshot.user_id == user_id, HireadyIndexSnapshot.scope_key == scope_key)
        .order_by(HireadyIndexSnapshot.created_at.desc(), HireadyIndexSnapshot.id.desc())
        .limit(snapshot_limit)
        .all()
    )

    attempted = {a.interview_type for a in assignments if a.attempt_count}
    expected = set(_expected_interview_types(db, role_kit_id, job_target_id)) or {a.interview_type for a in assignments}
    coverage = round_score(len(attempted & expected) / len(expected) * 100) if expected else 0

    best_attempt = None
    for assignment in assignments:
        score = assignment.best_score if assignment.best_score is not None else assignment.latest_score
        if score is None:
            continue
        if best_attempt is None or score > best_attempt.score:
            best_attempt = BestAttempt(
                score=score,
                session_id=assignment.best_session_id or assignment.latest_session_id,
                interview_type=assignment.interview_type,
            )

    latest = get_latest_snapshot(db, user_id, role_kit_id, job_target_id)
    best = get_best_snapshot(db, user_id, role_kit_id, job_target_id)
    return AttemptHistoryResponse(
        assignments=[AssignmentResponse.model_validate(a) for a in assignments],
        total_attempts=sum(a.attempt_count or 0 for a in assignments),
        coverage_percentage=coverage,
        best_attempt=best_attempt,
        snapshots=[SnapshotResponse.model_validate(s) for s in snapshots],
        latest=SnapshotResponse.model_validate(latest) if latest else None,
        best=SnapshotResponse.model_validate(best) if best else None,
    )
