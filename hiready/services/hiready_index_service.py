"""
Hiready Index: consolidated readiness score across analyzed practice sessions.

Each analyzed session contributes the mean of its 0-5 dimension scores,
rescaled to 0-100 and weighted by the session's interview type. The overall
score is the weighted mean of those session scores.

No sessions at all -> None ("no data"). Sessions that exist but carry no
usable dimension scores -> overall score 0.
"""
import logging
from statistics import mean, pstdev
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from hiready.core.interview_tables import get_interview_type_weight, normalize_interview_type
from hiready.core.rounding import clamp, round_half_up, round_score
from hiready.db.models.interview_progress import HireadyIndexSnapshot, build_scope_key
from hiready.db.models.interview_session import InterviewSession
from hiready.db.models.job_target import JobTarget
from hiready.db.models.role_archetype import RoleKit
from hiready.schemas.hiready import DimensionScore, HireadyIndexResult, RoleContext, SessionBreakdown

logger = logging.getLogger(__name__)

MAX_DIMENSION_SCORE = 5
TREND_THRESHOLD = 5
MOMENTUM_MIN_SESSIONS = 6
MOMENTUM_WINDOW = 3
MAX_EVIDENCE_PER_DIMENSION = 3
MAX_BREAKDOWN_SESSIONS = 10
MAX_STRENGTHS = 5

# Readiness bands, highest first. 0-100 overall score.
READINESS_BANDS = (
    (85, "exceptional"),
    (70, "strong"),
    (55, "ready"),
    (40, "developing"),
)


def get_readiness_level(score: float) -> str:
    clamped = clamp(score)
    for threshold, level in READINESS_BANDS:
        if clamped >= threshold:
            return level
    return "not_ready"


def normalize_dimension_score(score: float, max_score: float = MAX_DIMENSION_SCORE) -> int:
    """0-5 -> 0-100, rounded half-up and clamped."""
    return int(clamp(round_score(score / max_score * 100)))


def usable_dimensions(raw) -> List[dict]:
    if not isinstance(raw, list):
        return []
    usable = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("dimension"):
            continue
        score = item.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            continue
        usable.append(item)
    return usable


def _unique(items, limit: int) -> List[str]:
    seen: List[str] = []
    for item in items:
        if isinstance(item, str) and item not in seen:
            seen.append(item)
    return seen[:limit]


def compute_trend(current_score: float, previous_score: Optional[float]) -> str:
    if previous_score is None:
        return "stable"
    delta = current_score - previous_score
    if delta > TREND_THRESHOLD:
        return "improving"
    if delta < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def compute_momentum(scores_newest_first: List[float]) -> Optional[str]:
    """Last three sessions vs the three before them; None below six sessions."""
    if len(scores_newest_first) < MOMENTUM_MIN_SESSIONS:
        return None
    recent = mean(scores_newest_first[:MOMENTUM_WINDOW])
    prior = mean(scores_newest_first[MOMENTUM_WINDOW:MOMENTUM_WINDOW * 2])
    delta = recent - prior
    if delta > TREND_THRESHOLD:
        return "accelerating"
    if delta < -TREND_THRESHOLD:
        return "slowing"
    return "steady"


def compute_consistency(scores: List[float]) -> Optional[int]:
    if len(scores) < 2:
        return None
    return round_score(clamp(100 - 2 * pstdev(scores)))


def get_previous_snapshot_score(
    db: Session,
    user_id: int,
    role_kit_id: Optional[int] = None,
    job_target_id: Optional[int] = None,
) -> Optional[float]:
    """consolidated_index of the second-most-recent snapshot in scope, if any."""
    snapshots = (
        db.query(HireadyIndexSnapshot)
        .filter(
            HireadyIndexSnapshot.user_id == user_id,
            HireadyIndexSnapshot.scope_key == build_scope_key(role_kit_id, job_target_id),
        )
        .order_by(HireadyIndexSnapshot.created_at.desc(), HireadyIndexSnapshot.id.desc())
        .limit(2)
        .all()
    )
    if len(snapshots) < 2:
        return None
    return snapshots[1].consolidated_index


def _role_context(db: Session, job_target_id: Optional[int], role_kit_id: Optional[int]) -> Optional[RoleContext]:
    if job_target_id:
        job_target = db.query(JobTarget).filter(JobTarget.id == job_target_id).first()
        if job_target:
            return RoleContext(
                role_title=job_target.role_title,
                company_name=job_target.company_name,
                role_archetype_id=job_target.role_archetype_id,
            )
    elif role_kit_id:
        role_kit = db.query(RoleKit).filter(RoleKit.id == role_kit_id).first()
        if role_kit:
            return RoleContext(role_kit_name=role_kit.name, role_archetype_id=role_kit.role_archetype_id)
    return None


def calculate_consolidated_hiready_index(
    db: Session,
    user_id: int,
    job_target_id: Optional[int] = None,
    role_kit_id: Optional[int] = None,
    employer_job_id: Optional[int] = None,
) -> Optional[HireadyIndexResult]:
    """
    Aggregate a user's analyzed sessions into the Hiready Index.

    Scope filters apply only when given; with no scope every analyzed
    session of the user counts.

    Returns:
        HireadyIndexResult, or None when the scope has no analyzed sessions
    """
    query = db.query(InterviewSession).filter(
        InterviewSession.user_id == user_id,
        InterviewSession.status == "analyzed",
    )
    if job_target_id:
        query = query.filter(InterviewSession.job_target_id == job_target_id)
    if role_kit_id:
        query = query.filter(InterviewSession.role_kit_id == role_kit_id)
    if employer_job_id:
        query = query.filter(InterviewSession.employer_job_id == employer_job_id)
    sessions = query.order_by(InterviewSession.created_at.desc(), InterviewSession.id.desc()).all()

    if not sessions:
        logger.info(f"Hiready index: no analyzed sessions, user_id={user_id}")
        return None

    dimension_totals: Dict[str, Dict[str, object]] = {}
    completed_types: List[str] = []
    breakdown: List[SessionBreakdown] = []
    strengths: List[str] = []
    improvements: List[str] = []
    weighted_sum = 0.0
    total_weight = 0.0
    analyzed_count = 0

    for session in sessions:
        analysis = session.analysis
        if analysis is None:
            continue
        analyzed_count += 1
        interview_type = normalize_interview_type(session.interview_type)
        if interview_type not in completed_types:
            completed_types.append(interview_type)
        type_weight = get_interview_type_weight(session.interview_type)

        dimensions = usable_dimensions(analysis.dimension_scores)
        if dimensions:
            for dim in dimensions:
                totals = dimension_totals.setdefault(dim["dimension"], {"weighted_sum": 0.0, "weight": 0.0, "evidence": []})
                totals["weighted_sum"] += dim["score"] * type_weight
                totals["weight"] += type_weight
                evidence = dim.get("evidence")
                if isinstance(evidence, list):
                    totals["evidence"].extend(evidence[:2])

            session_score = normalize_dimension_score(mean(dim["score"] for dim in dimensions))
            weighted_sum += session_score * type_weight
            total_weight += type_weight
            breakdown.append(SessionBreakdown(
                session_id=session.id,
                interview_type=interview_type,
                score=session_score,
                weight=type_weight,
                created_at=session.created_at,
            ))
        else:
            logger.warning(f"Hiready index: session has no usable dimension scores, session_id={session.id}")

        if isinstance(analysis.strengths, list):
            strengths.extend(analysis.strengths[:2])
        if isinstance(analysis.improvements, list):
            improvements.extend(analysis.improvements[:2])

    dimension_count = len(dimension_totals)
    dimension_scores = [
        DimensionScore(
            dimension=name,
            score=round_half_up(clamp(totals["weighted_sum"] / totals["weight"], 0, MAX_DIMENSION_SCORE), 1),
            evidence=_unique(totals["evidence"], MAX_EVIDENCE_PER_DIMENSION),
            weight=1 / dimension_count,
        )
        for name, totals in dimension_totals.items()
    ]

    overall_score = int(clamp(round_score(weighted_sum / total_weight))) if total_weight > 0 else 0
    session_scores = [entry.score for entry in breakdown]
    previous_score = get_previous_snapshot_score(db, user_id, role_kit_id, job_target_id)

    result = HireadyIndexResult(
        overall_score=overall_score,
        readiness_level=get_readiness_level(overall_score),
        dimension_scores=dimension_scores,
        completed_interview_types=completed_types,
        total_sessions=analyzed_count,
        session_breakdown=breakdown[:MAX_BREAKDOWN_SESSIONS],
        strengths=_unique(strengths, MAX_STRENGTHS),
        improvements=_unique(improvements, MAX_STRENGTHS),
        trend=compute_trend(overall_score, previous_score),
        previous_score=previous_score,
        momentum=compute_momentum(session_scores),
        consistency_score=compute_consistency(session_scores),
        role_context=_role_context(db, job_target_id, role_kit_id),
    )
    logger.info(
        f"Hiready index: user_id={user_id}, job_target_id={job_target_id}, role_kit_id={role_kit_id}, "
        f"overall={overall_score}, level={result.readiness_level}, sessions={analyzed_count}"
    )
    return result
