"""
Job readiness: how close a user is to interviewing for one saved job target.

Skill history is read from the user's analyzed sessions. Each dimension's
0-5 scores are rescaled to 0-100 and kept oldest first. Readiness blends
weighted skill coverage, recent performance, alignment on the dimensions the
target's role family leans on, practice volume and a trend bonus, then lists
the gaps to the target score with a focus tip for each.
"""
import logging
import math
from collections import Counter
from statistics import mean
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from hiready.core.readiness_tables import (
    BASE_PREP_HOURS,
    DEFAULT_DIMENSION_WEIGHT,
    DIMENSION_WEIGHTS,
    GAP_MIN_DELTA,
    GAP_TARGET_SCORE,
    JD_CRITICAL_MULTIPLIER,
    JOB_READINESS_BANDS,
    PREP_HOURS_PER_GAP,
    critical_dimensions_for,
    detect_role_family,
    dimension_key,
    dimension_label,
    focus_tip,
)
from hiready.core.rounding import clamp, round_half_up, round_score
from hiready.db.models.interview_session import InterviewSession
from hiready.db.models.job_target import JobTarget
from hiready.schemas.readiness import (
    JobReadinessEntry,
    JobReadinessSummary,
    ReadinessBreakdown,
    ReadinessDimension,
    ReadinessGap,
    ReadinessReport,
    SkillTrend,
    SkillTrendsResult,
)
from hiready.services.hiready_index_service import normalize_dimension_score, usable_dimensions

logger = logging.getLogger(__name__)

MAX_HISTORY = 10
TREND_WINDOW = 3
TREND_DELTA = 5
TOP_DIMENSIONS = 3
MAX_RECOMMENDATIONS = 5
MIN_PRACTICE_SESSIONS = 3
PRACTICE_VOLUME_PER_SESSION = 15
MAX_TREND_BONUS = 10

GAP_PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def compute_direction(history: List[int]) -> str:
    """Mean of the last three scores vs the mean of everything before them."""
    if len(history) <= TREND_WINDOW:
        return "stable"
    recent = mean(history[-TREND_WINDOW:])
    older = mean(history[:-TREND_WINDOW])
    if recent > older + TREND_DELTA:
        return "improving"
    if recent < older - TREND_DELTA:
        return "declining"
    return "stable"


def get_user_skill_trends(db: Session, user_id: int, job_target_id: Optional[int] = None) -> SkillTrendsResult:
    """
    Per-dimension score history over the user's analyzed sessions.

    Dimension names are folded to snake_case keys, so "Problem Solving" and
    "problem solving" share one history. A dimension scored twice in one
    session contributes the mean of those scores.
    """
    query = db.query(InterviewSession).filter(
        InterviewSession.user_id == user_id,
        InterviewSession.status == "analyzed",
    )
    if job_target_id:
        query = query.filter(InterviewSession.job_target_id == job_target_id)
    sessions = query.order_by(InterviewSession.created_at, InterviewSession.id).all()

    histories: Dict[str, List[int]] = {}
    last_seen: Dict[str, object] = {}
    session_count = 0
    for session in sessions:
        if session.analysis is None:
            continue
        per_session: Dict[str, List[float]] = {}
        for dim in usable_dimensions(session.analysis.dimension_scores):
            per_session.setdefault(dimension_key(dim["dimension"]), []).append(dim["score"])
        if not per_session:
            continue
        session_count += 1
        for key, scores in per_session.items():
            histories.setdefault(key, []).append(normalize_dimension_score(mean(scores)))
            last_seen[key] = session.created_at

    trends = []
    for key, full_history in histories.items():
        history = full_history[-MAX_HISTORY:]
        trends.append(SkillTrend(
            dimension=key,
            baseline=full_history[0],
            latest=history[-1],
            direction=compute_direction(history),
            history=history,
            last_practiced_at=last_seen.get(key),
        ))

    ranked = sorted(trends, key=lambda t: t.latest, reverse=True)
    improving = sum(1 for t in trends if t.direction == "improving")
    declining = sum(1 for t in trends if t.direction == "declining")
    if improving > declining:
        overall_trend = "improving"
    elif declining > improving:
        overall_trend = "declining"
    else:
        overall_trend = "stable"

    return SkillTrendsResult(
        dimensions=trends,
        overall_trend=overall_trend,
        strongest_dimensions=[t.dimension for t in ranked[:TOP_DIMENSIONS]],
        weakest_dimensions=[t.dimension for t in reversed(ranked[-TOP_DIMENSIONS:])],
        session_count=session_count,
    )


def get_job_readiness_level(score: float) -> str:
    for threshold, level in JOB_READINESS_BANDS:
        if score >= threshold:
            return level
    return "not_ready"


def calculate_gap_priority(gap: float, is_jd_critical: bool) -> str:
    if is_jd_critical and gap > 25:
        return "critical"
    if gap > 30:
        return "critical"
    if gap > 20 or (is_jd_critical and gap > 15):
        return "high"
    if gap > 10:
        return "medium"
    return "low"


def build_recommendations(level: str, gaps: List[ReadinessGap], practice_count: int, overall: int) -> List[str]:
    recommendations = []
    if practice_count == 0:
        recommendations.append("Start with 2-3 general practice sessions to establish a baseline")
    elif practice_count < MIN_PRACTICE_SESSIONS:
        recommendations.append(
            f"Complete {MIN_PRACTICE_SESSIONS - practice_count} more practice sessions before your interview"
        )

    critical = [gap for gap in gaps if gap.priority == "critical"]
    if critical:
        recommendations.append(f"Focus first on: {', '.join(dimension_label(g.dimension) for g in critical[:2])}")

    if level in ("not_ready", "needs_work"):
        recommendations.append("Consider scheduling your interview at least 2 weeks out to allow preparation time")
        recommendations.append("Do one full mock interview before your real interview")
    elif level == "almost_ready":
        recommendations.append("You're close! Focus on your weakest 1-2 areas for maximum improvement")
        recommendations.append("Practice answering questions under time pressure")
    else:
        recommendations.append("Maintain readiness with occasional practice sessions")
        recommendations.append("Prepare thoughtful questions to ask the interviewer")

    if overall < 60:
        recommendations.append("Watch 2-3 sample interview videos to see strong answer patterns")

    return recommendations[:MAX_RECOMMENDATIONS]


def estimate_prep_hours(level: str, gap_count: int) -> float:
    return round_half_up(BASE_PREP_HOURS[level] + gap_count * PREP_HOURS_PER_GAP, 1)


def calculate_job_readiness(
    db: Session,
    user_id: int,
    job_target: JobTarget,
    trends: Optional[SkillTrendsResult] = None,
) -> ReadinessReport:
    """
    Readiness of one user for one job target.

    Skills are user-wide: every analyzed session counts, whichever target it
    was practiced for. Pass ``trends`` to reuse one history across targets.
    """
    if trends is None:
        trends = get_user_skill_trends(db, user_id)
    role_family = job_target.role_family or detect_role_family(job_target.role_title)
    critical = critical_dimensions_for(role_family)

    dimensions: List[ReadinessDimension] = []
    weighted_total = 0.0
    total_weight = 0.0
    for trend in trends.dimensions:
        is_critical = trend.dimension in critical
        weight = DIMENSION_WEIGHTS.get(trend.dimension, DEFAULT_DIMENSION_WEIGHT)
        if is_critical:
            weight *= JD_CRITICAL_MULTIPLIER
        dimensions.append(ReadinessDimension(
            dimension=trend.dimension,
            score=trend.latest,
            weight=weight,
            trend=trend.direction,
            jd_relevance=is_critical,
        ))
        weighted_total += trend.latest * weight
        total_weight += weight

    skill_coverage = weighted_total / total_weight if total_weight > 0 else 0.0
    recent_performance = mean(t.latest for t in trends.dimensions) if trends.dimensions else 0.0
    critical_scores = [d.score for d in dimensions if d.jd_relevance]
    jd_alignment = mean(critical_scores) if critical_scores else 0.0
    practice_volume = min(100, trends.session_count * PRACTICE_VOLUME_PER_SESSION)
    improving = sum(1 for t in trends.dimensions if t.direction == "improving")
    declining = sum(1 for t in trends.dimensions if t.direction == "declining")
    trend_bonus = min(MAX_TREND_BONUS, (improving - declining) * 2)

    overall = int(clamp(round_score(
        skill_coverage * 0.4
        + recent_performance * 0.25
        + jd_alignment * 0.25
        + practice_volume * 0.05
        + trend_bonus
    )))
    level = get_job_readiness_level(overall)

    gaps = []
    for dim in dimensions:
        delta = GAP_TARGET_SCORE - dim.score
        if delta > GAP_MIN_DELTA:
            gaps.append(ReadinessGap(
                dimension=dim.dimension,
                current_score=dim.score,
                target_score=GAP_TARGET_SCORE,
                priority=calculate_gap_priority(delta, dim.jd_relevance),
                suggested_focus=focus_tip(dim.dimension, dim.score),
            ))
    gaps.sort(key=lambda g: GAP_PRIORITY_ORDER[g.priority])

    last_practiced = [t.last_practiced_at for t in trends.dimensions if t.last_practiced_at is not None]

    report = ReadinessReport(
        job_target_id=job_target.id,
        role_family=role_family,
        overall=overall,
        readiness_level=level,
        breakdown=ReadinessBreakdown(
            skill_coverage=round_score(skill_coverage),
            recent_performance=round_score(recent_performance),
            jd_alignment=round_score(jd_alignment),
            practice_volume=practice_volume,
            trend_bonus=trend_bonus,
        ),
        dimensions=dimensions,
        gaps=gaps,
        recommendations=build_recommendations(level, gaps, trends.session_count, overall),
        estimated_prep_time_hours=estimate_prep_hours(level, sum(1 for g in gaps if g.priority != "low")),
        last_practiced_at=max(last_practiced) if last_practiced else None,
        practice_session_count=trends.session_count,
    )
    logger.info(
        f"Job readiness: user_id={user_id}, job_target_id={job_target.id}, family={role_family}, "
        f"overall={overall}, level={level}, gaps={len(gaps)}"
    )
    return report


def get_job_readiness_summary(db: Session, user_id: int) -> JobReadinessSummary:
    """Readiness for every non-archived job target, plus the weaknesses they share."""
    job_targets = (
        db.query(JobTarget)
        .filter(JobTarget.user_id == user_id, JobTarget.status != "archived")
        .order_by(JobTarget.id)
        .all()
    )
    trends = get_user_skill_trends(db, user_id)

    entries = []
    gap_counts: Counter = Counter()
    for job_target in job_targets:
        report = calculate_job_readiness(db, user_id, job_target, trends=trends)
        entries.append(JobReadinessEntry(
            job_target_id=job_target.id,
            role_title=job_target.role_title,
            company_name=job_target.company_name,
            readiness_score=report.overall,
            readiness_level=report.readiness_level,
            top_gaps=[gap.dimension for gap in report.gaps[:3]],
            days_to_ready=math.ceil(report.estimated_prep_time_hours / PREP_HOURS_PER_GAP),
        ))
        gap_counts.update(gap.dimension for gap in report.gaps)

    common = [dimension for dimension, _ in gap_counts.most_common(TOP_DIMENSIONS)]
    if common:
        overall_focus = [
            f"Focus on {dimension_label(common[0])}: it affects {gap_counts[common[0]]} of your saved jobs"
        ]
    else:
        overall_focus = ["Add practice sessions to build your skill baseline"]

    return JobReadinessSummary(jobs=entries, overall_focus=overall_focus, common_weaknesses=common)
