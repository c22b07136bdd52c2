"""
Seven-day practice plan built from a readiness report.

Critical and high gaps are worked on days 1-3 and revisited on days 4-6.
Medium and low gaps fill days 4-7, at most two per day. Days 3 and 6 end with
a mock interview, day 7 with a recap. Every day stays within the user's
daily minutes, except mock and recap blocks which may run five minutes over.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from hiready.core.readiness_tables import (
    ACTIVITY_TEMPLATES,
    BASELINE_ACTIVITY,
    DEFAULT_DAILY_MINUTES,
    MAX_MINOR_GAPS_PER_DAY,
    MOCK_DAYS,
    MOCK_MINUTES,
    PLAN_DAYS,
    PRIORITY_GAP_DAYS,
    TARGET_READINESS_LIFT,
    WARMUP_ACTIVITIES,
    WARMUP_DAYS,
    WEEK_RECAP_ACTIVITY,
    ActivityTemplate,
    commitment_level,
    dimension_label,
    score_level,
)
from hiready.core.rounding import round_half_up
from hiready.schemas.readiness import (
    PlanActivity,
    PracticePlanDay,
    ReadinessGap,
    ReadinessReport,
    SevenDayPracticePlan,
)

logger = logging.getLogger(__name__)

OVERRUN_MINUTES = 5
DEFAULT_GAP_SCORE = 50


def _activity(template: ActivityTemplate, dimension: Optional[str] = None, minutes: Optional[int] = None) -> PlanActivity:
    return PlanActivity(
        type=template.type,
        title=template.title,
        description=template.description,
        estimated_minutes=template.minutes if minutes is None else minutes,
        dimension=dimension,
    )


def select_activities_for_dimension(dimension: str, score: float, target_minutes: int) -> List[PlanActivity]:
    """Templates for the dimension's score tier, in order, up to target + 10 minutes."""
    templates = ACTIVITY_TEMPLATES.get(dimension, {}).get(score_level(score), ())
    selected = []
    total = 0
    for template in templates:
        if total + template.minutes <= target_minutes + 10:
            selected.append(_activity(template, dimension))
            total += template.minutes
    return selected


def distribute_gaps_across_week(gaps: List[ReadinessGap]) -> Dict[int, List[str]]:
    distribution: Dict[int, List[str]] = {day: [] for day in range(1, PLAN_DAYS + 1)}

    day = 1
    for gap in gaps:
        if gap.priority not in ("critical", "high"):
            continue
        distribution[day].append(gap.dimension)
        distribution[day + PRIORITY_GAP_DAYS].append(gap.dimension)
        day = day % PRIORITY_GAP_DAYS + 1

    day = PRIORITY_GAP_DAYS + 1
    for gap in gaps:
        if gap.priority not in ("medium", "low"):
            continue
        if len(distribution[day]) < MAX_MINOR_GAPS_PER_DAY:
            distribution[day].append(gap.dimension)
        day = PRIORITY_GAP_DAYS + 1 if day == PLAN_DAYS else day + 1

    return distribution


def _day_focus(day: int, day_gaps: List[str]) -> str:
    if day_gaps:
        return " + ".join(dimension_label(d) for d in day_gaps[:2])
    if day in MOCK_DAYS:
        return "Mock interview"
    if day == PLAN_DAYS:
        return "Review and planning"
    return "General practice"


def _expected_outcome(day: int, day_gaps: List[str]) -> str:
    if day_gaps:
        return f"Improve {dimension_label(day_gaps[0])} by practicing specific techniques"
    if day == PLAN_DAYS:
        return "Clear picture of progress and next steps"
    return "Build overall interview readiness"


def _weekly_goal(readiness_level: str) -> str:
    if readiness_level in ("not_ready", "needs_work"):
        return "Build foundational interview skills and establish consistent practice habits"
    if readiness_level == "almost_ready":
        return "Polish weak areas and gain confidence through targeted practice"
    return "Maintain peak readiness and refine edge cases"


def _build_day(day: int, day_gaps: List[str], readiness: ReadinessReport, daily_minutes: int) -> PracticePlanDay:
    activities: List[PlanActivity] = []
    used = 0

    if day == 1 and used + BASELINE_ACTIVITY.minutes <= daily_minutes:
        activities.append(_activity(BASELINE_ACTIVITY))
        used += BASELINE_ACTIVITY.minutes

    if day in WARMUP_DAYS:
        warmup = WARMUP_ACTIVITIES[WARMUP_DAYS.index(day) % len(WARMUP_ACTIVITIES)]
        if used + warmup.minutes <= daily_minutes:
            activities.append(_activity(warmup))
            used += warmup.minutes

    reserved = (MOCK_MINUTES if day in MOCK_DAYS else 0) + (WEEK_RECAP_ACTIVITY.minutes if day == PLAN_DAYS else 0)
    per_gap = (daily_minutes - used - reserved) // max(len(day_gaps), 1)
    gap_scores = {gap.dimension: gap.current_score for gap in readiness.gaps}

    for dimension in day_gaps:
        if used >= daily_minutes - OVERRUN_MINUTES:
            break
        available = min(per_gap, daily_minutes - used)
        score = gap_scores.get(dimension, DEFAULT_GAP_SCORE)
        for activity in select_activities_for_dimension(dimension, score, available):
            if used + activity.estimated_minutes <= daily_minutes:
                activities.append(activity)
                used += activity.estimated_minutes

    if day in MOCK_DAYS and used + MOCK_MINUTES <= daily_minutes + OVERRUN_MINUTES:
        mock_minutes = min(MOCK_MINUTES, daily_minutes - used + OVERRUN_MINUTES)
        activities.append(PlanActivity(
            type="mock_interview",
            title="Practice Session",
            description=f"Complete a {'behavioral' if day == MOCK_DAYS[0] else 'mixed'} interview simulation",
            estimated_minutes=mock_minutes,
        ))
        used += mock_minutes

    if day == PLAN_DAYS and used + WEEK_RECAP_ACTIVITY.minutes <= daily_minutes + OVERRUN_MINUTES:
        activities.append(_activity(WEEK_RECAP_ACTIVITY))
        used += WEEK_RECAP_ACTIVITY.minutes

    return PracticePlanDay(
        day=day,
        focus=_day_focus(day, day_gaps),
        activities=activities,
        expected_outcome=_expected_outcome(day, day_gaps),
        total_minutes=sum(a.estimated_minutes for a in activities),
    )


def generate_seven_day_plan(
    readiness: ReadinessReport,
    daily_minutes: int = DEFAULT_DAILY_MINUTES,
) -> SevenDayPracticePlan:
    """
    Deterministic week of practice for the gaps in ``readiness``.

    Args:
        readiness: report from ``calculate_job_readiness``
        daily_minutes: time the user can spend per day

    Returns:
        SevenDayPracticePlan with exactly seven days
    """
    distribution = distribute_gaps_across_week(readiness.gaps)
    days = [_build_day(day, distribution[day], readiness, daily_minutes) for day in range(1, PLAN_DAYS + 1)]
    total_minutes = sum(day.total_minutes for day in days)

    plan = SevenDayPracticePlan(
        job_target_id=readiness.job_target_id,
        role_family=readiness.role_family,
        current_readiness=readiness.overall,
        target_readiness=min(100, readiness.overall + TARGET_READINESS_LIFT),
        focus_areas=[gap.dimension for gap in readiness.gaps[:3]],
        days=days,
        weekly_goal=_weekly_goal(readiness.readiness_level),
        commitment_level=commitment_level(daily_minutes),
        estimated_total_hours=round_half_up(total_minutes / 60, 1),
        generated_at=datetime.now(timezone.utc),
    )
    logger.info(
        f"Practice plan: job_target_id={readiness.job_target_id}, daily_minutes={daily_minutes}, "
        f"gaps={len(readiness.gaps)}, total_minutes={total_minutes}"
    )
    return plan
