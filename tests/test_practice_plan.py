"""
Unit tests for the seven-day practice plan.
Plans are built from hand-made readiness reports; no database needed.
"""
import pytest

from hiready.schemas.readiness import ReadinessBreakdown, ReadinessGap, ReadinessReport
from hiready.services.practice_plan_service import (
    distribute_gaps_across_week,
    generate_seven_day_plan,
    select_activities_for_dimension,
)


def make_gap(dimension, priority, score=50):
    return ReadinessGap(
        dimension=dimension, current_score=score, target_score=75, priority=priority, suggested_focus="",
    )


def make_report(gaps=None, overall=60, level="almost_ready"):
    return ReadinessReport(
        job_target_id=7,
        role_family="data",
        overall=overall,
        readiness_level=level,
        breakdown=ReadinessBreakdown(
            skill_coverage=overall, recent_performance=overall, jd_alignment=overall, practice_volume=0, trend_bonus=0,
        ),
        gaps=gaps or [],
        estimated_prep_time_hours=5,
    )


def test_select_activities_by_score_tier():
    assert [a.title for a in select_activities_for_dimension("problem_solving", 30, 20)] == ["Framework Study"]
    assert [a.title for a in select_activities_for_dimension("problem_solving", 30, 60)] == [
        "Framework Study", "Think Aloud Practice",
    ]
    assert [a.title for a in select_activities_for_dimension("problem_solving", 80, 20)] == ["Edge Case Prep"]
    assert select_activities_for_dimension("unknown_dimension", 30, 60) == []


def test_gap_distribution():
    gaps = [
        make_gap("a", "critical"),
        make_gap("b", "high"),
        make_gap("c", "critical"),
        make_gap("d", "high"),
        make_gap("e", "medium"),
        make_gap("f", "low"),
        make_gap("g", "medium"),
        make_gap("h", "low"),
        make_gap("i", "medium"),
    ]

    assert distribute_gaps_across_week(gaps) == {
        1: ["a", "d"],
        2: ["b"],
        3: ["c"],
        4: ["a", "d"],
        5: ["b", "f"],
        6: ["c", "g"],
        7: ["h"],
    }


def test_plan_without_gaps():
    plan = generate_seven_day_plan(make_report(overall=90, level="strong"), daily_minutes=45)

    assert [day.total_minutes for day in plan.days] == [25, 0, 25, 10, 0, 25, 20]
    assert [a.title for a in plan.days[0].activities] == ["Baseline Assessment", "Quick Intro Practice"]
    assert [a.title for a in plan.days[6].activities] == ["News Check", "Week Recap"]
    assert plan.days[2].focus == "Mock interview"
    assert plan.days[2].activities[0].description == "Complete a behavioral interview simulation"
    assert plan.days[5].activities[0].description == "Complete a mixed interview simulation"
    assert plan.days[6].focus == "Review and planning"
    assert plan.days[1].focus == "General practice"
    assert plan.estimated_total_hours == 1.8
    assert plan.target_readiness == 100
    assert plan.commitment_level == "moderate"
    assert plan.weekly_goal == "Maintain peak readiness and refine edge cases"
    assert plan.focus_areas == []


def test_plan_works_critical_gap_twice():
    report = make_report([make_gap("problem_solving", "critical", score=30)], overall=35, level="not_ready")

    plan = generate_seven_day_plan(report, daily_minutes=45)

    assert plan.days[0].focus == "problem solving"
    assert plan.days[3].focus == "problem solving"
    assert [a.title for a in plan.days[3].activities] == ["Resume Review", "Framework Study"]
    assert plan.days[3].activities[1].dimension == "problem_solving"
    assert plan.days[3].expected_outcome == "Improve problem solving by practicing specific techniques"
    assert plan.focus_areas == ["problem_solving"]
    assert plan.target_readiness == 50
    assert plan.weekly_goal.startswith("Build foundational interview skills")


@pytest.mark.parametrize("daily_minutes", [15, 30, 45, 90])
def test_days_stay_within_budget(daily_minutes):
    gaps = [
        make_gap("depth_evidence", "critical", 20),
        make_gap("ownership_impact", "high", 45),
        make_gap("role_fit", "medium", 60),
        make_gap("clarity_structure", "low", 68),
    ]

    plan = generate_seven_day_plan(make_report(gaps), daily_minutes=daily_minutes)

    assert len(plan.days) == 7
    assert all(day.total_minutes <= daily_minutes + 5 for day in plan.days)


def test_tight_budget_drops_mock_sessions():
    plan = generate_seven_day_plan(make_report(), daily_minutes=15)

    assert plan.commitment_level == "light"
    assert [a.title for a in plan.days[0].activities] == ["Baseline Assessment"]
    assert plan.days[2].activities == []
    assert [a.title for a in plan.days[6].activities] == ["News Check", "Week Recap"]
