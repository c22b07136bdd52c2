"""
Unit tests for the Hiready Index aggregator.
Tests null vs zero results, type weighting, readiness bands and trend helpers.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.db.base import Base
from hiready.db.models.interview_session import InterviewAnalysis, InterviewSession
from hiready.db.models.user import User
from hiready.services.assignment_service import record_attempt
from hiready.services.hiready_index_service import (
    calculate_consolidated_hiready_index,
    compute_consistency,
    compute_momentum,
    compute_trend,
    get_readiness_level,
    normalize_dimension_score,
)


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_user(db):
    user = User(full_name="Test User", email="test@example.com", password_hash="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_session(db, user, interview_type, dimension_scores, status="analyzed", job_target_id=None,
                strengths=None, improvements=None):
    session = InterviewSession(
        user_id=user.id, interview_type=interview_type, status=status, job_target_id=job_target_id
    )
    db.add(session)
    db.flush()
    db.add(InterviewAnalysis(
        session_id=session.id,
        dimension_scores=dimension_scores,
        strengths=strengths,
        improvements=improvements,
    ))
    db.commit()
    return session


def test_no_sessions_returns_none(db, test_user):
    assert calculate_consolidated_hiready_index(db, test_user.id) is None


def test_unanalyzed_sessions_do_not_count(db, test_user):
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 5}], status="completed")

    assert calculate_consolidated_hiready_index(db, test_user.id) is None


def test_unusable_dimensions_give_zero_not_none(db, test_user):
    add_session(db, test_user, "technical", [])
    add_session(db, test_user, "behavioral", "not a list")
    add_session(db, test_user, "case", [{"dimension": "Structure", "score": "high"}, {"score": 3}])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    assert result is not None
    assert result.overall_score == 0
    assert result.readiness_level == "not_ready"
    assert result.total_sessions == 3
    assert result.dimension_scores == []


def test_type_weighted_overall_score(db, test_user):
    add_session(db, test_user, "technical", [
        {"dimension": "Problem Solving", "score": 4, "evidence": ["clean recursion", "edge cases", "tests"]},
        {"dimension": "Communication", "score": 4, "evidence": ["clear"]},
    ], strengths=["Structured", "Calm", "Fast"], improvements=["Talk through tradeoffs"])
    add_session(db, test_user, "behavioral", [
        {"dimension": "Communication", "score": 2, "evidence": ["clear"]},
        {"dimension": "Ownership", "score": 3},
    ], strengths=["Structured"])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    # technical 80 (weight 3.0), behavioral 50 (weight 1.5)
    assert result.overall_score == 70
    assert result.readiness_level == "strong"
    assert result.total_sessions == 2
    assert sorted(result.completed_interview_types) == ["behavioral", "technical"]

    dimensions = {dim.dimension: dim for dim in result.dimension_scores}
    assert dimensions["Communication"].score == 3.3
    assert dimensions["Problem Solving"].evidence == ["clean recursion", "edge cases"]
    assert dimensions["Communication"].evidence == ["clear"]
    assert dimensions["Ownership"].weight == pytest.approx(1 / 3)

    assert result.strengths == ["Structured", "Calm"]
    assert result.improvements == ["Talk through tradeoffs"]
    assert result.consistency_score == 70
    assert result.momentum is None
    assert result.trend == "stable"


def test_scope_filter(db, test_user):
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 5}], job_target_id=1)
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 1}], job_target_id=2)

    result = calculate_consolidated_hiready_index(db, test_user.id, job_target_id=1)

    assert result.overall_score == 100
    assert result.readiness_level == "exceptional"
    assert result.total_sessions == 1


def test_breakdown_is_newest_first(db, test_user):
    first = add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 1}])
    second = add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 5}])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    assert [entry.session_id for entry in result.session_breakdown] == [second.id, first.id]


@pytest.mark.parametrize("score,level", [
    (100, "exceptional"),
    (85, "exceptional"),
    (84.9, "strong"),
    (70, "strong"),
    (55, "ready"),
    (40, "developing"),
    (39, "not_ready"),
    (-5, "not_ready"),
])
def test_readiness_bands(score, level):
    assert get_readiness_level(score) == level


def test_normalize_dimension_score_rounds_half_up():
    assert normalize_dimension_score(2.5) == 50
    assert normalize_dimension_score(3.125) == 63
    assert normalize_dimension_score(7) == 100


def test_trend():
    assert compute_trend(70, None) == "stable"
    assert compute_trend(70, 60) == "improving"
    assert compute_trend(60, 70) == "declining"
    assert compute_trend(70, 65) == "stable"


def test_momentum():
    assert compute_momentum([80, 80, 80, 60, 60]) is None
    assert compute_momentum([80, 80, 80, 60, 60, 60]) == "accelerating"
    assert compute_momentum([50, 50, 50, 70, 70, 70]) == "slowing"
    assert compute_momentum([70, 72, 68, 70, 70, 70]) == "steady"


def test_consistency():
    assert compute_consistency([70]) is None
    assert compute_consistency([70, 70, 70]) == 100
    assert compute_consistency([0, 100]) == 0


def test_trend_reads_second_most_recent_snapshot_in_scope(db, test_user):
    for score in [40, 50, 90]:
        record_attempt(db, test_user.id, "technical", score)
    # newer snapshot in another scope must not be picked up
    record_attempt(db, test_user.id, "technical", 10, job_target_id=9)
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 4}])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    assert result.overall_score == 80
    assert result.previous_score == 50.0
    assert result.trend == "improving"


def test_trend_declining_against_previous_snapshot(db, test_user):
    for score in [90, 95, 60]:
        record_attempt(db, test_user.id, "technical", score)
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 3}])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    assert result.overall_score == 60
    assert result.previous_score == 95.0
    assert result.trend == "declining"


def test_trend_stable_with_single_snapshot(db, test_user):
    record_attempt(db, test_user.id, "technical", 20)
    add_session(db, test_user, "technical", [{"dimension": "Coding", "score": 5}])

    result = calculate_consolidated_hiready_index(db, test_user.id)

    assert result.previous_score is None
    assert result.trend == "stable"
