"""
Unit tests for attempt tracking: assignment upsert, best/latest bookkeeping and snapshots.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.db.base import Base
from hiready.db.models.interview_progress import HireadyIndexSnapshot, InterviewAssignment
from hiready.db.models.job_target import JobTarget
from hiready.db.models.role_archetype import RoleArchetype
from hiready.db.models.user import User
from hiready.services.assignment_service import (
    attempt_milestones,
    compute_consolidated_index,
    get_attempt_history,
    record_attempt,
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


def test_best_latest_and_count(db, test_user):
    for score in [60, 55, 80, 70]:
        assignment, _ = record_attempt(db, test_user.id, "technical", score)

    assert assignment.attempt_count == 4
    assert assignment.best_score == 80
    assert assignment.latest_score == 70


def test_null_scope_upserts_one_row(db, test_user):
    record_attempt(db, test_user.id, "technical", 50)
    record_attempt(db, test_user.id, "Technical", 65)

    rows = db.query(InterviewAssignment).filter(InterviewAssignment.user_id == test_user.id).all()
    assert len(rows) == 1
    assert rows[0].attempt_count == 2


def test_distinct_scopes_get_separate_rows(db, test_user):
    record_attempt(db, test_user.id, "technical", 50)
    record_attempt(db, test_user.id, "technical", 60, job_target_id=7)
    record_attempt(db, test_user.id, "technical", 70, role_kit_id=3)

    assert db.query(InterviewAssignment).count() == 3


def test_exactly_one_latest_and_best_snapshot(db, test_user):
    for score in [60, 55, 80, 70]:
        record_attempt(db, test_user.id, "technical", score)

    snapshots = db.query(HireadyIndexSnapshot).order_by(HireadyIndexSnapshot.id).all()
    latest = [s for s in snapshots if s.is_latest]
    best = [s for s in snapshots if s.is_best]

    assert len(snapshots) == 4
    assert [s.id for s in latest] == [snapshots[-1].id]
    assert [s.id for s in best] == [snapshots[2].id]
    assert best[0].consolidated_index == 80.0


def test_best_snapshot_tie_keeps_earliest(db, test_user):
    record_attempt(db, test_user.id, "technical", 75)
    record_attempt(db, test_user.id, "technical", 75)

    snapshots = db.query(HireadyIndexSnapshot).order_by(HireadyIndexSnapshot.id).all()
    assert [s.is_best for s in snapshots] == [True, False]


def test_snapshots_are_scoped(db, test_user):
    record_attempt(db, test_user.id, "technical", 50)
    record_attempt(db, test_user.id, "technical", 90, job_target_id=7)

    latest = db.query(HireadyIndexSnapshot).filter(HireadyIndexSnapshot.is_latest.is_(True)).all()
    assert len(latest) == 2


def test_consolidated_index_is_type_weighted(db, test_user):
    record_attempt(db, test_user.id, "technical", 80)
    _, snapshot = record_attempt(db, test_user.id, "behavioral", 50)

    index, weighted = compute_consolidated_index(db, test_user.id)

    assert index == 70.0
    assert snapshot.consolidated_index == 70.0
    assert weighted["technical"]["weight"] == 3.0
    assert weighted["behavioral"]["weighted_score"] == 75.0


def test_milestones(db, test_user):
    assignment, snapshot = record_attempt(db, test_user.id, "technical", 60)
    assert attempt_milestones(assignment, snapshot) == ["first_attempt"]

    assignment, snapshot = record_attempt(db, test_user.id, "technical", 50)
    assert attempt_milestones(assignment, snapshot) == []

    assignment, snapshot = record_attempt(db, test_user.id, "technical", 90)
    assert attempt_milestones(assignment, snapshot) == ["personal_best", "best_index"]


def test_unknown_interview_type_rejected(db, test_user):
    with pytest.raises(ValueError):
        record_attempt(db, test_user.id, "interpretive_dance", 50)

    assert db.query(InterviewAssignment).count() == 0


@pytest.mark.parametrize("score", [-1, 100.5, None])
def test_out_of_range_score_rejected(db, test_user, score):
    with pytest.raises(ValueError):
        record_attempt(db, test_user.id, "technical", score)


def test_attempt_history_coverage_against_role(db, test_user):
    db.add(RoleArchetype(
        id="data_analyst", name="Data Analyst", role_family="data",
        common_interview_types=["technical", "behavioral"],
    ))
    db.flush()
    job_target = JobTarget(user_id=test_user.id, role_title="Data Analyst", role_archetype_id="data_analyst")
    db.add(job_target)
    db.commit()

    record_attempt(db, test_user.id, "technical", 65, session_id=11, job_target_id=job_target.id)
    record_attempt(db, test_user.id, "technical", 72, session_id=12, job_target_id=job_target.id)

    history = get_attempt_history(db, test_user.id, job_target_id=job_target.id)

    assert history.total_attempts == 2
    assert history.coverage_percentage == 50
    assert history.best_attempt.score == 72
    assert history.best_attempt.session_id == 12
    assert len(history.snapshots) == 2
    assert history.latest.is_latest
    assert history.best.consolidated_index == 72.0


def test_attempt_history_without_role_uses_assigned_types(db, test_user):
    record_attempt(db, test_user.id, "technical", 40)
    record_attempt(db, test_user.id, "behavioral", 90)

    history = get_attempt_history(db, test_user.id)

    assert history.coverage_percentage == 100
    assert history.best_attempt.interview_type == "behavioral"


def test_attempt_history_empty_scope(db, test_user):
    history = get_attempt_history(db, test_user.id, role_kit_id=99)

    assert history.assignments == []
    assert history.total_attempts == 0
    assert history.coverage_percentage == 0
    assert history.best_attempt is None
    assert history.latest is None
