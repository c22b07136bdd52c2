"""
Integration tests for the HTTP surface.
Runs against in-memory SQLite with the LLM provider replaced by a fake.
"""
import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.core.security import create_access_token, hash_password
from hiready.db.base import Base
from hiready.db.models.user import User
from hiready.db.session import get_db
from hiready.llm.provider import LLMProvider, LLMResponse
from hiready.main import app


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeProvider(LLMProvider):
    def __init__(self, reply):
        self.reply = reply

    def chat(self, messages, model, temperature=0.2, max_tokens=None, json_mode=False):
        return LLMResponse(content=json.dumps(self.reply), model=model)


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
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db):
    user = User(full_name="Test User", email="test@example.com", password_hash=hash_password("testpass123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token({"sub": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def fake_judge(monkeypatch):
    def install(reply):
        monkeypatch.setattr("hiready.llm.openai_provider.get_default_provider", lambda: FakeProvider(reply))
    return install


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_signup_then_login(client):
    response = client.post("/auth/signup", json={
        "full_name": "New User", "email": "new@example.com", "password": "testpass123",
    })
    assert response.status_code == 201
    assert response.json()["message"] == "User created successfully"

    duplicate = client.post("/auth/signup", json={
        "full_name": "New User", "email": "new@example.com", "password": "testpass123",
    })
    assert duplicate.status_code == 400

    login = client.post("/auth/login", json={"email": "new@example.com", "password": "testpass123"})
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"

    bad = client.post("/auth/login", json={"email": "new@example.com", "password": "wrongpass1"})
    assert bad.status_code == 401


def test_protected_endpoint_requires_token(client):
    assert client.get("/hiready/index").status_code == 401


def test_job_target_create_and_ownership(client, db, auth_headers):
    response = client.post("/job-targets", json={"role_title": "Data Analyst", "company_name": "Acme"}, headers=auth_headers)
    assert response.status_code == 201
    job_target_id = response.json()["id"]
    assert response.json()["archetype_confidence"] == "low"

    assert client.get(f"/job-targets/{job_target_id}", headers=auth_headers).status_code == 200

    other = User(full_name="Other", email="other@example.com", password_hash="x")
    db.add(other)
    db.commit()
    other_headers = {"Authorization": f"Bearer {create_access_token({'sub': other.email})}"}
    assert client.get(f"/job-targets/{job_target_id}", headers=other_headers).status_code == 404


def test_unified_plan_with_nothing_known(client, auth_headers):
    response = client.post("/interview-plans/unified", json={}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["source"] == "family_defaults"


def test_hiready_index_is_null_without_sessions(client, auth_headers):
    response = client.get("/hiready/index", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() is None


def test_record_and_list_attempts(client, auth_headers):
    first = client.post("/hiready/attempts", json={"interview_type": "technical", "score": 60}, headers=auth_headers)
    assert first.status_code == 201
    assert first.json()["milestones"] == ["first_attempt"]

    client.post("/hiready/attempts", json={"interview_type": "technical", "score": 75}, headers=auth_headers)

    history = client.get("/hiready/attempts", headers=auth_headers).json()
    assert history["total_attempts"] == 2
    assert history["best_attempt"]["score"] == 75
    assert history["latest"]["consolidated_index"] == 75.0


def test_record_attempt_rejects_unknown_type(client, auth_headers):
    response = client.post("/hiready/attempts", json={"interview_type": "karaoke", "score": 60}, headers=auth_headers)

    assert response.status_code == 400


def test_record_attempt_rejects_out_of_range_score(client, auth_headers):
    response = client.post("/hiready/attempts", json={"interview_type": "technical", "score": 140}, headers=auth_headers)

    assert response.status_code == 422


def test_session_analysis_feeds_index(client, auth_headers, fake_judge):
    fake_judge({"dimensions": [
        {"dimension": "Problem Solving", "score": 4, "evidence": ["split the problem"]},
        {"dimension": "Communication", "score": 3},
    ]})
    job_target_id = client.post(
        "/job-targets", json={"role_title": "Data Analyst"}, headers=auth_headers
    ).json()["id"]
    session = client.post(
        "/interview/sessions", json={"interview_type": "technical", "job_target_id": job_target_id}, headers=auth_headers
    )
    assert session.status_code == 201
    session_id = session.json()["id"]

    analyzed = client.post(
        f"/interview/sessions/{session_id}/analyze",
        json={"transcript": "Interviewer: ...\nCandidate: ...", "strengths": ["Clear structure"]},
        headers=auth_headers,
    )
    assert analyzed.status_code == 200
    body = analyzed.json()
    assert body["attempt_score"] == 70
    assert body["scoring_failed"] is False
    assert body["session"]["status"] == "analyzed"
    assert body["session"]["attempt_number"] == 1

    index = client.get(f"/hiready/index?job_target_id={job_target_id}", headers=auth_headers).json()
    assert index["overall_score"] == 70
    assert index["readiness_level"] == "strong"
    assert index["strengths"] == ["Clear structure"]

    job_target = client.get(f"/job-targets/{job_target_id}", headers=auth_headers).json()
    assert job_target["readiness_score"] == 70.0

    again = client.post(
        f"/interview/sessions/{session_id}/analyze", json={"transcript": "x"}, headers=auth_headers
    )
    assert again.status_code == 400


def test_failed_judge_analyzes_without_attempt(client, auth_headers, fake_judge):
    fake_judge({"summary": "no dimensions here"})
    session_id = client.post(
        "/interview/sessions", json={"interview_type": "behavioral"}, headers=auth_headers
    ).json()["id"]

    body = client.post(
        f"/interview/sessions/{session_id}/analyze", json={"transcript": "hello"}, headers=auth_headers
    ).json()

    assert body["scoring_failed"] is True
    assert body["attempt_score"] is None
    assert client.get("/hiready/attempts", headers=auth_headers).json()["total_attempts"] == 0
    assert client.get("/hiready/index", headers=auth_headers).json()["overall_score"] == 0


def test_probe_with_inline_tree(client, auth_headers, fake_judge):
    fake_judge({"quality": "vague"})

    response = client.post("/interview/probe", json={
        "question": "Tell me about a project you led",
        "answer": "We did a lot of things.",
        "probe_count": 1,
        "probe_tree": {"ifVague": ["What did you personally own?"]},
    }, headers=auth_headers)

    assert response.status_code == 200
    decision = response.json()["decision"]
    assert decision["should_probe"] is True
    assert decision["probe_question"] == "What did you personally own?"


def test_probe_unknown_pattern(client, auth_headers, fake_judge):
    fake_judge({"quality": "adequate"})

    response = client.post("/interview/probe", json={"question": "Q", "answer": "A", "pattern_id": 404}, headers=auth_headers)

    assert response.status_code == 404


def test_session_unknown_interview_type(client, auth_headers):
    response = client.post("/interview/sessions", json={"interview_type": "karaoke"}, headers=auth_headers)

    assert response.status_code == 400


def test_record_attempt_checks_job_target_owner(client, db, auth_headers):
    other = User(full_name="Other", email="other@example.com", password_hash="x")
    db.add(other)
    db.commit()
    other_headers = {"Authorization": f"Bearer {create_access_token({'sub': other.email})}"}
    job_target_id = client.post("/job-targets", json={"role_title": "Data Analyst"}, headers=other_headers).json()["id"]

    foreign = client.post(
        "/hiready/attempts",
        json={"interview_type": "technical", "score": 60, "job_target_id": job_target_id},
        headers=auth_headers,
    )
    assert foreign.status_code == 404
    assert client.get("/hiready/attempts", headers=other_headers).json()["total_attempts"] == 0

    own = client.post(
        "/hiready/attempts",
        json={"interview_type": "technical", "score": 60, "job_target_id": job_target_id},
        headers=other_headers,
    )
    assert own.status_code == 201


def test_readiness_and_practice_plan_for_job_target(client, auth_headers, fake_judge):
    fake_judge({"dimensions": [
        {"dimension": "Problem Solving", "score": 4},
        {"dimension": "Communication", "score": 3},
    ]})
    job_target_id = client.post(
        "/job-targets", json={"role_title": "Data Analyst"}, headers=auth_headers
    ).json()["id"]
    session_id = client.post(
        "/interview/sessions", json={"interview_type": "technical", "job_target_id": job_target_id}, headers=auth_headers
    ).json()["id"]
    client.post(f"/interview/sessions/{session_id}/analyze", json={"transcript": "..."}, headers=auth_headers)

    readiness = client.get(f"/job-targets/{job_target_id}/readiness", headers=auth_headers)
    assert readiness.status_code == 200
    report = readiness.json()
    assert report["job_target_id"] == job_target_id
    assert report["practice_session_count"] == 1
    assert [gap["dimension"] for gap in report["gaps"]] == ["communication"]

    plan = client.get(f"/job-targets/{job_target_id}/practice-plan?daily_minutes=30", headers=auth_headers)
    assert plan.status_code == 200
    body = plan.json()
    assert [day["day"] for day in body["days"]] == [1, 2, 3, 4, 5, 6, 7]
    assert body["current_readiness"] == report["overall"]
    assert body["commitment_level"] == "light"

    trends = client.get("/hiready/skill-trends", headers=auth_headers).json()
    assert {t["dimension"]: t["latest"] for t in trends["dimensions"]} == {"problem_solving": 80, "communication": 60}

    summary = client.get("/hiready/readiness-summary", headers=auth_headers).json()
    assert [job["job_target_id"] for job in summary["jobs"]] == [job_target_id]
    assert summary["common_weaknesses"] == ["communication"]


def test_readiness_routes_check_owner_and_budget(client, db, auth_headers):
    job_target_id = client.post("/job-targets", json={"role_title": "Data Analyst"}, headers=auth_headers).json()["id"]
    other = User(full_name="Other", email="other@example.com", password_hash="x")
    db.add(other)
    db.commit()
    other_headers = {"Authorization": f"Bearer {create_access_token({'sub': other.email})}"}

    assert client.get(f"/job-targets/{job_target_id}/readiness", headers=other_headers).status_code == 404
    assert client.get(f"/job-targets/{job_target_id}/practice-plan", headers=other_headers).status_code == 404
    assert client.get(
        f"/job-targets/{job_target_id}/practice-plan?daily_minutes=5", headers=auth_headers
    ).status_code == 422
