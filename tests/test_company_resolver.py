"""
Unit tests for the company archetype resolver.
Tests direct/alias/inference priority and name normalization.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.db.base import Base
from hiready.db.models.company import Company
from hiready.services.company_resolver import (
    escape_like,
    infer_company_archetype_from_jd,
    normalize_company_name,
    resolve_company_archetype,
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
def companies(db):
    infosys = Company(name="infosys", aliases=["infy"], archetype="it_services", confidence="high")
    # Alias that would also match "infosys"; direct match must still win
    other = Company(name="Acme Holdings", aliases=["infosys"], archetype="conglomerate", confidence="medium")
    tcs = Company(name="Tata Consultancy", aliases=["TCS", ""], archetype="it_services")
    db.add_all([infosys, other, tcs])
    db.commit()
    return {"infosys": infosys, "other": other, "tcs": tcs}


def test_normalize_strips_suffixes_and_punctuation():
    assert normalize_company_name("Infosys Technologies Pvt. Ltd.") == "infosys"
    assert normalize_company_name("  Acme   Corp (India) ") == "acme"
    assert normalize_company_name("") == ""


def test_normalize_keeps_suffix_inside_words():
    # "inc" is a token, not a substring
    assert normalize_company_name("Incredible Labs") == "incredible labs"


def test_direct_match_uses_stored_confidence(db, companies):
    result = resolve_company_archetype(db, "Infosys Ltd")

    assert result.match_type == "direct"
    assert result.archetype == "it_services"
    assert result.confidence == "high"
    assert result.company_id == companies["infosys"].id


def test_direct_match_beats_alias(db, companies):
    result = resolve_company_archetype(db, "Infosys")

    assert result.match_type == "direct"
    assert result.company_id == companies["infosys"].id


def test_substring_direct_match_is_medium(db, companies):
    result = resolve_company_archetype(db, "Tata Consult")

    assert result.match_type == "direct"
    assert result.confidence == "medium"
    assert result.company_id == companies["tcs"].id


def test_alias_match(db, companies):
    result = resolve_company_archetype(db, "TCS Limited")

    assert result.match_type == "alias"
    assert result.confidence == "medium"
    assert result.company_id == companies["tcs"].id


def test_jd_inference_when_no_company_matches(db, companies):
    jd = "Join our fintech team building payments and lending products."
    result = resolve_company_archetype(db, "Unknown Startup Co", jd)

    assert result.match_type == "inference"
    assert result.archetype == "fintech"
    assert result.confidence == "medium"
    assert result.company_id is None


def test_jd_inference_respects_priority_order():
    # Hits both big_tech (system design, distributed systems) and saas (saas, subscription)
    jd = "SaaS subscription product; system design and distributed systems experience required."
    result = infer_company_archetype_from_jd(jd)

    assert result.archetype == "big_tech"


def test_jd_inference_needs_two_hits():
    assert infer_company_archetype_from_jd("We are a startup.") is None


def test_low_confidence_preset_archetype():
    result = infer_company_archetype_from_jd("Series A startup with a founder-led culture")

    assert result.archetype == "startup"
    assert result.confidence == "low"


def test_no_match(db, companies):
    result = resolve_company_archetype(db, "Zzyzx Widgets")

    assert result.archetype is None
    assert result.confidence == "low"
    assert result.match_type == "none"


def test_unknown_archetype_rejected():
    with pytest.raises(ValueError):
        Company(name="Bad", archetype="not_an_archetype")


def test_escape_like():
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("a\\b") == "a\\\\b"


@pytest.mark.parametrize("company_name", ["%", "_", "%%", "Tata%"])
def test_like_wildcards_match_literally(db, companies, company_name):
    result = resolve_company_archetype(db, company_name)

    assert result.match_type == "none"
    assert result.company_id is None
