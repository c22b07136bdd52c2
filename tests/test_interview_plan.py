"""
Unit tests for interview plan synthesis, blueprint enrichment and practice options.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.core.interview_tables import InterviewComponent, parse_interview_components
from hiready.db.base import Base
from hiready.db.models.company import Company
from hiready.db.models.role_archetype import RoleArchetype, RoleInterviewStructureDefault, RoleTaskBlueprint
from hiready.services.interview_plan_service import (
    build_intersection_phases,
    derive_seniority,
    find_company_components,
    get_enriched_interview_plan,
    get_role_practice_options,
    get_unified_interview_plan,
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
def seeded(db):
    db.add_all([
        Company(
            name="Acme Analytics",
            archetype="saas",
            interview_components={"hasHrScreen": True, "hasCodingChallenge": True, "hasSystemDesign": False},
        ),
        RoleArchetype(
            id="data_analyst", name="Data Analyst", role_family="data",
            common_interview_types=["technical", "case"],
            primary_skill_dimensions=["SQL", "Analytics", "Storytelling", "Stakeholders"],
        ),
        RoleArchetype(id="product_manager", name="Product Manager", role_family="product"),
    ])
    db.flush()
    db.add_all([
        RoleInterviewStructureDefault(
            role_archetype_id="product_manager",
            seniority="senior",
            phases_json=[{"name": "Product Sense", "mins": 45}, {"name": "Mystery Round", "mins": 30}, "bad"],
            emphasis_weights_json={"Product Sense": 1.5},
        ),
        RoleTaskBlueprint(
            role_archetype_id="data_analyst", task_type="coding_explain",
            prompt_template="Walk through this SQL query", tags_json=["sql"],
        ),
        RoleTaskBlueprint(
            role_archetype_id="data_analyst", task_type="case_interview",
            prompt_template="Why did orders drop last week?",
        ),
        RoleTaskBlueprint(
            role_archetype_id="data_analyst", task_type="metrics_case",
            prompt_template="Define success metrics", is_active=False,
        ),
    ])
    db.commit()


def test_derive_seniority():
    assert derive_seniority("lead") == "senior"
    assert derive_seniority("Executive") == "senior"
    assert derive_seniority("entry") == "entry"
    assert derive_seniority(None) == "mid"
    assert derive_seniority("intern") == "mid"


def test_parse_interview_components_accepts_flag_spelling():
    components = parse_interview_components({"hasHrScreen": True, "codingChallenge": True, "hasUnknown": True, "panel": False})

    assert components == (InterviewComponent.HR_SCREEN, InterviewComponent.CODING_CHALLENGE)


def test_intersection_phases():
    phases = build_intersection_phases(
        (InterviewComponent.HR_SCREEN, InterviewComponent.CODING_CHALLENGE),
        ["technical", "case"],
    )
    by_name = {phase.name: phase for phase in phases}

    assert [phase.name for phase in phases] == ["HR Screening", "Coding Round", "Case Study"]
    assert by_name["HR Screening"].provenance == "company"
    assert by_name["Coding Round"].provenance == "both"
    assert by_name["Case Study"].provenance == "role"
    assert by_name["Case Study"].category == "case_study"
    assert "System Design" not in by_name


def test_intersection_skips_irrelevant_non_universal_components():
    phases = build_intersection_phases(
        (InterviewComponent.GROUP_DISCUSSION, InterviewComponent.BEHAVIORAL),
        ["product"],
    )

    assert [(phase.name, phase.provenance) for phase in phases] == [
        ("Case Study", "role"),
        ("Behavioral", "company"),
    ]


def test_plan_intersection_branch(db, seeded):
    plan = get_unified_interview_plan(
        db,
        role_archetype_id="data_analyst",
        company_archetype="saas",
        archetype_confidence="medium",
        company_name="Acme",
    )

    assert plan.source == "intersection"
    assert [phase.name for phase in plan.phases] == ["HR Screening", "Coding Round", "Case Study"]
    assert plan.company_archetype.type == "saas"
    assert plan.role_archetype.family == "data"


def test_plan_company_branch(db, seeded):
    plan = get_unified_interview_plan(db, company_name="Acme Analytics")

    assert plan.source == "company"
    assert [phase.name for phase in plan.phases] == ["HR Screening", "Coding Round"]
    assert all(phase.provenance is None for phase in plan.phases)


def test_plan_role_defaults_branch(db, seeded):
    plan = get_unified_interview_plan(db, role_archetype_id="product_manager", experience_level="senior")

    assert plan.source == "role_defaults"
    assert plan.seniority == "senior"
    assert [phase.name for phase in plan.phases] == ["Product Sense", "Mystery Round"]
    assert plan.phases[0].emphasis_weight == 1.5
    assert plan.phases[1].category == "technical_interview"
    assert plan.emphasis_weights == {"Product Sense": 1.5}


@pytest.mark.parametrize("phases_json", [[], ["bad", {"mins": 30}]])
def test_plan_role_structure_without_phases_uses_family_defaults(db, seeded, phases_json):
    db.add(RoleInterviewStructureDefault(
        role_archetype_id="product_manager",
        seniority="mid",
        phases_json=phases_json,
        emphasis_weights_json={"Product Sense": 2.0},
    ))
    db.commit()

    plan = get_unified_interview_plan(db, role_archetype_id="product_manager", role_family="product")

    assert plan.source == "family_defaults"
    assert plan.seniority == "mid"
    assert len(plan.phases) > 0
    assert plan.emphasis_weights == {}


def test_plan_family_defaults_branch(db, seeded):
    plan = get_unified_interview_plan(db, role_family="sales")

    assert plan.source == "family_defaults"
    assert [phase.name for phase in plan.phases] == ["HR Screening", "Behavioral", "Case Study", "Hiring Manager"]


def test_plan_unknown_family_falls_back_to_tech(db, seeded):
    plan = get_unified_interview_plan(db, role_family="astronaut")

    assert plan.source == "family_defaults"
    assert [phase.name for phase in plan.phases][:3] == ["HR Screening", "Technical Interview", "Coding Round"]


def test_plan_with_nothing_known(db):
    plan = get_unified_interview_plan(db)

    assert plan.source == "family_defaults"
    assert plan.role_archetype is None
    assert plan.company_archetype is None
    assert len(plan.phases) == 5


def test_enriched_plan_attaches_matching_blueprints(db, seeded):
    plan = get_enriched_interview_plan(db, role_archetype_id="data_analyst", company_name="Acme")
    by_name = {phase.name: phase for phase in plan.phases}

    assert by_name["Coding Round"].phase_id == "coding_assessment-1"
    assert [bp.task_type for bp in by_name["Coding Round"].blueprints] == ["coding_explain"]
    # inactive metrics_case blueprint is excluded
    assert [bp.task_type for bp in by_name["Case Study"].blueprints] == ["case_interview"]
    assert by_name["HR Screening"].blueprints == []


def test_practice_options(db, seeded):
    options = get_role_practice_options(db, "data_analyst")

    assert options.role_archetype.id == "data_analyst"
    assert [option.interview_type for option in options.options] == ["technical", "case"]
    technical = options.options[0]
    assert technical.id == "data_analyst-technical"
    assert technical.focus_areas == ["SQL", "Analytics", "Storytelling"]
    assert [bp.task_type for bp in technical.blueprints] == ["coding_explain"]


def test_practice_options_defaults_and_missing_role(db, seeded):
    options = get_role_practice_options(db, "product_manager")
    assert [option.interview_type for option in options.options] == ["technical", "hiring_manager", "behavioral"]

    assert get_role_practice_options(db, "nope") is None


@pytest.mark.parametrize("company_name", ["%", "_", "Acme%", "%Analytics"])
def test_company_lookup_treats_wildcards_literally(db, seeded, company_name):
    assert find_company_components(db, company_name) == ()


def test_company_lookup_still_matches_substring(db, seeded):
    assert find_company_components(db, "analytics") == (
        InterviewComponent.HR_SCREEN, InterviewComponent.CODING_CHALLENGE,
    )
