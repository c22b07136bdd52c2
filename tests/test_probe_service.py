"""
Unit tests for probe selection and question pattern loading.
"""
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hiready.db.models  # noqa: F401
from hiready.db.base import Base
from hiready.db.models.question_pattern import QuestionPattern
from hiready.llm.provider import LLMProvider, LLMResponse
from hiready.schemas.probe import AnswerClassification, LoadedPattern, ProbeRequest, ProbeTree
from hiready.services.probe_service import (
    GENERIC_VAGUE_PROBES,
    fill_pattern_template,
    load_question_patterns,
    probe_answer,
    select_probe,
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


class FakeProvider(LLMProvider):
    def __init__(self, reply):
        self.reply = reply

    def chat(self, messages, model, temperature=0.2, max_tokens=None, json_mode=False):
        if isinstance(self.reply, Exception):
            raise self.reply
        return LLMResponse(content=json.dumps(self.reply), model=model)


FULL_TREE = ProbeTree(
    always=["Walk me through your role."],
    ifVague=["What exactly did you build?", "What changed because of it?"],
    ifStrong=["What would you do differently at 10x scale?"],
    followUp=["Who else was involved?", "How did you measure success?", "What broke?"],
)


def classified(quality):
    return AnswerClassification(quality=quality)


@pytest.mark.parametrize("quality", ["strong", "adequate", "weak", "vague"])
@pytest.mark.parametrize("tree", [FULL_TREE, ProbeTree()])
def test_never_probes_past_budget(quality, tree):
    for probe_count in (3, 4, 10):
        decision = select_probe(tree, classified(quality), probe_count, max_probes=3)
        assert decision.should_probe is False
        assert decision.move_to_next_pattern is True


def test_zero_budget_never_probes():
    assert select_probe(FULL_TREE, classified("vague"), 0, max_probes=0).should_probe is False


def test_always_probe_on_first_turn():
    decision = select_probe(FULL_TREE, classified("vague"), 0)

    assert decision.probe_question == "Walk me through your role."
    assert decision.probe_reason == "standard follow-up"
    assert decision.move_to_next_pattern is False


def test_vague_answer_uses_if_vague_and_clamps_index():
    first = select_probe(FULL_TREE, classified("vague"), 1)
    last = select_probe(FULL_TREE, classified("weak"), 2)

    assert first.probe_question == "What changed because of it?"
    assert first.probe_reason == "answer was vague"
    assert last.probe_question == "What changed because of it?"
    assert last.probe_reason == "answer was weak"


def test_vague_answer_falls_back_to_generic_probes():
    decision = select_probe(ProbeTree(), classified("vague"), 0)

    assert decision.probe_question == GENERIC_VAGUE_PROBES[0]
    assert select_probe(ProbeTree(), classified("weak"), 2).probe_question == GENERIC_VAGUE_PROBES[2]


def test_strong_answer_explores_depth():
    decision = select_probe(FULL_TREE, classified("strong"), 1)

    assert decision.probe_question == "What would you do differently at 10x scale?"
    assert decision.probe_reason == "exploring depth of strong answer"


def test_adequate_answer_uses_follow_ups_then_stops():
    tree = ProbeTree(followUp=["Who else was involved?", "How did you measure success?", "What broke?"])

    assert select_probe(tree, classified("adequate"), 0).probe_question == "Who else was involved?"
    assert select_probe(tree, classified("adequate"), 1).probe_question == "How did you measure success?"
    assert select_probe(tree, classified("adequate"), 2).should_probe is False


def test_strong_answer_without_if_strong_uses_follow_up():
    tree = ProbeTree(followUp=["Who else was involved?"])

    assert select_probe(tree, classified("strong"), 0).probe_question == "Who else was involved?"


def test_short_follow_up_list_ends_pattern():
    tree = ProbeTree(followUp=["Only one"])

    decision = select_probe(tree, classified("adequate"), 1)

    assert decision.should_probe is False
    assert decision.move_to_next_pattern is True


def test_empty_tree_adequate_answer_moves_on():
    assert select_probe(ProbeTree(), classified("adequate"), 0).should_probe is False


def test_accepts_loaded_pattern():
    pattern = LoadedPattern(pattern_type="behavioral", question="Q", probe_tree=FULL_TREE)

    assert select_probe(pattern, classified("strong"), 0).probe_question == "Walk me through your role."


def test_fill_pattern_template():
    template = "At {{company}}, how did you use {{skill}} on {{project_name}} as {{seniority_level}}? {{mystery}}"

    filled = fill_pattern_template(template, {"must_have_skill": "Kafka", "skill": "Python", "seniority": "senior"})

    assert filled == "At the company, how did you use Kafka on [specific detail] as senior? [specific detail]"
    assert fill_pattern_template("Why {{company}}?", {"company": "Stripe"}) == "Why Stripe?"


@pytest.fixture
def patterns(db):
    rows = [
        QuestionPattern(pattern_type="behavioral", role_category="tech", interview_type="behavioral",
                        template="Tell me about a conflict at {{company}}",
                        probe_tree={"ifVague": ["Who was it with?"]}, tags=["conflict"]),
        QuestionPattern(pattern_type="behavioral", role_category="general", interview_type=None,
                        template="Describe a failure"),
        QuestionPattern(pattern_type="behavioral", role_category=None, interview_type="behavioral",
                        template="Describe a win"),
        QuestionPattern(pattern_type="behavioral", role_category="sales", interview_type="behavioral",
                        template="Sales only"),
        QuestionPattern(pattern_type="behavioral", role_category="tech", interview_type="technical",
                        template="Technical only"),
        QuestionPattern(pattern_type="technical_depth", role_category="tech", interview_type="behavioral",
                        template="Wrong type"),
        QuestionPattern(pattern_type="behavioral", role_category="tech", interview_type="behavioral",
                        template="Inactive", is_active=False),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_load_question_patterns_filters(db, patterns):
    loaded = load_question_patterns(db, "tech", "behavioral", ["behavioral"], {"company": "Acme"})

    assert [p.question for p in loaded] == [
        "Tell me about a conflict at Acme",
        "Describe a failure",
        "Describe a win",
    ]
    assert loaded[0].probe_tree.if_vague == ["Who was it with?"]
    assert loaded[0].tags == ["conflict"]


def test_load_question_patterns_no_types(db, patterns):
    assert load_question_patterns(db, "tech", "behavioral", []) == []


def test_probe_answer_with_stored_pattern(db, patterns):
    request = ProbeRequest(
        question="Tell me about a conflict", answer="It went ok.", probe_count=1, pattern_id=patterns[0].id
    )

    response = probe_answer(db, request, provider=FakeProvider({"quality": "vague"}))

    assert response.classification_failed is False
    assert response.decision.probe_question == "Who was it with?"


def test_probe_answer_with_inline_tree_and_failed_judge(db):
    request = ProbeRequest(
        question="Q", answer="A", probe_count=0,
        probe_tree=ProbeTree(followUp=["What happened next?"]),
    )

    response = probe_answer(db, request, provider=FakeProvider(RuntimeError("down")))

    assert response.classification_failed is True
    assert response.classification.quality == "adequate"
    assert response.decision.probe_question == "What happened next?"


def test_probe_answer_respects_max_probes(db):
    request = ProbeRequest(question="Q", answer="A", probe_count=1, max_probes=1, probe_tree=FULL_TREE)

    response = probe_answer(db, request, provider=FakeProvider({"quality": "vague"}))

    assert response.decision.should_probe is False


def test_probe_answer_unknown_pattern(db):
    with pytest.raises(ValueError):
        probe_answer(db, ProbeRequest(question="Q", answer="A", pattern_id=999), provider=FakeProvider({}))


def test_stop_decisions_are_independent():
    first = select_probe(FULL_TREE, classified("strong"), 3, max_probes=3)
    second = select_probe(ProbeTree(), classified("adequate"), 1)

    assert first is not second
    first.probe_question = "mutated"
    assert second.probe_question is None
    assert select_probe(FULL_TREE, classified("weak"), 5, max_probes=3).probe_question is None
