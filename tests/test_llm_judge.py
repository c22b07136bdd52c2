"""
Unit tests for the LLM judge.
Uses a fake provider; no network calls.
"""
import json

from hiready.llm.judge import (
    JudgeResult,
    MAX_TRANSCRIPT_CHARS,
    classify_answer,
    classify_answer_or_default,
    score_session,
    score_session_or_default,
)
from hiready.llm.provider import LLMProvider, LLMResponse


class FakeProvider(LLMProvider):
    """Returns a canned reply, or raises when given an exception."""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def chat(self, messages, model, temperature=0.2, max_tokens=None, json_mode=False):
        self.calls.append({"messages": messages, "model": model, "json_mode": json_mode})
        if isinstance(self.reply, Exception):
            raise self.reply
        content = self.reply if isinstance(self.reply, str) else json.dumps(self.reply)
        return LLMResponse(content=content, model=model)


STRONG_CLASSIFICATION = {
    "quality": "strong",
    "has_metrics": True,
    "has_specific_example": True,
    "has_ownership": True,
    "missing_elements": [],
    "claims_extracted": ["cut p99 latency by 40%"],
    "confidence": 0.9,
}


def test_judge_result_unwrap():
    assert JudgeResult.success(3).unwrap_or(0) == 3
    assert JudgeResult.failure("boom").unwrap_or(0) == 0


def test_classify_answer_success():
    provider = FakeProvider(STRONG_CLASSIFICATION)

    result = classify_answer(
        "Tell me about a performance win",
        "I cut p99 latency by 40%",
        {"role_title": "Backend Engineer", "interview_type": "technical"},
        provider=provider,
    )

    assert result.ok
    assert result.value.quality == "strong"
    assert result.value.claims_extracted == ["cut p99 latency by 40%"]
    assert provider.calls[0]["json_mode"] is True
    assert "Backend Engineer" in provider.calls[0]["messages"][0]["content"]


def test_classify_answer_accepts_fenced_json():
    provider = FakeProvider("```json\n" + json.dumps({"quality": "vague"}) + "\n```")

    result = classify_answer("Q", "A", provider=provider)

    assert result.ok
    assert result.value.quality == "vague"


def test_classify_answer_provider_error():
    result = classify_answer("Q", "A", provider=FakeProvider(RuntimeError("rate limited")))

    assert not result.ok
    assert result.error.startswith("llm_unavailable")


def test_classify_answer_unparseable():
    result = classify_answer("Q", "A", provider=FakeProvider("I think it was fine."))

    assert not result.ok
    assert result.error == "unparseable_response"


def test_classify_answer_invalid_schema():
    result = classify_answer("Q", "A", provider=FakeProvider({"quality": "excellent"}))

    assert not result.ok
    assert result.error == "invalid_classification"


def test_classify_answer_default_is_neutral():
    classification, failed = classify_answer_or_default("Q", "A", provider=FakeProvider(RuntimeError("down")))

    assert failed is True
    assert classification.quality == "adequate"
    assert classification.confidence == 0.5


def test_classify_answer_default_passes_through_success():
    classification, failed = classify_answer_or_default("Q", "A", provider=FakeProvider(STRONG_CLASSIFICATION))

    assert failed is False
    assert classification.quality == "strong"


def test_score_session_drops_malformed_dimensions():
    provider = FakeProvider({"dimensions": [
        {"dimension": "Communication", "score": 4, "evidence": ["clear STAR answer"]},
        {"dimension": "Ownership", "score": 9},
        {"score": 3},
        "not a dimension",
        {"dimension": "Depth", "score": 2.5},
    ]})

    result = score_session("Interviewer: ...\nCandidate: ...", provider=provider)

    assert result.ok
    assert [(d.dimension, d.score) for d in result.value] == [("Communication", 4), ("Depth", 2.5)]


def test_score_session_missing_dimensions():
    result = score_session("transcript", provider=FakeProvider({"summary": "fine"}))

    assert not result.ok
    assert result.error == "missing_dimensions"


def test_score_session_truncates_transcript():
    provider = FakeProvider({"dimensions": []})

    score_session("x" * (MAX_TRANSCRIPT_CHARS + 500), provider=provider)

    prompt = provider.calls[0]["messages"][0]["content"]
    assert "x" * MAX_TRANSCRIPT_CHARS in prompt
    assert "x" * (MAX_TRANSCRIPT_CHARS + 1) not in prompt


def test_score_session_default_is_empty_list():
    assert score_session_or_default("transcript", provider=FakeProvider("nope")) == ([], True)


def test_score_session_default_passes_through_success():
    dimensions, failed = score_session_or_default(
        "transcript", provider=FakeProvider({"dimensions": [{"dimension": "Depth", "score": 3}]})
    )

    assert failed is False
    assert [d.dimension for d in dimensions] == ["Depth"]
