"""
LLM judge: answer classification and session scoring.

Both calls return a JudgeResult instead of raising, so a flaky model or an
unparseable reply never halts an interview. The *_or_default helpers apply
the neutral defaults callers are expected to use.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from pydantic import ValidationError

from hiready.core.config import LLM_JUDGE_MODEL
from hiready.llm.provider import LLMProvider
from hiready.schemas.hiready import JudgedDimension
from hiready.schemas.probe import AnswerClassification

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_TRANSCRIPT_CHARS = 12000


@dataclass(frozen=True)
class JudgeResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "JudgeResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "JudgeResult[T]":
        return cls(ok=False, error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default


CLASSIFICATION_PROMPT = """You are an interview answer classifier. Analyze this candidate answer and classify it.

QUESTION: "{question}"
ANSWER: "{answer}"
ROLE: {role} ({seniority})
INTERVIEW TYPE: {interview_type}

Return JSON:
{{
  "quality": "strong" | "adequate" | "weak" | "vague",
  "has_metrics": boolean,
  "has_specific_example": boolean,
  "has_ownership": boolean,
  "missing_elements": ["e.g. 'no metrics', 'unclear role', 'no outcome', 'too generic'"],
  "claims_extracted": ["specific claims that could be probed further"],
  "confidence": 0.0-1.0
}}

CLASSIFICATION RULES:
- STRONG: specific example + clear ownership + measurable impact/outcome
- ADEQUATE: has an example but lacks some depth (metrics OR clear ownership)
- WEAK: generic answer, lacks specifics, unclear what they actually did
- VAGUE: non-answer, deflection, or too brief to evaluate"""

SESSION_SCORING_PROMPT = """You are an interview evaluator. Score this {interview_type} interview for a {role} candidate.

TRANSCRIPT:
{transcript}

Return JSON:
{{
  "dimensions": [
    {{"dimension": "name", "score": 0-5, "evidence": ["short quote from the transcript"]}}
  ]
}}"""


def _parse_json_response(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from a model reply, tolerating markdown fences."""
    try:
        json_match = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL)
        parsed = json.loads(json_match.group(1) if json_match else text)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Failed to parse JSON from judge response: {(text or '')[:100]}")
        return None
    return parsed if isinstance(parsed, dict) else None


def _get_provider(provider: Optional[LLMProvider]) -> LLMProvider:
    if provider is not None:
        return provider
    from hiready.llm.openai_provider import get_default_provider
    return get_default_provider()


def _ask(provider: Optional[LLMProvider], prompt: str) -> JudgeResult[Dict[str, Any]]:
    try:
        response = _get_provider(provider).chat(
            [{"role": "system", "content": prompt}],
            model=LLM_JUDGE_MODEL,
            temperature=0.2,
            json_mode=True,
        )
    except Exception as e:
        logger.error(f"LLM judge call failed: {e}", exc_info=True)
        return JudgeResult.failure(f"llm_unavailable: {e}")

    parsed = _parse_json_response(response.content)
    if parsed is None:
        return JudgeResult.failure("unparseable_response")
    return JudgeResult.success(parsed)


def classify_answer(
    question: str,
    answer: str,
    context: Optional[Dict[str, str]] = None,
    provider: Optional[LLMProvider] = None,
) -> JudgeResult[AnswerClassification]:
    context = context or {}
    prompt = CLASSIFICATION_PROMPT.format(
        question=question,
        answer=answer,
        role=context.get("role_title") or context.get("role_category") or "general",
        seniority=context.get("seniority", "mid"),
        interview_type=context.get("interview_type", "general"),
    )
    result = _ask(provider, prompt)
    if not result.ok:
        return JudgeResult.failure(result.error)
    try:
        return JudgeResult.success(AnswerClassification.model_validate(result.value))
    except ValidationError as e:
        logger.warning(f"Answer classification did not match schema: {e.error_count()} errors")
        return JudgeResult.failure("invalid_classification")


def score_session(
    transcript: str,
    context: Optional[Dict[str, str]] = None,
    provider: Optional[LLMProvider] = None,
) -> JudgeResult[List[JudgedDimension]]:
    """
    Score a finished session into 0-5 dimension scores.

    Malformed dimension entries are dropped; a reply with no usable entry
    still succeeds with an empty list.
    """
    context = context or {}
    prompt = SESSION_SCORING_PROMPT.format(
        transcript=(transcript or "")[:MAX_TRANSCRIPT_CHARS],
        role=context.get("role_title", "general"),
        interview_type=context.get("interview_type", "general"),
    )
    result = _ask(provider, prompt)
    if not result.ok:
        return JudgeResult.failure(result.error)

    raw_dimensions = result.value.get("dimensions")
    if not isinstance(raw_dimensions, list):
        return JudgeResult.failure("missing_dimensions")

    dimensions = []
    for item in raw_dimensions:
        try:
            dimensions.append(JudgedDimension.model_validate(item))
        except ValidationError:
            logger.debug(f"Dropping malformed dimension from judge response: {str(item)[:80]}")
    return JudgeResult.success(dimensions)


def classify_answer_or_default(
    question: str,
    answer: str,
    context: Optional[Dict[str, str]] = None,
    provider: Optional[LLMProvider] = None,
) -> Tuple[AnswerClassification, bool]:
    """
    Returns:
        (classification, failed). On failure the classification is the
        neutral default: quality "adequate", confidence 0.5.
    """
    result = classify_answer(question, answer, context, provider)
    if not result.ok:
        logger.warning(f"Answer classification failed, using neutral default: {result.error}")
    return result.unwrap_or(AnswerClassification()), not result.ok


def score_session_or_default(
    transcript: str,
    context: Optional[Dict[str, str]] = None,
    provider: Optional[LLMProvider] = None,
) -> Tuple[List[JudgedDimension], bool]:
    """
    Returns:
        (dimensions, failed). On failure the dimension list is empty.
    """
    result = score_session(transcript, context, provider)
    if not result.ok:
        logger.warning(f"Session scoring failed, recording no dimensions: {result.error}")
    return result.unwrap_or([]), not result.ok
