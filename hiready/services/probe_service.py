"""
Probe selection for the live interview loop.

select_probe is a pure decision table over (probe tree, answer quality,
probe count). The caller keeps probe_count across turns.
"""
import logging
import re
from typing import Dict, List, Optional, Sequence, Union
from sqlalchemy import or_
from sqlalchemy.orm import Session

from hiready.core import config
from hiready.core.logging_config import sanitize_log_data
from hiready.db.models.question_pattern import QuestionPattern
from hiready.llm.judge import classify_answer_or_default
from hiready.llm.provider import LLMProvider
from hiready.schemas.probe import (
    AnswerClassification,
    LoadedPattern,
    ProbeDecision,
    ProbeRequest,
    ProbeResponse,
    ProbeTree,
)

logger = logging.getLogger(__name__)

GENERIC_VAGUE_PROBES = (
    "Can you be more specific about what YOU personally did?",
    "What was the measurable outcome or impact?",
    "What was the most challenging part and how did you handle it?",
)
MAX_FOLLOW_UPS = 2
MAX_LOADED_PATTERNS = 50
UNKNOWN_PLACEHOLDER = "[specific detail]"

# placeholder -> context key; first context key present wins
TEMPLATE_PLACEHOLDERS: Dict[str, Sequence[str]] = {
    "project_name": ("project_name",),
    "PROJECT/CLAIM": ("project_name",),
    "company1": ("previous_company",),
    "role": ("previous_role",),
    "technology": ("skill",),
    "skill": ("must_have_skill", "skill"),
    "company": ("company",),
    "roleTitle": ("role_title",),
    "seniority_level": ("seniority",),
    "interviewType": ("interview_type",),
}
_PLACEHOLDER_RE = re.compile(r"\{\{([^}]+)\}\}")

def _stop() -> ProbeDecision:
    return ProbeDecision(should_probe=False, move_to_next_pattern=True)


def _probe(question: str, reason: str) -> ProbeDecision:
    return ProbeDecision(should_probe=True, probe_question=question, probe_reason=reason, move_to_next_pattern=False)


def select_probe(
    pattern: Union[LoadedPattern, ProbeTree],
    classification: AnswerClassification,
    probe_count: int,
    max_probes: int = 3,
) -> ProbeDecision:
    """
    Decide whether to probe the last answer and with which question.

    Order: probe budget, ``always`` on the first turn, ``ifVague`` (or the
    generic list) for weak/vague answers, ``ifStrong`` for strong answers,
    ``followUp`` for the first two turns, otherwise move on.
    """
    if probe_count >= max_probes:
        return _stop()

    tree = pattern.probe_tree if isinstance(pattern, LoadedPattern) else pattern
    quality = classification.quality

    if tree.always and probe_count == 0:
        return _probe(tree.always[0], "standard follow-up")

    if quality in ("vague", "weak"):
        probes = tree.if_vague or GENERIC_VAGUE_PROBES
        return _probe(probes[min(probe_count, len(probes) - 1)], f"answer was {quality}")

    if quality == "strong" and tree.if_strong:
        return _probe(tree.if_strong[0], "exploring depth of strong answer")

    # a short followUp list ends the pattern early instead of indexing past it
    if tree.follow_up and probe_count < min(MAX_FOLLOW_UPS, len(tree.follow_up)):
        return _probe(tree.follow_up[probe_count], "standard follow-up")

    return _stop()


def fill_pattern_template(template: str, context: Optional[Dict[str, str]] = None) -> str:
    """Substitute ``{{placeholder}}`` tokens from context; unknown ones become "[specific detail]"."""
    context = context or {}

    def _replace(match) -> str:
        for key in TEMPLATE_PLACEHOLDERS.get(match.group(1).strip(), ()):
            value = context.get(key)
            if value:
                return value
        if match.group(1).strip() == "company":
            return "the company"
        return UNKNOWN_PLACEHOLDER

    return _PLACEHOLDER_RE.sub(_replace, template)


def _to_loaded_pattern(row: QuestionPattern, context: Optional[Dict[str, str]]) -> LoadedPattern:
    return LoadedPattern(
        id=row.id,
        pattern_type=row.pattern_type,
        question=fill_pattern_template(row.template, context),
        probe_tree=ProbeTree.model_validate(row.probe_tree or {}),
        tags=row.tags or [],
    )


def load_question_patterns(
    db: Session,
    role_category: str,
    interview_type: str,
    pattern_types: List[str],
    context: Optional[Dict[str, str]] = None,
) -> List[LoadedPattern]:
    """
    Active patterns of the given types for a role category and interview type.

    A pattern with role_category "general" or null applies to every
    category; a null interview_type applies to every interview type.
    """
    if not pattern_types:
        return []

    rows = (
        db.query(QuestionPattern)
        .filter(
            QuestionPattern.is_active.is_(True),
            QuestionPattern.pattern_type.in_(pattern_types),
            or_(
                QuestionPattern.role_category == role_category,
                QuestionPattern.role_category == "general",
                QuestionPattern.role_category.is_(None),
            ),
            or_(
                QuestionPattern.interview_type == interview_type,
                QuestionPattern.interview_type.is_(None),
            ),
        )
        .order_by(QuestionPattern.id)
        .limit(MAX_LOADED_PATTERNS)
        .all()
    )
    logger.debug(
        f"Loaded question patterns: role_category={role_category}, interview_type={interview_type}, count={len(rows)}"
    )
    return [_to_loaded_pattern(row, context) for row in rows]


def get_question_pattern(db: Session, pattern_id: int) -> Optional[LoadedPattern]:
    row = db.query(QuestionPattern).filter(QuestionPattern.id == pattern_id).first()
    return _to_loaded_pattern(row, None) if row else None


def probe_answer(
    db: Session,
    request: ProbeRequest,
    provider: Optional[LLMProvider] = None,
) -> ProbeResponse:
    """
    Classify one answer and pick the next probe.

    A failed classification falls back to the neutral default so the
    interview keeps going.

    Raises:
        ValueError: pattern_id given but no such pattern
    """
    if request.pattern_id is not None:
        pattern = get_question_pattern(db, request.pattern_id)
        if pattern is None:
            raise ValueError(f"Question pattern {request.pattern_id} not found")
        tree = pattern.probe_tree
    else:
        tree = request.probe_tree or ProbeTree()

    logger.debug(f"Probe request: {sanitize_log_data(request.model_dump(exclude={'probe_tree'}))}")
    classification, failed = classify_answer_or_default(
        request.question, request.answer, request.context, provider=provider
    )
    max_probes = request.max_probes if request.max_probes is not None else config.MAX_PROBES_PER_PATTERN
    decision = select_probe(tree, classification, request.probe_count, max_probes)

    logger.info(
        f"Probe decision: quality={classification.quality}, probe_count={request.probe_count}, "
        f"should_probe={decision.should_probe}, classification_failed={failed}"
    )
    return ProbeResponse(classification=classification, classification_failed=failed, decision=decision)
