"""
Employer screening plan.

A short fixed-length interview (12 minutes by default) built from a per-family
phase template, scaled to the target duration and reconciled so the phase
minutes always add up to exactly the target.
"""
import logging
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session

from hiready.core import config
from hiready.core.interview_tables import (
    BEHAVIORAL_FOCUS_AREAS,
    DEFAULT_EMPLOYER_FAMILY,
    DEFAULT_EMPLOYER_INTERVIEW_STYLE,
    DEFAULT_PLAN_TABLES,
    EMPLOYER_INTERVIEW_STYLES,
    EmployerPhaseTemplate,
    InterviewPlanTables,
)
from hiready.core.rounding import round_score
from hiready.schemas.interview_plan import EmployerInterviewPlan, EmployerPhase, SkillSummary
from hiready.services.company_resolver import resolve_company_archetype
from hiready.services.role_resolver import resolve_role_archetype
from hiready.services.skill_extractor import extract_skills

logger = logging.getLogger(__name__)

MAIN_PHASE_CATEGORIES = ("technical", "case_study")
MIN_MAIN_PHASE_MINS = 3


def scale_employer_phases(
    template: Sequence[EmployerPhaseTemplate],
    target_mins: int,
    primary_skills: Sequence[str] = (),
) -> List[EmployerPhase]:
    """
    Scale template minutes to ``target_mins``.

    Each phase is rounded (minimum 1 minute). Any rounding residual is
    absorbed by the first technical/case_study phase, which never drops
    below 3 minutes.
    """
    total_base = sum(phase.base_mins for phase in template)
    scale = target_mins / total_base if total_base else 1.0

    phases = []
    for phase in template:
        if phase.category in MAIN_PHASE_CATEGORIES:
            focus_areas = list(primary_skills[:3])
        elif phase.category == "behavioral":
            focus_areas = list(BEHAVIORAL_FOCUS_AREAS)
        else:
            focus_areas = []
        phases.append(EmployerPhase(
            name=phase.name,
            mins=max(1, round_score(phase.base_mins * scale)),
            category=phase.category,
            description=phase.description,
            focus_areas=focus_areas,
        ))

    diff = target_mins - sum(phase.mins for phase in phases)
    if diff != 0:
        main_phase = next((phase for phase in phases if phase.category in MAIN_PHASE_CATEGORIES), None)
        if main_phase is not None:
            main_phase.mins = max(MIN_MAIN_PHASE_MINS, main_phase.mins + diff)
    return phases


def build_employer_interview_plan(
    db: Session,
    role_title: str,
    jd_text: str,
    company_name: Optional[str] = None,
    seniority: str = "mid",
    target_mins: Optional[int] = None,
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> EmployerInterviewPlan:
    """
    Build the fixed-duration employer screening plan for a role.

    Args:
        db: Database session
        role_title: Role title of the opening
        jd_text: Job description text (skills are extracted from it)
        company_name: Optional employer name
        seniority: Passed through to the plan
        target_mins: Total duration; defaults to EMPLOYER_INTERVIEW_MINUTES

    Returns:
        EmployerInterviewPlan whose phase minutes sum to the target
    """
    target = target_mins or config.EMPLOYER_INTERVIEW_MINUTES
    role = resolve_role_archetype(db, role_title, jd_text)
    company = resolve_company_archetype(db, company_name, jd_text) if company_name else None

    extracted = extract_skills(jd_text or "")
    primary_skills = [skill.name for skill in extracted[:5]]
    secondary_skills = [skill.name for skill in extracted[5:10]]
    domains = [skill.name for skill in extracted if skill.category == "domain"][:3]

    role_family = role.role_family or DEFAULT_EMPLOYER_FAMILY
    template = tables.employer_templates.get(role_family) or tables.employer_templates[DEFAULT_EMPLOYER_FAMILY]
    phases = scale_employer_phases(template, target, primary_skills)

    focus_areas: List[str] = []
    for area in list(role.primary_skill_dimensions[:2]) + primary_skills[:2]:
        if area not in focus_areas:
            focus_areas.append(area)

    plan = EmployerInterviewPlan(
        role_archetype_id=role.role_archetype_id,
        role_archetype_name=role.role_archetype_name,
        role_family=role_family,
        company_archetype=company.archetype if company else None,
        company_confidence=company.confidence if company else "low",
        seniority=seniority,
        interview_style=EMPLOYER_INTERVIEW_STYLES.get(role.role_family or "", DEFAULT_EMPLOYER_INTERVIEW_STYLE),
        phases=phases,
        total_mins=sum(phase.mins for phase in phases),
        focus_areas=focus_areas[:4],
        skill_summary=SkillSummary(primary=primary_skills, secondary=secondary_skills, domains=domains),
        extracted_skills=extracted,
    )
    logger.info(
        f"Employer plan built: role_title={role_title!r}, family={role_family}, "
        f"total_mins={plan.total_mins}, skills={len(extracted)}"
    )
    return plan
