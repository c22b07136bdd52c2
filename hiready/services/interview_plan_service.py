"""
Interview plan synthesis.

Builds the ordered list of interview phases for a (company, role) pair from
whichever data exists, in this priority order:

1. intersection - company interview components AND role interview types
2. company      - company interview components only
3. role_defaults - the role's stored structure for the candidate's seniority
4. family_defaults - a generic template for the role family

Also attaches task blueprints to phases and lists per-role practice options.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from sqlalchemy.orm import Session

from hiready.core.interview_tables import (
    DEFAULT_PLAN_TABLES,
    DEFAULT_PRACTICE_TYPES,
    DEFAULT_ROLE_FAMILY,
    INTERVIEW_TYPE_METADATA,
    PRACTICE_OPTION_DURATION,
    InterviewComponent,
    InterviewPlanTables,
    RoundConfig,
    parse_interview_components,
)
from hiready.db.models.company import Company
from hiready.db.models.role_archetype import RoleArchetype, RoleTaskBlueprint
from hiready.schemas.interview_plan import (
    CompanyArchetypeSummary,
    EnrichedInterviewPhase,
    EnrichedInterviewPlan,
    InterviewPhase,
    PracticeOption,
    RoleArchetypeSummary,
    RolePracticeOptions,
    TaskBlueprint,
    UnifiedInterviewPlan,
)
from hiready.services.company_resolver import escape_like
from hiready.services.role_resolver import get_role_interview_structure

logger = logging.getLogger(__name__)

SENIOR_LEVELS = {"senior", "lead", "executive"}


def derive_seniority(experience_level: Optional[str]) -> str:
    """senior / lead / executive -> senior, entry -> entry, anything else -> mid."""
    level = (experience_level or "").strip().lower()
    if level in SENIOR_LEVELS:
        return "senior"
    if level == "entry":
        return "entry"
    return "mid"


def find_company_components(db: Session, company_name: Optional[str]) -> Tuple[InterviewComponent, ...]:
    """Active interview components of the first company whose name contains ``company_name``."""
    if not company_name or not company_name.strip():
        return ()
    company = (
        db.query(Company)
        .filter(Company.name.ilike(f"%{escape_like(company_name.strip())}%", escape="\\"))
        .order_by(Company.id)
        .first()
    )
    if company is None:
        return ()
    return parse_interview_components(company.interview_components)


def build_phase(
    name: str,
    mins: int,
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
    emphasis_weight: float = 1.0,
    subphases: Optional[list] = None,
    provenance: Optional[str] = None,
) -> InterviewPhase:
    info = tables.phase_category(name)
    return InterviewPhase(
        name=name,
        category=info.category.value,
        mins=mins,
        practice_mode=info.practice_mode.value,
        description=info.description,
        emphasis_weight=emphasis_weight,
        subphases=subphases,
        provenance=provenance,
    )


def _sorted_phases(
    rounds: List[Tuple[RoundConfig, Optional[str]]],
    tables: InterviewPlanTables,
) -> List[InterviewPhase]:
    # sorted() is stable: equal priorities keep insertion order
    ordered = sorted(rounds, key=lambda item: item[0].priority)
    return [build_phase(round_cfg.name, round_cfg.mins, tables, provenance=provenance) for round_cfg, provenance in ordered]


def build_intersection_phases(
    components: Sequence[InterviewComponent],
    role_interview_types: Iterable[str],
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> List[InterviewPhase]:
    """
    Merge company rounds with the role's interview types.

    Company components are kept when they serve one of the role's types
    (provenance "both") or are universal (provenance "company"). Core role
    types that no active company component serves are added from the role
    side (provenance "role"). Rounds are deduplicated by name.
    """
    role_types = [role_type for role_type in role_interview_types if role_type]
    role_type_set = set(role_types)
    rounds: List[Tuple[RoundConfig, Optional[str]]] = []
    seen_names: Set[str] = set()
    covered_types: Set[str] = set()

    for component in components:
        round_cfg = tables.component_rounds.get(component)
        if round_cfg is None:
            continue
        served = tables.component_role_types.get(component, frozenset())
        covered_types |= served
        relevant = bool(served & role_type_set)
        if not relevant and component not in tables.universal_components:
            continue
        if round_cfg.name in seen_names:
            continue
        seen_names.add(round_cfg.name)
        rounds.append((round_cfg, "both" if relevant else "company"))

    for role_type in role_types:
        if role_type not in tables.core_role_types or role_type in covered_types:
            continue
        for component in tables.role_type_components.get(role_type, ()):
            round_cfg = tables.component_rounds[component]
            if round_cfg.name in seen_names:
                continue
            seen_names.add(round_cfg.name)
            rounds.append((round_cfg, "role"))

    return _sorted_phases(rounds, tables)


def build_company_phases(
    components: Sequence[InterviewComponent],
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> List[InterviewPhase]:
    rounds = []
    for component in components:
        round_cfg = tables.component_rounds.get(component)
        if round_cfg is not None:
            rounds.append((round_cfg, None))
    return _sorted_phases(rounds, tables)


def build_structure_phases(
    phases_json: Optional[list],
    emphasis_weights: Dict[str, float],
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> List[InterviewPhase]:
    phases = []
    for raw in phases_json or []:
        if not isinstance(raw, dict) or not raw.get("name"):
            logger.warning(f"Skipping malformed structure phase: {raw!r}")
            continue
        name = raw["name"]
        phases.append(build_phase(
            name,
            int(raw.get("mins") or 0),
            tables,
            emphasis_weight=float(emphasis_weights.get(name, 1)),
            subphases=raw.get("subphases"),
        ))
    return phases


def build_family_default_phases(
    role_family: Optional[str],
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> List[InterviewPhase]:
    template = tables.family_default_phases.get(role_family or "")
    if template is None:
        template = tables.family_default_phases[DEFAULT_ROLE_FAMILY]
    return [build_phase(phase.name, phase.mins, tables) for phase in template]


def get_unified_interview_plan(
    db: Session,
    role_archetype_id: Optional[str] = None,
    role_family: Optional[str] = None,
    company_archetype: Optional[str] = None,
    archetype_confidence: Optional[str] = None,
    experience_level: Optional[str] = None,
    company_notes: Optional[str] = None,
    company_name: Optional[str] = None,
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> UnifiedInterviewPlan:
    """
    Synthesize the interview plan for a company + role.

    Every argument is optional; with nothing known the tech family template
    is returned. Never raises for missing data.
    """
    seniority = derive_seniority(experience_level)

    role = None
    if role_archetype_id:
        role = db.query(RoleArchetype).filter(RoleArchetype.id == role_archetype_id).first()
    role_types = list(role.common_interview_types or []) if role else []
    components = find_company_components(db, company_name)

    emphasis_weights: Dict[str, float] = {}
    if components and role_types:
        source = "intersection"
        phases = build_intersection_phases(components, role_types, tables)
    elif components:
        source = "company"
        phases = build_company_phases(components, tables)
    else:
        structure = get_role_interview_structure(db, role_archetype_id, seniority) if role_archetype_id else None
        structure_weights = dict(structure.emphasis_weights_json or {}) if structure is not None else {}
        structure_phases = (
            build_structure_phases(structure.phases_json, structure_weights, tables) if structure is not None else []
        )
        # a structure default with no usable phases falls through to the family template
        if structure_phases:
            source = "role_defaults"
            emphasis_weights = structure_weights
            phases = structure_phases
        else:
            source = "family_defaults"
            phases = build_family_default_phases(role_family or (role.role_family if role else None), tables)

    logger.info(
        f"Interview plan built: source={source}, role_archetype_id={role_archetype_id}, "
        f"company={company_name!r}, seniority={seniority}, phases={len(phases)}"
    )

    return UnifiedInterviewPlan(
        role_archetype=RoleArchetypeSummary(id=role.id, name=role.name, family=role.role_family) if role else None,
        company_archetype=(
            CompanyArchetypeSummary(type=company_archetype, confidence=archetype_confidence or "low")
            if company_archetype else None
        ),
        phases=phases,
        emphasis_weights=emphasis_weights,
        company_notes=company_notes,
        seniority=seniority,
        source=source,
    )


# ============================================
# Blueprint enrichment
# ============================================

def _to_blueprint(row: RoleTaskBlueprint) -> TaskBlueprint:
    return TaskBlueprint(
        id=row.id,
        task_type=row.task_type,
        difficulty_band=row.difficulty_band or "entry-mid",
        prompt_template=row.prompt_template,
        expected_signals=row.expected_signals_json,
        probe_tree=row.probe_tree_json,
        tags=list(row.tags_json or []),
    )


def get_role_task_blueprints(
    db: Session,
    role_archetype_id: str,
    task_types: Optional[Iterable[str]] = None,
) -> List[TaskBlueprint]:
    """Active blueprints for a role, optionally restricted to some task types."""
    query = db.query(RoleTaskBlueprint).filter(
        RoleTaskBlueprint.role_archetype_id == role_archetype_id,
        RoleTaskBlueprint.is_active.is_(True),
    )
    if task_types is not None:
        query = query.filter(RoleTaskBlueprint.task_type.in_(list(task_types)))
    return [_to_blueprint(row) for row in query.order_by(RoleTaskBlueprint.id).all()]


def enrich_interview_plan(
    db: Session,
    plan: UnifiedInterviewPlan,
    role_archetype_id: Optional[str],
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> EnrichedInterviewPlan:
    blueprints = get_role_task_blueprints(db, role_archetype_id) if role_archetype_id else []

    enriched_phases = []
    for index, phase in enumerate(plan.phases):
        task_types = set(tables.phase_task_types.get(phase.name, ()))
        enriched_phases.append(EnrichedInterviewPhase(
            **phase.model_dump(),
            phase_id=f"{phase.category}-{index}",
            blueprints=[blueprint for blueprint in blueprints if blueprint.task_type in task_types],
        ))

    plan_data = plan.model_dump(exclude={"phases"})
    return EnrichedInterviewPlan(**plan_data, phases=enriched_phases)


def get_enriched_interview_plan(
    db: Session,
    role_archetype_id: Optional[str] = None,
    role_family: Optional[str] = None,
    company_archetype: Optional[str] = None,
    archetype_confidence: Optional[str] = None,
    experience_level: Optional[str] = None,
    company_notes: Optional[str] = None,
    company_name: Optional[str] = None,
    tables: InterviewPlanTables = DEFAULT_PLAN_TABLES,
) -> EnrichedInterviewPlan:
    """Unified plan with matching task blueprints attached to each phase."""
    plan = get_unified_interview_plan(
        db,
        role_archetype_id=role_archetype_id,
        role_family=role_family,
        company_archetype=company_archetype,
        archetype_confidence=archetype_confidence,
        experience_level=experience_level,
        company_notes=company_notes,
        company_name=company_name,
        tables=tables,
    )
    return enrich_interview_plan(db, plan, role_archetype_id, tables)


# ============================================
# Practice options
# ============================================

def get_role_practice_options(db: Session, role_archetype_id: str) -> Optional[RolePracticeOptions]:
    """
    One practice option per interview type the role is commonly tested on.

    Returns None when the archetype does not exist.
    """
    role = db.query(RoleArchetype).filter(RoleArchetype.id == role_archetype_id).first()
    if role is None:
        return None

    interview_types = list(role.common_interview_types or []) or list(DEFAULT_PRACTICE_TYPES)
    focus_areas = list(role.primary_skill_dimensions or [])[:3]
    blueprints = get_role_task_blueprints(db, role.id)

    options = []
    for interview_type in interview_types:
        metadata = INTERVIEW_TYPE_METADATA.get(interview_type)
        if metadata is None:
            logger.debug(f"No practice metadata for interview_type={interview_type}, role={role.id}")
            continue
        task_types = list(metadata["task_types"])
        options.append(PracticeOption(
            id=f"{role.id}-{interview_type}",
            interview_type=interview_type,
            label=metadata["label"],
            description=metadata["description"],
            typical_duration=PRACTICE_OPTION_DURATION,
            icon=metadata["icon"],
            practice_mode=metadata["practice_mode"],
            task_types=task_types,
            focus_areas=focus_areas,
            blueprints=[blueprint for blueprint in blueprints if blueprint.task_type in task_types],
        ))

    return RolePracticeOptions(
        role_archetype=RoleArchetypeSummary(id=role.id, name=role.name, family=role.role_family),
        options=options,
    )
