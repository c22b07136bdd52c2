"""
Role archetype resolver and archetype lookups.

Keyword counting over the role title, then over the JD text, against the
ordered ROLE_KEYWORDS table. Equal counts keep the archetype defined first.
"""
import logging
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from hiready.core.archetype_tables import ArchetypeTables, DEFAULT_ARCHETYPE_TABLES
from hiready.db.models.company import Company
from hiready.db.models.job_target import JobTarget
from hiready.db.models.role_archetype import RoleArchetype, RoleInterviewStructureDefault
from hiready.schemas.archetype import RoleResolution
from hiready.services.company_resolver import resolve_company_archetype

logger = logging.getLogger(__name__)


def _best_keyword_match(text: str, tables: ArchetypeTables, min_count: int) -> Optional[Tuple[str, int]]:
    best_id = None
    best_count = 0
    for archetype_id, patterns in tables.role_keywords.items():
        count = sum(1 for pattern in patterns if pattern in text)
        # strictly greater: ties keep the earlier archetype
        if count > best_count:
            best_id = archetype_id
            best_count = count
    if best_id is None or best_count < min_count:
        return None
    return best_id, best_count


def _no_match() -> RoleResolution:
    return RoleResolution(role_archetype_id=None, role_family=None, confidence="low", match_type="none")


def resolve_role_archetype(
    db: Session,
    role_title: str,
    jd_text: Optional[str] = None,
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> RoleResolution:
    """
    Resolve a role title to a role archetype.

    Title keywords give a "keyword"/high result on any hit. Without a title
    hit, JD keywords need at least two hits for a "jd_inference"/medium
    result. The winning archetype must exist in role_archetypes.
    """
    title_lower = (role_title or "").lower()
    match = _best_keyword_match(title_lower, tables, min_count=1)
    match_type, confidence = "keyword", "high"

    if match is None and jd_text:
        match = _best_keyword_match(jd_text.lower(), tables, min_count=2)
        match_type, confidence = "jd_inference", "medium"

    if match is None:
        logger.info(f"Role unresolved: title={role_title!r}")
        return _no_match()

    archetype_id, count = match
    archetype = db.query(RoleArchetype).filter(RoleArchetype.id == archetype_id).first()
    if archetype is None:
        logger.warning(f"Role keyword match has no archetype row: archetype_id={archetype_id}")
        return _no_match()

    resolution = RoleResolution(
        role_archetype_id=archetype.id,
        role_archetype_name=archetype.name,
        role_family=tables.role_family_for(archetype.id) or archetype.role_family,
        confidence=confidence,
        match_type=match_type,
        primary_skill_dimensions=list(archetype.primary_skill_dimensions or []),
    )
    logger.info(
        f"Role resolved: title={role_title!r}, archetype={resolution.role_archetype_id}, "
        f"family={resolution.role_family}, match_type={match_type}, hits={count}"
    )
    return resolution


def get_role_interview_structure(
    db: Session,
    role_archetype_id: str,
    seniority: str = "mid",
) -> Optional[RoleInterviewStructureDefault]:
    return (
        db.query(RoleInterviewStructureDefault)
        .filter(
            RoleInterviewStructureDefault.role_archetype_id == role_archetype_id,
            RoleInterviewStructureDefault.seniority == seniority,
        )
        .first()
    )


def list_role_archetypes(db: Session, role_family: Optional[str] = None) -> List[RoleArchetype]:
    query = db.query(RoleArchetype).filter(RoleArchetype.is_active.is_(True))
    if role_family:
        query = query.filter(RoleArchetype.role_family == role_family)
    return query.order_by(RoleArchetype.role_family, RoleArchetype.name).all()


def list_company_archetypes(db: Session) -> Dict[str, int]:
    """Company count per archetype, unclassified companies excluded."""
    rows = (
        db.query(Company.archetype, func.count(Company.id))
        .filter(Company.archetype.isnot(None))
        .group_by(Company.archetype)
        .order_by(Company.archetype)
        .all()
    )
    return {archetype: count for archetype, count in rows}


def resolve_and_save_job_archetypes(
    db: Session,
    job_target: JobTarget,
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> JobTarget:
    """
    Resolve both archetypes for a job target and cache them on the row.

    archetype_confidence is the company resolution confidence; it travels
    with company_archetype into plan synthesis.
    """
    company = None
    if job_target.company_name:
        company = resolve_company_archetype(db, job_target.company_name, job_target.jd_text, tables)
    role = resolve_role_archetype(db, job_target.role_title, job_target.jd_text, tables)

    job_target.company_archetype = company.archetype if company else None
    job_target.role_archetype_id = role.role_archetype_id
    job_target.role_family = role.role_family
    job_target.archetype_confidence = company.confidence if company else "low"
    db.commit()
    db.refresh(job_target)

    logger.info(
        f"Job target archetypes saved: job_target_id={job_target.id}, company_archetype={job_target.company_archetype}, "
        f"role_archetype_id={job_target.role_archetype_id}, confidence={job_target.archetype_confidence}"
    )
    return job_target
