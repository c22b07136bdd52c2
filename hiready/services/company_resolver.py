"""
Company archetype resolver.

Maps a free-text company name (and optionally JD text) to a company archetype,
trying in order: direct name match, alias match, JD keyword inference.
The first step that matches wins. Absence is a modeled result (archetype None,
confidence low), never an exception; database errors propagate.
"""
import logging
import re
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from hiready.core.archetype_tables import ArchetypeTables, DEFAULT_ARCHETYPE_TABLES
from hiready.db.models.company import Company
from hiready.schemas.archetype import CompanyResolution

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[.,()]")
_WHITESPACE = re.compile(r"\s+")


def normalize_company_name(name: str, tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES) -> str:
    """
    Lowercase, strip punctuation and corporate suffix tokens.

    "Infosys Technologies Pvt. Ltd." -> "infosys"
    """
    if not name:
        return ""
    normalized = _WHITESPACE.sub(" ", name.lower().strip())
    normalized = _PUNCTUATION.sub("", normalized)
    suffixes = "|".join(re.escape(token) for token in tables.corporate_suffixes)
    if suffixes:
        normalized = re.sub(rf"\s*\b(?:{suffixes})\b\s*", " ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally (use with escape="\\")."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _resolution_from_company(company: Company, confidence: str, match_type: str) -> CompanyResolution:
    return CompanyResolution(
        archetype=company.archetype,
        confidence=confidence,
        match_type=match_type,
        company_id=company.id,
        company_name=company.name,
        interview_components=company.interview_components,
    )


def match_company_direct(
    db: Session,
    company_name: str,
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> Optional[CompanyResolution]:
    """Exact normalized-name match first, then a case-insensitive substring match."""
    normalized = normalize_company_name(company_name, tables)
    if normalized:
        exact = db.query(Company).filter(func.lower(Company.name) == normalized).order_by(Company.id).first()
        if exact:
            return _resolution_from_company(exact, exact.confidence or "medium", "direct")

    raw = (company_name or "").strip()
    if not raw:
        return None
    fuzzy = db.query(Company).filter(Company.name.ilike(f"%{escape_like(raw)}%", escape="\\")).order_by(Company.id).first()
    if fuzzy:
        return _resolution_from_company(fuzzy, "medium", "direct")
    return None


def match_company_by_alias(
    db: Session,
    company_name: str,
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> Optional[CompanyResolution]:
    """First company whose normalized alias contains, or is contained by, the normalized name."""
    normalized = normalize_company_name(company_name, tables)
    if not normalized:
        return None

    companies = db.query(Company).filter(Company.aliases.isnot(None)).order_by(Company.id).all()
    for company in companies:
        if not isinstance(company.aliases, list):
            continue
        for alias in company.aliases:
            normalized_alias = normalize_company_name(str(alias), tables)
            # an empty alias would be contained in every name
            if not normalized_alias:
                continue
            if normalized_alias in normalized or normalized in normalized_alias:
                return _resolution_from_company(company, "medium", "alias")
    return None


def infer_company_archetype_from_jd(
    jd_text: str,
    company_name: str = "",
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> Optional[CompanyResolution]:
    """
    Keyword inference over JD text + company name.

    Pattern sets are tried in priority order; the first with at least two
    distinct keyword hits wins with that set's preset confidence.
    """
    if not jd_text:
        return None
    jd_lower = jd_text.lower()
    name_lower = (company_name or "").lower()

    for pattern_set in tables.company_jd_patterns:
        hits = sum(1 for keyword in pattern_set.keywords if keyword in jd_lower or keyword in name_lower)
        if hits >= 2:
            return CompanyResolution(
                archetype=pattern_set.archetype,
                confidence=pattern_set.confidence,
                match_type="inference",
            )
    return None


def resolve_company_archetype(
    db: Session,
    company_name: str,
    jd_text: Optional[str] = None,
    tables: ArchetypeTables = DEFAULT_ARCHETYPE_TABLES,
) -> CompanyResolution:
    """
    Resolve a company name to an archetype.

    Args:
        db: Database session
        company_name: Free-text company name as the user typed it
        jd_text: Optional job description, used only if lookups fail
        tables: Pattern tables (substitutable in tests)

    Returns:
        CompanyResolution; match_type "none" when nothing matched
    """
    resolution = match_company_direct(db, company_name, tables)
    if resolution is None:
        resolution = match_company_by_alias(db, company_name, tables)
    if resolution is None and jd_text:
        resolution = infer_company_archetype_from_jd(jd_text, company_name, tables)
    if resolution is None:
        resolution = CompanyResolution(archetype=None, confidence="low", match_type="none")

    logger.info(
        f"Company resolved: name={company_name!r}, archetype={resolution.archetype}, "
        f"confidence={resolution.confidence}, match_type={resolution.match_type}"
    )
    return resolution
