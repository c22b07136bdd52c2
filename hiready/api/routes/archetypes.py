"""
Archetype resolution endpoints.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hiready.core.auth_dependency import get_current_user
from hiready.db.session import get_db
from hiready.schemas.archetype import (
    CompanyArchetypeCount,
    ResolveArchetypesRequest,
    ResolveArchetypesResponse,
    RoleArchetypeResponse,
)
from hiready.services.company_resolver import resolve_company_archetype
from hiready.services.role_resolver import list_company_archetypes, list_role_archetypes, resolve_role_archetype

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/archetypes", tags=["Archetypes"])


@router.post("/resolve", response_model=ResolveArchetypesResponse)
def resolve_archetypes(
    request: ResolveArchetypesRequest,
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Resolve a role title (and optional company + JD) to archetypes.

    Unresolved inputs come back as a "none" match with low confidence.
    """
    try:
        company = (
            resolve_company_archetype(db, request.company_name, request.jd_text)
            if request.company_name else None
        )
        role = resolve_role_archetype(db, request.role_title, request.jd_text)
        return ResolveArchetypesResponse(company=company, role=role)
    except Exception as e:
        logger.error(f"Archetype resolution failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve archetypes. Please try again."
        )


@router.get("/companies", response_model=List[CompanyArchetypeCount])
def get_company_archetypes(
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    counts = list_company_archetypes(db)
    return [CompanyArchetypeCount(archetype=archetype, company_count=count) for archetype, count in counts.items()]


@router.get("/roles", response_model=List[RoleArchetypeResponse])
def get_role_archetypes(
    role_family: Optional[str] = Query(None, description="tech / data / product / sales / business"),
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return list_role_archetypes(db, role_family)
