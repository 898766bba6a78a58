#!/usr/bin/env python3
"""
Attractiveness endpoints - how appealing listings and companies are to students.
"""

import logging

from fastapi import APIRouter, Depends, Query

from database.repository import MatchEngineRepository

from ..auth import SessionUser, ATTRACTIVENESS_FEATURE
from ..dependencies import get_repo, require_feature
from ..exceptions import ForbiddenException
from ..services.attractiveness_service import CorporateAttractivenessService
from ..models.responses import ListingAttractivenessResponse, CompanyAttractivenessResponse
from .matches import PARTNER_ROLES, validate_uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match-engine", tags=["attractiveness"])

attractiveness_user = require_feature(ATTRACTIVENESS_FEATURE)


@router.get(
    "/listings/{listing_id}/attractiveness",
    response_model=ListingAttractivenessResponse,
    response_model_by_alias=True
)
def get_listing_attractiveness(
    listing_id: str,
    force_recompute: bool = Query(default=False, alias="forceRecompute"),
    user: SessionUser = Depends(attractiveness_user),
    repo: MatchEngineRepository = Depends(get_repo)
):
    """Attractiveness of one listing; computed on first read and cached."""
    listing_uuid = validate_uuid(listing_id)
    return CorporateAttractivenessService(repo).get_listing_attractiveness(
        listing_uuid, force_recompute=force_recompute
    )


@router.get(
    "/companies/{author_id}/attractiveness",
    response_model=CompanyAttractivenessResponse,
    response_model_by_alias=True
)
def get_company_attractiveness(
    author_id: str,
    user: SessionUser = Depends(attractiveness_user),
    repo: MatchEngineRepository = Depends(get_repo)
):
    """
    Average attractiveness over a company's cached listing scores.

    Corporate partners may only read their own company.
    """
    author_uuid = validate_uuid(author_id, "author_id")
    if user.role not in PARTNER_ROLES:
        raise ForbiddenException("Corporate partner or admin role required")
    if user.role == "corporate_partner" and str(user.user_id) != str(author_uuid):
        raise ForbiddenException("Corporate partners can only view their own company")
    return CorporateAttractivenessService(repo).get_company_attractiveness(author_uuid)
