#!/usr/bin/env python3
"""
Match endpoints - ranked matches and single-pair scores.
"""

import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.config_loader import AppConfig
from database.repository import MatchEngineRepository

from ..auth import SessionUser
from ..config import get_config
from ..dependencies import get_repo, get_current_user
from ..exceptions import ForbiddenException, InvalidRequestException
from ..services.match_service import MatchService
from ..models.responses import MatchesResponse, MatchScoreResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match-engine", tags=["matches"])

PARTNER_ROLES = {"corporate_partner", "admin", "system_admin", "educational_admin"}


def validate_uuid(value: str, name: str = "listing_id") -> uuid.UUID:
    """Validate that value is a valid UUID format."""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise InvalidRequestException(f"Invalid {name} format: {value}. Must be a valid UUID.")


@router.get("/matches", response_model=MatchesResponse, response_model_by_alias=True)
def get_matches(
    limit: Optional[int] = Query(default=None, ge=1, le=500, description="Maximum results to return"),
    min_score: Optional[float] = Query(default=None, ge=0, le=100, alias="minScore"),
    user: SessionUser = Depends(get_current_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """
    Ranked matches for the current student.

    Unset limit and minScore fall back to the tenant's engine config.
    """
    service = MatchService(repo, config.matching)
    return service.get_student_matches(user, limit=limit, min_score=min_score)


@router.get("/matches/{listing_id}", response_model=MatchScoreResponse, response_model_by_alias=True)
def get_match(
    listing_id: str,
    force_recompute: bool = Query(default=False, alias="forceRecompute"),
    user: SessionUser = Depends(get_current_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """Score of the current student against one listing."""
    service = MatchService(repo, config.matching)
    return service.get_match(user, validate_uuid(listing_id), force_recompute=force_recompute)


@router.get("/listings/{listing_id}/matches", response_model=MatchesResponse, response_model_by_alias=True)
def get_listing_matches(
    listing_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    min_score: Optional[float] = Query(default=None, ge=0, le=100, alias="minScore"),
    user: SessionUser = Depends(get_current_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """Ranked students for a listing; corporate partners and admins only."""
    if user.role not in PARTNER_ROLES:
        raise ForbiddenException("Corporate partner or admin role required")
    service = MatchService(repo, config.matching)
    return service.get_listing_matches(user, validate_uuid(listing_id), limit=limit, min_score=min_score)
