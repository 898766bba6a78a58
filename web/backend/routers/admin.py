#!/usr/bin/env python3
"""
Admin endpoints - per-tenant match engine configuration.
"""

import logging
from fastapi import APIRouter, Depends

from core.config_loader import AppConfig
from database.repository import MatchEngineRepository

from ..auth import SessionUser, FeatureGate, ADMIN_FEATURE
from ..config import get_config
from ..dependencies import get_repo, require_admin, get_feature_gate
from ..exceptions import ForbiddenException
from ..services.config_service import EngineConfigService
from ..models.requests import EngineConfigUpdate
from ..models.responses import EngineConfigResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match-engine/admin", tags=["admin"])


def admin_user(
    user: SessionUser = Depends(require_admin),
    gate: FeatureGate = Depends(get_feature_gate)
) -> SessionUser:
    if not gate.is_enabled(user.tenant_id, ADMIN_FEATURE):
        raise ForbiddenException(f"Feature '{ADMIN_FEATURE}' is not enabled for this tenant")
    return user


@router.get("/config", response_model=EngineConfigResponse, response_model_by_alias=True)
def get_engine_config(
    user: SessionUser = Depends(admin_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """Effective engine config for the admin's tenant."""
    return EngineConfigService(repo, config.matching).get_config(user.tenant_id)


@router.put("/config", response_model=EngineConfigResponse, response_model_by_alias=True)
def update_engine_config(
    body: EngineConfigUpdate,
    user: SessionUser = Depends(admin_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    return EngineConfigService(repo, config.matching).update_config(user.tenant_id, body)
