#!/usr/bin/env python3
"""
Engine config service - per-tenant weights and result limits.
"""

import logging
from typing import Any, Optional

from core.config_loader import MatchingConfig
from core.invalidation import InvalidationService
from database.models import MatchEngineConfig
from database.repository import MatchEngineRepository

from ..exceptions import InvalidRequestException
from ..models.requests import EngineConfigUpdate
from ..models.responses import EngineConfigResponse
from ..utils import safe_id

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE_THRESHOLD = 20.0
DEFAULT_MAX_RESULTS = 50


class EngineConfigService:
    """Reads and updates MatchEngineConfig rows for admins."""

    def __init__(self, repo: MatchEngineRepository, config: MatchingConfig):
        self.repo = repo
        self.config = config

    def _to_response(self, tenant_id: Optional[Any], row: Optional[MatchEngineConfig]) -> EngineConfigResponse:
        if row is None:
            return EngineConfigResponse(
                tenant_id=safe_id(tenant_id),
                signal_weights=self.config.signal_weights.as_dict(),
                min_score_threshold=DEFAULT_MIN_SCORE_THRESHOLD,
                max_results_per_query=DEFAULT_MAX_RESULTS,
                enable_athletic_transfer=True,
                enable_schedule_matching=True,
                is_default=True
            )
        return EngineConfigResponse(
            tenant_id=safe_id(tenant_id),
            signal_weights=self.config.signal_weights.merged(row.signal_weights).as_dict(),
            min_score_threshold=row.min_score_threshold,
            max_results_per_query=row.max_results_per_query,
            enable_athletic_transfer=bool(row.enable_athletic_transfer),
            enable_schedule_matching=bool(row.enable_schedule_matching),
            is_default=False
        )

    def _scoring_inputs(self, row: Optional[MatchEngineConfig]) -> tuple:
        # Settings that change composite scores; limits and thresholds only filter reads
        if row is None:
            return self.config.signal_weights.as_dict(), True, True
        return (
            self.config.signal_weights.merged(row.signal_weights).as_dict(),
            row.enable_athletic_transfer is not False,
            row.enable_schedule_matching is not False
        )

    def get_config(self, tenant_id: Optional[Any]) -> EngineConfigResponse:
        row = self.repo.configs.get_for_tenant(tenant_id) if tenant_id is not None else None
        return self._to_response(tenant_id, row)

    def update_config(self, tenant_id: Optional[Any], update: EngineConfigUpdate) -> EngineConfigResponse:
        """
        Persist the tenant's overrides.

        Weights are merged over the current ones and must keep a
        positive total.
        """
        if tenant_id is None:
            raise InvalidRequestException("A tenant is required to store engine config")

        current = self.repo.configs.get_for_tenant(tenant_id)
        before = self._scoring_inputs(current)

        values = update.model_dump(exclude_none=True)
        if 'signal_weights' in values:
            merged = dict(current.signal_weights or {}) if current is not None else {}
            merged.update(values['signal_weights'])
            effective = self.config.signal_weights.merged(merged)
            if sum(effective.as_dict().values()) <= 0:
                raise InvalidRequestException("signal_weights must have a positive sum")
            values['signal_weights'] = merged

        row = self.repo.configs.upsert(tenant_id, values)
        if self._scoring_inputs(row) != before:
            InvalidationService(self.repo).invalidate_tenant_scores(tenant_id, 'config_change')
        self.repo.commit()
        logger.info(f"Updated match engine config for tenant {tenant_id}: {sorted(values)}")
        return self._to_response(tenant_id, row)
