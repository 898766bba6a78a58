#!/usr/bin/env python3
"""
Match service - business logic for match score operations.
"""

import logging
from typing import Any, Dict, List, Optional

from core.config_loader import MatchingConfig
from core.scorer import ScoringService, CompositeScore, MatchResult
from database.repository import MatchEngineRepository

from ..auth import SessionUser
from ..models.responses import (
    MatchScoreResponse,
    MatchItem,
    MatchesResponse
)
from ..utils import safe_iso

logger = logging.getLogger(__name__)


def _signals_out(signals: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {
        name: {
            'score': entry.get('score', 0),
            'weight': entry.get('weight', 0),
            'contribution': entry.get('contribution', 0),
            'details': entry.get('details') or {}
        }
        for name, entry in (signals or {}).items()
    }


def _item_out(result: MatchResult) -> MatchItem:
    return MatchItem(
        student_id=str(result.student_id),
        listing_id=str(result.listing_id),
        composite_score=result.composite_score,
        signals=_signals_out(result.signals),
        is_stale=result.is_stale,
        computed_at=safe_iso(result.computed_at),
        matched_skills=result.matched_skills,
        missing_skills=result.missing_skills,
        athletic_transfer_skills=result.athletic_transfer_skills,
        listing=result.listing,
        student=result.student
    )


class MatchService:
    """Service for reading and computing match scores."""

    def __init__(self, repo: MatchEngineRepository, config: MatchingConfig):
        self.repo = repo
        self.scoring = ScoringService(repo, config)

    def _limits(self, tenant_id: Optional[Any], limit: Optional[int], min_score: Optional[float]):
        """Fill unset query limits from the tenant's engine config."""
        tenant_config = self.repo.configs.get_for_tenant(tenant_id) if tenant_id is not None else None
        if limit is None:
            limit = tenant_config.max_results_per_query if tenant_config else 50
        if min_score is None:
            min_score = tenant_config.min_score_threshold if tenant_config else 0
        return limit, min_score

    def get_match(self, user: SessionUser, listing_id: Any, force_recompute: bool = False) -> MatchScoreResponse:
        score: CompositeScore = self.scoring.compute_match(
            user.user_id, listing_id,
            force_recompute=force_recompute,
            tenant_id=user.tenant_id
        )
        if not score.from_cache:
            self.repo.commit()

        return MatchScoreResponse(
            student_id=str(user.user_id),
            listing_id=str(listing_id),
            score=score.score,
            signals=_signals_out(score.signals),
            computed_at=safe_iso(score.computed_at),
            version=score.version,
            is_stale=score.is_stale
        )

    def get_student_matches(
        self,
        user: SessionUser,
        limit: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> MatchesResponse:
        limit, min_score = self._limits(user.tenant_id, limit, min_score)
        results = self.scoring.get_student_matches(
            user.user_id, limit=limit, min_score=min_score, tenant_id=user.tenant_id
        )
        self.repo.commit()

        matches = [_item_out(r) for r in results]
        return MatchesResponse(success=True, count=len(matches), matches=matches)

    def get_listing_matches(
        self,
        user: SessionUser,
        listing_id: Any,
        limit: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> MatchesResponse:
        limit, min_score = self._limits(user.tenant_id, limit, min_score)
        results: List[MatchResult] = self.scoring.get_listing_matches(
            listing_id, limit=limit, min_score=min_score, tenant_id=user.tenant_id
        )
        self.repo.commit()

        matches = [_item_out(r) for r in results]
        return MatchesResponse(success=True, count=len(matches), matches=matches)
