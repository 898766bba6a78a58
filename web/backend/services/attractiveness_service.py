#!/usr/bin/env python3
"""
Attractiveness service - listing and company attractiveness reads.
"""

import logging
from typing import Any

from core.scorer import AttractivenessService, AttractivenessResult
from database.repository import MatchEngineRepository

from ..models.responses import (
    AttractivenessSignal,
    ListingAttractivenessResponse,
    ListingScoreOut,
    CompanyAttractivenessResponse
)
from ..utils import safe_id, safe_iso

logger = logging.getLogger(__name__)


def _listing_out(result: AttractivenessResult) -> ListingAttractivenessResponse:
    return ListingAttractivenessResponse(
        listing_id=str(result.listing_id),
        author_id=safe_id(result.author_id),
        attractiveness_score=result.score,
        signals={
            name: AttractivenessSignal(score=entry.get('score', 0), details=entry.get('details') or {})
            for name, entry in result.signals.items()
        },
        sample_size=result.sample_size,
        computed_at=safe_iso(result.computed_at),
        is_stale=result.is_stale
    )


class CorporateAttractivenessService:
    """Serves attractiveness scores, refreshing the listing cache on read."""

    def __init__(self, repo: MatchEngineRepository):
        self.repo = repo
        self.attractiveness = AttractivenessService(repo)

    def get_listing_attractiveness(self, listing_id: Any, force_recompute: bool = False) -> ListingAttractivenessResponse:
        result = self.attractiveness.compute(listing_id, force_recompute=force_recompute)
        if not result.from_cache:
            self.repo.commit()
        return _listing_out(result)

    def get_company_attractiveness(self, author_id: Any) -> CompanyAttractivenessResponse:
        company = self.attractiveness.get_company_attractiveness(author_id)
        return CompanyAttractivenessResponse(
            author_id=str(author_id),
            avg_score=company.avg_score,
            listing_count=company.listing_count,
            scores=[
                ListingScoreOut(listing_id=str(entry['listing_id']), score=entry['score'])
                for entry in company.scores
            ]
        )
