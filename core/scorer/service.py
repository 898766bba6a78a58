#!/usr/bin/env python3
"""
Scoring Service - computes and caches (student, listing) match scores.

Cache protocol:
- A non-stale cached row is served as-is unless force_recompute is set
- Otherwise both profiles are loaded, availability is computed over the
  listing window, six signals are combined and the row is upserted with
  is_stale cleared

Missing students or listings raise NotFoundError before anything is written.
The service flushes but never commits; the caller owns the transaction.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging
import time

from database.repository import MatchEngineRepository
from database.repositories.profile import CANDIDATE_LIMIT
from core.availability import compute_availability
from core.config_loader import MatchingConfig, SignalWeights
from core.exceptions import MatchEngineError, StudentNotFoundError, ListingNotFoundError

from core.scorer.models import (
    CompositeScore, MatchResult, StudentProfile, ListingProfile, SignalResult
)
from core.scorer import loaders, persistence
from core.scorer.composite import combine_signals
from core.scorer.temporal import score_temporal_fit
from core.scorer.skills import score_skills_alignment
from core.scorer.sustainability import score_sustainability
from core.scorer.growth import score_growth_trajectory
from core.scorer.trust import score_trust_reliability
from core.scorer.compensation import score_compensation

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoringService:
    """
    Service for computing match scores between students and listings.

    Args:
        repo: Repository bundle bound to the caller's Session
        config: Matching configuration (weights, baseline, horizon)
        clock: Returns the current time; injectable for deterministic tests
    """

    def __init__(
        self,
        repo: MatchEngineRepository,
        config: Optional[MatchingConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.repo = repo
        self.config = config or MatchingConfig()
        self.clock = clock or _utcnow

    def _tenant_config(self, tenant_id: Optional[Any]):
        if tenant_id is None:
            return None
        return self.repo.configs.get_for_tenant(tenant_id)

    def resolve_weights(self, tenant_id: Optional[Any], tenant_config=None) -> SignalWeights:
        """Configured weights with the tenant's overrides merged in."""
        if tenant_config is None:
            tenant_config = self._tenant_config(tenant_id)
        if tenant_config is None:
            return self.config.signal_weights
        return self.config.signal_weights.merged(tenant_config.signal_weights)

    def compute_match(
        self,
        student_id: Any,
        listing_id: Any,
        force_recompute: bool = False,
        tenant_id: Optional[Any] = None
    ) -> CompositeScore:
        """Return the cached score for the pair, computing it when missing, stale or forced."""
        if not force_recompute:
            cached = self.repo.scores.get_cached_score(student_id, listing_id)
            if cached is not None and not cached.is_stale:
                return CompositeScore.from_row(cached, from_cache=True)

        started = time.perf_counter()
        now = self.clock()

        student = loaders.load_student_profile(self.repo, student_id)
        listing = loaders.load_listing_profile(self.repo, listing_id)

        scope_tenant = tenant_id if tenant_id is not None else student.tenant_id
        tenant_config = self._tenant_config(scope_tenant)
        weights = self.resolve_weights(scope_tenant, tenant_config)
        if tenant_config is not None:
            if tenant_config.enable_athletic_transfer is False:
                student.athletic_transfers = []
            if tenant_config.enable_schedule_matching is False:
                student.schedules = []

        signals = self.score_signals(student, listing, now)
        composite, breakdown = combine_signals(signals, weights)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        row = persistence.save_score(
            self.repo,
            student_id=student.id,
            listing_id=listing.id,
            tenant_id=scope_tenant,
            composite_score=composite,
            breakdown=breakdown,
            computation_time_ms=elapsed_ms,
            now=now
        )

        logger.debug(f"Computed match {student.id}/{listing.id}: {composite:.2f} in {elapsed_ms}ms")
        return CompositeScore.from_row(row)

    def score_signals(
        self,
        student: StudentProfile,
        listing: ListingProfile,
        now: datetime
    ) -> List[SignalResult]:
        """Pure part of the computation: profiles in, six signal results out."""
        window = loaders.resolve_listing_window(
            listing, now.date(), self.config.default_horizon_weeks
        )
        windows = compute_availability(
            student.schedules, window.start, window.end,
            baseline_hours=self.config.baseline_hours_per_week
        )

        return [
            score_temporal_fit(student, listing, window, windows),
            score_skills_alignment(student, listing),
            score_sustainability(student, listing, window),
            score_growth_trajectory(student, listing),
            score_trust_reliability(student, now),
            score_compensation(student, listing, window, windows),
        ]

    def get_student_matches(
        self,
        student_id: Any,
        limit: int = 50,
        min_score: float = 0,
        tenant_id: Optional[Any] = None
    ) -> List[MatchResult]:
        """
        Ranked matches for a student against published listings.

        Missing or stale pairs are computed inline, at most
        lazy_compute_limit per call; failures are skipped.
        """
        student = self.repo.profiles.get_student(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)

        listing_ids = self.repo.profiles.get_published_listing_ids(tenant_id)
        cached = {
            row.listing_id: row
            for row in self.repo.scores.get_student_scores(student_id, limit=CANDIDATE_LIMIT)
        }
        pending = [lid for lid in listing_ids if lid not in cached or cached[lid].is_stale]
        self._compute_pairs([(student_id, lid) for lid in pending], tenant_id)

        results = []
        for row in self.repo.scores.get_student_scores(student_id, limit=limit):
            if row.composite_score < min_score:
                continue
            listing = self.repo.profiles.get_listing(row.listing_id)
            if listing is None:
                continue
            result = self._to_result(row)
            result.listing = {
                'id': str(listing.id),
                'title': listing.title,
                'companyName': listing.company_name,
                'category': listing.category,
                'hoursPerWeek': listing.hours_per_week,
                'isPaid': bool(listing.is_paid),
                'remoteAllowed': bool(listing.remote_allowed),
            }
            results.append(result)

        results.sort(key=lambda r: r.composite_score, reverse=True)
        return results[:limit]

    def get_listing_matches(
        self,
        listing_id: Any,
        limit: int = 50,
        min_score: float = 0,
        tenant_id: Optional[Any] = None
    ) -> List[MatchResult]:
        """Ranked students for a listing (corporate partner view)."""
        listing = self.repo.profiles.get_listing(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        student_ids = self.repo.profiles.get_student_ids(tenant_id)
        cached = {
            row.student_id: row
            for row in self.repo.scores.get_listing_scores(listing_id, limit=CANDIDATE_LIMIT)
        }
        pending = [sid for sid in student_ids if sid not in cached or cached[sid].is_stale]
        self._compute_pairs([(sid, listing_id) for sid in pending], tenant_id)

        results = []
        for row in self.repo.scores.get_listing_scores(listing_id, limit=limit):
            if row.composite_score < min_score:
                continue
            student = self.repo.profiles.get_student(row.student_id)
            if student is None:
                continue
            result = self._to_result(row)
            result.student = {
                'id': str(student.id),
                'firstName': student.first_name,
                'lastName': student.last_name,
                'email': student.email,
                'university': student.university,
            }
            results.append(result)

        results.sort(key=lambda r: r.composite_score, reverse=True)
        return results[:limit]

    def _compute_pairs(self, pairs, tenant_id: Optional[Any]) -> int:
        computed = 0
        for student_id, listing_id in pairs[:self.config.lazy_compute_limit]:
            try:
                self.compute_match(student_id, listing_id, tenant_id=tenant_id)
                computed += 1
            except MatchEngineError as e:
                logger.warning(f"Skipping pair {student_id}/{listing_id}: {e}")
        if len(pairs) > self.config.lazy_compute_limit:
            logger.info(f"Deferred {len(pairs) - self.config.lazy_compute_limit} uncomputed pairs to a later request")
        return computed

    @staticmethod
    def _to_result(row) -> MatchResult:
        skills: Dict[str, Any] = (row.signal_breakdown or {}).get('skills', {}).get('details', {}) or {}
        return MatchResult(
            student_id=row.student_id,
            listing_id=row.listing_id,
            composite_score=row.composite_score,
            signals=row.signal_breakdown or {},
            is_stale=bool(row.is_stale),
            computed_at=row.computed_at,
            matched_skills=list(skills.get('matchedSkills', [])),
            missing_skills=list(skills.get('missingSkills', [])),
            athletic_transfer_skills=list(skills.get('athleticTransferSkills', []))
        )
