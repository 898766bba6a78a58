#!/usr/bin/env python3
"""
Corporate Attractiveness - reverse-direction scoring.

How appealing a listing is to students, from the listing itself and the
track record of the company that posted it.

Weights: compensation 25%, flexibility 20%, reputation 25%,
completion rate 15%, growth opportunity 15%.
"""

import re
import math
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from core.scorer import loaders
from core.scorer.models import ListingProfile, SignalResult
from database.repository import MatchEngineRepository

logger = logging.getLogger(__name__)

ATTRACTIVENESS_WEIGHTS = {
    'compensation': 0.25,
    'flexibility': 0.20,
    'reputation': 0.25,
    'completionRate': 0.15,
    'growthOpportunity': 0.15,
}

DEFAULT_LISTING_HOURS = 20
# Monthly stipends are converted at roughly 160 working hours
HOURS_PER_MONTH = 160
SMALL_SAMPLE_RATINGS = 5

GROWTH_KEYWORDS = [
    ('mentor', 15),
    ('training', 10),
    ('learn', 8),
    ('develop', 8),
    ('growth', 10),
    ('leadership', 12),
    ('full-time', 15),
    ('hire', 12),
    ('career', 10),
    ('advancement', 10),
    ('certification', 10),
    ('presentation', 8),
]

AMOUNT_PATTERN = re.compile(r'\$?(\d+)')
HOURLY_MARKERS = ('/hr', 'per hour', 'hourly')


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return min(100, max(0, value))


@dataclass
class CompanyStats:
    total_listings: int = 0
    completed_projects: int = 0
    accepted_students: int = 0
    avg_rating: Optional[float] = None
    rating_count: int = 0


@dataclass
class AttractivenessResult:
    listing_id: Any
    author_id: Any
    score: float
    signals: Dict[str, Dict[str, Any]]
    sample_size: int
    computed_at: Optional[datetime] = None
    is_stale: bool = False
    from_cache: bool = False

    @classmethod
    def from_row(cls, row, from_cache: bool = False) -> "AttractivenessResult":
        return cls(
            listing_id=row.listing_id,
            author_id=row.author_id,
            score=row.attractiveness_score,
            signals=row.signal_breakdown or {},
            sample_size=row.sample_size or 0,
            computed_at=row.computed_at,
            is_stale=bool(row.is_stale),
            from_cache=from_cache
        )


@dataclass
class CompanyAttractiveness:
    author_id: Any
    avg_score: int = 0
    listing_count: int = 0
    scores: List[Dict[str, Any]] = field(default_factory=list)


def score_listing_compensation(listing: ListingProfile) -> SignalResult:
    if not listing.is_paid:
        return SignalResult('compensation', 20, {'isPaid': False, 'note': 'Unpaid listing'})

    compensation = (listing.compensation or '').strip()
    if not compensation:
        return SignalResult('compensation', 40, {'isPaid': True, 'note': 'Paid but compensation not specified'})

    text = compensation.lower()
    if 'negotiable' in text or 'competitive' in text:
        return SignalResult('compensation', 70, {
            'isPaid': True, 'compensation': compensation, 'note': 'Competitive/negotiable'
        })

    match = AMOUNT_PATTERN.search(text)
    if match is None:
        return SignalResult('compensation', 55, {'isPaid': True, 'compensation': compensation})

    amount = int(match.group(1))
    is_hourly = any(marker in text for marker in HOURLY_MARKERS)
    hourly_rate = amount if is_hourly else amount / HOURS_PER_MONTH

    if hourly_rate >= 25:
        score = 95
    elif hourly_rate >= 18:
        score = 80
    elif hourly_rate >= 12:
        score = 65
    else:
        score = 45

    return SignalResult('compensation', score, {
        'isPaid': True,
        'compensation': compensation,
        'estimatedHourlyRate': round_half_up(hourly_rate),
    })


def score_flexibility(listing: ListingProfile) -> SignalResult:
    hours = listing.hours_per_week or DEFAULT_LISTING_HOURS
    score = 50
    if listing.remote_allowed:
        score += 25

    if hours <= 10:
        score += 20
        flexibility = 'Very flexible (<=10 hrs/wk)'
    elif hours <= 20:
        score += 10
        flexibility = 'Standard (10-20 hrs/wk)'
    else:
        score -= 5
        flexibility = 'Heavy commitment (>20 hrs/wk)'

    return SignalResult('flexibility', clamp_score(score), {
        'remote': bool(listing.remote_allowed),
        'flexibility': flexibility,
        'hoursPerWeek': hours,
    })


def score_reputation(stats: CompanyStats) -> SignalResult:
    if stats.rating_count == 0:
        return SignalResult('reputation', 50, {'note': 'No ratings yet', 'ratingCount': 0})

    rating = stats.avg_rating or 0
    if rating >= 4.5:
        score = 100
    elif rating >= 4.0:
        score = 85
    elif rating >= 3.5:
        score = 70
    elif rating >= 3.0:
        score = 50
    else:
        score = 25

    # Few ratings pull the score toward neutral
    if stats.rating_count < SMALL_SAMPLE_RATINGS:
        score = round_half_up(score * 0.8 + 50 * 0.2)

    return SignalResult('reputation', score, {
        'avgRating': stats.avg_rating,
        'ratingCount': stats.rating_count,
    })


def score_completion_rate(stats: CompanyStats) -> SignalResult:
    if stats.accepted_students == 0:
        return SignalResult('completionRate', 50, {'note': 'No completed projects yet'})

    rate = stats.completed_projects / max(stats.accepted_students, 1)
    if rate >= 0.9:
        score = 100
    elif rate >= 0.75:
        score = 80
    elif rate >= 0.5:
        score = 60
    else:
        score = 35

    return SignalResult('completionRate', score, {
        'completionRate': round(rate, 2),
        'completedProjects': stats.completed_projects,
        'acceptedStudents': stats.accepted_students,
    })


def score_growth_opportunity(listing: ListingProfile) -> SignalResult:
    text = f"{listing.title or ''} {listing.description or ''}".lower()
    score = 50
    indicators = []
    for keyword, boost in GROWTH_KEYWORDS:
        if keyword in text:
            score += boost
            indicators.append(keyword)

    return SignalResult('growthOpportunity', clamp_score(score), {
        'indicators': indicators,
        'note': 'Growth indicators found' if indicators else 'No specific growth indicators',
    })


def score_attractiveness(listing: ListingProfile, stats: CompanyStats):
    """Returns (composite 0-100, breakdown keyed by signal name)."""
    signals = [
        score_listing_compensation(listing),
        score_flexibility(listing),
        score_reputation(stats),
        score_completion_rate(stats),
        score_growth_opportunity(listing),
    ]
    composite = sum(s.score * ATTRACTIVENESS_WEIGHTS[s.signal] for s in signals)
    breakdown = {s.signal: {'score': s.score, 'details': s.details} for s in signals}
    return clamp_score(round_half_up(composite)), breakdown


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttractivenessService:
    """Computes and caches attractiveness per listing, aggregates per company."""

    def __init__(self, repo: MatchEngineRepository, clock: Optional[Callable[[], datetime]] = None):
        self.repo = repo
        self.clock = clock or _utcnow

    def company_stats(self, author_id: Any) -> CompanyStats:
        if author_id is None:
            return CompanyStats()
        total, completed, accepted = self.repo.attractiveness.company_stats(author_id)
        avg_rating, rating_count = self.repo.attractiveness.rating_stats(author_id)
        return CompanyStats(
            total_listings=total,
            completed_projects=completed,
            accepted_students=accepted,
            avg_rating=round(avg_rating, 2) if avg_rating is not None else None,
            rating_count=rating_count
        )

    def compute(self, listing_id: Any, force_recompute: bool = False) -> AttractivenessResult:
        """Cached attractiveness of the listing, recomputed when missing, stale or forced."""
        if not force_recompute:
            cached = self.repo.attractiveness.get(listing_id)
            if cached is not None and not cached.is_stale:
                return AttractivenessResult.from_row(cached, from_cache=True)

        started = time.perf_counter()
        listing = loaders.load_listing_profile(self.repo, listing_id)
        stats = self.company_stats(listing.author_id)
        score, breakdown = score_attractiveness(listing, stats)

        row = self.repo.attractiveness.upsert(listing.id, {
            'author_id': listing.author_id,
            'tenant_id': listing.tenant_id,
            'attractiveness_score': score,
            'signal_breakdown': breakdown,
            'sample_size': stats.total_listings,
            'computed_at': self.clock(),
        })
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(f"Attractiveness {score} for listing {listing_id} in {elapsed_ms}ms")
        return AttractivenessResult.from_row(row)

    def get_company_attractiveness(self, author_id: Any) -> CompanyAttractiveness:
        """Average over the company's cached listing scores, best first."""
        rows = self.repo.attractiveness.list_for_author(author_id)
        if not rows:
            return CompanyAttractiveness(author_id=author_id)

        average = sum(row.attractiveness_score for row in rows) / len(rows)
        return CompanyAttractiveness(
            author_id=author_id,
            avg_score=round_half_up(average),
            listing_count=len(rows),
            scores=[{'listing_id': row.listing_id, 'score': row.attractiveness_score} for row in rows]
        )
