#!/usr/bin/env python3
"""
Compensation / Duration compatibility.

Weights: pay 50%, duration fit 30%, remote allowance 20%.
"""

from typing import List
import logging

from core.availability import AvailabilityWindow
from core.scorer.models import StudentProfile, ListingProfile, ListingWindow, SignalResult

logger = logging.getLogger(__name__)

PAID_SCORE = 100
UNPAID_SCORE = 60


def pay_score(listing: ListingProfile) -> int:
    if listing.is_paid or (listing.compensation and listing.compensation.strip()):
        return PAID_SCORE
    return UNPAID_SCORE


def duration_fit_score(windows: List[AvailabilityWindow]) -> float:
    """Share of the listing's weeks in which the student has any time at all."""
    if not windows:
        return 70
    usable = sum(1 for w in windows if w.available_hours > 0)
    return 40 + 60 * usable / len(windows)


def score_compensation(
    student: StudentProfile,
    listing: ListingProfile,
    window: ListingWindow,
    windows: List[AvailabilityWindow]
) -> SignalResult:
    pay = pay_score(listing)
    duration = duration_fit_score(windows)

    travelling = any(w.has_travel for w in windows)
    if listing.remote_allowed:
        remote = 100
    elif travelling:
        remote = 60
    else:
        remote = 80

    score = round(pay * 0.50 + duration * 0.30 + remote * 0.20)

    return SignalResult(
        signal='compensation',
        score=min(100, max(0, score)),
        details={
            'payScore': pay,
            'isPaid': listing.is_paid,
            'durationScore': round(duration),
            'durationWeeks': listing.duration_weeks,
            'windowDays': window.days,
            'remoteScore': remote,
            'remoteAllowed': listing.remote_allowed,
        }
    )
