#!/usr/bin/env python3
"""
Sustainability - workload balance and burnout risk.

Weights: workload 50%, concurrent listings 30%, season intensity 20%.
"""

import logging

from core.scorer.models import StudentProfile, ListingProfile, ListingWindow, SignalResult

logger = logging.getLogger(__name__)

MAX_SUSTAINABLE_HOURS = 50
IDEAL_CONCURRENT = 1
MAX_CONCURRENT = 3
# Rough weekly load of an accepted project
HOURS_PER_ACTIVE_PROJECT = 10
DEFAULT_LISTING_HOURS = 15


def workload_score(total_hours: float) -> float:
    if total_hours <= 30:
        return 100
    if total_hours <= 40:
        return 85
    if total_hours <= MAX_SUSTAINABLE_HOURS:
        return 65
    overload = total_hours - MAX_SUSTAINABLE_HOURS
    return max(10, 50 - overload * 3)


def concurrent_score(concurrent: int) -> int:
    if concurrent <= IDEAL_CONCURRENT:
        return 100
    if concurrent <= 2:
        return 75
    if concurrent <= MAX_CONCURRENT:
        return 50
    return max(10, 40 - (concurrent - MAX_CONCURRENT) * 15)


def intensity_score(max_intensity: int) -> int:
    if max_intensity <= 2:
        return 90
    if max_intensity <= 3:
        return 70
    if max_intensity <= 4:
        return 45
    return 25


def score_sustainability(
    student: StudentProfile,
    listing: ListingProfile,
    window: ListingWindow
) -> SignalResult:
    seasons = [
        s for s in student.active_schedules
        if s.is_sport and s.is_in_season and s.season_overlaps(window.start, window.end)
    ]

    sport_hours = sum(s.sport_hours_per_week for s in seasons)
    project_hours = student.active_concurrent_listings * HOURS_PER_ACTIVE_PROJECT
    listing_hours = float(listing.hours_per_week or DEFAULT_LISTING_HOURS)
    total_hours = sport_hours + project_hours + listing_hours

    workload = workload_score(total_hours)
    concurrent = concurrent_score(student.active_concurrent_listings)
    intensity = intensity_score(max(s.intensity_level for s in seasons)) if seasons else 100

    score = round(workload * 0.50 + concurrent * 0.30 + intensity * 0.20)

    return SignalResult(
        signal='sustainability',
        score=min(100, max(0, score)),
        details={
            'workloadScore': workload,
            'totalCommittedHours': round(total_hours, 1),
            'sportHours': round(sport_hours, 1),
            'existingProjectHours': project_hours,
            'listingHours': listing_hours,
            'concurrentScore': concurrent,
            'concurrentListings': student.active_concurrent_listings,
            'intensityScore': intensity,
        }
    )
