#!/usr/bin/env python3
"""
Growth Trajectory - category/interest alignment.

A moderate skill gap is a growth opportunity rather than a mismatch.
Weights: skill gap 50%, category progression 30%, GPA capacity 20%.
"""

import logging

from core.scorer.models import StudentProfile, ListingProfile, SignalResult

logger = logging.getLogger(__name__)

IDEAL_GAP_MIN = 0.15
IDEAL_GAP_MAX = 0.45


def gap_score(gap_ratio: float) -> float:
    if IDEAL_GAP_MIN <= gap_ratio <= IDEAL_GAP_MAX:
        return 100
    if gap_ratio < IDEAL_GAP_MIN:
        # Too easy
        return 60 + gap_ratio * 200
    if gap_ratio <= 0.6:
        return round(80 - (gap_ratio - IDEAL_GAP_MAX) * 150)
    return max(10, round(50 - (gap_ratio - 0.6) * 100))


def gpa_capacity_score(gpa: str) -> int:
    try:
        value = float(gpa)
    except (TypeError, ValueError):
        return 65
    if value >= 3.5:
        return 95
    if value >= 3.0:
        return 80
    if value >= 2.5:
        return 60
    return 40


def score_growth_trajectory(student: StudentProfile, listing: ListingProfile) -> SignalResult:
    details = {}

    required = [s.strip().lower() for s in listing.skills_required if s and s.strip()]
    known = {s.name.strip().lower() for s in student.skills}

    gap = 50.0
    if required:
        matched = sum(1 for s in required if s in known)
        ratio = 1 - matched / len(required)
        gap = gap_score(ratio)
        details['gapRatio'] = round(ratio, 2)
        details['matchedSkillCount'] = matched
        details['totalRequired'] = len(required)
    details['gapScore'] = round(gap, 1)

    progression = 50
    history = student.application_history
    if history and listing.category:
        category = listing.category.lower()
        in_category = [h for h in history if (h.category or '').lower() == category]
        worked = sum(1 for h in in_category if h.status in ('completed', 'accepted'))
        if not in_category:
            progression = 80
        elif worked == 0:
            progression = 55
        elif worked <= 2:
            progression = 90
        else:
            progression = 60
    details['progressionScore'] = progression

    capacity = gpa_capacity_score(student.gpa) if student.gpa else 65
    details['capacityScore'] = capacity

    score = round(gap * 0.50 + progression * 0.30 + capacity * 0.20)
    return SignalResult(signal='growth', score=min(100, max(0, score)), details=details)
