#!/usr/bin/env python3
"""
Temporal Fit - how well the listing's window fits the student's schedule.

Factors (averaged over those that apply):
- Hours fit: available weekly hours vs the listing's required hours
- Season conflict: in-season sport at listing start, by intensity and load
- Travel load: sport travel days per month
- Travel overlap: dated travel conflicts inside the listing window
- Academic alignment: calendar priority at listing start
"""

from typing import List, Optional
import logging

import numpy as np

from core.availability import (
    AvailabilityWindow, average_available_hours, count_travel_conflict_days,
    is_month_in_range
)
from core.scorer.models import StudentProfile, ListingProfile, ListingWindow, SignalResult

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_HOURS = 15.0
# Weekly sport hours treated as full load
MAX_SPORT_LOAD_HOURS = 30.0


def hours_fit_score(available_hours: float, required_hours: float) -> int:
    """
    Step function of the weekly shortfall.

    Never decreases as available_hours grows: any surplus is a full fit.
    """
    if available_hours >= required_hours:
        return 100
    shortfall = required_hours - available_hours
    if shortfall <= 3:
        return 75
    if shortfall <= 8:
        return 50
    if shortfall <= 15:
        return 25
    return 10


def season_conflict_score(intensity_level: int, sport_hours: float) -> float:
    load_factor = min(sport_hours / MAX_SPORT_LOAD_HOURS, 1.0)
    return max(20.0, 100.0 - intensity_level * 12 - load_factor * 20)


def travel_load_score(travel_days_per_month: int) -> int:
    if travel_days_per_month <= 2:
        return 100
    if travel_days_per_month <= 4:
        return 85
    if travel_days_per_month <= 6:
        return 65
    if travel_days_per_month <= 8:
        return 45
    return 25


def academic_priority_score(priority_level: int) -> int:
    """Breaks (low priority) leave room; exam periods do not."""
    if priority_level <= 2:
        return 95
    if priority_level <= 3:
        return 70
    if priority_level <= 4:
        return 50
    return 30


def effective_available_hours(student: StudentProfile, windows: List[AvailabilityWindow]) -> Optional[float]:
    average = average_available_hours(windows)
    if average is None:
        return student.hours_per_week
    if student.hours_per_week is not None:
        return min(average, float(student.hours_per_week))
    return average


def score_temporal_fit(
    student: StudentProfile,
    listing: ListingProfile,
    window: ListingWindow,
    windows: List[AvailabilityWindow]
) -> SignalResult:
    details = {}
    factors = []

    required_hours = float(listing.hours_per_week or DEFAULT_REQUIRED_HOURS)
    available_hours = effective_available_hours(student, windows)
    if available_hours is None:
        available_hours = 0.0

    hours_score = hours_fit_score(available_hours, required_hours)
    details['hoursScore'] = hours_score
    details['availableHours'] = round(available_hours, 1)
    details['requiredHours'] = required_hours
    factors.append(hours_score)

    if windows:
        details['weeksConsidered'] = len(windows)
        details['minWeeklyHours'] = min(w.available_hours for w in windows)
        details['unavailableWeeks'] = sum(1 for w in windows if w.bucket == 'none')

    active = student.active_schedules
    sports = [s for s in active if s.is_sport]

    if sports:
        conflict_score = 100.0
        start_month = window.start.month
        for source in sports:
            if not source.is_in_season:
                continue
            if is_month_in_range(start_month, source.start_month, source.end_month):
                conflict_score = min(
                    conflict_score,
                    season_conflict_score(source.intensity_level, source.sport_hours_per_week)
                )
        details['seasonConflictScore'] = round(conflict_score)
        factors.append(conflict_score)

        travel_days = sum(s.travel_days_per_month or 0 for s in sports)
        travel_score = travel_load_score(travel_days)
        details['travelScore'] = travel_score
        details['travelDaysPerMonth'] = travel_days
        factors.append(travel_score)

    conflict_days = count_travel_conflict_days(active, window.start, window.end)
    if conflict_days > 0:
        ratio = conflict_days / window.days
        overlap_score = max(10.0, 100.0 - ratio * 200)
        details['travelConflictDays'] = conflict_days
        details['travelConflictScore'] = round(overlap_score)
        factors.append(overlap_score)

    academic = [s for s in active if s.schedule_type == 'academic']
    if academic:
        academic_score = 70
        for source in academic:
            if source.effective_start and source.effective_end \
                    and source.effective_start <= window.start <= source.effective_end:
                academic_score = academic_priority_score(source.priority_level or 3)
        details['academicScore'] = academic_score
        factors.append(academic_score)

    score = float(np.mean(factors)) if factors else 50.0
    return SignalResult(
        signal='temporal',
        score=min(100.0, max(0.0, round(score))),
        details=details
    )
