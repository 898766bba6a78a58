#!/usr/bin/env python3
"""
Trust / Reliability - the student's track record.

New students get a neutral-positive score instead of being penalised for
having no history. Otherwise: completion 35%, on-time 25%, ratings 25%,
tenure 15%.
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from core.scorer.models import StudentProfile, SignalResult

logger = logging.getLogger(__name__)

NEW_USER_SCORE = 55
MIN_HISTORY_THRESHOLD = 3
MAX_TENURE_DAYS = 365


def _completion_score(student: StudentProfile) -> int:
    accepted = [h for h in student.application_history if h.status in ('accepted', 'completed')]
    completed = [h for h in accepted if h.status == 'completed']

    if len(accepted) >= MIN_HISTORY_THRESHOLD:
        rate = student.completion_rate
        if rate >= 0.9:
            return 100
        if rate >= 0.75:
            return 85
        if rate >= 0.5:
            return 65
        return 35
    if accepted:
        return 75 if completed else 50
    return 55


def _on_time_score(rate: float) -> int:
    if rate <= 0:
        return 60
    if rate >= 0.9:
        return 100
    if rate >= 0.75:
        return 80
    if rate >= 0.5:
        return 55
    return 30


def _rating_score(avg_rating: Optional[float], count: int) -> int:
    if avg_rating is None or count <= 0:
        return 55
    if avg_rating >= 4.5:
        score = 100
    elif avg_rating >= 4.0:
        score = 85
    elif avg_rating >= 3.5:
        score = 70
    elif avg_rating >= 3.0:
        score = 50
    else:
        score = 25
    if count < 3:
        # Few ratings: regress toward neutral
        score = round(score * 0.85 + 55 * 0.15)
    return score


def _days_since(joined_at: Optional[datetime], now: datetime) -> float:
    if joined_at is None:
        return 0.0
    if joined_at.tzinfo is None:
        joined_at = joined_at.replace(tzinfo=timezone.utc)
    return max(0.0, (now - joined_at).total_seconds() / 86400)


def score_trust_reliability(student: StudentProfile, now: datetime) -> SignalResult:
    if not student.application_history:
        return SignalResult(
            signal='trust',
            score=NEW_USER_SCORE,
            details={'isNewUser': True, 'note': 'New user, no history to evaluate'}
        )

    completion = _completion_score(student)
    on_time = _on_time_score(student.on_time_rate)
    rating = _rating_score(student.avg_rating, student.rating_count)

    days = _days_since(student.joined_at, now)
    tenure = round(30 + min(days / MAX_TENURE_DAYS, 1.0) * 40)

    score = round(completion * 0.35 + on_time * 0.25 + rating * 0.25 + tenure * 0.15)

    return SignalResult(
        signal='trust',
        score=min(100, max(0, score)),
        details={
            'completionScore': completion,
            'completionRate': round(student.completion_rate, 2),
            'onTimeScore': on_time,
            'ratingScore': rating,
            'avgRating': student.avg_rating,
            'ratingCount': student.rating_count,
            'tenureScore': tenure,
            'daysSinceJoined': round(days),
        }
    )
