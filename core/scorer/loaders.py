#!/usr/bin/env python3
"""
Profile Loaders - Build scoring snapshots from the database.

All reads for one computation happen here; signal modules never see a
Session.
"""

import logging
from datetime import date, timedelta
from typing import Any, List, Optional

from database.repository import MatchEngineRepository
from core.availability import ScheduleSource, to_date
from core.exceptions import StudentNotFoundError, ListingNotFoundError
from core.scorer.models import (
    StudentProfile, ListingProfile, ListingWindow, SkillRecord,
    ApplicationRecord, AthleticTransfer
)

logger = logging.getLogger(__name__)

ACCEPTED_STATUSES = ('accepted', 'completed')


def load_student_profile(
    repo: MatchEngineRepository,
    student_id: Any,
    include_transfers: bool = True
) -> StudentProfile:
    student = repo.profiles.get_student(student_id)
    if student is None:
        raise StudentNotFoundError(student_id)

    skills = [
        SkillRecord(
            name=s.name,
            category=s.category or 'General',
            proficiency_level=int(s.proficiency_level or 3)
        )
        for s in student.skills
    ]

    schedules = [
        ScheduleSource.from_entry(entry)
        for entry in repo.schedules.list_for_student(student_id, active_only=True)
    ]

    history = []
    for app in repo.profiles.get_application_history(student_id):
        listing = app.listing
        history.append(ApplicationRecord(
            listing_id=app.listing_id,
            status=app.status,
            category=listing.category if listing else None,
            skills_required=list(listing.skills_required or []) if listing else [],
            applied_at=app.created_at
        ))

    accepted = [h for h in history if h.status in ACCEPTED_STATUSES]
    completed = [h for h in history if h.status == 'completed']
    completion_rate = len(completed) / len(accepted) if accepted else 0.0

    avg_rating, rating_count = repo.profiles.get_rating_stats(student_id)

    transfers: List[AthleticTransfer] = []
    if include_transfers:
        transfers = load_athletic_transfers(repo, schedules)

    return StudentProfile(
        id=student.id,
        tenant_id=student.tenant_id,
        skills=skills,
        schedules=schedules,
        hours_per_week=student.hours_per_week,
        gpa=student.gpa,
        application_history=history,
        completion_rate=completion_rate,
        # No delivery tracking yet; completion doubles as on-time rate
        on_time_rate=completion_rate,
        avg_rating=avg_rating,
        rating_count=rating_count,
        active_concurrent_listings=repo.profiles.count_concurrent_accepted(student_id),
        joined_at=student.created_at,
        athletic_transfers=transfers
    )


def load_athletic_transfers(repo: MatchEngineRepository, schedules: List[ScheduleSource]) -> List[AthleticTransfer]:
    sport_names = sorted({s.sport_name for s in schedules if s.is_active and s.sport_name})
    if not sport_names:
        return []

    return [
        AthleticTransfer(
            professional_skill=m.professional_skill,
            transfer_strength=float(m.transfer_strength),
            source_sport=m.sport_name,
            source_position=m.position,
            skill_category=m.skill_category or 'General'
        )
        for m in repo.profiles.get_athletic_transfers(sport_names)
    ]


def load_listing_profile(repo: MatchEngineRepository, listing_id: Any) -> ListingProfile:
    listing = repo.profiles.get_listing(listing_id)
    if listing is None:
        raise ListingNotFoundError(listing_id)

    return ListingProfile(
        id=listing.id,
        title=listing.title,
        tenant_id=listing.tenant_id,
        category=listing.category,
        skills_required=list(listing.skills_required or []),
        hours_per_week=listing.hours_per_week,
        duration_weeks=listing.duration_weeks,
        start_date=to_date(listing.start_date),
        end_date=to_date(listing.end_date),
        remote_allowed=bool(listing.remote_allowed),
        compensation=listing.compensation,
        is_paid=bool(listing.is_paid),
        company_name=listing.company_name,
        author_id=listing.author_id,
        description=listing.description,
        max_students=listing.max_students or 1,
        students_accepted=listing.students_accepted or 0
    )


def resolve_listing_window(
    listing: ListingProfile,
    today: date,
    default_horizon_weeks: int = 12
) -> ListingWindow:
    """
    Active window of the listing.

    Explicit dates win; otherwise start + duration_weeks; otherwise a fixed
    horizon from today.
    """
    start: Optional[date] = listing.start_date or today
    end: Optional[date] = listing.end_date

    if end is None:
        weeks = listing.duration_weeks or default_horizon_weeks
        end = start + timedelta(weeks=weeks) - timedelta(days=1)

    if end < start:
        start, end = end, start

    return ListingWindow(start=start, end=end)
