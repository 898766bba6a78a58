#!/usr/bin/env python3
"""
Schedule service - schedule entries and availability for the current student.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from core.availability import ScheduleSource, compute_availability
from core.config_loader import AppConfig
from core.invalidation import InvalidationService
from database.models import ScheduleEntry
from database.repository import MatchEngineRepository

from ..auth import SessionUser
from ..exceptions import NotFoundException, ScheduleValidationException
from ..models.requests import ScheduleCreateRequest
from ..models.responses import (
    ScheduleOut,
    AvailabilityWindowOut,
    AvailabilityResponse
)
from ..utils import safe_float, safe_id, safe_iso

logger = logging.getLogger(__name__)

DEFAULT_AVAILABILITY_MONTHS = 6
# Upper bound on the range of a single availability request
MAX_AVAILABILITY_WEEKS = 104


def schedule_to_out(entry: ScheduleEntry) -> ScheduleOut:
    season = entry.sport_season
    calendar = entry.academic_calendar
    out = ScheduleOut(
        id=str(entry.id),
        schedule_type=entry.schedule_type,
        sport_season_id=safe_id(entry.sport_season_id),
        academic_calendar_id=safe_id(entry.academic_calendar_id),
        custom_blocks=list(entry.custom_blocks or []),
        travel_conflicts=list(entry.travel_conflicts or []),
        available_hours_per_week=safe_float(entry.available_hours_per_week),
        effective_start=safe_iso(entry.effective_start),
        effective_end=safe_iso(entry.effective_end),
        is_active=bool(entry.is_active),
        notes=entry.notes,
        created_at=safe_iso(entry.created_at)
    )
    if season is not None:
        out.sport_name = season.sport_name
        out.season_type = season.season_type
        out.start_month = season.start_month
        out.end_month = season.end_month
        out.practice_hours_per_week = safe_float(season.practice_hours_per_week)
        out.competition_hours_per_week = safe_float(season.competition_hours_per_week)
        out.travel_days_per_month = season.travel_days_per_month
        out.intensity_level = season.intensity_level
    if calendar is not None:
        out.term_name = calendar.term_name
        out.term_type = calendar.term_type
        out.calendar_start = safe_iso(calendar.start_date)
        out.calendar_end = safe_iso(calendar.end_date)
    return out


class ScheduleService:
    """Service for schedule entries and availability windows."""

    def __init__(self, repo: MatchEngineRepository, config: AppConfig):
        self.repo = repo
        self.config = config

    def list_schedules(self, user: SessionUser) -> List[ScheduleOut]:
        entries = self.repo.schedules.list_for_student(user.user_id)
        return [schedule_to_out(e) for e in entries]

    def create_schedule(self, user: SessionUser, request: ScheduleCreateRequest) -> Tuple[ScheduleOut, int]:
        """
        Persist a schedule entry and invalidate the student's scores.

        Returns:
            (created schedule, number of cached scores flagged stale)
        """
        if self.repo.profiles.get_student(user.user_id) is None:
            raise NotFoundException(f"Student {user.user_id} not found")

        if request.sport_season_id and self.repo.schedules.get_sport_season(request.sport_season_id) is None:
            raise ScheduleValidationException(f"Unknown sport season: {request.sport_season_id}")
        if request.academic_calendar_id and self.repo.schedules.get_academic_calendar(request.academic_calendar_id) is None:
            raise ScheduleValidationException(f"Unknown academic calendar: {request.academic_calendar_id}")

        entry = self.repo.schedules.create(
            user.user_id,
            sport_season_id=request.sport_season_id,
            academic_calendar_id=request.academic_calendar_id,
            schedule_type=request.schedule_type,
            custom_blocks=[b.model_dump(exclude_none=True) for b in request.custom_blocks],
            travel_conflicts=[t.model_dump(mode='json', exclude_none=True) for t in request.travel_conflicts],
            available_hours_per_week=request.available_hours_per_week,
            effective_start=request.effective_start,
            effective_end=request.effective_end,
            notes=request.notes,
            is_active=True
        )

        invalidation = InvalidationService(self.repo, default_priority=self.config.worker.default_priority)
        flagged = invalidation.invalidate_student_scores(
            user.user_id, 'schedule_change', tenant_id=user.tenant_id
        )
        self.repo.commit()

        entry = self.repo.schedules.get(entry.id)
        logger.info(f"Created {request.schedule_type} schedule {entry.id} for student {user.user_id}")
        return schedule_to_out(entry), flagged

    def get_availability(
        self,
        user: SessionUser,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None
    ) -> AvailabilityResponse:
        today = today or date.today()
        start = start_date or today
        end = end_date or (start + relativedelta(months=DEFAULT_AVAILABILITY_MONTHS))

        if end < start:
            raise ScheduleValidationException("endDate must not be before startDate")
        if (end - start).days > MAX_AVAILABILITY_WEEKS * 7:
            raise ScheduleValidationException(f"Date range may span at most {MAX_AVAILABILITY_WEEKS} weeks")

        sources = [
            ScheduleSource.from_entry(e)
            for e in self.repo.schedules.list_for_student(user.user_id, active_only=True)
        ]
        windows = compute_availability(
            sources, start, end,
            baseline_hours=self.config.matching.baseline_hours_per_week
        )

        return AvailabilityResponse(
            windows=[
                AvailabilityWindowOut(
                    week_start=w.week_start.isoformat(),
                    week_end=w.week_end.isoformat(),
                    available_hours=w.available_hours,
                    total_committed_hours=w.committed_hours,
                    sport_conflicts=w.scheduling_constraints,
                    travel_conflicts=len(w.travel_constraints),
                    constraints=w.constraints,
                    overall_availability=w.bucket
                )
                for w in windows
            ],
            start_date=start.isoformat(),
            end_date=end.isoformat()
        )
