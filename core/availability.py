#!/usr/bin/env python3
"""
Availability Calculator - weekly availability windows from schedule sources.

Turns a student's schedule entries (sport seasons, custom/work time blocks,
travel conflicts, explicit hour overrides) into one AvailabilityWindow per
Monday-aligned calendar week. Pure and deterministic: no I/O, no clock.

Rules per week:
1. Baseline is the override of the most recently effective active entry,
   otherwise the configured baseline (40h).
2. In-season sport entries subtract practice + competition hours.
3. Recurring weekday blocks subtract once per week, dated blocks only in
   the week that contains the date.
4. Any travel conflict touching the week forces the week to 0.
5. Clamp to >= 0, round to one decimal, bucket.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Iterable, Iterator, Tuple, Any

import numpy as np
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_HOURS = 40.0
TRAVEL_PREFIX = "Travel:"

HIGH_THRESHOLD = 30.0
MEDIUM_THRESHOLD = 15.0

WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')
WEEKDAY_ALIASES = {name[:3]: name for name in WEEKDAYS}

IN_SEASON_TYPES = {'in_season', 'in-season', 'inseason', 'regular', 'postseason', 'preseason'}
OFF_SEASON_TYPES = {'off_season', 'off-season', 'offseason'}


@dataclass
class TimeBlock:
    day: str
    start_time: str
    end_time: str
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict) -> "TimeBlock":
        return cls(
            day=str(raw.get('day', '')),
            start_time=str(raw.get('start_time') or raw.get('startTime') or ''),
            end_time=str(raw.get('end_time') or raw.get('endTime') or ''),
            label=raw.get('label')
        )

    @property
    def duration_hours(self) -> Optional[float]:
        start = parse_time_to_hours(self.start_time)
        end = parse_time_to_hours(self.end_time)
        if start is None or end is None:
            return None
        return end - start


@dataclass
class TravelConflict:
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict) -> Optional["TravelConflict"]:
        start = to_date(raw.get('start_date') or raw.get('startDate'))
        end = to_date(raw.get('end_date') or raw.get('endDate'))
        if start is None or end is None:
            return None
        if end < start:
            start, end = end, start
        return cls(start_date=start, end_date=end, reason=raw.get('reason'))

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass
class ScheduleSource:
    """
    Plain view of one schedule entry joined with its sport season.

    Built from the ORM row by the scoring loaders and the web layer so that
    the calculator never touches a database session.
    """
    schedule_type: str = 'custom'
    is_active: bool = True
    sport_name: Optional[str] = None
    season_type: Optional[str] = None
    start_month: Optional[int] = None
    end_month: Optional[int] = None
    practice_hours_per_week: float = 0.0
    competition_hours_per_week: float = 0.0
    travel_days_per_month: int = 0
    intensity_level: int = 3
    # Academic calendar priority (1 = break, 5 = exams)
    priority_level: Optional[int] = None
    custom_blocks: List[TimeBlock] = field(default_factory=list)
    travel_conflicts: List[TravelConflict] = field(default_factory=list)
    available_hours_per_week: Optional[float] = None
    effective_start: Optional[date] = None
    effective_end: Optional[date] = None
    created_at: Optional[datetime] = None
    id: Any = None

    @classmethod
    def from_entry(cls, entry) -> "ScheduleSource":
        season = getattr(entry, 'sport_season', None)
        calendar = getattr(entry, 'academic_calendar', None)

        travel = []
        for raw in entry.travel_conflicts or []:
            conflict = TravelConflict.from_dict(raw)
            if conflict is None:
                logger.debug(f"Skipping malformed travel conflict on schedule {entry.id}: {raw}")
                continue
            travel.append(conflict)

        source = cls(
            id=entry.id,
            schedule_type=entry.schedule_type,
            is_active=bool(entry.is_active),
            custom_blocks=[TimeBlock.from_dict(b) for b in (entry.custom_blocks or [])],
            travel_conflicts=travel,
            available_hours_per_week=entry.available_hours_per_week,
            effective_start=to_date(entry.effective_start),
            effective_end=to_date(entry.effective_end),
            created_at=entry.created_at,
        )

        if season is not None:
            source.sport_name = season.sport_name
            source.season_type = season.season_type
            source.start_month = season.start_month
            source.end_month = season.end_month
            source.practice_hours_per_week = float(season.practice_hours_per_week or 0)
            source.competition_hours_per_week = float(season.competition_hours_per_week or 0)
            source.travel_days_per_month = int(season.travel_days_per_month or 0)
            source.intensity_level = int(season.intensity_level or 3)

        if calendar is not None:
            source.priority_level = calendar.priority_level
            # Academic entries without explicit dates inherit the term dates
            if source.effective_start is None:
                source.effective_start = to_date(calendar.start_date)
            if source.effective_end is None:
                source.effective_end = to_date(calendar.end_date)

        return source

    @property
    def is_in_season(self) -> bool:
        return (self.season_type or 'in_season').lower() in IN_SEASON_TYPES

    @property
    def is_sport(self) -> bool:
        return self.schedule_type == 'sport' and self.start_month is not None and self.end_month is not None

    @property
    def sport_hours_per_week(self) -> float:
        return (self.practice_hours_per_week or 0.0) + (self.competition_hours_per_week or 0.0)

    def applies_to(self, start: date, end: date) -> bool:
        """Active and effective for at least one day of [start, end]."""
        if not self.is_active:
            return False
        if self.effective_start and self.effective_start > end:
            return False
        if self.effective_end and self.effective_end < start:
            return False
        return True

    def season_overlaps(self, start: date, end: date) -> bool:
        if not self.is_sport:
            return False
        for month in _months_between(start, end):
            if is_month_in_range(month, self.start_month, self.end_month):
                return True
        return False


@dataclass
class AvailabilityWindow:
    week_start: date
    week_end: date
    available_hours: float
    baseline_hours: float
    constraints: List[str] = field(default_factory=list)
    sport_conflicts: int = 0
    bucket: str = 'none'

    @property
    def travel_constraints(self) -> List[str]:
        return [c for c in self.constraints if c.startswith(TRAVEL_PREFIX)]

    @property
    def scheduling_constraints(self) -> List[str]:
        return [c for c in self.constraints if not c.startswith(TRAVEL_PREFIX)]

    @property
    def committed_hours(self) -> float:
        return round(max(0.0, self.baseline_hours - self.available_hours), 1)

    @property
    def has_travel(self) -> bool:
        return bool(self.travel_constraints)


def compute_availability(
    entries: Iterable[ScheduleSource],
    start_date,
    end_date,
    baseline_hours: float = DEFAULT_BASELINE_HOURS
) -> List[AvailabilityWindow]:
    """
    Compute one window per calendar week intersecting [start_date, end_date].

    Args:
        entries: Schedule sources for a single student
        start_date: First day of the range (date, datetime or ISO string)
        end_date: Last day of the range, inclusive
        baseline_hours: Weekly hours when no override applies

    Returns:
        Windows ordered by week_start. Empty if start_date > end_date.
    """
    start = to_date(start_date)
    end = to_date(end_date)
    if start is None or end is None:
        raise ValueError("start_date and end_date are required")
    if start > end:
        return []

    sources = list(entries)
    return [
        _compute_week(sources, week_start, week_end, baseline_hours)
        for week_start, week_end in iter_weeks(start, end)
    ]


def _compute_week(
    sources: List[ScheduleSource],
    week_start: date,
    week_end: date,
    default_baseline: float
) -> AvailabilityWindow:
    applicable = [s for s in sources if s.applies_to(week_start, week_end)]

    baseline = _resolve_baseline(applicable, default_baseline)
    available = baseline
    constraints: List[str] = []
    sport_conflicts = 0

    for source in applicable:
        if source.season_overlaps(week_start, week_end):
            name = source.sport_name or 'Sport'
            if source.is_in_season:
                available -= source.sport_hours_per_week
                sport_conflicts += 1
                constraints.append(f"{name} in-season (intensity {source.intensity_level})")
            elif (source.season_type or '').lower() in OFF_SEASON_TYPES:
                constraints.append(f"{name} off-season")

        for block in source.custom_blocks:
            if not _block_in_week(block, week_start, week_end):
                continue
            hours = block.duration_hours
            if hours is None or hours <= 0:
                continue
            available -= hours
            label = block.label or source.schedule_type
            constraints.append(f"{label}: {_format_hours(hours)}h")

    travel = []
    for source in applicable:
        for conflict in source.travel_conflicts:
            if conflict.overlaps(week_start, week_end):
                travel.append(f"{TRAVEL_PREFIX} {conflict.reason or 'Away'}")

    if travel:
        available = 0.0
        constraints.extend(travel)

    available = round(max(0.0, available), 1)

    return AvailabilityWindow(
        week_start=week_start,
        week_end=week_end,
        available_hours=available,
        baseline_hours=baseline,
        constraints=constraints,
        sport_conflicts=sport_conflicts,
        bucket=bucket_for_hours(available)
    )


def _resolve_baseline(sources: List[ScheduleSource], default_baseline: float) -> float:
    overrides = [s for s in sources if s.available_hours_per_week is not None]
    if not overrides:
        return float(default_baseline)

    # Most recently effective wins; created_at breaks ties
    def sort_key(s: ScheduleSource):
        return (
            s.effective_start or date.min,
            s.created_at.timestamp() if s.created_at else 0.0
        )

    latest = max(overrides, key=sort_key)
    return max(0.0, float(latest.available_hours_per_week))


def _block_in_week(block: TimeBlock, week_start: date, week_end: date) -> bool:
    day = (block.day or '').strip().lower()
    if not day:
        return False
    if day in WEEKDAYS or day in WEEKDAY_ALIASES:
        return True
    block_date = to_date(day)
    if block_date is None:
        return False
    return week_start <= block_date <= week_end


def _format_hours(hours: float) -> str:
    rounded = round(hours, 1)
    return str(int(rounded)) if rounded == int(rounded) else str(rounded)


def bucket_for_hours(hours: float) -> str:
    if hours >= HIGH_THRESHOLD:
        return 'high'
    if hours >= MEDIUM_THRESHOLD:
        return 'medium'
    if hours > 0:
        return 'low'
    return 'none'


def average_available_hours(windows: List[AvailabilityWindow]) -> Optional[float]:
    if not windows:
        return None
    return round(float(np.mean([w.available_hours for w in windows])), 1)


def count_travel_conflict_days(entries: Iterable[ScheduleSource], start_date, end_date) -> int:
    """Days (inclusive) in [start_date, end_date] covered by active travel conflicts."""
    start = to_date(start_date)
    end = to_date(end_date)
    if start is None or end is None or start > end:
        return 0

    days = 0
    for source in entries:
        if not source.is_active:
            continue
        for conflict in source.travel_conflicts:
            overlap_start = max(start, conflict.start_date)
            overlap_end = min(end, conflict.end_date)
            if overlap_end >= overlap_start:
                days += (overlap_end - overlap_start).days + 1
    return days


def iter_weeks(start: date, end: date) -> Iterator[Tuple[date, date]]:
    week_start = start - timedelta(days=start.weekday())
    while week_start <= end:
        yield week_start, week_start + timedelta(days=6)
        week_start += timedelta(days=7)


def is_month_in_range(month: int, start: int, end: int) -> bool:
    """Inclusive month range; wraps around the year (e.g. Oct-Feb)."""
    if start <= end:
        return start <= month <= end
    return month >= start or month <= end


def parse_time_to_hours(value: str) -> Optional[float]:
    """'HH:MM' -> fractional hours. None when unparseable."""
    if not value:
        return None
    parts = value.strip().split(':')
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None
    if not (0 <= hours <= 24 and 0 <= minutes < 60):
        return None
    return hours + minutes / 60.0


def to_date(value) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        return None


def _months_between(start: date, end: date) -> List[int]:
    months = []
    current = date(start.year, start.month, 1)
    while current <= end:
        months.append(current.month)
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return months
