#!/usr/bin/env python3
"""
Request models for API endpoints.

Bodies use camelCase on the wire; Python attributes stay snake_case.
"""

import re
import uuid
from datetime import date
from typing import List, Optional, Literal, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.availability import WEEKDAYS, WEEKDAY_ALIASES, parse_time_to_hours, to_date
from core.scorer.models import SIGNAL_NAMES

TIME_PATTERN = re.compile(r'^\d{1,2}:\d{2}$')


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeBlockIn(CamelModel):
    """Recurring (weekday name) or one-off (ISO date) time block."""
    day: str = Field(..., min_length=1, max_length=32)
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    label: Optional[str] = Field(None, max_length=120)

    @field_validator('day')
    @classmethod
    def _valid_day(cls, v: str) -> str:
        day = v.strip().lower()
        if day in WEEKDAYS or day in WEEKDAY_ALIASES:
            return day
        if to_date(day) is None:
            raise ValueError("day must be a weekday name or an ISO date")
        return day

    @field_validator('start_time', 'end_time')
    @classmethod
    def _valid_time(cls, v: str) -> str:
        if not TIME_PATTERN.match(v.strip()) or parse_time_to_hours(v) is None:
            raise ValueError("time must be HH:MM")
        return v.strip()

    @model_validator(mode='after')
    def _end_after_start(self):
        if parse_time_to_hours(self.end_time) <= parse_time_to_hours(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TravelConflictIn(CamelModel):
    start_date: date
    end_date: date
    reason: Optional[str] = Field(None, max_length=200)

    @model_validator(mode='after')
    def _ordered(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ScheduleCreateRequest(CamelModel):
    """Request to add a schedule entry for the current student."""
    sport_season_id: Optional[uuid.UUID] = None
    academic_calendar_id: Optional[uuid.UUID] = None
    schedule_type: Literal['sport', 'academic', 'custom', 'work'] = 'sport'
    custom_blocks: List[TimeBlockIn] = Field(default_factory=list, max_length=100)
    available_hours_per_week: Optional[float] = Field(None, ge=0, le=168)
    travel_conflicts: List[TravelConflictIn] = Field(default_factory=list, max_length=100)
    effective_start: Optional[date] = None
    effective_end: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode='after')
    def _effective_range(self):
        if self.effective_start and self.effective_end and self.effective_end < self.effective_start:
            raise ValueError("effective_end must not be before effective_start")
        return self


class EngineConfigUpdate(CamelModel):
    """Request to update the tenant's match engine configuration."""
    signal_weights: Optional[Dict[str, float]] = None
    min_score_threshold: Optional[float] = Field(None, ge=0, le=100)
    max_results_per_query: Optional[int] = Field(None, ge=1, le=500)
    enable_athletic_transfer: Optional[bool] = None
    enable_schedule_matching: Optional[bool] = None

    @field_validator('signal_weights')
    @classmethod
    def _known_weights(cls, v: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
        if v is None:
            return v
        unknown = sorted(set(v) - set(SIGNAL_NAMES))
        if unknown:
            raise ValueError(f"unknown signals: {', '.join(unknown)}")
        if any(weight < 0 for weight in v.values()):
            raise ValueError("weights must be non-negative")
        return v
