#!/usr/bin/env python3
"""
Response models for API endpoints.

Serialized with camelCase aliases.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecomputeBatchResponse(CamelModel):
    """Counters from one worker run."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {"processed": 12, "remaining": 3, "errors": 1, "batchSize": 13}
        }
    )

    processed: int = Field(ge=0)
    remaining: int = Field(ge=0)
    errors: int = Field(ge=0)
    batch_size: int = Field(ge=0)


class ScheduleOut(CamelModel):
    id: str
    schedule_type: str
    sport_season_id: Optional[str] = None
    academic_calendar_id: Optional[str] = None
    custom_blocks: List[Dict[str, Any]] = Field(default_factory=list)
    travel_conflicts: List[Dict[str, Any]] = Field(default_factory=list)
    available_hours_per_week: Optional[float] = None
    effective_start: Optional[str] = None
    effective_end: Optional[str] = None
    is_active: bool = True
    notes: Optional[str] = None
    created_at: Optional[str] = None

    # Joined sport season reference data
    sport_name: Optional[str] = None
    season_type: Optional[str] = None
    start_month: Optional[int] = None
    end_month: Optional[int] = None
    practice_hours_per_week: Optional[float] = None
    competition_hours_per_week: Optional[float] = None
    travel_days_per_month: Optional[int] = None
    intensity_level: Optional[int] = None

    # Joined academic calendar reference data
    term_name: Optional[str] = None
    term_type: Optional[str] = None
    calendar_start: Optional[str] = None
    calendar_end: Optional[str] = None


class SchedulesResponse(CamelModel):
    schedules: List[ScheduleOut]


class ScheduleCreatedResponse(CamelModel):
    schedule: ScheduleOut
    invalidated_scores: int = 0


class AvailabilityWindowOut(CamelModel):
    week_start: str
    week_end: str
    available_hours: float = Field(ge=0)
    total_committed_hours: float = Field(ge=0)
    sport_conflicts: List[str] = Field(default_factory=list)
    travel_conflicts: int = Field(ge=0)
    constraints: List[str] = Field(default_factory=list)
    overall_availability: str


class AvailabilityResponse(CamelModel):
    windows: List[AvailabilityWindowOut]
    start_date: str
    end_date: str


class SignalBreakdown(CamelModel):
    score: float = Field(ge=0, le=100)
    weight: float = Field(ge=0, le=1)
    contribution: float = Field(ge=0, le=100)
    details: Dict[str, Any] = Field(default_factory=dict)


class MatchScoreResponse(CamelModel):
    student_id: str
    listing_id: str
    score: float = Field(ge=0, le=100)
    signals: Dict[str, SignalBreakdown]
    computed_at: Optional[str] = None
    version: int = 1
    is_stale: bool = False


class MatchItem(CamelModel):
    student_id: str
    listing_id: str
    composite_score: float = Field(ge=0, le=100)
    signals: Dict[str, SignalBreakdown]
    is_stale: bool = False
    computed_at: Optional[str] = None
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    athletic_transfer_skills: List[Dict[str, Any]] = Field(default_factory=list)
    listing: Optional[Dict[str, Any]] = None
    student: Optional[Dict[str, Any]] = None


class MatchesResponse(CamelModel):
    success: bool = True
    count: int
    matches: List[MatchItem]


class EngineConfigResponse(CamelModel):
    tenant_id: Optional[str] = None
    signal_weights: Dict[str, float]
    min_score_threshold: float
    max_results_per_query: int
    enable_athletic_transfer: bool
    enable_schedule_matching: bool
    is_default: bool = False


class AttractivenessSignal(CamelModel):
    score: float = Field(ge=0, le=100)
    details: Dict[str, Any] = Field(default_factory=dict)


class ListingAttractivenessResponse(CamelModel):
    listing_id: str
    author_id: Optional[str] = None
    attractiveness_score: float = Field(ge=0, le=100)
    signals: Dict[str, AttractivenessSignal]
    sample_size: int = Field(ge=0)
    computed_at: Optional[str] = None
    is_stale: bool = False


class ListingScoreOut(CamelModel):
    listing_id: str
    score: float = Field(ge=0, le=100)


class CompanyAttractivenessResponse(CamelModel):
    author_id: str
    avg_score: int = Field(ge=0, le=100)
    listing_count: int = Field(ge=0)
    scores: List[ListingScoreOut] = Field(default_factory=list)
