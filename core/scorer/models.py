#!/usr/bin/env python3
"""
Scoring Models - Data structures consumed and produced by the scoring engine.

Profiles are plain snapshots loaded once per computation so that every
signal function stays pure.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import date, datetime

from core.availability import ScheduleSource

SIGNAL_NAMES = ('temporal', 'skills', 'sustainability', 'growth', 'trust', 'compensation')


@dataclass
class SkillRecord:
    name: str
    category: str = 'General'
    proficiency_level: int = 3


@dataclass
class ApplicationRecord:
    listing_id: Any
    status: str
    category: Optional[str] = None
    skills_required: List[str] = field(default_factory=list)
    applied_at: Optional[datetime] = None


@dataclass
class AthleticTransfer:
    professional_skill: str
    transfer_strength: float
    source_sport: str
    source_position: Optional[str] = None
    skill_category: str = 'General'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'professionalSkill': self.professional_skill,
            'transferStrength': self.transfer_strength,
            'sourceSport': self.source_sport,
            'sourcePosition': self.source_position,
            'skillCategory': self.skill_category,
        }


@dataclass
class StudentProfile:
    id: Any
    tenant_id: Any = None
    skills: List[SkillRecord] = field(default_factory=list)
    schedules: List[ScheduleSource] = field(default_factory=list)
    # Declared weekly capacity from the public profile, if any
    hours_per_week: Optional[float] = None
    gpa: Optional[str] = None
    application_history: List[ApplicationRecord] = field(default_factory=list)
    completion_rate: float = 0.0
    on_time_rate: float = 0.0
    avg_rating: Optional[float] = None
    rating_count: int = 0
    active_concurrent_listings: int = 0
    joined_at: Optional[datetime] = None
    athletic_transfers: List[AthleticTransfer] = field(default_factory=list)

    @property
    def active_schedules(self) -> List[ScheduleSource]:
        return [s for s in self.schedules if s.is_active]


@dataclass
class ListingProfile:
    id: Any
    title: str = ''
    tenant_id: Any = None
    category: Optional[str] = None
    skills_required: List[str] = field(default_factory=list)
    hours_per_week: Optional[float] = None
    duration_weeks: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    remote_allowed: bool = False
    compensation: Optional[str] = None
    is_paid: bool = False
    company_name: Optional[str] = None
    author_id: Any = None
    description: Optional[str] = None
    max_students: int = 1
    students_accepted: int = 0


@dataclass
class ListingWindow:
    """Date range the listing is active over, after defaults are applied."""
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass
class SignalResult:
    signal: str
    score: float
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CompositeScore:
    """Composite score with per-signal breakdown, as served to readers."""
    score: float
    signals: Dict[str, Dict[str, Any]]
    computed_at: Optional[datetime] = None
    version: int = 1
    is_stale: bool = False
    # True when served straight from the cache without computing
    from_cache: bool = False

    @classmethod
    def from_row(cls, row, from_cache: bool = False) -> "CompositeScore":
        return cls(
            score=row.composite_score,
            signals=row.signal_breakdown or {},
            computed_at=row.computed_at,
            version=row.version,
            is_stale=bool(row.is_stale),
            from_cache=from_cache
        )


@dataclass
class MatchResult:
    """One ranked (student, listing) pair for list endpoints."""
    student_id: Any
    listing_id: Any
    composite_score: float
    signals: Dict[str, Dict[str, Any]]
    is_stale: bool = False
    computed_at: Optional[datetime] = None
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    athletic_transfer_skills: List[Dict[str, Any]] = field(default_factory=list)
    listing: Optional[Dict[str, Any]] = None
    student: Optional[Dict[str, Any]] = None
