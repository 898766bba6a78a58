import uuid

from sqlalchemy import (
    Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, Date, Uuid, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class SportSeason(Base):
    """Reference data describing one season of a sport."""
    __tablename__ = 'sport_seasons'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sport_name = Column(Text, nullable=False)
    season_type = Column(Text, nullable=False, default='in_season')  # in_season|off_season
    start_month = Column(Integer, nullable=False)
    end_month = Column(Integer, nullable=False)
    practice_hours_per_week = Column(Float, nullable=False, default=20)
    competition_hours_per_week = Column(Float, nullable=False, default=5)
    travel_days_per_month = Column(Integer, nullable=False, default=2)
    intensity_level = Column(Integer, nullable=False, default=3)
    division = Column(Text, default='D1')
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint('start_month BETWEEN 1 AND 12', name='chk_sport_seasons_start_month'),
        CheckConstraint('end_month BETWEEN 1 AND 12', name='chk_sport_seasons_end_month'),
        CheckConstraint('intensity_level BETWEEN 1 AND 5', name='chk_sport_seasons_intensity'),
        Index('idx_sport_seasons_sport_name', 'sport_name'),
    )


class AcademicCalendar(Base):
    __tablename__ = 'academic_calendars'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)
    term_name = Column(Text, nullable=False)
    term_type = Column(Text, nullable=False, default='semester')  # semester|quarter|break|summer
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_break = Column(Boolean, nullable=False, default=False)
    priority_level = Column(Integer, nullable=False, default=3)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)


class ScheduleEntry(Base):
    """
    One schedule source for a student.

    custom_blocks format:
        [{"day": "monday" | "2026-03-02", "start_time": "09:00", "end_time": "12:00", "label": "Lab"}]
    travel_conflicts format:
        [{"start_date": "2026-10-15", "end_date": "2026-10-17", "reason": "Away game"}]
    """
    __tablename__ = 'student_schedules'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    sport_season_id = Column(Uuid, ForeignKey('sport_seasons.id', ondelete='SET NULL'), nullable=True)
    academic_calendar_id = Column(Uuid, ForeignKey('academic_calendars.id', ondelete='SET NULL'), nullable=True)
    schedule_type = Column(Text, nullable=False, default='sport')  # sport|academic|custom|work

    custom_blocks = Column(JSONType, nullable=False, default=list)
    travel_conflicts = Column(JSONType, nullable=False, default=list)
    available_hours_per_week = Column(Float, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    effective_start = Column(Date)
    effective_end = Column(Date)
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    student = relationship("Student", back_populates="schedules")
    sport_season = relationship("SportSeason")
    academic_calendar = relationship("AcademicCalendar")

    __table_args__ = (
        Index('idx_student_schedules_student', 'student_id'),
        Index('idx_student_schedules_active', 'student_id', 'is_active'),
    )
