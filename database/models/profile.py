import uuid

from sqlalchemy import (
    Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, Date, Uuid, Index
)
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class Student(Base):
    """
    Read-side view of a student account.

    Owned by the surrounding application; the match engine only reads it.
    """
    __tablename__ = 'students'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)
    first_name = Column(Text)
    last_name = Column(Text)
    email = Column(Text)
    university = Column(Text)
    gpa = Column(Text)
    # Self-declared weekly capacity from the public profile
    hours_per_week = Column(Float)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    skills = relationship("StudentSkill", back_populates="student", cascade="all, delete-orphan")
    schedules = relationship("ScheduleEntry", back_populates="student", cascade="all, delete-orphan")


class StudentSkill(Base):
    __tablename__ = 'student_skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default='General')
    proficiency_level = Column(Integer, nullable=False, default=3)  # 1-5

    student = relationship("Student", back_populates="skills")

    __table_args__ = (
        Index('idx_student_skills_student', 'student_id'),
    )


class Listing(Base):
    """Project listing posted by a corporate partner."""
    __tablename__ = 'listings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)
    author_id = Column(Uuid, nullable=True)
    company_name = Column(Text)

    title = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(Text)
    skills_required = Column(JSONType, nullable=False, default=list)
    hours_per_week = Column(Float)
    duration_weeks = Column(Integer)
    start_date = Column(Date)
    end_date = Column(Date)
    remote_allowed = Column(Boolean, nullable=False, default=False)
    compensation = Column(Text)
    is_paid = Column(Boolean, nullable=False, default=False)
    status = Column(Text, nullable=False, default='published')  # draft|published|closed
    max_students = Column(Integer, nullable=False, default=1)
    students_accepted = Column(Integer, nullable=False, default=0)
    published_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_listings_tenant_status', 'tenant_id', 'status'),
    )


class ProjectApplication(Base):
    __tablename__ = 'project_applications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    listing_id = Column(Uuid, ForeignKey('listings.id', ondelete='CASCADE'), nullable=False)
    status = Column(Text, nullable=False, default='pending')  # pending|accepted|completed|declined
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    listing = relationship("Listing")

    __table_args__ = (
        Index('idx_project_applications_student', 'student_id'),
    )


class StudentRating(Base):
    __tablename__ = 'student_ratings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)


class AthleticSkillMapping(Base):
    """Maps a sport (and optionally a position) to a transferable professional skill."""
    __tablename__ = 'athletic_skill_mappings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sport_name = Column(Text, nullable=False)
    position = Column(Text, nullable=True)
    professional_skill = Column(Text, nullable=False)
    transfer_strength = Column(Float, nullable=False, default=0.5)
    skill_category = Column(Text, nullable=False, default='General')
    description = Column(Text)

    __table_args__ = (
        Index('idx_athletic_skill_mappings_sport', 'sport_name'),
    )
