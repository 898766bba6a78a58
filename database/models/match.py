import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class MatchScore(Base):
    """
    Latest computed score for one (student, listing) pair.

    Tracks:
    - Composite score (0-100) and per-signal breakdown
    - Staleness flag set by invalidation, cleared by recomputation
    - Engine version used for the computation
    """
    __tablename__ = 'match_scores'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    listing_id = Column(Uuid, ForeignKey('listings.id', ondelete='CASCADE'), nullable=False)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)

    composite_score = Column(Float, nullable=False, default=0.0)
    signal_breakdown = Column(JSONType, nullable=False, default=dict)

    is_stale = Column(Boolean, nullable=False, default=False)
    computation_time_ms = Column(Integer)
    version = Column(Integer, nullable=False, default=1)

    computed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    history = relationship("MatchScoreHistory", back_populates="match_score", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('student_id', 'listing_id', name='uq_match_scores_student_listing'),
        Index('idx_match_scores_listing', 'listing_id'),
        Index('idx_match_scores_tenant', 'tenant_id'),
        Index('idx_match_scores_stale', 'student_id', 'is_stale'),
        Index('idx_match_scores_composite', 'composite_score'),
    )


class MatchScoreHistory(Base):
    """Audit trail of score changes for a cached pair."""
    __tablename__ = 'match_score_history'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    match_score_id = Column(Uuid, ForeignKey('match_scores.id', ondelete='CASCADE'), nullable=False)
    old_score = Column(Float, nullable=True)
    new_score = Column(Float, nullable=False)
    old_breakdown = Column(JSONType, nullable=True)
    new_breakdown = Column(JSONType, nullable=False, default=dict)
    change_reason = Column(Text)  # initial|recomputation
    changed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    match_score = relationship("MatchScore", back_populates="history")

    __table_args__ = (
        Index('idx_match_score_history_score', 'match_score_id'),
    )
