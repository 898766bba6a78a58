import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, Index, Uuid

from .base import Base, JSONType, utcnow


class CorporateRating(Base):
    """Student's rating of the company behind a listing after working with it."""
    __tablename__ = 'corporate_ratings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    application_id = Column(Uuid, ForeignKey('project_applications.id', ondelete='SET NULL'), nullable=True)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    corporate_id = Column(Uuid, nullable=False)
    listing_id = Column(Uuid, ForeignKey('listings.id', ondelete='SET NULL'), nullable=True)
    rating = Column(Integer, nullable=False)  # 1-5
    review_text = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_corporate_ratings_corporate', 'corporate_id'),
    )


class CorporateAttractivenessScore(Base):
    """
    Reverse-direction score: how appealing a listing is to students.

    One row per listing, refreshed on read when missing or stale.
    """
    __tablename__ = 'corporate_attractiveness_scores'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id = Column(Uuid, ForeignKey('listings.id', ondelete='CASCADE'), nullable=False, unique=True)
    author_id = Column(Uuid, nullable=True)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)

    attractiveness_score = Column(Float, nullable=False, default=0.0)
    signal_breakdown = Column(JSONType, nullable=False, default=dict)
    # Number of listings the company has posted
    sample_size = Column(Integer, nullable=False, default=0)

    is_stale = Column(Boolean, nullable=False, default=False)
    computed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_corporate_attractiveness_author', 'author_id'),
        Index('idx_corporate_attractiveness_tenant', 'tenant_id'),
    )
