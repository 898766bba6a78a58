import uuid

from sqlalchemy import Column, TIMESTAMP, ForeignKey, Boolean, Integer, Float, Uuid

from .base import Base, JSONType, utcnow


class MatchEngineConfig(Base):
    """Per-tenant overrides for signal weights and result limits."""
    __tablename__ = 'match_engine_config'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, unique=True)
    signal_weights = Column(JSONType, nullable=False, default=dict)
    min_score_threshold = Column(Float, nullable=False, default=20.0)
    max_results_per_query = Column(Integer, nullable=False, default=50)
    enable_athletic_transfer = Column(Boolean, nullable=False, default=True)
    enable_schedule_matching = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
