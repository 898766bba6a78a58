import uuid
from dataclasses import dataclass
from typing import Union

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Uuid, Index, CheckConstraint

from .base import Base, utcnow


@dataclass(frozen=True)
class Specific:
    """Recompute exactly one (student, listing) pair."""
    listing_id: uuid.UUID


@dataclass(frozen=True)
class Sweep:
    """Recompute a bounded number of the student's stale pairs."""


RecomputeTarget = Union[Specific, Sweep]


class RecomputationQueueItem(Base):
    """
    Durable recompute request.

    States:
    - pending: processed_at and dead_at are NULL
    - processed: processed_at set
    - dead: dead_at set after max attempts; never claimed again

    The nullable listing_id column is only a storage detail; callers
    use the `target` property (Specific | Sweep).
    """
    __tablename__ = 'recomputation_queue'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    listing_id = Column(Uuid, ForeignKey('listings.id', ondelete='CASCADE'), nullable=True)
    tenant_id = Column(Uuid, ForeignKey('tenants.id', ondelete='CASCADE'), nullable=True)

    reason = Column(Text, nullable=False, default='manual')
    priority = Column(Integer, nullable=False, default=5)  # 10 = highest

    queued_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    processed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    dead_at = Column(TIMESTAMP(timezone=True), nullable=True)
    attempts = Column(Integer, nullable=False, default=0)
    error = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint('priority BETWEEN 1 AND 10', name='chk_recomputation_queue_priority'),
        Index('idx_recomp_queue_pending', 'processed_at', 'dead_at', 'priority', 'queued_at'),
        Index('idx_recomp_queue_student', 'student_id'),
    )

    @property
    def target(self) -> RecomputeTarget:
        if self.listing_id is None:
            return Sweep()
        return Specific(self.listing_id)

    @target.setter
    def target(self, value: RecomputeTarget) -> None:
        if isinstance(value, Specific):
            self.listing_id = value.listing_id
        elif isinstance(value, Sweep):
            self.listing_id = None
        else:
            raise TypeError(f"Unsupported recompute target: {value!r}")

    @property
    def is_pending(self) -> bool:
        return self.processed_at is None and self.dead_at is None
