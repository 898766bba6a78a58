import logging
from datetime import datetime
from typing import List, Optional, Any

from sqlalchemy import select, func

from database.models import RecomputationQueueItem, RecomputeTarget, Sweep
from database.models.base import utcnow
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000


class RecomputationQueueRepository(BaseRepository):
    """Durable priority backlog of recompute requests."""

    def enqueue(
        self,
        student_id: Any,
        target: RecomputeTarget = Sweep(),
        reason: str = 'manual',
        priority: int = 5,
        tenant_id: Optional[Any] = None
    ) -> RecomputationQueueItem:
        item = RecomputationQueueItem(
            student_id=student_id,
            target=target,
            reason=reason,
            priority=priority,
            tenant_id=tenant_id,
            attempts=0
        )
        self.db.add(item)
        self.db.flush()
        logger.debug(f"Queued {type(target).__name__} recompute for student {student_id} ({reason}, p={priority})")
        return item

    def _pending_filter(self, stmt):
        return stmt.where(
            RecomputationQueueItem.processed_at.is_(None),
            RecomputationQueueItem.dead_at.is_(None)
        )

    def claim_pending(self, limit: int = 50) -> List[RecomputationQueueItem]:
        """Highest priority first, oldest first within a priority tier."""
        stmt = self._pending_filter(select(RecomputationQueueItem)).order_by(
            RecomputationQueueItem.priority.desc(),
            RecomputationQueueItem.queued_at.asc()
        ).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def count_pending(self) -> int:
        stmt = self._pending_filter(select(func.count(RecomputationQueueItem.id)))
        return self.db.execute(stmt).scalar_one()

    def get(self, item_id: Any) -> Optional[RecomputationQueueItem]:
        return self.db.get(RecomputationQueueItem, item_id)

    def list_for_student(self, student_id: Any) -> List[RecomputationQueueItem]:
        stmt = select(RecomputationQueueItem).where(
            RecomputationQueueItem.student_id == student_id
        ).order_by(RecomputationQueueItem.queued_at.asc())
        return self.db.execute(stmt).scalars().all()

    def mark_processed(self, item: RecomputationQueueItem, now: Optional[datetime] = None) -> None:
        item.processed_at = now or utcnow()
        item.attempts = (item.attempts or 0) + 1
        item.error = None

    def mark_failed(
        self,
        item: RecomputationQueueItem,
        error: str,
        max_attempts: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> bool:
        """Record a failed attempt. Returns True if the item is now dead."""
        item.attempts = (item.attempts or 0) + 1
        item.error = (error or 'unknown error')[:MAX_ERROR_LENGTH]

        if max_attempts and item.attempts >= max_attempts:
            item.dead_at = now or utcnow()
            logger.warning(f"Queue item {item.id} dead after {item.attempts} attempts: {item.error}")
            return True
        return False
