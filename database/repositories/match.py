import logging
from typing import List, Optional, Any

from sqlalchemy import select, func

from database.models import MatchScore, MatchScoreHistory
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MatchScoreRepository(BaseRepository):
    """Read/write access to the score cache (match_scores)."""

    def get_cached_score(self, student_id: Any, listing_id: Any) -> Optional[MatchScore]:
        stmt = select(MatchScore).where(
            MatchScore.student_id == student_id,
            MatchScore.listing_id == listing_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_student_scores(
        self,
        student_id: Any,
        include_stale: bool = True,
        limit: int = 50
    ) -> List[MatchScore]:
        stmt = select(MatchScore).where(MatchScore.student_id == student_id)
        if not include_stale:
            stmt = stmt.where(MatchScore.is_stale.is_(False))
        stmt = stmt.order_by(MatchScore.composite_score.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def get_listing_scores(self, listing_id: Any, limit: int = 50) -> List[MatchScore]:
        stmt = select(MatchScore).where(
            MatchScore.listing_id == listing_id
        ).order_by(MatchScore.composite_score.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def get_stale_scores_for_student(self, student_id: Any, limit: int = 20) -> List[MatchScore]:
        """Oldest stale rows first so repeated sweeps make progress."""
        stmt = select(MatchScore).where(
            MatchScore.student_id == student_id,
            MatchScore.is_stale.is_(True)
        ).order_by(MatchScore.computed_at.asc(), MatchScore.id.asc()).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def count_stale_for_student(self, student_id: Any) -> int:
        stmt = select(func.count(MatchScore.id)).where(
            MatchScore.student_id == student_id,
            MatchScore.is_stale.is_(True)
        )
        return self.db.execute(stmt).scalar_one()

    def student_ids_for_listing(self, listing_id: Any) -> List[Any]:
        stmt = select(MatchScore.student_id).where(
            MatchScore.listing_id == listing_id
        ).distinct()
        return [row[0] for row in self.db.execute(stmt).all()]

    def mark_student_stale(self, student_id: Any) -> int:
        stmt = select(MatchScore).where(
            MatchScore.student_id == student_id,
            MatchScore.is_stale.is_(False)
        )
        scores = self.db.execute(stmt).scalars().all()

        count = 0
        for score in scores:
            score.is_stale = True
            count += 1

        if count > 0:
            logger.info(f"Marked {count} scores stale for student {student_id}")

        return count

    def mark_listing_stale(self, listing_id: Any) -> int:
        stmt = select(MatchScore).where(
            MatchScore.listing_id == listing_id,
            MatchScore.is_stale.is_(False)
        )
        scores = self.db.execute(stmt).scalars().all()

        count = 0
        for score in scores:
            score.is_stale = True
            count += 1

        if count > 0:
            logger.info(f"Marked {count} scores stale for listing {listing_id}")

        return count

    def student_ids_for_tenant(self, tenant_id: Any) -> List[Any]:
        stmt = select(MatchScore.student_id).where(
            MatchScore.tenant_id == tenant_id
        ).distinct()
        return [row[0] for row in self.db.execute(stmt).all()]

    def mark_tenant_stale(self, tenant_id: Any) -> int:
        stmt = select(MatchScore).where(
            MatchScore.tenant_id == tenant_id,
            MatchScore.is_stale.is_(False)
        )
        scores = self.db.execute(stmt).scalars().all()

        count = 0
        for score in scores:
            score.is_stale = True
            count += 1

        if count > 0:
            logger.info(f"Marked {count} scores stale for tenant {tenant_id}")

        return count

    def add_history(
        self,
        score: MatchScore,
        new_score: float,
        new_breakdown: dict,
        change_reason: str,
        old_score: Optional[float] = None,
        old_breakdown: Optional[dict] = None
    ) -> MatchScoreHistory:
        entry = MatchScoreHistory(
            match_score_id=score.id,
            old_score=old_score,
            new_score=new_score,
            old_breakdown=old_breakdown,
            new_breakdown=new_breakdown,
            change_reason=change_reason
        )
        self.db.add(entry)
        return entry

    def get_history(self, score_id: Any) -> List[MatchScoreHistory]:
        stmt = select(MatchScoreHistory).where(
            MatchScoreHistory.match_score_id == score_id
        ).order_by(MatchScoreHistory.changed_at.asc())
        return self.db.execute(stmt).scalars().all()
