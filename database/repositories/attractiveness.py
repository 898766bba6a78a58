import logging
from typing import List, Optional, Any, Tuple

from sqlalchemy import select, func

from database.models import CorporateAttractivenessScore, CorporateRating, Listing, ProjectApplication
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AttractivenessRepository(BaseRepository):
    """Company statistics and the per-listing attractiveness cache."""

    def get(self, listing_id: Any) -> Optional[CorporateAttractivenessScore]:
        stmt = select(CorporateAttractivenessScore).where(
            CorporateAttractivenessScore.listing_id == listing_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_author(self, author_id: Any) -> List[CorporateAttractivenessScore]:
        stmt = select(CorporateAttractivenessScore).where(
            CorporateAttractivenessScore.author_id == author_id
        ).order_by(CorporateAttractivenessScore.attractiveness_score.desc())
        return self.db.execute(stmt).scalars().all()

    def upsert(self, listing_id: Any, values: dict) -> CorporateAttractivenessScore:
        row = self.get(listing_id)
        if row is None:
            row = CorporateAttractivenessScore(listing_id=listing_id)
            self.db.add(row)
        row.is_stale = False
        for key, value in values.items():
            setattr(row, key, value)
        self.db.flush()
        return row

    def mark_stale(self, listing_id: Any) -> bool:
        row = self.get(listing_id)
        if row is None or row.is_stale:
            return False
        row.is_stale = True
        logger.info(f"Marked attractiveness stale for listing {listing_id}")
        return True

    def company_stats(self, author_id: Any) -> Tuple[int, int, int]:
        """(listings posted, completed projects, distinct accepted students) for the author."""
        total_listings = self.db.execute(
            select(func.count(Listing.id)).where(Listing.author_id == author_id)
        ).scalar_one()

        def on_author(column):
            return select(func.count(func.distinct(column))).select_from(ProjectApplication).join(
                Listing, Listing.id == ProjectApplication.listing_id
            ).where(Listing.author_id == author_id)

        completed = self.db.execute(
            on_author(ProjectApplication.id).where(ProjectApplication.status == 'completed')
        ).scalar_one()
        accepted = self.db.execute(
            on_author(ProjectApplication.student_id).where(
                ProjectApplication.status.in_(('accepted', 'completed'))
            )
        ).scalar_one()
        return total_listings, completed, accepted

    def rating_stats(self, author_id: Any) -> Tuple[Optional[float], int]:
        stmt = select(
            func.avg(CorporateRating.rating),
            func.count(CorporateRating.id)
        ).where(CorporateRating.corporate_id == author_id)
        avg, count = self.db.execute(stmt).one()
        return (float(avg) if avg is not None else None), int(count or 0)
