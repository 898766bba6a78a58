import logging
from typing import List, Optional, Any, Tuple, Sequence

from sqlalchemy import select, func
from sqlalchemy.orm import joinedload, selectinload

from database.models import (
    Student, Listing, ProjectApplication, StudentRating, AthleticSkillMapping
)
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 200


class ProfileRepository(BaseRepository):
    """Read-only access to student, listing and tenant records owned by the platform."""

    def get_student(self, student_id: Any) -> Optional[Student]:
        stmt = select(Student).options(
            selectinload(Student.skills)
        ).where(Student.id == student_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_listing(self, listing_id: Any) -> Optional[Listing]:
        return self.db.get(Listing, listing_id)

    def get_application_history(self, student_id: Any) -> List[ProjectApplication]:
        stmt = select(ProjectApplication).options(
            joinedload(ProjectApplication.listing)
        ).where(
            ProjectApplication.student_id == student_id
        ).order_by(ProjectApplication.created_at.desc())
        return self.db.execute(stmt).scalars().all()

    def count_concurrent_accepted(self, student_id: Any) -> int:
        stmt = select(func.count(ProjectApplication.id)).where(
            ProjectApplication.student_id == student_id,
            ProjectApplication.status == 'accepted'
        )
        return self.db.execute(stmt).scalar_one()

    def get_rating_stats(self, student_id: Any) -> Tuple[Optional[float], int]:
        """Returns (average rating, rating count)."""
        stmt = select(
            func.avg(StudentRating.rating),
            func.count(StudentRating.id)
        ).where(StudentRating.student_id == student_id)
        avg_rating, count = self.db.execute(stmt).one()
        if avg_rating is None:
            return None, int(count or 0)
        return round(float(avg_rating), 2), int(count or 0)

    def get_athletic_transfers(self, sport_names: Sequence[str]) -> List[AthleticSkillMapping]:
        if not sport_names:
            return []
        stmt = select(AthleticSkillMapping).where(
            AthleticSkillMapping.sport_name.in_(list(sport_names))
        ).order_by(AthleticSkillMapping.transfer_strength.desc())
        return self.db.execute(stmt).scalars().all()

    def get_published_listing_ids(self, tenant_id: Optional[Any] = None, limit: int = CANDIDATE_LIMIT) -> List[Any]:
        stmt = select(Listing.id).where(Listing.status == 'published')
        if tenant_id is not None:
            stmt = stmt.where(Listing.tenant_id == tenant_id)
        stmt = stmt.order_by(
            Listing.published_at.desc().nulls_last(),
            Listing.created_at.desc()
        ).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_student_ids(self, tenant_id: Optional[Any] = None, limit: int = CANDIDATE_LIMIT) -> List[Any]:
        stmt = select(Student.id)
        if tenant_id is not None:
            stmt = stmt.where(Student.tenant_id == tenant_id)
        stmt = stmt.order_by(Student.created_at.asc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())
