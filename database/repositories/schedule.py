import logging
from typing import List, Optional, Any

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from database.models import ScheduleEntry, SportSeason, AcademicCalendar
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ScheduleRepository(BaseRepository):
    def list_for_student(self, student_id: Any, active_only: bool = False) -> List[ScheduleEntry]:
        stmt = select(ScheduleEntry).options(
            joinedload(ScheduleEntry.sport_season),
            joinedload(ScheduleEntry.academic_calendar)
        ).where(ScheduleEntry.student_id == student_id)

        if active_only:
            stmt = stmt.where(ScheduleEntry.is_active.is_(True))

        stmt = stmt.order_by(ScheduleEntry.created_at.desc())
        return self.db.execute(stmt).scalars().all()

    def create(self, student_id: Any, **fields) -> ScheduleEntry:
        entry = ScheduleEntry(student_id=student_id, **fields)
        self.db.add(entry)
        self.db.flush()
        return entry

    def get_sport_season(self, season_id: Any) -> Optional[SportSeason]:
        return self.db.get(SportSeason, season_id)

    def get_academic_calendar(self, calendar_id: Any) -> Optional[AcademicCalendar]:
        return self.db.get(AcademicCalendar, calendar_id)

    def get(self, entry_id: Any) -> Optional[ScheduleEntry]:
        stmt = select(ScheduleEntry).options(
            joinedload(ScheduleEntry.sport_season),
            joinedload(ScheduleEntry.academic_calendar)
        ).where(ScheduleEntry.id == entry_id)
        return self.db.execute(stmt).scalar_one_or_none()
