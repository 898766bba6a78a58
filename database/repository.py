import logging

from sqlalchemy.orm import Session

from database.repositories import (
    MatchScoreRepository,
    RecomputationQueueRepository,
    ScheduleRepository,
    ProfileRepository,
    EngineConfigRepository,
    AttractivenessRepository,
)

logger = logging.getLogger(__name__)


class MatchEngineRepository:
    """Groups the engine's repositories over one Session."""

    def __init__(self, db: Session):
        self.db = db
        self.scores = MatchScoreRepository(db)
        self.queue = RecomputationQueueRepository(db)
        self.schedules = ScheduleRepository(db)
        self.profiles = ProfileRepository(db)
        self.configs = EngineConfigRepository(db)
        self.attractiveness = AttractivenessRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
