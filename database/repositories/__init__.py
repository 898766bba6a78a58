from database.repositories.base import BaseRepository
from database.repositories.match import MatchScoreRepository
from database.repositories.queue import RecomputationQueueRepository
from database.repositories.schedule import ScheduleRepository
from database.repositories.profile import ProfileRepository
from database.repositories.engine_config import EngineConfigRepository
from database.repositories.attractiveness import AttractivenessRepository

__all__ = [
    'BaseRepository',
    'MatchScoreRepository',
    'RecomputationQueueRepository',
    'ScheduleRepository',
    'ProfileRepository',
    'EngineConfigRepository',
    'AttractivenessRepository',
]
