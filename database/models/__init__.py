from .base import Base
from .tenant import Tenant
from .profile import Student, StudentSkill, Listing, ProjectApplication, StudentRating, AthleticSkillMapping
from .schedule import SportSeason, AcademicCalendar, ScheduleEntry
from .match import MatchScore, MatchScoreHistory
from .queue import RecomputationQueueItem, RecomputeTarget, Specific, Sweep
from .engine_config import MatchEngineConfig
from .attractiveness import CorporateRating, CorporateAttractivenessScore

__all__ = [
    'Base',
    'Tenant',
    'Student',
    'StudentSkill',
    'Listing',
    'ProjectApplication',
    'StudentRating',
    'AthleticSkillMapping',
    'SportSeason',
    'AcademicCalendar',
    'ScheduleEntry',
    'MatchScore',
    'MatchScoreHistory',
    'RecomputationQueueItem',
    'RecomputeTarget',
    'Specific',
    'Sweep',
    'MatchEngineConfig',
    'CorporateRating',
    'CorporateAttractivenessScore',
]
