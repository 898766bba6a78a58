"""Business logic services."""

from .match_service import MatchService
from .schedule_service import ScheduleService
from .config_service import EngineConfigService
from .attractiveness_service import CorporateAttractivenessService
