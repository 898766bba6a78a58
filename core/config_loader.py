import yaml
import os
from typing import Optional, Dict
from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    url: str


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class SignalWeights(BaseModel):
    """
    Relative weight of each scoring signal in the composite.

    Weights are normalised at scoring time, so they only need to be
    non-negative with a positive sum.
    """
    temporal: float = Field(default=0.25, ge=0.0)
    skills: float = Field(default=0.30, ge=0.0)
    sustainability: float = Field(default=0.15, ge=0.0)
    growth: float = Field(default=0.10, ge=0.0)
    trust: float = Field(default=0.10, ge=0.0)
    compensation: float = Field(default=0.10, ge=0.0)

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump()

    def merged(self, overrides: Optional[Dict[str, float]]) -> "SignalWeights":
        """Return a copy with known signal names replaced from overrides."""
        if not overrides:
            return self.model_copy()
        values = self.as_dict()
        for name, weight in overrides.items():
            if name in values and weight is not None:
                values[name] = float(weight)
        return SignalWeights(**values)


class MatchingConfig(BaseModel):
    """
    Scoring and availability configuration.
    """
    baseline_hours_per_week: float = 40.0
    default_horizon_weeks: int = 12
    # Scores and application pages never compute more than this many pairs inline
    lazy_compute_limit: int = 20
    signal_weights: SignalWeights = Field(default_factory=SignalWeights)

    @field_validator('signal_weights')
    @classmethod
    def _positive_total(cls, v: SignalWeights) -> SignalWeights:
        if sum(v.as_dict().values()) <= 0:
            raise ValueError("signal_weights must have a positive sum")
        return v


class WorkerConfig(BaseModel):
    """Recomputation batch worker bounds."""
    batch_size: int = Field(default=50, ge=1)
    sweep_limit: int = Field(default=20, ge=1)
    # None disables the dead state (items retry forever)
    max_attempts: Optional[int] = Field(default=5, ge=1)
    default_priority: int = Field(default=5, ge=1, le=10)


class CronConfig(BaseModel):
    secret: Optional[str] = None
    rate_limit: str = "30/minute"


class ScheduleConfig(BaseModel):
    interval_seconds: int = 600
    endpoint_url: str = "http://localhost:8080/cron/recompute-matches"
    request_timeout_seconds: int = 120


class AppConfig(BaseModel):
    database: DatabaseConfig
    web: WebConfig = Field(default_factory=WebConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    cron: CronConfig = Field(default_factory=CronConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return AppConfig(**apply_env_overrides(data))


def apply_env_overrides(data: dict) -> dict:
    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    # Shared secret for the cron endpoint never lives in the yaml in production
    env_cron_secret = os.environ.get("CRON_SECRET")
    if env_cron_secret:
        if data.get('cron') is None:
            data['cron'] = {}
        data['cron']['secret'] = env_cron_secret

    env_endpoint = os.environ.get("MATCH_ENGINE_URL")
    if env_endpoint:
        if data.get('schedule') is None:
            data['schedule'] = {}
        data['schedule']['endpoint_url'] = env_endpoint.rstrip('/') + '/cron/recompute-matches'

    return data
