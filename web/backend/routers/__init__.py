"""API route handlers."""

from .cron import router as cron_router, limiter, add_rate_limit_handlers
from .schedules import router as schedules_router
from .matches import router as matches_router
from .admin import router as admin_router
from .attractiveness import router as attractiveness_router
