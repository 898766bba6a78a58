#!/usr/bin/env python3
"""
Cron endpoint - drains one batch of the recomputation queue.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.config_loader import AppConfig
from database.repository import MatchEngineRepository
from pipeline import run_recompute_batch

from ..config import get_config
from ..dependencies import get_repo, verify_cron_secret
from ..models.responses import RecomputeBatchResponse

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/cron", tags=["cron"])


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "type": "RateLimitExceeded"}
    )


def _cron_rate_limit() -> str:
    return get_config().cron.rate_limit


@router.post(
    "/recompute-matches",
    response_model=RecomputeBatchResponse,
    response_model_by_alias=True,
    dependencies=[Depends(verify_cron_secret)]
)
@limiter.limit(_cron_rate_limit)
def recompute_matches(
    request: Request,
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """
    Process up to batch_size pending queue items.

    Requires `Authorization: Bearer <CRON_SECRET>`. A claim failure
    returns 500 with no partial counters.
    """
    result = run_recompute_batch(repo, config.matching, config.worker)
    logger.info(
        f"Cron batch: processed={result.processed} errors={result.errors} "
        f"remaining={result.remaining}"
    )
    return RecomputeBatchResponse(
        processed=result.processed,
        remaining=result.remaining,
        errors=result.errors,
        batch_size=result.batch_size
    )
