#!/usr/bin/env python3
"""
Match Engine API - FastAPI Application

Serves schedules, availability, match scores and the cron endpoint that
drains the recomputation queue.

Usage:
    uv run python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI

from .config import get_config
from .exceptions import register_exception_handlers
from .routers import (
    cron_router,
    schedules_router,
    matches_router,
    admin_router,
    attractiveness_router,
    add_rate_limit_handlers
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Match Engine API",
    description="Student/listing match scoring, availability and recomputation",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure rate limiting
add_rate_limit_handlers(app)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(cron_router)
app.include_router(schedules_router)
app.include_router(matches_router)
app.include_router(admin_router)
app.include_router(attractiveness_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "match-engine"}


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting Match Engine API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
