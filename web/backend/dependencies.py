#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from typing import Callable, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.config_loader import AppConfig
from database.database import get_db_manager, init_database, is_initialized
from database.repository import MatchEngineRepository

from .auth import (
    SessionResolver, HeaderSessionResolver, FeatureGate, TenantFeatureGate,
    SessionUser, secrets_match, bearer_token
)
from .config import get_config
from .exceptions import UnauthorizedException, ForbiddenException


def _ensure_database() -> None:
    if not is_initialized():
        init_database(get_config().database.url)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    _ensure_database()
    session = get_db_manager().SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_repo(db: Session = Depends(get_db)) -> MatchEngineRepository:
    return MatchEngineRepository(db)


def get_session_resolver() -> SessionResolver:
    return HeaderSessionResolver()


def get_feature_gate(db: Session = Depends(get_db)) -> FeatureGate:
    return TenantFeatureGate(db)


def get_current_user(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver)
) -> SessionUser:
    user = resolver.resolve(request)
    if user is None:
        raise UnauthorizedException("Authentication required")
    return user


def require_feature(feature: str) -> Callable[..., SessionUser]:
    """Dependency factory: authenticated user whose tenant has the feature."""

    def dependency(
        user: SessionUser = Depends(get_current_user),
        gate: FeatureGate = Depends(get_feature_gate)
    ) -> SessionUser:
        if not gate.is_enabled(user.tenant_id, feature):
            raise ForbiddenException(f"Feature '{feature}' is not enabled for this tenant")
        return user

    return dependency


def require_admin(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if not user.is_admin:
        raise ForbiddenException("Admin role required")
    return user


def verify_cron_secret(request: Request, config: AppConfig = Depends(get_config)) -> None:
    """Bearer <CRON_SECRET>; an unset secret rejects every call."""
    if not secrets_match(bearer_token(request), config.cron.secret):
        raise UnauthorizedException("Unauthorized")
