"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For row builders, see tests/factories.py
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.repository import MatchEngineRepository
from tests.factories import CRON_SECRET


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring the SQLite test database"
    )


@pytest.fixture
def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session (and the
    TestClient worker thread) sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    Session = sessionmaker(bind=engine, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def repo(session):
    return MatchEngineRepository(session)


@pytest.fixture
def app_config():
    from core.config_loader import AppConfig
    return AppConfig(database={'url': 'sqlite://'}, cron={'secret': CRON_SECRET})


@pytest.fixture
def client(session, app_config):
    """
    TestClient over the full app, bound to the test session.

    Rate limiting is disabled and config comes from app_config instead of
    config.yaml.
    """
    from fastapi.testclient import TestClient
    from web.backend.app import app
    from web.backend.config import get_config
    from web.backend.dependencies import get_db
    from web.backend.routers import limiter

    limiter.enabled = False

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_config] = lambda: app_config

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
