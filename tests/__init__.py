#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run against an in-memory SQLite database; no external services
are needed:

    # Run all tests
    uv run python -m pytest tests/ -v

    # Run only the web layer
    uv run python -m pytest tests/unit/web -v

Database tests share the fixtures in tests/conftest.py; row builders live
in tests/factories.py.
"""
