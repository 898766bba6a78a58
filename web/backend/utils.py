#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

from decimal import Decimal
from typing import Optional, Any
from datetime import date, datetime


def safe_float(value: Optional[Any], default: Optional[float] = None) -> Optional[float]:
    """
    Safely convert value to float.

    Args:
        value: Value to convert (can be Decimal, int, float, or None).
        default: Default value if conversion fails or value is None.

    Returns:
        Float value.
    """
    if value is None:
        return default

    if isinstance(value, Decimal):
        return float(value)

    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def safe_id(value: Optional[Any]) -> Optional[str]:
    """UUID (or anything) to str, keeping None."""
    if value is None:
        return None
    return str(value)


def safe_iso(value: Optional[Any]) -> Optional[str]:
    """
    Safely convert a date or datetime to ISO format string.

    Args:
        value: date/datetime object, or an already formatted string.

    Returns:
        ISO format string or None.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
