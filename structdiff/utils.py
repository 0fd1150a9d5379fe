"""Utility functions for the structdiff engine."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any


def parse_duration(duration_str: str) -> timedelta:
    """
    Parse a duration string like '5s', '1m', '1h', '1d' into a timedelta.

    Args:
        duration_str: Duration string (e.g., '5s', '1m', '2h', '1d')

    Returns:
        timedelta object
    """
    if not duration_str:
        return timedelta(0)

    pattern = r'^(\d+(?:\.\d+)?)\s*([smhd])$'
    match = re.match(pattern, duration_str.strip().lower())

    if not match:
        raise ValueError(f"Invalid duration format: {duration_str}")

    value = float(match.group(1))
    unit = match.group(2)

    if unit == 's':
        return timedelta(seconds=value)
    elif unit == 'm':
        return timedelta(minutes=value)
    elif unit == 'h':
        return timedelta(hours=value)
    return timedelta(days=value)


def types_compatible(left: Any, right: Any, strict: bool) -> bool:
    """Check whether two values may be compared structurally."""
    left_type = type(left)
    right_type = type(right)
    if strict:
        return left_type is right_type
    return issubclass(left_type, right_type) or issubclass(right_type, left_type)


def get_type_name(value: Any) -> str:
    """Get a qualified type name for a value."""
    value_type = type(value)
    if value_type.__module__ == "builtins":
        return value_type.__qualname__
    return f"{value_type.__module__}.{value_type.__qualname__}"
