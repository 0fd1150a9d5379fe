"""Built-in custom comparators for common tolerant comparisons."""

from __future__ import annotations

import re
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Optional

from .strategies import ComparisonStrategy
from .utils import parse_duration


# Cache for compiled regex patterns
@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern:
    """Compile and cache a regex pattern."""
    return re.compile(pattern)


def within_precision(tolerance: float) -> ComparisonStrategy:
    """
    Numbers are equal when they differ by at most ``tolerance``.

    Values that cannot be converted to ``float`` are never equal.
    """
    if tolerance < 0:
        raise ValueError(f"Tolerance must be >= 0, got {tolerance}")

    def compare_numbers(left: Any, right: Any) -> bool:
        try:
            left_float = float(left)
            right_float = float(right)
        except (ValueError, TypeError):
            return False
        return abs(left_float - right_float) <= tolerance

    return ComparisonStrategy.custom(compare_numbers, name=f"precision({tolerance})")


def case_insensitive(trim: bool = False) -> ComparisonStrategy:
    """Strings are equal ignoring case, and surrounding whitespace if ``trim``."""

    def compare_strings(left: Any, right: Any) -> bool:
        left_str = str(left)
        right_str = str(right)
        if trim:
            left_str = left_str.strip()
            right_str = right_str.strip()
        return left_str.casefold() == right_str.casefold()

    name = "case_insensitive(trim)" if trim else "case_insensitive"
    return ComparisonStrategy.custom(compare_strings, name=name)


def matching_pattern(pattern: str) -> ComparisonStrategy:
    """Strings are equal when both fully match ``pattern``."""
    compiled = _compile_pattern(pattern)

    def compare_patterns(left: Any, right: Any) -> bool:
        return (
            compiled.fullmatch(str(left)) is not None
            and compiled.fullmatch(str(right)) is not None
        )

    return ComparisonStrategy.custom(compare_patterns, name=f"pattern({pattern})")


def parse_datetime(value: Any, fmt: Optional[str] = None) -> datetime:
    """
    Parse a datetime value using the specified format.

    Args:
        value: A ``datetime``, ``date`` or string
        fmt: Format string (``None`` or 'ISO8601' for ISO format)

    Returns:
        Parsed datetime object
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value)
    if fmt is None or fmt.upper() == 'ISO8601':
        try:
            return datetime.fromisoformat(text.replace('Z', '+00:00'))
        except ValueError:
            raise ValueError(f"Cannot parse datetime '{text}' as ISO8601")
    return datetime.strptime(text, fmt)


def datetime_within(tolerance: str, fmt: Optional[str] = None) -> ComparisonStrategy:
    """
    Datetimes are equal when at most ``tolerance`` apart.

    Args:
        tolerance: Duration string (e.g., '5s', '1m')
        fmt: Datetime format for string values
    """
    limit = parse_duration(tolerance).total_seconds()

    def compare_datetimes(left: Any, right: Any) -> bool:
        try:
            left_dt = parse_datetime(left, fmt)
            right_dt = parse_datetime(right, fmt)
        except ValueError:
            return False
        return abs((left_dt - right_dt).total_seconds()) <= limit

    return ComparisonStrategy.custom(compare_datetimes, name=f"datetime({tolerance})")
