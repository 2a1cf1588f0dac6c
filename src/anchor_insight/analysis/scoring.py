"""Clamped linear mappings from raw counts to 0-100 factors."""

from __future__ import annotations

import math

# Statement volume below the floor is trivial; above the ceiling is maximal
CODE_VOLUME_FLOOR = 500
CODE_VOLUME_CEILING = 10_000

FUNCTION_COUNT_FLOOR = 5
FUNCTION_COUNT_CEILING = 300


def round_half_up(value: float, digits: int = 2) -> float:
    """Round half away from zero (``round()`` would round half to even)."""
    scale = 10**digits
    return math.copysign(math.floor(abs(value) * scale + 0.5) / scale, value)


def linear_factor(value: float, floor: float, ceiling: float) -> float:
    """Map ``value`` onto [0, 100]: 0 at or below floor, 100 at or above ceiling.

    Args:
        value: Raw measurement
        floor: Value mapped to 0.0
        ceiling: Value mapped to 100.0, must exceed floor

    Returns:
        Factor rounded to two decimals
    """
    if ceiling <= floor:
        raise ValueError("ceiling must be greater than floor")
    if value <= floor:
        return 0.0
    if value >= ceiling:
        return 100.0
    return round_half_up((value - floor) / (ceiling - floor) * 100.0)


def code_volume_factor(total_statements: int) -> float:
    """Normalized code volume from a workspace's total statement count."""
    return linear_factor(total_statements, CODE_VOLUME_FLOOR, CODE_VOLUME_CEILING)


def function_factor(total_functions: int) -> float:
    """Normalized function count from a workspace's total function count."""
    return linear_factor(total_functions, FUNCTION_COUNT_FLOOR, FUNCTION_COUNT_CEILING)
