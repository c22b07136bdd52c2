"""
Rounding helpers shared by the scoring and plan modules.

Scores are rounded half-up (2.5 -> 3), not with Python's banker's rounding,
so a 0.5 boundary never silently drops a readiness band.
"""
import math


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_score(value: float) -> int:
    """Round half-up to an int."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))
