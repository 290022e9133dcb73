"""
Scoring Helper Functions and Constants

Contains the shared primitives used by every risk calculation:
rounding, clamping, linear threshold mapping and risk level labels.
"""

import math
from enum import Enum


# ============================================================================
# ROUNDING & CLAMPING
# ============================================================================

def round_half_up(value: float) -> float:
    """
    Round to the nearest integer, halves rounding up (36.5 -> 37).

    Python's built-in round() uses banker's rounding, which would move
    scores that land exactly on .5 down by one point.

    NaN is returned unchanged.
    """
    if math.isnan(value):
        return value
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """
    Clamp a value to 0-100 and round to integer.

    Args:
        value: Raw score

    Returns:
        Integer score (0-100). NaN input is propagated as NaN.
    """
    if math.isnan(value):
        return value
    return int(round_half_up(max(0.0, min(100.0, value))))


# ============================================================================
# LINEAR RISK MAPPING
# ============================================================================

def linear_risk(value: float, low: float, high: float) -> float:
    """
    Map a metric value to risk 0-100.

    0 at or below ``low``, 100 at or above ``high``, linear in between.
    ``low`` must be strictly lower than ``high``.

    Args:
        value: Metric value
        low: Value where risk starts rising
        high: Value where risk saturates

    Returns:
        Risk (0.0 - 100.0), unrounded
    """
    if value <= low:
        return 0.0
    if value >= high:
        return 100.0
    return ((value - low) / (high - low)) * 100


# ============================================================================
# RISK LEVELS
# ============================================================================

class RiskLevel(Enum):
    """Three-level risk label for any 0-100 score."""
    LOW = "Low"          # 0-39
    MEDIUM = "Medium"    # 40-69
    HIGH = "High"        # 70-100


def get_risk_level(score: float) -> RiskLevel:
    """
    Classify a score into a risk level.

    Defined for every real number: negative scores are LOW and anything
    above 100 is HIGH.

    Args:
        score: Risk score (normally 0-100)

    Returns:
        RiskLevel enum
    """
    if score <= 39:
        return RiskLevel.LOW
    elif score <= 69:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH
