"""
Risk Calculator & Health Aggregator

Maps lab metrics to five category risk scores (0-100, higher = worse)
and combines them into a single overall health score (0-100, higher =
healthier).

Each category is a weighted sum of linear sub-risks:

    Category_Risk = clamp(round(Σ linear_risk(metric, low, high) × weight))

    Overall_Health = clamp(round(100 - (
        Speed × 0.30 +
        UX × 0.25 +
        SEO × 0.15 +
        Conversion × 0.20 +
        Scaling × 0.10
    )))

The per-category threshold tables are independent of each other on
purpose: tuning one category must never move another.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from src.models import MetricSet
from .helpers import clamp_score, linear_risk

logger = logging.getLogger(__name__)


# =============================================================================
# THRESHOLD TABLES
# =============================================================================

@dataclass(frozen=True)
class RiskFactor:
    """One metric's contribution to a category risk."""
    metric: str     # MetricSet attribute
    low: float      # Risk starts rising above this value
    high: float     # Risk saturates at this value
    weight: float   # Share of the category score


# Fixed category order; also the tie-break order for fix priorities
CATEGORY_ORDER: Tuple[str, ...] = ("speed", "ux", "seo", "conversion", "scaling")

RISK_FACTORS: Dict[str, Tuple[RiskFactor, ...]] = {
    "speed": (
        RiskFactor("lcp", 2500, 5000, 0.4),
        RiskFactor("tbt", 300, 600, 0.35),
        RiskFactor("speed_index", 3000, 6000, 0.25),
    ),
    "ux": (
        RiskFactor("cls", 0.1, 0.25, 0.4),
        RiskFactor("inp", 200, 500, 0.35),
        RiskFactor("tbt", 300, 600, 0.25),
    ),
    "seo": (
        RiskFactor("lcp", 2500, 5000, 0.5),
        RiskFactor("fcp", 1800, 3000, 0.25),
        RiskFactor("speed_index", 3000, 6000, 0.25),
    ),
    "conversion": (
        RiskFactor("lcp", 2500, 5000, 0.35),
        RiskFactor("inp", 200, 500, 0.35),
        RiskFactor("tbt", 300, 600, 0.3),
    ),
    "scaling": (
        RiskFactor("dom_size", 1500, 3000, 0.35),
        RiskFactor("main_thread_work", 3000, 6000, 0.35),
        RiskFactor("tbt", 300, 600, 0.3),
    ),
}

# Weights for overall health (sum = 1.0)
HEALTH_WEIGHTS: Dict[str, float] = {
    "speed": 0.3,
    "ux": 0.25,
    "seo": 0.15,
    "conversion": 0.2,
    "scaling": 0.1,
}


# =============================================================================
# CATEGORY RISK
# =============================================================================

def _category_risk(metrics: MetricSet, category: str) -> int:
    combined = 0.0
    for factor in RISK_FACTORS[category]:
        value = getattr(metrics, factor.metric)
        combined += linear_risk(value, factor.low, factor.high) * factor.weight
    return clamp_score(combined)


def calculate_speed_risk(metrics: MetricSet) -> int:
    """
    Speed risk (0-100). Increases with:
    - LCP > 2500ms
    - TBT > 300ms
    - Speed Index > 3000ms
    """
    return _category_risk(metrics, "speed")


def calculate_ux_risk(metrics: MetricSet) -> int:
    """
    UX risk (0-100). Increases with:
    - CLS > 0.1
    - INP > 200ms
    - TBT > 300ms
    """
    return _category_risk(metrics, "ux")


def calculate_seo_risk(metrics: MetricSet) -> int:
    """
    SEO risk (0-100). Increases with:
    - LCP > 2500ms (heaviest weight, core vital)
    - FCP > 1800ms
    - Speed Index > 3000ms
    """
    return _category_risk(metrics, "seo")


def calculate_conversion_risk(metrics: MetricSet) -> int:
    """
    Conversion risk (0-100). Increases with:
    - LCP > 2500ms
    - INP > 200ms
    - TBT > 300ms
    """
    return _category_risk(metrics, "conversion")


def calculate_scaling_risk(metrics: MetricSet) -> int:
    """
    Scaling risk (0-100). Increases with:
    - DOM size > 1500 elements
    - Main thread work > 3000ms
    - TBT > 300ms
    """
    return _category_risk(metrics, "scaling")


# =============================================================================
# OVERALL HEALTH
# =============================================================================

def calculate_overall_health(
    speed_risk: float,
    ux_risk: float,
    seo_risk: float,
    conversion_risk: float,
    scaling_risk: float,
) -> int:
    """
    Overall health score (0-100). 100 = healthy.

    Formula: 100 - weighted average of risk scores.

    Args:
        speed_risk: Speed risk (0-100)
        ux_risk: UX risk (0-100)
        seo_risk: SEO risk (0-100)
        conversion_risk: Conversion risk (0-100)
        scaling_risk: Scaling risk (0-100)

    Returns:
        Health score (0-100)
    """
    weighted_risk = (
        speed_risk * HEALTH_WEIGHTS["speed"] +
        ux_risk * HEALTH_WEIGHTS["ux"] +
        seo_risk * HEALTH_WEIGHTS["seo"] +
        conversion_risk * HEALTH_WEIGHTS["conversion"] +
        scaling_risk * HEALTH_WEIGHTS["scaling"]
    )
    return clamp_score(100 - weighted_risk)


# =============================================================================
# FULL SCORE VECTOR
# =============================================================================

@dataclass(frozen=True)
class RiskScores:
    """All category risks plus the derived overall health."""
    speed_risk: int
    ux_risk: int
    seo_risk: int
    conversion_risk: int
    scaling_risk: int
    overall_health: int

    @property
    def overall_risk(self) -> int:
        """Inverse of health, used for the headline risk level."""
        return 100 - self.overall_health

    def by_category(self) -> Dict[str, int]:
        """Risk scores keyed by category, in CATEGORY_ORDER."""
        return {
            "speed": self.speed_risk,
            "ux": self.ux_risk,
            "seo": self.seo_risk,
            "conversion": self.conversion_risk,
            "scaling": self.scaling_risk,
        }

    def to_dict(self) -> Dict[str, int]:
        return {
            "speedRisk": self.speed_risk,
            "uxRisk": self.ux_risk,
            "seoRisk": self.seo_risk,
            "conversionRisk": self.conversion_risk,
            "scalingRisk": self.scaling_risk,
            "overallHealth": self.overall_health,
        }


def compute_all_scores(metrics: MetricSet) -> RiskScores:
    """
    Compute all risk scores and overall health from lab metrics.

    Args:
        metrics: Normalized MetricSet

    Returns:
        RiskScores
    """
    speed_risk = calculate_speed_risk(metrics)
    ux_risk = calculate_ux_risk(metrics)
    seo_risk = calculate_seo_risk(metrics)
    conversion_risk = calculate_conversion_risk(metrics)
    scaling_risk = calculate_scaling_risk(metrics)

    scores = RiskScores(
        speed_risk=speed_risk,
        ux_risk=ux_risk,
        seo_risk=seo_risk,
        conversion_risk=conversion_risk,
        scaling_risk=scaling_risk,
        overall_health=calculate_overall_health(
            speed_risk, ux_risk, seo_risk, conversion_risk, scaling_risk
        ),
    )
    logger.debug(f"Computed risk scores: {scores.to_dict()}")
    return scores
