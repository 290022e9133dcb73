"""
Business Impact Estimator

Two independent models:

1. **Coarse impact tier** - a step function of overall health that yields
   a qualitative tier and an expected conversion-loss range.

2. **Revenue impact** - a monetary loss range built from four metric
   signals (LCP, CLS, INP, mobile performance score):

       Drop = min(Σ signal_drop, cap)          (min cap 0.5, max cap 0.6)
       Monthly_Loss = min(Revenue × Drop × Industry_Multiplier × Mobile_Share, Revenue)
       Annual_Loss = Monthly_Loss × 12

   Recovery potential equals the loss range: fixing the issues is assumed
   to recover all of the estimated loss. A confidence score (0-100) and
   four descriptive severity drivers accompany the estimate.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from src.models import RevenueImpactInputs
from .helpers import round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# COARSE IMPACT TIERS
# =============================================================================

# (minimum overall health, impact level, expected conversion loss), highest first
BUSINESS_IMPACT_TIERS: List[Tuple[int, str, str]] = [
    (85, "Minimal", "0–3%"),
    (70, "Moderate", "3–8%"),
    (50, "Significant", "8–15%"),
    (30, "Severe", "15–25%"),
]
CRITICAL_IMPACT: Tuple[str, str] = ("Critical", "25%+")


@dataclass(frozen=True)
class BusinessImpact:
    """Qualitative impact tier derived from overall health."""
    impact_level: str
    estimated_conversion_loss: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "impact_level": self.impact_level,
            "estimated_conversion_loss": self.estimated_conversion_loss,
        }


def estimate_business_impact(overall_health: float) -> BusinessImpact:
    """
    Map overall health to an impact tier.

    Args:
        overall_health: Health score (0-100, higher = healthier)

    Returns:
        BusinessImpact
    """
    for min_health, level, loss in BUSINESS_IMPACT_TIERS:
        if overall_health >= min_health:
            return BusinessImpact(impact_level=level, estimated_conversion_loss=loss)
    return BusinessImpact(
        impact_level=CRITICAL_IMPACT[0],
        estimated_conversion_loss=CRITICAL_IMPACT[1],
    )


# =============================================================================
# INDUSTRY MULTIPLIERS
# =============================================================================

INDUSTRY_MULTIPLIERS: Dict[str, float] = {
    "ecommerce": 1.2,
    "finance": 1.3,
    "saas": 1.0,
    "healthcare": 0.9,
    "general": 1.0,
}

DEFAULT_INDUSTRY_MULTIPLIER = 1.0


def get_industry_multiplier(industry: str) -> float:
    """Loss multiplier for an industry key. Unknown keys count as general."""
    return INDUSTRY_MULTIPLIERS.get(industry, DEFAULT_INDUSTRY_MULTIPLIER)


# =============================================================================
# REVENUE MODEL CONSTANTS
# =============================================================================

MAX_MIN_DROP = 0.5
MAX_MAX_DROP = 0.6
MONTHS_PER_YEAR = 12


class SeverityLevel(Enum):
    """How much a single metric drives the estimated loss."""
    NONE = "None"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


@dataclass(frozen=True)
class RiskDrivers:
    """Descriptive per-metric severities. Not fed back into the numbers."""
    lcp_impact: SeverityLevel
    cls_impact: SeverityLevel
    inp_impact: SeverityLevel
    mobile_impact: SeverityLevel

    def to_dict(self) -> Dict[str, str]:
        return {
            "lcpImpact": self.lcp_impact.value,
            "clsImpact": self.cls_impact.value,
            "inpImpact": self.inp_impact.value,
            "mobileImpact": self.mobile_impact.value,
        }


@dataclass(frozen=True)
class RevenueImpactEstimate:
    """Monetary loss estimate for a site's measured performance."""
    min_monthly_loss: int
    max_monthly_loss: int
    min_annual_loss: int
    max_annual_loss: int
    recovery_potential_min: int
    recovery_potential_max: int
    confidence_score: int  # 0-100
    confidence_label: str  # High / Medium / Low
    industry_used: str
    risk_drivers: RiskDrivers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minMonthlyLoss": self.min_monthly_loss,
            "maxMonthlyLoss": self.max_monthly_loss,
            "minAnnualLoss": self.min_annual_loss,
            "maxAnnualLoss": self.max_annual_loss,
            "recoveryPotentialMin": self.recovery_potential_min,
            "recoveryPotentialMax": self.recovery_potential_max,
            "confidenceScore": self.confidence_score,
            "confidenceLabel": self.confidence_label,
            "industryUsed": self.industry_used,
            "riskDrivers": self.risk_drivers.to_dict(),
        }


# =============================================================================
# CONVERSION DROP SIGNALS
# =============================================================================

def _lcp_drop(lcp_seconds: float) -> Tuple[float, float]:
    if lcp_seconds > 4:
        return 0.25, 0.35
    elif lcp_seconds > 3:
        return 0.2, 0.3
    elif lcp_seconds > 2.5:
        return 0.1, 0.15
    return 0.0, 0.0


def _cls_drop(cls: float) -> Tuple[float, float]:
    if cls > 0.25:
        return 0.1, 0.2
    elif cls > 0.1:
        return 0.05, 0.1
    return 0.0, 0.0


def _inp_drop(inp_ms: Optional[float]) -> Tuple[float, float]:
    if inp_ms is not None and inp_ms > 500:
        return 0.1, 0.15
    return 0.0, 0.0


def _mobile_drop(mobile_performance_score: float) -> Tuple[float, float]:
    if mobile_performance_score < 50:
        return 0.15, 0.25
    elif mobile_performance_score < 70:
        return 0.08, 0.15
    return 0.0, 0.0


def estimate_conversion_drop(inputs: RevenueImpactInputs) -> Tuple[float, float]:
    """
    Sum the per-signal conversion drops and apply the caps.

    Returns:
        Tuple of (min_drop, max_drop) as fractions, before industry and
        mobile-share scaling
    """
    min_drop = 0.0
    max_drop = 0.0
    for signal_min, signal_max in (
        _lcp_drop(inputs.lcp_seconds),
        _cls_drop(inputs.cls),
        _inp_drop(inputs.inp_ms),
        _mobile_drop(inputs.mobile_performance_score),
    ):
        min_drop += signal_min
        max_drop += signal_max

    # Caps are independent of each other
    return min(min_drop, MAX_MIN_DROP), min(max_drop, MAX_MAX_DROP)


# =============================================================================
# CONFIDENCE
# =============================================================================

def calculate_confidence(
    inputs: RevenueImpactInputs,
    mobile_traffic_percent: float,
) -> int:
    """
    Score how much the estimate can be trusted (0-100).

    Components:
    - Field data: +30 if available, else +10
    - Poor Core Web Vitals: +25 for 2+, +15 for 1, else +5
    - Mobile traffic share: +20 at 60%+, +10 at 30%+, else +5
    - Severe lab signal (LCP > 4s or mobile score < 40): +15, else +10
    """
    confidence = 30 if inputs.field_data_available else 10

    if inputs.poor_cwv_count >= 2:
        confidence += 25
    elif inputs.poor_cwv_count == 1:
        confidence += 15
    else:
        confidence += 5

    if mobile_traffic_percent >= 60:
        confidence += 20
    elif mobile_traffic_percent >= 30:
        confidence += 10
    else:
        confidence += 5

    if inputs.lcp_seconds > 4 or inputs.mobile_performance_score < 40:
        confidence += 15
    else:
        confidence += 10

    return min(confidence, 100)


def get_confidence_label(confidence: float) -> str:
    """High at 75+, Medium at 45+, otherwise Low."""
    if confidence >= 75:
        return "High"
    if confidence >= 45:
        return "Medium"
    return "Low"


# =============================================================================
# SEVERITY DRIVERS
# =============================================================================

def classify_risk_drivers(inputs: RevenueImpactInputs) -> RiskDrivers:
    """Describe how strongly each metric contributes to the loss."""
    lcp = inputs.lcp_seconds
    if lcp > 4:
        lcp_impact = SeverityLevel.HIGH
    elif lcp > 3:
        lcp_impact = SeverityLevel.MODERATE
    elif lcp > 2.5:
        lcp_impact = SeverityLevel.LOW
    else:
        lcp_impact = SeverityLevel.NONE

    if inputs.cls > 0.25:
        cls_impact = SeverityLevel.HIGH
    elif inputs.cls > 0.1:
        cls_impact = SeverityLevel.MODERATE
    else:
        cls_impact = SeverityLevel.LOW

    # Unmeasured INP reads as Low
    if inputs.inp_ms is not None and inputs.inp_ms > 500:
        inp_impact = SeverityLevel.HIGH
    else:
        inp_impact = SeverityLevel.LOW

    if inputs.mobile_performance_score < 50:
        mobile_impact = SeverityLevel.HIGH
    elif inputs.mobile_performance_score < 70:
        mobile_impact = SeverityLevel.MODERATE
    else:
        mobile_impact = SeverityLevel.LOW

    return RiskDrivers(
        lcp_impact=lcp_impact,
        cls_impact=cls_impact,
        inp_impact=inp_impact,
        mobile_impact=mobile_impact,
    )


# =============================================================================
# REVENUE IMPACT
# =============================================================================

def compute_revenue_impact(
    inputs: RevenueImpactInputs,
    monthly_revenue: float,
    mobile_traffic_percent: float,
    industry: str = "general",
) -> RevenueImpactEstimate:
    """
    Estimate monthly and annual revenue lost to poor performance.

    Args:
        inputs: Metric-derived signals
        monthly_revenue: Total monthly revenue (currency units)
        mobile_traffic_percent: Share of traffic on mobile (clamped to 0-100)
        industry: Industry key, see INDUSTRY_MULTIPLIERS

    Returns:
        RevenueImpactEstimate with all money values rounded to whole units
    """
    min_drop, max_drop = estimate_conversion_drop(inputs)

    multiplier = get_industry_multiplier(industry)
    min_drop *= multiplier
    max_drop *= multiplier

    mobile_weight = min(100, max(0, mobile_traffic_percent)) / 100
    min_loss = monthly_revenue * min_drop * mobile_weight
    max_loss = monthly_revenue * max_drop * mobile_weight

    # Loss cannot exceed total revenue
    min_loss = min(min_loss, monthly_revenue)
    max_loss = min(max_loss, monthly_revenue)

    min_annual_loss = min_loss * MONTHS_PER_YEAR
    max_annual_loss = max_loss * MONTHS_PER_YEAR

    confidence = calculate_confidence(inputs, mobile_traffic_percent)

    estimate = RevenueImpactEstimate(
        min_monthly_loss=int(round_half_up(min_loss)),
        max_monthly_loss=int(round_half_up(max_loss)),
        min_annual_loss=int(round_half_up(min_annual_loss)),
        max_annual_loss=int(round_half_up(max_annual_loss)),
        recovery_potential_min=int(round_half_up(min_loss)),
        recovery_potential_max=int(round_half_up(max_loss)),
        confidence_score=confidence,
        confidence_label=get_confidence_label(confidence),
        industry_used=industry,
        risk_drivers=classify_risk_drivers(inputs),
    )
    logger.debug(
        f"Revenue impact ({industry}, x{multiplier}): "
        f"{estimate.min_monthly_loss}-{estimate.max_monthly_loss}/month, "
        f"confidence {confidence}"
    )
    return estimate
