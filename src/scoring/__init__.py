"""
Scoring Module for PerfRisk Engine

This module provides the deterministic risk and impact model:

1. **Category Risk** (0-100, higher = worse)
   Speed, UX, SEO, Conversion and Scaling, each a weighted sum of linear
   sub-risks over lab metrics.

2. **Overall Health** (0-100, higher = healthier)
   100 - weighted average of the category risks.

3. **Fix Priorities**
   Top three categories by weighted impact (risk × health weight).

4. **Business Impact**
   A coarse tier from overall health, and a detailed revenue-loss range
   with confidence rating and severity drivers.

Example Usage:
    from src.models import MetricSet
    from src.scoring import compute_all_scores, generate_fix_priorities

    metrics = MetricSet(lcp=4200, cls=0.12, inp=350, tbt=480,
                        fcp=2100, speed_index=4800, dom_size=1800,
                        main_thread_work=4100)

    scores = compute_all_scores(metrics)
    print(f"Overall Health: {scores.overall_health}")
    for fix in generate_fix_priorities(scores.by_category()):
        print(f"{fix.category}: {fix.score} ({fix.priority})")
"""

# Helper utilities
from .helpers import (
    RiskLevel,
    clamp_score,
    get_risk_level,
    linear_risk,
    round_half_up,
)

# Risk calculator & health aggregator
from .risk import (
    CATEGORY_ORDER,
    HEALTH_WEIGHTS,
    RISK_FACTORS,
    RiskFactor,
    RiskScores,
    calculate_speed_risk,
    calculate_ux_risk,
    calculate_seo_risk,
    calculate_conversion_risk,
    calculate_scaling_risk,
    calculate_overall_health,
    compute_all_scores,
)

# Fix prioritizer
from .priorities import (
    CATEGORY_LABELS,
    FixPriority,
    generate_fix_priorities,
    get_priority_label,
)

# Business impact
from .impact import (
    BUSINESS_IMPACT_TIERS,
    INDUSTRY_MULTIPLIERS,
    BusinessImpact,
    RevenueImpactEstimate,
    RiskDrivers,
    SeverityLevel,
    calculate_confidence,
    classify_risk_drivers,
    compute_revenue_impact,
    estimate_business_impact,
    estimate_conversion_drop,
    get_confidence_label,
    get_industry_multiplier,
)

# Full pipeline
from .analysis import (
    RiskAnalysis,
    analyze_lighthouse_result,
    analyze_metrics,
)

__all__ = [
    # Helpers
    "RiskLevel",
    "clamp_score",
    "get_risk_level",
    "linear_risk",
    "round_half_up",

    # Risk
    "CATEGORY_ORDER",
    "HEALTH_WEIGHTS",
    "RISK_FACTORS",
    "RiskFactor",
    "RiskScores",
    "calculate_speed_risk",
    "calculate_ux_risk",
    "calculate_seo_risk",
    "calculate_conversion_risk",
    "calculate_scaling_risk",
    "calculate_overall_health",
    "compute_all_scores",

    # Priorities
    "CATEGORY_LABELS",
    "FixPriority",
    "generate_fix_priorities",
    "get_priority_label",

    # Impact
    "BUSINESS_IMPACT_TIERS",
    "INDUSTRY_MULTIPLIERS",
    "BusinessImpact",
    "RevenueImpactEstimate",
    "RiskDrivers",
    "SeverityLevel",
    "calculate_confidence",
    "classify_risk_drivers",
    "compute_revenue_impact",
    "estimate_business_impact",
    "estimate_conversion_drop",
    "get_confidence_label",
    "get_industry_multiplier",

    # Pipeline
    "RiskAnalysis",
    "analyze_lighthouse_result",
    "analyze_metrics",
]

__version__ = "0.2.0"
