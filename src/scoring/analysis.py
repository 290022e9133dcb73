"""
Risk Analysis Pipeline

Runs the full scoring chain for one site and assembles the response
document consumed by dashboards:

    MetricSet -> RiskScores -> (risk levels, fix priorities, business impact)
    RevenueImpactInputs + business context -> RevenueImpactEstimate
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Any, List, Mapping, Optional

from src.metrics import (
    MetricVerdict,
    build_detailed_metrics,
    build_metric_verdicts,
    extract_metric_set,
    extract_revenue_inputs,
)
from src.models import MetricSet, RevenueImpactInputs
from .helpers import RiskLevel, get_risk_level
from .impact import (
    BusinessImpact,
    RevenueImpactEstimate,
    compute_revenue_impact,
    estimate_business_impact,
)
from .priorities import FixPriority, generate_fix_priorities
from .risk import RiskScores, compute_all_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskAnalysis:
    """Complete risk analysis for one set of metrics."""
    metrics: MetricSet
    scores: RiskScores
    risk_level: RiskLevel  # Level of overall risk (100 - health)
    fix_priorities: List[FixPriority]
    business_impact: BusinessImpact
    revenue_inputs: Optional[RevenueImpactInputs] = None
    revenue_impact: Optional[RevenueImpactEstimate] = None
    # Only for analyses of a Lighthouse document
    detailed_metrics: Optional[Dict[str, Dict[str, Any]]] = None
    metric_verdicts: Optional[List[MetricVerdict]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON response layout."""
        health = self.scores.overall_health
        risk_breakdown: Dict[str, Any] = {}
        for category, score in self.scores.by_category().items():
            risk_breakdown[f"{category}_risk_score"] = score
            risk_breakdown[f"{category}_risk_level"] = get_risk_level(score).value

        result: Dict[str, Any] = {
            "summary": {
                "overall_health_score": health,
                "overall_health_display": f"{health}",
                "risk_level": self.risk_level.value,
                "business_impact": self.business_impact.to_dict(),
            },
            "risk_breakdown": risk_breakdown,
            "fix_priorities": [p.to_dict() for p in self.fix_priorities],
            "metrics": self.metrics.to_dict(),
        }
        if self.detailed_metrics is not None:
            result["detailed_metrics"] = self.detailed_metrics
        if self.metric_verdicts is not None:
            result["metrics_for_dashboard"] = [v.to_dict() for v in self.metric_verdicts]
        if self.revenue_inputs is not None:
            result["revenueImpactInputs"] = self.revenue_inputs.to_dict()
        if self.revenue_impact is not None:
            result["revenueImpact"] = self.revenue_impact.to_dict()
        return result


def analyze_metrics(
    metrics: MetricSet,
    revenue_inputs: Optional[RevenueImpactInputs] = None,
    monthly_revenue: float = 0,
    mobile_traffic_percent: float = 100,
    industry: str = "general",
) -> RiskAnalysis:
    """
    Score a MetricSet and, when revenue is known, estimate revenue impact.

    Args:
        metrics: Normalized MetricSet
        revenue_inputs: Signals for the revenue model (optional)
        monthly_revenue: Monthly revenue; the revenue model only runs when > 0
        mobile_traffic_percent: Share of traffic on mobile (0-100)
        industry: Industry key for the loss multiplier

    Returns:
        RiskAnalysis
    """
    scores = compute_all_scores(metrics)
    priorities = generate_fix_priorities(scores)
    business_impact = estimate_business_impact(scores.overall_health)

    revenue_impact = None
    if monthly_revenue > 0 and revenue_inputs is not None:
        revenue_impact = compute_revenue_impact(
            revenue_inputs,
            monthly_revenue,
            mobile_traffic_percent,
            industry,
        )

    logger.debug(
        f"Analysis: health={scores.overall_health}, "
        f"priorities={[p.category for p in priorities]}, "
        f"revenue_model={'on' if revenue_impact else 'off'}"
    )
    return RiskAnalysis(
        metrics=metrics,
        scores=scores,
        risk_level=get_risk_level(scores.overall_risk),
        fix_priorities=priorities,
        business_impact=business_impact,
        revenue_inputs=revenue_inputs,
        revenue_impact=revenue_impact,
    )


def analyze_lighthouse_result(
    pagespeed_result: Mapping[str, Any],
    monthly_revenue: float = 0,
    mobile_traffic_percent: float = 100,
    industry: str = "general",
) -> RiskAnalysis:
    """
    Analyze an already-fetched PageSpeed Insights result.

    Besides the scores, the analysis carries the grouped audits and a
    verdict per displayed metric.

    Raises:
        MetricValidationError: If the document is not a usable Lighthouse result
    """
    metrics = extract_metric_set(pagespeed_result)
    revenue_inputs = extract_revenue_inputs(pagespeed_result, metrics=metrics)
    # Both extractions above validated lighthouseResult.audits
    audits = pagespeed_result["lighthouseResult"]["audits"]

    analysis = analyze_metrics(
        metrics,
        revenue_inputs=revenue_inputs,
        monthly_revenue=monthly_revenue,
        mobile_traffic_percent=mobile_traffic_percent,
        industry=industry,
    )
    return replace(
        analysis,
        detailed_metrics=build_detailed_metrics(audits),
        metric_verdicts=build_metric_verdicts(audits),
    )
