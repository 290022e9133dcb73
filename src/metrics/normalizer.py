"""
Metric Normalizer

Boundary layer between raw audit data and the scoring core.

The scoring core trusts its input completely, so everything it receives
goes through here first:
- Missing or null measurements become 0
- Non-numeric, negative or non-finite values are rejected
- Lighthouse / PageSpeed Insights results are reduced to a MetricSet and
  the RevenueImpactInputs used by the revenue model

Nothing in this module fetches data; it only reads documents that the
caller already has.
"""

import logging
import math
from typing import Dict, Any, Mapping, Optional

from src.models import METRIC_FIELDS, MetricSet, RevenueImpactInputs

logger = logging.getLogger(__name__)


# Lighthouse audit id -> MetricSet wire name
LIGHTHOUSE_AUDITS: Dict[str, str] = {
    "largest-contentful-paint": "lcp",
    "cumulative-layout-shift": "cls",
    "interaction-to-next-paint": "inp",
    "total-blocking-time": "tbt",
    "first-contentful-paint": "fcp",
    "speed-index": "speedIndex",
    "dom-size": "domSize",
    "mainthread-work-breakdown": "mainThreadWork",
}

# Audits whose score counts toward poor Core Web Vitals
CWV_AUDITS = (
    "largest-contentful-paint",
    "cumulative-layout-shift",
    "interaction-to-next-paint",
)

POOR_CWV_SCORE = 0.5

# Upper bound on monthly revenue; annual loss must stay a finite integer
MAX_MONTHLY_REVENUE = 1e15


class MetricValidationError(ValueError):
    """Raised when audit data cannot be turned into valid metrics."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


# =============================================================================
# VALUE VALIDATION
# =============================================================================

def _validate_value(field: str, value: Any) -> float:
    if value is None:
        return 0.0
    # bool is an int subclass; a flag is never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MetricValidationError(
            f"Metric '{field}' must be a number, got {type(value).__name__}",
            field=field,
        )
    if not math.isfinite(value):
        raise MetricValidationError(f"Metric '{field}' must be finite, got {value}", field=field)
    if value < 0:
        raise MetricValidationError(f"Metric '{field}' must be non-negative, got {value}", field=field)
    return float(value)


def sanitize_metric_set(raw: Mapping[str, Any]) -> MetricSet:
    """
    Build a MetricSet from a loose mapping.

    Accepts camelCase wire names ("speedIndex") or attribute names
    ("speed_index"). Unknown keys are ignored.

    Args:
        raw: Metric values keyed by name

    Returns:
        MetricSet with every field present

    Raises:
        MetricValidationError: If any supplied value is invalid
    """
    values = {}
    for wire_name, attr in METRIC_FIELDS.items():
        value = raw.get(wire_name)
        if value is None:
            value = raw.get(attr)
        values[attr] = _validate_value(wire_name, value)
    return MetricSet(**values)


# =============================================================================
# LIGHTHOUSE EXTRACTION
# =============================================================================

def _get_audits(pagespeed_result: Mapping[str, Any]) -> Mapping[str, Any]:
    lighthouse = pagespeed_result.get("lighthouseResult") or {}
    audits = lighthouse.get("audits") if isinstance(lighthouse, Mapping) else None
    if not audits or not isinstance(audits, Mapping):
        logger.warning("Rejected PageSpeed result without lighthouseResult.audits")
        raise MetricValidationError("Invalid Lighthouse response structure", field="lighthouseResult")
    return audits


def _as_object(value: Any, field: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MetricValidationError(
            f"'{field}' must be an object, got {type(value).__name__}",
            field=field,
        )
    return value


def get_audit(audits: Mapping[str, Any], audit_id: str) -> Mapping[str, Any]:
    """
    Look up one audit. A missing audit reads as empty.

    Raises:
        MetricValidationError: If the audit is present but not an object
    """
    return _as_object(audits.get(audit_id), audit_id)


def _audit_value(audits: Mapping[str, Any], audit_id: str) -> Any:
    return get_audit(audits, audit_id).get("numericValue")


def _audit_score(audits: Mapping[str, Any], audit_id: str) -> Any:
    return get_audit(audits, audit_id).get("score")


def _metric_set_from_audits(audits: Mapping[str, Any]) -> MetricSet:
    raw = {
        wire_name: _audit_value(audits, audit_id) or 0
        for audit_id, wire_name in LIGHTHOUSE_AUDITS.items()
    }
    metrics = sanitize_metric_set(raw)
    logger.debug(f"Extracted metrics: {metrics.to_dict()}")
    return metrics


def extract_metric_set(pagespeed_result: Mapping[str, Any]) -> MetricSet:
    """
    Reduce a PageSpeed Insights v5 result to a MetricSet.

    Args:
        pagespeed_result: Parsed PageSpeed JSON (must contain
            lighthouseResult.audits)

    Returns:
        MetricSet, unmeasured audits set to 0

    Raises:
        MetricValidationError: If the document has no audits or an audit
            is malformed or carries an invalid value
    """
    return _metric_set_from_audits(_get_audits(pagespeed_result))


def count_poor_cwv(audits: Mapping[str, Any]) -> int:
    """Number of Core Web Vitals audits scored below 0.5."""
    count = 0
    for audit_id in CWV_AUDITS:
        score = _audit_score(audits, audit_id)
        if isinstance(score, (int, float)) and score < POOR_CWV_SCORE:
            count += 1
    return count


def extract_revenue_inputs(
    pagespeed_result: Mapping[str, Any],
    metrics: Optional[MetricSet] = None,
) -> RevenueImpactInputs:
    """
    Derive the revenue model signals from a PageSpeed Insights result.

    Args:
        pagespeed_result: Parsed PageSpeed JSON
        metrics: MetricSet already extracted from the same document, if any

    Returns:
        RevenueImpactInputs

    Raises:
        MetricValidationError: If the document has no audits or is malformed
    """
    audits = _get_audits(pagespeed_result)
    if metrics is None:
        metrics = _metric_set_from_audits(audits)

    inp_value = _audit_value(audits, "interaction-to-next-paint")
    inp_ms = _validate_value("inp", inp_value) if inp_value is not None else None

    lighthouse = pagespeed_result["lighthouseResult"]
    categories = _as_object(lighthouse.get("categories"), "categories")
    performance_score = _as_object(categories.get("performance"), "performance").get("score")
    mobile_performance_score = _validate_value("performanceScore", performance_score) * 100

    loading_experience = pagespeed_result.get("loadingExperience")
    if loading_experience is None:
        loading_experience = pagespeed_result.get("originLoadingExperience")

    return RevenueImpactInputs(
        lcp_seconds=metrics.lcp / 1000,
        cls=metrics.cls,
        inp_ms=inp_ms,
        mobile_performance_score=mobile_performance_score,
        field_data_available=loading_experience is not None,
        poor_cwv_count=count_poor_cwv(audits),
    )


def sanitize_revenue_inputs(raw: Mapping[str, Any]) -> RevenueImpactInputs:
    """
    Build RevenueImpactInputs from a camelCase mapping.

    Raises:
        MetricValidationError: If a value is invalid
    """
    inp_value = raw.get("inpMs")
    poor_cwv = _validate_value("poorCWVCount", raw.get("poorCWVCount"))
    if poor_cwv > len(CWV_AUDITS) or poor_cwv != int(poor_cwv):
        raise MetricValidationError(
            f"Metric 'poorCWVCount' must be an integer 0-{len(CWV_AUDITS)}, got {poor_cwv}",
            field="poorCWVCount",
        )

    field_data_available = raw.get("fieldDataAvailable")
    if field_data_available is None:
        field_data_available = False
    elif not isinstance(field_data_available, bool):
        raise MetricValidationError(
            f"'fieldDataAvailable' must be a boolean, got {type(field_data_available).__name__}",
            field="fieldDataAvailable",
        )

    return RevenueImpactInputs(
        lcp_seconds=_validate_value("lcpSeconds", raw.get("lcpSeconds")),
        cls=_validate_value("cls", raw.get("cls")),
        inp_ms=_validate_value("inpMs", inp_value) if inp_value is not None else None,
        mobile_performance_score=_validate_value(
            "mobilePerformanceScore", raw.get("mobilePerformanceScore")
        ),
        field_data_available=field_data_available,
        poor_cwv_count=int(poor_cwv),
    )


def sanitize_monthly_revenue(value: Any) -> float:
    """
    Validate monthly revenue for the revenue model.

    Raises:
        MetricValidationError: If revenue is not a finite number in
            0..MAX_MONTHLY_REVENUE
    """
    revenue = _validate_value("revenue", value)
    if revenue > MAX_MONTHLY_REVENUE:
        raise MetricValidationError(
            f"Metric 'revenue' must be at most {MAX_MONTHLY_REVENUE:g}, got {revenue:g}",
            field="revenue",
        )
    return revenue
