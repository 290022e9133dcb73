"""Metric normalization: audit documents in, validated metrics out."""

from .normalizer import (
    LIGHTHOUSE_AUDITS,
    MAX_MONTHLY_REVENUE,
    MetricValidationError,
    count_poor_cwv,
    extract_metric_set,
    extract_revenue_inputs,
    get_audit,
    sanitize_metric_set,
    sanitize_monthly_revenue,
    sanitize_revenue_inputs,
)
from .audits import (
    MetricVerdict,
    OffendingResource,
    build_detailed_metrics,
    build_metric_verdicts,
    extract_offending_resources,
    format_metric_value,
    get_verdict,
    resolve_ttfb,
)

__all__ = [
    "LIGHTHOUSE_AUDITS",
    "MAX_MONTHLY_REVENUE",
    "MetricValidationError",
    "count_poor_cwv",
    "extract_metric_set",
    "extract_revenue_inputs",
    "get_audit",
    "sanitize_metric_set",
    "sanitize_monthly_revenue",
    "sanitize_revenue_inputs",
    "MetricVerdict",
    "OffendingResource",
    "build_detailed_metrics",
    "build_metric_verdicts",
    "extract_offending_resources",
    "format_metric_value",
    "get_verdict",
    "resolve_ttfb",
]
