"""
Per-Metric Audit Verdicts

Deterministic reading of the Lighthouse audits behind each displayed metric:

- Groups the raw audits into core, load, blocking and backend sections
- Gives every measured metric a verdict from its audit score:
  Good (>= 0.9), Needs Improvement (>= 0.5), otherwise Poor
- Lists the top offending resources of each audit, by wasted bytes then
  total bytes

TTFB comes from server-response-time, or from the LCP element's response
time when that audit has no numeric value.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, Mapping, Optional, Tuple

from .normalizer import get_audit

logger = logging.getLogger(__name__)


GOOD_SCORE = 0.9
NEEDS_IMPROVEMENT_SCORE = 0.5
MAX_OFFENDING_RESOURCES = 3

# (section, key, audit id) in display order
SECTION_METRICS: List[Tuple[str, str, str]] = [
    ("core", "lcp", "largest-contentful-paint"),
    ("core", "cls", "cumulative-layout-shift"),
    ("core", "inp", "interaction-to-next-paint"),
    ("core", "fcp", "first-contentful-paint"),
    ("load", "speedIndex", "speed-index"),
    ("load", "tti", "interactive"),
    ("load", "ttfb", "server-response-time"),
    ("blocking", "tbt", "total-blocking-time"),
    ("blocking", "mainThread", "mainthread-work-breakdown"),
    ("blocking", "longTasks", "long-tasks"),
    ("blocking", "bootupTime", "bootup-time"),
    ("backend", "totalBytes", "total-byte-weight"),
    ("backend", "unusedJs", "unused-javascript"),
    ("backend", "unusedCss", "unused-css-rules"),
    ("backend", "networkRequests", "network-requests"),
]

# Audits shown in detailed_metrics but without a verdict row
EXTRA_SECTION_AUDITS: List[Tuple[str, str, str]] = [
    ("backend", "serverResponse", "server-response-time"),
]

METRIC_LABELS: Dict[str, str] = {
    "largest-contentful-paint": "Largest Contentful Paint (LCP)",
    "cumulative-layout-shift": "Cumulative Layout Shift (CLS)",
    "interaction-to-next-paint": "Interaction to Next Paint (INP)",
    "first-contentful-paint": "First Contentful Paint (FCP)",
    "speed-index": "Speed Index",
    "interactive": "Time to Interactive (TTI)",
    "total-blocking-time": "Total Blocking Time (TBT)",
    "mainthread-work-breakdown": "Main Thread Work",
    "long-tasks": "Long Tasks",
    "bootup-time": "Bootup Time",
    "server-response-time": "Server Response Time (TTFB)",
    "total-byte-weight": "Total Page Size",
    "unused-javascript": "Unused JavaScript",
    "unused-css-rules": "Unused CSS",
    "network-requests": "Network Requests",
}

TIME_AUDITS = {
    "largest-contentful-paint",
    "first-contentful-paint",
    "interactive",
    "total-blocking-time",
    "bootup-time",
    "speed-index",
    "mainthread-work-breakdown",
    "long-tasks",
    "server-response-time",
}

BYTE_AUDITS = {"total-byte-weight", "unused-javascript", "unused-css-rules"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number_or_zero(value: Any) -> float:
    return value if _is_number(value) and math.isfinite(value) else 0


@dataclass(frozen=True)
class OffendingResource:
    """A resource or element an audit blames."""
    url: Optional[str]
    total_bytes: float
    wasted_bytes: float
    element: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "totalBytes": self.total_bytes,
            "wastedBytes": self.wasted_bytes,
            "element": self.element,
        }


@dataclass(frozen=True)
class MetricVerdict:
    """Verdict row for one displayed metric."""
    metric_key: str  # "<section>-<key>", e.g. "core-lcp"
    label: str
    display_value: str
    verdict: str  # Good / Needs Improvement / Poor
    resources: List[OffendingResource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "metricKey": self.metric_key,
            "label": self.label,
            "displayValue": self.display_value,
            "verdict": self.verdict,
        }
        if self.resources:
            result["resources"] = [r.to_dict() for r in self.resources]
        return result


def get_verdict(score: Any) -> str:
    """Verdict for a Lighthouse audit score (0-1). A missing score is Poor."""
    if _is_number(score):
        if score >= GOOD_SCORE:
            return "Good"
        if score >= NEEDS_IMPROVEMENT_SCORE:
            return "Needs Improvement"
    return "Poor"


def format_metric_value(audit_id: str, value: Any) -> Optional[str]:
    """
    Human-readable value for an audit's numericValue.

    Returns:
        Formatted string, or None when there is no usable number
    """
    if not _is_number(value) or math.isnan(value):
        return None
    if audit_id == "server-response-time":
        return f"{value / 1000:.2f} s"
    if audit_id in TIME_AUDITS:
        return f"{value / 1000:.1f} s"
    if audit_id == "cumulative-layout-shift":
        return f"{value:.3f}"
    if audit_id in BYTE_AUDITS:
        return f"{value / 1024:.1f} KB"
    if audit_id == "network-requests":
        return str(math.floor(value + 0.5))
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def resolve_ttfb(audits: Mapping[str, Any]) -> Optional[float]:
    """
    Time to first byte in ms.

    Falls back to the response time of the first LCP detail item when
    server-response-time has no numeric value.
    """
    value = get_audit(audits, "server-response-time").get("numericValue")
    if _is_number(value):
        return value

    details = get_audit(audits, "largest-contentful-paint").get("details")
    items = details.get("items") if isinstance(details, Mapping) else None
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        response_time = items[0].get("responseTime")
        if _is_number(response_time):
            return response_time
    return None


def build_detailed_metrics(audits: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Group raw audits into core, load, blocking and backend sections.

    The load section's ttfb entry carries the resolved TTFB as its
    numericValue (None when unknown).
    """
    sections: Dict[str, Dict[str, Any]] = {}
    for section, key, audit_id in SECTION_METRICS + EXTRA_SECTION_AUDITS:
        audit = get_audit(audits, audit_id)
        if section == "load" and key == "ttfb":
            audit = dict(audit, numericValue=resolve_ttfb(audits))
        elif not audit:
            audit = None
        sections.setdefault(section, {})[key] = audit
    return sections


def extract_offending_resources(audit: Mapping[str, Any]) -> List[OffendingResource]:
    """Top offending resources from an audit's details.items."""
    details = audit.get("details")
    items = details.get("items") if isinstance(details, Mapping) else None
    if not isinstance(items, list):
        return []

    resources = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        url = item.get("url") or item.get("source") or None
        if isinstance(url, Mapping):
            url = url.get("url") or None
        node = item.get("node")
        element = (node.get("selector") or None) if isinstance(node, Mapping) else None
        if not url and not element:
            continue
        resources.append(OffendingResource(
            url=url,
            total_bytes=_number_or_zero(item.get("totalBytes")) or _number_or_zero(item.get("transferSize")),
            wasted_bytes=_number_or_zero(item.get("wastedBytes")),
            element=element,
        ))

    # sorted() is stable, so equal sizes keep the audit's order
    resources = sorted(resources, key=lambda r: (r.wasted_bytes, r.total_bytes), reverse=True)
    return resources[:MAX_OFFENDING_RESOURCES]


def build_metric_verdicts(audits: Mapping[str, Any]) -> List[MetricVerdict]:
    """
    Verdict rows for every displayed metric with a numeric value.

    Raises:
        MetricValidationError: If a referenced audit is not an object
    """
    detailed = build_detailed_metrics(audits)

    rows = []
    for section, key, audit_id in SECTION_METRICS:
        audit = detailed[section][key]
        if not audit:
            continue
        display_value = format_metric_value(audit_id, audit.get("numericValue"))
        if display_value is None:
            continue
        rows.append(MetricVerdict(
            metric_key=f"{section}-{key}",
            label=METRIC_LABELS.get(audit_id, audit_id),
            display_value=display_value,
            verdict=get_verdict(audit.get("score")),
            resources=extract_offending_resources(get_audit(audits, audit_id)),
        ))

    logger.debug(f"Metric verdicts: {[(r.metric_key, r.verdict) for r in rows]}")
    return rows
