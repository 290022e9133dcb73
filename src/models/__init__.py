"""
PerfRisk Engine - Data Models

Shared value objects passed between the normalizer, the scoring core
and the API. All of them are immutable once built.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


# Wire name (as used by Lighthouse consumers and the HTTP API) -> attribute
METRIC_FIELDS: Dict[str, str] = {
    "lcp": "lcp",
    "cls": "cls",
    "inp": "inp",
    "tbt": "tbt",
    "fcp": "fcp",
    "speedIndex": "speed_index",
    "domSize": "dom_size",
    "mainThreadWork": "main_thread_work",
}


@dataclass(frozen=True)
class MetricSet:
    """
    Lab metrics consumed by the risk calculator.

    Times are in milliseconds, CLS is unitless and DOM size is an element
    count. Unmeasured values are expected to arrive as 0.
    """
    lcp: float = 0.0
    cls: float = 0.0
    inp: float = 0.0
    tbt: float = 0.0
    fcp: float = 0.0
    speed_index: float = 0.0
    dom_size: float = 0.0
    main_thread_work: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        """Convert to the camelCase wire format."""
        return {wire: getattr(self, attr) for wire, attr in METRIC_FIELDS.items()}


@dataclass(frozen=True)
class RevenueImpactInputs:
    """Metric-derived signals feeding the detailed revenue model."""
    lcp_seconds: float
    cls: float
    inp_ms: Optional[float]  # None when INP was not measured
    mobile_performance_score: float  # 0-100
    field_data_available: bool
    poor_cwv_count: int  # 0-3

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lcpSeconds": self.lcp_seconds,
            "cls": self.cls,
            "inpMs": self.inp_ms,
            "mobilePerformanceScore": self.mobile_performance_score,
            "fieldDataAvailable": self.field_data_available,
            "poorCWVCount": self.poor_cwv_count,
        }
