"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import pytest
from typing import Dict, Any

from src.models import MetricSet, RevenueImpactInputs


# ============================================================================
# Metric Fixtures
# ============================================================================

@pytest.fixture
def make_metrics():
    """Factory for MetricSets with every unspecified metric at 0."""
    def _make(**overrides) -> MetricSet:
        return MetricSet(**overrides)
    return _make


@pytest.fixture
def zero_metrics() -> MetricSet:
    """A page with nothing measured (all zeros)."""
    return MetricSet()


@pytest.fixture
def slow_page_metrics() -> MetricSet:
    """Worst-case speed metrics with everything else at 0."""
    return MetricSet(lcp=5000, tbt=600, speed_index=6000)


@pytest.fixture
def severe_revenue_inputs() -> RevenueImpactInputs:
    """Signals that hit the top rung of every revenue ladder."""
    return RevenueImpactInputs(
        lcp_seconds=4.5,
        cls=0.3,
        inp_ms=600,
        mobile_performance_score=30,
        field_data_available=True,
        poor_cwv_count=3,
    )


@pytest.fixture
def healthy_revenue_inputs() -> RevenueImpactInputs:
    """Signals from a fast page: no conversion drop at all."""
    return RevenueImpactInputs(
        lcp_seconds=1.2,
        cls=0.02,
        inp_ms=None,
        mobile_performance_score=95,
        field_data_available=False,
        poor_cwv_count=0,
    )


# ============================================================================
# PageSpeed Insights Fixtures
# ============================================================================

@pytest.fixture
def pagespeed_result() -> Dict[str, Any]:
    """Trimmed PageSpeed Insights v5 result for a slow mobile page."""
    return {
        "id": "https://example.se/",
        "loadingExperience": {
            "metrics": {
                "LARGEST_CONTENTFUL_PAINT_MS": {"percentile": 4100, "category": "SLOW"},
            },
            "overall_category": "SLOW",
        },
        "lighthouseResult": {
            "categories": {
                "performance": {"score": 0.38},
            },
            "audits": {
                "largest-contentful-paint": {"numericValue": 5000, "score": 0.12},
                "cumulative-layout-shift": {"numericValue": 0.18, "score": 0.45},
                "interaction-to-next-paint": {"numericValue": 650, "score": 0.3},
                "total-blocking-time": {"numericValue": 600, "score": 0.2},
                "first-contentful-paint": {"numericValue": 3000, "score": 0.4},
                "speed-index": {"numericValue": 6000, "score": 0.2},
                "dom-size": {"numericValue": 3000, "score": 0.5},
                "mainthread-work-breakdown": {"numericValue": 6000, "score": 0.1},
            },
        },
    }


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
