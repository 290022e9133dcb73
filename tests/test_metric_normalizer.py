"""
Test Suite for the Metric Normalizer

Tests boundary validation and Lighthouse / PageSpeed extraction.
"""

import pytest
from src.metrics import (
    MAX_MONTHLY_REVENUE,
    MetricValidationError,
    count_poor_cwv,
    extract_metric_set,
    extract_revenue_inputs,
    sanitize_metric_set,
    sanitize_monthly_revenue,
    sanitize_revenue_inputs,
)
from src.models import MetricSet


class TestSanitizeMetricSet:
    """Test validation of loose metric mappings."""

    def test_missing_values_become_zero(self):
        assert sanitize_metric_set({}) == MetricSet()

    def test_none_becomes_zero(self):
        assert sanitize_metric_set({"lcp": None, "tbt": 250}).lcp == 0

    def test_camel_case_wire_names(self):
        result = sanitize_metric_set({"speedIndex": 4100, "domSize": 1600, "mainThreadWork": 3200})

        assert result.speed_index == 4100
        assert result.dom_size == 1600
        assert result.main_thread_work == 3200

    def test_snake_case_names(self):
        assert sanitize_metric_set({"speed_index": 4100}).speed_index == 4100

    def test_integers_become_floats(self):
        assert isinstance(sanitize_metric_set({"lcp": 2800}).lcp, float)

    def test_unknown_keys_ignored(self):
        assert sanitize_metric_set({"ttfb": 900}) == MetricSet()

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(MetricValidationError) as exc_info:
            sanitize_metric_set({"lcp": value})
        assert exc_info.value.field == "lcp"

    def test_negative_rejected(self):
        with pytest.raises(MetricValidationError):
            sanitize_metric_set({"tbt": -1})

    @pytest.mark.parametrize("value", ["2500", True, [2500]])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(MetricValidationError):
            sanitize_metric_set({"lcp": value})

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            sanitize_metric_set({"cls": -0.1})


class TestExtractMetricSet:
    """Test MetricSet extraction from PageSpeed results."""

    def test_all_audits_mapped(self, pagespeed_result):
        result = extract_metric_set(pagespeed_result)

        assert result == MetricSet(
            lcp=5000, cls=0.18, inp=650, tbt=600, fcp=3000,
            speed_index=6000, dom_size=3000, main_thread_work=6000,
        )

    def test_missing_audit_is_zero(self, pagespeed_result):
        del pagespeed_result["lighthouseResult"]["audits"]["dom-size"]
        pagespeed_result["lighthouseResult"]["audits"]["speed-index"] = {"score": None}

        result = extract_metric_set(pagespeed_result)

        assert result.dom_size == 0
        assert result.speed_index == 0

    @pytest.mark.parametrize("payload", [
        {},
        {"lighthouseResult": None},
        {"lighthouseResult": {"audits": {}}},
        {"lighthouseResult": {"categories": {}}},
    ])
    def test_invalid_structure(self, payload):
        with pytest.raises(MetricValidationError, match="Invalid Lighthouse response structure"):
            extract_metric_set(payload)


class TestExtractRevenueInputs:
    """Test revenue model signals from PageSpeed results."""

    def test_slow_page(self, pagespeed_result):
        result = extract_revenue_inputs(pagespeed_result)

        assert result.lcp_seconds == pytest.approx(5.0)
        assert result.cls == pytest.approx(0.18)
        assert result.inp_ms == 650
        assert result.mobile_performance_score == pytest.approx(38)
        assert result.field_data_available is True
        assert result.poor_cwv_count == 3

    def test_missing_inp_is_none(self, pagespeed_result):
        del pagespeed_result["lighthouseResult"]["audits"]["interaction-to-next-paint"]
        assert extract_revenue_inputs(pagespeed_result).inp_ms is None

    def test_missing_performance_score_is_zero(self, pagespeed_result):
        pagespeed_result["lighthouseResult"]["categories"] = {}
        assert extract_revenue_inputs(pagespeed_result).mobile_performance_score == 0

    def test_origin_field_data_fallback(self, pagespeed_result):
        pagespeed_result["originLoadingExperience"] = pagespeed_result.pop("loadingExperience")
        assert extract_revenue_inputs(pagespeed_result).field_data_available is True

    def test_no_field_data(self, pagespeed_result):
        del pagespeed_result["loadingExperience"]
        assert extract_revenue_inputs(pagespeed_result).field_data_available is False

    def test_poor_cwv_ignores_null_scores(self, pagespeed_result):
        audits = pagespeed_result["lighthouseResult"]["audits"]
        audits["largest-contentful-paint"]["score"] = None
        audits["cumulative-layout-shift"]["score"] = 0.5
        assert count_poor_cwv(audits) == 1


class TestSanitizeRevenueInputs:
    """Test validation of revenue model inputs."""

    def test_valid(self):
        result = sanitize_revenue_inputs({
            "lcpSeconds": 3.4,
            "cls": 0.12,
            "inpMs": None,
            "mobilePerformanceScore": 61,
            "fieldDataAvailable": True,
            "poorCWVCount": 2,
        })

        assert result.lcp_seconds == 3.4
        assert result.inp_ms is None
        assert result.poor_cwv_count == 2
        assert result.field_data_available is True

    def test_poor_cwv_out_of_range(self):
        with pytest.raises(MetricValidationError) as exc_info:
            sanitize_revenue_inputs({"lcpSeconds": 1, "cls": 0, "mobilePerformanceScore": 90, "poorCWVCount": 4})
        assert exc_info.value.field == "poorCWVCount"

    def test_non_finite_rejected(self):
        with pytest.raises(MetricValidationError):
            sanitize_revenue_inputs({"lcpSeconds": float("nan"), "cls": 0, "mobilePerformanceScore": 90})

    def test_field_data_flag_must_be_bool(self):
        with pytest.raises(MetricValidationError) as exc_info:
            sanitize_revenue_inputs({
                "lcpSeconds": 1, "cls": 0, "mobilePerformanceScore": 90, "fieldDataAvailable": "false",
            })
        assert exc_info.value.field == "fieldDataAvailable"

    def test_field_data_flag_defaults_to_false(self):
        result = sanitize_revenue_inputs({
            "lcpSeconds": 1, "cls": 0, "mobilePerformanceScore": 90, "fieldDataAvailable": None,
        })
        assert result.field_data_available is False


class TestMalformedAudits:
    """Malformed parts of a Lighthouse document are validation errors."""

    def test_audit_not_an_object(self):
        with pytest.raises(MetricValidationError) as exc_info:
            extract_metric_set({"lighthouseResult": {"audits": {"largest-contentful-paint": "oops"}}})
        assert exc_info.value.field == "largest-contentful-paint"

    def test_audit_is_a_list(self, pagespeed_result):
        pagespeed_result["lighthouseResult"]["audits"]["dom-size"] = [1]
        with pytest.raises(MetricValidationError) as exc_info:
            extract_metric_set(pagespeed_result)
        assert exc_info.value.field == "dom-size"

    def test_cwv_audit_in_revenue_inputs(self, pagespeed_result):
        pagespeed_result["lighthouseResult"]["audits"]["interaction-to-next-paint"] = 650
        with pytest.raises(MetricValidationError):
            extract_revenue_inputs(pagespeed_result)

    @pytest.mark.parametrize("categories,field", [
        (["performance"], "categories"),
        ({"performance": 0.38}, "performance"),
    ])
    def test_categories_not_objects(self, pagespeed_result, categories, field):
        pagespeed_result["lighthouseResult"]["categories"] = categories
        with pytest.raises(MetricValidationError) as exc_info:
            extract_revenue_inputs(pagespeed_result)
        assert exc_info.value.field == field


class TestReusedMetricSet:
    """Revenue inputs can reuse an already extracted MetricSet."""

    def test_given_metrics_are_used(self, pagespeed_result):
        result = extract_revenue_inputs(pagespeed_result, metrics=MetricSet(lcp=1200, cls=0.05))

        assert result.lcp_seconds == pytest.approx(1.2)
        assert result.cls == pytest.approx(0.05)
        # Still read from the document
        assert result.inp_ms == 650
        assert result.poor_cwv_count == 3


class TestSanitizeMonthlyRevenue:
    """Test the revenue bound."""

    @pytest.mark.parametrize("value", [0, 5000, MAX_MONTHLY_REVENUE])
    def test_valid(self, value):
        assert sanitize_monthly_revenue(value) == value

    @pytest.mark.parametrize("value", [1e308, float("inf"), float("nan"), -1, "5000"])
    def test_rejected(self, value):
        with pytest.raises(MetricValidationError) as exc_info:
            sanitize_monthly_revenue(value)
        assert exc_info.value.field == "revenue"
