"""
API Endpoint for Performance Risk Analysis

FastAPI app that:
1. Accepts lab metrics or an already-fetched PageSpeed Insights result
2. Validates and normalizes them into a MetricSet
3. Scores risk, overall health and fix priorities
4. Estimates business and revenue impact when revenue is supplied
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from src import __version__
from src.metrics import (
    MAX_MONTHLY_REVENUE,
    MetricValidationError,
    sanitize_metric_set,
    sanitize_revenue_inputs,
)
from src.scoring import (
    INDUSTRY_MULTIPLIERS,
    analyze_lighthouse_result,
    analyze_metrics,
    compute_revenue_impact,
)
from src.utils import get_settings

settings = get_settings()

# Configure logging to stdout
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PerfRisk Engine",
    description="Risk scores, health and revenue impact from web performance metrics",
    version=__version__,
)


# ============================================================================
# REQUEST MODELS
# ============================================================================

class MetricSetPayload(BaseModel):
    """Lab metrics. Any field left out is treated as 0."""
    lcp: Optional[float] = Field(default=None, description="Largest Contentful Paint (ms)")
    cls: Optional[float] = Field(default=None, description="Cumulative Layout Shift")
    inp: Optional[float] = Field(default=None, description="Interaction to Next Paint (ms)")
    tbt: Optional[float] = Field(default=None, description="Total Blocking Time (ms)")
    fcp: Optional[float] = Field(default=None, description="First Contentful Paint (ms)")
    speed_index: Optional[float] = Field(default=None, alias="speedIndex", description="Speed Index (ms)")
    dom_size: Optional[float] = Field(default=None, alias="domSize", description="DOM element count")
    main_thread_work: Optional[float] = Field(
        default=None, alias="mainThreadWork", description="Main thread work (ms)"
    )

    class Config:
        populate_by_name = True


class RevenueInputsPayload(BaseModel):
    """Signals for the revenue model."""
    lcp_seconds: float = Field(..., alias="lcpSeconds")
    cls: float
    inp_ms: Optional[float] = Field(default=None, alias="inpMs")
    mobile_performance_score: float = Field(..., alias="mobilePerformanceScore", description="0-100")
    field_data_available: bool = Field(default=False, alias="fieldDataAvailable")
    poor_cwv_count: int = Field(default=0, alias="poorCWVCount", ge=0, le=3)

    class Config:
        populate_by_name = True


class AnalyzeRequest(BaseModel):
    """
    Request to analyze one page.

    Supply either ``metrics`` or a raw ``lighthouse_result``. When
    ``revenue`` is above 0 the revenue model runs as well (for ``metrics``
    requests only if ``revenueImpactInputs`` is given).
    """
    metrics: Optional[MetricSetPayload] = None
    lighthouse_result: Optional[Dict[str, Any]] = None
    revenue_inputs: Optional[RevenueInputsPayload] = Field(default=None, alias="revenueImpactInputs")
    revenue: Optional[float] = Field(
        default=None, ge=0, le=MAX_MONTHLY_REVENUE, allow_inf_nan=False, description="Monthly revenue"
    )
    mobile_share: Optional[float] = Field(
        default=None, alias="mobileShare", allow_inf_nan=False, description="Mobile traffic %"
    )
    industry: Optional[str] = Field(default=None, description="ecommerce, finance, saas, healthcare, general")

    class Config:
        populate_by_name = True


class RevenueImpactRequest(BaseModel):
    """Request for the revenue model alone."""
    inputs: RevenueInputsPayload
    revenue: float = Field(
        ..., gt=0, le=MAX_MONTHLY_REVENUE, allow_inf_nan=False, description="Monthly revenue"
    )
    mobile_share: Optional[float] = Field(default=None, alias="mobileShare", allow_inf_nan=False)
    industry: Optional[str] = None

    class Config:
        populate_by_name = True


def _resolve_business_context(
    revenue: Optional[float],
    mobile_share: Optional[float],
    industry: Optional[str],
):
    """Fill business inputs from settings when the request leaves them out."""
    if revenue is None:
        revenue = settings.DEFAULT_MONTHLY_REVENUE
    if mobile_share is None:
        mobile_share = settings.DEFAULT_MOBILE_TRAFFIC_PERCENT
    industry = (industry or settings.DEFAULT_INDUSTRY).strip().lower()
    return revenue, mobile_share, industry


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "PerfRisk Engine"}


@app.get("/api/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/api/industries")
async def industries():
    """Industry keys and their revenue-loss multipliers."""
    return {"industries": INDUSTRY_MULTIPLIERS, "default_multiplier": 1.0}


@app.post("/api/analyze")
async def analyze(request: AnalyzeRequest):
    """
    Score a page's performance.

    Returns summary, risk breakdown, fix priorities and, when revenue is
    supplied, the revenue impact estimate.
    """
    revenue, mobile_share, industry = _resolve_business_context(
        request.revenue, request.mobile_share, request.industry
    )
    logger.info(f"Revenue Inputs: revenue={revenue}, mobileShare={mobile_share}, industry={industry}")

    try:
        if request.lighthouse_result is not None:
            analysis = analyze_lighthouse_result(
                request.lighthouse_result,
                monthly_revenue=revenue,
                mobile_traffic_percent=mobile_share,
                industry=industry,
            )
        elif request.metrics is not None:
            revenue_inputs = None
            if request.revenue_inputs is not None:
                revenue_inputs = sanitize_revenue_inputs(request.revenue_inputs.model_dump(by_alias=True))
            analysis = analyze_metrics(
                sanitize_metric_set(request.metrics.model_dump(by_alias=True)),
                revenue_inputs=revenue_inputs,
                monthly_revenue=revenue,
                mobile_traffic_percent=mobile_share,
                industry=industry,
            )
        else:
            raise HTTPException(status_code=400, detail="metrics or lighthouse_result is required")
    except MetricValidationError as e:
        logger.warning(f"Rejected analysis request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Scores: {analysis.scores.to_dict()}")
    logger.info(f"Analysis Complete: overallHealth={analysis.scores.overall_health}")
    return analysis.to_dict()


@app.post("/api/revenue-impact")
async def revenue_impact(request: RevenueImpactRequest):
    """Estimate revenue impact from revenue model signals alone."""
    revenue, mobile_share, industry = _resolve_business_context(
        request.revenue, request.mobile_share, request.industry
    )
    try:
        inputs = sanitize_revenue_inputs(request.inputs.model_dump(by_alias=True))
    except MetricValidationError as e:
        logger.warning(f"Rejected revenue impact request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    estimate = compute_revenue_impact(inputs, revenue, mobile_share, industry)
    logger.info(
        f"Revenue impact ({industry}): "
        f"{estimate.min_monthly_loss}-{estimate.max_monthly_loss}/month"
    )
    return estimate.to_dict()
