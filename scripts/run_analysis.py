#!/usr/bin/env python3
"""
Local Analysis Script

Score a saved PageSpeed Insights result without running the API.

Usage:
    python scripts/run_analysis.py pagespeed.json
    python scripts/run_analysis.py pagespeed.json --revenue 50000 --mobile-share 65 --industry ecommerce
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.metrics import MetricValidationError, sanitize_monthly_revenue
from src.scoring import analyze_lighthouse_result
from src.utils import get_settings


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
        ]
    )


def run(
    input_file: str,
    revenue: float,
    mobile_share: float,
    industry: str,
    output_file: str = None,
):
    """Run analysis on a saved PageSpeed result."""
    with open(input_file) as f:
        pagespeed_result = json.load(f)

    try:
        analysis = analyze_lighthouse_result(
            pagespeed_result,
            monthly_revenue=sanitize_monthly_revenue(revenue),
            mobile_traffic_percent=mobile_share,
            industry=industry.lower(),
        )
    except MetricValidationError as e:
        print(f"ERROR: {e}")
        return None

    result = analysis.to_dict()
    summary = result["summary"]

    print(f"\n{'='*60}")
    print(f"PERFORMANCE RISK ANALYSIS")
    print(f"{'='*60}")
    print(f"Input: {input_file}")
    print(f"Overall Health: {summary['overall_health_score']}/100 ({summary['risk_level']} risk)")
    impact = summary["business_impact"]
    print(f"Business Impact: {impact['impact_level']} ({impact['estimated_conversion_loss']} conversion loss)")

    print(f"\n{'='*60}")
    print(f"RISK BREAKDOWN")
    print(f"{'='*60}")
    for category, score in analysis.scores.by_category().items():
        level = result["risk_breakdown"][f"{category}_risk_level"]
        print(f"  {category:12s} | {score:3d} | {level}")

    print(f"\nFix Priorities:")
    for i, fix in enumerate(analysis.fix_priorities, 1):
        print(f"  {i}. {fix.category:12s} | {fix.score:3d} | {fix.priority}")

    flagged = [v for v in analysis.metric_verdicts or [] if v.verdict != "Good"]
    if flagged:
        print(f"\nMetrics Needing Work:")
        for verdict in flagged:
            print(f"  {verdict.label:32s} | {verdict.display_value:>9s} | {verdict.verdict}")

    revenue_impact = result.get("revenueImpact")
    if revenue_impact:
        print(f"\n{'='*60}")
        print(f"REVENUE IMPACT ({revenue_impact['industryUsed']})")
        print(f"{'='*60}")
        print(f"  Monthly loss: {revenue_impact['minMonthlyLoss']:,} - {revenue_impact['maxMonthlyLoss']:,}")
        print(f"  Annual loss:  {revenue_impact['minAnnualLoss']:,} - {revenue_impact['maxAnnualLoss']:,}")
        print(f"  Confidence:   {revenue_impact['confidenceScore']} ({revenue_impact['confidenceLabel']})")
        for driver, severity in revenue_impact["riskDrivers"].items():
            print(f"  {driver:14s} {severity}")

    # Save to file if requested
    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            json.dump(result, f, indent=2)

        print(f"\nResults saved to: {output_path}")

    return result


def main():
    """Main entry point."""
    load_dotenv()
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Score a saved PageSpeed Insights result"
    )
    parser.add_argument(
        "input",
        help="Path to PageSpeed Insights JSON"
    )
    parser.add_argument(
        "--revenue",
        type=float,
        default=settings.DEFAULT_MONTHLY_REVENUE,
        help="Monthly revenue (enables the revenue model when > 0)"
    )
    parser.add_argument(
        "--mobile-share",
        type=float,
        default=settings.DEFAULT_MOBILE_TRAFFIC_PERCENT,
        help="Mobile traffic percent (default: 100)"
    )
    parser.add_argument(
        "--industry",
        default=settings.DEFAULT_INDUSTRY,
        help="Industry key (default: general)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Save results to JSON file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    result = run(
        input_file=args.input,
        revenue=args.revenue,
        mobile_share=args.mobile_share,
        industry=args.industry,
        output_file=args.output,
    )
    if result is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
