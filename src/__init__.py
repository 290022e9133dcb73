"""
PerfRisk Engine

Turns web-performance audit data into explainable business numbers:
1. Normalizes Lighthouse / PageSpeed metrics into a MetricSet
2. Scores five risk categories (speed, UX, SEO, conversion, scaling)
3. Aggregates them into an overall health score and fix priorities
4. Estimates the revenue impact of the measured performance
"""

__version__ = "0.2.0"
