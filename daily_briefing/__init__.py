"""
Daily Briefing Service - Aggregation layer for the daily briefing view.

This package fetches weather, index quotes, LLM-curated news and calendar
data from third-party providers, normalizes the responses and caches the
results per category to avoid redundant upstream calls.
"""

__version__ = "0.1.0"
