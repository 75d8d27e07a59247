"""
Infrastructure package for the Daily Briefing Service.
Provides the in-memory result cache and provider rate limiting.
"""
