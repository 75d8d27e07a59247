"""
Service layer for the Daily Briefing Service.
"""

from daily_briefing.services.briefing_service import BriefingService

__all__ = ["BriefingService"]
