"""
HTTP routes for the Daily Briefing Service.
"""
