"""
Domain package for the Daily Briefing Service.
Contains the canonical payload models shared by adaptors and handlers.
"""
