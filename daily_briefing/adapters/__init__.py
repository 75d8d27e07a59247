"""
Adapters package for the Daily Briefing Service.

This package contains components for integrating with upstream providers, including:
- The abstract interface every adaptor implements
- Concrete implementations for weather, stock quotes, news search and calendar
- A factory that builds adaptors from application settings
"""

from . import interfaces

from .factory import AdaptorFactory, AdaptorNotFoundError

__all__ = [
    'interfaces',
    'AdaptorFactory',
    'AdaptorNotFoundError',
]
