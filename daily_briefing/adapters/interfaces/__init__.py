"""
Adaptor interfaces package.

Defines the contract shared by all upstream provider adaptors.
"""

from .external_api import ExternalAPIAdaptorInterface, HTTPAdaptor

__all__ = [
    'ExternalAPIAdaptorInterface',
    'HTTPAdaptor',
]
