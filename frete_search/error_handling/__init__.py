"""
Error handling module for the freight search engine.

Provides the exception taxonomy plus fallback and graceful degradation helpers.
"""

from .error_handler import ErrorHandler
from .errors import (
    FreteSearchError,
    GeocodingError,
    ListingsUnavailableError,
    RegistryUnavailableError,
    UpstreamStatusError,
)

__all__ = [
    'ErrorHandler',
    'FreteSearchError',
    'GeocodingError',
    'ListingsUnavailableError',
    'RegistryUnavailableError',
    'UpstreamStatusError',
]
