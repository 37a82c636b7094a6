"""Configuration module for the freight search engine."""

from .settings import (
    SEARCH_CONFIG,
    ApiConfig,
    GeocodingConfig,
    RateLimitConfig,
    RegistryConfig,
    SearchSettings,
    get_search_settings,
)

__all__ = [
    'SEARCH_CONFIG',
    'ApiConfig',
    'GeocodingConfig',
    'RateLimitConfig',
    'RegistryConfig',
    'SearchSettings',
    'get_search_settings',
]
