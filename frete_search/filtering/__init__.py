"""
Filtering module for freight listings.

This module provides the attribute filter pipeline, the radius filter with its
background prefetch, and result ordering.
"""

from .listing_filter import ListingFilter
from .ordering import SortMode, order_listings
from .radius_filter import RadiusPrefetcher, apply_radius, prefetch_keys

__all__ = [
    'ListingFilter',
    'RadiusPrefetcher',
    'SortMode',
    'apply_radius',
    'order_listings',
    'prefetch_keys',
]
