"""
Geographic utilities: great-circle distance and the geocoding cache.
"""

from .distance import distance_km, haversine_distance
from .geocoding_cache import CacheUpdated, Geocoder, GeocodingCache

__all__ = [
    'CacheUpdated',
    'Geocoder',
    'GeocodingCache',
    'distance_km',
    'haversine_distance',
]
