"""
Remote collaborators: listings API, geographic registry and place lookup.
"""

from .http_client import BaseHttpClient
from .ibge_client import IBGERegistryClient
from .listings_client import ListingsClient, parse_listings
from .nominatim_client import NominatimGeocoder

__all__ = [
    'BaseHttpClient',
    'IBGERegistryClient',
    'ListingsClient',
    'NominatimGeocoder',
    'parse_listings',
]
