"""
Place lookup client (OpenStreetMap Nominatim search API).

Resolves a city and state to coordinates. Only the first candidate is used.
Every failure mode returns None; this client never raises.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from frete_search.config import GeocodingConfig
from frete_search.error_handling import FreteSearchError, GeocodingError
from frete_search.models import Coordinate
from .http_client import BaseHttpClient


logger = logging.getLogger(__name__)


class NominatimGeocoder(BaseHttpClient):
    """Geocoder backed by Nominatim's ``/search`` endpoint."""

    def __init__(
        self,
        config: Optional[GeocodingConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.config = config or GeocodingConfig()
        super().__init__(self.config.timeout_seconds, session)

    def build_query(self, city: str, state: str) -> str:
        return f"{city},{state},{self.config.country}"

    async def geocode(self, city: str, state: str) -> Optional[Coordinate]:
        """
        Look up coordinates for a city.

        Returns:
            The first candidate's coordinate, or None on timeout, non-2xx
            status, non-JSON response, empty result or unparsable candidate
        """
        query = self.build_query(city, state)
        try:
            return await self._search(query)
        except GeocodingError as e:
            logger.debug(f"Geocoding failed for {query}: {e}")
            return None

    async def _search(self, query: str) -> Optional[Coordinate]:
        params = {"format": "json", "q": query}
        headers = {"Accept": "application/json", "User-Agent": self.config.user_agent}
        try:
            data = await self._get_json(
                self.config.base_url,
                params=params,
                headers=headers,
                require_json_content_type=True
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, FreteSearchError) as e:
            raise GeocodingError(f"{type(e).__name__}: {e}") from e

        if not isinstance(data, list) or not data:
            return None
        first = data[0]
        try:
            return Coordinate(lat=float(first["lat"]), lon=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Unparsable candidate {first!r}") from e
