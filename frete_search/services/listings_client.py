"""
Listings API client.

Fetches every open listing from the freight marketplace backend. When an
auth token is configured the authenticated request is tried first and the
public endpoint is used as a single fallback.
"""

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp
from pydantic import ValidationError

from frete_search.config import ApiConfig
from frete_search.error_handling import ErrorHandler, FreteSearchError, ListingsUnavailableError
from frete_search.models import Listing
from frete_search.schemas import ListingPayload
from .http_client import BaseHttpClient


logger = logging.getLogger(__name__)


class ListingsClient(BaseHttpClient):
    """Client for ``GET /api/fretes/todos``."""

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.config = config or ApiConfig()
        super().__init__(self.config.timeout_seconds, session)
        self.error_handler = error_handler or ErrorHandler()

    @property
    def url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}{self.config.listings_path}"

    async def fetch_listings(self) -> List[Listing]:
        """
        Fetch and parse all listings.

        Returns:
            Parsed listings; malformed records are skipped

        Raises:
            ListingsUnavailableError: If both the authenticated and public
                requests fail, or the body is not an array
        """
        async def fetch_authenticated():
            return await self._fetch(use_auth=True)

        async def fetch_public():
            return await self._fetch(use_auth=False)

        if self.config.auth_token:
            raw = await self.error_handler.with_fallback(fetch_authenticated, fetch_public)
        else:
            raw = await fetch_public()

        listings = parse_listings(raw)
        logger.info(f"Fetched {len(listings)} listings")
        return listings

    async def _fetch(self, use_auth: bool) -> List[Any]:
        headers = {"Accept": "application/json"}
        if use_auth and self.config.auth_token:
            headers["Authorization"] = f"Bearer {self.config.auth_token}"
        try:
            data = await self._get_json(self.url, headers=headers)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, FreteSearchError) as e:
            raise ListingsUnavailableError(f"Listings request failed: {type(e).__name__}: {e}") from e
        if not isinstance(data, list):
            raise ListingsUnavailableError(f"Expected a JSON array, got {type(data).__name__}")
        return data


def parse_listings(raw: List[Any]) -> List[Listing]:
    """Validate raw records, skipping those that fail validation."""
    listings = []
    for item in raw:
        try:
            listings.append(ListingPayload.model_validate(item).to_listing())
        except ValidationError as e:
            logger.warning(f"Skipping malformed listing: {e.error_count()} validation error(s)")
    return listings
