"""
Geographic registry client (IBGE localidades API).

Provides the state table with macro-regions and the municipality list of a
state. Failures raise ``RegistryUnavailableError``; callers degrade to the
offline state table or to free-text city entry.
"""

import asyncio
import logging
from typing import List, Optional

import aiohttp
from pydantic import ValidationError

from frete_search.config import RegistryConfig
from frete_search.error_handling import FreteSearchError, RegistryUnavailableError
from frete_search.models import State
from frete_search.schemas import CityPayload, StatePayload
from .http_client import BaseHttpClient


logger = logging.getLogger(__name__)


class IBGERegistryClient(BaseHttpClient):
    """Client for the IBGE states and municipalities endpoints."""

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.config = config or RegistryConfig()
        super().__init__(self.config.timeout_seconds, session)

    async def fetch_states(self) -> List[State]:
        """
        Fetch all states with their regions.

        Raises:
            RegistryUnavailableError: On request failure or a non-array body
        """
        data = await self._fetch_array(f"{self.config.base_url.rstrip('/')}/estados")
        states = []
        for item in data:
            try:
                states.append(StatePayload.model_validate(item).to_state())
            except ValidationError:
                logger.warning(f"Skipping malformed state record: {item!r}")
        return states

    async def fetch_cities(self, state_code: str) -> List[str]:
        """
        Fetch municipality names for a state code.

        Raises:
            RegistryUnavailableError: On request failure or a non-array body
        """
        code = state_code.strip().upper()
        url = f"{self.config.base_url.rstrip('/')}/estados/{code}/municipios"
        data = await self._fetch_array(url)
        cities = []
        for item in data:
            try:
                cities.append(CityPayload.model_validate(item).nome.strip())
            except ValidationError:
                logger.debug(f"Skipping malformed city record: {item!r}")
        return [c for c in cities if c]

    async def _fetch_array(self, url: str) -> list:
        try:
            data = await self._get_json(url, headers={"Accept": "application/json"})
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, FreteSearchError) as e:
            raise RegistryUnavailableError(f"Registry request failed: {type(e).__name__}: {e}") from e
        if not isinstance(data, list):
            raise RegistryUnavailableError(f"Expected a JSON array from {url}")
        return data
