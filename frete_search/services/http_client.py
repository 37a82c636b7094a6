"""
Shared aiohttp plumbing for the remote collaborators.

Every request is bounded by a total timeout that aborts the underlying
connection and surfaces a failure instead of hanging.
"""

from typing import Any, Dict, Optional

import aiohttp

from frete_search.error_handling import UpstreamStatusError


class BaseHttpClient:
    """
    Base client owning (or borrowing) an ``aiohttp.ClientSession``.

    An injected session is never closed by the client; a session the client
    created itself is closed by ``close()``.
    """

    def __init__(
        self,
        timeout_seconds: float,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an open session"""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Explicitly close the session when done"""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        require_json_content_type: bool = False
    ) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            UpstreamStatusError: On a non-2xx status
            ValueError: On a non-JSON content type (when required) or body
            aiohttp.ClientError: On connection failures
            asyncio.TimeoutError: When the timeout expires
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with session.get(url, params=params, headers=headers, timeout=timeout) as response:
            if not 200 <= response.status < 300:
                raise UpstreamStatusError(response.status, url)
            if require_json_content_type:
                content_type = (response.headers.get("Content-Type") or "").lower()
                if "application/json" not in content_type:
                    raise ValueError(f"Unexpected content type {content_type!r} from {url}")
            # content_type=None: decode regardless of the declared type
            return await response.json(content_type=None)
