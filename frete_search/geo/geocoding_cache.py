"""
Geocoding cache for (city, state) pairs.

The cache is an explicit object owned by the search session rather than a
module-level map, so two sessions never share hidden state. It guarantees at
most one network lookup per distinct key while the key is cached or in flight,
and publishes a ``CacheUpdated`` event for every new entry so the radius stage
can recompute.

Keys are built from the *normalized* city and state text (accents, case and
spacing removed). "São Paulo,SP" and "sao paulo,sp" therefore share one entry
and one lookup; the lookup itself is made with the text of the first request.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

from frete_search.models import Coordinate
from frete_search.text_matching import normalize


logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Place lookup collaborator; must return None instead of raising."""

    async def geocode(self, city: str, state: str) -> Optional[Coordinate]:
        ...


@dataclass(frozen=True)
class CacheUpdated:
    """Published each time a new coordinate enters the cache."""
    key: str
    city: str
    state: str
    coordinate: Coordinate


CacheListener = Callable[[CacheUpdated], None]


class GeocodingCache:
    """Process-lifetime memo of resolved coordinates.

    Entries are never evicted or invalidated; failed lookups are not cached
    and will be retried by the next ``resolve`` call.

    Attributes:
        geocoder: Place lookup collaborator
        request_count: Number of lookups issued to the geocoder
    """

    def __init__(self, geocoder: Geocoder):
        self.geocoder = geocoder
        self.request_count = 0
        self._entries: Dict[str, Coordinate] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self._listeners: List[CacheListener] = []

    @staticmethod
    def make_key(city: Optional[str], state: Optional[str]) -> str:
        return f"{normalize(city)},{normalize(state)}"

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, city: Optional[str], state: Optional[str]) -> Optional[Coordinate]:
        """Cached coordinate for the pair, without any network call."""
        return self._entries.get(self.make_key(city, state))

    def has(self, city: Optional[str], state: Optional[str]) -> bool:
        return self.make_key(city, state) in self._entries

    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Register a listener for ``CacheUpdated`` events.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def resolve(self, city: Optional[str], state: Optional[str]) -> Optional[Coordinate]:
        """Resolve a (city, state) pair to a coordinate.

        Returns the cached value immediately when present. Concurrent calls
        for the same key share a single lookup. Never raises; every failure
        comes back as None.
        """
        city = (city or "").strip()
        state = (state or "").strip()
        if not city or not state:
            return None

        key = self.make_key(city, state)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._lookup(key, city, state))
            self._pending[key] = task
        # Shielded so a cancelled caller does not abort a lookup others await
        return await asyncio.shield(task)

    async def cancel_pending(self) -> None:
        """Cancel in-flight lookups and wait until they have stopped."""
        pending = list(self._pending.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _lookup(self, key: str, city: str, state: str) -> Optional[Coordinate]:
        self.request_count += 1
        try:
            try:
                coordinate = await self.geocoder.geocode(city, state)
            except Exception as e:
                logger.warning(f"Geocoder raised for {city}, {state}: {type(e).__name__}: {e}")
                return None

            if coordinate is None:
                logger.debug(f"No coordinates for {city}, {state}")
                return None

            self._entries[key] = coordinate
            self._publish(CacheUpdated(key=key, city=city, state=state, coordinate=coordinate))
            return coordinate
        finally:
            self._pending.pop(key, None)

    def _publish(self, event: CacheUpdated) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Cache listener failed for {event.key}")
