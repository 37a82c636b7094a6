"""
Search session controller.

Runs the two-stage listing pipeline for one search screen:

1. attribute filter (synchronous, rendered immediately)
2. radius filter fed by a background prefetch task that fills the geocoding
   cache; every ``CacheUpdated`` event triggers a recomputation against the
   latest criteria snapshot and notifies subscribers.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, List, Optional, Protocol, Set, Union

from frete_search.config import SearchSettings
from frete_search.error_handling import ErrorHandler, ListingsUnavailableError
from frete_search.filtering import (
    ListingFilter,
    RadiusPrefetcher,
    SortMode,
    apply_radius,
    order_listings,
)
from frete_search.geo import CacheUpdated, Geocoder, GeocodingCache
from frete_search.location import GeographicRegistry, LocationHierarchy
from frete_search.models import Coordinate, FilterCriteria, Listing
from frete_search.rate_limiting import RateLimiter
from frete_search.text_matching import equals_loose


logger = logging.getLogger(__name__)

LISTINGS_ERROR_MESSAGE = "Não foi possível carregar os fretes."

ResultsListener = Callable[[List[Listing]], None]


class ListingsSource(Protocol):
    """The listings collaborator."""

    async def fetch_listings(self) -> List[Listing]:
        ...


class SearchSession:
    """Controller for one listing search screen.

    The session owns its geocoding cache, so nothing leaks between screens.
    Filtering and ordering are recomputed from scratch on every call to
    ``results()``; only the cache and the loaded data carry state.

    Attributes:
        listings: Raw listings from the last ``load()``
        hierarchy: State/region table (registry or offline fallback)
        origin_cities: Cities of the selected origin state, empty when
            unavailable (free-text entry)
        criteria: Current criteria snapshot
        sort_mode: Current result ordering
        origin_coordinate: Resolved radius center, None when not resolved
        error_message: User-visible message after a failed listing load
        prefetching: True while a radius prefetch batch is running
    """

    def __init__(
        self,
        listings_source: ListingsSource,
        registry: Optional[GeographicRegistry],
        geocoder: Geocoder,
        settings: Optional[SearchSettings] = None,
        error_handler: Optional[ErrorHandler] = None,
        rate_limiter: Optional[RateLimiter] = None,
        cache: Optional[GeocodingCache] = None
    ):
        self.settings = settings or SearchSettings()
        self.listings_source = listings_source
        self.registry = registry
        self.geocoder = geocoder
        self.error_handler = error_handler or ErrorHandler()
        self.cache = cache or GeocodingCache(geocoder)
        self.rate_limiter = rate_limiter or RateLimiter(
            delay_seconds=self.settings.rate_limiting.delay_seconds,
            max_batch_size=self.settings.rate_limiting.max_batch_size
        )
        self.prefetcher = RadiusPrefetcher(self.cache, self.rate_limiter)

        self.listings: List[Listing] = []
        self.hierarchy = LocationHierarchy([], offline=True, registry=registry,
                                           error_handler=self.error_handler)
        self.listing_filter = ListingFilter(self.hierarchy, self.settings.home_country)
        self.origin_cities: List[str] = []
        self.criteria = FilterCriteria.cleared(self.settings.home_country)
        self.sort_mode = SortMode.DEFAULT
        self.origin_coordinate: Optional[Coordinate] = None
        self.error_message = ""
        self.prefetching = False

        self._generation = 0
        self._prefetch_task: Optional[asyncio.Task] = None
        self._prefetch_tasks: Set[asyncio.Task] = set()
        self._listeners: List[ResultsListener] = []
        self._unsubscribe_cache = self.cache.subscribe(self._on_cache_updated)

    async def load(self) -> None:
        """Load listings and the state table. Never raises."""
        self.error_message = ""
        try:
            self.listings = await self.listings_source.fetch_listings()
        except ListingsUnavailableError as e:
            logger.error(f"Could not load listings: {e}")
            self.listings = []
            self.error_message = LISTINGS_ERROR_MESSAGE

        self.hierarchy = await LocationHierarchy.load(self.registry, self.error_handler)
        self.listing_filter = ListingFilter(self.hierarchy, self.settings.home_country)

    async def select_origin_state(self, state_code: str) -> List[str]:
        """Select the origin state, replacing the city list and clearing the city.

        Returns:
            City names for the state, or an empty list (free-text fallback)
        """
        cities: List[str] = []
        if state_code and equals_loose(self.criteria.origin_country, self.settings.home_country):
            cities = await self.hierarchy.cities_of(state_code)
        self.origin_cities = cities
        self.criteria = replace(self.criteria, origin_state=state_code or "", origin_city="")
        return cities

    async def apply(
        self,
        criteria: FilterCriteria,
        sort_mode: Union[SortMode, str, None] = None
    ) -> List[Listing]:
        """Apply a new criteria snapshot.

        Resolves the radius center when a radius is requested, schedules the
        prefetch batch and returns the immediate result list. A running
        prefetch batch for older criteria stops before its next lookup.
        """
        self.criteria = criteria
        if sort_mode is not None:
            self.sort_mode = SortMode(sort_mode)
        self._generation += 1
        generation = self._generation

        origin = await self._resolve_origin(criteria)
        if generation != self._generation:
            # A newer apply() ran while the origin was resolving
            return self.results()
        self.origin_coordinate = origin
        if self.radius_active():
            self._schedule_prefetch(generation)
        return self.results()

    def radius_active(self) -> bool:
        """Radius filtering runs only with a resolved center in the home country."""
        return (
            self.origin_coordinate is not None
            and self.listing_filter.radius_requested(self.criteria)
        )

    def attribute_filtered(self) -> List[Listing]:
        return self.listing_filter.filter_listings(
            self.listings,
            self.criteria,
            radius_center_resolved=self.origin_coordinate is not None
        )

    def results(self) -> List[Listing]:
        """Recompute the displayed list from the latest criteria and cache."""
        listings = self.attribute_filtered()
        if self.radius_active():
            listings = apply_radius(
                listings, self.origin_coordinate, self.criteria.radius_km, self.cache
            )
        return order_listings(listings, self.sort_mode)

    def subscribe(self, listener: ResultsListener) -> Callable[[], None]:
        """Register a callback receiving the recomputed list on cache updates."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_for_prefetch(self) -> None:
        """Wait for the current prefetch batch, if any."""
        if self._prefetch_task is not None:
            await self._prefetch_task

    async def close(self) -> None:
        """Stop background work and close the collaborators."""
        self._generation += 1
        # Superseded batches may still be waiting or mid-lookup
        running = [task for task in self._prefetch_tasks if not task.done()]
        for task in running:
            task.cancel()
        if running:
            await asyncio.gather(*running, return_exceptions=True)
        await self.cache.cancel_pending()
        self._unsubscribe_cache()
        for collaborator in (self.listings_source, self.registry, self.geocoder):
            close = getattr(collaborator, 'close', None)
            if close is not None:
                await close()

    async def _resolve_origin(self, criteria: FilterCriteria) -> Optional[Coordinate]:
        if not self.listing_filter.radius_requested(criteria):
            return None
        city = criteria.origin_city_query
        state = criteria.origin_state_query
        if not city or not state:
            return None
        coordinate = await self.cache.resolve(city, state)
        if coordinate is None:
            logger.warning(f"Could not resolve radius center {city}, {state}; radius ignored")
        return coordinate

    def _schedule_prefetch(self, generation: int) -> None:
        previous = self._prefetch_task
        listings = self.attribute_filtered()
        self._prefetch_task = asyncio.create_task(
            self._run_prefetch(listings, generation, previous)
        )
        self._prefetch_tasks.add(self._prefetch_task)
        self._prefetch_task.add_done_callback(self._prefetch_tasks.discard)

    async def _run_prefetch(
        self,
        listings: List[Listing],
        generation: int,
        previous: Optional[asyncio.Task]
    ) -> None:
        try:
            # One batch at a time: the superseded batch stops after its in-flight lookup
            if previous is not None and not previous.done():
                await asyncio.wait([previous])
            if generation != self._generation:
                return
            self.prefetching = True
            await self.prefetcher.prefetch(
                listings,
                is_current=lambda: generation == self._generation
            )
        finally:
            if self._prefetch_task is asyncio.current_task():
                self.prefetching = False

    def _on_cache_updated(self, event: CacheUpdated) -> None:
        if not self.radius_active() or not self._listeners:
            return
        results = self.results()
        logger.debug(f"Coordinates for {event.key} arrived, {len(results)} listings in radius")
        for listener in list(self._listeners):
            try:
                listener(results)
            except Exception:
                logger.exception("Results listener failed")
