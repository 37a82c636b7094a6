"""
Radius filter for freight listings.

Removes listings whose pickup city lies farther than a chosen distance from
the user's origin. Pickup coordinates come from the geocoding cache, which a
throttled prefetch batch fills in the background. Until a listing's pickup
city is resolved the listing stays in the result, so the list only tightens
as coordinates arrive.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from frete_search.geo import GeocodingCache, distance_km
from frete_search.models import Coordinate, Listing
from frete_search.rate_limiting import RateLimiter


logger = logging.getLogger(__name__)


def apply_radius(
    listings: Iterable[Listing],
    origin: Optional[Coordinate],
    radius_km: Optional[float],
    cache: GeocodingCache
) -> List[Listing]:
    """Keep listings within ``radius_km`` of ``origin``.

    Without a resolved origin or a positive radius this returns the input
    unchanged. Listings whose pickup coordinate is not cached yet are kept.

    Args:
        listings: Attribute-filtered listings
        origin: Resolved coordinate of the user's origin
        radius_km: Search radius in kilometres
        cache: Geocoding cache holding pickup coordinates

    Returns:
        Listings inside the radius or not yet resolved, in input order
    """
    listings = list(listings)
    if origin is None or not radius_km or radius_km <= 0:
        return listings

    kept = []
    for listing in listings:
        parts = listing.origin_parts
        coordinate = cache.get(parts.city, parts.state)
        if coordinate is None or distance_km(origin, coordinate) <= radius_km:
            kept.append(listing)
    return kept


def prefetch_keys(listings: Iterable[Listing]) -> List[Tuple[str, str]]:
    """Distinct (city, state) pickup pairs in first-seen order.

    Pairs with an empty city or state are skipped; duplicates are detected on
    the cache key so they never cost a second lookup.
    """
    seen = set()
    keys = []
    for listing in listings:
        parts = listing.origin_parts
        if not parts.city or not parts.state:
            continue
        key = GeocodingCache.make_key(parts.city, parts.state)
        if key in seen:
            continue
        seen.add(key)
        keys.append((parts.city, parts.state))
    return keys


class RadiusPrefetcher:
    """Fills the geocoding cache for a listing batch, one request at a time.

    Attributes:
        cache: Geocoding cache to fill
        rate_limiter: Throttle applied between lookups
    """

    def __init__(self, cache: GeocodingCache, rate_limiter: Optional[RateLimiter] = None):
        self.cache = cache
        self.rate_limiter = rate_limiter or RateLimiter()

    async def prefetch(
        self,
        listings: Iterable[Listing],
        is_current: Callable[[], bool] = lambda: True
    ) -> int:
        """Resolve uncached pickup cities for ``listings``.

        Lookups are sequential with a fixed pause after each network request.
        The loop stops before the next lookup once ``is_current`` returns
        False; a lookup already in flight still lands in the cache.

        Args:
            listings: Attribute-filtered listings
            is_current: Returns False when a newer batch supersedes this one

        Returns:
            Number of lookups issued
        """
        keys = self.rate_limiter.limit_batch(prefetch_keys(listings))
        issued = 0
        for city, state in keys:
            if not is_current():
                logger.debug("Prefetch batch superseded, stopping")
                break
            if self.cache.has(city, state):
                continue
            await self.cache.resolve(city, state)
            self.rate_limiter.record_request()
            issued += 1
            await self.rate_limiter.wait_between_requests()
        logger.debug(f"Prefetch batch done: {issued} lookups for {len(keys)} cities")
        return issued
