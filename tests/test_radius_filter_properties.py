"""
Property-based tests for the radius filter and the prefetch batch.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock
from hypothesis import given, settings, strategies as st

from frete_search.filtering import RadiusPrefetcher, apply_radius, prefetch_keys
from frete_search.geo import GeocodingCache
from frete_search.models import Coordinate, Listing
from frete_search.rate_limiting import RateLimiter


CURITIBA = Coordinate(-25.4284, -49.2733)
SAO_PAULO = Coordinate(-23.5505, -46.6333)
PONTA_GROSSA = Coordinate(-25.0950, -50.1619)

KNOWN = {
    ("Curitiba", "PR"): CURITIBA,
    ("São Paulo", "SP"): SAO_PAULO,
    ("Ponta Grossa", "PR"): PONTA_GROSSA,
}


async def fake_geocode(city, state):
    return KNOWN.get((city, state))


def make_cache():
    geocoder = AsyncMock()
    geocoder.geocode = AsyncMock(side_effect=fake_geocode)
    return GeocodingCache(geocoder), geocoder


def make_listing(listing_id: str, origin: str) -> Listing:
    return Listing(id=listing_id, origin=origin, destination="Recife - PE - Brasil")


def make_limiter(delay_seconds=0.35, max_batch_size=80):
    sleep = AsyncMock()
    return RateLimiter(delay_seconds=delay_seconds, max_batch_size=max_batch_size, sleep=sleep), sleep


cities = st.sampled_from(["Curitiba - PR - Brasil", "São Paulo - SP - Brasil",
                          "Ponta Grossa - PR - Brasil", "Atlantis - XX - Brasil", "", "Curitiba"])


@given(origins=st.lists(cities, max_size=12), radius=st.floats(min_value=0.1, max_value=2000))
@settings(max_examples=100)
def test_unresolved_listings_are_always_kept(origins, radius):
    """
    With an empty cache the radius filter keeps every listing.
    """
    cache, _ = make_cache()
    listings = [make_listing(str(i), o) for i, o in enumerate(origins)]

    assert apply_radius(listings, CURITIBA, radius, cache) == listings


@pytest.mark.asyncio
async def test_resolved_listings_outside_radius_are_removed():
    cache, _ = make_cache()
    curitiba = make_listing("1", "Curitiba - PR - Brasil")
    sao_paulo = make_listing("2", "São Paulo - SP - Brasil")
    ponta_grossa = make_listing("3", "Ponta Grossa - PR - Brasil")
    unknown = make_listing("4", "Atlantis - XX - Brasil")
    listings = [curitiba, sao_paulo, ponta_grossa, unknown]

    for city, state in KNOWN:
        await cache.resolve(city, state)
    await cache.resolve("Atlantis", "XX")

    assert apply_radius(listings, CURITIBA, 200, cache) == [curitiba, ponta_grossa, unknown]
    assert apply_radius(listings, CURITIBA, 400, cache) == listings


@pytest.mark.parametrize("origin,radius", [(None, 100), (CURITIBA, 0), (CURITIBA, None), (CURITIBA, -10)])
def test_radius_is_noop_without_center_or_radius(origin, radius):
    cache, _ = make_cache()
    asyncio.run(cache.resolve("São Paulo", "SP"))
    listings = [make_listing("1", "São Paulo - SP - Brasil")]

    assert apply_radius(listings, origin, radius, cache) == listings


def test_prefetch_keys_are_distinct_and_skip_blanks():
    listings = [
        make_listing("1", "Curitiba - PR - Brasil"),
        make_listing("2", "curitiba - pr - Brasil"),
        make_listing("3", "Curitiba"),
        make_listing("4", ""),
        make_listing("5", "São Paulo - SP - Brasil"),
    ]

    assert prefetch_keys(listings) == [("Curitiba", "PR"), ("São Paulo", "SP")]


@pytest.mark.asyncio
async def test_prefetch_resolves_each_city_once_with_pauses():
    cache, geocoder = make_cache()
    limiter, sleep = make_limiter()
    listings = [
        make_listing("1", "Curitiba - PR - Brasil"),
        make_listing("2", "Curitiba - PR - Brasil"),
        make_listing("3", "São Paulo - SP - Brasil"),
    ]

    issued = await RadiusPrefetcher(cache, limiter).prefetch(listings)

    assert issued == 2
    assert geocoder.geocode.await_count == 2
    assert limiter.request_count == 2
    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.35)


@pytest.mark.asyncio
async def test_prefetch_skips_cached_cities():
    cache, geocoder = make_cache()
    limiter, sleep = make_limiter()
    await cache.resolve("Curitiba", "PR")

    issued = await RadiusPrefetcher(cache, limiter).prefetch(
        [make_listing("1", "Curitiba - PR - Brasil"), make_listing("2", "São Paulo - SP - Brasil")]
    )

    assert issued == 1
    assert geocoder.geocode.await_count == 2
    assert sleep.await_count == 1


@given(count=st.integers(min_value=0, max_value=30), cap=st.integers(min_value=0, max_value=20))
@settings(max_examples=50)
def test_prefetch_respects_batch_cap(count, cap):
    """
    A batch never issues more lookups than the configured cap.
    """
    cache, geocoder = make_cache()
    limiter, _ = make_limiter(max_batch_size=cap)
    listings = [make_listing(str(i), f"Cidade {i} - PR - Brasil") for i in range(count)]

    issued = asyncio.run(RadiusPrefetcher(cache, limiter).prefetch(listings))

    assert issued == min(count, cap)
    assert geocoder.geocode.await_count == min(count, cap)


@pytest.mark.asyncio
async def test_prefetch_stops_when_superseded():
    cache, geocoder = make_cache()
    limiter, _ = make_limiter()
    listings = [make_listing(str(i), f"Cidade {i} - PR - Brasil") for i in range(10)]
    current = {"value": True}

    async def geocode_then_supersede(city, state):
        current["value"] = False
        return None

    geocoder.geocode.side_effect = geocode_then_supersede

    issued = await RadiusPrefetcher(cache, limiter).prefetch(
        listings, is_current=lambda: current["value"]
    )

    assert issued == 1
    assert geocoder.geocode.await_count == 1
