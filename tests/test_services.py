"""
Tests for the remote collaborators.

The aiohttp session is replaced by a MagicMock whose ``get`` returns an async
context manager yielding a fake response.
"""

import asyncio
from datetime import datetime, timezone

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock

from frete_search.config import ApiConfig, GeocodingConfig, RegistryConfig
from frete_search.error_handling import ListingsUnavailableError, RegistryUnavailableError
from frete_search.filtering import order_listings
from frete_search.models import Coordinate
from frete_search.services import (
    IBGERegistryClient,
    ListingsClient,
    NominatimGeocoder,
    parse_listings,
)


def make_response(body, status=200, content_type="application/json"):
    response = MagicMock()
    response.status = status
    response.headers = {"Content-Type": content_type}
    response.json = AsyncMock(return_value=body)
    return response


def make_session(*responses):
    session = MagicMock()
    contexts = []
    for response in responses:
        context = MagicMock()
        context.__aenter__.return_value = response
        context.__aexit__.return_value = False
        contexts.append(context)
    session.get.side_effect = contexts
    return session


RAW_LISTING = {
    "id": 42,
    "cidadeColeta": "Curitiba - PR - Brasil",
    "cidadeEntrega": "São Paulo - SP - Brasil",
    "produto": "Soja",
    "tipoCarga": "completa",
    "pesoTotal": "32",
    "unidadePeso": "toneladas",
    "valorFrete": 180.5,
    "pagaPedagio": True,
    "veiculos": ["Carreta", None, " "],
    "carrocerias": ["Graneleiro"],
    "empresa": {"nome": "Transportes Sul", "telefone": "41999990000"},
    "createdAt": "2025-03-01T12:00:00Z",
    "extra": "ignored",
}


def test_parse_listings_maps_wire_fields():
    [listing] = parse_listings([RAW_LISTING])

    assert listing.id == "42"
    assert listing.origin == "Curitiba - PR - Brasil"
    assert listing.total_weight == 32.0
    assert listing.freight_value == 180.5
    assert listing.vehicles == ["Carreta"]
    assert listing.carrier.name == "Transportes Sul"
    assert listing.created_at.year == 2025
    assert listing.created_at.utcoffset().total_seconds() == 0


def test_parse_listings_skips_invalid_records():
    raw = [RAW_LISTING, {"cidadeColeta": "no id"}, "not an object", {"id": 7, "valorFrete": "abc"}]

    listings = parse_listings(raw)

    assert [l.id for l in listings] == ["42", "7"]
    assert listings[1].freight_value is None
    assert listings[1].is_negotiable


@pytest.mark.asyncio
async def test_listings_client_public_request():
    session = make_session(make_response([RAW_LISTING]))
    client = ListingsClient(ApiConfig(base_url="https://api.test/"), session=session)

    listings = await client.fetch_listings()

    assert len(listings) == 1
    url = session.get.call_args.args[0]
    assert url == "https://api.test/api/fretes/todos"
    assert "Authorization" not in session.get.call_args.kwargs["headers"]


@pytest.mark.asyncio
async def test_listings_client_sends_bearer_token():
    session = make_session(make_response([RAW_LISTING]))
    client = ListingsClient(ApiConfig(auth_token="abc"), session=session)

    await client.fetch_listings()

    assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"
    assert session.get.call_count == 1


@pytest.mark.asyncio
async def test_listings_client_falls_back_to_public_once():
    session = make_session(make_response({"error": "unauthorized"}, status=401),
                           make_response([RAW_LISTING]))
    client = ListingsClient(ApiConfig(auth_token="expired"), session=session)

    listings = await client.fetch_listings()

    assert len(listings) == 1
    assert session.get.call_count == 2
    assert "Authorization" not in session.get.call_args_list[1].kwargs["headers"]


@pytest.mark.asyncio
async def test_listings_client_raises_when_both_attempts_fail():
    session = make_session(make_response(None, status=500), make_response(None, status=503))
    client = ListingsClient(ApiConfig(auth_token="abc"), session=session)

    with pytest.raises(ListingsUnavailableError):
        await client.fetch_listings()
    assert session.get.call_count == 2


@pytest.mark.asyncio
async def test_listings_client_rejects_non_array_body():
    session = make_session(make_response({"fretes": []}))
    client = ListingsClient(session=session)

    with pytest.raises(ListingsUnavailableError):
        await client.fetch_listings()


@pytest.mark.asyncio
async def test_listings_client_timeout_is_unavailable():
    session = MagicMock()
    session.get.side_effect = asyncio.TimeoutError()
    client = ListingsClient(session=session)

    with pytest.raises(ListingsUnavailableError):
        await client.fetch_listings()


@pytest.mark.asyncio
async def test_ibge_client_parses_states_and_skips_malformed():
    body = [
        {"id": 41, "sigla": "PR", "nome": "Paraná", "regiao": {"id": 4, "sigla": "S", "nome": "Sul"}},
        {"id": 99, "sigla": "XX"},
    ]
    session = make_session(make_response(body))
    client = IBGERegistryClient(RegistryConfig(base_url="https://ibge.test/localidades"), session=session)

    states = await client.fetch_states()

    assert [s.code for s in states] == ["PR"]
    assert states[0].region.name == "Sul"
    assert session.get.call_args.args[0] == "https://ibge.test/localidades/estados"


@pytest.mark.asyncio
async def test_ibge_client_fetches_city_names():
    session = make_session(make_response([{"id": 1, "nome": "Curitiba"}, {"id": 2, "nome": "Londrina"}]))
    client = IBGERegistryClient(RegistryConfig(base_url="https://ibge.test"), session=session)

    cities = await client.fetch_cities("pr")

    assert cities == ["Curitiba", "Londrina"]
    assert session.get.call_args.args[0] == "https://ibge.test/estados/PR/municipios"


@pytest.mark.asyncio
async def test_ibge_client_failure_raises_registry_unavailable():
    session = MagicMock()
    session.get.side_effect = aiohttp.ClientConnectionError("down")
    client = IBGERegistryClient(session=session)

    with pytest.raises(RegistryUnavailableError):
        await client.fetch_states()


@pytest.mark.asyncio
async def test_geocoder_returns_first_candidate():
    session = make_session(make_response([
        {"lat": "-25.4284", "lon": "-49.2733"},
        {"lat": "0", "lon": "0"},
    ]))
    geocoder = NominatimGeocoder(GeocodingConfig(user_agent="test-agent/1.0"), session=session)

    coordinate = await geocoder.geocode("Curitiba", "PR")

    assert coordinate == Coordinate(-25.4284, -49.2733)
    kwargs = session.get.call_args.kwargs
    assert kwargs["params"] == {"format": "json", "q": "Curitiba,PR,Brasil"}
    assert kwargs["headers"]["User-Agent"] == "test-agent/1.0"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    make_response([]),
    make_response([{"lat": "abc", "lon": "1"}]),
    make_response([{"display_name": "no coordinates"}]),
    make_response({"lat": "1", "lon": "1"}),
    make_response([{"lat": "1", "lon": "1"}], status=429),
    make_response("<html>", content_type="text/html"),
])
async def test_geocoder_failures_return_none(response):
    geocoder = NominatimGeocoder(session=make_session(response))
    assert await geocoder.geocode("Curitiba", "PR") is None


@pytest.mark.asyncio
async def test_geocoder_timeout_returns_none():
    session = MagicMock()
    session.get.side_effect = asyncio.TimeoutError()
    geocoder = NominatimGeocoder(session=session)

    assert await geocoder.geocode("Curitiba", "PR") is None


@pytest.mark.asyncio
async def test_injected_session_is_not_closed():
    session = MagicMock()
    session.close = AsyncMock()
    client = ListingsClient(session=session)

    await client.close()

    session.close.assert_not_called()


@pytest.mark.parametrize("value", ["NaN", "nan", "inf", "-Infinity", float("nan")])
def test_parse_listings_treats_non_finite_numbers_as_absent(value):
    [listing] = parse_listings([{"id": 1, "valorFrete": value, "pesoTotal": value}])

    assert listing.freight_value is None
    assert listing.total_weight is None
    assert listing.is_negotiable


def test_non_finite_price_sorts_as_negotiable():
    listings = parse_listings([
        {"id": 1, "valorFrete": 500},
        {"id": 2, "valorFrete": "NaN"},
        {"id": 3, "valorFrete": 200},
    ])

    assert [l.id for l in order_listings(listings, "price")] == ["3", "1", "2"]


@pytest.mark.parametrize("created_at", [1740830400, 1740830400000, 1740830400.0])
def test_parse_listings_accepts_epoch_created_at(created_at):
    [listing] = parse_listings([{"id": 1, "createdAt": created_at}])

    assert listing.created_at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_parse_listings_keeps_listing_with_unreadable_created_at():
    [listing] = parse_listings([{"id": 1, "createdAt": "ontem"}])

    assert listing.created_at is None
