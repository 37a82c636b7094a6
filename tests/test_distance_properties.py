"""
Property-based tests for great-circle distance.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st

from frete_search.geo import distance_km
from frete_search.models import Coordinate


coordinates = st.builds(
    Coordinate,
    lat=st.floats(min_value=-90, max_value=90, allow_nan=False),
    lon=st.floats(min_value=-180, max_value=180, allow_nan=False),
)


@given(a=coordinates)
@settings(max_examples=100)
def test_distance_to_self_is_zero(a):
    assert distance_km(a, a) == 0


@given(a=coordinates, b=coordinates)
@settings(max_examples=200)
def test_distance_is_symmetric(a, b):
    assert math.isclose(distance_km(a, b), distance_km(b, a), rel_tol=1e-9, abs_tol=1e-9)


@given(a=coordinates, b=coordinates)
@settings(max_examples=200)
def test_distance_is_bounded_by_half_circumference(a, b):
    d = distance_km(a, b)
    assert 0 <= d <= math.pi * 6371 + 1e-6


def test_known_distance_curitiba_sao_paulo():
    curitiba = Coordinate(-25.4284, -49.2733)
    sao_paulo = Coordinate(-23.5505, -46.6333)
    assert distance_km(curitiba, sao_paulo) == pytest.approx(339, abs=5)


def test_quarter_meridian():
    equator = Coordinate(0, 0)
    pole = Coordinate(90, 0)
    assert distance_km(equator, pole) == pytest.approx(math.pi * 6371 / 2, rel=1e-9)
