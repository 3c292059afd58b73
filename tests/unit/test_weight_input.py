import pytest

from dosecalc.domain.catalog import get_product
from dosecalc.domain.models import Route
from dosecalc.services.weight_input import (
    DEFAULT_ROUTE, DEFAULT_WEIGHT, clamp_weight, dial_bounds, parse_weight,
)


def test_defaults():
    assert DEFAULT_WEIGHT == 35.0
    assert DEFAULT_ROUTE is Route.IV


@pytest.mark.parametrize("raw,expected", [
    ("35", 35.0), ("35.5", 35.5), ("35,5 kg", 35.5), (" 12KG ", 12.0), (20, 20.0),
    ("", None), ("abc", None), (None, None), (True, None),
])
def test_parse_weight(raw, expected):
    assert parse_weight(raw) == expected


def test_dial_bounds_per_product():
    assert dial_bounds(get_product("dartepp")) == (5, 100)
    assert dial_bounds(get_product("argesun")) == (0.1, 100.0)
    assert dial_bounds(None) == (0.1, 100.0)


def test_clamp_weight():
    assert clamp_weight(3, get_product("dartepp")) == 5
    assert clamp_weight(0, get_product("artesun")) == 0.1
    assert clamp_weight(120, get_product("argesun")) == 100.0
    assert clamp_weight(42.5, get_product("dartepp")) == 42.5
