import math

import pytest

from palletizer_engine.units import coerce_dimension, parse_float


def test_parse_float_accepts_comma():
    assert parse_float("12,5") == 12.5


def test_parse_float_strips_whitespace():
    assert parse_float("  10.0 ") == 10.0


def test_parse_float_rejects_empty():
    with pytest.raises(ValueError):
        parse_float("")


@pytest.mark.parametrize("raw", ["abc", "", "-5", -3.0, float("nan"), math.inf, True, None])
def test_coerce_dimension_falls_back_to_zero(raw):
    assert coerce_dimension(raw) == 0.0


def test_coerce_dimension_accepts_numbers_and_text():
    assert coerce_dimension(300) == 300.0
    assert coerce_dimension("150,5") == 150.5
