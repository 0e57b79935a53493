import math

import pytest

from palletizer_engine.models import Dimensions, GridCell


def test_grid_cell_key_and_label():
    cell = GridCell(2, 3)

    assert cell.key == "2-3"
    assert cell.label() == "3,4"


def test_grid_cell_rejects_negative_coordinates():
    with pytest.raises(ValueError):
        GridCell(-1, 0)


def test_grid_cells_compare_by_coordinates():
    assert GridCell(1, 1) == GridCell(1, 1)
    assert len({GridCell(1, 1), GridCell(1, 1), GridCell(0, 1)}) == 2


def test_replace_field_coerces_invalid_values():
    dims = Dimensions(300, 200, 150)

    assert dims.replace_field("width", "abc") == Dimensions(300, 0.0, 150)
    assert dims.replace_field("height", -4) == Dimensions(300, 200, 0.0)
    assert dims.replace_field("length", "310,5").length == 310.5


def test_replace_field_unknown_name():
    with pytest.raises(ValueError):
        Dimensions().replace_field("depth", 1)


def test_is_configured():
    assert Dimensions(1, 1, 1).is_configured
    assert not Dimensions(1, 0, 1).is_configured


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
def test_non_finite_dimensions_are_not_configured(value):
    assert not Dimensions(value, 800, 1500).is_configured
    assert not Dimensions(300, 200, value).is_configured
