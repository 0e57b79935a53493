import pytest

from palletizer_engine.models import GridCell
from palletizer_engine.positions import PositionSet


def test_select_then_deselect_restores_previous_state():
    positions = PositionSet(4, 5)
    positions.select(GridCell(0, 0))
    before = positions.ordered()

    assert positions.select(GridCell(1, 2)) is True
    assert positions.deselect(GridCell(1, 2)) is True

    assert positions.ordered() == before


def test_select_is_idempotent():
    positions = PositionSet(4, 5)

    assert positions.select(GridCell(1, 1)) is True
    assert positions.select(GridCell(1, 1)) is False

    assert len(positions) == 1
    assert positions.ordered() == (GridCell(1, 1),)


def test_deselect_missing_cell_is_noop():
    positions = PositionSet()

    assert positions.deselect(GridCell(3, 3)) is False
    assert len(positions) == 0


def test_ordered_view_keeps_selection_order():
    positions = PositionSet(4, 5)
    for cell in (GridCell(2, 0), GridCell(0, 1), GridCell(1, 4)):
        positions.select(cell)

    assert positions.ordered() == (GridCell(2, 0), GridCell(0, 1), GridCell(1, 4))
    assert list(positions) == list(positions.ordered())


def test_toggle_follows_click_semantics():
    positions = PositionSet(2, 2)

    assert positions.toggle(1, 0) is True
    assert positions.contains(1, 0)
    assert GridCell(1, 0) in positions
    assert positions.toggle(1, 0) is False
    assert not positions.contains(1, 0)


def test_clear_fires_per_cell_deselect():
    positions = PositionSet(3, 3)
    deselected = []
    positions.add_listener(on_deselect=deselected.append)
    cells = [GridCell(0, 0), GridCell(2, 2), GridCell(1, 0)]
    for cell in cells:
        positions.select(cell)

    positions.clear()

    assert deselected == cells
    assert len(positions) == 0


def test_select_listener_not_called_for_duplicates():
    positions = PositionSet(3, 3)
    selected = []
    positions.add_listener(on_select=selected.append)

    positions.select(GridCell(0, 0))
    positions.select(GridCell(0, 0))

    assert selected == [GridCell(0, 0)]


def test_select_outside_bounds_rejected():
    positions = PositionSet(2, 3)

    with pytest.raises(ValueError):
        positions.select(GridCell(2, 0))
    with pytest.raises(ValueError):
        positions.select(GridCell(0, 3))
    assert len(positions) == 0


def test_resize_drops_cells_outside_new_grid():
    positions = PositionSet(4, 4)
    for cell in (GridCell(0, 0), GridCell(3, 3), GridCell(1, 2)):
        positions.select(cell)

    dropped = positions.resize(2, 3)

    assert dropped == [GridCell(3, 3)]
    assert positions.ordered() == (GridCell(0, 0), GridCell(1, 2))
    with pytest.raises(ValueError):
        positions.select(GridCell(2, 0))
