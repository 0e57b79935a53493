import pytest

from palletizer_engine.geometry import GridGeometry, compute_grid
from palletizer_engine.models import Dimensions, GridCell
from palletizer_engine.scheduling import VirtualScheduler
from palletizer_engine.sequencer import EmptySelectionError, SequencerState
from palletizer_engine.session import PalletizerSession

STEP = 2000


def make_session(**kwargs):
    clock = VirtualScheduler()
    geometry = compute_grid(Dimensions(300, 200, 150), Dimensions(1200, 800, 1500))
    session = PalletizerSession.from_geometry(clock, geometry, item_duration_ms=STEP, **kwargs)
    return clock, session


def test_reference_scenario_runs_in_selection_order():
    clock, session = make_session()
    for row, col in ((0, 0), (0, 1), (1, 0)):
        session.click(row, col)

    seen = []
    session.sequencer.add_listener(lambda snap: seen.append(round(snap.progress_percent, 1)))
    assert session.start() is True
    clock.advance(STEP * 3)

    assert session.sequencer.completed_cells == (GridCell(0, 0), GridCell(0, 1), GridCell(1, 0))
    assert sorted(set(seen)) == [0.0, 33.3, 66.7, 100.0]
    assert session.status_text() == "Layer 1 completed: 3 boxes placed"


def test_start_without_selection_raises():
    _, session = make_session()

    with pytest.raises(EmptySelectionError):
        session.start()
    assert session.sequencer.state is SequencerState.IDLE


def test_layer_change_mid_run_resets_everything():
    clock, session = make_session()
    session.click(0, 0)
    session.click(2, 3)
    session.start()
    clock.advance(STEP)
    deselected = []
    session.positions.add_listener(on_deselect=deselected.append)

    assert session.next_layer() is True

    assert session.current_layer == 2
    assert len(session.positions) == 0
    assert deselected == [GridCell(0, 0), GridCell(2, 3)]
    assert session.sequencer.state is SequencerState.IDLE
    assert session.sequencer.completed_cells == ()
    assert session.sequencer.progress_percent == 0.0
    clock.advance(STEP * 5)
    assert session.sequencer.completed_cells == ()


def test_locked_navigation_ignores_layer_change_during_run():
    clock, session = make_session(lock_navigation_during_run=True)
    session.click(1, 1)
    session.start()

    assert session.next_layer() is False
    assert session.go_to_layer(5) is False
    assert session.current_layer == 1
    assert session.sequencer.is_running

    clock.advance(STEP)
    assert session.next_layer() is True
    assert session.current_layer == 2


def test_navigation_at_bounds_keeps_selection():
    _, session = make_session()
    session.click(0, 0)

    assert session.previous_layer() is False
    assert session.positions.contains(0, 0)


def test_clicks_ignored_during_run():
    clock, session = make_session()
    session.click(0, 0)
    session.start()

    assert session.click(1, 1) is None
    session.clear_selection()
    assert session.positions.ordered() == (GridCell(0, 0),)


def test_click_after_completion_starts_new_plan():
    clock, session = make_session()
    session.click(0, 0)
    session.start()
    clock.run_all()

    assert session.click(0, 1) is True
    assert session.sequencer.state is SequencerState.IDLE
    assert session.cell_status(0, 0) == "selected"


def test_cell_status_and_statistics_during_run():
    clock, session = make_session()
    for row, col in ((0, 0), (0, 1), (1, 0)):
        session.click(row, col)
    session.start()
    clock.advance(STEP)

    assert session.cell_status(0, 0) == "completed"
    assert session.cell_status(0, 1) == "processing"
    assert session.cell_status(1, 0) == "selected"
    assert session.cell_status(3, 3) == "available"
    stats = session.statistics()
    assert (stats.selected, stats.completed, stats.remaining) == (3, 1, 2)
    assert stats.layer_label == "1 of 10"
    assert session.status_text() == "Processing layer 1... 1/3 boxes completed"

    session.sequencer.pause()
    assert session.status_text() == "Process paused"


def test_apply_geometry_resizes_grid_and_layers():
    clock, session = make_session()
    session.click(0, 0)
    session.click(3, 3)

    session.apply_geometry(GridGeometry(rows=2, cols=2, boxes_per_layer=4, max_layers=10))

    assert (session.rows, session.cols) == (2, 2)
    assert session.positions.ordered() == (GridCell(0, 0),)
    assert session.max_layers == 10


def test_apply_geometry_shrinking_layers_resets_layer_state():
    _, session = make_session()
    session.go_to_layer(9)
    session.click(0, 0)

    session.apply_geometry(GridGeometry(rows=4, cols=4, boxes_per_layer=16, max_layers=5))

    assert session.current_layer == 5
    assert len(session.positions) == 0
