import pytest

from palletizer_engine.models import GridCell
from palletizer_engine.scheduling import VirtualScheduler
from palletizer_engine.sequencer import (
    EmptySelectionError,
    PlacementSequencer,
    SequencerState,
)

STEP = 2000
CELLS = [GridCell(0, 0), GridCell(0, 1), GridCell(1, 0)]


def make_sequencer(step: int = STEP):
    clock = VirtualScheduler()
    return clock, PlacementSequencer(clock, item_duration_ms=step)


def assert_partition(seq, snapshot):
    parts = list(seq.completed_cells) + list(seq.pending_cells)
    if seq.processing_cell is not None:
        parts.append(seq.processing_cell)
    assert len(parts) == len(set(parts))
    assert set(parts) == set(snapshot)


def test_run_places_in_selection_order_and_reports_progress():
    clock, seq = make_sequencer()
    progress = [seq.progress_percent]
    seq.add_listener(lambda snap: progress.append(round(snap.progress_percent, 1)))

    assert seq.start(CELLS) is True
    assert seq.processing_cell == GridCell(0, 0)
    clock.advance(STEP * 3)

    assert seq.state is SequencerState.COMPLETED
    assert seq.completed_cells == tuple(CELLS)
    assert seq.progress_percent == 100.0
    assert not seq.is_running
    distinct = [value for i, value in enumerate(progress) if i == 0 or value != progress[i - 1]]
    assert distinct == [0, 33.3, 66.7, 100.0]


def test_one_item_per_duration():
    clock, seq = make_sequencer()
    seq.start(CELLS)

    clock.advance(STEP - 1)
    assert seq.completed_cells == ()
    clock.advance(1)
    assert seq.completed_cells == (GridCell(0, 0),)
    assert seq.processing_cell == GridCell(0, 1)
    assert seq.progress_percent == pytest.approx(100 / 3)


def test_each_cell_in_exactly_one_bucket_during_run():
    clock, seq = make_sequencer(step=10)
    seq.start(CELLS)
    for _ in range(30):
        assert_partition(seq, CELLS)
        clock.advance(1)


def test_start_with_empty_selection_is_rejected_without_state_change():
    _, seq = make_sequencer()

    with pytest.raises(EmptySelectionError):
        seq.start([])

    assert seq.state is SequencerState.IDLE
    assert seq.progress_percent == 0.0


def test_start_while_running_is_ignored():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    clock.advance(STEP)

    assert seq.start([GridCell(3, 3)]) is False
    assert seq.total == 3
    assert seq.completed_cells == (GridCell(0, 0),)


def test_duplicate_positions_are_placed_once():
    clock, seq = make_sequencer()
    seq.start([GridCell(0, 0), GridCell(0, 0), GridCell(1, 1)])
    clock.run_all()

    assert seq.completed_cells == (GridCell(0, 0), GridCell(1, 1))


def test_pause_takes_effect_at_item_boundary():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    clock.advance(STEP // 2)

    assert seq.pause() is True
    assert seq.is_paused and seq.is_running
    clock.advance(STEP // 2)
    assert seq.completed_cells == (GridCell(0, 0),)
    assert seq.processing_cell is None

    clock.advance(STEP * 5)
    assert seq.completed_cells == (GridCell(0, 0),)
    assert seq.state is SequencerState.PAUSED


def test_resume_continues_from_queue_position():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    seq.pause()
    clock.advance(STEP * 3)

    assert seq.resume() is True
    assert seq.processing_cell == GridCell(0, 1)
    clock.advance(STEP * 2)

    assert seq.completed_cells == tuple(CELLS)
    assert seq.state is SequencerState.COMPLETED


def test_resume_mid_item_keeps_item_timer():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    clock.advance(1500)
    seq.pause()
    clock.advance(200)
    seq.resume()

    clock.advance(300)

    assert seq.completed_cells == (GridCell(0, 0),)
    assert seq.processing_cell == GridCell(0, 1)


def test_pause_and_resume_only_valid_in_matching_state():
    clock, seq = make_sequencer()

    assert seq.pause() is False
    assert seq.resume() is False
    seq.start(CELLS)
    assert seq.resume() is False
    seq.pause()
    assert seq.pause() is False


def test_pause_then_stop_before_first_item_leaves_nothing_completed():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    seq.pause()
    seq.stop()

    clock.advance(STEP * 10)

    assert seq.state is SequencerState.IDLE
    assert seq.completed_cells == ()
    assert seq.processing_cell is None
    assert seq.progress_percent == 0.0
    assert clock.pending == 0


def test_stop_discards_work_done():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    clock.advance(STEP * 2 + 10)

    assert seq.stop() is True

    assert seq.state is SequencerState.IDLE
    assert seq.completed_cells == ()
    assert seq.pending_cells == ()
    assert seq.total == 0
    assert seq.stop() is False


def test_pausing_last_item_still_completes_run():
    clock, seq = make_sequencer()
    seq.start([GridCell(2, 2)])
    seq.pause()
    clock.advance(STEP)

    assert seq.state is SequencerState.COMPLETED
    assert seq.progress_percent == 100.0


def test_restart_after_completion():
    clock, seq = make_sequencer()
    seq.start([GridCell(0, 0)])
    clock.run_all()

    assert seq.start([GridCell(1, 1)]) is True
    assert seq.completed_cells == ()
    assert seq.progress_percent == 0.0
    clock.run_all()
    assert seq.completed_cells == (GridCell(1, 1),)


def test_zero_duration_runs_through_scheduler():
    clock, seq = make_sequencer(step=0)
    seq.start(CELLS)

    assert seq.completed_cells == ()
    clock.advance(0)
    assert seq.state is SequencerState.COMPLETED


def test_snapshot_reflects_observers():
    clock, seq = make_sequencer()
    seq.start(CELLS)
    clock.advance(STEP)
    snap = seq.snapshot()

    assert snap.state is SequencerState.RUNNING
    assert snap.processing == GridCell(0, 1)
    assert snap.completed == (GridCell(0, 0),)
    assert snap.pending == (GridCell(1, 0),)
    assert snap.remaining == 2
    assert snap.is_running and not snap.is_paused


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        PlacementSequencer(VirtualScheduler(), item_duration_ms=-1)
