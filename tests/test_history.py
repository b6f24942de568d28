import numpy as np
import pytest

from retouch_brush import HistoryStack


def _snap(value):
    return np.full((2, 2, 4), value, dtype=np.uint8)


def test_undo_at_floor_is_noop():
    history = HistoryStack()
    history.reset(_snap(0))
    for _ in range(3):
        assert history.undo() is None
        assert len(history) == 1
    assert not history.can_undo


def test_undo_returns_previous_state():
    history = HistoryStack()
    history.reset(_snap(0))
    history.push(_snap(1))
    history.push(_snap(2))
    assert history.can_undo
    restored = history.undo()
    assert (restored == 1).all()
    assert (history.top == 1).all()
    assert len(history) == 2


def test_bounded_to_ten_entries():
    history = HistoryStack()
    history.reset(_snap(0))
    for value in range(1, 13):
        history.push(_snap(value))
    assert len(history) == 10
    # Entries 3..12 survive; undo walks back to 3 and stops.
    seen = []
    while True:
        restored = history.undo()
        if restored is None:
            break
        seen.append(int(restored[0, 0, 0]))
    assert seen == list(range(11, 2, -1))
    assert int(history.top[0, 0, 0]) == 3


def test_snapshots_are_immutable_copies():
    history = HistoryStack()
    live = _snap(5)
    history.reset(live)
    live[:] = 9
    assert (history.top == 5).all()
    with pytest.raises(ValueError):
        history.top[0, 0, 0] = 1


def test_depth_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStack(depth=0)
