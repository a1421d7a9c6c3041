import pytest
from algotrace.playback import BACKWARD, FORWARD, StepCursor

def test_forward_stops_at_last_step():
    cur = StepCursor(["a", "b", "c"])
    assert cur.step(FORWARD) and cur.step(FORWARD)
    assert cur.current == "c" and cur.at_end
    assert cur.step(FORWARD) is False
    assert cur.index == 2

def test_backward_at_start_is_noop():
    cur = StepCursor(["a", "b"])
    assert cur.step(BACKWARD) is False
    assert cur.index == 0 and cur.current == "a"

def test_empty_cursor():
    cur = StepCursor([])
    assert cur.current is None
    assert cur.step(FORWARD) is False
    assert cur.toggle_play() is False
    assert cur.progress == 0.0

def test_unknown_direction():
    with pytest.raises(ValueError):
        StepCursor(["a"]).step("sideways")

def test_seek_clamps_and_reset():
    cur = StepCursor(list(range(5)))
    cur.seek(10)
    assert cur.index == 4 and cur.progress == 1.0
    cur.seek(-3)
    assert cur.index == 0
    cur.seek(2)
    cur.toggle_play()
    cur.reset()
    assert (cur.index, cur.playing) == (0, False)

def test_tick_pauses_at_end():
    cur = StepCursor(["a", "b", "c"])
    assert cur.tick() is False
    assert cur.toggle_play() is True
    assert cur.tick() and cur.playing
    assert cur.tick() and not cur.playing
    assert cur.current == "c"
    assert cur.tick() is False
