import random

import pytest

from bfvm.tape import Direction, Tape, TapeExhausted, VMRuntimeError


def test_new_tape_has_one_zero_cell():
    t = Tape()
    assert len(t) == 1
    assert t.cursor == 0
    assert t.read() == 0
    assert t.cells() == b"\x00"


def test_write_wraps_modulo_256():
    t = Tape()
    t.write(256)
    assert t.read() == 0
    t.write(-1)
    assert t.read() == 255


def test_right_growth_appends_zero_cell():
    t = Tape()
    t.write(7)
    t.advance(Direction.RIGHT)
    assert len(t) == 2
    assert t.cursor == 1
    assert t.read() == 0
    assert t.cells() == b"\x07\x00"


def test_left_growth_prepends_and_lands_on_new_cell():
    t = Tape()
    t.write(7)
    t.advance(Direction.LEFT)
    assert len(t) == 2
    assert t.cursor == 0
    assert t.read() == 0
    assert t.cells() == b"\x00\x07"
    assert t.offset == -1


def test_moving_inside_bounds_does_not_grow():
    t = Tape()
    t.advance(Direction.RIGHT)
    t.advance(Direction.RIGHT)
    t.advance(Direction.LEFT)
    t.advance(Direction.LEFT)
    t.advance(Direction.RIGHT)
    assert len(t) == 3
    assert t.cursor == 1


def test_values_survive_growth_on_both_sides():
    t = Tape()
    for value in (1, 2, 3):
        t.write(value)
        t.advance(Direction.RIGHT)
    for _ in range(5):
        t.advance(Direction.LEFT)
    t.write(9)
    assert t.cells() == b"\x09\x00\x01\x02\x03\x00"
    assert t.cursor == 0


def test_growth_is_minimal_for_any_walk():
    rng = random.Random(1234)
    t = Tape()
    lo = hi = pos = 0
    for _ in range(2000):
        d = rng.choice((Direction.LEFT, Direction.RIGHT))
        t.advance(d)
        pos += d.value
        lo, hi = min(lo, pos), max(hi, pos)
        assert len(t) == 1 + hi + (-lo)
        assert t.cursor == pos - lo
        assert 0 <= t.cursor < len(t)


def test_max_cells_limit_raises_and_keeps_cursor_valid():
    t = Tape(max_cells=2)
    t.advance(Direction.RIGHT)
    with pytest.raises(TapeExhausted) as ex:
        t.advance(Direction.RIGHT)
    assert isinstance(ex.value, VMRuntimeError)
    assert ex.value.limit == 2
    assert len(t) == 2
    assert t.cursor == 1
    # moving back inside the tape is still fine
    t.advance(Direction.LEFT)
    assert t.cursor == 0
    with pytest.raises(TapeExhausted):
        t.advance(Direction.LEFT)


def test_invalid_limit():
    with pytest.raises(ValueError):
        Tape(max_cells=0)
