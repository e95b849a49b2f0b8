# bfvm/tape.py
"""Byte tape that grows one zero cell at a time in either direction.

Cells at offsets 0, 1, 2, ... live in ``_right``; cells at offsets -1, -2, ...
live in ``_left`` (nearest the origin first). Both halves are bytearrays, so a
new cell is zero the moment it exists and growth on either side is amortized
O(1).
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class VMRuntimeError(Exception):
    """Resource exhaustion during a run. Always fatal."""

class TapeExhausted(VMRuntimeError):
    def __init__(self, size: int, limit: Optional[int] = None):
        if limit is None:
            msg = f"tape could not grow past {size} cells (out of memory)"
        else:
            msg = f"tape limit reached: {limit} cells"
        super().__init__(msg)
        self.size = size
        self.limit = limit


class Direction(Enum):
    LEFT = -1
    RIGHT = 1


class Tape:
    def __init__(self, max_cells: Optional[int] = None):
        if max_cells is not None and max_cells < 1:
            raise ValueError("max_cells must be at least 1")
        self.max_cells = max_cells
        self._right = bytearray(1)
        self._left = bytearray()
        self._offset = 0  # signed distance from the starting cell

    # ---------- cell access
    def read(self) -> int:
        if self._offset >= 0:
            return self._right[self._offset]
        return self._left[-self._offset - 1]

    def write(self, value: int) -> None:
        value &= 0xFF
        if self._offset >= 0:
            self._right[self._offset] = value
        else:
            self._left[-self._offset - 1] = value

    # ---------- movement
    def advance(self, direction: Direction) -> None:
        # grow before moving so the cursor never points outside the tape
        if direction is Direction.RIGHT:
            if self._offset + 1 == len(self._right):
                self._grow(self._right)
            self._offset += 1
        else:
            if -self._offset == len(self._left):
                self._grow(self._left)
            self._offset -= 1

    def _grow(self, half: bytearray) -> None:
        size = len(self)
        if self.max_cells is not None and size >= self.max_cells:
            raise TapeExhausted(size, self.max_cells)
        try:
            half.append(0)
        except MemoryError as exc:
            raise TapeExhausted(size) from exc

    # ---------- inspection
    def __len__(self) -> int:
        return len(self._left) + len(self._right)

    @property
    def cursor(self) -> int:
        """Index of the current cell within ``cells()``; 0 is the leftmost cell."""
        return len(self._left) + self._offset

    @property
    def offset(self) -> int:
        """Signed position relative to the cell the tape started on."""
        return self._offset

    def cells(self) -> bytes:
        return bytes(reversed(self._left)) + bytes(self._right)

    def __repr__(self) -> str:
        return f"Tape(size={len(self)}, cursor={self.cursor}, value={self.read()})"
