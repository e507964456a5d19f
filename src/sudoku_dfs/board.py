"""Candidate-set board for the classic 9x9 Sudoku.

Every cell keeps one flag per value ``1..9``.  The 729 flags are packed into a
single Python integer: the flag for ``(pos, value)`` lives at bit
``(x + 9 * y) * 9 + (value - 1)``.  Integers are immutable, which makes
:meth:`SudokuBoard.snapshot` an exact and cheap copy of the whole state.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .errors import OutOfRangeError, SolverInvariantError

SIZE = 9
CELL_COUNT = SIZE * SIZE
FLAG_COUNT = CELL_COUNT * SIZE
VALUES = tuple(range(1, SIZE + 1))

_CELL_MASK = (1 << SIZE) - 1
_FULL_STATE = (1 << FLAG_COUNT) - 1


@dataclass(frozen=True, slots=True)
class GPos:
    """Board coordinate: ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if not 0 <= self.x < SIZE or not 0 <= self.y < SIZE:
            raise OutOfRangeError(f"position out of range: ({self.x}, {self.y})")

    @property
    def index(self) -> int:
        """Row-major cell index in ``[0, 80]``."""

        return self.x + SIZE * self.y

    @property
    def chunk(self) -> int:
        """Index of the 3x3 chunk, ``chunkX + 3 * chunkY``."""

        return self.x // 3 + 3 * (self.y // 3)

    @classmethod
    def from_index(cls, index: int) -> "GPos":
        if not 0 <= index < CELL_COUNT:
            raise OutOfRangeError(f"cell index out of range: {index}")
        return cls(index % SIZE, index // SIZE)


ALL_POSITIONS: Tuple[GPos, ...] = tuple(GPos(x, y) for y in range(SIZE) for x in range(SIZE))


def iter_positions() -> Iterator[GPos]:
    """Yield every position in row-major order (``y`` outer, ``x`` inner)."""

    return iter(ALL_POSITIONS)


def bit_index(pos: GPos, value: int) -> int:
    """Return the flat flag index for ``(pos, value)``."""

    _check_value(value)
    return pos.index * SIZE + (value - 1)


def _check_value(value: int) -> None:
    if not isinstance(value, int) or not 1 <= value <= SIZE:
        raise OutOfRangeError(f"value out of range: {value!r}")


class SudokuBoard:
    """Mutable candidate state for one puzzle instance.

    A fresh board has every value possible in every cell.  The board knows
    nothing about search strategy; the solver drives it through the
    query/mutation methods below.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: int = _FULL_STATE) -> None:
        if not 0 <= bits <= _FULL_STATE:
            raise OutOfRangeError("board state must fit into 729 flags")
        self._bits = bits

    @classmethod
    def from_snapshot(cls, data: int) -> "SudokuBoard":
        return cls(data)

    # Flag access ------------------------------------------------------

    def is_possible(self, pos: GPos, value: int) -> bool:
        return ((self._bits >> bit_index(pos, value)) & 1) == 1

    def set_possible(self, pos: GPos, value: int, on: bool) -> bool:
        """Set or clear a flag and report whether its state changed."""

        mask = 1 << bit_index(pos, value)
        currently = (self._bits & mask) != 0
        if currently == on:
            return False
        if on:
            self._bits |= mask
        else:
            self._bits &= ~mask
        return True

    def force_value(self, pos: GPos, value: int, force: bool) -> None:
        """Make ``value`` the only remaining candidate at ``pos``.

        Every other value is cleared.  With ``force`` the target flag is set
        even if it was cleared before (clue ingestion); without it the target
        flag is left untouched, so a dead value leaves the cell empty.
        """

        _check_value(value)
        for v in VALUES:
            if v == value:
                if force:
                    self.set_possible(pos, v, True)
            else:
                self.set_possible(pos, v, False)

    # Cell queries -----------------------------------------------------

    def cell_mask(self, pos: GPos) -> int:
        """Return the nine flags of ``pos`` as an int, bit ``v - 1`` for value ``v``."""

        return (self._bits >> (pos.index * SIZE)) & _CELL_MASK

    def cell_info(self, pos: GPos) -> Tuple[int, int]:
        """Return ``(only_value, count)``; ``only_value`` is 0 unless count is 1."""

        bits = self.cell_mask(pos)
        count = bits.bit_count()
        return (bits.bit_length() if count == 1 else 0), count

    def candidate_count(self, pos: GPos) -> int:
        return self.cell_mask(pos).bit_count()

    def only_value(self, pos: GPos) -> Optional[int]:
        value, _ = self.cell_info(pos)
        return value or None

    def candidates(self, pos: GPos) -> List[int]:
        bits = self.cell_mask(pos)
        return [v for v in VALUES if (bits >> (v - 1)) & 1]

    # Board queries ----------------------------------------------------

    def is_solved(self) -> bool:
        return all(self.candidate_count(pos) == 1 for pos in ALL_POSITIONS)

    def has_contradiction(self) -> bool:
        return any(self.candidate_count(pos) == 0 for pos in ALL_POSITIONS)

    def find_mrv_cell(self) -> Tuple[GPos, int]:
        """Pick the undetermined cell with the fewest candidates.

        Ties resolve to the first cell in row-major order.  A cell without
        candidates is returned immediately with count 0.  Raises
        :class:`SolverInvariantError` when every cell is already determined.
        """

        best_pos = ALL_POSITIONS[0]
        best_count = SIZE + 1
        for pos in ALL_POSITIONS:
            count = self.candidate_count(pos)
            if count == 0:
                return pos, 0
            if 1 < count < best_count:
                best_count = count
                best_pos = pos
        if best_count == SIZE + 1:
            raise SolverInvariantError("no undetermined cell left for branching")
        return best_pos, best_count

    def remaining_flags(self) -> int:
        """Total number of set flags across the board."""

        return self._bits.bit_count()

    # Snapshots --------------------------------------------------------

    def snapshot(self) -> int:
        return self._bits

    def restore(self, snapshot: int) -> None:
        if not 0 <= snapshot <= _FULL_STATE:
            raise OutOfRangeError("snapshot does not describe a 9x9 board")
        self._bits = snapshot

    def copy(self) -> "SudokuBoard":
        return SudokuBoard(self._bits)

    def state_hash(self) -> str:
        """Return the sha256 hex digest of the packed state."""

        payload = self._bits.to_bytes((FLAG_COUNT + 7) // 8, "big")
        return hashlib.sha256(payload).hexdigest()

    # Conversions ------------------------------------------------------

    def to_grid(self) -> List[List[int]]:
        grid = [[0] * SIZE for _ in range(SIZE)]
        for pos in ALL_POSITIONS:
            grid[pos.y][pos.x] = self.cell_info(pos)[0]
        return grid

    def to_string(self) -> str:
        return "".join(str(self.cell_info(pos)[0]) for pos in ALL_POSITIONS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SudokuBoard):
            return NotImplemented
        return self._bits == other._bits

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SudokuBoard({self.to_string()!r})"


__all__ = [
    "ALL_POSITIONS",
    "CELL_COUNT",
    "FLAG_COUNT",
    "GPos",
    "SIZE",
    "SudokuBoard",
    "VALUES",
    "bit_index",
    "iter_positions",
]
