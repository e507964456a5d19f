"""Deduction passes: naked singles and hidden singles applied to a fixpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Tuple

from .board import ALL_POSITIONS, SIZE, VALUES, GPos, SudokuBoard
from .events import SimplificationCause

_LOGGER = logging.getLogger(__name__)

EliminateSink = Callable[[SimplificationCause, GPos, int, int], None]
PassSink = Callable[[int, int, int], None]


def _ignore_elimination(cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
    pass


def _ignore_pass(index: int, eliminated: int, eliminated_sum: int) -> None:
    pass


@dataclass(frozen=True)
class SimplifyOutcome:
    """Eliminations counted by a pass (or a run of passes) and its verdict."""

    eliminated: int
    ok: bool

    @property
    def contradiction(self) -> bool:
        return not self.ok


def _row_peers(pos: GPos) -> Tuple[GPos, ...]:
    return tuple(GPos(cx, pos.y) for cx in range(SIZE) if cx != pos.x)


def _column_peers(pos: GPos) -> Tuple[GPos, ...]:
    return tuple(GPos(pos.x, cy) for cy in range(SIZE) if cy != pos.y)


def _chunk_peers(pos: GPos) -> Tuple[GPos, ...]:
    start_x = (pos.x // 3) * 3
    start_y = (pos.y // 3) * 3
    return tuple(
        GPos(bx, by)
        for by in range(start_y, start_y + 3)
        for bx in range(start_x, start_x + 3)
        if bx != pos.x or by != pos.y
    )


# Peers per cell index, each in scan order.
ROW_PEERS = tuple(_row_peers(pos) for pos in ALL_POSITIONS)
COLUMN_PEERS = tuple(_column_peers(pos) for pos in ALL_POSITIONS)
CHUNK_PEERS = tuple(_chunk_peers(pos) for pos in ALL_POSITIONS)


def _union(board: SudokuBoard, peers: Tuple[GPos, ...]) -> int:
    mask = 0
    for peer in peers:
        mask |= board.cell_mask(peer)
    return mask


def simplify(board: SudokuBoard, on_eliminate: EliminateSink | None = None) -> SimplifyOutcome:
    """Run one deduction pass over the board in row-major order.

    For a determined cell its value is cleared from every peer (row, then
    column, then chunk).  For an undetermined cell each remaining value is
    checked for being the last place in its row, column and chunk; a hit
    decides the cell on the spot and later checks see the decided state.
    Hidden-single hits add ``count - 1`` eliminations, with ``count`` taken
    before the checks start.

    The pass stops at the first cell without candidates and reports it as a
    ``NO_VALUE_POSSIBLE`` event.
    """

    emit = on_eliminate or _ignore_elimination
    eliminations = 0

    for pos in ALL_POSITIONS:
        only_value, count = board.cell_info(pos)
        if count == 0:
            emit(SimplificationCause.NO_VALUE_POSSIBLE, pos, 0, 0)
            return SimplifyOutcome(eliminations, False)

        index = pos.index
        chunk = pos.chunk

        if count == 1:
            for peer in ROW_PEERS[index]:
                if board.set_possible(peer, only_value, False):
                    eliminations += 1
                    emit(SimplificationCause.ELIMINATION_BY_ROW, peer, only_value, pos.y)
            for peer in COLUMN_PEERS[index]:
                if board.set_possible(peer, only_value, False):
                    eliminations += 1
                    emit(SimplificationCause.ELIMINATION_BY_COLUMN, peer, only_value, pos.x)
            for peer in CHUNK_PEERS[index]:
                if board.set_possible(peer, only_value, False):
                    eliminations += 1
                    emit(SimplificationCause.ELIMINATION_BY_CHUNK, peer, only_value, chunk)

        only_value, count = board.cell_info(pos)
        if count == 0:
            emit(SimplificationCause.NO_VALUE_POSSIBLE, pos, 0, 0)
            return SimplifyOutcome(eliminations, False)
        if count == 1:
            continue

        # Forcing this cell never touches its peers, so the unions stay valid.
        row_union = _union(board, ROW_PEERS[index])
        column_union = _union(board, COLUMN_PEERS[index])
        chunk_union = _union(board, CHUNK_PEERS[index])

        for value in VALUES:
            if not board.is_possible(pos, value):
                continue
            bit = 1 << (value - 1)

            if not row_union & bit:
                eliminations += count - 1
                emit(SimplificationCause.VALUE_SURE_BY_ROW, pos, value, pos.y)
                board.force_value(pos, value, False)

            if not column_union & bit:
                eliminations += count - 1
                emit(SimplificationCause.VALUE_SURE_BY_COLUMN, pos, value, pos.x)
                board.force_value(pos, value, False)

            if not chunk_union & bit:
                eliminations += count - 1
                emit(SimplificationCause.VALUE_SURE_BY_CHUNK, pos, value, chunk)
                board.force_value(pos, value, False)

    return SimplifyOutcome(eliminations, True)


def simplify_to_the_end(
    board: SudokuBoard,
    on_pass: PassSink | None = None,
    on_eliminate: EliminateSink | None = None,
) -> SimplifyOutcome:
    """Repeat :func:`simplify` until a pass eliminates nothing.

    ``on_pass`` receives ``(index, eliminated, eliminated_sum)`` for every
    productive pass and for the failing pass when a contradiction stops the
    loop.  The final, empty pass of a fixpoint is not reported.
    """

    report = on_pass or _ignore_pass
    total = 0
    index = 0
    while True:
        outcome = simplify(board, on_eliminate)
        if not outcome.ok:
            total += outcome.eliminated
            report(index, outcome.eliminated, total)
            _LOGGER.debug("contradiction after %d pass(es), %d eliminated", index + 1, total)
            return SimplifyOutcome(total, False)
        if outcome.eliminated == 0:
            return SimplifyOutcome(total, True)
        total += outcome.eliminated
        report(index, outcome.eliminated, total)
        index += 1


__all__ = [
    "CHUNK_PEERS",
    "COLUMN_PEERS",
    "EliminateSink",
    "PassSink",
    "ROW_PEERS",
    "SimplifyOutcome",
    "simplify",
    "simplify_to_the_end",
]
