"""Depth-first search with MRV branching and full-state rollback."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Tuple

from .board import CELL_COUNT, GPos, SudokuBoard
from .deduction import simplify_to_the_end
from .events import NULL_LISTENER, SimplificationCause, SolverListener

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    """Outcome of a full solve together with the counters shown to users."""

    solved: bool
    board: SudokuBoard
    assignments: int
    simplifications: int
    elapsed_s: float
    max_depth: int

    def to_payload(self) -> dict:
        return {
            "solved": bool(self.solved),
            "grid": self.board.to_string(),
            "assignments": int(self.assignments),
            "simplifications": int(self.simplifications),
            "elapsed_s": float(self.elapsed_s),
            "max_depth": int(self.max_depth),
            "state_hash": self.board.state_hash(),
        }


def find_mrv_cell(board: SudokuBoard) -> Tuple[GPos, int]:
    """Return the branching cell and its candidate count (see :meth:`SudokuBoard.find_mrv_cell`)."""

    return board.find_mrv_cell()


class DfsSolver:
    """Drive deduction and backtracking search over one board.

    The board is mutated in place.  Before each trial value the packed state
    is snapshotted; a failed branch restores it exactly, which also undoes
    every deduction made below that branch.
    """

    def __init__(self, board: SudokuBoard, listener: SolverListener | None = None) -> None:
        self.board = board
        self.listener = listener or NULL_LISTENER
        self.path: List[int] = []
        self.assigned: List[bool] = [False] * CELL_COUNT
        self.assignments = 0
        self.simplifications = 0
        self.max_depth = 0

    def solve(self) -> SolveResult:
        self.path = [0]
        self.assigned = [False] * CELL_COUNT
        self.assignments = 0
        self.simplifications = 0
        self.max_depth = 0

        start = time.monotonic()
        solved = self._dfs(is_first=True)
        elapsed = time.monotonic() - start

        _LOGGER.info(
            "search %s after %d assignment(s), %d simplification(s)",
            "solved" if solved else "failed",
            self.assignments,
            self.simplifications,
        )
        return SolveResult(
            solved=solved,
            board=self.board,
            assignments=self.assignments,
            simplifications=self.simplifications,
            elapsed_s=elapsed,
            max_depth=self.max_depth,
        )

    # Listener plumbing ------------------------------------------------

    def _emit_pass(self, is_first: bool, index: int, eliminated: int, eliminated_sum: int) -> None:
        self.simplifications += 1
        self.listener.on_simplify_pass(
            tuple(self.path), index, eliminated, eliminated_sum, is_first, tuple(self.assigned)
        )

    def _emit_elimination(self, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        self.listener.on_eliminate(tuple(self.path), cause, cell, value, by)

    def _emit_assign(self, cell: GPos) -> None:
        self.assignments += 1
        self.listener.on_assign(tuple(self.path), tuple(self.assigned), cell)

    # Search -----------------------------------------------------------

    def _dfs(self, *, is_first: bool) -> bool:
        outcome = simplify_to_the_end(
            self.board,
            lambda index, eliminated, total: self._emit_pass(is_first, index, eliminated, total),
            self._emit_elimination,
        )
        if not outcome.ok:
            return False

        if self.board.is_solved():
            return True

        pos, count = self.board.find_mrv_cell()
        if count == 0:
            return False

        candidates = self.board.candidates(pos)
        self.assigned[pos.index] = True
        for branch_index, value in enumerate(candidates):
            history = self.board.snapshot()
            self.board.force_value(pos, value, False)
            self.path.append(branch_index)
            self.max_depth = max(self.max_depth, len(self.path) - 1)
            self._emit_assign(pos)
            _LOGGER.debug("branch %s: (%d, %d) = %d", self.path[1:], pos.x, pos.y, value)

            if self._dfs(is_first=False):
                return True

            self.path.pop()
            self.board.restore(history)
            _LOGGER.debug("backtrack at (%d, %d) = %d", pos.x, pos.y, value)

        self.assigned[pos.index] = False
        return False


def solve_board(board: SudokuBoard, listener: SolverListener | None = None) -> SolveResult:
    """Solve ``board`` in place and return the result with its counters."""

    return DfsSolver(board, listener).solve()


__all__ = ["DfsSolver", "SolveResult", "find_mrv_cell", "solve_board"]
