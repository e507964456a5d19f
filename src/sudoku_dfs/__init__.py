"""Constraint-propagation and backtracking solver for the classic 9x9 Sudoku."""

from __future__ import annotations

from .board import ALL_POSITIONS, GPos, SudokuBoard, iter_positions
from .deduction import SimplifyOutcome, simplify, simplify_to_the_end
from .errors import OutOfRangeError, PuzzleFormatError, SolverInvariantError
from .events import (
    AssignEvent,
    CallbackListener,
    EliminateEvent,
    MultiListener,
    SimplificationCause,
    SimplifyPassEvent,
    SolverListener,
)
from .search import DfsSolver, SolveResult, find_mrv_cell, solve_board
from .trace import SolveTrace, TraceValidationError

DESCRIPTOR = {
    "module_id": "sudoku-9x9:solver/dfs@1.1.4",
    "puzzle_kind": "sudoku-9x9",
    "role": "solver",
    "impl_id": "dfs",
    "module_version": "1.1.4",
    "capabilities": {"parallelizable": False, "idempotent": True, "stateless": False},
}

__version__ = DESCRIPTOR["module_version"]

__all__ = [
    "ALL_POSITIONS",
    "AssignEvent",
    "CallbackListener",
    "DESCRIPTOR",
    "DfsSolver",
    "EliminateEvent",
    "GPos",
    "MultiListener",
    "OutOfRangeError",
    "PuzzleFormatError",
    "SimplificationCause",
    "SimplifyOutcome",
    "SimplifyPassEvent",
    "SolveResult",
    "SolveTrace",
    "SolverInvariantError",
    "SolverListener",
    "SudokuBoard",
    "TraceValidationError",
    "find_mrv_cell",
    "iter_positions",
    "simplify",
    "simplify_to_the_end",
    "solve_board",
]
