"""Progress events emitted while solving.

Listeners only observe: they receive tuples and immutable records, never the
solver's own path or marker lists, so nothing they do can steer the search.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Sequence, Tuple

from .board import GPos


class SimplificationCause(IntEnum):
    """Why a candidate was cleared or a cell decided during a pass."""

    NO_VALUE_POSSIBLE = -1
    ELIMINATION_BY_ROW = 1
    ELIMINATION_BY_COLUMN = 2
    ELIMINATION_BY_CHUNK = 3
    VALUE_SURE_BY_ROW = 4
    VALUE_SURE_BY_COLUMN = 5
    VALUE_SURE_BY_CHUNK = 6

    @property
    def is_elimination(self) -> bool:
        return SimplificationCause.ELIMINATION_BY_ROW <= self <= SimplificationCause.ELIMINATION_BY_CHUNK

    @property
    def is_contradiction(self) -> bool:
        return self is SimplificationCause.NO_VALUE_POSSIBLE

    @property
    def house(self) -> Optional[str]:
        """``"row"``, ``"column"`` or ``"chunk"``; ``None`` for a contradiction."""

        if self.is_contradiction:
            return None
        return ("row", "column", "chunk")[(int(self) - 1) % 3]


Path = Tuple[int, ...]
Markers = Tuple[bool, ...]


@dataclass(frozen=True, slots=True)
class AssignEvent:
    path: Path
    assigned: Markers
    cell: GPos
    value: int


@dataclass(frozen=True, slots=True)
class SimplifyPassEvent:
    path: Path
    index: int
    eliminated: int
    eliminated_sum: int
    is_first: bool
    assigned: Markers


@dataclass(frozen=True, slots=True)
class EliminateEvent:
    path: Path
    cause: SimplificationCause
    cell: GPos
    value: int
    by: int


class SolverListener:
    """Observer interface for solver progress; every hook defaults to a no-op."""

    def on_assign(self, path: Path, assigned: Markers, cell: GPos) -> None:
        pass

    def on_simplify_pass(
        self,
        path: Path,
        index: int,
        eliminated: int,
        eliminated_sum: int,
        is_first: bool,
        assigned: Markers,
    ) -> None:
        pass

    def on_eliminate(self, path: Path, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        pass


NULL_LISTENER = SolverListener()

AssignCallback = Callable[[Path, Markers, GPos], None]
SimplifyCallback = Callable[[Path, int, int, int, bool, Markers], None]
EliminateCallback = Callable[[Path, SimplificationCause, GPos, int, int], None]


class CallbackListener(SolverListener):
    """Adapter turning up to three plain callables into a listener."""

    def __init__(
        self,
        *,
        on_assign: AssignCallback | None = None,
        on_simplify_pass: SimplifyCallback | None = None,
        on_eliminate: EliminateCallback | None = None,
    ) -> None:
        self._on_assign = on_assign
        self._on_simplify_pass = on_simplify_pass
        self._on_eliminate = on_eliminate

    def on_assign(self, path: Path, assigned: Markers, cell: GPos) -> None:
        if self._on_assign is not None:
            self._on_assign(path, assigned, cell)

    def on_simplify_pass(
        self,
        path: Path,
        index: int,
        eliminated: int,
        eliminated_sum: int,
        is_first: bool,
        assigned: Markers,
    ) -> None:
        if self._on_simplify_pass is not None:
            self._on_simplify_pass(path, index, eliminated, eliminated_sum, is_first, assigned)

    def on_eliminate(self, path: Path, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        if self._on_eliminate is not None:
            self._on_eliminate(path, cause, cell, value, by)


class MultiListener(SolverListener):
    """Fan events out to several listeners in registration order."""

    def __init__(self, listeners: Sequence[SolverListener]) -> None:
        self.listeners = tuple(listeners)

    def on_assign(self, path: Path, assigned: Markers, cell: GPos) -> None:
        for listener in self.listeners:
            listener.on_assign(path, assigned, cell)

    def on_simplify_pass(
        self,
        path: Path,
        index: int,
        eliminated: int,
        eliminated_sum: int,
        is_first: bool,
        assigned: Markers,
    ) -> None:
        for listener in self.listeners:
            listener.on_simplify_pass(path, index, eliminated, eliminated_sum, is_first, assigned)

    def on_eliminate(self, path: Path, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        for listener in self.listeners:
            listener.on_eliminate(path, cause, cell, value, by)


__all__ = [
    "AssignEvent",
    "CallbackListener",
    "EliminateEvent",
    "Markers",
    "MultiListener",
    "NULL_LISTENER",
    "Path",
    "SimplificationCause",
    "SimplifyPassEvent",
    "SolverListener",
]
