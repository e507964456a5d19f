"""In-memory solve trace built from solver events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import List, Mapping, Tuple

from .board import GPos, SudokuBoard
from .events import (
    AssignEvent,
    EliminateEvent,
    Markers,
    Path,
    SimplificationCause,
    SimplifyPassEvent,
    SolverListener,
)

TRACE_LEVELS = ("none", "summary", "full")

TraceEvent = AssignEvent | SimplifyPassEvent | EliminateEvent


class TraceValidationError(ValueError):
    """Raised when a trace payload violates the solve-trace schema."""


def _event_payload(event: TraceEvent) -> dict:
    if isinstance(event, AssignEvent):
        return {
            "kind": "assign",
            "path": list(event.path),
            "cell": [event.cell.x, event.cell.y],
            "value": int(event.value),
            "assigned": [index for index, flag in enumerate(event.assigned) if flag],
        }
    if isinstance(event, SimplifyPassEvent):
        return {
            "kind": "simplify",
            "path": list(event.path),
            "index": int(event.index),
            "eliminated": int(event.eliminated),
            "eliminated_sum": int(event.eliminated_sum),
            "is_first": bool(event.is_first),
        }
    return {
        "kind": "eliminate",
        "path": list(event.path),
        "cause": event.cause.name,
        "cell": [event.cell.x, event.cell.y],
        "value": int(event.value),
        "by": int(event.by),
    }


@dataclass
class SolveTrace(SolverListener):
    """Listener collecting events according to ``trace_level``.

    ``none`` records nothing, ``summary`` keeps assignments and simplification
    passes, ``full`` also keeps every single elimination.  ``board`` is only
    read to resolve the value just assigned.
    """

    board: SudokuBoard | None = None
    trace_level: str = "summary"
    entries: List[TraceEvent] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.trace_level not in TRACE_LEVELS:
            raise ValueError(f"Unsupported trace level: {self.trace_level!r}")

    # Listener hooks ---------------------------------------------------

    def on_assign(self, path: Path, assigned: Markers, cell: GPos) -> None:
        if self.trace_level == "none":
            return
        value = 0
        if self.board is not None:
            value = self.board.cell_info(cell)[0]
        self.entries.append(AssignEvent(path=path, assigned=assigned, cell=cell, value=value))

    def on_simplify_pass(
        self,
        path: Path,
        index: int,
        eliminated: int,
        eliminated_sum: int,
        is_first: bool,
        assigned: Markers,
    ) -> None:
        if self.trace_level == "none":
            return
        self.entries.append(
            SimplifyPassEvent(
                path=path,
                index=index,
                eliminated=eliminated,
                eliminated_sum=eliminated_sum,
                is_first=is_first,
                assigned=assigned,
            )
        )

    def on_eliminate(self, path: Path, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        if self.trace_level != "full":
            return
        self.entries.append(EliminateEvent(path=path, cause=cause, cell=cell, value=value, by=by))

    # Accessors --------------------------------------------------------

    def snapshot(self) -> Tuple[TraceEvent, ...]:
        return tuple(self.entries)

    def reset(self) -> None:
        self.entries.clear()

    def count(self, kind: type) -> int:
        return sum(1 for entry in self.entries if isinstance(entry, kind))

    def to_payload(self, *, result: Mapping[str, object] | None = None) -> dict:
        payload: dict = {
            "version": 1,
            "trace_level": self.trace_level,
            "events": [_event_payload(entry) for entry in self.entries],
        }
        if result is not None:
            payload["result"] = dict(result)
        return payload

    def to_json(self, *, result: Mapping[str, object] | None = None, indent: int | None = None) -> str:
        payload = self.to_payload(result=result)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), indent=indent)


__all__ = ["SolveTrace", "TRACE_LEVELS", "TraceEvent", "TraceValidationError"]
