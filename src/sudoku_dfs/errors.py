"""Error types shared by the board, the solver and the ingestion layer."""

from __future__ import annotations


class OutOfRangeError(ValueError):
    """Raised when a candidate value or coordinate falls outside ``[1, 9]``/``[0, 8]``."""


class SolverInvariantError(RuntimeError):
    """Raised when the search reaches a state that must be unreachable."""


class PuzzleFormatError(ValueError):
    """Raised by the ingestion layer when puzzle text is malformed.

    ``code`` is a short machine-readable identifier (``too-few-characters``,
    ``newline-missing``, ``too-few-lines``) and ``line`` the 1-based input line
    that triggered the error, when known.
    """

    def __init__(self, code: str, msg: str, *, line: int | None = None) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.code}: {self.msg}"
        return f"{self.code}: {self.msg} (line {self.line})"


__all__ = ["OutOfRangeError", "PuzzleFormatError", "SolverInvariantError"]
