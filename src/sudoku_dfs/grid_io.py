"""Text ingestion and console rendering around the solver core."""

from __future__ import annotations

import sys
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from .board import ALL_POSITIONS, CELL_COUNT, SIZE, GPos, SudokuBoard
from .errors import PuzzleFormatError
from .events import Markers, Path, SimplificationCause, SolverListener

ANSI_RESET = "\033[0m"
ANSI_GRAY = "\033[90m"
ANSI_RED = "\033[91m"
ANSI_GREEN = "\033[92m"
ANSI_YELLOW = "\033[93m"
ANSI_MAGENTA = "\033[95m"

_SEPARATOR = "+-------+-------+-------+"

Clues = List[Optional[int]]


# ---------- Ingestion ----------


def _clue(ch: str) -> Optional[int]:
    return int(ch) if "1" <= ch <= "9" else None


def parse_rows(lines: Sequence[str]) -> Clues:
    """Parse nine lines of nine characters each into 81 optional clues.

    Digits ``1``-``9`` are clues; any other character is a blank.
    """

    if len(lines) < SIZE:
        raise PuzzleFormatError(
            "too-few-lines",
            f"expected {SIZE} lines, got {len(lines)}",
            line=len(lines) + 1,
        )
    clues: Clues = []
    for row_number, raw in enumerate(lines[:SIZE], start=1):
        line = raw.rstrip("\r\n")
        if len(line) < SIZE:
            raise PuzzleFormatError(
                "too-few-characters",
                "too little characters provided in a line",
                line=row_number,
            )
        if len(line) > SIZE:
            raise PuzzleFormatError("newline-missing", "newline is missing", line=row_number)
        clues.extend(_clue(ch) for ch in line)
    return clues


def parse_puzzle(text: str) -> Clues:
    """Parse either the nine-line form or a single 81-character line."""

    lines = text.splitlines()
    while lines and not lines[-1]:
        lines.pop()
    while lines and not lines[0]:
        lines.pop(0)
    if len(lines) == 1 and len(lines[0].rstrip("\r\n")) == CELL_COUNT:
        return [_clue(ch) for ch in lines[0].rstrip("\r\n")]
    return parse_rows(lines)


def board_from_clues(clues: Sequence[Optional[int]]) -> SudokuBoard:
    """Build a board by forcing every clue in row-major order."""

    if len(clues) != CELL_COUNT:
        raise PuzzleFormatError("clue-count", f"expected {CELL_COUNT} cells, got {len(clues)}")
    board = SudokuBoard()
    for pos, value in zip(ALL_POSITIONS, clues):
        if value is not None:
            board.force_value(pos, value, True)
    return board


def decided_markers(board: SudokuBoard) -> Markers:
    """Flag every cell that currently holds a single candidate."""

    return tuple(board.cell_info(pos)[1] == 1 for pos in ALL_POSITIONS)


# ---------- Rendering ----------


def paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{ANSI_RESET}" if enabled and color else text


def format_board(
    board: SudokuBoard,
    highlights: Optional[Sequence[bool]] = None,
    *,
    highlight_color: str = ANSI_MAGENTA,
    color: bool = False,
    indent: int = 0,
) -> Tuple[str, bool]:
    """Render the board as a boxed grid.

    Undetermined cells print as ``-`` and empty cells as ``!``.  Returns the
    text and whether any cell was empty.
    """

    pad = " " * indent
    has_contradiction = False
    lines: List[str] = []
    for y in range(SIZE):
        if y % 3 == 0:
            lines.append(pad + paint(_SEPARATOR, ANSI_GRAY, color))
        parts: List[str] = [pad]
        for x in range(SIZE):
            if x % 3 == 0:
                parts.append(paint("| ", ANSI_GRAY, color))
            pos = GPos(x, y)
            value, count = board.cell_info(pos)
            if value == 0:
                if count == 0:
                    has_contradiction = True
                    parts.append(paint("! ", ANSI_RED, color))
                else:
                    parts.append(paint("-", ANSI_GRAY, color) + " ")
            elif highlights is not None and highlights[pos.index]:
                parts.append(paint(f"{value} ", highlight_color, color))
            else:
                parts.append(f"{value} ")
        parts.append(paint("|", ANSI_GRAY, color))
        lines.append("".join(parts))
    lines.append(pad + paint(_SEPARATOR, ANSI_GRAY, color))
    return "\n".join(lines), has_contradiction


def format_path(path: Iterable[int]) -> str:
    """Branch path for display: root marker dropped, indices 1-based."""

    return ".".join(str(index + 1) for index in list(path)[1:])


class DescriptiveListener(SolverListener):
    """Console listener printing every assignment, pass and elimination."""

    def __init__(self, board: SudokuBoard, stream: TextIO | None = None, *, color: bool = False) -> None:
        self.board = board
        self.stream = stream or sys.stdout
        self.color = color

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")

    def on_assign(self, path: Path, assigned: Markers, cell: GPos) -> None:
        spaces = (len(path) - 1) * 2
        value = self.board.cell_info(cell)[0]
        self._write(
            " " * spaces
            + format_path(path)
            + paint("(T): ", ANSI_GRAY, self.color)
            + paint("ASSIGN", ANSI_MAGENTA, self.color)
            + f": ({cell.x + 1},{cell.y + 1}) = "
            + paint(str(value), ANSI_MAGENTA, self.color)
        )
        text, _ = format_board(self.board, assigned, color=self.color, indent=spaces)
        self._write(text)
        self._write("")

    def on_simplify_pass(
        self,
        path: Path,
        index: int,
        eliminated: int,
        eliminated_sum: int,
        is_first: bool,
        assigned: Markers,
    ) -> None:
        spaces = len(path) * 2
        self._write(
            " " * (spaces - 2)
            + paint("> ", ANSI_GRAY, self.color)
            + format_path(path)
            + paint(f"(S.{index + 1}): ", ANSI_GRAY, self.color)
            + paint("SIMPLIFY", ANSI_GREEN, self.color)
            + f": ELIMINATED = {eliminated}"
            + paint(f"(sum = {eliminated_sum})", ANSI_GRAY, self.color)
        )
        text, _ = format_board(self.board, assigned, color=self.color, indent=spaces)
        self._write(text)
        self._write("")

    def on_eliminate(self, path: Path, cause: SimplificationCause, cell: GPos, value: int, by: int) -> None:
        head = " " * (len(path) * 2) + paint("-> ", ANSI_GRAY, self.color)
        where = f": ({cell.x + 1}, {cell.y + 1})"
        if cause.is_contradiction:
            self._write(head + paint("IMPOSSIBLE", ANSI_MAGENTA, self.color) + where)
            return

        if cause.is_elimination:
            label = paint("ELIMINATED", ANSI_RED, self.color)
            relation = "!="
        else:
            label = paint("BE DECIDED", ANSI_GREEN, self.color)
            relation = "=="
        house = f" by {cause.house} {by + 1}"
        if cause.house == "chunk":
            house += f"({by % 3 + 1}, {by // 3 + 1})"
        remaining = self.board.candidates(cell)
        detail = paint(
            "{" + ", ".join(str(v) for v in remaining) + "}" + f"({len(remaining)})",
            ANSI_GRAY,
            self.color,
        )
        line = head + label + where + f" {relation} {value}" + house + " " + detail
        if len(remaining) == 1:
            line += paint(" (!)", ANSI_GREEN, self.color)
        self._write(line)


__all__ = [
    "ANSI_GRAY",
    "ANSI_GREEN",
    "ANSI_MAGENTA",
    "ANSI_RED",
    "ANSI_RESET",
    "ANSI_YELLOW",
    "Clues",
    "DescriptiveListener",
    "board_from_clues",
    "decided_markers",
    "format_board",
    "format_path",
    "parse_puzzle",
    "paint",
    "parse_rows",
]
