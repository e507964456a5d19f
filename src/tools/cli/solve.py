"""Command line front-end for the DFS Sudoku solver."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import uuid
from pathlib import Path
from typing import List, TextIO

from feature_flags import is_color_enabled, is_descriptive_enabled
from project_config import get_section
from sudoku_dfs import DESCRIPTOR, MultiListener, PuzzleFormatError, SolveTrace, solve_board
from sudoku_dfs import runlog
from sudoku_dfs.grid_io import (
    ANSI_GRAY,
    ANSI_GREEN,
    ANSI_RED,
    ANSI_YELLOW,
    DescriptiveListener,
    board_from_clues,
    decided_markers,
    format_board,
    paint,
    parse_puzzle,
)
from sudoku_dfs.schema import validate_trace

_LOGGER = logging.getLogger("sudoku_dfs.cli")


def _read_puzzle(args: argparse.Namespace, stdin: TextIO) -> str:
    if args.puzzle:
        return args.puzzle
    if args.file and args.file != "-":
        return Path(args.file).read_text("utf-8")
    return stdin.read()


def _log_enabled(args: argparse.Namespace) -> bool:
    if args.log_dir:
        runlog.configure(args.log_dir)
        return True
    return bool(get_section("log.enabled", False))


def cmd_solve(args: argparse.Namespace) -> int:
    out = sys.stdout
    env = dict(os.environ)
    color = args.color if args.color is not None else is_color_enabled(env)
    descriptive = args.descriptive if args.descriptive is not None else is_descriptive_enabled(env)
    if args.json:
        color = False
        descriptive = False

    try:
        clues = parse_puzzle(_read_puzzle(args, sys.stdin))
    except PuzzleFormatError as exc:
        print(paint(f"{{error}} input-format-error: {exc.msg}", ANSI_RED, color), file=sys.stderr)
        return 2

    board = board_from_clues(clues)
    clue_markers = decided_markers(board)
    if not args.json:
        text, _ = format_board(board, color=color)
        out.write("\n" + text + "\n")

    trace_level = args.trace_level or str(get_section("solver.trace_level", "summary"))
    if not args.trace_out:
        trace_level = "none"
    trace = SolveTrace(board=board, trace_level=trace_level)
    listeners = [trace]
    if descriptive:
        listeners.append(DescriptiveListener(board, out, color=color))

    result = solve_board(board, MultiListener(listeners))
    payload = result.to_payload()

    if args.trace_out:
        document = trace.to_payload(result=payload)
        validate_trace(document)
        Path(args.trace_out).write_text(json.dumps(document, indent=2), encoding="utf-8")
        _LOGGER.info("trace written to %s", args.trace_out)

    if args.render and result.solved:
        from sudoku_dfs.render import save_board_figure

        save_board_figure(board, args.render, clues=clue_markers, title=DESCRIPTOR["module_id"])

    if _log_enabled(args):
        event = {"run_id": uuid.uuid4().hex, "module_id": DESCRIPTOR["module_id"], **payload}
        runlog.append_event(event)

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0 if result.solved else 1

    out.write("\n>======== ANSWER ========\n")
    if not result.solved:
        print("> No solution found.", file=sys.stderr)
        return 1

    text, _ = format_board(board, clue_markers, highlight_color=ANSI_GRAY, color=color)
    out.write(text + "\n")
    out.write(
        paint(">", ANSI_GRAY, color)
        + " Solved in "
        + paint(str(result.assignments), ANSI_YELLOW, color)
        + " Tentative Assignments, "
        + paint(str(result.simplifications), ANSI_YELLOW, color)
        + " Simplifications, "
        + paint(f"{result.elapsed_s:.6f}", ANSI_GREEN, color)
        + " seconds.\n"
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Constraint-propagation Sudoku solver")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve one 9x9 puzzle")
    solve.add_argument("file", nargs="?", default=None, help="Puzzle file ('-' or omitted reads stdin)")
    solve.add_argument("--puzzle", default=None, help="Puzzle as a single 81-character string")
    solve.add_argument(
        "--descriptive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print every assignment, simplification pass and elimination",
    )
    solve.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use ANSI colours in console output",
    )
    solve.add_argument("--json", action="store_true", help="Print the result as JSON")
    solve.add_argument("--trace-level", choices=("none", "summary", "full"), default=None)
    solve.add_argument("--trace-out", default=None, help="Write the solve trace as JSON")
    solve.add_argument("--render", default=None, help="Save the solved board as PDF/PNG")
    solve.add_argument("--log-dir", default=None, help="Append a JSONL run record below this directory")
    solve.set_defaults(func=cmd_solve)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
