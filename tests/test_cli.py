import io
import json

import pytest

from sudoku_dfs.schema import validate_trace
from tools.cli import solve as cli

WIKI_PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
WIKI_SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"
DUPLICATE_PUZZLE = "55" + "0" * 79


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch):
    for key in ("CLI_DESCRIPTIVE", "SUDOKU_DESCRIPTIVE", "CLI_COLORED", "SUDOKU_COLORED"):
        monkeypatch.delenv(key, raising=False)


def test_solves_a_puzzle_given_inline(capsys):
    code = cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--no-color"])
    out = capsys.readouterr().out

    assert code == 0
    assert ">======== ANSWER ========" in out
    assert "| 5 3 4 | 6 7 8 | 9 1 2 |" in out
    assert "> Solved in " in out
    assert "Tentative Assignments" in out
    assert "\033[" not in out


def test_reads_nine_line_file(tmp_path, capsys):
    rows = [WIKI_PUZZLE[i : i + 9].replace("0", " ") for i in range(0, 81, 9)]
    puzzle_file = tmp_path / "wiki.txt"
    puzzle_file.write_text("\n".join(rows) + "\n", encoding="utf-8")

    assert cli.main(["solve", str(puzzle_file)]) == 0
    assert "Solved in" in capsys.readouterr().out


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(WIKI_PUZZLE + "\n"))
    assert cli.main(["solve", "-"]) == 0
    assert "Solved in" in capsys.readouterr().out


def test_bad_input_exits_with_2(capsys):
    code = cli.main(["solve", "--puzzle", "123\n456\n"])
    captured = capsys.readouterr()
    assert code == 2
    assert "input-format-error" in captured.err


def test_unsolvable_puzzle_exits_with_1(capsys):
    code = cli.main(["solve", "--puzzle", DUPLICATE_PUZZLE])
    captured = capsys.readouterr()
    assert code == 1
    assert "No solution found." in captured.err


def test_json_output(capsys):
    code = cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--json", "--descriptive"])
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["solved"] is True
    assert payload["grid"] == WIKI_SOLUTION
    assert set(payload) >= {"assignments", "simplifications", "elapsed_s", "max_depth", "state_hash"}


def test_descriptive_mode_prints_passes(capsys):
    assert cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--descriptive"]) == 0
    assert "SIMPLIFY: ELIMINATED = " in capsys.readouterr().out


def test_colour_output(capsys):
    assert cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--color"]) == 0
    assert "\033[" in capsys.readouterr().out


def test_trace_file_is_written_and_valid(tmp_path, capsys):
    trace_path = tmp_path / "trace.json"
    code = cli.main(
        ["solve", "--puzzle", WIKI_PUZZLE, "--json", "--trace-level", "full", "--trace-out", str(trace_path)]
    )
    capsys.readouterr()
    document = json.loads(trace_path.read_text(encoding="utf-8"))

    assert code == 0
    validate_trace(document)
    assert document["trace_level"] == "full"
    assert document["result"]["grid"] == WIKI_SOLUTION
    assert any(event["kind"] == "eliminate" for event in document["events"])


def test_run_record_is_appended(tmp_path, capsys):
    code = cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--json", "--log-dir", str(tmp_path)])
    capsys.readouterr()
    logs = list(tmp_path.rglob("solve_*.jsonl"))

    assert code == 0
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert record["solved"] is True
    assert record["module_id"].startswith("sudoku-9x9:solver/dfs@")
    assert len(record["run_id"]) == 32


def test_render_writes_a_figure(tmp_path, capsys):
    out = tmp_path / "answer.png"
    assert cli.main(["solve", "--puzzle", WIKI_PUZZLE, "--render", str(out)]) == 0
    capsys.readouterr()
    assert out.exists()


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
