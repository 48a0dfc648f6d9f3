from __future__ import annotations

import csv
import json
import runpy
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


def _write_json(path: Path, obj: object) -> None:
    path.write_text(json.dumps(obj), encoding="utf-8")


def _scenario_a_log() -> dict:
    return {
        "permits": 2,
        "processes": [
            {"name": "A0", "role": "reader"},
            {"name": "A1", "role": "reader"},
            {"name": "B0", "role": "writer"},
        ],
        "events": [
            {"process": "A0", "kind": "compute", "offset_ms": 0, "duration_ms": 50, "resources_held": 0},
            {"process": "A0", "kind": "compute", "offset_ms": 50, "duration_ms": 30, "resources_held": 1},
            {"process": "A0", "kind": "terminate", "offset_ms": 80},
        ],
    }


def test_cli_simulate_then_layout(tmp_path: Path, example_scripts: list[Path]) -> None:
    from rwgraph.cli import main

    out_log = tmp_path / "out" / "events.json"
    rc = main(
        ["simulate", "--process", *[str(p) for p in example_scripts], "--out-log", str(out_log)]
    )
    assert rc == 0
    log = json.loads(out_log.read_text(encoding="utf-8"))
    assert log["permits"] == 2
    assert [p["name"] for p in log["processes"]] == ["A0", "A1", "B0"]

    out_diagram = tmp_path / "out" / "diagram.json"
    out_marks = tmp_path / "out" / "marks.csv"
    rc = main(
        [
            "layout",
            "--log",
            str(out_log),
            "--height",
            "600",
            "--out-diagram",
            str(out_diagram),
            "--out-marks",
            str(out_marks),
        ]
    )
    assert rc == 0
    diagram = json.loads(out_diagram.read_text(encoding="utf-8"))
    assert diagram["height"] == 600
    assert [c["process"] for c in diagram["columns"]] == ["A0", "A1", "B0"]

    with out_marks.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["instant_ms"] for r in rows][:3] == ["10", "20", "50"]
    assert rows[4]["waiting_processes"] == "B0"


def test_cli_layout_reports_nothing_to_render(tmp_path: Path) -> None:
    from rwgraph.cli import main

    log_path = tmp_path / "empty.json"
    _write_json(log_path, {"processes": [{"name": "A0", "role": "reader"}], "events": []})

    out = tmp_path / "diagram.json"
    assert main(["layout", "--log", str(log_path), "--out-diagram", str(out)]) == 1
    assert not out.exists()


def test_cli_layout_rejects_unknown_process(tmp_path: Path) -> None:
    from rwgraph.cli import main

    obj = _scenario_a_log()
    obj["events"].append({"process": "ZZ", "kind": "terminate", "offset_ms": 90})
    log_path = tmp_path / "bad.json"
    _write_json(log_path, obj)

    out = tmp_path / "diagram.json"
    assert main(["layout", "--log", str(log_path), "--out-diagram", str(out)]) == 2
    assert not out.exists()


def test_cli_layout_rejects_compute_after_terminate(tmp_path: Path) -> None:
    from rwgraph.cli import main

    obj = _scenario_a_log()
    obj["events"].append(
        {"process": "A0", "kind": "compute", "offset_ms": 90, "duration_ms": 5, "resources_held": 0}
    )
    log_path = tmp_path / "late.json"
    _write_json(log_path, obj)

    out = tmp_path / "diagram.json"
    assert main(["layout", "--log", str(log_path), "--out-diagram", str(out)]) == 2
    assert not out.exists()


def test_cli_simulate_halt_then_layout(tmp_path: Path) -> None:
    from rwgraph.cli import main

    script = tmp_path / "A0.txt"
    script.write_text("L\nC 10\nH\nC 10\n", encoding="utf-8")
    out_log = tmp_path / "log.json"
    assert main(["simulate", "--process", str(script), "--out-log", str(out_log)]) == 0

    out = tmp_path / "diagram.json"
    assert main(["layout", "--log", str(out_log), "--out-diagram", str(out)]) == 0
    assert out.exists()


def test_cli_simulate_reports_script_errors(tmp_path: Path) -> None:
    from rwgraph.cli import main

    script = tmp_path / "x.txt"
    script.write_text("C 10\n", encoding="utf-8")
    rc = main(["simulate", "--process", str(script), "--out-log", str(tmp_path / "e.json")])
    assert rc == 2


def test_cli_unhandled_command_raises_assertion(monkeypatch: pytest.MonkeyPatch) -> None:
    import rwgraph.cli

    class _DummyParser:
        def parse_args(self, _argv: list[str] | None) -> object:
            return SimpleNamespace(cmd="nope", verbose=False, debug=False)

    monkeypatch.setattr(rwgraph.cli, "_build_parser", lambda: _DummyParser())
    with pytest.raises(AssertionError, match="Unhandled command"):
        rwgraph.cli.main(["anything"])


def test_python_m_rwgraph_executes_main(tmp_path: Path) -> None:
    log_path = tmp_path / "log.json"
    _write_json(log_path, _scenario_a_log())
    out = tmp_path / "diagram.json"

    proc = subprocess.run(
        [sys.executable, "-m", "rwgraph", "layout", "--log", str(log_path), "--out-diagram", str(out)],
        capture_output=True,
        text=True,
        check=False,
        cwd=str(REPO_ROOT),
    )
    assert proc.returncode == 0, proc.stderr
    assert out.exists()


def test___main___module_runs_inprocess_and_exits_zero(tmp_path: Path) -> None:
    log_path = tmp_path / "log.json"
    _write_json(log_path, _scenario_a_log())
    out = tmp_path / "diagram.json"

    old_argv = sys.argv[:]
    try:
        sys.argv = ["python -m rwgraph", "layout", "--log", str(log_path), "--out-diagram", str(out)]
        with pytest.raises(SystemExit) as exc:
            runpy.run_module("rwgraph.__main__", run_name="__main__")
        assert exc.value.code == 0
    finally:
        sys.argv = old_argv

    assert out.exists()


def test_io_writers_roundtrip(tmp_path: Path) -> None:
    from rwgraph.io import read_event_log, write_event_log_json
    from rwgraph.model import EventLog

    log = EventLog.from_json(_scenario_a_log())
    path = tmp_path / "nested" / "log.json"
    write_event_log_json(path, log)
    assert read_event_log(path) == log
