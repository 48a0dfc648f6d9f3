from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from rwgraph.layout import Diagram
from rwgraph.model import EventLog
from rwgraph.types import Timeline


def read_event_log(path: Path) -> EventLog:
    return EventLog.from_json(json.loads(path.read_text(encoding="utf-8")))


def _write_json(path: Path, obj: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True), encoding="utf-8")


def write_event_log_json(path: Path, log: EventLog) -> None:
    _write_json(path, log.to_json())


def write_diagram_json(path: Path, diagram: Diagram) -> None:
    _write_json(path, diagram.to_json())


def write_marks_csv(path: Path, timeline: Timeline) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "instant_ms",
                "permit_value",
                "waiting_processes",
                "critical_writer",
                "critical_readers",
                "waiting_readers",
                "waiting_writers",
            ]
        )
        for m in timeline.marks:
            s = m.state
            w.writerow(
                [
                    m.instant,
                    m.permit_value,
                    ";".join(m.waiting_processes),
                    int(s.critical_writer) if s else "",
                    s.critical_reader_count if s else "",
                    s.waiting_reader_count if s else "",
                    s.waiting_writer_count if s else "",
                ]
            )
