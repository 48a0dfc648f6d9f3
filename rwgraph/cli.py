from __future__ import annotations

import argparse
from pathlib import Path

from rwgraph.config import DEFAULT_HEIGHT, DEFAULT_MAX_STEPS, DEFAULT_TOLERANCE_MS, LayoutConfig
from rwgraph.io import read_event_log, write_diagram_json, write_event_log_json, write_marks_csv
from rwgraph.layout import NothingToRenderError, layout_timeline
from rwgraph.log import configure_logging, get_logger
from rwgraph.scripts import ScriptParseError, load_scripts
from rwgraph.sim import SimulationError, simulate
from rwgraph.timeline import reconstruct_log
from rwgraph.validate import validate_log

_log = get_logger(__name__)


def _add_logging_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("-v", "--verbose", action="store_true", help="Progress messages")
    p.add_argument("--debug", action="store_true", help="Pipeline internals")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rwgraph", description="Readers-writers timeline diagrams"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Run process scripts and write an event log")
    sim.add_argument("--process", required=True, type=Path, nargs="+", dest="processes")
    sim.add_argument(
        "--name",
        type=str,
        nargs="+",
        dest="names",
        help="Process names, one per script (default: file stem)",
    )
    sim.add_argument("--permits", type=int, default=None)
    sim.add_argument("--seed", type=int, default=0)
    sim.add_argument("--jitter-ms", type=int, default=0)
    sim.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS)
    sim.add_argument("--out-log", required=True, type=Path)
    _add_logging_flags(sim)

    lay = sub.add_parser("layout", help="Reconstruct a timeline and write its geometry")
    lay.add_argument("--log", required=True, type=Path)
    lay.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    lay.add_argument("--tolerance-ms", type=int, default=DEFAULT_TOLERANCE_MS)
    lay.add_argument("--out-diagram", required=True, type=Path)
    lay.add_argument("--out-marks", required=False, type=Path)
    _add_logging_flags(lay)
    return p


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)
    configure_logging(verbose=args.verbose, debug=args.debug)

    if args.cmd == "simulate":
        try:
            scripts = load_scripts(list(args.processes), args.names)
            log = simulate(
                scripts,
                permits=args.permits,
                seed=args.seed,
                jitter_ms=args.jitter_ms,
                max_steps=args.max_steps,
            )
        except (ScriptParseError, SimulationError) as e:
            _log.error("%s", e)
            return 2

        write_event_log_json(args.out_log, log)
        _log.info("wrote %s", args.out_log)
        return 0

    if args.cmd == "layout":
        try:
            log = read_event_log(args.log)
            validate_log(log)
            timeline = reconstruct_log(log, tolerance_ms=args.tolerance_ms)
            diagram = layout_timeline(timeline, LayoutConfig(height=args.height))
        except NothingToRenderError as e:
            _log.error("%s", e)
            return 1
        except (ValueError, KeyError) as e:
            _log.error("invalid event log %s: %s", args.log, e)
            return 2

        write_diagram_json(args.out_diagram, diagram)
        if args.out_marks:
            write_marks_csv(args.out_marks, timeline)
        _log.info(
            "wrote %s (%d marks, %d processes)",
            args.out_diagram,
            len(timeline.marks),
            len(timeline.roster),
        )
        return 0

    raise AssertionError(f"Unhandled command: {args.cmd}")
