from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rwgraph.config import DEFAULT_HEIGHT, DEFAULT_TOLERANCE_MS, LayoutConfig
from rwgraph.io import read_event_log
from rwgraph.layout import Diagram, NothingToRenderError, layout_timeline
from rwgraph.log import configure_logging, get_logger
from rwgraph.timeline import reconstruct_log
from rwgraph.validate import validate_log

_log = get_logger("ui")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rwgraph_ui", description="Render readers-writers diagrams")
    sub = p.add_subparsers(dest="cmd", required=True)
    for name, help_text in (
        ("render", "Render an event log to an image file"),
        ("view", "Open an event log's diagram in a window"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("--log", required=True, type=Path)
        sp.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
        sp.add_argument("--tolerance-ms", type=int, default=DEFAULT_TOLERANCE_MS)
        sp.add_argument("-v", "--verbose", action="store_true")
        sp.add_argument("--debug", action="store_true")
        if name == "render":
            sp.add_argument("--out", type=Path, default=None)
    return p


def _diagram_for(args: argparse.Namespace) -> Diagram:
    log = read_event_log(args.log)
    validate_log(log)
    timeline = reconstruct_log(log, tolerance_ms=args.tolerance_ms)
    return layout_timeline(timeline, LayoutConfig(height=args.height))


def main(argv: list[str] | None = None) -> int:
    """Entry point for `python -m rwgraph_ui`."""

    args = _build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(verbose=args.verbose, debug=args.debug)

    try:
        from rwgraph_ui.app import run_app
        from rwgraph_ui.renderer import save_diagram
    except ImportError as e:  # pragma: no cover
        # Common first-run experience: PySide6 not installed.
        sys.stderr.write(
            "rwgraph UI requires PySide6. Install it (e.g. `pip install PySide6`)\n"
        )
        sys.stderr.write(f"ImportError: {e}\n")
        return 2

    try:
        diagram = _diagram_for(args)
    except NothingToRenderError as e:
        _log.error("%s", e)
        return 1
    except (ValueError, KeyError) as e:
        _log.error("invalid event log %s: %s", args.log, e)
        return 2

    if args.cmd == "render":
        out = save_diagram(diagram, args.out)
        _log.info("wrote %s (%dx%d)", out, diagram.width, diagram.height)
        return 0

    if args.cmd == "view":
        return run_app(diagram, title=f"rwgraph - {args.log.name}", argv=[sys.argv[0]])

    raise AssertionError(f"Unhandled command: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
