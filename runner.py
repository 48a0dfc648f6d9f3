from __future__ import annotations

"""Repo-root convenience shim for the rwgraph renderer.

    python runner.py render --log events.json --out grafica.png

It delegates to the canonical UI entry point:

    python -m rwgraph_ui
"""

import sys


def main() -> int:
    """Run `python -m rwgraph_ui` with this process's arguments."""

    from rwgraph_ui.__main__ import main as ui_main

    return ui_main(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
