"""PySide6 rendering client for the rwgraph core.

This package is a *client* of the headless core:

- Core stays UI-agnostic (no Qt imports under `rwgraph/`).
- The UI only paints geometry the core has already laid out.

Run from source:

    python -m rwgraph_ui render --log events.json --out grafica.png
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
