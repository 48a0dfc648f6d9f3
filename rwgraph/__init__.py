"""Headless core of rwgraph: readers-writers event logs to timeline diagrams.

The core is Qt-free; painting lives in the UI client package.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
