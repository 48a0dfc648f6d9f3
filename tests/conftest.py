from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
EXAMPLE_SCRIPTS = REPO_ROOT / "examples" / "scripts"

# Test modules import `rwgraph` at collection time, before any fixture runs.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(scope="session", autouse=True)
def _qt_offscreen() -> None:
    """Ensure Qt can initialize in CI/headless environments."""

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture()
def example_scripts() -> list[Path]:
    return sorted(EXAMPLE_SCRIPTS.glob("*.txt"))
