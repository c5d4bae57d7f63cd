from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure() -> None:
    # `src` is the import package itself, so the repo root must be importable.
    root = str(REPO_ROOT)
    if root not in sys.path:
        sys.path.insert(0, root)
