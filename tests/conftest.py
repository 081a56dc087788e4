"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def write_ticks(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes tick rows under a CSV header."""

    def _write(rows: list[str], name: str = "ticks.csv") -> Path:
        csv_path = tmp_path / name
        csv_path.write_text("date,time,price,volume\n" + "".join(row + "\n" for row in rows))
        return csv_path

    return _write
