"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


class ManualClock:
    """Millisecond clock whose value tests set explicitly."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def manual_clock() -> ManualClock:
    """Return a clock starting at t=0."""
    return ManualClock()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer BLOBSHELF_* settings out of test runs."""
    for name in (
        "BLOBSHELF_DATA_ROOT",
        "BLOBSHELF_CONTENT_CLI",
        "BLOBSHELF_LOCK_TIMEOUT",
        "BLOBSHELF_EVENT_LOG",
        "BLOBSHELF_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
