"""Pytest configuration for bugreporter tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`). HTTP traffic goes
through the doubles in ``http_doubles`` instead of the network.
"""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from http_doubles import DummyResponse, DummySession

_TEST_START_TIMES: dict[str, float] = {}
_TEST_DURATIONS: list[tuple[str, float]] = []

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

SETTINGS = {
    "AzureDevOpsUrl": "https://dev.azure.com/contoso",
    "Project": "Shop",
    "PersonalAccessToken": "secret-pat",
}


@pytest.fixture
def make_session() -> Callable[..., DummySession]:
    def _make(*responses: DummyResponse | BaseException) -> DummySession:
        return DummySession(responses=list(responses))

    return _make


@pytest.fixture
def write_settings(tmp_path: Path) -> Callable[..., Path]:
    def _write(
        overrides: dict[str, Any] | None = None,
        *,
        drop: tuple[str, ...] = (),
        name: str = "appsettings.json",
    ) -> Path:
        data: dict[str, Any] = {**SETTINGS, **(overrides or {})}
        for key in drop:
            data.pop(key, None)
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# --- Timing utilities to help identify slow/stalling tests ---


def pytest_runtest_setup(item):  # type: ignore
    _TEST_START_TIMES[item.nodeid] = time.perf_counter()


def pytest_runtest_teardown(item):  # type: ignore
    start = _TEST_START_TIMES.pop(item.nodeid, None)
    if start is not None:
        _TEST_DURATIONS.append((item.nodeid, time.perf_counter() - start))


def pytest_sessionfinish(session, exitstatus):  # type: ignore
    if not _TEST_DURATIONS:
        return
    slow = sorted(_TEST_DURATIONS, key=lambda x: x[1], reverse=True)[:10]
    print("\n=== Slowest Tests (top 10) ===")
    for nodeid, secs in slow:
        print(f"{secs:0.3f}s  {nodeid}")
