"""Pytest configuration shared by all krantor tests."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from krantor.core.config import WatchConfig


@pytest.fixture
def watch_dir(tmp_path: Path) -> Path:
    """Create a watch directory."""
    watch = tmp_path / "watch"
    watch.mkdir()
    return watch


@pytest.fixture
def make_config(watch_dir: Path) -> Callable[..., WatchConfig]:
    """Factory for a WatchConfig pointing at the watch directory."""

    def _make(**overrides: Any) -> WatchConfig:
        values: dict[str, Any] = {
            "watch_folder": watch_dir,
            "api_token": "token123",
            "download_folder_id": 42,
            "warmup": 0.0,
            "settle_timeout": 0.0,
        }
        values.update(overrides)
        return WatchConfig(**values)

    return _make


@pytest.fixture
def release() -> Iterator[threading.Event]:
    """Event released at teardown so hanging stub calls can finish."""
    event = threading.Event()
    yield event
    event.set()
