"""Tests for the startup sweep."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from krantor.client.intake import Intake
from krantor.client.sweep import list_candidates, sweep
from krantor.core.config import WatchConfig
from krantor.core.errors import DirectoryAccessError
from tests.fixtures import StubClient


@pytest.fixture
def populated_dir(watch_dir: Path) -> Path:
    """Watch directory with mixed content."""
    (watch_dir / "a.torrent").write_bytes(b"torrent-a")
    (watch_dir / "b.magnet").write_text("magnet:?xt=urn:btih:bbb")
    (watch_dir / "c.txt").write_text("not a torrent")
    subdir = watch_dir / "d"
    subdir.mkdir()
    (subdir / "nested.torrent").write_bytes(b"nested")
    return watch_dir


class TestListCandidates:
    """Tests for list_candidates()."""

    def test_only_direct_recognized_files(self, populated_dir: Path) -> None:
        names = [path.name for path in list_candidates(populated_dir)]

        assert names == ["a.torrent", "b.magnet"]

    def test_skips_directory_named_like_torrent(self, watch_dir: Path) -> None:
        (watch_dir / "folder.torrent").mkdir()

        assert list_candidates(watch_dir) == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Should raise a fatal DirectoryAccessError."""
        with pytest.raises(DirectoryAccessError) as exc_info:
            list_candidates(tmp_path / "missing")

        assert exc_info.value.is_fatal is True


class TestSweep:
    """Tests for sweep()."""

    def test_processes_recognized_files(
        self, populated_dir: Path, make_config: Callable[..., WatchConfig]
    ) -> None:
        """Should make exactly two remote calls and leave the rest untouched."""
        client = StubClient()

        outcomes = sweep(Intake(client, make_config()))

        assert [call.name for call in client.calls] == [
            "a.torrent",
            "magnet:?xt=urn:btih:bbb",
        ]
        assert all(outcome.success for outcome in outcomes)
        assert not (populated_dir / "a.torrent").exists()
        assert not (populated_dir / "b.magnet").exists()
        assert (populated_dir / "c.txt").read_text() == "not a torrent"
        assert (populated_dir / "d" / "nested.torrent").exists()

    def test_sequential_without_warmup(
        self, populated_dir: Path, make_config: Callable[..., WatchConfig]
    ) -> None:
        """Should process files one at a time and never wait for them to settle."""
        client = StubClient(delay=0.05)

        with patch("krantor.client.intake.wait_until_settled") as settle:
            sweep(Intake(client, make_config(warmup=5.0)))

        settle.assert_not_called()
        assert client.max_active == 1

    def test_failures_are_kept(
        self, populated_dir: Path, make_config: Callable[..., WatchConfig]
    ) -> None:
        outcomes = sweep(Intake(StubClient(fail=True), make_config()))

        assert [outcome.success for outcome in outcomes] == [False, False]
        assert (populated_dir / "a.torrent").exists()
        assert (populated_dir / "b.magnet").exists()

    def test_explicit_folder(
        self, tmp_path: Path, make_config: Callable[..., WatchConfig]
    ) -> None:
        other = tmp_path / "other"
        other.mkdir()
        (other / "x.torrent").write_bytes(b"x")
        client = StubClient()

        sweep(Intake(client, make_config()), folder=other)

        assert [call.name for call in client.calls] == ["x.torrent"]

    def test_empty_directory(self, make_config: Callable[..., WatchConfig]) -> None:
        assert sweep(Intake(StubClient(), make_config())) == []
