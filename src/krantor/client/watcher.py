"""File system watcher for new torrent and magnet files.

This module provides:
- CreatedEventHandler: Forwards file creation events to a callback
- FileWatcher: Watches one directory (non-recursive) using watchdog
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    FileCreatedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from krantor.core.errors import DirectoryAccessError, WatcherSubscriptionError

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)


def _decode_path(path: str | bytes) -> Path:
    if isinstance(path, bytes):
        path = path.decode("utf-8", errors="replace")
    return Path(path)


class CreatedEventHandler(FileSystemEventHandler):
    """Event handler that reports created files."""

    def __init__(self, on_created: Callable[[Path], object]) -> None:
        """Initialize the handler.

        Args:
            on_created: Called with the path of every created file.
        """
        super().__init__()
        self._on_created = on_created

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Log every raw event."""
        logger.debug(f"event: {event.event_type} {event.src_path}")

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle created event."""
        if not isinstance(event, FileCreatedEvent):
            return
        self._on_created(_decode_path(event.src_path))


class FileWatcher:
    """Watches a directory for newly created files."""

    def __init__(
        self,
        watch_path: Path,
        on_created: Callable[[Path], object],
    ) -> None:
        """Initialize the file watcher.

        Args:
            watch_path: Directory to watch.
            on_created: Called with the path of every created file.
        """
        self._watch_path = Path(watch_path).resolve()
        if not self._watch_path.is_dir():
            raise DirectoryAccessError(
                f"Watch path must be a directory: {watch_path}", path=watch_path
            )

        self._handler = CreatedEventHandler(on_created)
        self._observer: BaseObserver = Observer()
        self._stop_requested = threading.Event()
        self._running = False

    @property
    def watch_path(self) -> Path:
        """Get the watched directory path."""
        return self._watch_path

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def start(self) -> None:
        """Start watching for created files.

        Raises:
            WatcherSubscriptionError: If the subscription cannot be established.
        """
        if self._running:
            return

        try:
            self._observer.schedule(self._handler, str(self._watch_path), recursive=False)
            self._observer.start()
        except OSError as e:
            raise WatcherSubscriptionError(
                f"Couldn't watch {self._watch_path}: {e}",
                path=self._watch_path,
                cause=e,
            ) from e

        self._stop_requested.clear()
        self._running = True
        logger.info(f"Watching {self._watch_path}")

    def stop(self) -> None:
        """Stop watching."""
        if not self._running:
            return

        self._stop_requested.set()
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._running = False

    def check_health(self) -> None:
        """Check that the subscription is still alive.

        Raises:
            WatcherSubscriptionError: If the observer died or the folder vanished.
        """
        if not self._running or self._stop_requested.is_set():
            return
        if not self._observer.is_alive():
            raise WatcherSubscriptionError(
                "File system observer stopped unexpectedly", path=self._watch_path
            )
        if not self._watch_path.is_dir():
            raise WatcherSubscriptionError(
                f"Watch folder disappeared: {self._watch_path}", path=self._watch_path
            )

    def wait(self, poll_interval: float = 1.0) -> None:
        """Block until stop() is called.

        Raises:
            WatcherSubscriptionError: If the subscription is lost.
        """
        if not self._running:
            return
        while not self._stop_requested.wait(poll_interval):
            self.check_health()

    def __enter__(self) -> FileWatcher:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()
