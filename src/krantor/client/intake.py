"""Intake of a single torrent or magnet file.

This module provides:
- Intake: classify -> read -> submit -> delete-on-success for one path
- SubmitStrategy: per-kind reader and remote call
- call_with_deadline: runs a blocking call with a hard deadline

Per-file errors never leave Intake.process(); they are logged and reported
in the returned IntakeOutcome. The file is only deleted after the remote
service accepted it.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from krantor.client.api import RemoteTimeoutError
from krantor.client.classifier import classify
from krantor.core.errors import (
    FileReadError,
    KrantorError,
    RemoteError,
    RemoteTransferError,
    RemoteUploadError,
    UnrecognizedFileKind,
)
from krantor.core.types import FileKind, Transfer

if TYPE_CHECKING:
    from krantor.client.api import TransferClient
    from krantor.core.config import WatchConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class IntakeOutcome:
    """Result of processing one file."""

    path: Path
    kind: FileKind | None
    success: bool
    transfer: Transfer | None = None
    error: KrantorError | None = None
    deleted: bool = False


@dataclass(frozen=True)
class SubmitStrategy:
    """How one file kind is read and sent to the remote service.

    Attributes:
        open: Returns a context manager yielding the payload. Raises
            FileReadError if the file cannot be read.
        submit: Sends the payload, returns the remote transfer.
        error: Error class raised when the remote call fails.
        action: Verb used in log messages.
    """

    open: Callable[[Path], AbstractContextManager[Any]]
    submit: Callable[[TransferClient, Any, Path, WatchConfig], Transfer]
    error: type[RemoteError]
    action: str


def _open_torrent(path: Path) -> AbstractContextManager[Any]:
    try:
        return open(path, "rb")
    except OSError as e:
        raise FileReadError(f"Couldn't open file {path.name}: {e}", path=path, cause=e) from e


def _read_magnet(path: Path) -> AbstractContextManager[Any]:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Couldn't read file {path.name}: {e}", path=path, cause=e) from e
    if not text:
        raise FileReadError(f"Magnet file is empty: {path.name}", path=path)
    logger.debug(f"Magnet data: {text}")
    return nullcontext(text)


def _submit_torrent(
    client: TransferClient, file: Any, path: Path, config: WatchConfig
) -> Transfer:
    return client.upload(file, path.name, config.download_folder_id, timeout=config.timeout)


def _submit_magnet(
    client: TransferClient, text: Any, path: Path, config: WatchConfig
) -> Transfer:
    return client.add_transfer(text, config.download_folder_id, "", timeout=config.timeout)


STRATEGIES: dict[FileKind, SubmitStrategy] = {
    FileKind.TORRENT: SubmitStrategy(
        open=_open_torrent,
        submit=_submit_torrent,
        error=RemoteUploadError,
        action="Upload",
    ),
    FileKind.MAGNET: SubmitStrategy(
        open=_read_magnet,
        submit=_submit_magnet,
        error=RemoteTransferError,
        action="Transfer",
    ),
}


def call_with_deadline(func: Callable[[], T], timeout: float, name: str = "remote-call") -> T:
    """Run a blocking call in a daemon thread and wait at most `timeout` seconds.

    The call is abandoned, not interrupted, when the deadline passes.

    Raises:
        TimeoutError: If the call did not finish in time.
        Exception: Whatever the call raised.
    """
    result: dict[str, Any] = {}
    done = threading.Event()

    def _run() -> None:
        try:
            result["value"] = func()
        except Exception as e:
            result["error"] = e
        finally:
            done.set()

    thread = threading.Thread(target=_run, name=name, daemon=True)
    thread.start()

    if not done.wait(timeout):
        raise TimeoutError(f"Deadline of {timeout:g}s exceeded")
    if "error" in result:
        raise result["error"]
    value: T = result["value"]
    return value


def wait_until_settled(path: Path, interval: float, timeout: float) -> None:
    """Wait for a freshly created file to stop growing.

    Sleeps `interval`, then polls the size until two readings match or
    `timeout` elapses. Never raises; a vanished file ends the wait.
    """
    time.sleep(interval)
    deadline = time.monotonic() + timeout
    try:
        last_size = path.stat().st_size
    except OSError:
        return

    while time.monotonic() < deadline:
        time.sleep(interval)
        try:
            size = path.stat().st_size
        except OSError:
            return
        if size == last_size:
            return
        last_size = size

    logger.debug(f"{path.name} still growing after {timeout:g}s, processing anyway")


class Intake:
    """Forwards torrent and magnet files to the remote service."""

    def __init__(self, client: TransferClient, config: WatchConfig) -> None:
        """Initialize the intake.

        Args:
            client: Remote transfer client, shared across threads.
            config: Runtime configuration.
        """
        self._client = client
        self._config = config

    @property
    def config(self) -> WatchConfig:
        """Get the runtime configuration."""
        return self._config

    def process(self, path: Path | str, wait: bool = False) -> IntakeOutcome:
        """Process one file: classify, submit and delete on success.

        Args:
            path: Path of the candidate file.
            wait: Wait for the file to settle first (live events).

        Returns:
            The outcome. Errors are reported here, never raised.
        """
        path = Path(path)

        try:
            kind = classify(path.name)
        except UnrecognizedFileKind as e:
            logger.debug(str(e))
            return IntakeOutcome(path=path, kind=None, success=False, error=e)

        if wait:
            wait_until_settled(path, self._config.warmup, self._config.settle_timeout)

        logger.info(f"New file detected: {path.name}")

        try:
            transfer = self._read_and_submit(path, STRATEGIES[kind])
        except FileReadError as e:
            logger.error(f"Read error: {e}")
            return IntakeOutcome(path=path, kind=kind, success=False, error=e)
        except RemoteError as e:
            logger.error(f"{STRATEGIES[kind].action} error: {e}")
            return IntakeOutcome(path=path, kind=kind, success=False, error=e)

        logger.info(f"Transferred to put.io: {path.name} at {transfer.created_at}")

        deleted = self._delete(path)
        return IntakeOutcome(
            path=path,
            kind=kind,
            success=True,
            transfer=transfer,
            deleted=deleted,
        )

    def _read_and_submit(self, path: Path, strategy: SubmitStrategy) -> Transfer:
        """Read the file and submit it under the configured deadline."""
        timeout = self._config.timeout

        with strategy.open(path) as payload:
            try:
                return call_with_deadline(
                    lambda: strategy.submit(self._client, payload, path, self._config),
                    timeout,
                    name=f"submit-{path.name}",
                )
            except (TimeoutError, RemoteTimeoutError) as e:
                raise strategy.error(
                    f"{strategy.action} of {path.name} timed out after {timeout:g}s",
                    path=path,
                    cause=e,
                    timed_out=True,
                ) from e
            except Exception as e:
                raise strategy.error(
                    f"{strategy.action} of {path.name} failed: {e}",
                    path=path,
                    cause=e,
                ) from e

    def _delete(self, path: Path) -> bool:
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Couldn't delete {path.name} after transfer: {e}")
            return False
        return True


def intake(path: Path | str, client: TransferClient, config: WatchConfig) -> IntakeOutcome:
    """Process a single file without waiting for it to settle."""
    return Intake(client, config).process(path)
