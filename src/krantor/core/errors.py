"""Error taxonomy for krantor.

Fatal kinds stop the process at startup (or when the watcher dies).
Per-file kinds are caught at the intake boundary and only logged.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorKind(Enum):
    """Closed set of error kinds."""

    CONFIGURATION = "configuration"
    DIRECTORY_ACCESS = "directory_access"
    WATCHER_SUBSCRIPTION = "watcher_subscription"
    UNRECOGNIZED_FILE_KIND = "unrecognized_file_kind"
    FILE_READ = "file_read"
    REMOTE_UPLOAD = "remote_upload"
    REMOTE_TRANSFER = "remote_transfer"


FATAL_KINDS = frozenset(
    {
        ErrorKind.CONFIGURATION,
        ErrorKind.DIRECTORY_ACCESS,
        ErrorKind.WATCHER_SUBSCRIPTION,
    }
)


class KrantorError(Exception):
    """Base exception carrying an error kind and its context."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.cause = cause

    @property
    def is_fatal(self) -> bool:
        """Whether this error must terminate the process."""
        return self.kind in FATAL_KINDS


class ConfigurationError(KrantorError):
    """Required configuration is missing or invalid."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class DirectoryAccessError(KrantorError):
    """The watch folder does not exist or cannot be listed."""

    kind = ErrorKind.DIRECTORY_ACCESS


class WatcherSubscriptionError(KrantorError):
    """The file system subscription could not be established or was lost."""

    kind = ErrorKind.WATCHER_SUBSCRIPTION


class UnrecognizedFileKind(KrantorError):
    """File name is neither a torrent descriptor nor a magnet link."""

    kind = ErrorKind.UNRECOGNIZED_FILE_KIND

    def __init__(self, name: str) -> None:
        super().__init__(f"File isn't a torrent or magnet file: {name}", path=name)
        self.name = name


class FileReadError(KrantorError):
    """Local file could not be opened or read."""

    kind = ErrorKind.FILE_READ


class RemoteError(KrantorError):
    """Remote call failed or exceeded its deadline."""

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        cause: BaseException | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message, path=path, cause=cause)
        self.timed_out = timed_out


class RemoteUploadError(RemoteError):
    """Uploading a torrent file failed."""

    kind = ErrorKind.REMOTE_UPLOAD


class RemoteTransferError(RemoteError):
    """Submitting a magnet link as a transfer failed."""

    kind = ErrorKind.REMOTE_TRANSFER
