"""Configuration for krantor.

The configuration is read once at startup and passed explicitly to the
intake core, the startup sweep and the watcher.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from krantor.core.errors import ConfigurationError, DirectoryAccessError

WATCH_FOLDER_ENV = "WATCH_FOLDER"
API_TOKEN_ENV = "API_TOKEN"
DOWNLOAD_FOLDER_ID_ENV = "DOWNLOAD_FOLDER_ID"
API_URL_ENV = "PUTIO_API_URL"
UPLOAD_URL_ENV = "PUTIO_UPLOAD_URL"

DEFAULT_API_URL = "https://api.put.io/v2"
DEFAULT_UPLOAD_URL = "https://upload.put.io/v2"
DEFAULT_TIMEOUT = 5.0
DEFAULT_WARMUP = 0.1
DEFAULT_SETTLE_TIMEOUT = 2.0

MISSING_SEPARATOR = " / "

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class WatchConfig:
    """Immutable runtime configuration.

    Attributes:
        watch_folder: Directory watched for torrent and magnet files.
        api_token: OAuth token for the remote service.
        download_folder_id: Remote folder receiving every upload and transfer.
        api_url: Base URL of the remote API.
        upload_url: Base URL of the remote upload endpoint.
        timeout: Deadline in seconds for each remote call.
        warmup: Delay before reading a freshly created file.
        settle_timeout: Max seconds to wait for a file size to settle.
        max_concurrent: Optional limit on intakes running at once.
    """

    watch_folder: Path
    api_token: str
    download_folder_id: int
    api_url: str = DEFAULT_API_URL
    upload_url: str = DEFAULT_UPLOAD_URL
    timeout: float = DEFAULT_TIMEOUT
    warmup: float = DEFAULT_WARMUP
    settle_timeout: float = DEFAULT_SETTLE_TIMEOUT
    max_concurrent: int | None = None

    def __post_init__(self) -> None:
        """Normalize paths and URLs."""
        object.__setattr__(self, "watch_folder", Path(self.watch_folder))
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "upload_url", self.upload_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WatchConfig:
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            The parsed configuration.

        Raises:
            ConfigurationError: If a required variable is missing or invalid.
        """
        env = os.environ if environ is None else environ

        watch_folder = env.get(WATCH_FOLDER_ENV, "")
        api_token = env.get(API_TOKEN_ENV, "")
        folder_id = env.get(DOWNLOAD_FOLDER_ID_ENV, "")

        missing = [
            name
            for name, value in (
                (WATCH_FOLDER_ENV, watch_folder),
                (DOWNLOAD_FOLDER_ID_ENV, folder_id),
                (API_TOKEN_ENV, api_token),
            )
            if not value
        ]
        if missing:
            message = MISSING_SEPARATOR.join(f"{name} is not set" for name in missing)
            raise ConfigurationError(message, missing=missing)

        return cls(
            watch_folder=Path(watch_folder),
            api_token=api_token,
            download_folder_id=parse_folder_id(folder_id),
            api_url=env.get(API_URL_ENV) or DEFAULT_API_URL,
            upload_url=env.get(UPLOAD_URL_ENV) or DEFAULT_UPLOAD_URL,
        )

    def with_overrides(self, **overrides: Any) -> WatchConfig:
        """Return a copy with the given non-None fields replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def parse_folder_id(value: str) -> int:
    """Parse a remote folder id as a signed 32-bit decimal integer.

    Raises:
        ConfigurationError: If the value is not a valid integer.
    """
    if not _DECIMAL_RE.fullmatch(value):
        raise ConfigurationError(
            f"{DOWNLOAD_FOLDER_ID_ENV} must be an integer, got {value!r}"
        )
    folder_id = int(value)
    if not _INT32_MIN <= folder_id <= _INT32_MAX:
        raise ConfigurationError(
            f"{DOWNLOAD_FOLDER_ID_ENV} is out of range: {value}"
        )
    return folder_id


def validate_watch_folder(path: Path) -> Path:
    """Check that the watch folder exists and can be listed.

    Returns:
        The resolved folder path.

    Raises:
        DirectoryAccessError: If the folder is missing or unreadable.
    """
    if not path.exists():
        raise DirectoryAccessError(f"Watch folder does not exist: {path}", path=path)
    if not path.is_dir():
        raise DirectoryAccessError(f"Watch folder is not a directory: {path}", path=path)
    if not os.access(path, os.R_OK | os.X_OK):
        raise DirectoryAccessError(f"Watch folder is not readable: {path}", path=path)
    return path.resolve()
