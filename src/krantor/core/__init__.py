"""Core module - Shared configuration, errors and types."""

from krantor.core.config import WatchConfig, parse_folder_id, validate_watch_folder
from krantor.core.errors import (
    ConfigurationError,
    DirectoryAccessError,
    ErrorKind,
    FileReadError,
    KrantorError,
    RemoteError,
    RemoteTransferError,
    RemoteUploadError,
    UnrecognizedFileKind,
    WatcherSubscriptionError,
)
from krantor.core.types import FileKind, Transfer

__all__ = [
    # Config
    "WatchConfig",
    "parse_folder_id",
    "validate_watch_folder",
    # Errors
    "ConfigurationError",
    "DirectoryAccessError",
    "ErrorKind",
    "FileReadError",
    "KrantorError",
    "RemoteError",
    "RemoteTransferError",
    "RemoteUploadError",
    "UnrecognizedFileKind",
    "WatcherSubscriptionError",
    # Types
    "FileKind",
    "Transfer",
]
