"""Client module - watch folder intake and the put.io HTTP client."""

from krantor.client.api import (
    APIError,
    AuthenticationError,
    PutioClient,
    RemoteTimeoutError,
    TransferClient,
)
from krantor.client.classifier import classify, is_recognized
from krantor.client.dispatch import Dispatcher
from krantor.client.intake import Intake, IntakeOutcome, intake
from krantor.client.sweep import list_candidates, sweep
from krantor.client.watcher import FileWatcher

__all__ = [
    # HTTP client
    "APIError",
    "AuthenticationError",
    "PutioClient",
    "RemoteTimeoutError",
    "TransferClient",
    # Intake
    "Dispatcher",
    "Intake",
    "IntakeOutcome",
    "classify",
    "intake",
    "is_recognized",
    "list_candidates",
    "sweep",
    # Watcher
    "FileWatcher",
]
