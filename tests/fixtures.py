"""Test doubles for the remote transfer client."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import IO

from krantor.client.api import APIError
from krantor.core.types import Transfer

CREATED_AT = datetime(2025, 1, 1, 10, 0, 0)


@dataclass
class RemoteCall:
    """A call recorded by StubClient."""

    method: str
    name: str
    payload: bytes | str
    parent_id: int


class StubClient:
    """In-memory transfer client.

    Args:
        fail: Raise APIError on every call.
        delay: Seconds to sleep inside every call.
        block: Event the call waits on before returning (simulates a hang).
    """

    def __init__(
        self,
        fail: bool = False,
        delay: float = 0.0,
        block: threading.Event | None = None,
    ) -> None:
        self.fail = fail
        self.delay = delay
        self.block = block
        self.calls: list[RemoteCall] = []
        self.max_active = 0
        self._active = 0
        self._lock = threading.Lock()

    def _call(self, call: RemoteCall) -> Transfer:
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.block is not None:
                self.block.wait()
            with self._lock:
                self.calls.append(call)
            if self.fail:
                raise APIError("Internal server error", 500)
            return Transfer(
                id=len(self.calls),
                name=call.name,
                status="IN_QUEUE",
                created_at=CREATED_AT,
                save_parent_id=call.parent_id,
            )
        finally:
            with self._lock:
                self._active -= 1

    def upload(
        self,
        file: IO[bytes],
        filename: str,
        parent_id: int,
        timeout: float | None = None,
    ) -> Transfer:
        return self._call(RemoteCall("upload", filename, file.read(), parent_id))

    def add_transfer(
        self,
        url: str,
        parent_id: int,
        callback_url: str = "",
        timeout: float | None = None,
    ) -> Transfer:
        return self._call(RemoteCall("add_transfer", url, url, parent_id))
