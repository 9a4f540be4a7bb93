"""Fire-and-forget dispatch of live file events.

Each event runs the intake in its own daemon thread. The caller never
waits for a dispatched intake to finish.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from krantor.client.intake import Intake, IntakeOutcome

logger = logging.getLogger(__name__)

# Recent outcomes kept for inspection
MAX_OUTCOMES = 1000


class Dispatcher:
    """Spawns one intake thread per file event.

    Usage:
        dispatcher = Dispatcher(intake)
        dispatcher.submit(path)  # returns immediately
    """

    def __init__(self, intake: Intake, max_concurrent: int | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            intake: Intake run for every dispatched path.
            max_concurrent: Optional limit on intakes running at once.
                Extra threads wait for a slot. Unbounded when None.
        """
        self._intake = intake
        self._slots = (
            threading.BoundedSemaphore(max_concurrent) if max_concurrent else None
        )
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._in_flight: set[str] = set()
        self._outcomes: deque[IntakeOutcome] = deque(maxlen=MAX_OUTCOMES)

    @property
    def in_flight(self) -> int:
        """Number of intakes not finished yet."""
        with self._lock:
            return len(self._in_flight)

    @property
    def outcomes(self) -> list[IntakeOutcome]:
        """Most recent outcomes of finished intakes, in completion order."""
        with self._lock:
            return list(self._outcomes)

    def submit(self, path: Path | str) -> bool:
        """Dispatch a path to a new intake thread.

        Returns:
            False if the same path is still being processed.
        """
        path = Path(path)
        key = str(path)
        with self._lock:
            if key in self._in_flight:
                logger.debug(f"Already processing {key}, skipping event")
                return False
            self._in_flight.add(key)

        thread = threading.Thread(
            target=self._run,
            args=(path, key),
            name=f"intake-{path.name}",
            daemon=True,
        )
        thread.start()
        return True

    def _run(self, path: Path, key: str) -> None:
        outcome = None
        try:
            if self._slots is not None:
                with self._slots:
                    outcome = self._intake.process(path, wait=True)
            else:
                outcome = self._intake.process(path, wait=True)
        except Exception:
            logger.exception(f"Unexpected error while processing {path}")
        finally:
            with self._idle:
                self._in_flight.discard(key)
                if outcome is not None:
                    self._outcomes.append(outcome)
                self._idle.notify_all()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Wait until no intake is running.

        Returns:
            True if idle, False on timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle:
            while self._in_flight:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._idle.wait(remaining)
        return True
