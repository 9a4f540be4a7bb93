"""Startup sweep of files already present in the watch folder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from krantor.client.classifier import is_recognized
from krantor.core.errors import DirectoryAccessError

if TYPE_CHECKING:
    from krantor.client.intake import Intake, IntakeOutcome

logger = logging.getLogger(__name__)


def list_candidates(folder: Path) -> list[Path]:
    """List recognized files directly inside a folder, sorted by name.

    Subdirectories and unrecognized names are skipped silently.

    Raises:
        DirectoryAccessError: If the folder cannot be listed.
    """
    try:
        entries = sorted(folder.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DirectoryAccessError(
            f"Couldn't read directory {folder}: {e}", path=folder, cause=e
        ) from e

    return [entry for entry in entries if not entry.is_dir() and is_recognized(entry.name)]


def sweep(intake: Intake, folder: Path | None = None) -> list[IntakeOutcome]:
    """Process every recognized file already in the watch folder.

    Files are processed one at a time, without the warm-up wait.

    Args:
        intake: Intake used for each file.
        folder: Folder to sweep. Defaults to the configured watch folder.

    Returns:
        Outcome for each processed file.
    """
    folder = folder or intake.config.watch_folder
    candidates = list_candidates(folder)
    if candidates:
        logger.info(f"Startup sweep: {len(candidates)} file(s) in {folder}")

    return [intake.process(path, wait=False) for path in candidates]
