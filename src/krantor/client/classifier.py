"""File kind detection based on file name suffix."""

from __future__ import annotations

from pathlib import Path

from krantor.core.errors import UnrecognizedFileKind
from krantor.core.types import FileKind

# Checked in order, case-sensitive
SUFFIXES: tuple[tuple[str, FileKind], ...] = (
    (".magnet", FileKind.MAGNET),
    (".torrent", FileKind.TORRENT),
)


def classify(name: str | Path) -> FileKind:
    """Classify a file name as a torrent descriptor or a magnet link.

    Args:
        name: File name or path. The file does not need to exist.

    Returns:
        The detected file kind.

    Raises:
        UnrecognizedFileKind: If the name has no known suffix.
    """
    name = str(name)
    for suffix, kind in SUFFIXES:
        if name.endswith(suffix):
            return kind
    raise UnrecognizedFileKind(name)


def is_recognized(name: str | Path) -> bool:
    """Check whether a file name would be accepted by classify()."""
    try:
        classify(name)
    except UnrecognizedFileKind:
        return False
    return True
