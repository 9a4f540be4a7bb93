"""Shared types for krantor.

This module defines types used by the classifier, the intake core and the
HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class FileKind(str, Enum):
    """Kind of a file dropped into the watch folder."""

    TORRENT = "torrent"
    MAGNET = "magnet"


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    # put.io returns naive ISO timestamps, sometimes with a trailing Z
    return datetime.fromisoformat(value.rstrip("Z"))


@dataclass
class Transfer:
    """Transfer job as reported by the remote service."""

    id: int | None
    name: str
    status: str
    created_at: datetime | None
    save_parent_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transfer:
        """Create from API response dictionary."""
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            status=data.get("status") or "",
            created_at=_parse_timestamp(data.get("created_at")),
            save_parent_id=data.get("save_parent_id"),
        )
