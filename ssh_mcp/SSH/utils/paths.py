"""Path and file-attribute helpers shared by the transfer and listing tools."""

from __future__ import annotations

import os
from datetime import datetime, timezone

DIRECTORY_MODE_MASK = 0x4000


def expand_home(path: str) -> str:
    """Expand a leading `~` to the caller's home directory.

    Only the leading tilde is touched; the rest of the path is returned as-is.
    """
    if path.startswith("~"):
        return os.path.expanduser("~") + path[1:]
    return path


def is_directory_mode(mode: int | None) -> bool:
    """Return True when the directory bit is set in a stat mode value."""
    if mode is None:
        return False
    return (mode & DIRECTORY_MODE_MASK) == DIRECTORY_MODE_MASK


def iso_timestamp(epoch_seconds: float | None) -> str:
    """Render seconds since the epoch as an ISO-8601 UTC string.

    Millisecond precision with a `Z` suffix, e.g. `2024-01-02T03:04:05.000Z`.
    """
    moment = datetime.fromtimestamp(epoch_seconds or 0, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
