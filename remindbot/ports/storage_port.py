"""Storage port — abstract interface for snapshot persistence.

The user store depends on this protocol, never on a specific file format.
"""

from __future__ import annotations

from typing import Protocol

from remindbot.data.models import UserState


class StorageError(Exception):
    """Raised when a snapshot cannot be read or written."""


class StorageNotFound(StorageError):
    """Raised when there is no snapshot to load yet."""


class StorageParseError(StorageError):
    """Raised when a snapshot exists but cannot be decoded."""


class StoragePort(Protocol):
    """Abstract snapshot interface used by the user store."""

    def load(self) -> dict[int, UserState]: ...

    def save(self, data: dict[int, UserState]) -> None: ...
