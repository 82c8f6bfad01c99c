"""
Remind Bot — JSON snapshot storage.

The whole chat mapping is written as one JSON document, keyed by chat id.
Writes go to a temp file in the same directory and are swapped in with
os.replace, so a crash mid-write never truncates the previous snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from remindbot.data.models import UserState
from remindbot.ports.storage_port import StorageError, StorageNotFound, StorageParseError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """File-backed implementation of StoragePort."""

    def __init__(self, path: str | None = None) -> None:
        if path is None:
            from remindbot.config import settings
            path = settings.DATA_PATH

        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[int, UserState]:
        """Read the snapshot.

        Raises:
            StorageNotFound: the file does not exist yet.
            StorageParseError: the file is not a valid snapshot.
            StorageError: any other I/O failure.
        """
        try:
            with open(self._path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError as exc:
            raise StorageNotFound(f"No snapshot at {self._path}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StorageParseError(f"Corrupt snapshot at {self._path}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StorageParseError(f"Snapshot at {self._path} is not a JSON object")

        try:
            data = {int(chat_id): UserState.from_dict(state) for chat_id, state in raw.items()}
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StorageParseError(f"Malformed snapshot at {self._path}: {exc}") from exc

        logger.debug("Loaded %d chats from %s", len(data), self._path)
        return data

    def save(self, data: dict[int, UserState]) -> None:
        """Overwrite the snapshot with the full mapping.

        Raises:
            StorageError: the file could not be written.
        """
        payload = {str(chat_id): state.to_dict() for chat_id, state in data.items()}
        directory = self._path.parent
        tmp_name: str | None = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self._path}: {exc}") from exc

        logger.debug("Saved %d chats to %s", len(data), self._path)
