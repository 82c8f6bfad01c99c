"""
Remind Bot — User Store.

The single in-memory copy of every chat's todos and reminders. The file on
disk is only a snapshot: each mutation is followed by a full save, and a
failed save is logged without undoing the change.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING

from remindbot.data.models import Reminder, UserState
from remindbot.ports.storage_port import StorageError, StorageNotFound

if TYPE_CHECKING:
    from remindbot.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)


class IndexOutOfRange(IndexError):
    """Raised when a 1-based todo position does not exist."""


class UserStore:
    """Chat id → UserState mapping with best-effort snapshot persistence."""

    def __init__(self, storage: StoragePort | None = None) -> None:
        if storage is None:
            from remindbot.data.persistence import JsonFileStorage
            storage = JsonFileStorage()

        self._storage = storage
        self._data: dict[int, UserState] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Loading / saving
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace the in-memory state with the stored snapshot.

        Any storage failure leaves the store empty.
        """
        try:
            data = self._storage.load()
        except StorageNotFound:
            logger.info("No saved user data yet, starting empty")
            data = {}
        except StorageError as exc:
            logger.error("Failed to load user data: %s", exc)
            data = {}

        with self._lock:
            self._data = data
        logger.info("User store loaded: %d chats", len(data))

    def _persist(self) -> None:
        try:
            self._storage.save(self._data)
        except StorageError as exc:
            logger.error("Failed to save user data: %s", exc)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, chat_id: int) -> UserState | None:
        with self._lock:
            return self._data.get(chat_id)

    def get_or_create(self, chat_id: int) -> UserState:
        with self._lock:
            state = self.get(chat_id)
            if state is None:
                state = UserState()
                self._data[chat_id] = state
            return state

    def list_todos(self, chat_id: int) -> list[str]:
        with self._lock:
            state = self.get(chat_id)
            return list(state.todos) if state else []

    def iter_reminders(self) -> list[tuple[int, Reminder]]:
        """Every (chat_id, reminder) pair currently stored."""
        with self._lock:
            return [
                (chat_id, reminder)
                for chat_id, state in self._data.items()
                for reminder in state.reminders
            ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_todo(self, chat_id: int, text: str) -> None:
        with self._lock:
            self.get_or_create(chat_id).todos.append(text)
            self._persist()
        logger.info("Todo added for chat %d", chat_id)

    def complete_todo(self, chat_id: int, index: int) -> str:
        """Remove the todo at 1-based *index* and return its text.

        Later items shift down one position.

        Raises:
            IndexOutOfRange: index < 1, index > count, or no todos.
        """
        with self._lock:
            state = self.get(chat_id)
            count = len(state.todos) if state else 0
            if index < 1 or index > count:
                raise IndexOutOfRange(f"todo #{index} out of range (have {count})")
            removed = state.todos.pop(index - 1)
            self._persist()
        logger.info("Todo #%d completed for chat %d", index, chat_id)
        return removed

    def add_reminder(self, chat_id: int, content: str, fire_at: datetime) -> Reminder:
        reminder = Reminder(content=content, fire_at=fire_at)
        with self._lock:
            self.get_or_create(chat_id).reminders.append(reminder)
            self._persist()
        logger.info("Reminder stored for chat %d at %s", chat_id, fire_at.isoformat())
        return reminder

    def prune_expired(self, now: datetime) -> int:
        """Drop reminders whose fire time is at or before *now*.

        Returns the number removed. Saves only when something changed.
        """
        removed = 0
        with self._lock:
            for state in self._data.values():
                kept = [r for r in state.reminders if r.fire_at > now]
                removed += len(state.reminders) - len(kept)
                state.reminders = kept
            if removed:
                self._persist()
        if removed:
            logger.info("Pruned %d expired reminders", removed)
        return removed
