"""
Remind Bot — Command Dispatcher.

Maps one inbound chat message to an operation on the user store or the
reminder scheduler and returns the reply text. Each message is handled on
its own; nothing is remembered between messages except the store itself.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from remindbot.core.duration import InvalidFormat, parse_duration
from remindbot.data.store import IndexOutOfRange

if TYPE_CHECKING:
    from remindbot.core.scheduler import ReminderScheduler
    from remindbot.data.store import UserStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Reply texts
# ---------------------------------------------------------------------------

HELP_TEXT = (
    "Available commands:\n"
    "/remind <time> <message> — remind me after <time> (e.g. 30s, 10m, 2h, 1d, 1w, 1M, 1y)\n"
    "/todo — show your to-do list\n"
    "/set <task> — add a task\n"
    "/done <number> — mark a task as done\n"
    "/help — show this message"
)
REMIND_USAGE = "Usage: /remind <time> <message>"
SET_USAGE = "Usage: /set <task>"
INVALID_TIME = "Invalid time format!"
INVALID_INDEX = "Invalid index."
EMPTY_LIST = "Your to-do list is empty."
UNKNOWN_COMMAND = "Unknown command!"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _split_command(text: str) -> tuple[str, str]:
    """Split "/cmd@botname rest" into ("/cmd", "rest")."""
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    command = parts[0].split("@", 1)[0]
    rest = parts[1] if len(parts) > 1 else ""
    return command, rest


class CommandDispatcher:
    """Routes chat text to the matching command handler."""

    def __init__(
        self,
        store: UserStore,
        scheduler: ReminderScheduler,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._clock = clock

    def dispatch(self, chat_id: int, text: str) -> str:
        """Handle one message and return the reply to send back."""
        command, rest = _split_command(text)

        if command.startswith("/remind"):
            return self.remind(chat_id, rest)
        if command.startswith("/todo"):
            return self.list_todos(chat_id)
        if command.startswith("/set"):
            return self.set_todo(chat_id, rest)
        if command.startswith("/done"):
            return self.mark_done(chat_id, rest)
        if command in ("/start", "/help"):
            return HELP_TEXT

        logger.debug("Unknown command from chat %d: %r", chat_id, command)
        return UNKNOWN_COMMAND

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def remind(self, chat_id: int, args: str) -> str:
        parts = args.split(maxsplit=1)
        if len(parts) < 2:
            return REMIND_USAGE

        time_spec, content = parts
        try:
            delay = parse_duration(time_spec)
        except InvalidFormat as exc:
            logger.info("Bad /remind time from chat %d: %s", chat_id, exc)
            return INVALID_TIME

        now = self._clock()
        reminder = self._store.add_reminder(chat_id, content, now + delay)
        self._scheduler.arm(chat_id, reminder, now=now)
        return f"Reminder set for {time_spec} from now!"

    def list_todos(self, chat_id: int) -> str:
        todos = self._store.list_todos(chat_id)
        if not todos:
            return EMPTY_LIST

        lines = [f"{i}. {task}" for i, task in enumerate(todos, start=1)]
        return "Your to-do list:\n" + "\n".join(lines)

    def set_todo(self, chat_id: int, task: str) -> str:
        task = task.strip()
        if not task:
            return SET_USAGE

        self._store.add_todo(chat_id, task)
        return f"Task '{task}' added!"

    def mark_done(self, chat_id: int, args: str) -> str:
        if not self._store.list_todos(chat_id):
            return EMPTY_LIST

        try:
            index = int(args.strip())
        except ValueError:
            return INVALID_INDEX

        try:
            task = self._store.complete_todo(chat_id, index)
        except IndexOutOfRange:
            return INVALID_INDEX
        return f"Done: {task}"
