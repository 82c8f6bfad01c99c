"""
Remind Bot — Reminder Scheduler.

Each reminder becomes one independent one-shot job on python-telegram-bot's
JobQueue. There is no central ticking loop: a job sleeps until the reminder's
fire time, sends the text back to the chat and is gone.

Reminders whose time has already passed when they are armed are dropped,
including on restart. This keeps a restart after a long outage from
flooding chats with stale reminders.

This module is provider-agnostic for delivery: it depends on the
NotificationPort protocol, not on telegram.Bot.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from telegram.ext import CallbackContext, Job, JobQueue

    from remindbot.data.models import Reminder
    from remindbot.data.store import UserStore
    from remindbot.ports.notification_port import NotificationPort

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_reminder(content: str) -> str:
    return f"Reminder: {content}"


class ReminderScheduler:
    """Arms one-shot delivery jobs for reminders."""

    def __init__(
        self,
        job_queue: JobQueue,
        notifier: NotificationPort,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._job_queue = job_queue
        self._notifier = notifier
        self._clock = clock

    def arm(self, chat_id: int, reminder: Reminder, now: datetime | None = None) -> Job | None:
        """Schedule delivery of *reminder* to *chat_id* at its fire time.

        Returns the job handle, or None when the fire time is not in the
        future (nothing is scheduled in that case).
        """
        if now is None:
            now = self._clock()

        delay = reminder.fire_at - now
        if delay.total_seconds() <= 0:
            logger.info(
                "Skipping past-due reminder for chat %d (was due %s)",
                chat_id, reminder.fire_at.isoformat(),
            )
            return None

        job = self._job_queue.run_once(
            self._deliver,
            when=delay,
            chat_id=chat_id,
            data=reminder.content,
            name=f"reminder:{chat_id}:{reminder.fire_at.isoformat()}",
        )
        logger.info(
            "Reminder armed for chat %d in %.0fs", chat_id, delay.total_seconds(),
        )
        return job

    def rearm(self, store: UserStore, now: datetime | None = None) -> int:
        """Arm every stored reminder, then prune the past-due ones.

        Called once at startup, after the store loads and before polling.
        Returns the number of jobs scheduled.
        """
        if now is None:
            now = self._clock()

        armed = 0
        for chat_id, reminder in store.iter_reminders():
            if self.arm(chat_id, reminder, now=now) is not None:
                armed += 1

        store.prune_expired(now)
        logger.info("Re-armed %d reminders from saved data", armed)
        return armed

    async def _deliver(self, context: CallbackContext) -> None:
        """Job callback: send the reminder text. Failures are not retried."""
        job = context.job
        try:
            await self._notifier.send_message(job.chat_id, format_reminder(job.data))
            logger.info("Reminder delivered to chat %d", job.chat_id)
        except Exception as exc:
            logger.error("Failed to deliver reminder to chat %d: %s", job.chat_id, exc)
