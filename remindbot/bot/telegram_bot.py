"""
Remind Bot — Telegram Bot.

Telegram is the only user interface. Every text message, commands
included, goes through the CommandDispatcher and its reply is sent back
to the same chat. Reminders are delivered by JobQueue jobs.

When ALLOWED_USER_IDS is set, messages from other users are silently ignored.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from telegram import Update
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from remindbot.config import settings

if TYPE_CHECKING:
    from remindbot.core.dispatcher import CommandDispatcher
    from remindbot.data.store import UserStore
    from remindbot.ports.notification_port import NotificationPort

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Security: silent-ignore decorator
# ---------------------------------------------------------------------------


def authorized_only(
    func: Callable[..., Coroutine[Any, Any, None]],
) -> Callable[..., Coroutine[Any, Any, None]]:
    """Decorator that silently ignores messages from unauthorized users.

    An empty ALLOWED_USER_IDS list lets everyone through.
    """

    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not settings.ALLOWED_USER_IDS:
            return await func(update, context)
        user = update.effective_user
        if user is None or user.id not in settings.ALLOWED_USER_IDS:
            uid = user.id if user else "unknown"
            logger.warning("Unauthorized access attempt from user_id=%s", uid)
            return  # Silent ignore
        return await func(update, context)

    return wrapper


# ---------------------------------------------------------------------------
# Message handler
# ---------------------------------------------------------------------------


@authorized_only
async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route a text message through the dispatcher and reply."""
    message = update.effective_message
    if message is None or not message.text:
        return

    dispatcher: CommandDispatcher = context.bot_data["dispatcher"]
    notifier: NotificationPort = context.bot_data["notifier"]
    chat_id = update.effective_chat.id

    try:
        reply = dispatcher.dispatch(chat_id, message.text)
    except Exception as exc:
        logger.error("Dispatch error for chat %d: %s", chat_id, exc)
        await notifier.send_message(chat_id, "Sorry, something went wrong. Please try again.")
        return

    # The notifier splits replies longer than the Telegram message limit
    await notifier.send_message(chat_id, reply)


# ---------------------------------------------------------------------------
# App builder
# ---------------------------------------------------------------------------


def build_app(
    store: UserStore | None = None,
    notifier: NotificationPort | None = None,
) -> Application:
    """Build the Telegram Application, load saved data and re-arm reminders.

    Args:
        store: User store. Defaults to a UserStore over the JSON snapshot at
               DATA_PATH.
        notifier: Notification port implementation. Defaults to TelegramNotifier
                  (created from the bot instance after app is built).
    """
    from remindbot.core.dispatcher import CommandDispatcher
    from remindbot.core.scheduler import ReminderScheduler

    app = ApplicationBuilder().token(settings.TELEGRAM_BOT_TOKEN).build()

    if app.job_queue is None:
        raise RuntimeError(
            "JobQueue unavailable: install python-telegram-bot[job-queue]"
        )

    if store is None:
        from remindbot.data.store import UserStore
        store = UserStore()

    if notifier is None:
        from remindbot.adapters.telegram_notifier import TelegramNotifier
        notifier = TelegramNotifier(app.bot)

    # Saved reminders are re-armed before polling starts
    store.load()
    scheduler = ReminderScheduler(app.job_queue, notifier)
    scheduler.rearm(store)

    dispatcher = CommandDispatcher(store, scheduler)

    # Store collaborators in bot_data for handler access
    app.bot_data["dispatcher"] = dispatcher
    app.bot_data["notifier"] = notifier

    app.add_handler(MessageHandler(filters.UpdateType.MESSAGE & filters.TEXT, handle_text))

    logger.info("Telegram bot application built with %d handlers", len(app.handlers[0]))
    return app


def main() -> None:
    """Entry point: build the app and start polling."""
    logger.info("Starting Remind Bot...")
    app = build_app()
    app.run_polling()

