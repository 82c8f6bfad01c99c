"""Telegram notification adapter — implements NotificationPort.

Wraps a telegram.Bot instance to satisfy the NotificationPort protocol.
"""

from __future__ import annotations

import logging

from telegram import Bot

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than 4096 characters
_MAX_MESSAGE_LEN = 4000


class TelegramNotifier:
    """Telegram implementation of NotificationPort."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send_message(self, user_id: int, text: str) -> None:
        for i in range(0, len(text) or 1, _MAX_MESSAGE_LEN):
            await self._bot.send_message(chat_id=user_id, text=text[i : i + _MAX_MESSAGE_LEN])
        logger.debug("Sent %d chars to chat %d", len(text), user_id)
