"""Shared test fixtures and configuration.

Sets up fake environment variables so remindbot.config doesn't sys.exit(),
and provides common fixtures like a temp snapshot file.
"""

import os

# Patch env vars BEFORE any remindbot imports
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:fake-token-for-tests")
os.environ.setdefault("ALLOWED_USER_IDS", "")
os.environ.setdefault("DATA_PATH", "userdata-test.json")

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

FIXED_NOW = datetime(2026, 1, 15, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def data_path(tmp_path):
    """Return a temporary snapshot path."""
    return str(tmp_path / "userdata.json")


@pytest.fixture
def storage(data_path):
    """Return a JsonFileStorage backed by a temp file."""
    from remindbot.data.persistence import JsonFileStorage
    return JsonFileStorage(path=data_path)


@pytest.fixture
def store(storage):
    """Return a loaded UserStore backed by a temp file."""
    from remindbot.data.store import UserStore
    s = UserStore(storage=storage)
    s.load()
    return s


@pytest.fixture
def job_queue():
    """Stand-in for telegram.ext.JobQueue that records run_once calls."""
    jq = MagicMock()
    jq.run_once = MagicMock(side_effect=lambda *a, **kw: MagicMock(name="job"))
    return jq


@pytest.fixture
def notifier():
    """NotificationPort double."""
    n = MagicMock()
    n.send_message = AsyncMock()
    return n


@pytest.fixture
def scheduler(job_queue, notifier):
    """ReminderScheduler over the recording job queue, clock frozen at FIXED_NOW."""
    from remindbot.core.scheduler import ReminderScheduler
    return ReminderScheduler(job_queue, notifier, clock=lambda: FIXED_NOW)


@pytest.fixture
def fire_job():
    """Return a coroutine function that runs a recorded run_once callback."""

    async def _fire(call) -> None:
        callback = call.args[0]
        context = MagicMock()
        context.job.chat_id = call.kwargs["chat_id"]
        context.job.data = call.kwargs["data"]
        await callback(context)

    return _fire
