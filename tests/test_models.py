"""Tests for remindbot.data.models — Reminder and UserState dataclasses."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from remindbot.data.models import Reminder, UserState


def test_user_state_defaults():
    state = UserState()
    assert state.todos == []
    assert state.reminders == []


def test_user_state_instances_do_not_share_lists():
    a, b = UserState(), UserState()
    a.todos.append("x")
    assert b.todos == []


def test_reminder_is_immutable():
    r = Reminder(content="ping", fire_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
    with pytest.raises(FrozenInstanceError):
        r.content = "pong"


def test_reminder_dict_uses_time_key():
    r = Reminder(content="ping", fire_at=datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc))
    assert r.to_dict() == {"content": "ping", "time": "2026-01-01T12:30:00+00:00"}


def test_reminder_naive_time_read_as_utc():
    r = Reminder.from_dict({"content": "ping", "time": "2026-01-01T12:30:00"})
    assert r.fire_at == datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc)


def test_reminder_keeps_offset():
    r = Reminder.from_dict({"content": "ping", "time": "2026-01-01T14:30:00+02:00"})
    assert r.fire_at == datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc)


def test_user_state_from_dict_tolerates_nulls():
    state = UserState.from_dict({"todos": None, "reminders": None})
    assert state == UserState()


def test_user_state_from_dict_missing_keys():
    assert UserState.from_dict({}) == UserState()
