"""
Remind Bot — Data Models.

Per-chat state: an ordered to-do list and the reminders created in that chat.
The whole mapping is snapshotted to disk after every change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Reminder:
    """A one-shot text reminder. Never edited once created."""

    content: str
    fire_at: datetime  # timezone-aware, UTC

    def to_dict(self) -> dict:
        return {"content": self.content, "time": self.fire_at.isoformat()}

    @classmethod
    def from_dict(cls, data: dict) -> Reminder:
        fire_at = datetime.fromisoformat(data["time"])
        if fire_at.tzinfo is None:
            fire_at = fire_at.replace(tzinfo=timezone.utc)
        return cls(content=data["content"], fire_at=fire_at)


@dataclass
class UserState:
    """Everything the bot remembers about one chat."""

    todos: list[str] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "todos": list(self.todos),
            "reminders": [r.to_dict() for r in self.reminders],
        }

    @classmethod
    def from_dict(cls, data: dict) -> UserState:
        return cls(
            todos=[str(t) for t in data.get("todos") or []],
            reminders=[Reminder.from_dict(r) for r in data.get("reminders") or []],
        )
