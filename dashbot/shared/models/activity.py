"""Data model for the activity_logs table."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class ActivityType(StrEnum):
    COMMAND = "command"
    MODERATION = "moderation"
    CONNECTION = "connection"
    SYSTEM = "system"


@dataclass
class ActivityLog:
    """A single activity log row."""

    id: int
    type: str
    message: str
    guild_id: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Any) -> ActivityLog:
        return cls(
            id=record["id"],
            type=record["type"],
            message=record["message"],
            guild_id=record["guild_id"],
            user_id=record["user_id"],
            created_at=record["created_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.created_at is not None:
            data["created_at"] = self.created_at.isoformat()
        return data
