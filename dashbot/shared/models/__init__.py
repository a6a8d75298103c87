"""Shared data models for the bot and the dashboard API."""

from .activity import ActivityLog, ActivityType
from .discord import DiscordGuild, DiscordUser

__all__ = [
    "ActivityLog",
    "ActivityType",
    "DiscordGuild",
    "DiscordUser",
]
