"""Live bot state for the dashboard"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

import psutil

from .auth_gate import AuthenticatedIdentity

logger = logging.getLogger(__name__)


def format_uptime(seconds: float) -> str:
    """``1d 2h 5m``; days and hours are omitted when zero"""
    seconds = max(int(seconds), 0)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return " ".join(parts)


def process_memory_mb() -> int:
    try:
        return round(psutil.Process().memory_info().rss / 1024 / 1024)
    except psutil.Error:
        return 0


def _member_count(guild: Any) -> int:
    return guild.member_count or 0


def shared_guilds(bot: Any, identity: AuthenticatedIdentity) -> list[Any]:
    """Bot guilds the caller is also a member of"""
    ids = identity.guild_ids
    return [guild for guild in bot.guilds if str(guild.id) in ids]


def build_stats(bot: Any, identity: AuthenticatedIdentity, now: float | None = None) -> dict:
    now = time.time() if now is None else now
    uptime = now - bot.start_time
    accessible = shared_guilds(bot, identity)

    return {
        "guilds": len(accessible),
        "users": sum(_member_count(g) for g in accessible),
        "commands": len(bot.registry),
        "uptime": format_uptime(uptime),
        "ping": round(bot.latency * 1000),
        "memory": process_memory_mb(),
        "lastRestart": datetime.fromtimestamp(bot.start_time, timezone.utc).isoformat(),
        "totalGuilds": len(bot.guilds),
        "totalUsers": sum(_member_count(g) for g in bot.guilds),
    }


def build_guilds(bot: Any, identity: AuthenticatedIdentity) -> list[dict]:
    result = []
    for guild in shared_guilds(bot, identity):
        membership = identity.find_guild(str(guild.id))
        result.append(
            {
                "id": str(guild.id),
                "name": guild.name,
                "memberCount": _member_count(guild),
                "icon": guild.icon.url if guild.icon else None,
                "owner": str(guild.owner_id) if guild.owner_id else None,
                "userPermissions": str(membership.permissions) if membership else "0",
                "userIsAdmin": membership.is_admin if membership else False,
                "userCanManage": membership.can_manage if membership else False,
            }
        )
    return result


def build_commands(bot: Any) -> list[dict]:
    return [
        {
            "name": descriptor.name,
            "description": descriptor.description,
            "category": descriptor.category,
            "usage": descriptor.usage_text,
            "aliases": sorted(descriptor.aliases),
            "cooldown": descriptor.cooldown_seconds,
            "interactionOnly": descriptor.interaction_only,
        }
        for descriptor in bot.registry
    ]
