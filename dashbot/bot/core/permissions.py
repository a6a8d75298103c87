"""Permission helpers for prefix invocations

Slash commands are gated by Discord through ``default_member_permissions``;
prefix invocations bypass that, so command bodies check here as well.
"""

import discord

from dashbot.bot.config import BotConfig


def is_owner(user_id: int) -> bool:
    return user_id in BotConfig.OWNER_IDS


def is_admin(member: discord.Member) -> bool:
    return member.guild_permissions.administrator or is_owner(member.id)


def is_moderator(member: discord.Member) -> bool:
    perms = member.guild_permissions
    return (
        perms.kick_members
        or perms.ban_members
        or perms.manage_messages
        or perms.manage_roles
        or is_admin(member)
    )


def has_permission(member: discord.Member | None, permission: str) -> bool:
    if member is None:
        return False
    return bool(getattr(member.guild_permissions, permission, False)) or is_admin(member)
