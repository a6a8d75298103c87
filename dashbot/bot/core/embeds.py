"""Embed helpers"""

from datetime import datetime, timezone
from typing import Any

import discord

from dashbot.bot.config import BotConfig


def create_embed(
    title: str | None = None,
    description: str | None = None,
    color: int | None = None,
    fields: list[dict[str, Any]] | None = None,
    footer: str | None = None,
    thumbnail: str | None = None,
    image: str | None = None,
) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=description,
        color=color if color is not None else BotConfig.COLORS["default"],
        timestamp=datetime.now(timezone.utc),
    )
    for field in fields or []:
        embed.add_field(
            name=field["name"], value=field["value"], inline=field.get("inline", False)
        )
    if footer:
        embed.set_footer(text=footer)
    if thumbnail:
        embed.set_thumbnail(url=thumbnail)
    if image:
        embed.set_image(url=image)
    return embed


def error_embed(message: str) -> discord.Embed:
    return create_embed(
        title=f"{BotConfig.EMOJIS['error']} Error",
        description=message,
        color=BotConfig.COLORS["error"],
    )


def success_embed(message: str) -> discord.Embed:
    return create_embed(
        title=f"{BotConfig.EMOJIS['success']} Success",
        description=message,
        color=BotConfig.COLORS["success"],
    )
