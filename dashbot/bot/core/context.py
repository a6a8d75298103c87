"""Unified invocation context for slash and prefix commands.

``DispatchContext.from_interaction`` wraps a slash command interaction and
``DispatchContext.from_message`` wraps a prefix command message, so a single
handler serves both.

The prefix path is lossy compared to interactions:

- ``reply`` answers the message, ``follow_up`` and ``edit_reply`` both post
  a *new* message in the channel. A message cannot be edited the way an
  interaction response can, so command authors must not rely on
  ``edit_reply`` replacing earlier output.
- ``defer`` only shows a typing indicator.
- ``ephemeral`` is ignored; everything is visible to the channel.
- Options are positional. The option declared at index ``i`` takes the
  ``i``-th argument; a trailing string option takes the rest of the line.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import discord

from .registry import CommandDescriptor, OptionType

logger = logging.getLogger(__name__)

TRUTHY_TOKENS = frozenset({"true", "1", "yes", "y"})

USER_MENTION = re.compile(r"^<@!?(\d+)>$")
CHANNEL_MENTION = re.compile(r"^<#(\d+)>$")
ROLE_MENTION = re.compile(r"^<@&(\d+)>$")

# Interaction payloads carry these option types as snowflake strings
_SNOWFLAKE_TYPES = {OptionType.USER, OptionType.CHANNEL, OptionType.ROLE, OptionType.MENTIONABLE}


def parse_integer(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip()) if not isinstance(raw, int | float) else float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_boolean(raw: Any) -> bool | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        return raw
    token = str(raw).strip()
    if not token:
        return None
    return token.lower() in TRUTHY_TOKENS


def parse_snowflake(raw: Any, pattern: re.Pattern[str]) -> int | None:
    """Snowflake from an interaction value (int) or a mention token (str)"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = pattern.match(str(raw).strip())
    return int(match.group(1)) if match else None


def map_positional_args(
    command: CommandDescriptor, args: Sequence[str]
) -> dict[str, str]:
    """Assign prefix arguments to declared options by position"""
    values: dict[str, str] = {}
    last = len(command.options) - 1
    for index, option in enumerate(command.options):
        if index >= len(args):
            break
        if index == last and option.type is OptionType.STRING:
            values[option.name] = " ".join(args[index:])
        else:
            values[option.name] = args[index]
    return values


def _strip_interaction_only(kwargs: dict[str, Any]) -> dict[str, Any]:
    kwargs.pop("ephemeral", None)
    kwargs.pop("thinking", None)
    return kwargs


class InteractionResponder:
    """Replies through the interaction response/followup webhooks"""

    def __init__(self, interaction: discord.Interaction):
        self.interaction = interaction
        self._responded = False

    @property
    def responded(self) -> bool:
        return self._responded or self.interaction.response.is_done()

    async def reply(self, content: str | None = None, **kwargs: Any) -> Any:
        if content is not None:
            kwargs["content"] = content
        if self.responded:
            return await self.follow_up(**kwargs)
        self._responded = True
        return await self.interaction.response.send_message(**kwargs)

    async def follow_up(self, content: str | None = None, **kwargs: Any) -> Any:
        if content is not None:
            kwargs["content"] = content
        self._responded = True
        return await self.interaction.followup.send(**kwargs)

    async def edit_reply(self, content: str | None = None, **kwargs: Any) -> Any:
        if content is not None:
            kwargs["content"] = content
        kwargs.pop("ephemeral", None)
        return await self.interaction.edit_original_response(**kwargs)

    async def defer(self, ephemeral: bool = False) -> None:
        if not self.responded:
            self._responded = True
            await self.interaction.response.defer(ephemeral=ephemeral)


class MessageResponder:
    """Replies by posting in the channel of the invoking message"""

    def __init__(self, message: discord.Message):
        self.message = message
        self._responded = False

    @property
    def responded(self) -> bool:
        return self._responded

    async def reply(self, content: str | None = None, **kwargs: Any) -> discord.Message:
        self._responded = True
        return await self.message.reply(content, **_strip_interaction_only(kwargs))

    async def follow_up(self, content: str | None = None, **kwargs: Any) -> discord.Message:
        self._responded = True
        return await self.message.channel.send(content, **_strip_interaction_only(kwargs))

    async def edit_reply(self, content: str | None = None, **kwargs: Any) -> discord.Message:
        return await self.follow_up(content, **kwargs)

    async def defer(self, ephemeral: bool = False) -> None:
        await self.message.channel.typing()


class DispatchContext:
    """Everything a command handler sees about one invocation"""

    INTERACTION = "interaction"
    MESSAGE = "message"

    def __init__(
        self,
        *,
        command: CommandDescriptor,
        source: str,
        client: discord.Client,
        user: discord.User | discord.Member,
        guild: discord.Guild | None,
        channel: Any,
        options: Mapping[str, Any],
        responder: InteractionResponder | MessageResponder,
        args: Sequence[str] = (),
        created_at: datetime | None = None,
        interaction: discord.Interaction | None = None,
        message: discord.Message | None = None,
    ):
        self.command = command
        self.source = source
        self.client = client
        self.user = user
        self.guild = guild
        self.channel = channel
        self.options = dict(options)
        self.args = tuple(args)
        self.created_at = created_at
        self.interaction = interaction
        self.message = message
        self._responder = responder

    @classmethod
    def from_interaction(
        cls, interaction: discord.Interaction, command: CommandDescriptor
    ) -> DispatchContext:
        data: Mapping[str, Any] = interaction.data or {}
        options: dict[str, Any] = {}
        for raw in data.get("options", []):
            value = raw.get("value")
            if raw.get("type") in _SNOWFLAKE_TYPES and value is not None:
                value = int(value)
            options[raw["name"]] = value

        return cls(
            command=command,
            source=cls.INTERACTION,
            client=interaction.client,
            user=interaction.user,
            guild=interaction.guild,
            channel=interaction.channel,
            options=options,
            responder=InteractionResponder(interaction),
            created_at=interaction.created_at,
            interaction=interaction,
        )

    @classmethod
    def from_message(
        cls,
        message: discord.Message,
        args: Sequence[str],
        command: CommandDescriptor,
        client: discord.Client,
    ) -> DispatchContext:
        return cls(
            command=command,
            source=cls.MESSAGE,
            client=client,
            user=message.author,
            guild=message.guild,
            channel=message.channel,
            options=map_positional_args(command, args),
            responder=MessageResponder(message),
            args=args,
            created_at=message.created_at,
            message=message,
        )

    # ==================== Identity ====================

    @property
    def command_name(self) -> str:
        return self.command.name

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def guild_id(self) -> int | None:
        return self.guild.id if self.guild is not None else None

    @property
    def channel_id(self) -> int | None:
        return getattr(self.channel, "id", None)

    @property
    def member(self) -> discord.Member | None:
        return self.user if isinstance(self.user, discord.Member) else None

    @property
    def is_interaction(self) -> bool:
        return self.source == self.INTERACTION

    # ==================== Responses ====================

    @property
    def responded(self) -> bool:
        return self._responder.responded

    async def reply(self, content: str | None = None, **kwargs: Any) -> Any:
        return await self._responder.reply(content, **kwargs)

    async def follow_up(self, content: str | None = None, **kwargs: Any) -> Any:
        return await self._responder.follow_up(content, **kwargs)

    async def edit_reply(self, content: str | None = None, **kwargs: Any) -> Any:
        """Edit the interaction response; on the prefix path this posts a new message"""
        return await self._responder.edit_reply(content, **kwargs)

    async def defer(self, ephemeral: bool = False) -> None:
        await self._responder.defer(ephemeral=ephemeral)

    # ==================== Options ====================

    def _raw(self, name: str) -> Any:
        if self.command.get_option(name) is None:
            return None
        return self.options.get(name)

    def get_string(self, name: str) -> str | None:
        raw = self._raw(name)
        return str(raw) if raw is not None else None

    def get_integer(self, name: str) -> int | None:
        return parse_integer(self._raw(name))

    def get_number(self, name: str) -> float | None:
        return parse_number(self._raw(name))

    def get_boolean(self, name: str) -> bool | None:
        return parse_boolean(self._raw(name))

    def get_user(self, name: str) -> discord.User | discord.Member | None:
        user_id = parse_snowflake(self._raw(name), USER_MENTION)
        if user_id is None:
            return None
        if self.guild is not None:
            member = self.guild.get_member(user_id)
            if member is not None:
                return member
        return self.client.get_user(user_id)

    def get_member(self, name: str) -> discord.Member | None:
        user_id = parse_snowflake(self._raw(name), USER_MENTION)
        if user_id is None or self.guild is None:
            return None
        return self.guild.get_member(user_id)

    def get_channel(self, name: str) -> Any:
        channel_id = parse_snowflake(self._raw(name), CHANNEL_MENTION)
        if channel_id is None:
            return None
        if self.guild is not None:
            channel = self.guild.get_channel(channel_id)
            if channel is not None:
                return channel
        return self.client.get_channel(channel_id)

    def get_role(self, name: str) -> discord.Role | None:
        role_id = parse_snowflake(self._raw(name), ROLE_MENTION)
        if role_id is None or self.guild is None:
            return None
        return self.guild.get_role(role_id)
