"""Command descriptors and the name/alias registry.

Every command module exposes one :class:`CommandDescriptor` as ``command``.
The same descriptor serves slash invocations and prefix invocations; the
dispatcher hands its handler a :class:`~dashbot.bot.core.context.DispatchContext`
either way.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from dashbot.bot.config import BotConfig

from .errors import DuplicateCommand, RegistryError

if TYPE_CHECKING:
    from .context import DispatchContext

logger = logging.getLogger(__name__)

CommandHandler = Callable[["DispatchContext"], Awaitable[Any]]


class OptionType(IntEnum):
    """Discord application command option types"""

    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10


@dataclass(frozen=True)
class CommandOption:
    name: str
    type: OptionType = OptionType.STRING
    description: str = ""
    required: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": int(self.type),
            "description": self.description or self.name,
            "required": self.required,
        }


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    description: str
    handler: CommandHandler
    category: str = "General"
    aliases: frozenset[str] = field(default_factory=frozenset)
    # DEFAULT_COOLDOWN is read when the descriptor is built
    cooldown_seconds: float = field(default_factory=lambda: BotConfig.DEFAULT_COOLDOWN)
    options: tuple[CommandOption, ...] = ()
    interaction_only: bool = False
    usage: str | None = None
    default_member_permissions: int | None = None

    def __post_init__(self) -> None:
        if not self.name or self.name != self.name.lower() or " " in self.name:
            raise RegistryError(f"Invalid command name: {self.name!r}")
        object.__setattr__(self, "aliases", frozenset(a.lower() for a in self.aliases))
        object.__setattr__(self, "options", tuple(self.options))

        # Discord rejects required options declared after optional ones
        seen_optional = False
        for option in self.options:
            if option.required and seen_optional:
                raise RegistryError(
                    f"Command '{self.name}': required option '{option.name}' "
                    f"follows an optional one"
                )
            seen_optional = seen_optional or not option.required

    async def invoke(self, ctx: DispatchContext) -> Any:
        return await self.handler(ctx)

    def option_index(self, name: str) -> int | None:
        """Declared position of an option, used for positional prefix arguments"""
        for index, option in enumerate(self.options):
            if option.name == name:
                return index
        return None

    def get_option(self, name: str) -> CommandOption | None:
        index = self.option_index(name)
        return self.options[index] if index is not None else None

    @property
    def usage_text(self) -> str:
        if self.usage:
            return self.usage
        parts = [f"/{self.name}"]
        for option in self.options:
            parts.append(f"<{option.name}>" if option.required else f"[{option.name}]")
        return " ".join(parts)

    @property
    def names(self) -> frozenset[str]:
        return self.aliases | {self.name}

    def to_payload(self) -> dict[str, Any]:
        """Application command JSON for bulk sync"""
        payload: dict[str, Any] = {
            "name": self.name,
            "type": 1,
            "description": self.description,
            "options": [option.to_payload() for option in self.options],
        }
        if self.default_member_permissions is not None:
            payload["default_member_permissions"] = str(self.default_member_permissions)
        return payload


class CommandRegistry:
    """Name and alias lookup for command descriptors.

    Filled once at startup, then sealed. Names and aliases share a single
    namespace.
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandDescriptor] = {}
        self._lookup: dict[str, CommandDescriptor] = {}
        self._sealed = False

    def register(self, descriptor: CommandDescriptor) -> None:
        if self._sealed:
            raise RegistryError(f"Registry is sealed, cannot register '{descriptor.name}'")

        for key in sorted(descriptor.names):
            existing = self._lookup.get(key)
            if existing is not None:
                raise DuplicateCommand(key, existing.name)

        self._commands[descriptor.name] = descriptor
        for key in descriptor.names:
            self._lookup[key] = descriptor
        logger.debug(f"Registered command: {descriptor.name}")

    def resolve(self, name: str) -> CommandDescriptor | None:
        return self._lookup.get(name.lower())

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def by_category(self) -> dict[str, list[CommandDescriptor]]:
        grouped: dict[str, list[CommandDescriptor]] = {}
        for descriptor in self:
            grouped.setdefault(descriptor.category, []).append(descriptor)
        return grouped

    def payloads(self) -> list[dict[str, Any]]:
        return [descriptor.to_payload() for descriptor in self]

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(sorted(self._commands.values(), key=lambda d: d.name))

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lookup
