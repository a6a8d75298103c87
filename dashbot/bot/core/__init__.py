from .context import DispatchContext
from .cooldowns import CooldownTable
from .dispatcher import DispatchRouter, parse_invocation
from .errors import CooldownActive, DispatchError, DuplicateCommand, RegistryError
from .loader import load_commands
from .registry import CommandDescriptor, CommandOption, CommandRegistry, OptionType

__all__ = [
    "CommandDescriptor",
    "CommandOption",
    "CommandRegistry",
    "CooldownActive",
    "CooldownTable",
    "DispatchContext",
    "DispatchError",
    "DispatchRouter",
    "DuplicateCommand",
    "OptionType",
    "RegistryError",
    "load_commands",
    "parse_invocation",
]
