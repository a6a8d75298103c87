"""Command module discovery"""

import importlib
import logging
import pkgutil
from types import ModuleType

from .errors import RegistryError
from .registry import CommandDescriptor, CommandRegistry

logger = logging.getLogger(__name__)

COMMANDS_PACKAGE = "dashbot.bot.commands"


def iter_command_modules(package: str = COMMANDS_PACKAGE) -> list[str]:
    """Dotted names of every module below the command package"""
    root: ModuleType = importlib.import_module(package)
    return sorted(
        info.name
        for info in pkgutil.walk_packages(root.__path__, prefix=f"{package}.")
        if not info.ispkg
    )


def load_commands(registry: CommandRegistry, package: str = COMMANDS_PACKAGE) -> list[str]:
    """Import the command modules and register their ``command`` descriptor.

    Import failures and name clashes abort startup; running with part of the
    command set is not allowed. Returns the loaded command names.
    """
    loaded: list[str] = []
    failed: list[str] = []

    for module_name in iter_command_modules(package):
        short_name = module_name.rsplit(".", 1)[-1]
        try:
            module = importlib.import_module(module_name)
        except Exception as e:
            logger.exception(f"Failed to import command module {module_name}")
            failed.append(f"{short_name} ({e})")
            continue

        descriptor = getattr(module, "command", None)
        if descriptor is None:
            logger.debug(f"{module_name} has no command descriptor, skipping")
            continue
        if not isinstance(descriptor, CommandDescriptor):
            failed.append(f"{short_name} (command is {type(descriptor).__name__})")
            continue

        registry.register(descriptor)
        loaded.append(descriptor.name)

    if failed:
        logger.error(f"[red]Failed to load commands:[/red] {', '.join(failed)}")
        raise RegistryError(f"Failed to load command modules: {', '.join(failed)}")

    registry.seal()
    logger.info(f"[green]Loaded commands:[/green] {', '.join(loaded) or 'none'}")
    return loaded
