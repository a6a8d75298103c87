"""Command registry and dispatch errors"""


class RegistryError(Exception):
    """Command registry could not be built. Fatal at startup."""


class DuplicateCommand(RegistryError):
    code = "duplicate_command"

    def __init__(self, name: str, owner: str):
        self.name = name
        self.owner = owner
        super().__init__(f"'{name}' is already registered by command '{owner}'")


class DispatchError(Exception):
    """Raised inside the router; never escapes to discord.py."""

    UNKNOWN_COMMAND = "unknown_command"
    COOLDOWN_ACTIVE = "cooldown_active"
    EXECUTION_FAILED = "execution_failed"

    def __init__(self, code: str, command: str | None = None, message: str | None = None):
        self.code = code
        self.command = command
        super().__init__(message or f"{code}: {command}")


class CooldownActive(DispatchError):
    def __init__(self, command: str, remaining: float):
        self.remaining = remaining
        super().__init__(
            self.COOLDOWN_ACTIVE,
            command,
            f"Please wait {remaining:.1f} more seconds before reusing the `{command}` command.",
        )
