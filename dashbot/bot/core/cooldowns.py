"""Per-command, per-user cooldown tracking"""

import logging
import time
from collections.abc import Callable

from .errors import CooldownActive

logger = logging.getLogger(__name__)


class CooldownTable:
    """command name -> {user id -> expiry timestamp}

    Expired entries are dropped lazily on the next check and by
    :meth:`sweep`, which the bot runs on a fixed interval.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, dict[int, float]] = {}

    def remaining(self, command: str, user_id: int) -> float:
        """Seconds left on the cooldown, 0.0 when the user may invoke"""
        timestamps = self._entries.get(command)
        if not timestamps or user_id not in timestamps:
            return 0.0

        left = timestamps[user_id] - self._clock()
        if left <= 0:
            del timestamps[user_id]
            if not timestamps:
                del self._entries[command]
            return 0.0
        return left

    def record(self, command: str, user_id: int, seconds: float) -> None:
        if seconds <= 0:
            return
        self._entries.setdefault(command, {})[user_id] = self._clock() + seconds

    def acquire(self, command: str, user_id: int, seconds: float) -> None:
        """Check and record in one step. Raises CooldownActive while cooling down."""
        left = self.remaining(command, user_id)
        if left > 0:
            raise CooldownActive(command, left)
        self.record(command, user_id, seconds)

    def sweep(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        removed = 0
        for command in list(self._entries):
            timestamps = self._entries[command]
            for user_id in [uid for uid, expiry in timestamps.items() if expiry <= now]:
                del timestamps[user_id]
                removed += 1
            if not timestamps:
                del self._entries[command]
        if removed:
            logger.debug(f"Cooldown sweep removed {removed} expired entries")
        return removed

    def __len__(self) -> int:
        return sum(len(timestamps) for timestamps in self._entries.values())
