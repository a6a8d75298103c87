"""In-memory dashboard sessions and OAuth state tokens.

Nothing here is persisted: a process restart logs every dashboard user out.
Both stores are only touched from the event loop, so no locking.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from cachetools import TTLCache  # type: ignore[import-untyped]

from dashbot.shared.models import DiscordGuild, DiscordUser

logger = logging.getLogger(__name__)

SESSION_MAX_AGE = 7 * 24 * 60 * 60
STATE_TTL = 10 * 60
STATE_MAXSIZE = 10_000

Clock = Callable[[], float]


def new_token() -> str:
    """256-bit URL-safe random token"""
    return secrets.token_urlsafe(32)


@dataclass
class AuthSession:
    user: DiscordUser
    access_token: str
    expires_at: float
    created_at: float
    refresh_token: str | None = None
    guilds: list[DiscordGuild] = field(default_factory=list)

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at

    def is_stale(self, now: float, max_age: float = SESSION_MAX_AGE) -> bool:
        return self.is_expired(now) or now - self.created_at > max_age


class SessionStore:
    """session token -> AuthSession"""

    def __init__(self, max_age: float = SESSION_MAX_AGE, clock: Clock = time.time):
        self.max_age = max_age
        self.clock = clock
        self._sessions: dict[str, AuthSession] = {}

    def create(self, session: AuthSession) -> str:
        token = new_token()
        while token in self._sessions:
            token = new_token()
        self._sessions[token] = session
        return token

    def get(self, token: str | None) -> AuthSession | None:
        if not token:
            return None
        return self._sessions.get(token)

    def delete(self, token: str | None) -> bool:
        if not token:
            return False
        return self._sessions.pop(token, None) is not None

    def sweep(self, now: float | None = None) -> int:
        """Remove expired sessions and sessions older than ``max_age``"""
        now = self.clock() if now is None else now
        stale = [t for t, s in self._sessions.items() if s.is_stale(now, self.max_age)]
        for token in stale:
            del self._sessions[token]
        if stale:
            logger.info(f"Session sweep removed {len(stale)} sessions")
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        return token in self._sessions


class StateStore:
    """One-time OAuth state tokens.

    Unconsumed states expire after ``ttl`` seconds so abandoned logins
    don't accumulate.
    """

    def __init__(self, ttl: float = STATE_TTL, clock: Clock = time.time, maxsize: int = STATE_MAXSIZE):
        self.clock = clock
        self._states: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=clock)

    def issue(self) -> str:
        token = new_token()
        while token in self._states:
            token = new_token()
        self._states[token] = self.clock()
        return token

    def consume(self, token: str | None) -> bool:
        """Delete the state. True only for the first consume of a live token."""
        if not token:
            return False
        return self._states.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._states)
