"""Session cookie validation for protected routes"""

import logging
import time
from dataclasses import dataclass

from dashbot.shared.models import DiscordGuild, DiscordUser

from ..core.errors import AuthError
from .session_store import Clock, SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedIdentity:
    token: str
    user: DiscordUser
    guilds: list[DiscordGuild]

    @property
    def guild_ids(self) -> set[str]:
        return {guild.id for guild in self.guilds}

    def find_guild(self, guild_id: str) -> DiscordGuild | None:
        for guild in self.guilds:
            if guild.id == guild_id:
                return guild
        return None


class AuthGate:
    def __init__(self, store: SessionStore, clock: Clock = time.time):
        self.store = store
        self.clock = clock

    def authenticate(self, token: str | None) -> AuthenticatedIdentity:
        session = self.store.get(token)
        if token is None or session is None:
            raise AuthError(AuthError.UNAUTHENTICATED, "Authentication required")

        if session.is_expired(self.clock()):
            self.store.delete(token)
            logger.info(f"Session expired for {session.user.username}")
            raise AuthError(AuthError.SESSION_EXPIRED, "Session expired", clear_cookie=True)

        return AuthenticatedIdentity(token=token, user=session.user, guilds=session.guilds)
