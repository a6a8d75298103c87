"""Discord OAuth2 authorization-code flow.

``begin_login`` issues a state token and builds the authorization URL.
``handle_callback`` validates the callback, exchanges the code, fetches the
profile and guilds and creates the session. Cookies and redirects are the
route's job.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from pydantic import ValidationError

from dashbot.shared.models import DiscordGuild, DiscordUser

from ..core.errors import AuthError, DashboardError, OAuthError
from .discord_api import DiscordAPIClient
from .session_store import AuthSession, Clock, SessionStore, StateStore

logger = logging.getLogger(__name__)


class OAuthStage(str, Enum):
    INIT = "init"
    STATE_ISSUED = "state_issued"
    CODE_RECEIVED = "code_received"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    SESSION_CREATED = "session_created"
    ERROR = "error"


class OAuthFlow:
    def __init__(
        self,
        discord_api: DiscordAPIClient,
        sessions: SessionStore,
        states: StateStore,
        clock: Clock = time.time,
    ):
        self.discord_api = discord_api
        self.sessions = sessions
        self.states = states
        self.clock = clock

    def begin_login(self) -> str:
        state = self.states.issue()
        logger.debug(f"OAuth stage {OAuthStage.STATE_ISSUED.value}")
        return self.discord_api.generate_oauth_url(state)

    async def handle_callback(
        self,
        code: str | None,
        state: str | None,
        error: str | None = None,
    ) -> tuple[str, AuthSession]:
        """Returns (session token, session). Raises AuthError or OAuthError."""
        stage = OAuthStage.STATE_ISSUED
        try:
            if error:
                raise OAuthError(OAuthError.PROVIDER_ERROR, error, stage=stage.value)
            if not code:
                raise OAuthError(OAuthError.MISSING_CODE, stage=stage.value)

            stage = OAuthStage.CODE_RECEIVED
            # Consumed before anything else so a replayed state always fails
            if not self.states.consume(state):
                raise AuthError(AuthError.INVALID_STATE, "Invalid or expired state")

            ok, detail, token_data = await self.discord_api.exchange_code_for_token(code)
            if not ok or token_data is None:
                raise OAuthError(OAuthError.TOKEN_EXCHANGE_FAILED, detail, stage=stage.value)

            stage = OAuthStage.TOKEN_EXCHANGED
            access_token = token_data["access_token"]

            profile = await self.discord_api.get_current_user(access_token)
            if profile is None:
                raise OAuthError(OAuthError.PROFILE_FETCH_FAILED, stage=stage.value)
            user = DiscordUser.model_validate(profile)

            stage = OAuthStage.PROFILE_FETCHED
            guilds = await self._fetch_guilds(access_token)

            now = self.clock()
            session = AuthSession(
                user=user,
                guilds=guilds,
                access_token=access_token,
                refresh_token=token_data.get("refresh_token"),
                expires_at=now + float(token_data.get("expires_in", 0)),
                created_at=now,
            )
            token = self.sessions.create(session)
        except DashboardError as e:
            logger.error(
                f"OAuth callback failed at {stage.value}: {e.code}"
                + (f" ({e.detail})" if e.detail else "")
            )
            raise
        except ValidationError as e:
            logger.error(f"OAuth callback failed at {stage.value}: invalid profile payload: {e}")
            raise OAuthError(OAuthError.PROFILE_FETCH_FAILED, str(e), stage=stage.value) from e
        except Exception as e:
            logger.exception(f"OAuth callback failed at {stage.value}")
            raise OAuthError(OAuthError.SERVER_ERROR, str(e), stage=stage.value) from e

        logger.info(
            f"OAuth stage {OAuthStage.SESSION_CREATED.value}: "
            f"{user.username} ({user.id}) logged in"
        )
        return token, session

    async def _fetch_guilds(self, access_token: str) -> list[DiscordGuild]:
        payload = await self.discord_api.get_current_guilds(access_token)
        if payload is None:
            logger.warning("Guild fetch failed, continuing with an empty guild list")
            return []
        guilds = []
        for raw in payload:
            try:
                guilds.append(DiscordGuild.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed guild entry: {e}")
        return guilds
