"""Discord API client service"""

import logging
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)


class DiscordAPIClient:
    """Client for the Discord OAuth2 authorization-code flow"""

    OAUTH_SCOPES = [
        "identify",
        "email",
        "guilds",
    ]

    DISCORD_API_URL = "https://discord.com/api/v10"
    DISCORD_OAUTH_URL = "https://discord.com/api/oauth2"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

        # Shared HTTP client, reuses TCP connections across requests
        self._http = httpx.AsyncClient(timeout=10.0, transport=transport)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def generate_oauth_url(self, state: str) -> str:
        """Generate Discord OAuth authorization URL"""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(self.OAUTH_SCOPES),
                "state": state,
            }
        )
        return f"https://discord.com/oauth2/authorize?{query}"

    async def exchange_code_for_token(
        self, code: str
    ) -> tuple[bool, str | None, dict | None]:
        """
        Exchange OAuth code for access token

        Returns:
            Tuple of (success, error_detail, token_data)
            token_data contains: access_token, refresh_token, expires_in
        """
        try:
            token_response = await self._http.post(
                f"{self.DISCORD_OAUTH_URL}/token",
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                auth=(self.client_id, self.client_secret),
            )
        except httpx.TimeoutException:
            logger.error("Timeout while exchanging code for token")
            return False, "timeout", None
        except httpx.HTTPError as e:
            logger.error(f"HTTP error exchanging code: {type(e).__name__}: {e}")
            return False, str(e), None

        if not token_response.is_success:
            logger.error(f"Failed to exchange code: {token_response.status_code}")
            return False, token_response.text, None

        try:
            token_data = token_response.json()
        except ValueError:
            logger.error("Token response is not JSON")
            return False, "invalid_token_response", None

        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            logger.error("No access_token in response")
            return False, "no_access_token", None

        return True, None, token_data

    async def get_current_user(self, access_token: str) -> dict | None:
        """GET /users/@me for the token owner"""
        try:
            response = await self._http.get(
                f"{self.DISCORD_API_URL}/users/@me",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error getting user info: {type(e).__name__}: {e}")
            return None

        if not response.is_success:
            logger.error(f"Failed to get user info: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"User info response is not JSON: {e}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Unexpected user info payload: {type(data).__name__}")
            return None
        return data

    async def get_current_guilds(self, access_token: str) -> list[dict] | None:
        """GET /users/@me/guilds, None on failure"""
        try:
            response = await self._http.get(
                f"{self.DISCORD_API_URL}/users/@me/guilds",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Error getting user guilds: {type(e).__name__}: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Failed to get user guilds: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"User guilds response is not JSON: {e}")
            return None
        if not isinstance(data, list):
            logger.warning(f"Unexpected user guilds payload: {type(data).__name__}")
            return None
        return data
