"""
dashbot - Test Fixtures
=======================

Shared fixtures for all tests.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import discord
import httpx
import pytest

os.environ.setdefault("CLIENT_ID", "test-client-id")
os.environ.setdefault("CLIENT_SECRET", "test-client-secret")

from dashbot.api.core.config import Settings  # noqa: E402
from dashbot.bot.core import (  # noqa: E402
    CommandDescriptor,
    CommandOption,
    CommandRegistry,
    CooldownTable,
    DispatchRouter,
    OptionType,
)


class FakeClock:
    """Manually advanced clock for cooldown and session expiry tests."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Discord API payloads
# =============================================================================

USER_PAYLOAD = {
    "id": "80351110224678912",
    "username": "nelly",
    "discriminator": "0",
    "avatar": None,
    "email": "nelly@example.com",
    "global_name": "Nelly",
}

GUILDS_PAYLOAD = [
    {"id": "111", "name": "Alpha", "icon": None, "owner": True, "permissions": "2147483647"},
    {"id": "222", "name": "Beta", "icon": None, "owner": False, "permissions": "32"},
    {"id": "333", "name": "Gamma", "icon": None, "owner": False, "permissions": "0"},
]

TOKEN_PAYLOAD = {
    "access_token": "access-123",
    "refresh_token": "refresh-456",
    "expires_in": 604800,
    "token_type": "Bearer",
}


def make_discord_handler(
    token_status: int = 200,
    user_status: int = 200,
    guilds_status: int = 200,
    calls: list | None = None,
):
    """httpx.MockTransport handler emulating the Discord OAuth endpoints."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append((request.method, request.url.path))
        path = request.url.path
        if path.endswith("/oauth2/token"):
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json=TOKEN_PAYLOAD)
        if path.endswith("/users/@me/guilds"):
            if guilds_status != 200:
                return httpx.Response(guilds_status, json={"message": "boom"})
            return httpx.Response(200, json=GUILDS_PAYLOAD)
        if path.endswith("/users/@me"):
            if user_status != 200:
                return httpx.Response(user_status, json={"message": "401: Unauthorized"})
            return httpx.Response(200, json=USER_PAYLOAD)
        return httpx.Response(404)

    return handler


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        dashboard_url="http://dashboard.test",
        _env_file=None,
    )


@pytest.fixture
def handler_calls():
    return []


@pytest.fixture
def echo_command():
    """Command with one integer and a trailing string option."""
    handler = AsyncMock()
    return CommandDescriptor(
        name="echo",
        description="Echo back",
        aliases=frozenset({"say"}),
        options=(
            CommandOption("count", OptionType.INTEGER, "How many"),
            CommandOption("text", OptionType.STRING, "What"),
        ),
        handler=handler,
    )


@pytest.fixture
def registry(echo_command):
    registry = CommandRegistry()
    registry.register(echo_command)
    return registry


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.latency = 0.05
    client.get_user = MagicMock(return_value=None)
    client.get_channel = MagicMock(return_value=None)
    return client


@pytest.fixture
def router(mock_client, registry, clock):
    return DispatchRouter(mock_client, registry, CooldownTable(clock=clock), prefix="!")


@pytest.fixture
def mock_guild():
    guild = MagicMock()
    guild.id = 111
    guild.name = "Alpha"
    guild.get_member = MagicMock(return_value=None)
    guild.get_channel = MagicMock(return_value=None)
    guild.get_role = MagicMock(return_value=None)
    return guild


@pytest.fixture
def mock_user():
    user = MagicMock()
    user.id = 42
    user.bot = False
    user.__str__ = MagicMock(return_value="tester")
    return user


@pytest.fixture
def mock_message(mock_user, mock_guild):
    """Prefix invocation message; set ``content`` per test."""
    message = MagicMock(spec=discord.Message)
    message.content = "!echo"
    message.author = mock_user
    message.guild = mock_guild
    message.channel = MagicMock()
    message.channel.id = 555
    message.channel.send = AsyncMock()
    message.channel.typing = AsyncMock()
    message.reply = AsyncMock()
    message.created_at = None
    return message


def make_interaction(name, options=None, *, user=None, guild=None, client=None):
    interaction = MagicMock(spec=discord.Interaction)
    interaction.type = discord.InteractionType.application_command
    interaction.data = {"name": name, "options": options or []}
    interaction.user = user
    interaction.guild = guild
    interaction.channel = MagicMock()
    interaction.client = client
    interaction.created_at = None
    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    return interaction


@pytest.fixture
def interaction_factory(mock_user, mock_guild, mock_client):
    def factory(name, options=None):
        return make_interaction(
            name, options, user=mock_user, guild=mock_guild, client=mock_client
        )

    return factory
