"""
dashbot - Auth Gate Tests
=========================
"""

import pytest

from dashbot.api.core.errors import AuthError
from dashbot.api.services import AuthGate, AuthSession, SessionStore
from dashbot.shared.models import DiscordGuild, DiscordUser


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def gate(store, clock):
    return AuthGate(store, clock=clock)


def add_session(store, clock, lifetime=3600.0):
    session = AuthSession(
        user=DiscordUser(id="80351110224678912", username="nelly"),
        guilds=[DiscordGuild(id="111", name="Alpha", permissions=8)],
        access_token="access",
        created_at=clock(),
        expires_at=clock() + lifetime,
    )
    return store.create(session)


class TestAuthGate:
    """Tests for session cookie validation."""

    def test_valid_session(self, gate, store, clock):
        token = add_session(store, clock)
        identity = gate.authenticate(token)
        assert identity.user.username == "nelly"
        assert identity.guild_ids == {"111"}
        assert identity.find_guild("111").is_admin is True

    def test_missing_cookie(self, gate):
        with pytest.raises(AuthError) as exc_info:
            gate.authenticate(None)
        assert exc_info.value.code == "unauthenticated"

    def test_unknown_token(self, gate):
        with pytest.raises(AuthError) as exc_info:
            gate.authenticate("forged")
        assert exc_info.value.code == "unauthenticated"

    def test_expired_session_deleted_then_unauthenticated(self, gate, store, clock):
        token = add_session(store, clock, lifetime=60)
        clock.advance(61)

        with pytest.raises(AuthError) as exc_info:
            gate.authenticate(token)
        assert exc_info.value.code == "session_expired"
        assert exc_info.value.clear_cookie is True
        assert token not in store

        with pytest.raises(AuthError) as exc_info:
            gate.authenticate(token)
        assert exc_info.value.code == "unauthenticated"
