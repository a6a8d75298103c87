"""
dashbot - Cooldown Tests
========================
"""

import pytest

from dashbot.bot.core import CooldownActive, CooldownTable


class TestCooldownTable:
    """Tests for per-command, per-user cooldowns."""

    def test_first_use_is_free(self, clock):
        table = CooldownTable(clock=clock)
        assert table.remaining("ping", 1) == 0.0

    def test_second_call_within_window_is_blocked(self, clock):
        table = CooldownTable(clock=clock)
        table.acquire("ping", 1, 3.0)
        clock.advance(1.0)

        with pytest.raises(CooldownActive) as exc_info:
            table.acquire("ping", 1, 3.0)

        remaining = exc_info.value.remaining
        assert 0 < remaining <= 3.0
        assert exc_info.value.code == "cooldown_active"
        assert str(exc_info.value) == (
            "Please wait 2.0 more seconds before reusing the `ping` command."
        )

    def test_call_after_window_succeeds(self, clock):
        table = CooldownTable(clock=clock)
        table.acquire("ping", 1, 3.0)
        clock.advance(1.0)
        with pytest.raises(CooldownActive):
            table.acquire("ping", 1, 3.0)

        clock.advance(2.0)
        table.acquire("ping", 1, 3.0)

    def test_users_are_independent(self, clock):
        table = CooldownTable(clock=clock)
        table.acquire("ping", 1, 3.0)
        table.acquire("ping", 2, 3.0)
        assert len(table) == 2

    def test_commands_are_independent(self, clock):
        table = CooldownTable(clock=clock)
        table.acquire("ping", 1, 3.0)
        table.acquire("help", 1, 3.0)

    def test_zero_cooldown_is_not_recorded(self, clock):
        table = CooldownTable(clock=clock)
        table.acquire("ping", 1, 0)
        table.acquire("ping", 1, 0)
        assert len(table) == 0

    def test_expired_entry_dropped_on_check(self, clock):
        table = CooldownTable(clock=clock)
        table.record("ping", 1, 3.0)
        clock.advance(5)
        assert table.remaining("ping", 1) == 0.0
        assert len(table) == 0

    def test_sweep_removes_only_expired(self, clock):
        table = CooldownTable(clock=clock)
        table.record("ping", 1, 3.0)
        table.record("kick", 2, 10.0)
        clock.advance(5)

        assert table.sweep() == 1
        assert len(table) == 1
        assert table.remaining("kick", 2) == pytest.approx(5.0)
