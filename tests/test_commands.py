"""
dashbot - Bundled Command Tests
===============================

Command discovery plus the behaviour of the bundled commands.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from dashbot.bot.core import CommandRegistry, DispatchContext, RegistryError, load_commands
from dashbot.bot.core.loader import iter_command_modules
from dashbot.bot.core.permissions import has_permission, is_moderator
from dashbot.bot.core.sync import sync_commands


@pytest.fixture
def loaded_registry():
    registry = CommandRegistry()
    load_commands(registry)
    return registry


class TestLoader:
    """Tests for command module discovery."""

    def test_discovers_bundled_modules(self):
        modules = iter_command_modules()
        assert "dashbot.bot.commands.general.ping" in modules
        assert "dashbot.bot.commands.moderation.kick" in modules

    def test_loads_and_seals(self, loaded_registry):
        assert {c.name for c in loaded_registry} == {"ping", "help", "userinfo", "kick", "clear"}
        assert loaded_registry.resolve("purge").name == "clear"
        assert loaded_registry.sealed is True

    def test_categories(self, loaded_registry):
        grouped = loaded_registry.by_category()
        assert {c.name for c in grouped["Moderation"]} == {"kick", "clear"}

    def test_loading_twice_is_fatal(self):
        fresh = CommandRegistry()
        load_commands(fresh)
        with pytest.raises(RegistryError):
            load_commands(fresh)

    def test_payloads_are_valid(self, loaded_registry):
        for payload in loaded_registry.payloads():
            assert payload["name"].islower()
            assert 1 <= len(payload["description"]) <= 100


# =============================================================================
# Command bodies
# =============================================================================


def prefix_context(registry, name, args, message, client):
    return DispatchContext.from_message(message, args, registry.resolve(name), client)


class TestGeneralCommands:
    """Tests for ping and help."""

    @pytest.mark.asyncio
    async def test_ping_reports_latency(self, loaded_registry, mock_message, mock_client):
        ctx = prefix_context(loaded_registry, "ping", [], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert "50ms" in embed.description

    @pytest.mark.asyncio
    async def test_help_hides_moderation_from_members(
        self, loaded_registry, mock_message, mock_client
    ):
        mock_client.registry = loaded_registry
        ctx = prefix_context(loaded_registry, "help", [], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert [f.name for f in embed.fields] == ["General"]

    @pytest.mark.asyncio
    async def test_help_lists_moderation_for_moderators(
        self, loaded_registry, mock_message, mock_client
    ):
        moderator = MagicMock(spec=discord.Member)
        moderator.id = 42
        moderator.guild_permissions = discord.Permissions(kick_members=True)
        mock_message.author = moderator
        mock_client.registry = loaded_registry

        ctx = prefix_context(loaded_registry, "help", [], mock_message, mock_client)
        await ctx.command.invoke(ctx)

        embed = mock_message.reply.await_args.kwargs["embed"]
        assert [f.name for f in embed.fields] == ["General", "Moderation"]

    @pytest.mark.asyncio
    async def test_help_for_alias(self, loaded_registry, mock_message, mock_client):
        mock_client.registry = loaded_registry
        ctx = prefix_context(loaded_registry, "help", ["purge"], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert embed.title == "/clear"

    @pytest.mark.asyncio
    async def test_help_unknown_command(self, loaded_registry, mock_message, mock_client):
        mock_client.registry = loaded_registry
        ctx = prefix_context(loaded_registry, "help", ["nope"], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert "nope" in embed.description


class TestModerationCommands:
    """Tests for clear and kick permission handling."""

    @pytest.mark.asyncio
    async def test_clear_without_permission(self, loaded_registry, mock_message, mock_client):
        ctx = prefix_context(loaded_registry, "clear", ["5"], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert "Manage Messages" in embed.description

    @pytest.mark.asyncio
    async def test_clear_rejects_out_of_range(self, loaded_registry, mock_message, mock_client):
        member = MagicMock(spec=discord.Member)
        member.id = 42
        member.guild_permissions = discord.Permissions(manage_messages=True)
        mock_message.author = member

        ctx = prefix_context(loaded_registry, "clear", ["500"], mock_message, mock_client)
        await ctx.command.invoke(ctx)

        embed = mock_message.reply.await_args.kwargs["embed"]
        assert "between 1 and 100" in embed.description

    @pytest.mark.asyncio
    async def test_clear_purges_including_invocation(
        self, loaded_registry, mock_message, mock_client
    ):
        member = MagicMock(spec=discord.Member)
        member.id = 42
        member.guild_permissions = discord.Permissions(manage_messages=True)
        mock_message.author = member
        channel = MagicMock(spec=discord.TextChannel)
        channel.purge = AsyncMock(return_value=[object()] * 6)
        channel.send = AsyncMock()
        channel.typing = AsyncMock()
        mock_message.channel = channel

        ctx = prefix_context(loaded_registry, "purge", ["5"], mock_message, mock_client)
        await ctx.command.invoke(ctx)

        channel.purge.assert_awaited_once_with(limit=6)
        embed = channel.send.await_args.kwargs["embed"]
        assert embed.description == "Deleted 5 messages."

    @pytest.mark.asyncio
    async def test_kick_requires_permission(self, loaded_registry, mock_message, mock_client):
        ctx = prefix_context(loaded_registry, "kick", ["<@99>", "spam"], mock_message, mock_client)
        await ctx.command.invoke(ctx)
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert "Kick Members" in embed.description


class TestPermissions:
    """Tests for the prefix-path permission helpers."""

    def make_member(self, **perms):
        member = MagicMock(spec=discord.Member)
        member.id = 7
        member.guild_permissions = discord.Permissions(**perms)
        return member

    def test_has_permission(self):
        assert has_permission(self.make_member(kick_members=True), "kick_members") is True
        assert has_permission(self.make_member(), "kick_members") is False
        assert has_permission(None, "kick_members") is False

    def test_administrator_implies_everything(self):
        admin = self.make_member(administrator=True)
        assert has_permission(admin, "manage_messages") is True
        assert is_moderator(admin) is True

    def test_moderator(self):
        assert is_moderator(self.make_member(manage_messages=True)) is True
        assert is_moderator(self.make_member(send_messages=True)) is False


# =============================================================================
# Slash command sync
# =============================================================================


class TestSync:
    """Tests for pushing registry payloads to Discord."""

    def make_client(self):
        client = MagicMock()
        client.application_id = 1234
        client.http.bulk_upsert_guild_commands = AsyncMock(return_value=[])
        client.http.bulk_upsert_global_commands = AsyncMock(return_value=[])
        return client

    @pytest.mark.asyncio
    async def test_guild_sync(self, loaded_registry):
        client = self.make_client()
        payload = loaded_registry.payloads()

        await sync_commands(client, payload, guild_id=111)

        client.http.bulk_upsert_guild_commands.assert_awaited_once_with(1234, 111, payload)
        client.http.bulk_upsert_global_commands.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_global_sync(self, loaded_registry):
        client = self.make_client()
        payload = loaded_registry.payloads()

        await sync_commands(client, payload)

        client.http.bulk_upsert_global_commands.assert_awaited_once_with(1234, payload)

    @pytest.mark.asyncio
    async def test_sync_before_login_fails(self):
        client = self.make_client()
        client.application_id = None
        with pytest.raises(RuntimeError):
            await sync_commands(client, [])


class TestKick:
    """Tests for role hierarchy handling in kick."""

    @pytest.fixture
    def target(self, mock_guild):
        target = MagicMock(spec=discord.Member)
        target.id = 99
        target.top_role = 10
        target.mention = "<@99>"
        target.send = AsyncMock()
        target.kick = AsyncMock()
        mock_guild.get_member.return_value = target
        return target

    def invoke_as(self, loaded_registry, mock_message, mock_client, top_role):
        invoker = MagicMock(spec=discord.Member)
        invoker.id = 42
        invoker.top_role = top_role
        invoker.guild_permissions = discord.Permissions(kick_members=True)
        mock_message.author = invoker
        mock_client.activity_log = AsyncMock()
        return prefix_context(loaded_registry, "kick", ["<@99>", "spam"], mock_message, mock_client)

    @pytest.mark.asyncio
    async def test_higher_role_is_protected(
        self, loaded_registry, mock_message, mock_client, mock_guild, target
    ):
        mock_guild.owner_id = 1
        ctx = self.invoke_as(loaded_registry, mock_message, mock_client, top_role=5)

        await ctx.command.invoke(ctx)

        target.kick.assert_not_awaited()
        embed = mock_message.reply.await_args.kwargs["embed"]
        assert embed.description == "You cannot kick this member."

    @pytest.mark.asyncio
    async def test_owner_bypasses_hierarchy(
        self, loaded_registry, mock_message, mock_client, mock_guild, target
    ):
        mock_guild.owner_id = 42
        ctx = self.invoke_as(loaded_registry, mock_message, mock_client, top_role=5)

        await ctx.command.invoke(ctx)

        target.kick.assert_awaited_once_with(reason="spam")
        mock_client.activity_log.log.assert_awaited_once()
        assert mock_client.activity_log.log.await_args.args[0] == "moderation"

    @pytest.mark.asyncio
    async def test_owner_cannot_be_kicked(
        self, loaded_registry, mock_message, mock_client, mock_guild, target
    ):
        mock_guild.owner_id = 99
        ctx = self.invoke_as(loaded_registry, mock_message, mock_client, top_role=50)

        await ctx.command.invoke(ctx)

        target.kick.assert_not_awaited()
