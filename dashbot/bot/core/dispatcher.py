"""Routes gateway events to registered commands.

Order per invocation: invocation name, bot author check (messages only),
registry lookup, interaction-only guard, cooldown, context, handler.
A handler error produces exactly one generic error message for the user;
the traceback only goes to the log.
"""

from __future__ import annotations

import logging

import discord

from dashbot.shared.models.activity import ActivityType
from dashbot.shared.repositories.activity import ActivityRepository

from .context import DispatchContext
from .cooldowns import CooldownTable
from .embeds import error_embed
from .errors import CooldownActive, DispatchError
from .registry import CommandDescriptor, CommandRegistry

logger = logging.getLogger(__name__)

GENERIC_ERROR = "There was an error executing this command!"


def parse_invocation(content: str, prefix: str) -> tuple[str, list[str]] | None:
    """Split ``<prefix>name arg1 arg2`` into ("name", ["arg1", "arg2"])"""
    if not prefix or not content.startswith(prefix):
        return None
    tokens = content[len(prefix):].split()
    if not tokens:
        return None
    return tokens[0].lower(), tokens[1:]


class DispatchRouter:
    def __init__(
        self,
        client: discord.Client,
        registry: CommandRegistry,
        cooldowns: CooldownTable | None = None,
        *,
        prefix: str = "!",
        activity: ActivityRepository | None = None,
    ):
        self.client = client
        self.registry = registry
        self.cooldowns = cooldowns or CooldownTable()
        self.prefix = prefix
        self.activity = activity

    async def dispatch(self, event: discord.Interaction | discord.Message) -> None:
        if isinstance(event, discord.Interaction):
            await self.dispatch_interaction(event)
        elif isinstance(event, discord.Message):
            await self.dispatch_message(event)

    async def dispatch_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type is not discord.InteractionType.application_command:
            return

        name = (interaction.data or {}).get("name", "")
        command = self.registry.resolve(name)
        if command is None:
            logger.error(f"No command matching {name} was found")
            return

        ctx = DispatchContext.from_interaction(interaction, command)
        await self._run(ctx, f"/{command.name}")

    async def dispatch_message(self, message: discord.Message) -> None:
        parsed = parse_invocation(message.content or "", self.prefix)
        if parsed is None:
            return
        if message.author.bot:
            return

        name, args = parsed
        command = self.registry.resolve(name)
        if command is None:
            return

        if command.interaction_only:
            await self._safe_reply_message(
                message,
                f"This command is only available as a slash command. "
                f"Use `/{command.name}` instead.",
            )
            return

        ctx = DispatchContext.from_message(message, args, command, self.client)
        await self._run(ctx, f"{self.prefix}{name}")

    async def _run(self, ctx: DispatchContext, invoked_as: str) -> None:
        command = ctx.command
        where = ctx.guild.name if ctx.guild is not None else "DM"

        try:
            self.cooldowns.acquire(command.name, ctx.user_id, command.cooldown_seconds)
        except CooldownActive as e:
            await self._send_error(ctx, str(e))
            return

        try:
            await command.invoke(ctx)
        except Exception as e:
            failure = DispatchError(DispatchError.EXECUTION_FAILED, command.name, str(e))
            logger.error(
                f"Error executing command {invoked_as}: {failure}",
                exc_info=e,
            )
            await self._send_error(ctx, GENERIC_ERROR)
            return

        logger.info(f"{ctx.user} executed {invoked_as} in {where}")
        await self._log_activity(ctx, command, invoked_as)

    async def _send_error(self, ctx: DispatchContext, message: str) -> None:
        embed = error_embed(message)
        try:
            if ctx.responded:
                await ctx.follow_up(embed=embed, ephemeral=True)
            else:
                await ctx.reply(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            logger.error(f"Could not send error message for {ctx.command_name}: {e}")

    async def _safe_reply_message(self, message: discord.Message, text: str) -> None:
        try:
            await message.reply(embed=error_embed(text))
        except discord.HTTPException as e:
            logger.error(f"Could not send guidance message: {e}")

    async def _log_activity(
        self, ctx: DispatchContext, command: CommandDescriptor, invoked_as: str
    ) -> None:
        if self.activity is None:
            return
        await self.activity.log(
            ActivityType.COMMAND,
            f'Command "{invoked_as}" executed by {ctx.user}',
            guild_id=ctx.guild_id,
            user_id=ctx.user_id,
        )
