"""Kick a member"""

import logging

import discord

from dashbot.bot.core import CommandDescriptor, CommandOption, DispatchContext, OptionType
from dashbot.bot.core.embeds import create_embed, error_embed, success_embed
from dashbot.bot.core.permissions import has_permission
from dashbot.shared.models.activity import ActivityType

logger = logging.getLogger(__name__)

KICK_MEMBERS = 1 << 1


async def kick(ctx: DispatchContext) -> None:
    if ctx.guild is None:
        await ctx.reply(embed=error_embed("This command can only be used in a server."))
        return

    # Prefix invocations skip Discord's permission gate
    if not has_permission(ctx.member, "kick_members"):
        await ctx.reply(
            embed=error_embed("You need the Kick Members permission."), ephemeral=True
        )
        return

    target = ctx.get_member("target")
    if target is None:
        await ctx.reply(embed=error_embed("Member not found."), ephemeral=True)
        return

    if target.id == ctx.user_id:
        await ctx.reply(embed=error_embed("You cannot kick yourself."), ephemeral=True)
        return

    # The owner outranks every role; nobody outranks the owner
    invoker_is_owner = ctx.user_id == ctx.guild.owner_id
    if target.id == ctx.guild.owner_id or (
        not invoker_is_owner
        and ctx.member is not None
        and target.top_role >= ctx.member.top_role
    ):
        await ctx.reply(embed=error_embed("You cannot kick this member."), ephemeral=True)
        return

    reason = ctx.get_string("reason") or "No reason provided"

    try:
        await target.send(
            embed=create_embed(
                title=f"You were kicked from {ctx.guild.name}",
                description=f"Reason: {reason}",
            )
        )
    except discord.HTTPException:
        logger.debug(f"Could not DM {target} before kicking")

    try:
        await target.kick(reason=reason)
    except discord.Forbidden:
        await ctx.reply(
            embed=error_embed("I don't have permission to kick this member."), ephemeral=True
        )
        return

    await ctx.reply(embed=success_embed(f"Kicked {target.mention}: {reason}"))

    activity = getattr(ctx.client, "activity_log", None)
    if activity is not None:
        await activity.log(
            ActivityType.MODERATION,
            f"{target} was kicked by {ctx.user}: {reason}",
            guild_id=ctx.guild_id,
            user_id=ctx.user_id,
        )


command = CommandDescriptor(
    name="kick",
    description="Kick a member from the server",
    category="Moderation",
    options=(
        CommandOption("target", OptionType.USER, "Member to kick", required=True),
        CommandOption("reason", OptionType.STRING, "Reason for the kick"),
    ),
    cooldown_seconds=5,
    default_member_permissions=KICK_MEMBERS,
    handler=kick,
)
