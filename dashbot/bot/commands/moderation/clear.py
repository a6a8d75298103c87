"""Bulk delete recent messages"""

import discord

from dashbot.bot.core import CommandDescriptor, CommandOption, DispatchContext, OptionType
from dashbot.bot.core.embeds import error_embed, success_embed
from dashbot.bot.core.permissions import has_permission

MANAGE_MESSAGES = 1 << 13

PURGEABLE = (discord.TextChannel, discord.VoiceChannel, discord.StageChannel, discord.Thread)


async def clear(ctx: DispatchContext) -> None:
    if not has_permission(ctx.member, "manage_messages"):
        await ctx.reply(
            embed=error_embed("You need the Manage Messages permission."), ephemeral=True
        )
        return

    amount = ctx.get_integer("amount")
    if amount is None or amount < 1 or amount > 100:
        await ctx.reply(embed=error_embed("Amount must be between 1 and 100."), ephemeral=True)
        return

    if not isinstance(ctx.channel, PURGEABLE):
        await ctx.reply(
            embed=error_embed("Messages cannot be cleared in this channel."), ephemeral=True
        )
        return

    await ctx.defer(ephemeral=True)
    # The invoking message is removed too on the prefix path
    limit = amount if ctx.is_interaction else amount + 1
    deleted = await ctx.channel.purge(limit=limit)
    count = len(deleted) if ctx.is_interaction else max(len(deleted) - 1, 0)
    await ctx.follow_up(embed=success_embed(f"Deleted {count} messages."), ephemeral=True)


command = CommandDescriptor(
    name="clear",
    description="Delete recent messages in this channel",
    category="Moderation",
    aliases=frozenset({"purge"}),
    options=(CommandOption("amount", OptionType.INTEGER, "Messages to delete (1-100)", required=True),),
    cooldown_seconds=5,
    default_member_permissions=MANAGE_MESSAGES,
    handler=clear,
)
