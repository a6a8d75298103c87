"""User card"""

import discord

from dashbot.bot.core import CommandDescriptor, CommandOption, DispatchContext, OptionType
from dashbot.bot.core.embeds import create_embed


async def userinfo(ctx: DispatchContext) -> None:
    target = ctx.get_user("target") or ctx.user

    fields = [
        {"name": "Username", "value": str(target), "inline": True},
        {"name": "ID", "value": str(target.id), "inline": True},
        {"name": "Created", "value": target.created_at.strftime("%Y-%m-%d"), "inline": True},
    ]

    if isinstance(target, discord.Member):
        joined = target.joined_at.strftime("%Y-%m-%d") if target.joined_at else "Unknown"
        fields.append({"name": "Joined", "value": joined, "inline": True})
        roles = [role.mention for role in target.roles[1:]]
        if roles:
            fields.append({"name": "Roles", "value": " ".join(roles[:10]), "inline": False})

    await ctx.reply(
        embed=create_embed(
            title=f"{target.display_name}",
            fields=fields,
            thumbnail=target.display_avatar.url,
        )
    )


command = CommandDescriptor(
    name="userinfo",
    description="Show information about a user",
    category="General",
    options=(CommandOption("target", OptionType.USER, "User to look up"),),
    handler=userinfo,
)
