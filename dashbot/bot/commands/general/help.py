"""Command list, or the details of a single command"""

from dashbot.bot.config import BotConfig
from dashbot.bot.core import CommandDescriptor, CommandOption, DispatchContext
from dashbot.bot.core.embeds import create_embed, error_embed
from dashbot.bot.core.permissions import is_moderator

MODERATION = "Moderation"


def _detail_fields(descriptor: CommandDescriptor) -> list[dict]:
    fields = [
        {"name": "Category", "value": descriptor.category, "inline": True},
        {"name": "Cooldown", "value": f"{descriptor.cooldown_seconds:g}s", "inline": True},
        {"name": "Usage", "value": f"`{descriptor.usage_text}`", "inline": False},
    ]
    if descriptor.aliases:
        fields.append(
            {"name": "Aliases", "value": ", ".join(sorted(descriptor.aliases)), "inline": False}
        )
    if descriptor.interaction_only:
        fields.append({"name": "Note", "value": "Slash command only", "inline": False})
    return fields


async def help_command(ctx: DispatchContext) -> None:
    registry = ctx.client.registry
    name = ctx.get_string("command")

    if name:
        descriptor = registry.resolve(name)
        if descriptor is None:
            await ctx.reply(embed=error_embed(f"Unknown command `{name}`."), ephemeral=True)
            return
        await ctx.reply(
            embed=create_embed(
                title=f"/{descriptor.name}",
                description=descriptor.description,
                fields=_detail_fields(descriptor),
            )
        )
        return

    show_moderation = ctx.member is not None and is_moderator(ctx.member)
    fields = []
    for category, descriptors in sorted(registry.by_category().items()):
        if category == MODERATION and not show_moderation:
            continue
        lines = [f"`/{d.name}` - {d.description}" for d in descriptors]
        fields.append({"name": category, "value": "\n".join(lines), "inline": False})

    await ctx.reply(
        embed=create_embed(
            title="Commands",
            description=f"Slash commands also work with the `{BotConfig.PREFIX}` prefix.",
            fields=fields,
            footer="Use /help <command> for details",
        )
    )


command = CommandDescriptor(
    name="help",
    description="List available commands",
    category="General",
    options=(CommandOption("command", description="Command to describe"),),
    handler=help_command,
)
