"""Latency check"""

from dashbot.bot.core import CommandDescriptor, DispatchContext
from dashbot.bot.core.embeds import create_embed


async def ping(ctx: DispatchContext) -> None:
    latency = round(ctx.client.latency * 1000)
    await ctx.reply(embed=create_embed(title="Pong!", description=f"Latency: {latency}ms"))


command = CommandDescriptor(
    name="ping",
    description="Check the bot latency",
    category="General",
    handler=ping,
)
