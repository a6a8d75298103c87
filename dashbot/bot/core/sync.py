"""Slash command sync

The DispatchRouter owns dispatch, so there is no ``app_commands.CommandTree``
to sync. The registry payloads go straight to the bulk-overwrite endpoints
through ``Client.http``; this module is the only place that touches it.
"""

import logging
from typing import Any

import discord

logger = logging.getLogger(__name__)


async def sync_commands(
    client: discord.Client, payload: list[dict[str, Any]], guild_id: int | None = None
) -> list[dict[str, Any]]:
    """Overwrite the application's commands, for one guild when ``guild_id`` is set.

    Guild sync applies immediately; global sync can take up to an hour to
    reach every client.
    """
    if client.application_id is None:
        raise RuntimeError("Cannot sync commands before login")

    if guild_id is not None:
        synced = await client.http.bulk_upsert_guild_commands(
            client.application_id, guild_id, payload
        )
        logger.info(f"[magenta]Synced {len(payload)} commands to guild {guild_id}[/magenta]")
    else:
        synced = await client.http.bulk_upsert_global_commands(client.application_id, payload)
        logger.info(f"[magenta]Synced {len(payload)} commands globally[/magenta]")
    return synced
