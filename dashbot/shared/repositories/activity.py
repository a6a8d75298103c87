"""Repository for the activity_logs table.

The table is optional from the application's point of view: a missing table
or an unreachable database is logged and reported as an empty result, never
raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import asyncpg

from dashbot.shared.models.activity import ActivityLog

logger = logging.getLogger(__name__)


class ActivityRepository:
    """Append-only writes and recent-first reads on activity_logs."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def log(
        self,
        activity_type: str,
        message: str,
        guild_id: str | int | None = None,
        user_id: str | int | None = None,
    ) -> bool:
        """Append one activity row. Returns False when the write was skipped."""
        try:
            async with self.pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO activity_logs (type, message, guild_id, user_id)
                    VALUES ($1, $2, $3, $4)
                    """,
                    str(activity_type),
                    message,
                    str(guild_id) if guild_id is not None else None,
                    str(user_id) if user_id is not None else None,
                )
            return True
        except asyncpg.UndefinedTableError:
            logger.debug("Activity log skipped (activity_logs table does not exist)")
            return False
        except Exception as e:
            logger.warning(f"Activity log failed: {type(e).__name__}: {e}")
            return False

    async def list_recent(
        self,
        guild_ids: Iterable[str] | None = None,
        limit: int = 20,
    ) -> list[ActivityLog]:
        """Latest rows, newest first.

        With ``guild_ids`` only rows for those guilds and rows without a guild
        (global bot events) are returned.
        """
        try:
            async with self.pool.acquire() as conn:
                if guild_ids is None:
                    rows = await conn.fetch(
                        """
                        SELECT id, type, message, guild_id, user_id, created_at
                        FROM activity_logs
                        ORDER BY created_at DESC
                        LIMIT $1
                        """,
                        limit,
                    )
                else:
                    rows = await conn.fetch(
                        """
                        SELECT id, type, message, guild_id, user_id, created_at
                        FROM activity_logs
                        WHERE guild_id IS NULL OR guild_id = ANY($1::text[])
                        ORDER BY created_at DESC
                        LIMIT $2
                        """,
                        list(guild_ids),
                        limit,
                    )
            return [ActivityLog.from_record(row) for row in rows]
        except asyncpg.UndefinedTableError:
            logger.debug("activity_logs table does not exist, returning no activity")
            return []
        except Exception as e:
            logger.warning(f"Failed to read activity logs: {type(e).__name__}: {e}")
            return []
