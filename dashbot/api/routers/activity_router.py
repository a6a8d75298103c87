"""Activity log API routes"""

import logging

from fastapi import APIRouter, Depends

from dashbot.shared.repositories import ActivityRepository

from ..core.dependencies import get_activity_repository, require_auth
from ..services import AuthenticatedIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activity", tags=["activity"])

ACTIVITY_LIMIT = 20


@router.get("")
async def list_activity(
    identity: AuthenticatedIdentity = Depends(require_auth),
    repo: ActivityRepository | None = Depends(get_activity_repository),
) -> list[dict]:
    """Latest activity for the caller's guilds plus global bot events"""
    if repo is None:
        return []

    rows = await repo.list_recent(guild_ids=sorted(identity.guild_ids), limit=ACTIVITY_LIMIT)
    logger.info(f"Activity API called by {identity.user.username}")
    return [row.to_dict() for row in rows]
