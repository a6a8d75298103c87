"""Guild list API routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..core.dependencies import get_bot, require_auth
from ..services import AuthenticatedIdentity
from ..services.telemetry import build_guilds

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guilds", tags=["guilds"])


@router.get("")
async def list_guilds(
    identity: AuthenticatedIdentity = Depends(require_auth),
    bot: Any = Depends(get_bot),
) -> list[dict]:
    """Guilds shared by the bot and the caller, with the caller's permissions"""
    try:
        guilds = build_guilds(bot, identity)
    except Exception as e:
        logger.exception(f"Failed to get guilds: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch guilds") from None

    logger.info(f"Guilds API called by {identity.user.username}")
    return guilds
