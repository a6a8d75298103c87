"""Bot statistics API routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..core.dependencies import get_bot, require_auth
from ..services import AuthenticatedIdentity
from ..services.telemetry import build_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("")
async def get_stats(
    identity: AuthenticatedIdentity = Depends(require_auth),
    bot: Any = Depends(get_bot),
) -> dict:
    """Bot telemetry scoped to the caller's guilds"""
    try:
        stats = build_stats(bot, identity)
    except Exception as e:
        logger.exception(f"Failed to get bot stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch bot stats") from None

    logger.info(f"Stats API called by {identity.user.username}")
    return stats
