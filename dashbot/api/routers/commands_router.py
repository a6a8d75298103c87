"""Registered command API routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from ..core.dependencies import get_bot, require_auth
from ..services import AuthenticatedIdentity
from ..services.telemetry import build_commands

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/commands", tags=["commands"])


@router.get("")
async def list_commands(
    identity: AuthenticatedIdentity = Depends(require_auth),
    bot: Any = Depends(get_bot),
) -> list[dict]:
    logger.info(f"Commands API called by {identity.user.username}")
    return build_commands(bot)
