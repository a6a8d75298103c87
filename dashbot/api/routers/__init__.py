"""API Routers package

Routers are organized by feature domain.
"""

from . import activity_router, auth_router, commands_router, guilds_router, stats_router

__all__ = [
    "activity_router",
    "auth_router",
    "commands_router",
    "guilds_router",
    "stats_router",
]
