"""Discord bot configuration"""

import logging
import os

import discord
from dotenv import load_dotenv

load_dotenv(encoding="utf-8")

logger = logging.getLogger(__name__)


def _parse_ids(raw: str) -> frozenset[int]:
    return frozenset(int(part) for part in raw.replace(" ", "").split(",") if part.isdigit())


class BotConfig:
    TOKEN: str = os.getenv("TOKEN", "") or os.getenv("DISCORD_BOT_TOKEN", "")
    PREFIX: str = os.getenv("PREFIX", "!")
    GUILD_ID: str = os.getenv("DISCORD_GUILD_ID", "")
    OWNER_IDS: frozenset[int] = _parse_ids(os.getenv("OWNER_IDS", ""))

    STATUS: str = os.getenv("DISCORD_STATUS", "")
    ACTIVITY_TYPE: str = os.getenv("DISCORD_ACTIVITY_TYPE", "watching")
    ACTIVITY_NAME: str = os.getenv("DISCORD_ACTIVITY_NAME", "over the server")
    ACTIVITY_URL: str = os.getenv("DISCORD_ACTIVITY_URL", "")

    DEFAULT_COOLDOWN: float = float(os.getenv("DEFAULT_COOLDOWN", "3"))
    COOLDOWN_SWEEP_INTERVAL: int = int(os.getenv("COOLDOWN_SWEEP_INTERVAL", "60"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    RUN_MIGRATIONS: bool = os.getenv("RUN_MIGRATIONS", "false").lower() == "true"
    START_API: bool = os.getenv("START_API", "true").lower() == "true"

    COLORS: dict[str, int] = {
        "success": 0x00FF00,
        "error": 0xFF0000,
        "warning": 0xFFAA00,
        "info": 0x0099FF,
        "default": 0x7289DA,
    }

    EMOJIS: dict[str, str] = {
        "success": "✅",
        "error": "❌",
        "warning": "⚠️",
        "loading": "⏳",
    }

    @classmethod
    def get_status(cls) -> discord.Status:
        status_map = {
            "online": discord.Status.online,
            "idle": discord.Status.idle,
            "dnd": discord.Status.dnd,
            "invisible": discord.Status.invisible,
        }
        return status_map.get(cls.STATUS.lower(), discord.Status.online)

    @classmethod
    def get_activity(cls) -> discord.Activity | discord.Streaming | None:
        """Get bot activity from environment variables

        Supports: playing, listening, watching, competing, streaming
        For streaming: DISCORD_ACTIVITY_URL must be set
        """
        if not cls.ACTIVITY_NAME:
            return None

        activity_type_lower = cls.ACTIVITY_TYPE.lower()

        if activity_type_lower == "streaming":
            if cls.ACTIVITY_URL:
                return discord.Streaming(name=cls.ACTIVITY_NAME, url=cls.ACTIVITY_URL)
            logger.warning(
                "Streaming activity requires DISCORD_ACTIVITY_URL to be set. "
                "Falling back to 'playing' activity."
            )

        activity_map = {
            "playing": discord.ActivityType.playing,
            "listening": discord.ActivityType.listening,
            "watching": discord.ActivityType.watching,
            "competing": discord.ActivityType.competing,
        }

        activity_type = activity_map.get(activity_type_lower, discord.ActivityType.playing)
        return discord.Activity(type=activity_type, name=cls.ACTIVITY_NAME)
