"""
dashbot Discord client

Plain ``discord.Client``: slash and prefix invocations both arrive through
``on_interaction``/``on_message`` and go to the DispatchRouter. The dashboard
API runs under uvicorn on the same event loop once the client is ready.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone

import discord
import uvicorn

from dashbot.shared.database import DatabaseManager
from dashbot.shared.logging import setup_logging
from dashbot.shared.migrations import MigrationRunner
from dashbot.shared.models.activity import ActivityType
from dashbot.shared.repositories.activity import ActivityRepository

from .config import BotConfig
from .core.cooldowns import CooldownTable
from .core.dispatcher import DispatchRouter
from .core.loader import load_commands
from .core.registry import CommandRegistry
from .core.sync import sync_commands

logger = logging.getLogger(__name__)


class DashbotClient(discord.Client):
    """dashbot Discord client"""

    def __init__(self, *, start_api: bool = BotConfig.START_API):
        intents = discord.Intents.default()
        intents.message_content = True  # prefix commands
        intents.members = True  # member lookups for user options

        super().__init__(intents=intents)

        self.registry = CommandRegistry()
        self.cooldowns = CooldownTable()
        self.router = DispatchRouter(self, self.registry, self.cooldowns, prefix=BotConfig.PREFIX)

        self.started_at = datetime.now(timezone.utc)
        self.start_time = time.time()

        self.db: DatabaseManager | None = None
        self.activity_log: ActivityRepository | None = None

        self.start_api = start_api
        self.api_server: uvicorn.Server | None = None
        self._api_task: asyncio.Task | None = None
        self._sweep_task: asyncio.Task | None = None

    async def setup_hook(self):
        """Runs once after login, before the gateway connects"""
        await self._connect_database()

        # RegistryError propagates and aborts startup
        load_commands(self.registry)

        await self._sync_commands()

        self._sweep_task = asyncio.create_task(self._cooldown_sweep_loop())
        logger.info("[yellow]Connecting to Discord...[/yellow]")

    async def _connect_database(self) -> None:
        if not BotConfig.DATABASE_URL:
            logger.info("DATABASE_URL not set, activity logging disabled")
            return

        db = DatabaseManager(BotConfig.DATABASE_URL)
        try:
            await db.connect()
        except Exception as e:
            logger.error(f"Database unavailable, activity logging disabled: {e}")
            return

        if BotConfig.RUN_MIGRATIONS:
            applied = await MigrationRunner(db.pool).run_pending()
            if applied:
                logger.info(f"[green]Applied migrations:[/green] {', '.join(applied)}")

        self.db = db
        self.activity_log = ActivityRepository(db.pool)
        self.router.activity = self.activity_log

    async def _sync_commands(self) -> None:
        logger.info("[yellow]Syncing slash commands...[/yellow]")
        guild_id = int(BotConfig.GUILD_ID) if BotConfig.GUILD_ID else None
        await sync_commands(self, self.registry.payloads(), guild_id)

    async def _cooldown_sweep_loop(self) -> None:
        interval = BotConfig.COOLDOWN_SWEEP_INTERVAL
        while not self.is_closed():
            await asyncio.sleep(interval)
            self.cooldowns.sweep()

    async def on_ready(self):
        status = BotConfig.get_status()
        activity = BotConfig.get_activity()
        await self.change_presence(status=status, activity=activity)

        activity_str = activity.name if activity else "none"

        logger.info(
            f"[bold green]Bot ready:[/bold green] {self.user} [dim](ID: {self.user.id})[/dim]"
        )
        logger.info(
            f"[cyan]Connection:[/cyan] {len(self.guilds)} guilds | discord.py {discord.__version__}"
        )
        logger.info(f"[cyan]Presence:[/cyan] {status.name} | {activity_str}")

        # on_ready fires again after reconnects
        if self.start_api and self._api_task is None:
            self._start_api_server()

    def _start_api_server(self) -> None:
        from dashbot.api.app import create_app
        from dashbot.api.core.config import get_settings

        try:
            settings = get_settings()
        except Exception as e:
            logger.error(f"Dashboard API not started, invalid configuration: {e}")
            return

        app = create_app(settings, bot=self, db_manager=self.db)
        config = uvicorn.Config(
            app,
            host=settings.api_host,
            port=settings.api_port,
            log_config=None,
        )
        self.api_server = uvicorn.Server(config)
        self._api_task = asyncio.create_task(self.api_server.serve())
        logger.info(
            f"[cyan]Dashboard API:[/cyan] http://{settings.api_host}:{settings.api_port}/api"
        )

    async def on_interaction(self, interaction: discord.Interaction):
        await self.router.dispatch(interaction)

    async def on_message(self, message: discord.Message):
        await self.router.dispatch(message)

    async def on_guild_join(self, guild: discord.Guild):
        logger.info(f"Joined guild: {guild.name} ({guild.id})")
        if self.activity_log is not None:
            await self.activity_log.log(
                ActivityType.CONNECTION, f"Joined server {guild.name}", guild_id=guild.id
            )

    async def on_guild_remove(self, guild: discord.Guild):
        logger.info(f"Left guild: {guild.name} ({guild.id})")
        if self.activity_log is not None:
            await self.activity_log.log(
                ActivityType.CONNECTION, f"Left server {guild.name}", guild_id=guild.id
            )

    async def close(self):
        if self.api_server is not None:
            self.api_server.should_exit = True
        if self._api_task is not None:
            try:
                await asyncio.wait_for(self._api_task, timeout=5)
            except (asyncio.TimeoutError, asyncio.CancelledError):
                self._api_task.cancel()
        if self._sweep_task is not None:
            self._sweep_task.cancel()

        await super().close()

        if self.db is not None:
            await self.db.disconnect()


async def main():
    """Bot entry point"""
    token = BotConfig.TOKEN
    if not token:
        logger.error("[bold red]TOKEN environment variable not found[/bold red]")
        logger.error("Set it in the .env file: TOKEN=your_token_here")
        return

    async with DashbotClient() as bot:
        try:
            await bot.start(token)
        except (KeyboardInterrupt, asyncio.CancelledError):
            if not bot.is_closed():
                await bot.close()


def run():
    setup_logging()
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("[yellow]Bot stopped[/yellow]")
    except Exception as e:
        logger.error(f"[bold red]Bot crashed:[/bold red] {e}", exc_info=e)


if __name__ == "__main__":
    run()
