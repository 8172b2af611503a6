"""
CaseKeeper - Main Bot Class
===========================

Discord client that wires the moderation core to a guild.

DESIGN:
    The bot owns one instance of each service:

    1. __init__:
       - Store (get_store singleton)
       - DiscordPlatform adapter for the configured guild
       - ModLogService, ExpiryScheduler, ModerationService

    2. setup_hook (before on_ready):
       - Command cog loading
       - App-command error hook
       - Command tree syncing to the guild

    Pending expiry timers are cancelled on close; they are not persisted.
"""

from datetime import datetime

import discord
from discord.ext import commands

from src.core.config import get_config
from src.core.logger import logger
from src.core.store import get_store
from src.services.expiry_scheduler import ExpiryScheduler
from src.services.mod_log import ModLogService
from src.services.moderation import ModerationService
from src.services.platform import DiscordPlatform
from src.utils.error_handler import handle_app_command_error


# =============================================================================
# CaseKeeperBot Class
# =============================================================================

class CaseKeeperBot(commands.Bot):
    """
    Moderation case tracker bot.

    Attributes:
        config: Loaded configuration.
        store: Case ledger, history, counters and notes.
        platform: Discord adapter used by the services.
        mod_log: Notice and DM delivery.
        scheduler: Automatic unmute / role expiry timers.
        moderation: Action orchestrator used by every command cog.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.members = True
        intents.message_content = True  # legacy !ping

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()
        self.store = get_store()
        self.platform = DiscordPlatform(self, self.config.guild_id)
        self.mod_log = ModLogService(self.platform, self.config, self.store)
        self.scheduler = ExpiryScheduler(self.platform, self.store, self.mod_log)
        self.moderation = ModerationService(
            self.platform,
            self.config,
            store=self.store,
            mod_log=self.mod_log,
            scheduler=self.scheduler,
        )
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load cogs and sync commands before on_ready."""
        from src.commands import COMMAND_COGS

        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        self.tree.on_error = handle_app_command_error

        guild = discord.Object(id=self.config.guild_id)
        self.tree.copy_global_to(guild=guild)
        try:
            synced = await self.tree.sync(guild=guild)
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return
        self._ready_initialized = True

        if not self.user:
            return

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        guild = self.get_guild(self.config.guild_id)
        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guild", guild.name if guild else f"missing ({self.config.guild_id})"),
            ("Next Case", f"#{getattr(self.store, 'next_case_number', '?')}"),
        ], emoji="🚀")

        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="the case log"),
        )

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Cancel pending expiries, then disconnect."""
        logger.info("Initiating Graceful Shutdown")
        await self.scheduler.shutdown()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["CaseKeeperBot"]
