"""
CaseKeeper - Channel Command Cog
================================

/channel lock and /channel unlock. Defaults to the channel the command
is used in.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, respond

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class ChannelCog(commands.Cog):
    channel = app_commands.Group(name="channel", description="Lock or unlock a channel")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @channel.command(name="lock", description="Stop @everyone from sending messages")
    @app_commands.describe(reason="Reason for lockdown", channel="Channel to lock (defaults to this one)")
    async def channel_lock(
        self,
        interaction: discord.Interaction,
        reason: str,
        channel: Optional[discord.TextChannel] = None,
    ) -> None:
        result = await self.bot.moderation.channel_lock(
            actor_from_interaction(interaction),
            ActionRequest(reason=reason, channel_id=channel.id if channel else None),
        )
        await respond(interaction, result)

    @channel.command(name="unlock", description="Let @everyone send messages again")
    @app_commands.describe(reason="Reason for lifting lockdown", channel="Channel to unlock (defaults to this one)")
    async def channel_unlock(
        self,
        interaction: discord.Interaction,
        reason: str,
        channel: Optional[discord.TextChannel] = None,
    ) -> None:
        result = await self.bot.moderation.channel_unlock(
            actor_from_interaction(interaction),
            ActionRequest(reason=reason, channel_id=channel.id if channel else None),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(ChannelCog(bot))
    logger.tree("Command Loaded", [("Name", "channel lock/unlock")], emoji="✅")
