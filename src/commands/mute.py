"""
CaseKeeper - Mute Command Cog
=============================

/mute add and /mute remove.

DESIGN:
    Mutes always carry a duration; the moderation service arms the
    automatic unmute when the mute is committed.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, duration_autocomplete, respond

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class MuteCog(commands.Cog):
    """Mute and unmute members with the muted role."""

    mute = app_commands.Group(name="mute", description="Mute or unmute a user")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @mute.command(name="add", description="Mute a user for a duration")
    @app_commands.describe(
        user="User to mute",
        duration="How long (e.g. 10m, 1h, 1d)",
        reason="Reason for the mute",
    )
    @app_commands.autocomplete(duration=duration_autocomplete)
    async def mute_add(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        duration: str,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.mute(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, duration=duration, reason=reason),
        )
        await respond(interaction, result)

    @mute.command(name="remove", description="Unmute a user")
    @app_commands.describe(user="User to unmute", reason="Reason for the unmute")
    async def mute_remove(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.unmute(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=reason),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(MuteCog(bot))
    logger.tree("Command Loaded", [("Name", "mute add/remove")], emoji="✅")
