"""
CaseKeeper - Kick Command Cog
=============================

/kick with an optional reflection period shown to the member.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, duration_autocomplete, respond

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class KickCog(commands.Cog):
    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @app_commands.command(name="kick", description="Kick a user from the server")
    @app_commands.describe(
        user="User to kick",
        reason="Reason for kick",
        duration="Reflection period before rejoining (e.g. 1d)",
    )
    @app_commands.autocomplete(duration=duration_autocomplete)
    async def kick(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
        duration: Optional[str] = None,
    ) -> None:
        result = await self.bot.moderation.kick(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=reason, duration=duration),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(KickCog(bot))
    logger.tree("Command Loaded", [("Name", "kick")], emoji="✅")
