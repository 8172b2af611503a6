"""
CaseKeeper - History Command Cog
================================

/history: a member's cases, oldest first, with warn/mute/kick totals.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.mod_log import build_history_embed
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, respond_embed

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class HistoryCog(commands.Cog):
    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @app_commands.command(name="history", description="Show moderation history for a user")
    @app_commands.describe(user="User to look up")
    async def history(self, interaction: discord.Interaction, user: discord.User) -> None:
        result = await self.bot.moderation.history(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id),
        )
        embed = None
        if result.success:
            embed = build_history_embed(
                user.id,
                result.data["target_name"],
                result.data["entries"],
                result.data["counters"],
            )
        await respond_embed(interaction, result, embed)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(HistoryCog(bot))
    logger.tree("Command Loaded", [("Name", "history")], emoji="✅")
