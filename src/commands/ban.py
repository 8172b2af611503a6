"""
CaseKeeper - Ban Command Cog
============================

/ban add and /ban remove.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, respond

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class BanCog(commands.Cog):
    """Ban and unban members."""

    ban = app_commands.Group(name="ban", description="Ban or unban a user")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @ban.command(name="add", description="Ban a user from the server")
    @app_commands.describe(user="User to ban", reason="Reason for the ban")
    async def ban_add(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.ban(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=reason),
        )
        await respond(interaction, result)

    @ban.command(name="remove", description="Unban a user by ID")
    @app_commands.describe(userid="ID of the user to unban", reason="Reason for unbanning")
    async def ban_remove(
        self,
        interaction: discord.Interaction,
        userid: str,
        reason: str,
    ) -> None:
        if not userid.strip().isdigit():
            await interaction.response.send_message(
                "That doesn't look like a valid user ID.",
                ephemeral=True,
            )
            return

        result = await self.bot.moderation.unban(
            actor_from_interaction(interaction),
            ActionRequest(user_id=int(userid.strip()), reason=reason),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(BanCog(bot))
    logger.tree("Command Loaded", [("Name", "ban add/remove")], emoji="✅")
