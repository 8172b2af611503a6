"""
CaseKeeper - Ping Command Cog
=============================

/ping liveness check, plus the legacy !ping text command.

DESIGN:
    Message latency is the time between the interaction and the bot's
    reply; API latency is the gateway heartbeat reported by the platform.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class PingCog(commands.Cog):
    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @app_commands.command(name="ping", description="Check if the bot is alive")
    async def ping(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message("Pinging...")
        sent = await interaction.original_response()

        message_ms = round((sent.created_at - interaction.created_at).total_seconds() * 1000)
        api_ms = round(self.bot.platform.latency * 1000)

        await interaction.edit_original_response(
            content=(
                "🏓 Pong!\n"
                f"Message latency: **{message_ms}ms**\n"
                f"API latency: **{api_ms}ms**"
            ),
        )

    @commands.command(name="ping")
    async def ping_text(self, ctx: commands.Context) -> None:
        await ctx.send("Pong!")


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(PingCog(bot))
    logger.tree("Command Loaded", [("Name", "ping")], emoji="✅")
