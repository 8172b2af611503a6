"""
CaseKeeper - Reason Command Cog
===============================

/reason: amend the recorded reason of a case.
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


class ReasonCog(commands.Cog):
    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @app_commands.command(name="reason", description="Update the reason of a case")
    @app_commands.describe(case="Case number to update", newreason="New reason")
    async def reason(
        self,
        interaction: discord.Interaction,
        case: app_commands.Range[int, 1],
        newreason: str,
    ) -> None:
        result = await self.bot.moderation.update_reason(
            actor_from_interaction(interaction),
            ActionRequest(case_number=case, reason=newreason),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(ReasonCog(bot))
    logger.tree("Command Loaded", [("Name", "reason")], emoji="✅")
