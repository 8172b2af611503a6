"""
CaseKeeper - Warn Command Cog
=============================

/warn add and /warn remove.

DESIGN:
    Warnings have no platform effect. They are cases that move the
    member's warn counter, which never drops below zero.
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


class WarnCog(commands.Cog):
    """Issue and remove warnings."""

    warn = app_commands.Group(name="warn", description="Manage warnings")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @warn.command(name="add", description="Warn a user")
    @app_commands.describe(user="User to warn", reason="Reason for warning")
    async def warn_add(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.warn_add(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=reason),
        )
        await respond(interaction, result)

    @warn.command(name="remove", description="Remove a warning from a user (one warn)")
    @app_commands.describe(
        user="User whose warn to remove",
        reason="Reason for removing warn",
        originalreason="Reason for original warn",
    )
    async def warn_remove(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
        originalreason: Optional[str] = None,
    ) -> None:
        result = await self.bot.moderation.warn_remove(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=reason, original_reason=originalreason),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(WarnCog(bot))
    logger.tree("Command Loaded", [("Name", "warn add/remove")], emoji="✅")
