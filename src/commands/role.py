"""
CaseKeeper - Role Command Cog
=============================

/role add, /role remove and /role temp.

DESIGN:
    The moderation service checks that both the invoker and the bot
    outrank the role before touching it. Role cases are noticed in the
    role log channel.
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


class RoleCog(commands.Cog):
    """Grant and revoke roles as recorded cases."""

    role = app_commands.Group(name="role", description="Manage member roles")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @role.command(name="add", description="Add a role to a user")
    @app_commands.describe(user="User to add role to", role="Role to add", reason="Reason for adding role")
    async def role_add(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        role: discord.Role,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.role_add(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, role_id=role.id, reason=reason),
        )
        await respond(interaction, result)

    @role.command(name="remove", description="Remove a role from a user")
    @app_commands.describe(user="User to remove role from", role="Role to remove", reason="Reason for removing role")
    async def role_remove(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        role: discord.Role,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.role_remove(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, role_id=role.id, reason=reason),
        )
        await respond(interaction, result)

    @role.command(name="temp", description="Give a role for a limited time")
    @app_commands.describe(
        user="User to give role to",
        role="Role to give",
        duration="How long (e.g. 1h, 1d)",
        reason="Reason",
    )
    @app_commands.autocomplete(duration=duration_autocomplete)
    async def role_temp(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        role: discord.Role,
        duration: str,
        reason: str,
    ) -> None:
        result = await self.bot.moderation.role_temp(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, role_id=role.id, duration=duration, reason=reason),
        )
        await respond(interaction, result)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(RoleCog(bot))
    logger.tree("Command Loaded", [("Name", "role add/remove/temp")], emoji="✅")
