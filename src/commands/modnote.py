"""
CaseKeeper - Mod Note Command Cog
=================================

/modnote add, /modnote remove and /modnote show.

DESIGN:
    Notes are private staff annotations, not cases. Removing a note
    renumbers the rest so numbers stay 1..N.
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.services.mod_log import build_notes_embed
from src.services.moderation import ActionRequest

from .moderation_helpers import actor_from_interaction, respond, respond_embed

if TYPE_CHECKING:
    from src.bot import CaseKeeperBot


class ModNoteCog(commands.Cog):
    modnote = app_commands.Group(name="modnote", description="Manage moderator notes")

    def __init__(self, bot: "CaseKeeperBot") -> None:
        self.bot = bot

    @modnote.command(name="add", description="Add a note to a user")
    @app_commands.describe(user="User to add note to", note="The note text")
    async def modnote_add(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        note: str,
    ) -> None:
        result = await self.bot.moderation.note_add(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, reason=note),
        )
        await respond(interaction, result)

    @modnote.command(name="remove", description="Remove a note from a user")
    @app_commands.describe(
        user="User whose note to remove",
        number="Note number to remove",
        reason="Reason for removing this note",
    )
    async def modnote_remove(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        number: app_commands.Range[int, 1],
        reason: str,
    ) -> None:
        result = await self.bot.moderation.note_remove(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id, note_number=number, reason=reason),
        )
        await respond(interaction, result)

    @modnote.command(name="show", description="Show all notes for a user")
    @app_commands.describe(user="User whose notes to show")
    async def modnote_show(
        self,
        interaction: discord.Interaction,
        user: discord.User,
    ) -> None:
        result = await self.bot.moderation.note_show(
            actor_from_interaction(interaction),
            ActionRequest(user_id=user.id),
        )
        embed = None
        if result.success:
            embed = build_notes_embed(user.id, result.data["target_name"], result.data["notes"])
        await respond_embed(interaction, result, embed)


async def setup(bot: "CaseKeeperBot") -> None:
    await bot.add_cog(ModNoteCog(bot))
    logger.tree("Command Loaded", [("Name", "modnote add/remove/show")], emoji="✅")
