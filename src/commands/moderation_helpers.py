"""
CaseKeeper - Shared Command Helpers
===================================

Glue between slash-command interactions and the moderation service.
"""

from typing import List, Optional

import discord
from discord import app_commands

from src.services.moderation import ActionResult, Actor
from src.utils.duration import DURATION_SUGGESTIONS


# =============================================================================
# Actor
# =============================================================================

def actor_from_interaction(interaction: discord.Interaction) -> Actor:
    """Capture the invoker's roles and channel context."""
    user = interaction.user
    roles = getattr(user, "roles", [])
    top_role = getattr(user, "top_role", None)
    channel = interaction.channel

    return Actor(
        user_id=user.id,
        name=str(user),
        role_ids=frozenset(role.id for role in roles),
        top_position=top_role.position if top_role else 0,
        channel_id=interaction.channel_id,
        category_id=getattr(channel, "category_id", None),
    )


# =============================================================================
# Replies
# =============================================================================

async def respond(interaction: discord.Interaction, result: ActionResult) -> None:
    """Reply publicly on success and privately on rejection."""
    await interaction.response.send_message(result.message, ephemeral=not result.success)


async def respond_embed(
    interaction: discord.Interaction,
    result: ActionResult,
    embed: Optional[discord.Embed],
) -> None:
    if not result.success or embed is None:
        await interaction.response.send_message(result.message, ephemeral=True)
        return
    await interaction.response.send_message(embed=embed, ephemeral=True)


# =============================================================================
# Autocomplete
# =============================================================================

async def duration_autocomplete(
    interaction: discord.Interaction,
    current: str,
) -> List[app_commands.Choice[str]]:
    current_lower = current.lower()
    choices = [
        app_commands.Choice(name=label, value=token)
        for label, token in DURATION_SUGGESTIONS
        if current_lower in token or current_lower in label.lower()
    ]
    return choices[:25]


__all__ = [
    "actor_from_interaction",
    "respond",
    "respond_embed",
    "duration_autocomplete",
]
