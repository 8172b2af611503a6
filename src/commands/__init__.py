"""
CaseKeeper - Commands Package
=============================

Slash command cogs. Each cog is thin glue: it builds an Actor and an
ActionRequest from the interaction, calls the moderation service and
replies with the result.

DESIGN:
    Each command file contains a Cog class and an async setup(bot).
    The bot loads every module in COMMAND_COGS with load_extension().

Available Commands:
    /ban add, /ban remove: Ban or unban a user (staff / board)
    /mute add, /mute remove: Timed mute and manual unmute (staff)
    /kick: Kick a user (staff)
    /warn add, /warn remove: Manage warnings (staff)
    /role add, /role remove, /role temp: Recorded role changes
    /channel lock, /channel unlock: Toggle @everyone send permission
    /modnote add, /modnote remove, /modnote show: Staff notes
    /history: A user's cases and totals
    /reason: Amend a case reason
    /ping: Liveness check
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.ping",
    "src.commands.ban",
    "src.commands.mute",
    "src.commands.kick",
    "src.commands.warn",
    "src.commands.role",
    "src.commands.channel",
    "src.commands.modnote",
    "src.commands.history",
    "src.commands.reason",
]


__all__ = [
    "COMMAND_COGS",
]
