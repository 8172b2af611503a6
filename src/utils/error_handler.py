"""
CaseKeeper - Error Handler
==========================

Context capture and categorization for unexpected command errors.

DESIGN:
    Expected failures (permission, not found, validation, platform
    effect) come back from the moderation service as ActionResult
    rejections. This module handles only what escapes a command: the
    bot's app-command tree error hook passes the exception here, it is
    logged with its category and context, and critical errors are saved
    to logs/errors for later inspection.
"""

import json
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import discord
from discord import app_commands

from src.core.logger import LOGS_DIR, logger
from src.core.store import StoreError
from src.services.platform import PlatformError


class ErrorContext:
    """Captures and formats detailed error context."""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs: Any) -> Dict[str, Any]:
        context = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": {k: str(v)[:200] for k, v in kwargs.items()},
        }

        interaction = kwargs.get("interaction")
        if isinstance(interaction, discord.Interaction):
            command = interaction.command
            context["discord_context"] = {
                "guild": interaction.guild.name if interaction.guild else "DM",
                "channel": getattr(interaction.channel, "name", str(interaction.channel_id)),
                "user": str(interaction.user),
                "user_id": interaction.user.id,
                "command": command.qualified_name if command else None,
            }

        return context


class ErrorHandler:
    """Error categorization, recovery hints and logging."""

    ERROR_CATEGORIES = {
        "permission": (discord.Forbidden, app_commands.CheckFailure),
        "discord": (discord.NotFound, discord.HTTPException),
        "platform": (PlatformError,),
        "store": (StoreError,),
        "network": (ConnectionError, TimeoutError, OSError),
    }

    RECOVERY_SUGGESTIONS = {
        "permission": "Check the bot's role position and channel permissions",
        "discord": "Discord API issue - check IDs and retry",
        "platform": "Platform call failed - check the bot's permissions",
        "store": "Store inconsistency - check the case number or note number",
        "network": "Network issue - check connectivity",
    }

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, category: str) -> str:
        return cls.RECOVERY_SUGGESTIONS.get(category, "Unexpected error - check logs for details")

    @classmethod
    def handle(
        cls,
        e: BaseException,
        location: str,
        critical: bool = False,
        **context: Any,
    ) -> Dict[str, Any]:
        """
        Log an error with its category and context.

        Args:
            e: The exception.
            location: Where the error occurred.
            critical: Also save the full context to logs/errors.
            **context: Additional context (interaction, user ids, ...).

        Returns:
            The captured context.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(category)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:100]),
            ("Recovery", suggestion),
        ]
        discord_context = full_context.get("discord_context")
        if discord_context:
            details.append(("Command", str(discord_context["command"])))
            details.append(("User", f"{discord_context['user']} ({discord_context['user_id']})"))

        if critical:
            logger.error(f"CRITICAL ERROR [{category.upper()}]", details)
            cls._store_critical_error(full_context)
        else:
            logger.warning(f"ERROR [{category.upper()}]", details)

        return full_context

    @staticmethod
    def _store_critical_error(context: Dict[str, Any], directory: Optional[Path] = None) -> Optional[Path]:
        error_dir = directory or LOGS_DIR / "errors"
        try:
            error_dir.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            error_file = error_dir / f"error_{timestamp}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(context, f, indent=2, default=str)
        except OSError as save_error:
            logger.warning(f"Failed to save error details: {save_error}")
            return None

        logger.info(f"Critical error saved to {error_file}")
        return error_file


GENERIC_ERROR_MESSAGE = "There was an error while executing this command."


async def handle_app_command_error(
    interaction: discord.Interaction,
    error: app_commands.AppCommandError,
) -> None:
    """Catch-all for slash commands: log, then always answer the caller privately."""
    original = getattr(error, "original", error)
    if isinstance(error, app_commands.CheckFailure):
        ErrorHandler.handle(original, location="app_command", interaction=interaction)
        message = "You don't have permission to use this command."
    else:
        ErrorHandler.handle(original, location="app_command", critical=True, interaction=interaction)
        message = GENERIC_ERROR_MESSAGE

    try:
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)
    except discord.HTTPException as e:
        logger.warning("Error Reply Failed", [("Error", str(e)[:100])])


__all__ = [
    "ErrorContext",
    "ErrorHandler",
    "GENERIC_ERROR_MESSAGE",
    "handle_app_command_error",
]
