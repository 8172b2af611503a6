"""
CaseKeeper - Services Package
=============================

Moderation services built on the core store.

Available Services:
    platform: ModerationPlatform contract and the discord.py adapter
    mod_log: Case notices, direct messages and audit notices
    expiry_scheduler: Automatic unmute and temporary role expiry
    moderation: The action orchestrator used by every command
"""

# =============================================================================
# Service Imports
# =============================================================================

from .platform import DiscordPlatform, ModerationPlatform, PlatformError
from .mod_log import ModLogService
from .expiry_scheduler import ExpiryScheduler
from .moderation import ModerationService


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "DiscordPlatform",
    "ModerationPlatform",
    "PlatformError",
    "ModLogService",
    "ExpiryScheduler",
    "ModerationService",
]
