"""
CaseKeeper - Platform Package
=============================

Platform contract for the moderation core and its discord.py adapter.
"""

from src.services.platform.base import (
    EmbedEditor,
    LogReference,
    MemberInfo,
    ModerationPlatform,
    PlatformError,
)
from src.services.platform.discord_platform import DiscordPlatform

__all__ = [
    "EmbedEditor",
    "LogReference",
    "MemberInfo",
    "ModerationPlatform",
    "PlatformError",
    "DiscordPlatform",
]
