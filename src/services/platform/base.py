"""
CaseKeeper - Platform Contract
==============================

Everything the moderation core needs from the chat platform.

DESIGN:
    The orchestrator and expiry scheduler never touch discord.py objects
    directly; they call this interface. Failures of state-changing calls
    surface as PlatformError so the orchestrator can abort before a case
    number is allocated. send_dm() never raises.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional

import discord


# =============================================================================
# Errors & Value Types
# =============================================================================

class PlatformError(Exception):
    """A platform call (ban, role change, message send) failed."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


@dataclass(frozen=True)
class MemberInfo:
    """Snapshot of a guild member at the time it was fetched."""

    id: int
    name: str
    role_ids: FrozenSet[int]
    top_position: int
    is_bot: bool = False

    def has_role(self, role_id: int) -> bool:
        return role_id in self.role_ids


@dataclass(frozen=True)
class LogReference:
    """Where a notice was posted, so it can be edited later."""

    channel_id: int
    message_id: int


EmbedEditor = Callable[[discord.Embed], discord.Embed]


# =============================================================================
# Interface
# =============================================================================

class ModerationPlatform(ABC):
    """Guild-scoped operations used by the moderation core."""

    @property
    @abstractmethod
    def bot_user_id(self) -> int: ...

    @property
    @abstractmethod
    def latency(self) -> float: ...

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_member(self, user_id: int) -> Optional[MemberInfo]:
        """Return the member, or None if they are not in the guild."""

    @abstractmethod
    async def fetch_ban(self, user_id: int) -> Optional[str]:
        """Return the banned user's display tag, or None if not banned."""

    @abstractmethod
    async def role_position(self, role_id: int) -> Optional[int]:
        """Return the role's hierarchy position, or None if it does not exist."""

    @abstractmethod
    async def bot_top_position(self) -> int: ...

    @abstractmethod
    async def bot_has_permission(self, permission: str) -> bool:
        """Whether the bot holds a guild permission, e.g. "ban_members"."""

    @abstractmethod
    async def channel_name(self, channel_id: int) -> Optional[str]:
        """Return the channel's name, or None if it does not exist."""

    # -------------------------------------------------------------------------
    # Notices
    # -------------------------------------------------------------------------

    @abstractmethod
    async def send_dm(self, user_id: int, embed: discord.Embed) -> bool:
        """Direct-message a user. Returns False instead of raising."""

    @abstractmethod
    async def send_embed(self, channel_id: int, embed: discord.Embed) -> LogReference: ...

    @abstractmethod
    async def edit_embed(self, reference: LogReference, editor: EmbedEditor) -> None: ...

    # -------------------------------------------------------------------------
    # Effects
    # -------------------------------------------------------------------------

    @abstractmethod
    async def add_role(self, user_id: int, role_id: int, reason: str) -> None: ...

    @abstractmethod
    async def remove_role(self, user_id: int, role_id: int, reason: str) -> None: ...

    @abstractmethod
    async def ban(self, user_id: int, reason: str) -> None: ...

    @abstractmethod
    async def unban(self, user_id: int, reason: str) -> None: ...

    @abstractmethod
    async def kick(self, user_id: int, reason: str) -> None: ...

    @abstractmethod
    async def set_channel_locked(self, channel_id: int, locked: bool, reason: str) -> None: ...


__all__ = [
    "PlatformError",
    "MemberInfo",
    "LogReference",
    "EmbedEditor",
    "ModerationPlatform",
]
