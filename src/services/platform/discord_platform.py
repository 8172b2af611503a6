"""
CaseKeeper - Discord Platform Adapter
=====================================

ModerationPlatform implementation over discord.py.

DESIGN:
    Every discord.HTTPException (Forbidden and NotFound included) raised by
    a state-changing call is re-raised as PlatformError, so callers only
    handle one failure type.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Optional

import discord

from src.core.logger import logger
from src.services.platform.base import (
    EmbedEditor,
    LogReference,
    MemberInfo,
    ModerationPlatform,
    PlatformError,
)

if TYPE_CHECKING:
    from discord.ext import commands


def member_info(member: discord.Member) -> MemberInfo:
    return MemberInfo(
        id=member.id,
        name=str(member),
        role_ids=frozenset(role.id for role in member.roles),
        top_position=member.top_role.position,
        is_bot=member.bot,
    )


class DiscordPlatform(ModerationPlatform):
    """Guild-scoped adapter around a running discord.py bot."""

    def __init__(self, bot: "commands.Bot", guild_id: int) -> None:
        self.bot = bot
        self.guild_id = guild_id

    # =========================================================================
    # Helpers
    # =========================================================================

    @property
    def guild(self) -> discord.Guild:
        guild = self.bot.get_guild(self.guild_id)
        if guild is None:
            raise PlatformError("guild lookup", f"guild {self.guild_id} is not available")
        return guild

    @staticmethod
    async def _call(operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await awaitable
        except discord.HTTPException as e:
            logger.error("Platform Call Failed", [
                ("Operation", operation),
                ("Status", str(e.status)),
                ("Error", str(e)[:100]),
            ])
            raise PlatformError(operation, str(e)) from e

    async def _messageable(self, channel_id: int) -> discord.abc.Messageable:
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            channel = await self._call("fetch channel", self.bot.fetch_channel(channel_id))
        if not isinstance(channel, discord.abc.Messageable):
            raise PlatformError("send", f"channel {channel_id} is not text based")
        return channel

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def bot_user_id(self) -> int:
        return self.bot.user.id

    @property
    def latency(self) -> float:
        return self.bot.latency

    # =========================================================================
    # Lookups
    # =========================================================================

    async def fetch_member(self, user_id: int) -> Optional[MemberInfo]:
        guild = self.guild
        member = guild.get_member(user_id)
        if member is None:
            try:
                member = await guild.fetch_member(user_id)
            except discord.NotFound:
                return None
            except discord.HTTPException as e:
                raise PlatformError("fetch member", str(e)) from e
        return member_info(member)

    async def fetch_ban(self, user_id: int) -> Optional[str]:
        try:
            entry = await self.guild.fetch_ban(discord.Object(id=user_id))
        except discord.NotFound:
            return None
        except discord.HTTPException as e:
            raise PlatformError("fetch ban", str(e)) from e
        return str(entry.user)

    async def role_position(self, role_id: int) -> Optional[int]:
        role = self.guild.get_role(role_id)
        return role.position if role else None

    async def bot_top_position(self) -> int:
        return self.guild.me.top_role.position

    async def bot_has_permission(self, permission: str) -> bool:
        return getattr(self.guild.me.guild_permissions, permission, False)

    async def channel_name(self, channel_id: int) -> Optional[str]:
        channel = self.guild.get_channel(channel_id)
        return channel.name if channel else None

    # =========================================================================
    # Notices
    # =========================================================================

    async def send_dm(self, user_id: int, embed: discord.Embed) -> bool:
        try:
            user = self.bot.get_user(user_id) or await self.bot.fetch_user(user_id)
            await user.send(embed=embed)
            return True
        except discord.HTTPException:
            logger.debug(f"DM to {user_id} not delivered")
            return False

    async def send_embed(self, channel_id: int, embed: discord.Embed) -> LogReference:
        channel = await self._messageable(channel_id)
        message = await self._call("send notice", channel.send(embed=embed))
        return LogReference(channel_id=channel_id, message_id=message.id)

    async def edit_embed(self, reference: LogReference, editor: EmbedEditor) -> None:
        channel = await self._messageable(reference.channel_id)
        message = await self._call("fetch notice", channel.fetch_message(reference.message_id))
        if not message.embeds:
            raise PlatformError("edit notice", f"message {reference.message_id} has no embed")
        await self._call("edit notice", message.edit(embed=editor(message.embeds[0].copy())))

    # =========================================================================
    # Effects
    # =========================================================================

    async def add_role(self, user_id: int, role_id: int, reason: str) -> None:
        member = self.guild.get_member(user_id) or await self._call(
            "fetch member", self.guild.fetch_member(user_id)
        )
        await self._call("add role", member.add_roles(discord.Object(id=role_id), reason=reason))

    async def remove_role(self, user_id: int, role_id: int, reason: str) -> None:
        member = self.guild.get_member(user_id) or await self._call(
            "fetch member", self.guild.fetch_member(user_id)
        )
        await self._call("remove role", member.remove_roles(discord.Object(id=role_id), reason=reason))

    async def ban(self, user_id: int, reason: str) -> None:
        await self._call("ban", self.guild.ban(discord.Object(id=user_id), reason=reason))

    async def unban(self, user_id: int, reason: str) -> None:
        await self._call("unban", self.guild.unban(discord.Object(id=user_id), reason=reason))

    async def kick(self, user_id: int, reason: str) -> None:
        await self._call("kick", self.guild.kick(discord.Object(id=user_id), reason=reason))

    async def set_channel_locked(self, channel_id: int, locked: bool, reason: str) -> None:
        """Deny (or clear the denial of) Send Messages for @everyone."""
        guild = self.guild
        channel = guild.get_channel(channel_id)
        if channel is None:
            raise PlatformError("channel lock", f"channel {channel_id} not found")

        overwrite = channel.overwrites_for(guild.default_role)
        overwrite.send_messages = False if locked else None
        await self._call(
            "channel lock" if locked else "channel unlock",
            channel.set_permissions(guild.default_role, overwrite=overwrite, reason=reason),
        )


__all__ = ["DiscordPlatform", "member_info"]
