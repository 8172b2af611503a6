"""
Mod Log Service
===============

Sends case notices to the mod-log channels and direct messages to targets.

DESIGN:
    Notification failures never undo a committed case. A notice that could
    not be sent leaves the case without a log reference, and later reason
    amendments skip the notice edit.
"""

from typing import List, Optional

from src.core.config import Config
from src.core.logger import logger
from src.core.store import CaseRecord, CaseType, ModerationStore, ModNote
from src.services.platform import LogReference, ModerationPlatform, PlatformError

from .embeds import (
    build_case_embed,
    build_dm_embed,
    build_note_embed,
    build_reason_update_embed,
    replace_reason,
)


class ModLogService:
    """Renders and delivers moderation notices."""

    def __init__(
        self,
        platform: ModerationPlatform,
        config: Config,
        store: ModerationStore,
    ) -> None:
        self.platform = platform
        self.config = config
        self.store = store

    # =========================================================================
    # Direct Messages
    # =========================================================================

    async def notify_target(
        self,
        user_id: int,
        case_type: CaseType,
        reason: str,
        moderator_name: str,
        duration: Optional[str] = None,
        extra_lines: Optional[List[str]] = None,
    ) -> bool:
        """DM the target of an action. Returns whether it was delivered."""
        embed = build_dm_embed(
            case_type,
            self.config.server_name,
            reason,
            moderator_name,
            duration=duration,
            extra_lines=extra_lines,
        )
        delivered = await self.platform.send_dm(user_id, embed)
        if not delivered:
            logger.tree("DM NOT DELIVERED", [
                ("User ID", str(user_id)),
                ("Action", case_type.value),
            ], emoji="📪")
        return delivered

    # =========================================================================
    # Case Notices
    # =========================================================================

    async def log_case(
        self,
        case: CaseRecord,
        channel_id: int,
        target_name: str,
        moderator_name: str,
    ) -> Optional[LogReference]:
        """
        Post the notice for a committed case and attach its reference.

        Returns:
            The reference, or None when the notice could not be sent.
        """
        embed = build_case_embed(case, target_name, moderator_name)
        reference = await self._send(channel_id, embed, f"Case #{case.case_number}")
        if reference is not None:
            self.store.set_case_log_reference(
                case.case_number,
                reference.channel_id,
                reference.message_id,
            )
        return reference

    async def edit_case_reason(self, case: CaseRecord) -> bool:
        """
        Rewrite the Reason field on a case's existing notice.

        Returns:
            False when the case has no notice or the edit failed.
        """
        if not case.has_log_message:
            return False

        reference = LogReference(case.log_channel_id, case.log_message_id)
        try:
            await self.platform.edit_embed(
                reference,
                lambda embed: replace_reason(embed, case.reason),
            )
        except PlatformError as e:
            logger.warning("Mod Log: Notice Edit Failed", [
                ("Case", f"#{case.case_number}"),
                ("Error", e.detail[:100]),
            ])
            return False
        return True

    async def log_reason_update(
        self,
        case: CaseRecord,
        old_reason: str,
        moderator_name: str,
    ) -> Optional[LogReference]:
        embed = build_reason_update_embed(case, old_reason, moderator_name)
        return await self._send(
            self.config.mod_action_channel_id,
            embed,
            f"Reason update #{case.case_number}",
        )

    async def log_note(
        self,
        user_id: int,
        target_name: str,
        note: ModNote,
        moderator_name: str,
        removal_reason: Optional[str] = None,
    ) -> Optional[LogReference]:
        embed = build_note_embed(user_id, target_name, note, moderator_name, removal_reason)
        return await self._send(
            self.config.mod_action_channel_id,
            embed,
            f"Note #{note.number}",
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _send(self, channel_id: int, embed, label: str) -> Optional[LogReference]:
        try:
            return await self.platform.send_embed(channel_id, embed)
        except PlatformError as e:
            logger.warning("Mod Log: Notice Not Sent", [
                ("Notice", label),
                ("Channel", str(channel_id)),
                ("Error", e.detail[:100]),
            ])
            return None


__all__ = ["ModLogService"]
