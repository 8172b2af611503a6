"""
Mod Log Embeds
==============

Embed builders for case notices, direct messages and audit notices.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

import discord

from src.core.config import LOCAL_TZ, EmbedColors
from src.core.store.models import CaseRecord, CaseType, HistoryEntry, ModNote


# =============================================================================
# Constants
# =============================================================================

FIELD_LIMIT = 1024
"""Discord's maximum embed field value length."""

REASON_FIELD = "Reason"

CASE_TITLES: Dict[CaseType, Tuple[str, int]] = {
    CaseType.BAN: ("🚫 User Banned", EmbedColors.BAN),
    CaseType.UNBAN: ("✅ User Unbanned", EmbedColors.UNBAN),
    CaseType.MUTE: ("🔇 User Muted", EmbedColors.MUTE),
    CaseType.UNMUTE: ("🔊 User Unmuted", EmbedColors.UNMUTE),
    CaseType.AUTO_UNMUTE: ("🔊 User Automatically Unmuted", EmbedColors.UNMUTE),
    CaseType.KICK: ("👢 User Kicked", EmbedColors.KICK),
    CaseType.WARN_ADD: ("⚠️ User Warned", EmbedColors.WARN_ADD),
    CaseType.WARN_REMOVE: ("✅ Warning Removed", EmbedColors.WARN_REMOVE),
    CaseType.ROLE_ADD: ("➕ Role Added", EmbedColors.ROLE_ADD),
    CaseType.ROLE_REMOVE: ("➖ Role Removed", EmbedColors.ROLE_REMOVE),
    CaseType.ROLE_TEMP: ("⏳ Temporary Role Given", EmbedColors.ROLE_TEMP),
    CaseType.AUTO_ROLE_REMOVE: ("⌛ Temporary Role Expired", EmbedColors.ROLE_REMOVE),
    CaseType.CHANNEL_LOCK: ("🔒 Channel Locked", EmbedColors.CHANNEL_LOCK),
    CaseType.CHANNEL_UNLOCK: ("🔓 Channel Unlocked", EmbedColors.CHANNEL_UNLOCK),
}

DM_TITLES: Dict[CaseType, Tuple[str, str]] = {
    CaseType.BAN: ("🚫 You have been banned", "You have been banned from **{server}**."),
    CaseType.UNBAN: ("✅ You have been unbanned", "You have been unbanned in **{server}**."),
    CaseType.MUTE: ("🔇 You have been muted", "You have been muted in **{server}**."),
    CaseType.UNMUTE: ("🔊 You have been unmuted", "You have been unmuted in **{server}**."),
    CaseType.AUTO_UNMUTE: ("🔊 Your mute has expired", "Your mute in **{server}** has now expired."),
    CaseType.KICK: ("👢 You have been kicked", "You have been kicked from **{server}**."),
    CaseType.WARN_ADD: ("⚠️ You have been warned", "You have received a warning in **{server}**."),
    CaseType.WARN_REMOVE: ("✅ A warning has been removed", "One of your warnings in **{server}** has been removed."),
}

DM_SIGN_OFF = "Thank you,\nBoard of Directors."

EXTRA_FIELD_NAMES = {
    "original_reason": "Reason for Original Action",
    "warns": "Total Warnings",
    "previous_mutes": "Previous Mutes",
    "kicks": "Total Kicks",
}


# =============================================================================
# Helpers
# =============================================================================

def clip(text: Optional[str], limit: int = FIELD_LIMIT) -> str:
    if not text:
        return "-"
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _now() -> datetime:
    return datetime.now(LOCAL_TZ)


# =============================================================================
# Case Notice
# =============================================================================

def build_case_embed(
    case: CaseRecord,
    target_name: str,
    moderator_name: str,
) -> discord.Embed:
    """
    Build the mod-log notice for a committed case.

    The "Reason" field name is fixed so the notice can be found and edited
    when the case reason is amended.
    """
    title, color = CASE_TITLES[case.case_type]
    embed = discord.Embed(title=title, color=color, timestamp=_now())

    if case.user_id is not None:
        embed.add_field(name="User", value=f"{target_name} (<@{case.user_id}>)", inline=True)
        embed.add_field(name="User ID", value=str(case.user_id), inline=True)
    if case.channel_id is not None:
        embed.add_field(name="Channel", value=f"<#{case.channel_id}>", inline=True)
    if "role_id" in case.extra:
        embed.add_field(name="Role", value=f"<@&{case.extra['role_id']}>", inline=True)

    embed.add_field(name=REASON_FIELD, value=clip(case.reason), inline=False)

    if case.duration:
        embed.add_field(name="Duration", value=case.duration, inline=True)

    for key, label in EXTRA_FIELD_NAMES.items():
        if key in case.extra:
            embed.add_field(name=label, value=clip(str(case.extra[key])), inline=True)

    embed.add_field(name="Responsible Moderator", value=moderator_name, inline=False)
    embed.add_field(name="Case Number", value=f"#{case.case_number}", inline=True)
    return embed


def replace_reason(embed: discord.Embed, new_reason: str) -> discord.Embed:
    """Rewrite the Reason field of a case notice in place."""
    for index, field in enumerate(embed.fields):
        if field.name == REASON_FIELD:
            embed.set_field_at(index, name=REASON_FIELD, value=clip(new_reason), inline=field.inline)
            break
    return embed


# =============================================================================
# Direct Message
# =============================================================================

def build_dm_embed(
    case_type: CaseType,
    server_name: str,
    reason: str,
    moderator_name: str,
    duration: Optional[str] = None,
    extra_lines: Optional[List[str]] = None,
) -> discord.Embed:
    title, opening = DM_TITLES[case_type]
    _, color = CASE_TITLES[case_type]

    lines = [opening.format(server=server_name), "", f"**Reason:** {reason}"]
    if duration:
        lines.append(f"**Duration:** {duration}")
    lines.extend(extra_lines or [])
    lines.append(f"**Responsible Moderator:** {moderator_name}")
    lines.extend(["", DM_SIGN_OFF])

    return discord.Embed(
        title=title,
        color=color,
        description="\n".join(lines),
        timestamp=_now(),
    )


# =============================================================================
# Audit Notices
# =============================================================================

def build_reason_update_embed(
    case: CaseRecord,
    old_reason: str,
    moderator_name: str,
) -> discord.Embed:
    embed = discord.Embed(
        title="✏️ Case Reason Updated",
        color=EmbedColors.REASON_UPDATE,
        timestamp=_now(),
    )
    embed.add_field(name="Case Number", value=f"#{case.case_number}", inline=True)
    embed.add_field(name="Case Type", value=case.case_type.value, inline=True)
    embed.add_field(name="Old Reason", value=clip(old_reason), inline=False)
    embed.add_field(name="New Reason", value=clip(case.reason), inline=False)
    embed.add_field(name="Updated By", value=moderator_name, inline=False)
    return embed


def build_note_embed(
    user_id: int,
    target_name: str,
    note: ModNote,
    moderator_name: str,
    removal_reason: Optional[str] = None,
) -> discord.Embed:
    removed = removal_reason is not None
    embed = discord.Embed(
        title="🗑️ Mod Note Removed" if removed else "📝 Mod Note Added",
        color=EmbedColors.MODNOTE_REMOVE if removed else EmbedColors.MODNOTE_ADD,
        timestamp=_now(),
    )
    embed.add_field(name="User", value=f"{target_name} (<@{user_id}>)", inline=True)
    embed.add_field(name="Note Number", value=f"#{note.number}", inline=True)
    embed.add_field(name="Note", value=clip(note.text), inline=False)
    if removed:
        embed.add_field(name="Reason for Removal", value=clip(removal_reason), inline=False)
    embed.add_field(name="Responsible Moderator", value=moderator_name, inline=False)
    return embed


# =============================================================================
# Lookups
# =============================================================================

HISTORY_LIMIT = 20
"""Most recent entries shown; Discord caps an embed at 25 fields."""


def build_history_embed(
    user_id: int,
    target_name: str,
    entries: List[HistoryEntry],
    counters: Dict[str, int],
) -> discord.Embed:
    embed = discord.Embed(
        title=f"📜 History for {target_name}",
        color=EmbedColors.HISTORY,
        description=(
            f"<@{user_id}>\n"
            f"**Warnings:** {counters.get('warns', 0)} | "
            f"**Mutes:** {counters.get('mutes', 0)} | "
            f"**Kicks:** {counters.get('kicks', 0)}"
        ),
        timestamp=_now(),
    )

    if not entries:
        embed.add_field(name="No cases", value="This user has a clean record.", inline=False)
        return embed

    for entry in entries[-HISTORY_LIMIT:]:
        when = datetime.fromtimestamp(entry.timestamp, LOCAL_TZ).strftime("%Y-%m-%d %H:%M")
        lines = [f"**Reason:** {entry.reason}", f"**Moderator:** <@{entry.moderator_id}>"]
        if entry.duration:
            lines.append(f"**Duration:** {entry.duration}")
        embed.add_field(
            name=f"#{entry.case_number} \u2022 {entry.case_type.value} \u2022 {when}",
            value=clip("\n".join(lines)),
            inline=False,
        )

    if len(entries) > HISTORY_LIMIT:
        embed.set_footer(text=f"Showing the latest {HISTORY_LIMIT} of {len(entries)} cases")
    return embed


def build_notes_embed(user_id: int, target_name: str, notes: List[ModNote]) -> discord.Embed:
    embed = discord.Embed(
        title=f"📒 Mod Notes for {target_name}",
        color=EmbedColors.MODNOTE_SHOW,
        description=f"<@{user_id}>",
        timestamp=_now(),
    )
    if not notes:
        embed.add_field(name="No notes", value="There are no notes for this user.", inline=False)
    for note in notes[:HISTORY_LIMIT]:
        embed.add_field(
            name=f"Note #{note.number}",
            value=clip(f"{note.text}\n*by <@{note.moderator_id}>*"),
            inline=False,
        )
    return embed


__all__ = [
    "FIELD_LIMIT",
    "REASON_FIELD",
    "CASE_TITLES",
    "DM_TITLES",
    "clip",
    "build_case_embed",
    "replace_reason",
    "build_dm_embed",
    "build_reason_update_embed",
    "build_note_embed",
    "build_history_embed",
    "build_notes_embed",
]
