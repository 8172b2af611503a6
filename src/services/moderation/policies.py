"""
CaseKeeper - Action Policies
============================

Declarative table describing every case-producing action.

DESIGN:
    ModerationService runs one pipeline for all actions and reads the
    per-action differences from POLICIES: who may run it, what kind of
    target it needs, whether a duration is required, which counter moves
    and whether an expiry is armed. Adding an action means adding a row
    here plus its platform effect in the service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from src.core.config import Config
from src.core.store.models import CaseType, CounterKind


# =============================================================================
# Enums
# =============================================================================

class PermissionTier(str, Enum):
    STAFF = "staff"
    BOARD = "board"
    ADMIN_BOARD = "admin_board"
    ROLE_MANAGEMENT = "role_management"
    ROLE_TEMP = "role_temp"


class TargetKind(str, Enum):
    MEMBER = "member"  # must currently be in the guild
    USER = "user"
    CHANNEL = "channel"


class DurationRule(str, Enum):
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class LogChannel(str, Enum):
    MOD = "mod"
    ROLE = "role"


# =============================================================================
# Permission Tiers
# =============================================================================

PERMISSION_MESSAGES: Dict[PermissionTier, str] = {
    PermissionTier.STAFF: (
        "You don't have the required role to use this command. "
        "Allowed: Moderator, Administrator, Board of Directors."
    ),
    PermissionTier.BOARD: "Only the Board of Directors can use this command.",
    PermissionTier.ADMIN_BOARD: (
        "Only Administrators and the Board of Directors can use this command."
    ),
    PermissionTier.ROLE_MANAGEMENT: "You don't have permission to manage roles.",
    PermissionTier.ROLE_TEMP: (
        "Only Administrators and the Board of Directors can give temporary roles."
    ),
}


def allowed_roles(tier: PermissionTier, config: Config) -> FrozenSet[int]:
    """Resolve a tier to the role IDs that satisfy it."""
    if tier == PermissionTier.STAFF:
        return config.staff_roles
    if tier == PermissionTier.BOARD:
        return config.board_roles
    if tier == PermissionTier.ADMIN_BOARD:
        return config.admin_board_roles
    if tier == PermissionTier.ROLE_MANAGEMENT:
        return config.role_management_roles
    return config.role_temp_roles


# =============================================================================
# Policy Table
# =============================================================================

@dataclass(frozen=True)
class ActionPolicy:
    """
    Rules for one case-producing action.

    Attributes:
        case_type: Case recorded on success.
        tier: Roles allowed to run it.
        verb: Used in log titles and self/bot refusal messages.
        target: What the action is aimed at.
        forbid_self: Refuse when the target is the invoker.
        forbid_bot: Refuse when the target is the bot itself.
        bot_permission: Guild permission the bot must hold before acting.
        duration: Whether a duration token is accepted or required.
        role_hierarchy: Check invoker and bot both outrank the role.
        role_held: True if the target must hold the role, False if it must
            lack it, None for no check.
        counter: Counter moved on commit, with counter_delta.
        touch_counters: Initialize all counters for the target.
        notify_before_effect: DM the target before the effect is applied.
        notify_target: DM the target at all.
        log_channel: Which channel receives the case notice.
        expiry: Case type recorded by the automatic reversal, if any.
        success: Reply template for the invoker.
    """

    case_type: CaseType
    tier: PermissionTier
    verb: str
    success: str
    target: TargetKind = TargetKind.MEMBER
    forbid_self: bool = False
    forbid_bot: bool = False
    bot_permission: Optional[str] = None
    duration: DurationRule = DurationRule.NONE
    role_hierarchy: bool = False
    role_held: Optional[bool] = None
    counter: Optional[CounterKind] = None
    counter_delta: int = 0
    touch_counters: bool = False
    notify_before_effect: bool = False
    notify_target: bool = False
    log_channel: LogChannel = LogChannel.MOD
    expiry: Optional[CaseType] = None


POLICIES: Dict[CaseType, ActionPolicy] = {
    CaseType.BAN: ActionPolicy(
        case_type=CaseType.BAN,
        tier=PermissionTier.STAFF,
        verb="ban",
        success="🚨 **{target}** successfully banned. (Case #{case})",
        forbid_self=True,
        forbid_bot=True,
        bot_permission="ban_members",
        touch_counters=True,
        notify_before_effect=True,
        notify_target=True,
    ),
    CaseType.UNBAN: ActionPolicy(
        case_type=CaseType.UNBAN,
        tier=PermissionTier.BOARD,
        verb="unban",
        success="✅ Successfully unbanned **{target}** (ID: {user_id}). (Case #{case})",
        target=TargetKind.USER,
        bot_permission="ban_members",
        notify_target=True,
    ),
    CaseType.MUTE: ActionPolicy(
        case_type=CaseType.MUTE,
        tier=PermissionTier.STAFF,
        verb="mute",
        success="🔇 **{target}** successfully muted for **{duration}** (Case #{case}).",
        forbid_self=True,
        forbid_bot=True,
        duration=DurationRule.REQUIRED,
        counter=CounterKind.MUTES,
        counter_delta=1,
        notify_target=True,
        expiry=CaseType.AUTO_UNMUTE,
    ),
    CaseType.UNMUTE: ActionPolicy(
        case_type=CaseType.UNMUTE,
        tier=PermissionTier.STAFF,
        verb="unmute",
        success="🔊 **{target}** successfully unmuted (Case #{case}).",
        role_held=True,
        notify_target=True,
    ),
    CaseType.KICK: ActionPolicy(
        case_type=CaseType.KICK,
        tier=PermissionTier.STAFF,
        verb="kick",
        success="👢 **{target}** successfully kicked. (Case #{case})",
        forbid_self=True,
        forbid_bot=True,
        bot_permission="kick_members",
        duration=DurationRule.OPTIONAL,
        counter=CounterKind.KICKS,
        counter_delta=1,
        notify_before_effect=True,
        notify_target=True,
    ),
    CaseType.WARN_ADD: ActionPolicy(
        case_type=CaseType.WARN_ADD,
        tier=PermissionTier.STAFF,
        verb="warn",
        success="⚠️ **{target}** has been warned. (Case #{case})",
        forbid_self=True,
        forbid_bot=True,
        counter=CounterKind.WARNS,
        counter_delta=1,
        notify_target=True,
    ),
    CaseType.WARN_REMOVE: ActionPolicy(
        case_type=CaseType.WARN_REMOVE,
        tier=PermissionTier.STAFF,
        verb="remove a warning from",
        success="✅ Removed a warning from **{target}**. (Case #{case})",
        target=TargetKind.USER,
        counter=CounterKind.WARNS,
        counter_delta=-1,
        notify_target=True,
    ),
    CaseType.ROLE_ADD: ActionPolicy(
        case_type=CaseType.ROLE_ADD,
        tier=PermissionTier.ROLE_MANAGEMENT,
        verb="add a role to",
        success="➕ Added <@&{role}> to **{target}**. (Case #{case})",
        role_hierarchy=True,
        role_held=False,
        log_channel=LogChannel.ROLE,
    ),
    CaseType.ROLE_REMOVE: ActionPolicy(
        case_type=CaseType.ROLE_REMOVE,
        tier=PermissionTier.ROLE_MANAGEMENT,
        verb="remove a role from",
        success="➖ Removed <@&{role}> from **{target}**. (Case #{case})",
        role_hierarchy=True,
        role_held=True,
        log_channel=LogChannel.ROLE,
    ),
    CaseType.ROLE_TEMP: ActionPolicy(
        case_type=CaseType.ROLE_TEMP,
        tier=PermissionTier.ROLE_TEMP,
        verb="give a temporary role to",
        success="⏳ Gave <@&{role}> to **{target}** for **{duration}**. (Case #{case})",
        duration=DurationRule.REQUIRED,
        role_hierarchy=True,
        role_held=False,
        log_channel=LogChannel.ROLE,
        expiry=CaseType.AUTO_ROLE_REMOVE,
    ),
    CaseType.CHANNEL_LOCK: ActionPolicy(
        case_type=CaseType.CHANNEL_LOCK,
        tier=PermissionTier.ADMIN_BOARD,
        verb="lock",
        success="🔒 Locked <#{channel}>. (Case #{case})",
        target=TargetKind.CHANNEL,
    ),
    CaseType.CHANNEL_UNLOCK: ActionPolicy(
        case_type=CaseType.CHANNEL_UNLOCK,
        tier=PermissionTier.ADMIN_BOARD,
        verb="unlock",
        success="🔓 Unlocked <#{channel}>. (Case #{case})",
        target=TargetKind.CHANNEL,
    ),
}


__all__ = [
    "PermissionTier",
    "TargetKind",
    "DurationRule",
    "LogChannel",
    "PERMISSION_MESSAGES",
    "allowed_roles",
    "ActionPolicy",
    "POLICIES",
]
