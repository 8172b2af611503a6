"""
CaseKeeper - Moderation Service
===============================

Action orchestrator: one entry point per moderation action.

DESIGN:
    Every case-producing action runs the same pipeline, with the
    per-action differences read from POLICIES:

        authorize -> validate -> effect -> commit -> notify

    A rejection at any step before commit leaves the ledger, history and
    counters untouched. The case number is allocated only in the commit
    step, after the platform effect succeeded, so a failed ban or role
    change never consumes a number.

    The commit step (counter update plus commit_case) contains no await.

    Mod notes, reason amendment and history lookups are not cases and
    have their own short handlers below.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.core.config import Config
from src.core.logger import logger
from src.core.store import (
    CaseRecord,
    CaseType,
    CounterKind,
    ModerationStore,
    NoteNotFoundError,
    get_store,
)
from src.services.expiry_scheduler import ExpiryJob, ExpiryScheduler
from src.services.mod_log import ModLogService
from src.services.platform import MemberInfo, ModerationPlatform, PlatformError
from src.utils.duration import ParsedDuration, parse_duration

from .policies import (
    PERMISSION_MESSAGES,
    POLICIES,
    ActionPolicy,
    DurationRule,
    LogChannel,
    PermissionTier,
    TargetKind,
    allowed_roles,
)
from .results import ActionRequest, ActionResult, Actor, Rejection


# =============================================================================
# Messages
# =============================================================================

MSG_MEMBER_NOT_FOUND = "I couldn't find that user in this server."
MSG_NOT_BANNED = "That user is not currently banned."
MSG_CHANNEL_NOT_FOUND = "I couldn't find that channel."
MSG_MISSING_USER = "You need to specify a user."
MSG_MISSING_ROLE = "You need to specify a role."
MSG_INVALID_DURATION = "Invalid duration format. Use something like `10m`, `1h`, or `1d`."
MSG_MUTED_ROLE_MISSING = "Muted role not found. Please create it and set its ID in the bot config."
MSG_ROLE_MISSING = "That role doesn't exist."
MSG_NOT_MUTED = "This user is not currently muted."
MSG_ROLE_NOT_HELD = "That member doesn't have that role."
MSG_ROLE_ALREADY_HELD = "That member already has that role."
MSG_ACTOR_OUTRANKED = "You can't manage a role that is equal to or above your highest role."
MSG_BOT_OUTRANKED = "I can't manage that role because it is equal to or above my highest role."
MSG_BOT_MISSING_PERMISSION = "I don't have {permission} permission."
MSG_NO_WARNINGS = "This user has no warnings to remove."
MSG_EMPTY_REASON = "You need to provide a reason."
MSG_WRONG_CONTEXT = "This command can only be used in the history channels."
MSG_EFFECT_FAILED = "I could not {verb} that {target}. Check my permissions and try again."

ORIGINAL_MUTE_REASON_MISSING = "Original mute reason not found."


# =============================================================================
# Pipeline Context
# =============================================================================

@dataclass
class _Pending:
    """State gathered for one action while it moves through the pipeline."""

    policy: ActionPolicy
    actor: Actor
    request: ActionRequest
    user_id: Optional[int] = None
    member: Optional[MemberInfo] = None
    target_name: str = ""
    channel_id: Optional[int] = None
    role_id: Optional[int] = None
    duration: Optional[ParsedDuration] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    dm_lines: List[str] = field(default_factory=list)

    @property
    def duration_label(self) -> Optional[str]:
        return self.duration.label if self.duration else None


# =============================================================================
# Service
# =============================================================================

class ModerationService:
    """
    Orchestrates moderation actions against the store and platform.

    Attributes:
        platform: Chat platform adapter.
        config: Role and channel configuration.
        store: Case ledger, history, counters and notes.
        mod_log: Notice and DM delivery.
        scheduler: Automatic reversal timers.
    """

    def __init__(
        self,
        platform: ModerationPlatform,
        config: Config,
        store: Optional[ModerationStore] = None,
        mod_log: Optional[ModLogService] = None,
        scheduler: Optional[ExpiryScheduler] = None,
    ) -> None:
        self.platform = platform
        self.config = config
        self.store = store if store is not None else get_store()
        self.mod_log = mod_log or ModLogService(platform, config, self.store)
        self.scheduler = scheduler or ExpiryScheduler(platform, self.store, self.mod_log)

    # =========================================================================
    # Case Actions
    # =========================================================================

    async def ban(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.BAN], actor, request)

    async def unban(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.UNBAN], actor, request)

    async def mute(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.MUTE], actor, request)

    async def unmute(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.UNMUTE], actor, request)

    async def kick(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.KICK], actor, request)

    async def warn_add(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.WARN_ADD], actor, request)

    async def warn_remove(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.WARN_REMOVE], actor, request)

    async def role_add(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.ROLE_ADD], actor, request)

    async def role_remove(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.ROLE_REMOVE], actor, request)

    async def role_temp(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.ROLE_TEMP], actor, request)

    async def channel_lock(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.CHANNEL_LOCK], actor, request)

    async def channel_unlock(self, actor: Actor, request: ActionRequest) -> ActionResult:
        return await self._execute(POLICIES[CaseType.CHANNEL_UNLOCK], actor, request)

    # =========================================================================
    # Pipeline
    # =========================================================================

    async def _execute(
        self,
        policy: ActionPolicy,
        actor: Actor,
        request: ActionRequest,
    ) -> ActionResult:
        pending = _Pending(policy=policy, actor=actor, request=request)

        denied = self._authorize(policy.tier, actor)
        if denied:
            return self._blocked(pending, denied)

        invalid = await self._validate(pending)
        if invalid:
            return self._blocked(pending, invalid)

        if policy.notify_target and policy.notify_before_effect:
            await self._notify(pending)

        try:
            await self._apply_effect(pending)
        except PlatformError as e:
            target = "channel" if policy.target == TargetKind.CHANNEL else "user"
            return self._blocked(
                pending,
                ActionResult.reject(
                    Rejection.EXTERNAL_EFFECT_FAILED,
                    MSG_EFFECT_FAILED.format(verb=policy.verb, target=target),
                ),
                error=e.detail,
            )

        case = self._commit(pending)

        if policy.expiry:
            self._arm_expiry(pending, case)

        if policy.notify_target and not policy.notify_before_effect:
            await self._notify(pending)

        await self.mod_log.log_case(
            case,
            self._log_channel(policy),
            pending.target_name,
            actor.name,
        )

        message = policy.success.format(
            target=pending.target_name,
            user_id=pending.user_id,
            duration=pending.duration_label,
            role=pending.role_id,
            channel=pending.channel_id,
            case=case.case_number,
        )
        return ActionResult.ok(message, case=case)

    # -------------------------------------------------------------------------
    # Authorize
    # -------------------------------------------------------------------------

    def _authorize(self, tier: PermissionTier, actor: Actor) -> Optional[ActionResult]:
        if actor.has_any_role(allowed_roles(tier, self.config)):
            return None
        return ActionResult.reject(Rejection.PERMISSION_DENIED, PERMISSION_MESSAGES[tier])

    def _require_context(self, actor: Actor) -> Optional[ActionResult]:
        """History, notes and reason edits are limited to approved channels."""
        if actor.channel_id is not None and actor.channel_id in self.config.history_channel_ids:
            return None
        if (
            self.config.history_category_id is not None
            and actor.category_id == self.config.history_category_id
        ):
            return None
        return ActionResult.reject(Rejection.PERMISSION_DENIED, MSG_WRONG_CONTEXT)

    # -------------------------------------------------------------------------
    # Validate
    # -------------------------------------------------------------------------

    async def _validate(self, pending: _Pending) -> Optional[ActionResult]:
        policy = pending.policy
        request = pending.request

        if policy.bot_permission and not await self.platform.bot_has_permission(policy.bot_permission):
            return ActionResult.reject(
                Rejection.VALIDATION_FAILED,
                MSG_BOT_MISSING_PERMISSION.format(
                    permission=policy.bot_permission.replace("_", " ").title()
                ),
            )

        rejected = await self._resolve_target(pending)
        if rejected:
            return rejected

        if pending.user_id is not None:
            if policy.forbid_self and pending.user_id == pending.actor.user_id:
                return ActionResult.reject(
                    Rejection.VALIDATION_FAILED, f"You can't {policy.verb} yourself."
                )
            if policy.forbid_bot and pending.user_id == self.platform.bot_user_id:
                return ActionResult.reject(
                    Rejection.VALIDATION_FAILED, f"I can't {policy.verb} myself."
                )

        if policy.duration != DurationRule.NONE:
            if request.duration:
                pending.duration = parse_duration(request.duration)
                if pending.duration is None:
                    return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_INVALID_DURATION)
            elif policy.duration == DurationRule.REQUIRED:
                return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_INVALID_DURATION)

        rejected = await self._check_role(pending)
        if rejected:
            return rejected

        return self._prepare_case_details(pending)

    async def _resolve_target(self, pending: _Pending) -> Optional[ActionResult]:
        policy = pending.policy
        request = pending.request

        if policy.target == TargetKind.CHANNEL:
            pending.channel_id = request.channel_id or pending.actor.channel_id
            name = None
            if pending.channel_id is not None:
                name = await self.platform.channel_name(pending.channel_id)
            if name is None:
                return ActionResult.reject(Rejection.NOT_FOUND, MSG_CHANNEL_NOT_FOUND)
            pending.target_name = f"#{name}"
            return None

        if request.user_id is None:
            return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_MISSING_USER)
        pending.user_id = request.user_id

        if policy.case_type == CaseType.UNBAN:
            tag = await self.platform.fetch_ban(request.user_id)
            if tag is None:
                return ActionResult.reject(Rejection.NOT_FOUND, MSG_NOT_BANNED)
            pending.target_name = tag
            return None

        pending.member = await self.platform.fetch_member(request.user_id)
        if pending.member is None:
            if policy.target == TargetKind.MEMBER:
                return ActionResult.reject(Rejection.NOT_FOUND, MSG_MEMBER_NOT_FOUND)
            pending.target_name = f"User ID {request.user_id}"
        else:
            pending.target_name = pending.member.name
        return None

    async def _check_role(self, pending: _Pending) -> Optional[ActionResult]:
        policy = pending.policy
        muted = policy.case_type in (CaseType.MUTE, CaseType.UNMUTE)

        if muted:
            pending.role_id = self.config.muted_role_id
        elif policy.role_hierarchy:
            if pending.request.role_id is None:
                return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_MISSING_ROLE)
            pending.role_id = pending.request.role_id
        else:
            return None

        position = await self.platform.role_position(pending.role_id)
        if position is None:
            return ActionResult.reject(
                Rejection.NOT_FOUND,
                MSG_MUTED_ROLE_MISSING if muted else MSG_ROLE_MISSING,
            )

        if policy.role_hierarchy:
            if pending.actor.top_position <= position:
                return ActionResult.reject(Rejection.PERMISSION_DENIED, MSG_ACTOR_OUTRANKED)
            if await self.platform.bot_top_position() <= position:
                return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_BOT_OUTRANKED)

        if policy.role_held is not None and pending.member is not None:
            holds = pending.member.has_role(pending.role_id)
            if policy.role_held and not holds:
                return ActionResult.reject(
                    Rejection.VALIDATION_FAILED,
                    MSG_NOT_MUTED if muted else MSG_ROLE_NOT_HELD,
                )
            if not policy.role_held and holds:
                return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_ROLE_ALREADY_HELD)
        return None

    def _prepare_case_details(self, pending: _Pending) -> Optional[ActionResult]:
        """Per-type checks against stored state, and the metadata kept with the case."""
        case_type = pending.policy.case_type
        request = pending.request

        if case_type == CaseType.WARN_REMOVE:
            if self.store.get_counter(pending.user_id, pending.policy.counter) <= 0:
                return ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_NO_WARNINGS)
            if request.original_reason:
                pending.extra["original_reason"] = request.original_reason
                pending.dm_lines.append(f"**Reason for Original Warning:** {request.original_reason}")

        elif case_type == CaseType.UNMUTE:
            entry = self.store.latest_history_entry(pending.user_id, CaseType.MUTE)
            original = entry.reason if entry else ORIGINAL_MUTE_REASON_MISSING
            pending.extra["original_reason"] = original
            pending.dm_lines.append(f"**Reason for Original Mute:** {original}")

        elif case_type in (CaseType.ROLE_ADD, CaseType.ROLE_REMOVE, CaseType.ROLE_TEMP):
            pending.extra["role_id"] = pending.role_id

        return None

    # -------------------------------------------------------------------------
    # Effect
    # -------------------------------------------------------------------------

    async def _apply_effect(self, pending: _Pending) -> None:
        case_type = pending.policy.case_type
        reason = pending.request.reason
        user_id = pending.user_id

        if case_type == CaseType.BAN:
            await self.platform.ban(user_id, reason)
        elif case_type == CaseType.UNBAN:
            await self.platform.unban(user_id, reason)
        elif case_type == CaseType.KICK:
            await self.platform.kick(user_id, reason)
        elif case_type in (CaseType.MUTE, CaseType.ROLE_ADD, CaseType.ROLE_TEMP):
            await self.platform.add_role(user_id, pending.role_id, reason)
        elif case_type in (CaseType.UNMUTE, CaseType.ROLE_REMOVE):
            await self.platform.remove_role(user_id, pending.role_id, reason)
        elif case_type in (CaseType.CHANNEL_LOCK, CaseType.CHANNEL_UNLOCK):
            await self.platform.set_channel_locked(
                pending.channel_id,
                case_type == CaseType.CHANNEL_LOCK,
                reason,
            )
        # Warnings have no platform effect.

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    def _commit(self, pending: _Pending) -> CaseRecord:
        """Update counters and record the case. Must not await."""
        policy = pending.policy
        user_id = pending.user_id

        if policy.touch_counters:
            for kind in CounterKind:
                self.store.bump_counter(user_id, kind, 0)

        if policy.counter is not None:
            previous = self.store.get_counter(user_id, policy.counter)
            updated = self.store.bump_counter(user_id, policy.counter, policy.counter_delta)
            if policy.case_type == CaseType.MUTE:
                pending.extra["previous_mutes"] = previous
            else:
                pending.extra[policy.counter.value] = updated

        return self.store.commit_case(
            policy.case_type,
            user_id,
            pending.actor.user_id,
            pending.request.reason,
            duration=pending.duration_label,
            channel_id=pending.channel_id,
            extra=pending.extra,
        )

    # -------------------------------------------------------------------------
    # Notify
    # -------------------------------------------------------------------------

    def _arm_expiry(self, pending: _Pending, case: CaseRecord) -> None:
        policy = pending.policy
        self.scheduler.arm(ExpiryJob(
            user_id=pending.user_id,
            role_id=pending.role_id,
            delay_seconds=pending.duration.seconds,
            case_type=policy.expiry,
            reason=pending.request.reason,
            duration_label=pending.duration.label,
            log_channel_id=self._log_channel(policy),
            target_name=pending.target_name,
            moderator_name=pending.actor.name,
            source_case_number=case.case_number,
            notify_target=policy.expiry == CaseType.AUTO_UNMUTE,
        ))

    async def _notify(self, pending: _Pending) -> bool:
        return await self.mod_log.notify_target(
            pending.user_id,
            pending.policy.case_type,
            pending.request.reason,
            pending.actor.name,
            duration=pending.duration_label,
            extra_lines=pending.dm_lines,
        )

    def _log_channel(self, policy: ActionPolicy) -> int:
        if policy.log_channel == LogChannel.ROLE:
            return self.config.role_log_channel
        return self.config.mod_action_channel_id

    def _blocked(
        self,
        pending: _Pending,
        result: ActionResult,
        error: Optional[str] = None,
    ) -> ActionResult:
        target = pending.user_id or pending.channel_id or pending.request.user_id
        return self._rejected(
            pending.policy.case_type.value,
            pending.actor,
            result,
            target=target,
            error=error,
        )

    # =========================================================================
    # Mod Notes
    # =========================================================================

    async def note_add(self, actor: Actor, request: ActionRequest) -> ActionResult:
        denied = self._authorize(PermissionTier.STAFF, actor)
        if denied:
            return self._rejected("note_add", actor, denied)
        if request.user_id is None:
            return self._rejected(
                "note_add", actor,
                ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_MISSING_USER),
            )
        if not request.reason.strip():
            return self._rejected(
                "note_add", actor,
                ActionResult.reject(Rejection.VALIDATION_FAILED, "You need to provide the note text."),
            )

        target_name = await self._display_name(request.user_id)
        note = self.store.add_note(request.user_id, request.reason, actor.user_id)

        logger.tree("MOD NOTE ADDED", [
            ("User", f"{target_name} ({request.user_id})"),
            ("Note", f"#{note.number}"),
            ("Moderator", f"{actor.name} ({actor.user_id})"),
        ], emoji="📝")

        await self.mod_log.log_note(request.user_id, target_name, note, actor.name)
        return ActionResult.ok(
            f"📝 Added note #{note.number} for **{target_name}**.",
            note=note,
        )

    async def note_remove(self, actor: Actor, request: ActionRequest) -> ActionResult:
        denied = self._authorize(PermissionTier.ADMIN_BOARD, actor)
        if denied:
            return self._rejected("note_remove", actor, denied)
        if request.user_id is None or request.note_number is None:
            return self._rejected(
                "note_remove", actor,
                ActionResult.reject(
                    Rejection.VALIDATION_FAILED, "You need to specify a user and a note number."
                ),
            )

        target_name = await self._display_name(request.user_id)
        try:
            note = self.store.remove_note(request.user_id, request.note_number)
        except NoteNotFoundError:
            return self._rejected(
                "note_remove", actor,
                ActionResult.reject(
                    Rejection.NOT_FOUND,
                    f"Note #{request.note_number} doesn't exist for that user.",
                ),
            )

        logger.tree("MOD NOTE REMOVED", [
            ("User", f"{target_name} ({request.user_id})"),
            ("Note", f"#{note.number}"),
            ("Remaining", str(len(self.store.get_notes(request.user_id)))),
            ("Moderator", f"{actor.name} ({actor.user_id})"),
        ], emoji="🗑️")

        await self.mod_log.log_note(
            request.user_id,
            target_name,
            note,
            actor.name,
            removal_reason=request.reason or "No reason given.",
        )
        return ActionResult.ok(
            f"🗑️ Removed note #{note.number} for **{target_name}**.",
            note=note,
        )

    async def note_show(self, actor: Actor, request: ActionRequest) -> ActionResult:
        denied = self._authorize(PermissionTier.STAFF, actor) or self._require_context(actor)
        if denied:
            return self._rejected("note_show", actor, denied)
        if request.user_id is None:
            return self._rejected(
                "note_show", actor,
                ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_MISSING_USER),
            )

        notes = self.store.get_notes(request.user_id)
        target_name = await self._display_name(request.user_id)
        if not notes:
            message = f"**{target_name}** has no mod notes."
        else:
            message = f"📒 **{target_name}** has {len(notes)} mod note(s)."
        return ActionResult.ok(message, notes=notes, target_name=target_name)

    # =========================================================================
    # Case Amendment & History
    # =========================================================================

    async def update_reason(self, actor: Actor, request: ActionRequest) -> ActionResult:
        """
        Replace a case's reason everywhere it is shown.

        The ledger and every history entry for the case change together;
        the original notice is edited when it exists and an audit notice
        records the old and new reason.
        """
        denied = self._authorize(PermissionTier.STAFF, actor) or self._require_context(actor)
        if denied:
            return self._rejected("update_reason", actor, denied)
        if not request.reason.strip():
            return self._rejected(
                "update_reason", actor,
                ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_EMPTY_REASON),
            )

        case = self.store.get_case(request.case_number) if request.case_number else None
        if case is None:
            return self._rejected(
                "update_reason", actor,
                ActionResult.reject(
                    Rejection.NOT_FOUND, f"Case #{request.case_number} doesn't exist."
                ),
            )

        old_reason = self.store.update_case_reason(case.case_number, request.reason)
        synced = self.store.sync_history_reason(case.case_number, request.reason)

        logger.tree("CASE REASON UPDATED", [
            ("Case", f"#{case.case_number}"),
            ("Old Reason", old_reason[:50]),
            ("New Reason", request.reason[:50]),
            ("History Entries", str(synced)),
            ("Moderator", f"{actor.name} ({actor.user_id})"),
        ], emoji="✏️")

        edited = await self.mod_log.edit_case_reason(case)
        await self.mod_log.log_reason_update(case, old_reason, actor.name)

        return ActionResult.ok(
            f"✏️ Updated the reason for case #{case.case_number}.",
            case=case,
            old_reason=old_reason,
            history_updated=synced,
            notice_edited=edited,
        )

    async def history(self, actor: Actor, request: ActionRequest) -> ActionResult:
        denied = self._authorize(PermissionTier.STAFF, actor) or self._require_context(actor)
        if denied:
            return self._rejected("history", actor, denied)
        if request.user_id is None:
            return self._rejected(
                "history", actor,
                ActionResult.reject(Rejection.VALIDATION_FAILED, MSG_MISSING_USER),
            )

        entries = self.store.get_history(request.user_id)
        target_name = await self._display_name(request.user_id)
        return ActionResult.ok(
            f"📜 **{target_name}** has {len(entries)} case(s) on record.",
            entries=entries,
            counters=self.store.get_counters(request.user_id),
            target_name=target_name,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _display_name(self, user_id: int) -> str:
        """Member name for replies and notices, or "User ID <id>" when unavailable."""
        try:
            member = await self.platform.fetch_member(user_id)
        except PlatformError as e:
            logger.warning("Member Lookup Failed", [
                ("User ID", str(user_id)),
                ("Error", e.detail[:100]),
            ])
            member = None
        return member.name if member else f"User ID {user_id}"

    def _rejected(
        self,
        action: str,
        actor: Actor,
        result: ActionResult,
        target: Optional[int] = None,
        error: Optional[str] = None,
    ) -> ActionResult:
        details = [
            ("Moderator", f"{actor.name} ({actor.user_id})"),
            ("Target", str(target) if target else "-"),
            ("Rejection", result.rejection.value),
            ("Message", result.message),
        ]
        if error:
            details.append(("Error", error[:100]))
        logger.tree(f"{action.upper().replace('_', ' ')} BLOCKED", details, emoji="🚫")
        return result


__all__ = ["ModerationService"]
