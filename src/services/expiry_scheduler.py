"""
CaseKeeper - Expiry Scheduler
=============================

Deferred automatic reversal of time-bounded actions.

DESIGN:
    Each armed job is its own asyncio task that sleeps for the job's delay
    and then removes the role if the member still holds it, recording an
    automatic case attributed to the bot.

    Timers live in memory only and die with the process. A manual reversal
    does not cancel the job; the fire finds the role already gone and does
    nothing. Failures during a fire are logged and not retried.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Set

from src.core.logger import logger
from src.core.store import CaseRecord, CaseType, ModerationStore
from src.services.mod_log import ModLogService
from src.services.platform import ModerationPlatform


SleepFunc = Callable[[float], Awaitable[None]]

AUTOMATIC_MODERATOR = "Automatic Timer"

AUTO_REASONS = {
    CaseType.AUTO_UNMUTE: "Automatic unmute after {duration} mute. Original reason: {reason}",
    CaseType.AUTO_ROLE_REMOVE: "Automatic role removal after {duration}. Original reason: {reason}",
}

AUDIT_REASONS = {
    CaseType.AUTO_UNMUTE: "Automatic unmute after mute duration elapsed",
    CaseType.AUTO_ROLE_REMOVE: "Temporary role duration elapsed",
}


# =============================================================================
# Jobs & Handles
# =============================================================================

@dataclass(frozen=True)
class ExpiryJob:
    """
    A pending automatic reversal.

    Attributes:
        user_id: Member losing the role.
        role_id: Role to remove.
        delay_seconds: Time until the fire.
        case_type: AUTO_UNMUTE or AUTO_ROLE_REMOVE.
        reason: Reason of the action being reversed.
        duration_label: Display label of the original duration.
        log_channel_id: Channel receiving the automatic case notice.
        target_name: Display tag of the member, for notices.
        moderator_name: Who applied the original action.
        source_case_number: Case that armed this job.
        notify_target: DM the member when the job fires.
    """

    user_id: int
    role_id: int
    delay_seconds: float
    case_type: CaseType
    reason: str
    duration_label: str
    log_channel_id: int
    target_name: str = ""
    moderator_name: str = ""
    source_case_number: Optional[int] = None
    notify_target: bool = False

    @property
    def automatic_reason(self) -> str:
        return AUTO_REASONS[self.case_type].format(
            duration=self.duration_label,
            reason=self.reason,
        )


class ExpiryHandle:
    """Handle on an armed job."""

    def __init__(self, job: ExpiryJob, task: "asyncio.Task[Optional[CaseRecord]]") -> None:
        self.job = job
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> bool:
        return self._task.cancel()

    async def wait(self) -> Optional[CaseRecord]:
        """Wait for the fire. Returns the automatic case, or None for a no-op."""
        return await self._task


# =============================================================================
# Scheduler
# =============================================================================

class ExpiryScheduler:
    """Arms and fires automatic reversal jobs."""

    def __init__(
        self,
        platform: ModerationPlatform,
        store: ModerationStore,
        mod_log: ModLogService,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.platform = platform
        self.store = store
        self.mod_log = mod_log
        self._sleep = sleep
        self._handles: Set[ExpiryHandle] = set()

    @property
    def pending(self) -> List[ExpiryHandle]:
        return [handle for handle in self._handles if not handle.done]

    def arm(self, job: ExpiryJob) -> ExpiryHandle:
        """Start the timer for a job and return immediately."""
        task = asyncio.create_task(self._run(job))
        handle = ExpiryHandle(job, task)
        self._handles.add(handle)
        task.add_done_callback(lambda _: self._handles.discard(handle))

        logger.tree("EXPIRY ARMED", [
            ("User ID", str(job.user_id)),
            ("Type", job.case_type.value),
            ("Duration", job.duration_label),
            ("Source Case", f"#{job.source_case_number}" if job.source_case_number else "-"),
        ], emoji="⏰")
        return handle

    async def shutdown(self) -> None:
        """Cancel every outstanding timer."""
        handles = list(self._handles)
        for handle in handles:
            handle.cancel()
        if handles:
            await asyncio.gather(*(h._task for h in handles), return_exceptions=True)
        self._handles.clear()
        logger.info(f"Expiry Scheduler Stopped ({len(handles)} timers cancelled)")

    # =========================================================================
    # Firing
    # =========================================================================

    async def _run(self, job: ExpiryJob) -> Optional[CaseRecord]:
        await self._sleep(job.delay_seconds)
        try:
            return await self._fire(job)
        except Exception as e:
            logger.error("Expiry Fire Failed", [
                ("User ID", str(job.user_id)),
                ("Type", job.case_type.value),
                ("Error", str(e)[:100]),
            ])
            return None

    async def _fire(self, job: ExpiryJob) -> Optional[CaseRecord]:
        member = await self.platform.fetch_member(job.user_id)
        if member is None or not member.has_role(job.role_id):
            logger.debug(
                f"Expiry skipped for {job.user_id}: "
                f"{'member left' if member is None else 'role already removed'}"
            )
            return None

        await self.platform.remove_role(job.user_id, job.role_id, AUDIT_REASONS[job.case_type])

        extra = {"original_reason": job.reason}
        if job.case_type == CaseType.AUTO_ROLE_REMOVE:
            extra["role_id"] = job.role_id

        case = self.store.commit_case(
            job.case_type,
            job.user_id,
            self.platform.bot_user_id,
            job.automatic_reason,
            extra=extra,
        )

        logger.tree("EXPIRY FIRED", [
            ("User", f"{member.name} ({member.id})"),
            ("Type", job.case_type.value),
            ("Case", f"#{case.case_number}"),
        ], emoji="⌛")

        if job.notify_target:
            await self.mod_log.notify_target(
                job.user_id,
                job.case_type,
                job.reason,
                job.moderator_name,
                duration=job.duration_label,
            )
        await self.mod_log.log_case(
            case,
            job.log_channel_id,
            job.target_name or member.name,
            AUTOMATIC_MODERATOR,
        )
        return case


__all__ = [
    "AUTOMATIC_MODERATOR",
    "ExpiryJob",
    "ExpiryHandle",
    "ExpiryScheduler",
]
