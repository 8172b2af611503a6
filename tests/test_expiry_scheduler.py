"""
Tests for src/services/expiry_scheduler.py

Covers arming, firing, the re-validation no-op and failure handling of
automatic reversals.
"""

import asyncio

import pytest

from src.core.store import CaseType
from src.services.expiry_scheduler import ExpiryJob, ExpiryScheduler

from tests.conftest import BOT_ID, MEMBER_ID, MOD_CHANNEL, MUTED_ROLE, ROLE_LOG_CHANNEL, ROLE_VIP


def mute_job(**overrides):
    values = dict(
        user_id=MEMBER_ID,
        role_id=MUTED_ROLE,
        delay_seconds=600,
        case_type=CaseType.AUTO_UNMUTE,
        reason="spamming",
        duration_label="10 minutes",
        log_channel_id=MOD_CHANNEL,
        target_name="member#0001",
        moderator_name="mod#0001",
        source_case_number=1,
        notify_target=True,
    )
    values.update(overrides)
    return ExpiryJob(**values)


class TestArming:
    @pytest.mark.asyncio
    async def test_arm_returns_immediately(self, scheduler, manual_sleep):
        handle = scheduler.arm(mute_job())
        await asyncio.sleep(0)

        assert not handle.done
        assert scheduler.pending == [handle]
        assert manual_sleep.delays == [600]

        handle.cancel()

    @pytest.mark.asyncio
    async def test_shutdown_cancels_pending(self, scheduler):
        handle = scheduler.arm(mute_job())
        await asyncio.sleep(0)

        await scheduler.shutdown()

        assert handle.done
        assert scheduler.pending == []


class TestFiring:
    @pytest.mark.asyncio
    async def test_fire_removes_role_and_records_case(self, scheduler, platform, store, manual_sleep):
        platform.add_member(MEMBER_ID, "member#0001", roles=[MUTED_ROLE])

        handle = scheduler.arm(mute_job())
        manual_sleep.release()
        case = await handle.wait()

        assert case.case_type == CaseType.AUTO_UNMUTE
        assert case.moderator_id == BOT_ID
        assert case.reason == "Automatic unmute after 10 minutes mute. Original reason: spamming"
        assert case.extra["original_reason"] == "spamming"
        assert not platform.members[MEMBER_ID].has_role(MUTED_ROLE)
        assert store.get_history(MEMBER_ID)[-1].case_number == case.case_number

        assert [uid for uid, _ in platform.dms] == [MEMBER_ID]
        assert platform.dms[0][1].title == "🔊 Your mute has expired"
        assert case.has_log_message
        assert platform.notices_in(MOD_CHANNEL)[0].title == "🔊 User Automatically Unmuted"

    @pytest.mark.asyncio
    async def test_role_expiry(self, scheduler, platform, manual_sleep):
        platform.add_member(MEMBER_ID, "member#0001", roles=[ROLE_VIP])

        handle = scheduler.arm(mute_job(
            role_id=ROLE_VIP,
            case_type=CaseType.AUTO_ROLE_REMOVE,
            log_channel_id=ROLE_LOG_CHANNEL,
            notify_target=False,
        ))
        manual_sleep.release()
        case = await handle.wait()

        assert case.case_type == CaseType.AUTO_ROLE_REMOVE
        assert case.extra["role_id"] == ROLE_VIP
        assert platform.dms == []
        assert len(platform.notices_in(ROLE_LOG_CHANNEL)) == 1

    @pytest.mark.asyncio
    async def test_noop_when_role_already_removed(self, scheduler, platform, store, manual_sleep):
        handle = scheduler.arm(mute_job())
        manual_sleep.release()

        assert await handle.wait() is None
        assert store.case_count == 0
        assert ("remove_role", MEMBER_ID, MUTED_ROLE) not in platform.calls

    @pytest.mark.asyncio
    async def test_noop_when_member_left(self, scheduler, platform, store, manual_sleep):
        del platform.members[MEMBER_ID]

        handle = scheduler.arm(mute_job())
        manual_sleep.release()

        assert await handle.wait() is None
        assert store.case_count == 0

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, scheduler, platform, store, manual_sleep):
        platform.add_member(MEMBER_ID, "member#0001", roles=[MUTED_ROLE])
        platform.failing.add("remove_role")

        handle = scheduler.arm(mute_job())
        manual_sleep.release()

        assert await handle.wait() is None
        assert store.case_count == 0
        assert platform.calls.count(("remove_role", MEMBER_ID, MUTED_ROLE)) == 1

    @pytest.mark.asyncio
    async def test_notice_failure_keeps_case(self, scheduler, platform, store, manual_sleep):
        platform.add_member(MEMBER_ID, "member#0001", roles=[MUTED_ROLE])
        platform.failing.add("send")

        handle = scheduler.arm(mute_job())
        manual_sleep.release()
        case = await handle.wait()

        assert store.get_case(case.case_number) is case
        assert not case.has_log_message

    @pytest.mark.asyncio
    async def test_real_sleep_zero_delay(self, platform, store, mod_log):
        platform.add_member(MEMBER_ID, "member#0001", roles=[MUTED_ROLE])
        scheduler = ExpiryScheduler(platform, store, mod_log)

        handle = scheduler.arm(mute_job(delay_seconds=0))
        case = await handle.wait()

        assert case is not None
        assert scheduler.pending == []
