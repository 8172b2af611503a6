"""
Tests for src/services/mod_log
"""

import pytest

from src.core.store import CaseRecord, CaseType, HistoryEntry, ModNote
from src.services.mod_log import (
    REASON_FIELD,
    build_case_embed,
    build_dm_embed,
    build_history_embed,
    build_notes_embed,
    replace_reason,
)
from src.services.mod_log.embeds import FIELD_LIMIT, HISTORY_LIMIT, clip

from tests.conftest import MEMBER_ID, MOD_CHANNEL, MOD_ID, ROLE_VIP


def fields(embed):
    return {f.name: f.value for f in embed.fields}


def make_case(number=1, case_type=CaseType.WARN_ADD, **kwargs):
    defaults = dict(user_id=MEMBER_ID, moderator_id=MOD_ID, reason="spamming")
    defaults.update(kwargs)
    return CaseRecord(case_number=number, case_type=case_type, **defaults)


# =============================================================================
# Embed Builders
# =============================================================================

class TestCaseEmbed:
    def test_user_case(self):
        case = make_case(case_type=CaseType.MUTE, duration="10 minutes",
                         extra={"previous_mutes": 2})

        embed = build_case_embed(case, "member#0001", "mod#0001")
        values = fields(embed)

        assert embed.title == "🔇 User Muted"
        assert values["User ID"] == str(MEMBER_ID)
        assert values[REASON_FIELD] == "spamming"
        assert values["Duration"] == "10 minutes"
        assert values["Previous Mutes"] == "2"
        assert values["Case Number"] == "#1"
        assert "Channel" not in values

    def test_channel_case(self):
        case = make_case(case_type=CaseType.CHANNEL_LOCK, user_id=None, channel_id=MOD_CHANNEL)

        values = fields(build_case_embed(case, "#mod-actions", "admin#0001"))

        assert values["Channel"] == f"<#{MOD_CHANNEL}>"
        assert "User" not in values

    def test_role_case(self):
        case = make_case(case_type=CaseType.ROLE_ADD, extra={"role_id": ROLE_VIP})
        assert fields(build_case_embed(case, "x", "y"))["Role"] == f"<@&{ROLE_VIP}>"

    def test_long_reason_is_clipped(self):
        case = make_case(reason="a" * 2000)

        value = fields(build_case_embed(case, "x", "y"))[REASON_FIELD]

        assert len(value) == FIELD_LIMIT
        assert value.endswith("...")

    def test_replace_reason_keeps_other_fields(self):
        embed = build_case_embed(make_case(), "member#0001", "mod#0001")
        before = [f.name for f in embed.fields]

        replace_reason(embed, "corrected")

        assert [f.name for f in embed.fields] == before
        assert fields(embed)[REASON_FIELD] == "corrected"


class TestDmEmbed:
    def test_contents(self):
        embed = build_dm_embed(
            CaseType.WARN_REMOVE,
            "Test Server",
            "appeal",
            "mod#0001",
            extra_lines=["**Reason for Original Warning:** rude"],
        )

        assert embed.title == "✅ A warning has been removed"
        assert "**Test Server**" in embed.description
        assert "**Reason for Original Warning:** rude" in embed.description
        assert embed.description.endswith("Board of Directors.")

    def test_duration_line(self):
        embed = build_dm_embed(CaseType.MUTE, "S", "x", "m", duration="1 hour")
        assert "**Duration:** 1 hour" in embed.description


class TestLookupEmbeds:
    def test_history_limit(self):
        entries = [
            HistoryEntry.from_case(make_case(number=n)) for n in range(1, HISTORY_LIMIT + 6)
        ]

        embed = build_history_embed(MEMBER_ID, "member#0001", entries, {"warns": 3})

        assert len(embed.fields) == HISTORY_LIMIT
        assert embed.fields[0].name.startswith("#6 ")
        assert "**Warnings:** 3" in embed.description
        assert "**Mutes:** 0" in embed.description
        assert embed.footer.text == f"Showing the latest {HISTORY_LIMIT} of {HISTORY_LIMIT + 5} cases"

    def test_empty_history(self):
        embed = build_history_embed(MEMBER_ID, "x", [], {})
        assert embed.fields[0].name == "No cases"

    def test_notes(self):
        notes = [ModNote(number=1, text="watch", moderator_id=MOD_ID, timestamp=0.0)]

        embed = build_notes_embed(MEMBER_ID, "member#0001", notes)

        assert embed.fields[0].name == "Note #1"
        assert embed.fields[0].value.startswith("watch")

    def test_clip_empty(self):
        assert clip("") == "-"
        assert clip(None) == "-"


# =============================================================================
# Delivery
# =============================================================================

class TestModLogService:
    @pytest.mark.asyncio
    async def test_log_case_attaches_reference(self, mod_log, store, platform):
        case = store.commit_case(CaseType.WARN_ADD, MEMBER_ID, MOD_ID, "x")

        reference = await mod_log.log_case(case, MOD_CHANNEL, "member#0001", "mod#0001")

        assert reference.channel_id == MOD_CHANNEL
        assert store.get_case(1).log_message_id == reference.message_id
        assert platform.notices_in(MOD_CHANNEL)[0].title == "⚠️ User Warned"

    @pytest.mark.asyncio
    async def test_send_failure_leaves_case_unreferenced(self, mod_log, store, platform):
        platform.failing.add("send")
        case = store.commit_case(CaseType.WARN_ADD, MEMBER_ID, MOD_ID, "x")

        assert await mod_log.log_case(case, MOD_CHANNEL, "x", "y") is None
        assert not store.get_case(1).has_log_message

    @pytest.mark.asyncio
    async def test_edit_failure_is_reported(self, mod_log, store, platform):
        case = store.commit_case(CaseType.WARN_ADD, MEMBER_ID, MOD_ID, "x")
        await mod_log.log_case(case, MOD_CHANNEL, "x", "y")
        platform.failing.add("edit")

        assert await mod_log.edit_case_reason(case) is False

    @pytest.mark.asyncio
    async def test_dm_not_delivered(self, mod_log, platform):
        platform.dm_blocked.add(MEMBER_ID)

        delivered = await mod_log.notify_target(MEMBER_ID, CaseType.WARN_ADD, "x", "mod#0001")

        assert delivered is False
        assert platform.dms == []

    @pytest.mark.asyncio
    async def test_note_notice(self, mod_log, store, platform):
        note = store.add_note(MEMBER_ID, "watch", MOD_ID)

        await mod_log.log_note(MEMBER_ID, "member#0001", note, "mod#0001", removal_reason="old")

        [notice] = platform.notices_in(MOD_CHANNEL)
        assert notice.title == "🗑️ Mod Note Removed"
        assert fields(notice)["Reason for Removal"] == "old"
