"""
Tests for src/core/store

Covers the case ledger, user history, counters and mod notes of the
in-memory store.
"""

import pytest

from src.core.store import (
    CaseNotFoundError,
    CaseRecord,
    CaseType,
    CounterKind,
    DuplicateCaseError,
    HistoryEntry,
    MemoryStore,
    ModerationStore,
    NoteNotFoundError,
    get_store,
    set_store,
)


# =============================================================================
# Case Ledger
# =============================================================================

class TestCaseLedger:
    """Tests for case numbering and records."""

    def test_numbers_are_sequential_and_unique(self, store):
        numbers = [
            store.commit_case(CaseType.WARN_ADD, 1, 9, f"reason {i}").case_number
            for i in range(25)
        ]
        assert numbers == list(range(1, 26))
        assert store.case_count == 25

    def test_first_case_number_is_configurable(self):
        store = MemoryStore(first_case_number=100)
        assert store.commit_case(CaseType.BAN, 1, 9, "x").case_number == 100
        assert store.next_case_number == 101

    def test_record_case_rejects_duplicates(self, store):
        case = store.commit_case(CaseType.KICK, 1, 9, "spam")
        duplicate = CaseRecord(case.case_number, CaseType.KICK, 1, 9, "again")
        with pytest.raises(DuplicateCaseError):
            store.record_case(duplicate)

    def test_get_case(self, store):
        case = store.commit_case(CaseType.MUTE, 1, 9, "spam", duration="10 minutes")
        assert store.get_case(case.case_number) is case
        assert store.get_case(404) is None

    def test_update_reason_returns_previous(self, store):
        case = store.commit_case(CaseType.BAN, 1, 9, "old")
        assert store.update_case_reason(case.case_number, "new") == "old"
        assert store.get_case(case.case_number).reason == "new"

    def test_update_reason_on_missing_case(self, store):
        with pytest.raises(CaseNotFoundError) as exc:
            store.update_case_reason(7, "new")
        assert exc.value.case_number == 7

    def test_log_reference(self, store):
        case = store.commit_case(CaseType.BAN, 1, 9, "x")
        assert not case.has_log_message
        store.set_case_log_reference(case.case_number, 30, 5001)
        assert case.has_log_message
        assert (case.log_channel_id, case.log_message_id) == (30, 5001)

    def test_channel_cases_have_no_history(self, store):
        case = store.commit_case(CaseType.CHANNEL_LOCK, None, 9, "raid", channel_id=60)
        assert case.user_id is None
        assert case.channel_id == 60
        assert store.get_case(case.case_number) is case

    def test_commit_copies_extra(self, store):
        extra = {"warns": 1}
        case = store.commit_case(CaseType.WARN_ADD, 1, 9, "x", extra=extra)
        extra["warns"] = 99
        assert case.extra == {"warns": 1}


# =============================================================================
# History
# =============================================================================

class TestHistory:
    """Tests for per-user history."""

    def test_commit_appends_history(self, store):
        case = store.commit_case(CaseType.WARN_ADD, 1, 9, "rude", extra={"warns": 1})
        history = store.get_history(1)
        assert len(history) == 1
        assert history[0].case_number == case.case_number
        assert history[0].extra == {"warns": 1}

    def test_history_is_ordered_by_time(self, store):
        store.append_history(1, HistoryEntry(2, CaseType.KICK, 1, 9, "b", None, 200.0))
        store.append_history(1, HistoryEntry(1, CaseType.WARN_ADD, 1, 9, "a", None, 100.0))
        assert [e.case_number for e in store.get_history(1)] == [1, 2]

    def test_history_is_per_user(self, store):
        store.commit_case(CaseType.WARN_ADD, 1, 9, "a")
        store.commit_case(CaseType.WARN_ADD, 2, 9, "b")
        assert len(store.get_history(1)) == 1
        assert store.get_history(3) == []

    def test_sync_reason_touches_only_matching_entries(self, store):
        first = store.commit_case(CaseType.WARN_ADD, 1, 9, "first")
        second = store.commit_case(CaseType.MUTE, 1, 9, "second")
        other = store.commit_case(CaseType.KICK, 2, 9, "other")

        assert store.sync_history_reason(second.case_number, "amended") == 1

        reasons = {e.case_number: e.reason for e in store.get_history(1)}
        assert reasons == {first.case_number: "first", second.case_number: "amended"}
        assert store.get_history(2)[0].reason == "other"
        assert other.reason == "other"

    def test_sync_reason_for_unknown_case(self, store):
        assert store.sync_history_reason(42, "x") == 0

    def test_latest_entry_of_type(self, store):
        store.commit_case(CaseType.MUTE, 1, 9, "first mute")
        store.commit_case(CaseType.WARN_ADD, 1, 9, "warn")
        store.commit_case(CaseType.MUTE, 1, 9, "second mute")
        assert store.latest_history_entry(1, CaseType.MUTE).reason == "second mute"
        assert store.latest_history_entry(1, CaseType.BAN) is None


# =============================================================================
# Counters
# =============================================================================

class TestCounters:
    def test_default_zero(self, store):
        assert store.get_counter(1, CounterKind.WARNS) == 0
        assert store.get_counters(1) == {"warns": 0, "mutes": 0, "kicks": 0}

    def test_bump_returns_new_value(self, store):
        assert store.bump_counter(1, CounterKind.WARNS, 1) == 1
        assert store.bump_counter(1, CounterKind.WARNS, 1) == 2
        assert store.get_counter(1, CounterKind.WARNS) == 2

    def test_never_negative(self, store):
        assert store.bump_counter(1, CounterKind.KICKS, -1) == 0
        store.bump_counter(1, CounterKind.KICKS, 1)
        assert store.bump_counter(1, CounterKind.KICKS, -5) == 0

    def test_zero_delta_initializes(self, store):
        store.bump_counter(1, CounterKind.MUTES, 0)
        assert (1, "mutes") in store.snapshot()["counters"]


# =============================================================================
# Mod Notes
# =============================================================================

class TestModNotes:
    def test_numbers_are_dense(self, store):
        notes = [store.add_note(1, f"note {i}", 9) for i in range(3)]
        assert [n.number for n in notes] == [1, 2, 3]

    def test_remove_renumbers(self, store):
        for text in ("a", "b", "c"):
            store.add_note(1, text, 9)

        removed = store.remove_note(1, 2)

        assert removed.text == "b"
        remaining = store.get_notes(1)
        assert [(n.number, n.text) for n in remaining] == [(1, "a"), (2, "c")]

    def test_add_after_remove_continues_sequence(self, store):
        store.add_note(1, "a", 9)
        store.add_note(1, "b", 9)
        store.remove_note(1, 1)
        assert store.add_note(1, "c", 9).number == 2

    @pytest.mark.parametrize("number", [0, 3, -1])
    def test_remove_missing_note(self, store, number):
        store.add_note(1, "a", 9)
        store.add_note(1, "b", 9)
        with pytest.raises(NoteNotFoundError):
            store.remove_note(1, number)
        assert len(store.get_notes(1)) == 2

    def test_notes_are_not_cases(self, store):
        store.add_note(1, "a", 9)
        assert store.case_count == 0
        assert store.get_history(1) == []

    def test_get_notes_returns_copy(self, store):
        store.add_note(1, "a", 9)
        store.get_notes(1).clear()
        assert len(store.get_notes(1)) == 1


# =============================================================================
# Snapshot & Singleton
# =============================================================================

class TestSnapshot:
    def test_layout(self, store):
        case = store.commit_case(CaseType.WARN_ADD, 1, 9, "x")
        store.bump_counter(1, CounterKind.WARNS, 1)
        store.add_note(1, "watch", 9)

        snapshot = store.snapshot()

        assert snapshot["cases"][case.case_number]["case_type"] == "warn_add"
        assert (1, case.case_number) in snapshot["history"]
        assert snapshot["counters"][(1, "warns")] == 1
        assert snapshot["notes"][(1, 1)]["text"] == "watch"
        assert snapshot["next_case_number"] == 2

    def test_snapshot_is_detached(self, store):
        case = store.commit_case(CaseType.WARN_ADD, 1, 9, "x")
        before = store.snapshot()
        store.update_case_reason(case.case_number, "changed")
        assert before["cases"][case.case_number]["reason"] == "x"


class TestGetStore:
    def test_singleton_and_override(self):
        set_store(None)
        try:
            first = get_store()
            assert isinstance(first, ModerationStore)
            assert get_store() is first

            replacement = MemoryStore()
            set_store(replacement)
            assert get_store() is replacement
        finally:
            set_store(None)
