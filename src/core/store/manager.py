"""
CaseKeeper - In-Memory Store
============================

Volatile backend for the moderation store.

DESIGN:
    All state lives in plain dicts and is lost on restart, matching the
    bot's original behaviour. snapshot() returns the layout a durable
    backend would persist.
"""

from typing import Any, Dict, List, Optional, Tuple

from src.core.store.base import ModerationStore
from src.core.store.cases import CasesMixin
from src.core.store.counters import CountersMixin
from src.core.store.history import HistoryMixin
from src.core.store.models import CaseRecord, CounterKind, HistoryEntry, ModNote
from src.core.store.notes import NotesMixin


class MemoryStore(
    CasesMixin,
    HistoryMixin,
    CountersMixin,
    NotesMixin,
    ModerationStore,
):
    """Dict-backed case ledger, history, counters and notes."""

    def __init__(self, first_case_number: int = 1) -> None:
        self._next_case_number: int = first_case_number
        self._cases: Dict[int, CaseRecord] = {}
        self._history: Dict[int, List[HistoryEntry]] = {}
        self._history_index: Dict[int, List[HistoryEntry]] = {}
        self._counters: Dict[Tuple[int, CounterKind], int] = {}
        self._notes: Dict[int, List[ModNote]] = {}

    @property
    def case_count(self) -> int:
        return len(self._cases)

    def snapshot(self) -> Dict[str, Any]:
        """
        Export every record as plain data.

        Layout:
            cases: case_number -> case dict
            history: (user_id, case_number) -> entry dict
            counters: (user_id, kind) -> int
            notes: (user_id, number) -> {text, moderator_id, timestamp}
        """
        return {
            "next_case_number": self._next_case_number,
            "cases": {number: case.to_dict() for number, case in self._cases.items()},
            "history": {
                (user_id, entry.case_number): entry.to_dict()
                for user_id, entries in self._history.items()
                for entry in entries
            },
            "counters": {
                (user_id, kind.value): value
                for (user_id, kind), value in self._counters.items()
            },
            "notes": {
                (user_id, note.number): {
                    "text": note.text,
                    "moderator_id": note.moderator_id,
                    "timestamp": note.timestamp,
                }
                for user_id, notes in self._notes.items()
                for note in notes
            },
        }


# =============================================================================
# Global Instance
# =============================================================================

_store: Optional[ModerationStore] = None


def get_store() -> ModerationStore:
    """Return the process-wide store, creating a MemoryStore on first use."""
    global _store
    if _store is None:
        _store = MemoryStore()
    return _store


def set_store(store: Optional[ModerationStore]) -> None:
    """Install a different backend (or clear it so the next call recreates one)."""
    global _store
    _store = store


__all__ = [
    "MemoryStore",
    "get_store",
    "set_store",
]
