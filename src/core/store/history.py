"""
CaseKeeper - User History Operations
====================================

Append-only per-user history of committed cases.

DESIGN:
    Entries are also indexed by case number so a reason amendment touches
    only the entries for that case instead of scanning every user.
"""

from typing import TYPE_CHECKING, List, Optional

from src.core.store.models import CaseType, HistoryEntry

if TYPE_CHECKING:
    from src.core.store.manager import MemoryStore


class HistoryMixin:
    """Mixin for user history operations."""

    def append_history(self: "MemoryStore", user_id: int, entry: HistoryEntry) -> None:
        self._history.setdefault(user_id, []).append(entry)
        self._history_index.setdefault(entry.case_number, []).append(entry)

    def get_history(self: "MemoryStore", user_id: int) -> List[HistoryEntry]:
        """Return the user's entries, oldest first."""
        return sorted(self._history.get(user_id, []), key=lambda e: e.timestamp)

    def latest_history_entry(
        self: "MemoryStore",
        user_id: int,
        case_type: CaseType,
    ) -> Optional[HistoryEntry]:
        for entry in reversed(self._history.get(user_id, [])):
            if entry.case_type == case_type:
                return entry
        return None

    def sync_history_reason(self: "MemoryStore", case_number: int, new_reason: str) -> int:
        """
        Copy an amended reason onto every history entry for a case.

        Returns:
            Number of entries updated.
        """
        entries = self._history_index.get(case_number, [])
        for entry in entries:
            entry.reason = new_reason
        return len(entries)


__all__ = ["HistoryMixin"]
