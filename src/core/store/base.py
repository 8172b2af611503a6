"""
CaseKeeper - Store Interface
============================

Abstract contract for the moderation store.

DESIGN:
    The orchestrator and expiry scheduler only talk to this interface.
    MemoryStore is the shipped backend; a durable backend (SQLite, Redis)
    implements the same methods and is returned from get_store().

    commit_case() must stay synchronous: the event loop cannot switch
    coroutines between allocating a case number and recording the case.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.core.store.models import CaseRecord, CaseType, CounterKind, HistoryEntry, ModNote


# =============================================================================
# Errors
# =============================================================================

class StoreError(Exception):
    """Base class for store failures."""


class CaseNotFoundError(StoreError):
    def __init__(self, case_number: int) -> None:
        super().__init__(f"Case #{case_number} does not exist")
        self.case_number = case_number


class DuplicateCaseError(StoreError):
    def __init__(self, case_number: int) -> None:
        super().__init__(f"Case #{case_number} already exists")
        self.case_number = case_number


class NoteNotFoundError(StoreError):
    def __init__(self, user_id: int, number: int) -> None:
        super().__init__(f"Note #{number} does not exist for user {user_id}")
        self.user_id = user_id
        self.number = number


# =============================================================================
# Interface
# =============================================================================

class ModerationStore(ABC):
    """Case ledger, per-user history, counters and mod notes."""

    # -------------------------------------------------------------------------
    # Case Ledger
    # -------------------------------------------------------------------------

    @abstractmethod
    def allocate_case_number(self) -> int: ...

    @abstractmethod
    def record_case(self, case: CaseRecord) -> None: ...

    @abstractmethod
    def get_case(self, case_number: int) -> Optional[CaseRecord]: ...

    @abstractmethod
    def update_case_reason(self, case_number: int, new_reason: str) -> str: ...

    @abstractmethod
    def set_case_log_reference(self, case_number: int, channel_id: int, message_id: int) -> None: ...

    @abstractmethod
    def commit_case(
        self,
        case_type: CaseType,
        user_id: Optional[int],
        moderator_id: int,
        reason: str,
        duration: Optional[str] = None,
        channel_id: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> CaseRecord: ...

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @abstractmethod
    def append_history(self, user_id: int, entry: HistoryEntry) -> None: ...

    @abstractmethod
    def get_history(self, user_id: int) -> List[HistoryEntry]: ...

    @abstractmethod
    def sync_history_reason(self, case_number: int, new_reason: str) -> int: ...

    @abstractmethod
    def latest_history_entry(self, user_id: int, case_type: CaseType) -> Optional[HistoryEntry]: ...

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    @abstractmethod
    def bump_counter(self, user_id: int, kind: CounterKind, delta: int) -> int: ...

    @abstractmethod
    def get_counter(self, user_id: int, kind: CounterKind) -> int: ...

    @abstractmethod
    def get_counters(self, user_id: int) -> Dict[str, int]: ...

    # -------------------------------------------------------------------------
    # Mod Notes
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_note(self, user_id: int, text: str, moderator_id: int) -> ModNote: ...

    @abstractmethod
    def remove_note(self, user_id: int, number: int) -> ModNote: ...

    @abstractmethod
    def get_notes(self, user_id: int) -> List[ModNote]: ...


__all__ = [
    "StoreError",
    "CaseNotFoundError",
    "DuplicateCaseError",
    "NoteNotFoundError",
    "ModerationStore",
]
