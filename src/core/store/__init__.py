"""
CaseKeeper - Store Package
==========================

Case ledger, per-user history, counters and mod notes.

Structure:
    - models.py: Record dataclasses and enums
    - base.py: Store interface and errors
    - cases.py / history.py / counters.py / notes.py: Operation mixins
    - manager.py: In-memory backend and get_store()
"""

from src.core.store.base import (
    CaseNotFoundError,
    DuplicateCaseError,
    ModerationStore,
    NoteNotFoundError,
    StoreError,
)
from src.core.store.manager import MemoryStore, get_store, set_store
from src.core.store.models import CaseRecord, CaseType, CounterKind, HistoryEntry, ModNote

__all__ = [
    "ModerationStore",
    "MemoryStore",
    "get_store",
    "set_store",
    "StoreError",
    "CaseNotFoundError",
    "DuplicateCaseError",
    "NoteNotFoundError",
    "CaseRecord",
    "CaseType",
    "CounterKind",
    "HistoryEntry",
    "ModNote",
]
