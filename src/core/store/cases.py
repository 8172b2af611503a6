"""
CaseKeeper - Case Ledger Operations
===================================

Sequential case numbering and case records.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from src.core.logger import logger
from src.core.store.base import CaseNotFoundError, DuplicateCaseError
from src.core.store.models import CaseRecord, CaseType, HistoryEntry

if TYPE_CHECKING:
    from src.core.store.manager import MemoryStore


class CasesMixin:
    """Mixin for case ledger operations."""

    def allocate_case_number(self: "MemoryStore") -> int:
        """
        Reserve the next case number.

        Only call this once the action is certain to be committed; a number
        handed out here is never returned to the pool.
        """
        number = self._next_case_number
        self._next_case_number += 1
        return number

    @property
    def next_case_number(self: "MemoryStore") -> int:
        return self._next_case_number

    def record_case(self: "MemoryStore", case: CaseRecord) -> None:
        if case.case_number in self._cases:
            raise DuplicateCaseError(case.case_number)
        self._cases[case.case_number] = case

    def get_case(self: "MemoryStore", case_number: int) -> Optional[CaseRecord]:
        return self._cases.get(case_number)

    def update_case_reason(self: "MemoryStore", case_number: int, new_reason: str) -> str:
        """
        Replace a case's reason.

        Returns:
            The previous reason.

        Raises:
            CaseNotFoundError: If no case has this number.
        """
        case = self._cases.get(case_number)
        if case is None:
            raise CaseNotFoundError(case_number)

        previous = case.reason
        case.reason = new_reason
        return previous

    def set_case_log_reference(
        self: "MemoryStore",
        case_number: int,
        channel_id: int,
        message_id: int,
    ) -> None:
        case = self._cases.get(case_number)
        if case is None:
            raise CaseNotFoundError(case_number)
        case.log_channel_id = channel_id
        case.log_message_id = message_id

    def commit_case(
        self: "MemoryStore",
        case_type: CaseType,
        user_id: Optional[int],
        moderator_id: int,
        reason: str,
        duration: Optional[str] = None,
        channel_id: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> CaseRecord:
        """
        Allocate a number, record the case and append it to the user's history.

        DESIGN:
            Contains no await, so under asyncio no other coroutine can
            observe a number that was allocated but not yet recorded.
        """
        case = CaseRecord(
            case_number=self.allocate_case_number(),
            case_type=case_type,
            user_id=user_id,
            moderator_id=moderator_id,
            reason=reason,
            duration=duration,
            channel_id=channel_id,
            extra=dict(extra or {}),
        )
        self.record_case(case)

        if user_id is not None:
            self.append_history(user_id, HistoryEntry.from_case(case))

        logger.tree("CASE COMMITTED", [
            ("Case", f"#{case.case_number}"),
            ("Type", case_type.value),
            ("User", str(user_id) if user_id is not None else "-"),
            ("Moderator", str(moderator_id)),
        ], emoji="📋")

        return case


__all__ = ["CasesMixin"]
