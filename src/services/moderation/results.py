"""
CaseKeeper - Moderation Request & Result Types
==============================================

Inputs and outputs of the action orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from src.core.store.models import CaseRecord


# =============================================================================
# Inputs
# =============================================================================

@dataclass(frozen=True)
class Actor:
    """
    The member invoking a command.

    Attributes:
        user_id: Discord ID of the invoker.
        name: Display tag used in notices.
        role_ids: IDs of every role the invoker holds.
        top_position: Rank of the invoker's highest role.
        channel_id: Channel the command was used in.
        category_id: Parent category of that channel, if any.
    """

    user_id: int
    name: str
    role_ids: FrozenSet[int] = frozenset()
    top_position: int = 0
    channel_id: Optional[int] = None
    category_id: Optional[int] = None

    def has_any_role(self, role_ids: Iterable[int]) -> bool:
        return not self.role_ids.isdisjoint(role_ids)


@dataclass(frozen=True)
class ActionRequest:
    """Target and free-text arguments of one action."""

    reason: str = ""
    user_id: Optional[int] = None
    duration: Optional[str] = None
    role_id: Optional[int] = None
    channel_id: Optional[int] = None
    original_reason: Optional[str] = None
    note_number: Optional[int] = None
    case_number: Optional[int] = None


# =============================================================================
# Outputs
# =============================================================================

class Rejection(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    EXTERNAL_EFFECT_FAILED = "external_effect_failed"


@dataclass
class ActionResult:
    """
    Outcome of an orchestrated action.

    A rejected action carries no case and left the store untouched.
    """

    success: bool
    message: str
    case: Optional[CaseRecord] = None
    rejection: Optional[Rejection] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def case_number(self) -> Optional[int]:
        return self.case.case_number if self.case else None

    @classmethod
    def ok(
        cls,
        message: str,
        case: Optional[CaseRecord] = None,
        **data: Any,
    ) -> "ActionResult":
        return cls(success=True, message=message, case=case, data=data)

    @classmethod
    def reject(cls, rejection: Rejection, message: str) -> "ActionResult":
        return cls(success=False, message=message, rejection=rejection)


__all__ = [
    "Actor",
    "ActionRequest",
    "Rejection",
    "ActionResult",
]
