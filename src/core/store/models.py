"""
CaseKeeper - Store Record Types
===============================

Record types held by the moderation store.
"""

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class CaseType(str, Enum):
    """Closed set of case kinds. Mod notes are deliberately not cases."""

    BAN = "ban"
    UNBAN = "unban"
    MUTE = "mute"
    UNMUTE = "unmute"
    AUTO_UNMUTE = "auto_unmute"
    KICK = "kick"
    WARN_ADD = "warn_add"
    WARN_REMOVE = "warn_remove"
    ROLE_ADD = "role_add"
    ROLE_REMOVE = "role_remove"
    ROLE_TEMP = "role_temp"
    AUTO_ROLE_REMOVE = "auto_role_remove"
    CHANNEL_LOCK = "channel_lock"
    CHANNEL_UNLOCK = "channel_unlock"


class CounterKind(str, Enum):
    WARNS = "warns"
    MUTES = "mutes"
    KICKS = "kicks"


@dataclass
class CaseRecord:
    """
    One committed moderation action.

    Only `reason` changes after creation (plus the log reference, which is
    attached once the notice has been sent).
    """

    case_number: int
    case_type: CaseType
    user_id: Optional[int]
    moderator_id: int
    reason: str
    duration: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    log_channel_id: Optional[int] = None
    log_message_id: Optional[int] = None
    channel_id: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_log_message(self) -> bool:
        return self.log_channel_id is not None and self.log_message_id is not None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["case_type"] = self.case_type.value
        return data


@dataclass
class HistoryEntry:
    """Per-user copy of a case, with type-specific metadata in `extra`."""

    case_number: int
    case_type: CaseType
    user_id: int
    moderator_id: int
    reason: str
    duration: Optional[str]
    timestamp: float
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_case(cls, case: CaseRecord) -> "HistoryEntry":
        return cls(
            case_number=case.case_number,
            case_type=case.case_type,
            user_id=case.user_id,
            moderator_id=case.moderator_id,
            reason=case.reason,
            duration=case.duration,
            timestamp=case.timestamp,
            extra=dict(case.extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["case_type"] = self.case_type.value
        return data


@dataclass
class ModNote:
    """Free-text annotation on a user. Numbers are dense per user."""

    number: int
    text: str
    moderator_id: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "CaseType",
    "CounterKind",
    "CaseRecord",
    "HistoryEntry",
    "ModNote",
]
