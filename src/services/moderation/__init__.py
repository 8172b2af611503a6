"""
CaseKeeper - Moderation Package
===============================

Action orchestrator, policy table and request/result types.
"""

from .policies import (
    POLICIES,
    ActionPolicy,
    DurationRule,
    LogChannel,
    PermissionTier,
    TargetKind,
    allowed_roles,
)
from .results import ActionRequest, ActionResult, Actor, Rejection
from .service import ModerationService

__all__ = [
    "ModerationService",
    "Actor",
    "ActionRequest",
    "ActionResult",
    "Rejection",
    "ActionPolicy",
    "POLICIES",
    "PermissionTier",
    "TargetKind",
    "DurationRule",
    "LogChannel",
    "allowed_roles",
]
