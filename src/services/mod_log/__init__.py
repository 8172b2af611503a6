"""
Mod Log Package
===============

Case notices, direct messages and audit notices.
"""

from .embeds import (
    FIELD_LIMIT,
    REASON_FIELD,
    build_case_embed,
    build_dm_embed,
    build_history_embed,
    build_note_embed,
    build_notes_embed,
    build_reason_update_embed,
    clip,
    replace_reason,
)
from .service import ModLogService

__all__ = [
    "FIELD_LIMIT",
    "REASON_FIELD",
    "ModLogService",
    "build_case_embed",
    "build_dm_embed",
    "build_history_embed",
    "build_note_embed",
    "build_notes_embed",
    "build_reason_update_embed",
    "clip",
    "replace_reason",
]
