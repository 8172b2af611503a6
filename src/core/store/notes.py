"""
CaseKeeper - Mod Note Operations
================================

Per-user mod notes, numbered 1..N without gaps.
"""

from typing import TYPE_CHECKING, List

from src.core.store.base import NoteNotFoundError
from src.core.store.models import ModNote

if TYPE_CHECKING:
    from src.core.store.manager import MemoryStore


class NotesMixin:
    """Mixin for mod note operations."""

    def add_note(self: "MemoryStore", user_id: int, text: str, moderator_id: int) -> ModNote:
        notes = self._notes.setdefault(user_id, [])
        note = ModNote(number=len(notes) + 1, text=text, moderator_id=moderator_id)
        notes.append(note)
        return note

    def remove_note(self: "MemoryStore", user_id: int, number: int) -> ModNote:
        """
        Remove a note and renumber the remaining notes contiguously.

        Returns:
            The removed note (carrying its number at removal time).

        Raises:
            NoteNotFoundError: If the user has no note with this number.
        """
        notes = self._notes.get(user_id, [])
        if not 1 <= number <= len(notes):
            raise NoteNotFoundError(user_id, number)

        removed = notes.pop(number - 1)
        for position, note in enumerate(notes, start=1):
            note.number = position
        return removed

    def get_notes(self: "MemoryStore", user_id: int) -> List[ModNote]:
        return list(self._notes.get(user_id, []))


__all__ = ["NotesMixin"]
