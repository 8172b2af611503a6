"""
CaseKeeper - Counter Operations
===============================

Per-user warn/mute/kick tallies.
"""

from typing import TYPE_CHECKING, Dict

from src.core.store.models import CounterKind

if TYPE_CHECKING:
    from src.core.store.manager import MemoryStore


class CountersMixin:
    """Mixin for per-user counters."""

    def bump_counter(self: "MemoryStore", user_id: int, kind: CounterKind, delta: int) -> int:
        """
        Add delta to a counter, flooring at zero.

        A delta of 0 only creates the counter so it shows up in displays.

        Returns:
            The value after the update.
        """
        key = (user_id, CounterKind(kind))
        updated = max(0, self._counters.get(key, 0) + delta)
        self._counters[key] = updated
        return updated

    def get_counter(self: "MemoryStore", user_id: int, kind: CounterKind) -> int:
        return self._counters.get((user_id, CounterKind(kind)), 0)

    def get_counters(self: "MemoryStore", user_id: int) -> Dict[str, int]:
        return {kind.value: self.get_counter(user_id, kind) for kind in CounterKind}


__all__ = ["CountersMixin"]
