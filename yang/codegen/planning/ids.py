"""Concept id allocation."""

from __future__ import annotations

from yang.errors import IdentifierExhaustionError

# concept ids are usize in the generated code
MAX_CONCEPT_ID = 2**64 - 1


class IdAllocator:
    """Monotonic id counters, one per allocation scope.

    The base scope is zero-indexed.  Code built on top of the base library
    reserves 0 for the base scope's root concept, so the first derived id is
    bumped to 1.  Construct one allocator per generation run and pass it
    through the planner; call :meth:`reset` between independent runs.
    """

    def __init__(self) -> None:
        self._counters: dict[bool, int] = {}

    def next_id(self, is_base_scope: bool) -> int:
        current = self._counters.get(is_base_scope, 0)
        if not is_base_scope and current == 0:
            current = 1
        if current > MAX_CONCEPT_ID:
            raise IdentifierExhaustionError(
                f"Cannot allocate more than {MAX_CONCEPT_ID + 1} concept ids"
            )
        self._counters[is_base_scope] = current + 1
        return current

    def peek(self, is_base_scope: bool) -> int:
        """The id the next call to :meth:`next_id` would return."""
        current = self._counters.get(is_base_scope, 0)
        if not is_base_scope and current == 0:
            return 1
        return current

    def reserve(self, concept_id: int, is_base_scope: bool) -> None:
        """Make sure later allocations in the scope come after *concept_id*."""
        current = self.peek(is_base_scope)
        if concept_id >= current:
            self._counters[is_base_scope] = concept_id + 1

    def reset(self) -> None:
        self._counters.clear()
