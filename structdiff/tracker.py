"""Stack-scoped tracking of object pairs under deep comparison."""

from __future__ import annotations

from typing import Any


class VisitedPairTracker:
    """
    Records the ``(left, right)`` identity pairs currently being compared.

    A pair is registered by ``enter`` when its deep comparison starts and
    released by ``leave`` when that frame returns, so the same pair reached
    again through a sibling branch is compared normally; only a pair that
    an ancestor frame is still comparing (a true cycle) is reported as
    already visited. Identity is ``id()``, never ``==``.
    """

    def __init__(self):
        self._active: set[tuple[int, int]] = set()

    def enter(self, left: Any, right: Any) -> bool:
        """
        Register the pair unless it is already active.

        Returns:
            True if the pair is already on the active stack (the caller
            should short-circuit), False if it was registered now
        """
        pair = (id(left), id(right))
        if pair in self._active:
            return True
        self._active.add(pair)
        return False

    def leave(self, left: Any, right: Any):
        self._active.discard((id(left), id(right)))

    def __contains__(self, pair: tuple[Any, Any]) -> bool:
        left, right = pair
        return (id(left), id(right)) in self._active

    def __len__(self) -> int:
        return len(self._active)
