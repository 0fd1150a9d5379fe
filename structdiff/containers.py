"""Structural comparison of sequences, sets and mappings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence, Set
from typing import TYPE_CHECKING, Any, Optional

from .introspection import is_named_tuple
from .models import DiffKind
from .paths import FieldPath
from .strategies import StrategyKind

if TYPE_CHECKING:
    from .differ import Differ


class ContainerComparator(ABC):
    """Establishes which left and right elements correspond, then recurses."""

    @abstractmethod
    def compare(
        self,
        differ: Differ,
        left: Any,
        right: Any,
        path: FieldPath,
        depth: int
    ) -> bool:
        """Compare two containers of this shape, returning True if they match."""


class SequenceComparator(ContainerComparator):
    """
    Positional comparison.

    Sequences of different lengths produce a single SIZE_MISMATCH at the
    sequence path and no element comparison.
    """

    def compare(self, differ, left, right, path, depth):
        if len(left) != len(right):
            differ.add_difference(path, left, right, DiffKind.SIZE_MISMATCH)
            return False

        all_match = True
        for i, (left_item, right_item) in enumerate(zip(left, right)):
            if differ.aborted:
                return False
            if not differ.diff(left_item, right_item, path.index(i), depth + 1):
                all_match = False
        return all_match


class SetComparator(ContainerComparator):
    """
    Order-free comparison of set members.

    Each left member is paired with the first unmatched right member that
    compares equal under the strategy resolved at ``path[*]``, so custom
    comparators apply to members the same way they apply to fields.
    """

    def compare(self, differ, left, right, path, depth):
        element_path = path.element()
        right_items = list(right)
        unmatched = list(range(len(right_items)))
        missing_on_right = []

        for item in left:
            match = None
            for j in unmatched:
                if differ.probe(item, right_items[j], element_path, depth + 1):
                    match = j
                    break
            if match is None:
                missing_on_right.append(item)
            else:
                unmatched.remove(match)

        if (missing_on_right or unmatched) and differ.is_ignored(element_path):
            return True

        for item in missing_on_right:
            differ.add_difference(element_path, item, None, DiffKind.MISSING_ON_RIGHT)
            if differ.aborted:
                return False
        for j in unmatched:
            differ.add_difference(element_path, None, right_items[j], DiffKind.MISSING_ON_LEFT)
            if differ.aborted:
                return False

        return not missing_on_right and not unmatched


class MappingComparator(ContainerComparator):
    """
    Key-wise comparison.

    Keys are matched with the configured key strategy (natural equality by
    default); only values are compared deeply. Left keys are visited in
    order, then keys only present on the right.
    """

    def compare(self, differ, left, right, path, depth):
        pairs = self._match_keys(differ, left, right, path, depth)
        matched_right = {id(right_key) for right_key in pairs.values() if right_key is not _UNMATCHED}
        all_match = True

        for left_key, right_key in pairs.items():
            if differ.aborted:
                return False
            child_path = path.key(left_key)
            if right_key is _UNMATCHED:
                if differ.is_ignored(child_path):
                    continue
                differ.add_difference(child_path, left[left_key], None, DiffKind.MISSING_ON_RIGHT)
                all_match = False
            elif not differ.diff(left[left_key], right[right_key], child_path, depth + 1):
                all_match = False

        for right_key in right:
            if differ.aborted:
                return False
            if id(right_key) in matched_right:
                continue
            child_path = path.key(right_key)
            if differ.is_ignored(child_path):
                continue
            differ.add_difference(child_path, None, right[right_key], DiffKind.MISSING_ON_LEFT)
            all_match = False

        return all_match

    def _match_keys(self, differ, left, right, path, depth) -> dict:
        """Map every left key to its right counterpart or ``_UNMATCHED``."""
        strategy = differ.key_strategy
        if strategy.kind is StrategyKind.NATURAL:
            right_keys = {key: key for key in right}
            return {key: right_keys.get(key, _UNMATCHED) for key in left}

        pairs = {}
        candidates = list(right)
        for left_key in left:
            pairs[left_key] = _UNMATCHED
            for position, right_key in enumerate(candidates):
                if strategy.is_deep:
                    equal = differ.probe(left_key, right_key, path.key(left_key), depth + 1)
                else:
                    equal = differ.evaluate(strategy, left_key, right_key, path.key(left_key))
                if equal:
                    pairs[left_key] = right_key
                    del candidates[position]
                    break
        return pairs


class _Unmatched:
    def __repr__(self) -> str:
        return "<unmatched>"


_UNMATCHED = _Unmatched()

SEQUENCE_COMPARATOR = SequenceComparator()
SET_COMPARATOR = SetComparator()
MAPPING_COMPARATOR = MappingComparator()


def comparator_for(value: Any) -> Optional[ContainerComparator]:
    """Return the comparator for container-shaped values, None otherwise."""
    if isinstance(value, Mapping):
        return MAPPING_COMPARATOR
    if isinstance(value, Set):
        return SET_COMPARATOR
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        if is_named_tuple(value):
            return None
        return SEQUENCE_COMPARATOR
    return None
