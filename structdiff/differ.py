"""Recursive deep comparison of two object graphs."""

from __future__ import annotations

import logging
from numbers import Number
from typing import Any, Optional

from .containers import comparator_for
from .exceptions import ComparatorFailure, DepthExceededError
from .introspection import LEAF_TYPES, fields_of
from .models import ComparisonConfig, Difference, DiffKind
from .paths import FieldPath, PathPattern
from .strategies import ComparisonStrategy, StrategyRegistry
from .tracker import VisitedPairTracker
from .utils import get_type_name, types_compatible

logger = logging.getLogger(__name__)


class Differ:
    """
    Walks two object graphs in lock-step and records their differences.

    Handles:
    - Strategy resolution per node (identity, natural, custom, deep)
    - Cycle termination through a stack-scoped visited pair tracker
    - Sequences, sets and mappings through the container comparators
    - Named fields of any other object through the field accessor

    A pair found again while an ancestor frame is still comparing it is
    treated as equal. This terminates cyclic graphs but is an approximation,
    not a proof that the two cycles are equivalent.

    One Differ serves one top-level comparison; its registry and tracker
    must not be shared with concurrent comparisons.
    """

    def __init__(
        self,
        config: ComparisonConfig,
        registry: Optional[StrategyRegistry] = None,
        tracker: Optional[VisitedPairTracker] = None,
        ignored: Optional[tuple[PathPattern, ...]] = None,
        fail_fast: Optional[bool] = None
    ):
        self.config = config
        self.registry = registry or StrategyRegistry(
            config.comparator_overrides, config.default_strategy
        )
        self.tracker = tracker or VisitedPairTracker()
        if ignored is None:
            ignored = tuple(PathPattern.of(p) for p in config.ignored_paths)
        self.ignored = ignored
        self.fail_fast = config.fail_fast if fail_fast is None else fail_fast
        self.key_strategy: ComparisonStrategy = config.key_strategy
        self.field_accessor = config.field_accessor or fields_of

        self.diffs: list[Difference] = []
        self.nodes_compared = 0
        self.paths_ignored = 0
        self.cycles_short_circuited = 0
        self._aborted = False

    @property
    def aborted(self) -> bool:
        return self._aborted

    def diff(
        self,
        left: Any,
        right: Any,
        path: Optional[FieldPath] = None,
        depth: int = 0
    ) -> bool:
        """
        Compare two values and record every difference below ``path``.

        Args:
            left: The left (actual) value
            right: The right (expected) value
            path: Location of the values from the roots
            depth: Current recursion depth

        Returns:
            True if values match, False otherwise
        """
        if self._aborted:
            return False
        if path is None:
            path = FieldPath.root()
        if depth > self.config.max_depth:
            raise DepthExceededError(self.config.max_depth, path)

        try:
            return self._diff_node(left, right, path, depth)
        except RecursionError as e:
            # the interpreter stack ran out before max_depth was reached
            raise DepthExceededError(path.depth, path) from e

    def _diff_node(self, left: Any, right: Any, path: FieldPath, depth: int) -> bool:
        if self.is_ignored(path):
            return True
        self.nodes_compared += 1

        # Handle null values
        if left is None and right is None:
            return True
        if left is None or right is None:
            self.add_difference(path, left, right, DiffKind.VALUE_MISMATCH)
            return False

        strategy = self.registry.resolve(path, type(left))
        if not strategy.is_deep:
            if self.evaluate(strategy, left, right, path):
                return True
            self.add_difference(path, left, right, DiffKind.VALUE_MISMATCH)
            return False

        if isinstance(left, LEAF_TYPES) or isinstance(right, LEAF_TYPES):
            return self._diff_leaves(left, right, path)
        return self._diff_composites(left, right, path, depth)

    def _diff_leaves(self, left: Any, right: Any, path: FieldPath) -> bool:
        """Compare values without structure using natural equality."""
        strict = self.config.strict_type_checking
        numbers = (
            isinstance(left, Number) and isinstance(right, Number)
            and not isinstance(left, bool) and not isinstance(right, bool)
        )
        if not types_compatible(left, right, strict) and (strict or not numbers):
            self._add_type_mismatch(path, left, right)
            return False

        if self.evaluate(ComparisonStrategy.natural(), left, right, path):
            return True
        self.add_difference(path, left, right, DiffKind.VALUE_MISMATCH)
        return False

    def _diff_composites(self, left: Any, right: Any, path: FieldPath, depth: int) -> bool:
        if self.tracker.enter(left, right):
            self.cycles_short_circuited += 1
            logger.debug("Cycle detected at %s, treating the pair as equal", path)
            return True

        try:
            if not types_compatible(left, right, self.config.strict_type_checking):
                self._add_type_mismatch(path, left, right)
                return False

            comparator = comparator_for(left)
            if comparator is not None:
                return comparator.compare(self, left, right, path, depth)
            return self._diff_fields(left, right, path, depth)
        finally:
            self.tracker.leave(left, right)

    def _diff_fields(self, left: Any, right: Any, path: FieldPath, depth: int) -> bool:
        """Compare two objects field by field."""
        left_fields = dict(self._fields_of(left, path))
        right_fields = dict(self._fields_of(right, path))

        # Objects without enumerable fields fall back to natural equality
        if not left_fields and not right_fields:
            if self.evaluate(ComparisonStrategy.natural(), left, right, path):
                return True
            self.add_difference(path, left, right, DiffKind.VALUE_MISMATCH)
            return False

        names = list(left_fields)
        names.extend(name for name in right_fields if name not in left_fields)

        all_match = True
        for name in names:
            if self._aborted:
                return False
            # A field missing on one side is compared as None
            if not self.diff(
                left_fields.get(name),
                right_fields.get(name),
                path.field(name),
                depth + 1
            ):
                all_match = False

        return all_match

    def _fields_of(self, instance: Any, path: FieldPath) -> list[tuple[str, Any]]:
        try:
            return list(self.field_accessor(instance))
        except RecursionError:
            raise
        except Exception as e:
            raise ComparatorFailure(path, "field accessor", e) from e

    def probe(self, left: Any, right: Any, path: FieldPath, depth: int) -> bool:
        """
        Check if two values are equal without recording differences.

        Used to pair set members and mapping keys. The probe shares this
        differ's registry and tracker so cycles stay detected.
        """
        scout = Differ(
            self.config,
            registry=self.registry,
            tracker=self.tracker,
            ignored=self.ignored,
            fail_fast=True
        )
        return scout.diff(left, right, path, depth)

    def evaluate(
        self,
        strategy: ComparisonStrategy,
        left: Any,
        right: Any,
        path: FieldPath
    ) -> bool:
        """Apply a non-deep strategy, surfacing comparator errors with their path."""
        try:
            return strategy.is_equal(left, right)
        except RecursionError:
            raise
        except Exception as e:
            raise ComparatorFailure(path, strategy.name, e) from e

    def is_ignored(self, path: FieldPath) -> bool:
        if any(pattern.matches(path) for pattern in self.ignored):
            self.paths_ignored += 1
            return True
        return False

    def add_difference(
        self,
        path: FieldPath,
        left_value: Any,
        right_value: Any,
        kind: DiffKind
    ):
        """Add a difference entry."""
        self.diffs.append(Difference(
            path=path,
            left_value=left_value,
            right_value=right_value,
            kind=kind
        ))

        if self.fail_fast:
            self._aborted = True

    def _add_type_mismatch(self, path: FieldPath, left: Any, right: Any):
        logger.debug(
            "Type mismatch at %s: %s vs %s",
            path, get_type_name(left), get_type_name(right)
        )
        self.add_difference(path, left, right, DiffKind.TYPE_MISMATCH)
