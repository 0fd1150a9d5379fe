"""Data models for the structdiff engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

from .paths import FieldPath
from .strategies import ComparisonStrategy


class DiffKind(Enum):
    VALUE_MISMATCH = "VALUE_MISMATCH"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    MISSING_ON_RIGHT = "MISSING_ON_RIGHT"
    MISSING_ON_LEFT = "MISSING_ON_LEFT"
    SIZE_MISMATCH = "SIZE_MISMATCH"


_MIRRORED_KINDS = {
    DiffKind.MISSING_ON_RIGHT: DiffKind.MISSING_ON_LEFT,
    DiffKind.MISSING_ON_LEFT: DiffKind.MISSING_ON_RIGHT,
}


@dataclass(frozen=True)
class Difference:
    """A single difference found during comparison."""
    path: FieldPath
    left_value: Any
    right_value: Any
    kind: DiffKind

    def mirrored(self) -> Difference:
        """The same difference seen from the other side."""
        return Difference(
            path=self.path,
            left_value=self.right_value,
            right_value=self.left_value,
            kind=_MIRRORED_KINDS.get(self.kind, self.kind),
        )

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "kind": self.kind.value,
            "left_value": self.left_value,
            "right_value": self.right_value,
        }


@dataclass
class ComparisonConfig:
    """
    Configuration for a single comparison call.

    ``comparator_overrides`` maps a path pattern (string or ``FieldPath``) or
    a type to a ``ComparisonStrategy``. Its insertion order is the
    registration order used to break ties between overrides of the same tier.
    """
    ignored_paths: list = field(default_factory=list)
    comparator_overrides: dict = field(default_factory=dict)
    fail_fast: bool = False
    strict_type_checking: bool = False
    default_strategy: ComparisonStrategy = field(default_factory=ComparisonStrategy.deep)
    key_strategy: ComparisonStrategy = field(default_factory=ComparisonStrategy.natural)
    max_depth: int = 100
    field_accessor: Optional[Callable[[Any], list]] = None

    def ignoring(self, *patterns: str | FieldPath) -> ComparisonConfig:
        """Return a copy that also skips the given paths."""
        return replace(self, ignored_paths=[*self.ignored_paths, *patterns])

    def with_path_strategy(self, pattern: str | FieldPath, strategy: ComparisonStrategy) -> ComparisonConfig:
        """Return a copy with ``strategy`` registered for ``pattern``."""
        return self._with_override(pattern, strategy)

    def with_type_strategy(self, type_: type, strategy: ComparisonStrategy) -> ComparisonConfig:
        """Return a copy with ``strategy`` registered for values of ``type_``."""
        return self._with_override(type_, strategy)

    def _with_override(self, key: Any, strategy: ComparisonStrategy) -> ComparisonConfig:
        overrides = dict(self.comparator_overrides)
        # re-registering moves the key to the end so the last registration wins
        overrides.pop(key, None)
        overrides[key] = strategy
        return replace(self, comparator_overrides=overrides)


@dataclass
class Summary:
    """Summary statistics of comparison."""
    nodes_compared: int = 0
    differences_found: int = 0
    paths_ignored: int = 0
    cycles_short_circuited: int = 0

    def to_dict(self) -> dict:
        return {
            "nodes_compared": self.nodes_compared,
            "differences_found": self.differences_found,
            "paths_ignored": self.paths_ignored,
            "cycles_short_circuited": self.cycles_short_circuited,
        }


@dataclass
class DiffReport:
    """Complete comparison report."""
    is_match: bool
    summary: Summary
    differences: list[Difference] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_match": self.is_match,
            "summary": self.summary.to_dict(),
            "differences": [d.to_dict() for d in self.differences],
        }
