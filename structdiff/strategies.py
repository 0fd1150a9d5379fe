"""Comparison strategies and the registry that resolves them per node."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .exceptions import ConfigurationError
from .paths import FieldPath, PathPattern


class StrategyKind(Enum):
    IDENTITY = "identity"
    NATURAL = "natural"
    CUSTOM = "custom"
    DEEP = "deep"


@dataclass(frozen=True)
class ComparisonStrategy:
    """
    How two values at a node are decided equal.

    A custom comparator may return a ``bool`` (equal or not) or an ``int``
    ordering in the style of ``cmp`` where ``0`` means equal.
    """
    kind: StrategyKind
    comparator: Optional[Callable[[Any, Any], Any]] = None
    name: str = ""

    @classmethod
    def identity(cls) -> ComparisonStrategy:
        return cls(StrategyKind.IDENTITY, name="identity")

    @classmethod
    def natural(cls) -> ComparisonStrategy:
        return cls(StrategyKind.NATURAL, name="natural")

    @classmethod
    def deep(cls) -> ComparisonStrategy:
        return cls(StrategyKind.DEEP, name="deep")

    @classmethod
    def custom(
        cls,
        comparator: Callable[[Any, Any], Any],
        name: Optional[str] = None
    ) -> ComparisonStrategy:
        if not callable(comparator):
            raise ConfigurationError(
                "Custom comparators must be callable",
                {"type": type(comparator).__name__}
            )
        return cls(
            StrategyKind.CUSTOM,
            comparator=comparator,
            name=name or getattr(comparator, "__name__", "custom"),
        )

    @property
    def is_deep(self) -> bool:
        return self.kind is StrategyKind.DEEP

    def is_equal(self, left: Any, right: Any) -> bool:
        """
        Decide equality for non-deep strategies.

        Exceptions raised by ``==`` or by the custom comparator propagate;
        the differ wraps them with the offending path.
        """
        if self.kind is StrategyKind.IDENTITY:
            return left is right
        if self.kind is StrategyKind.NATURAL:
            # identity first, like container equality, so NaN equals itself
            return left is right or bool(left == right)
        if self.kind is StrategyKind.CUSTOM:
            result = self.comparator(left, right)
            if isinstance(result, bool):
                return result
            if isinstance(result, int):
                return result == 0
            return bool(result)
        raise ValueError("Deep strategies are evaluated by the differ")


@dataclass(frozen=True)
class _PathOverride:
    pattern: PathPattern
    strategy: ComparisonStrategy


class StrategyRegistry:
    """
    Resolves the strategy applicable at a node.

    Precedence, highest first:

    1. Exact path overrides (``$.address.zip``)
    2. Pattern overrides (``$..id``, ``$.items[*].price``)
    3. Type overrides, nearest class in the value type's MRO first
    4. The default strategy

    Within the path tiers the last registered matching override wins. The
    registry snapshots the overrides when built, so resolution is a pure
    function of ``(path, type)``.
    """

    def __init__(
        self,
        overrides: Optional[dict] = None,
        default: Optional[ComparisonStrategy] = None
    ):
        self.default = default or ComparisonStrategy.deep()
        _check_strategy(self.default, "default strategy")

        exact: list[_PathOverride] = []
        patterns: list[_PathOverride] = []
        self._types: dict[type, ComparisonStrategy] = {}

        for key, strategy in (overrides or {}).items():
            _check_strategy(strategy, f"override for {key!r}")
            if isinstance(key, type):
                self._types[key] = strategy
                continue
            pattern = PathPattern.of(key)
            target = exact if pattern.is_exact else patterns
            target.append(_PathOverride(pattern, strategy))

        # Reversed so the first match is the last registered
        self._exact = tuple(reversed(exact))
        self._patterns = tuple(reversed(patterns))

    def resolve(self, path: FieldPath, declared_type: Optional[type] = None) -> ComparisonStrategy:
        for override in self._exact:
            if override.pattern.matches(path):
                return override.strategy
        for override in self._patterns:
            if override.pattern.matches(path):
                return override.strategy
        if declared_type is not None and self._types:
            for klass in declared_type.__mro__:
                if klass in self._types:
                    return self._types[klass]
        return self.default


def _check_strategy(strategy: Any, what: str):
    if not isinstance(strategy, ComparisonStrategy):
        raise ConfigurationError(
            f"The {what} must be a ComparisonStrategy",
            {"type": type(strategy).__name__}
        )
