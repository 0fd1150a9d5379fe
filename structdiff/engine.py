"""Top-level entry points of the structdiff engine."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .differ import Differ
from .exceptions import ConfigurationError, InputError
from .models import ComparisonConfig, Difference, DiffReport, Summary
from .paths import PathPattern
from .strategies import ComparisonStrategy, StrategyRegistry
from .tracker import VisitedPairTracker

logger = logging.getLogger(__name__)


class StructDiffEngine:
    """
    Compares two object graphs with a given configuration.

    Each call builds a fresh strategy registry and visited pair tracker
    from a snapshot of the configuration, so an engine can be shared
    between threads and reused across calls.

    On a fault (a comparator raising, the depth guard tripping, a malformed
    configuration) the call raises and no partial result is returned.
    """

    def __init__(self, config: Optional[ComparisonConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Comparison configuration (uses defaults if not provided)
        """
        self.config = config or ComparisonConfig()

    def compare(self, left: Any, right: Any) -> list[Difference]:
        """
        Compare two values.

        Args:
            left: The actual value
            right: The expected value

        Returns:
            Every difference found, empty when the graphs are equivalent
        """
        return self.report(left, right).differences

    def report(self, left: Any, right: Any) -> DiffReport:
        """Compare two values and return the differences with statistics."""
        differ = self._create_differ()
        differ.diff(left, right)
        if differ.aborted:
            logger.debug("Fail fast: stopped at %s", differ.diffs[0].path)

        report = DiffReport(
            is_match=not differ.diffs,
            summary=Summary(
                nodes_compared=differ.nodes_compared,
                differences_found=len(differ.diffs),
                paths_ignored=differ.paths_ignored,
                cycles_short_circuited=differ.cycles_short_circuited,
            ),
            differences=list(differ.diffs),
        )
        logger.debug(
            "Compared %d nodes: %d differences, %d cycles short-circuited",
            report.summary.nodes_compared,
            report.summary.differences_found,
            report.summary.cycles_short_circuited,
        )
        return report

    def _create_differ(self) -> Differ:
        config = self.config
        self._validate_config(config)
        registry = StrategyRegistry(config.comparator_overrides, config.default_strategy)
        ignored = tuple(PathPattern.of(p) for p in config.ignored_paths)
        return Differ(config, registry=registry, tracker=VisitedPairTracker(), ignored=ignored)

    def _validate_config(self, config: Any):
        """Validate the configuration before any comparison starts."""
        if not isinstance(config, ComparisonConfig):
            raise InputError(
                "config must be a ComparisonConfig",
                {"type": type(config).__name__}
            )

        max_depth = config.max_depth
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise ConfigurationError(
                "max_depth must be a positive integer",
                {"max_depth": max_depth}
            )

        if not isinstance(config.key_strategy, ComparisonStrategy):
            raise ConfigurationError(
                "key_strategy must be a ComparisonStrategy",
                {"type": type(config.key_strategy).__name__}
            )

        if config.field_accessor is not None and not callable(config.field_accessor):
            raise ConfigurationError(
                "field_accessor must be callable",
                {"type": type(config.field_accessor).__name__}
            )

        if isinstance(config.ignored_paths, (str, bytes)):
            raise ConfigurationError(
                "ignored_paths must be a collection of path patterns",
                {"ignored_paths": config.ignored_paths}
            )


def compare(
    left: Any,
    right: Any,
    config: Optional[ComparisonConfig] = None
) -> list[Difference]:
    """
    Convenience function to compare two values.

    Args:
        left: The actual value
        right: The expected value
        config: Optional comparison configuration

    Returns:
        Every difference found, empty when the graphs are equivalent
    """
    engine = StructDiffEngine(config)
    return engine.compare(left, right)
