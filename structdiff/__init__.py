"""
structdiff - Recursive structural comparison of Python object graphs

Decides whether two arbitrary object graphs are equivalent field by field,
honoring per-path and per-type strategy overrides, terminating on reference
cycles and comparing sequences, sets and mappings structurally. The result
is a list of Difference records for a message formatter to render.
"""

from .engine import StructDiffEngine, compare
from .models import (
    ComparisonConfig,
    Difference,
    DiffKind,
    DiffReport,
    Summary,
)
from .paths import FieldPath, PathPattern
from .strategies import (
    ComparisonStrategy,
    StrategyKind,
    StrategyRegistry,
)
from .comparators import (
    within_precision,
    case_insensitive,
    matching_pattern,
    datetime_within,
)
from .tracker import VisitedPairTracker
from .introspection import (
    FieldAccessor,
    MethodResultAccessor,
    fields_of,
    method_result_for,
)
from .config_loader import load_config, config_from_dict
from .exceptions import (
    StructDiffError,
    InputError,
    ConfigurationError,
    ComparatorFailure,
    DepthExceededError,
)

__version__ = "1.0.0"
__all__ = [
    # Engine
    "StructDiffEngine",
    "compare",
    "ComparisonConfig",
    # Results
    "Difference",
    "DiffKind",
    "DiffReport",
    "Summary",
    # Paths
    "FieldPath",
    "PathPattern",
    # Strategies
    "ComparisonStrategy",
    "StrategyKind",
    "StrategyRegistry",
    "within_precision",
    "case_insensitive",
    "matching_pattern",
    "datetime_within",
    # Traversal
    "VisitedPairTracker",
    "FieldAccessor",
    "MethodResultAccessor",
    "fields_of",
    "method_result_for",
    # Configuration files
    "load_config",
    "config_from_dict",
    # Errors
    "StructDiffError",
    "InputError",
    "ConfigurationError",
    "ComparatorFailure",
    "DepthExceededError",
]
