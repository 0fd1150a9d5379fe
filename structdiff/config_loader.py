"""Load comparison configurations from YAML or JSON documents."""

from __future__ import annotations

import importlib
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from .comparators import case_insensitive, datetime_within, matching_pattern, within_precision
from .exceptions import ConfigurationError
from .models import ComparisonConfig
from .strategies import ComparisonStrategy

logger = logging.getLogger(__name__)


_SIMPLE_STRATEGIES = {
    "identity": ComparisonStrategy.identity,
    "natural": ComparisonStrategy.natural,
    "deep": ComparisonStrategy.deep,
}

_KNOWN_KEYS = {
    "fail_fast",
    "strict_type_checking",
    "max_depth",
    "default_strategy",
    "key_strategy",
    "ignored_paths",
    "overrides",
}


def load_config(config_path: str | Path) -> ComparisonConfig:
    """
    Load a configuration file.

    Example document::

        fail_fast: false
        strict_type_checking: true
        ignored_paths:
          - $..password
        overrides:
          - path: $.address.zip
            strategy: natural
          - path: $..amount
            strategy: precision
            tolerance: 0.01
          - type: decimal.Decimal
            strategy: natural

    Args:
        config_path: Path to a YAML or JSON file

    Returns:
        The parsed ComparisonConfig
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        content = f.read()

    # YAML also handles JSON since JSON is valid YAML
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse config file: {e}",
            {"path": str(config_path)}
        ) from e

    logger.debug("Loaded comparison config from %s", config_path)
    return config_from_dict(data or {})


def config_from_dict(data: dict) -> ComparisonConfig:
    """Build a ComparisonConfig from a parsed document."""
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config document must be a mapping",
            {"type": type(data).__name__}
        )

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys: {', '.join(map(str, unknown))}",
            {"keys": unknown}
        )

    config = ComparisonConfig(
        fail_fast=_read_bool(data, "fail_fast"),
        strict_type_checking=_read_bool(data, "strict_type_checking"),
        max_depth=data.get("max_depth", 100),
    )

    if "default_strategy" in data:
        config.default_strategy = strategy_from_spec(data["default_strategy"])
    if "key_strategy" in data:
        config.key_strategy = strategy_from_spec(data["key_strategy"])

    ignored = data.get("ignored_paths") or []
    if not isinstance(ignored, list) or not all(isinstance(p, str) for p in ignored):
        raise ConfigurationError(
            "ignored_paths must be a list of path patterns",
            {"ignored_paths": ignored}
        )
    config = config.ignoring(*ignored)

    for entry in data.get("overrides") or []:
        config = _apply_override(config, entry)

    return config


def strategy_from_spec(spec: str | dict) -> ComparisonStrategy:
    """
    Build a strategy from its name, or a mapping with a ``strategy`` name
    and the options of a built-in comparator.
    """
    if isinstance(spec, str):
        spec = {"strategy": spec}
    if not isinstance(spec, dict) or "strategy" not in spec:
        raise ConfigurationError(
            "A strategy must be a name or a mapping with a 'strategy' key",
            {"spec": spec}
        )

    name = spec["strategy"]
    if name in _SIMPLE_STRATEGIES:
        return _SIMPLE_STRATEGIES[name]()

    try:
        if name == "precision":
            return within_precision(float(spec["tolerance"]))
        if name == "case_insensitive":
            return case_insensitive(trim=bool(spec.get("trim", False)))
        if name == "pattern":
            return matching_pattern(str(spec["regex"]))
        if name == "datetime":
            return datetime_within(str(spec["tolerance"]), spec.get("format"))
    except KeyError as e:
        raise ConfigurationError(
            f"Strategy '{name}' requires option {e}",
            {"spec": spec}
        ) from e
    except (TypeError, ValueError, re.error) as e:
        raise ConfigurationError(
            f"Invalid options for strategy '{name}': {e}",
            {"spec": spec}
        ) from e

    raise ConfigurationError(f"Unknown strategy '{name}'", {"spec": spec})


def _apply_override(config: ComparisonConfig, entry: Any) -> ComparisonConfig:
    if not isinstance(entry, dict):
        raise ConfigurationError(
            "Each override must be a mapping",
            {"override": entry}
        )

    options = {k: v for k, v in entry.items() if k not in ("path", "type")}
    strategy = strategy_from_spec(options)

    if "path" in entry and "type" in entry:
        raise ConfigurationError(
            "An override targets either a path or a type, not both",
            {"override": entry}
        )
    if "path" in entry:
        return config.with_path_strategy(str(entry["path"]), strategy)
    if "type" in entry:
        return config.with_type_strategy(resolve_type(entry["type"]), strategy)
    raise ConfigurationError(
        "An override needs a 'path' or a 'type'",
        {"override": entry}
    )


def resolve_type(dotted_name: str) -> type:
    """Resolve a dotted name such as ``decimal.Decimal`` or ``float``."""
    if not isinstance(dotted_name, str) or not dotted_name:
        raise ConfigurationError("Type names must be non-empty strings", {"type": dotted_name})

    module_name, _, attr = dotted_name.rpartition(".")
    module_name = module_name or "builtins"
    try:
        resolved = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot resolve type '{dotted_name}'",
            {"type": dotted_name}
        ) from e

    if not isinstance(resolved, type):
        raise ConfigurationError(f"'{dotted_name}' is not a type", {"type": dotted_name})
    return resolved


def _read_bool(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a boolean", {key: value})
    return value
