"""Tests for configuration loading and the built-in comparators."""

from decimal import Decimal
from datetime import datetime

import pytest
from structdiff import (
    ComparisonConfig,
    ConfigurationError,
    StrategyKind,
    case_insensitive,
    compare,
    config_from_dict,
    datetime_within,
    load_config,
    matching_pattern,
    within_precision,
)
from structdiff.config_loader import resolve_type, strategy_from_spec


CONFIG_YAML = """
fail_fast: false
strict_type_checking: true
max_depth: 50
ignored_paths:
  - $..password
overrides:
  - path: $..amount
    strategy: precision
    tolerance: 0.01
  - path: $.status
    strategy: case_insensitive
    trim: true
  - type: decimal.Decimal
    strategy: natural
"""


class TestLoadConfig:
    """Test loading configuration files."""

    def test_load_yaml(self, tmp_path):
        """Test that a YAML document becomes a ComparisonConfig."""
        config_file = tmp_path / "compare.yaml"
        config_file.write_text(CONFIG_YAML)

        config = load_config(config_file)

        assert isinstance(config, ComparisonConfig)
        assert config.strict_type_checking is True
        assert config.max_depth == 50
        assert config.ignored_paths == ["$..password"]
        assert list(config.comparator_overrides) == ["$..amount", "$.status", Decimal]

    def test_loaded_config_applies(self, tmp_path):
        """Test comparing with a loaded configuration."""
        config_file = tmp_path / "compare.yaml"
        config_file.write_text(CONFIG_YAML)
        config = load_config(config_file)

        left = {"amount": 100.0, "status": " PAID ", "password": "a"}
        right = {"amount": 100.005, "status": "paid", "password": "b"}

        assert compare(left, right, config) == []

    def test_load_json(self, tmp_path):
        """Test that JSON documents are accepted."""
        config_file = tmp_path / "compare.json"
        config_file.write_text('{"fail_fast": true, "ignored_paths": ["$.id"]}')

        config = load_config(str(config_file))
        assert config.fail_fast is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("fail_fast: [unclosed")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert load_config(config_file) == ComparisonConfig()


class TestConfigFromDict:
    """Test building configurations from parsed documents."""

    def test_strategies(self):
        config = config_from_dict({
            "default_strategy": "natural",
            "key_strategy": {"strategy": "case_insensitive"},
        })

        assert config.default_strategy.kind is StrategyKind.NATURAL
        assert config.key_strategy.kind is StrategyKind.CUSTOM

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown config keys"):
            config_from_dict({"fail_fats": True})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            config_from_dict(["fail_fast"])

    def test_non_boolean_flag(self):
        with pytest.raises(ConfigurationError):
            config_from_dict({"fail_fast": "yes"})

    def test_invalid_ignored_paths(self):
        with pytest.raises(ConfigurationError):
            config_from_dict({"ignored_paths": "$.id"})

    def test_override_needs_target(self):
        with pytest.raises(ConfigurationError):
            config_from_dict({"overrides": [{"strategy": "natural"}]})

    def test_override_with_two_targets(self):
        with pytest.raises(ConfigurationError):
            config_from_dict({"overrides": [{"path": "$.a", "type": "int", "strategy": "natural"}]})

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError, match="Unknown strategy"):
            strategy_from_spec("fuzzy")

    def test_missing_option(self):
        with pytest.raises(ConfigurationError, match="requires option"):
            strategy_from_spec({"strategy": "precision"})

    def test_invalid_option(self):
        with pytest.raises(ConfigurationError):
            strategy_from_spec({"strategy": "precision", "tolerance": -1})
        with pytest.raises(ConfigurationError):
            strategy_from_spec({"strategy": "datetime", "tolerance": "soon"})
        with pytest.raises(ConfigurationError):
            strategy_from_spec({"strategy": "pattern", "regex": "("})

    def test_resolve_type(self):
        assert resolve_type("decimal.Decimal") is Decimal
        assert resolve_type("float") is float
        with pytest.raises(ConfigurationError):
            resolve_type("decimal.NoSuchType")
        with pytest.raises(ConfigurationError):
            resolve_type("os.path.join")


class TestBuiltinComparators:
    """Test the tolerant comparators."""

    def test_precision_within_tolerance(self):
        assert within_precision(0.01).is_equal(100.00, 100.005)

    def test_precision_exceeds_tolerance(self):
        assert not within_precision(0.01).is_equal(100.00, 100.05)

    def test_precision_non_numeric(self):
        assert not within_precision(0.01).is_equal("abc", 1)

    def test_case_insensitive(self):
        assert case_insensitive().is_equal("ACTIVE", "active")
        assert not case_insensitive().is_equal("  hello  ", "hello")
        assert case_insensitive(trim=True).is_equal("  HELLO  ", "hello")

    def test_pattern_matching(self):
        strategy = matching_pattern(r"[A-Z]{3}-\d{4}")

        assert strategy.is_equal("ABC-1234", "XYZ-5678")
        assert not strategy.is_equal("ABC-1234", "invalid")

    def test_datetime_within_tolerance(self):
        strategy = datetime_within("5s")

        assert strategy.is_equal("2025-02-02T10:30:00Z", "2025-02-02T10:30:03Z")
        assert not strategy.is_equal("2025-02-02T10:30:00Z", "2025-02-02T10:30:10Z")

    def test_datetime_objects_and_format(self):
        strategy = datetime_within("1m", fmt="%d/%m/%Y %H:%M")

        assert strategy.is_equal(datetime(2025, 2, 2, 10, 30), "02/02/2025 10:31")
        assert not strategy.is_equal("02/02/2025 10:30", "not a date")

    def test_comparator_in_comparison(self):
        """Test a built-in comparator registered for a type."""
        config = ComparisonConfig().with_type_strategy(float, within_precision(0.001))

        assert compare({"x": 1.0, "y": [2.0]}, {"x": 1.0004, "y": [2.0009]}, config) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
