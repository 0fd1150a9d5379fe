"""Tests for field paths, path patterns and strategy resolution."""

import pytest
from structdiff import (
    ComparisonStrategy,
    ConfigurationError,
    FieldPath,
    PathPattern,
    StrategyKind,
    StrategyRegistry,
)


ROOT = FieldPath.root()


class TestFieldPath:
    """Test FieldPath construction and rendering."""

    def test_root(self):
        assert str(ROOT) == "$"
        assert ROOT.depth == 0
        assert ROOT.last is None

    def test_rendering(self):
        """Test every segment kind renders JSONPath-like."""
        path = ROOT.field("orders").index(2).key("lines").key("sku-1").key(7).element()
        assert str(path) == "$.orders[2].lines['sku-1'][7][*]"

    def test_structural_equality(self):
        """Test that paths compare and hash by value."""
        a = ROOT.field("address").field("zip")
        b = ROOT.field("address").field("zip")

        assert a == b
        assert hash(a) == hash(b)
        assert a != ROOT.field("address").key("zip")

    def test_immutable_extension(self):
        """Test that extending a path leaves the parent untouched."""
        parent = ROOT.field("a")
        parent.field("b")
        assert str(parent) == "$.a"


class TestPathPattern:
    """Test JSONPath pattern matching against concrete paths."""

    def test_exact_match(self):
        pattern = PathPattern("$.address.zip")

        assert pattern.is_exact
        assert pattern.matches(ROOT.field("address").field("zip"))
        assert not pattern.matches(ROOT.field("address"))
        assert not pattern.matches(ROOT.field("home").field("address").field("zip"))

    def test_bare_expression_is_normalized(self):
        """Test that a pattern without root starts at the root."""
        pattern = PathPattern("password")

        assert pattern.expression == "$.password"
        assert pattern.matches(ROOT.field("password"))

    def test_recursive_descent(self):
        """Test that $..name matches the field at any depth."""
        pattern = PathPattern("$..id")

        assert not pattern.is_exact
        assert pattern.matches(ROOT.field("id"))
        assert pattern.matches(ROOT.field("a").index(3).field("id"))
        assert pattern.matches(ROOT.key("meta").key("id"))
        assert not pattern.matches(ROOT.field("id").field("value"))

    def test_wildcards(self):
        """Test field and bracket wildcards."""
        items = PathPattern("$.items[*].name")
        assert items.matches(ROOT.field("items").index(0).field("name"))
        assert items.matches(ROOT.field("items").element().field("name"))
        assert not items.matches(ROOT.field("items").field("name"))

        members = PathPattern("$.meta.*")
        assert members.matches(ROOT.field("meta").field("owner"))
        assert not members.matches(ROOT.field("meta"))

    def test_index(self):
        pattern = PathPattern("$.items[0]")

        assert pattern.is_exact
        assert pattern.matches(ROOT.field("items").index(0))
        assert not pattern.matches(ROOT.field("items").index(1))

    def test_field_path_pattern(self):
        """Test patterns built from concrete paths match only that path."""
        path = ROOT.field("a").key("b c")
        pattern = PathPattern.of(path)

        assert pattern.is_exact
        assert pattern.matches(path)
        assert not pattern.matches(ROOT.field("a"))

    def test_invalid_patterns(self):
        """Test that invalid or unsupported expressions are configuration errors."""
        with pytest.raises(ConfigurationError):
            PathPattern("$[")
        with pytest.raises(ConfigurationError):
            PathPattern("$.a | $.b")
        with pytest.raises(ConfigurationError):
            PathPattern(42)


class TestStrategyRegistry:
    """Test strategy resolution precedence."""

    def setup_method(self):
        self.always = ComparisonStrategy.custom(lambda a, b: True, name="always")
        self.never = ComparisonStrategy.custom(lambda a, b: False, name="never")

    def test_default_is_deep(self):
        registry = StrategyRegistry()
        assert registry.resolve(ROOT, int).kind is StrategyKind.DEEP

    def test_precedence(self):
        """Test exact path, then pattern, then type, then default."""
        natural = ComparisonStrategy.natural()
        registry = StrategyRegistry({
            int: natural,
            "$..zip": self.never,
            "$.address.zip": self.always,
        })
        zip_path = ROOT.field("address").field("zip")

        assert registry.resolve(zip_path, int) is self.always
        assert registry.resolve(ROOT.field("home").field("zip"), int) is self.never
        assert registry.resolve(ROOT.field("age"), int) is natural
        assert registry.resolve(ROOT.field("name"), str).kind is StrategyKind.DEEP

    def test_last_registered_wins(self):
        """Test tie-breaking within a tier."""
        registry = StrategyRegistry({"$..zip": self.never, "$.*.zip": self.always})
        assert registry.resolve(ROOT.field("a").field("zip"), int) is self.always

    def test_mro_order(self):
        """Test the nearest registered class wins."""
        registry = StrategyRegistry({int: self.never, bool: self.always})

        assert registry.resolve(ROOT, bool) is self.always
        assert registry.resolve(ROOT, int) is self.never

    def test_custom_default(self):
        registry = StrategyRegistry(default=ComparisonStrategy.identity())
        assert registry.resolve(ROOT, object).kind is StrategyKind.IDENTITY

    def test_rejects_non_strategies(self):
        with pytest.raises(ConfigurationError):
            StrategyRegistry({"$.a": lambda a, b: True})
        with pytest.raises(ConfigurationError):
            StrategyRegistry(default="deep")

    def test_custom_requires_callable(self):
        with pytest.raises(ConfigurationError):
            ComparisonStrategy.custom("not callable")


class TestStrategyEquality:
    """Test non-deep strategy decisions."""

    def test_identity(self):
        value = [1]
        strategy = ComparisonStrategy.identity()

        assert strategy.is_equal(value, value)
        assert not strategy.is_equal(value, [1])

    def test_natural(self):
        assert ComparisonStrategy.natural().is_equal([1], [1])

    def test_natural_is_reflexive(self):
        nan = float("nan")
        assert ComparisonStrategy.natural().is_equal(nan, nan)
        assert not ComparisonStrategy.natural().is_equal(nan, float("nan"))

    def test_custom_bool_and_ordering(self):
        assert ComparisonStrategy.custom(lambda a, b: a == b).is_equal(1, 1)
        assert ComparisonStrategy.custom(lambda a, b: 0).is_equal(1, 2)
        assert not ComparisonStrategy.custom(lambda a, b: -1).is_equal(1, 2)

    def test_deep_is_not_evaluated_directly(self):
        with pytest.raises(ValueError):
            ComparisonStrategy.deep().is_equal(1, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
