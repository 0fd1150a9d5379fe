"""Field paths and JSONPath-style path patterns for the structdiff engine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Optional

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.jsonpath import Child, Descendants, Fields, Index, Root, Slice, This

from .exceptions import ConfigurationError


_IDENTIFIER = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


class SegmentKind(Enum):
    FIELD = "field"
    INDEX = "index"
    KEY = "key"
    ELEMENT = "element"


@dataclass(frozen=True)
class PathSegment:
    """One step from a node to one of its children."""
    kind: SegmentKind
    value: Any = None

    def render(self) -> str:
        if self.kind is SegmentKind.FIELD:
            return f".{self.value}"
        if self.kind is SegmentKind.INDEX:
            return f"[{self.value}]"
        if self.kind is SegmentKind.ELEMENT:
            return "[*]"
        # Mapping keys render like JSON object members when they can
        if isinstance(self.value, str):
            if _IDENTIFIER.match(self.value):
                return f".{self.value}"
            return f"['{self.value}']"
        return f"[{self.value!r}]"


@dataclass(frozen=True)
class FieldPath:
    """
    Immutable location of a node relative to the comparison roots.

    Paths compare and hash structurally and render as JSONPath-like
    strings, e.g. ``$.address.zip`` or ``$.orders[2].lines['sku-1']``.
    """
    segments: tuple[PathSegment, ...] = ()

    @classmethod
    def root(cls) -> FieldPath:
        return cls()

    def _extend(self, segment: PathSegment) -> FieldPath:
        return FieldPath(self.segments + (segment,))

    def field(self, name: str) -> FieldPath:
        return self._extend(PathSegment(SegmentKind.FIELD, name))

    def index(self, position: int) -> FieldPath:
        return self._extend(PathSegment(SegmentKind.INDEX, position))

    def key(self, key: Any) -> FieldPath:
        return self._extend(PathSegment(SegmentKind.KEY, key))

    def element(self) -> FieldPath:
        return self._extend(PathSegment(SegmentKind.ELEMENT))

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def last(self) -> Optional[PathSegment]:
        return self.segments[-1] if self.segments else None

    def __str__(self) -> str:
        return "$" + "".join(segment.render() for segment in self.segments)


@dataclass(frozen=True)
class _Step:
    """A single compiled step of a path pattern."""
    kind: str  # "field", "index", "any" or "descend"
    values: tuple = ()

    def accepts(self, segment: PathSegment) -> bool:
        if self.kind == "any":
            return segment.kind is not SegmentKind.FIELD
        if self.kind == "field":
            if segment.kind not in (SegmentKind.FIELD, SegmentKind.KEY):
                return False
            return "*" in self.values or str(segment.value) in self.values
        if self.kind == "index":
            if segment.kind not in (SegmentKind.INDEX, SegmentKind.KEY):
                return False
            value = segment.value
            return isinstance(value, int) and not isinstance(value, bool) and value in self.values
        return False


def _flatten(node: Any, expression: str) -> list[_Step]:
    """Turn a parsed jsonpath_ng expression into a flat list of steps."""
    if isinstance(node, (Root, This)):
        return []
    if isinstance(node, Child):
        return _flatten(node.left, expression) + _flatten(node.right, expression)
    if isinstance(node, Descendants):
        return (
            _flatten(node.left, expression)
            + [_Step("descend")]
            + _flatten(node.right, expression)
        )
    if isinstance(node, Fields):
        return [_Step("field", tuple(node.fields))]
    if isinstance(node, Index):
        indices = getattr(node, "indices", None) or (node.index,)
        return [_Step("index", tuple(indices))]
    if isinstance(node, Slice):
        if node.start is None and node.end is None and node.step is None:
            return [_Step("any")]
    raise ConfigurationError(
        f"Unsupported path pattern '{expression}'",
        {"element": type(node).__name__}
    )


def normalize_expression(expression: str) -> str:
    """Normalize a path pattern so that it starts at the root."""
    expression = expression.strip()
    if not expression:
        return "$"
    if not expression.startswith("$"):
        expression = "$." + expression
    return expression


@lru_cache(maxsize=256)
def _compile(expression: str) -> tuple[_Step, ...]:
    """Compile and cache a path pattern."""
    try:
        parsed = jsonpath_parse(expression)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ConfigurationError(
            f"Invalid path pattern '{expression}': {e}",
            {"pattern": expression}
        ) from e
    return tuple(_flatten(parsed, expression))


class PathPattern:
    """
    Matches concrete ``FieldPath`` values.

    Supports:
    - Exact match: $.address.zip (a bare ``address.zip`` is accepted too)
    - Recursive descent: $..id
    - Wildcards: $.items[*].name, $.meta.*
    - Indices: $.items[0]
    """

    def __init__(self, expression: str | FieldPath):
        if isinstance(expression, FieldPath):
            self.expression = str(expression)
            self._exact_path: Optional[FieldPath] = expression
            self._steps: tuple[_Step, ...] = ()
            self.is_exact = True
            return
        if not isinstance(expression, str):
            raise ConfigurationError(
                "Path patterns must be strings or FieldPath instances",
                {"type": type(expression).__name__}
            )
        self.expression = normalize_expression(expression)
        self._exact_path = None
        self._steps = _compile(self.expression)
        self.is_exact = all(
            step.kind == "index" or (step.kind == "field" and "*" not in step.values)
            for step in self._steps
        )

    @classmethod
    def of(cls, spec: str | FieldPath | PathPattern) -> PathPattern:
        if isinstance(spec, PathPattern):
            return spec
        return cls(spec)

    def matches(self, path: FieldPath) -> bool:
        if self._exact_path is not None:
            return path == self._exact_path

        steps = self._steps
        end = len(steps)

        def closure(states: set[int]) -> set[int]:
            # a descent step may match zero segments
            result = set(states)
            pending = list(states)
            while pending:
                i = pending.pop()
                if i < end and steps[i].kind == "descend" and i + 1 not in result:
                    result.add(i + 1)
                    pending.append(i + 1)
            return result

        states = closure({0})
        for segment in path.segments:
            advanced = set()
            for i in states:
                if i == end:
                    continue
                step = steps[i]
                if step.kind == "descend":
                    advanced.add(i)
                elif step.accepts(segment):
                    advanced.add(i + 1)
            if not advanced:
                return False
            states = closure(advanced)
        return end in states

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPattern):
            return NotImplemented
        return self.expression == other.expression

    def __hash__(self) -> int:
        return hash(self.expression)

    def __repr__(self) -> str:
        return f"PathPattern({self.expression!r})"
