"""Custom exceptions for the structdiff engine."""

from __future__ import annotations

from typing import Any


class StructDiffError(Exception):
    """Base exception for structdiff errors."""
    pass


class InputError(StructDiffError):
    """Raised when the engine is called with invalid arguments."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(InputError):
    """Raised when a comparison configuration is malformed."""
    pass


class ComparatorFailure(StructDiffError):
    """Raised when a comparator raises while comparing two values."""
    def __init__(self, path: Any, strategy: str, cause: BaseException):
        super().__init__(
            f"Comparator '{strategy}' failed at path {path}: "
            f"{type(cause).__name__}: {cause}"
        )
        self.path = path
        self.strategy = strategy
        self.cause = cause


class DepthExceededError(StructDiffError):
    """Raised when maximum recursion depth is exceeded."""
    def __init__(self, depth: int, path: Any):
        super().__init__(f"Maximum depth ({depth}) exceeded at path: {path}")
        self.depth = depth
        self.path = path
