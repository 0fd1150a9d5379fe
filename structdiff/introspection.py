"""
Field enumeration for deep comparison.

The differ never inspects objects itself: it calls a field accessor, any
callable ``accessor(instance) -> list[(name, value)]``. ``fields_of`` is
the default; ``MethodResultAccessor`` compares objects through the results
of chosen zero-argument methods or properties instead.
"""

from __future__ import annotations

import dataclasses
import enum
import inspect
import uuid
from datetime import date, time, timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Any, Protocol, runtime_checkable


LEAF_TYPES = (
    type(None), bool, int, float, complex, str, bytes, bytearray,
    Decimal, Fraction, date, time, timedelta, enum.Enum, uuid.UUID, PurePath,
    type,
)


@runtime_checkable
class FieldAccessor(Protocol):
    """Structural protocol for field accessors.

    Must be total for any non-null object and return the same order on
    repeated calls; fields are matched by name, not position.
    """

    def __call__(self, instance: Any) -> list[tuple[str, Any]]: ...


def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def _slot_names(cls: type) -> list[str]:
    names = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in names:
                continue
            names.append(name)
    return names


def fields_of(instance: Any) -> list[tuple[str, Any]]:
    """
    Enumerate the fields of ``instance`` as ``(name, value)`` pairs.

    Dataclass fields come in declaration order, then named tuple fields,
    then ``__slots__`` along the MRO, then the instance ``__dict__``. Slots
    that were never assigned are skipped.
    """
    if isinstance(instance, LEAF_TYPES):
        return []

    seen: set[str] = set()
    result: list[tuple[str, Any]] = []

    def add(name: str, value: Any):
        if name not in seen:
            seen.add(name)
            result.append((name, value))

    if dataclasses.is_dataclass(instance) and not isinstance(instance, type):
        for f in dataclasses.fields(instance):
            if hasattr(instance, f.name):
                add(f.name, getattr(instance, f.name))

    if is_named_tuple(instance):
        for name in type(instance)._fields:
            add(name, getattr(instance, name))

    for name in _slot_names(type(instance)):
        try:
            add(name, getattr(instance, name))
        except AttributeError:
            continue

    instance_dict = getattr(instance, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name, value in instance_dict.items():
            add(name, value)

    return result


def method_result_for(instance: Any, method_name: str) -> Any:
    """
    Return the result of calling a public zero-argument method on ``instance``.

    Properties are read as well.

    Raises:
        ValueError: if the instance is None, the name is empty or private,
            the member does not exist, or it is a method that requires
            arguments
    """
    if instance is None:
        raise ValueError("Object instance can not be None!")
    if not method_name:
        raise ValueError("Method name can not be empty!")
    if method_name.startswith("_"):
        raise ValueError(_method_not_found(instance, method_name))

    static = inspect.getattr_static(type(instance), method_name, None)
    if isinstance(static, property):
        return getattr(instance, method_name)

    member = getattr(instance, method_name, None)
    if member is None or not callable(member):
        raise ValueError(_method_not_found(instance, method_name))

    try:
        inspect.signature(member).bind()
    except TypeError as e:
        raise ValueError(_method_not_found(instance, method_name)) from e
    except ValueError:
        # builtins without a signature are called as-is
        pass
    return member()


def _method_not_found(instance: Any, method_name: str) -> str:
    return (
        f"Can't find method with name '{method_name}' in class "
        f"{type(instance).__name__}. Make sure public method exists and "
        f"accepts no arguments!"
    )


class MethodResultAccessor:
    """
    Field accessor exposing the results of the given methods or properties.

    Usage:
        config = ComparisonConfig(field_accessor=MethodResultAccessor("area", "name"))
    """

    def __init__(self, *method_names: str):
        if not method_names:
            raise ValueError("At least one method name is required")
        self.method_names = method_names

    def __call__(self, instance: Any) -> list[tuple[str, Any]]:
        # nested values that expose none of the methods use plain fields
        if not any(hasattr(type(instance), name) for name in self.method_names):
            return fields_of(instance)
        return [(name, method_result_for(instance, name)) for name in self.method_names]
