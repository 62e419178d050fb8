"""Runtime checks for values crossing the persistence boundary."""

from __future__ import annotations

import math


class TypeValidationError(TypeError):
    """A value does not have the shape the store or a binding requires."""


def is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def ensure_number(value: object, name: str = "value") -> int | float:
    if not is_number(value):
        raise TypeValidationError(f"{name} must be a finite number, got {value!r}")
    return value  # type: ignore[return-value]


def ensure_number_list(values: object, name: str = "values") -> list[int | float]:
    if not isinstance(values, (list, tuple)):
        raise TypeValidationError(f"{name} must be a list of numbers, got {type(values).__name__}")
    return [ensure_number(item, f"{name}[{index}]") for index, item in enumerate(values)]


def to_key(identifier: object) -> str:
    """Return the store key for an identifier.

    Numeric identifiers become their decimal string, with integral floats
    written without a fractional part (``3.0`` and ``3`` share key ``"3"``).
    """
    if isinstance(identifier, str):
        return identifier
    number = ensure_number(identifier, "identifier")
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)
