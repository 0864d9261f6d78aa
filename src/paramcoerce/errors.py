from __future__ import annotations

from typing import Any


class ParamCoerceError(Exception):
    """Base exception for all paramcoerce errors."""


class DeclaredTypeError(ParamCoerceError, TypeError):
    """Raised at construction when a declared type lacks a required capability."""

    def __init__(self, declared: Any, reason: str) -> None:
        self.declared = declared
        self.reason = reason
        super().__init__(f"Unusable declared type {declared!r}: {reason}")


class CollectionTypeError(ParamCoerceError, ValueError):
    """Raised when a coerced collection does not satisfy its declared type."""

    def __init__(self, value: Any, *, as_set: bool) -> None:
        self.value = value
        self.as_set = as_set
        shape = "set" if as_set else "list"
        super().__init__(f"Coerced value {value!r} is not a valid {shape} of the declared type")
