from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

# Type-inference result supplied by the surrounding layer. Opaque here.
PrimitiveHint: TypeAlias = Any

T = TypeVar("T")


class ProbeKind(str, Enum):
    COERCED = "coerced"
    PARSED = "parsed"
    CALLABLE = "callable"
    CLASSIFIER = "classifier"


@runtime_checkable
class DeclaredType(Protocol):
    """Anything with a ``parse`` classmethod/staticmethod/method taking one string."""

    def parse(self, raw: str) -> Any: ...


@dataclass(frozen=True, slots=True)
class ValidityProbe:
    """
    Tagged validity capability of a declared type.

    ``check`` is always a one-argument predicate; ``kind`` records which of the
    declared type's capabilities it was taken from.
    """

    kind: ProbeKind
    check: Callable[[Any], bool]

    def __call__(self, value: Any) -> bool:
        return bool(self.check(value))

    @classmethod
    def coerced(cls, fn: Callable[[Any], bool]) -> ValidityProbe:
        return cls(ProbeKind.COERCED, fn)

    @classmethod
    def parsed(cls, fn: Callable[[Any], bool]) -> ValidityProbe:
        return cls(ProbeKind.PARSED, fn)

    @classmethod
    def generic(cls, fn: Callable[[Any], bool]) -> ValidityProbe:
        return cls(ProbeKind.CALLABLE, fn)

    @classmethod
    def classifier(cls, kind: type | tuple[type, ...]) -> ValidityProbe:
        return cls(ProbeKind.CLASSIFIER, lambda value: isinstance(value, kind))


@dataclass(frozen=True, slots=True)
class ItemFailure:
    """A single raw item that failed to coerce."""

    index: int
    raw: Any
    error: Exception


@dataclass(frozen=True, slots=True)
class CoercionReport(Generic[T]):
    """Outcome of a non-aborting collection coercion."""

    value: T
    failures: tuple[ItemFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failures
