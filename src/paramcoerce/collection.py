from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .scalar import ScalarTypeCoercer
from .types import CoercionReport, ItemFailure, PrimitiveHint


class CollectionTypeCoercer:
    """
    Coerce a sequence of raw tokens into a ``list`` (or ``set``) of declared-type values.

    The scalar coercion is applied item by item, in input order. With
    ``as_set=True`` the mapped values are collapsed into a ``set`` using their own
    equality; otherwise the ``list`` is returned as-is, duplicates included.

    :meth:`coerce` is all-or-nothing: the first item whose parse raises aborts the
    whole call with that exception. :meth:`coerce_report` is the opt-in variant that
    keeps going and records per-item failures.

    Unlike :class:`ScalarTypeCoercer`, no coercion method can be supplied apart from
    the declared type.
    """

    __slots__ = ("_scalar", "_as_set")

    def __init__(
        self, declared: Any | ScalarTypeCoercer, as_set: bool = False, *, stacklevel: int = 2
    ) -> None:
        if isinstance(declared, ScalarTypeCoercer):
            self._scalar = declared
        else:
            self._scalar = ScalarTypeCoercer(declared, stacklevel=stacklevel + 1)
        self._as_set = bool(as_set)

    @property
    def scalar(self) -> ScalarTypeCoercer:
        return self._scalar

    @property
    def as_set(self) -> bool:
        return self._as_set

    @property
    def declared(self) -> Any:
        return self._scalar.declared

    def _shape(self, values: list[Any]) -> list[Any] | set[Any]:
        return set(values) if self._as_set else values

    def coerce(self, raw: Iterable[str]) -> list[Any] | set[Any]:
        coerced = [self._scalar.coerce(item) for item in raw]
        return self._shape(coerced)

    def coerce_report(self, raw: Iterable[str]) -> CoercionReport[list[Any] | set[Any]]:
        """Coerce every item, collecting failures instead of raising on the first one."""
        coerced: list[Any] = []
        failures: list[ItemFailure] = []
        for index, item in enumerate(raw):
            try:
                coerced.append(self._scalar.coerce(item))
            except Exception as exc:
                failures.append(ItemFailure(index=index, raw=item, error=exc))
        return CoercionReport(value=self._shape(coerced), failures=tuple(failures))

    def is_valid(self, primitive: PrimitiveHint, value: Any) -> bool:
        expected = (set, frozenset) if self._as_set else list
        if not isinstance(value, expected):
            return False
        return all(self._scalar.is_valid(primitive, item) for item in value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._scalar.declared!r}, as_set={self._as_set})"
