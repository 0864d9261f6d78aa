from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any

from .collection import CollectionTypeCoercer
from .errors import CollectionTypeError
from .types import PrimitiveHint


# One shared coercer per (declared, as_set); coercers are immutable.
_COERCERS: dict[tuple[Hashable, bool], CollectionTypeCoercer] = {}


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def collection_coercer(
    declared: Any, *, as_set: bool = False, stacklevel: int = 2
) -> CollectionTypeCoercer:
    """
    Return a (shared, when possible) coercer for ``declared``.

    Coercers are immutable, so hashable declared types get one cached instance per
    ``(declared, as_set)`` pair. ``stacklevel`` attributes probe-resolution warnings.
    """
    if not _is_hashable(declared):
        return CollectionTypeCoercer(declared, as_set=as_set, stacklevel=stacklevel + 1)
    key = (declared, bool(as_set))
    coercer = _COERCERS.get(key)
    if coercer is None:
        coercer = CollectionTypeCoercer(declared, as_set=as_set, stacklevel=stacklevel + 1)
        # Concurrent first calls may both build; either instance is equivalent.
        coercer = _COERCERS.setdefault(key, coercer)
    return coercer


def coerce_collection(
    raw: Iterable[str], declared: Any, *, as_set: bool = False
) -> list[Any] | set[Any]:
    """Coerce ``raw`` into a list (or set) of ``declared`` values; parse errors propagate."""
    return collection_coercer(declared, as_set=as_set, stacklevel=3).coerce(raw)


def validate_collection(
    raw: Iterable[str],
    declared: Any,
    *,
    as_set: bool = False,
    primitive: PrimitiveHint = None,
) -> list[Any] | set[Any]:
    """
    Coerce ``raw`` and check the result against ``declared``.

    Raises whatever the declared type's parser raises for a malformed item, and
    :class:`CollectionTypeError` when the coerced collection fails the validity probe.
    """
    coercer = collection_coercer(declared, as_set=as_set, stacklevel=3)
    value = coercer.coerce(raw)
    if not coercer.is_valid(primitive, value):
        raise CollectionTypeError(value, as_set=coercer.as_set)
    return value
