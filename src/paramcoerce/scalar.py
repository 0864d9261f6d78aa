from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .errors import DeclaredTypeError
from .probes import resolve_probe
from .types import DeclaredType, PrimitiveHint, ValidityProbe


def _parse_capability(declared: Any, method: Any | None) -> Callable[[str], Any]:
    source = declared if method is None else method
    if isinstance(source, DeclaredType) and callable(source.parse):
        return source.parse
    if method is not None and callable(method):
        return method
    raise DeclaredTypeError(source, "no callable 'parse' capability")


class ScalarTypeCoercer:
    """
    Coerce single raw tokens with a declared type's own ``parse``.

    ``method`` optionally supplies the coercion independently of the type: an
    object with ``parse`` or a plain one-argument callable. Type checking always
    follows ``declared`` (or an explicit ``probe``).

    ``stacklevel`` attributes probe-resolution warnings, as for :func:`warnings.warn`.

    Instances hold no mutable state and may be shared freely.
    """

    __slots__ = ("_declared", "_parse", "_probe")

    def __init__(
        self,
        declared: DeclaredType | type[Any],
        *,
        method: DeclaredType | Callable[[str], Any] | None = None,
        probe: ValidityProbe | None = None,
        stacklevel: int = 2,
    ) -> None:
        self._declared = declared
        self._parse = _parse_capability(declared, method)
        if probe is None:
            probe = resolve_probe(declared, stacklevel=stacklevel + 1)
        self._probe = probe

    @property
    def declared(self) -> Any:
        return self._declared

    @property
    def probe(self) -> ValidityProbe:
        return self._probe

    def coerce(self, raw: str) -> Any:
        # Parse failures propagate untouched; recovery belongs to the caller.
        return self._parse(raw)

    def is_valid(self, primitive: PrimitiveHint, value: Any) -> bool:
        return self._probe(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._declared!r}, probe={self._probe.kind.value})"
