"""Resolve how a declared type judges its own coerced values.

Declared types advertise validity through optional capabilities, checked in
this order (first found wins):

1. ``is_coerced(value)``
2. ``is_parsed(value)``
3. the declared type itself, when it is a callable object rather than a class
4. ``isinstance(value, declared)``, when the declared type is a class (or a
   tuple of classes)

Resolution happens once, at coercer construction; a declared type offering
none of these is rejected with :class:`DeclaredTypeError`.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any

from .errors import DeclaredTypeError
from .types import ProbeKind, ValidityProbe

logger = logging.getLogger(__name__)

_NAMED_PROBES: tuple[tuple[str, ProbeKind], ...] = (
    ("is_coerced", ProbeKind.COERCED),
    ("is_parsed", ProbeKind.PARSED),
)


def _is_classifier(declared: Any) -> bool:
    if isinstance(declared, type):
        return True
    return (
        isinstance(declared, tuple)
        and bool(declared)
        and all(isinstance(t, type) for t in declared)
    )


def _available_probes(declared: Any) -> list[ValidityProbe]:
    found: list[ValidityProbe] = []
    for attr, kind in _NAMED_PROBES:
        fn = getattr(declared, attr, None)
        if callable(fn):
            found.append(ValidityProbe(kind, fn))
    # Classes are callable (they construct instances); only plain callable
    # objects count as a generic probe.
    if callable(declared) and not isinstance(declared, type):
        found.append(ValidityProbe.generic(declared))
    return found


def resolve_probe(declared: Any, *, stacklevel: int = 2) -> ValidityProbe:
    """Pick the single validity probe ``declared`` exposes."""
    found = _available_probes(declared)
    if found:
        chosen = found[0]
        if len(found) > 1:
            shadowed = ", ".join(p.kind.value for p in found[1:])
            warnings.warn(
                f"Declared type {declared!r} exposes several validity probes; "
                f"using {chosen.kind.value!r}, ignoring {shadowed}",
                stacklevel=stacklevel,
            )
        logger.debug("Resolved %s probe for %r", chosen.kind.value, declared)
        return chosen

    if _is_classifier(declared):
        logger.debug("Resolved classifier probe for %r", declared)
        return ValidityProbe.classifier(declared)

    raise DeclaredTypeError(
        declared,
        "no is_coerced/is_parsed/callable validity probe and not usable as a class",
    )
