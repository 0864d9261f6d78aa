from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("paramcoerce")
except PackageNotFoundError:  # pragma: no cover - local source tree without installed metadata
    __version__ = "0.1.0"

from .api import coerce_collection, collection_coercer, validate_collection
from .collection import CollectionTypeCoercer
from .errors import CollectionTypeError, DeclaredTypeError, ParamCoerceError
from .probes import resolve_probe
from .pydantic_compat import CoercionOptions, CollectionParam, collection_param
from .scalar import ScalarTypeCoercer
from .types import CoercionReport, DeclaredType, ItemFailure, ProbeKind, ValidityProbe

__all__ = [
    "CoercionOptions",
    "CoercionReport",
    "CollectionParam",
    "CollectionTypeCoercer",
    "CollectionTypeError",
    "DeclaredType",
    "DeclaredTypeError",
    "ItemFailure",
    "ParamCoerceError",
    "ProbeKind",
    "ScalarTypeCoercer",
    "ValidityProbe",
    "coerce_collection",
    "collection_coercer",
    "collection_param",
    "resolve_probe",
    "validate_collection",
]
