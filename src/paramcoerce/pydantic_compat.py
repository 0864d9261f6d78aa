"""pydantic v2 integration for collection-typed parameters.

:class:`CollectionParam` is an ``Annotated`` marker that plugs a
:class:`CollectionTypeCoercer` into a pydantic field::

    class Query(BaseModel):
        ids: Annotated[list[Any], CollectionParam(UserId)]
        tags: collection_param(Tag, as_set=True)

Raw input may be a single string (one repeated parameter seen once) or a
list/tuple of strings. Parse failures raised by the declared type and failed
validity checks both surface as :class:`pydantic.ValidationError`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import PydanticCustomError, core_schema

from .collection import CollectionTypeCoercer


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got: {value}")
    return value


@dataclass(frozen=True, slots=True)
class CoercionOptions:
    """
    Options applied by the validation layer around a collection coercer.

    ``max_items`` bounds the number of raw tokens accepted before any coercion
    runs. ``report_all`` switches from first-failure-aborts to reporting every
    unparseable item in a single error.
    """

    max_items: int | None = None
    report_all: bool = False

    @classmethod
    def from_env(cls) -> CoercionOptions:
        return cls(
            max_items=_env_int("PARAMCOERCE_MAX_ITEMS"),
            report_all=os.getenv("PARAMCOERCE_REPORT_ALL") == "1",
        )


def _raw_items(value: Any) -> list[Any]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return list(value)
    raise PydanticCustomError(
        "collection_type",
        "Input should be a string or a sequence of strings, got {input_type}",
        {"input_type": type(value).__name__},
    )


@dataclass(frozen=True, slots=True)
class CollectionParam:
    declared: Any
    as_set: bool = False
    options: CoercionOptions | None = None

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        coercer = CollectionTypeCoercer(self.declared, as_set=self.as_set)
        options = self.options if self.options is not None else CoercionOptions.from_env()
        return core_schema.no_info_plain_validator_function(
            lambda value: _validate(coercer, options, value)
        )

    def __get_pydantic_json_schema__(
        self, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        json_schema: dict[str, Any] = {"type": "array", "items": {"type": "string"}}
        if self.as_set:
            json_schema["uniqueItems"] = True
        if self.options is not None and self.options.max_items is not None:
            json_schema["maxItems"] = self.options.max_items
        return json_schema


def _check_max_items(options: CoercionOptions, count: int) -> None:
    if options.max_items is not None and count > options.max_items:
        raise PydanticCustomError(
            "collection_too_long",
            "Collection should have at most {max_items} items, got {actual}",
            {"max_items": options.max_items, "actual": count},
        )


def _already_coerced(coercer: CollectionTypeCoercer, value: Any) -> bool:
    # Raw tokens are always parsed, even when a loose probe would accept them.
    if isinstance(value, str) or not coercer.is_valid(None, value):
        return False
    return not any(isinstance(item, str) for item in value)


def _validate(coercer: CollectionTypeCoercer, options: CoercionOptions, value: Any) -> Any:
    if _already_coerced(coercer, value):
        _check_max_items(options, len(value))
        return value

    items = _raw_items(value)
    _check_max_items(options, len(items))

    if options.report_all:
        report = coercer.coerce_report(items)
        if not report.ok:
            raise PydanticCustomError(
                "collection_item_parsing",
                "Could not parse items at indices {indices}",
                {
                    "indices": [f.index for f in report.failures],
                    "errors": [str(f.error) for f in report.failures],
                },
            )
        coerced = report.value
    else:
        position = -1

        def tracked() -> Iterator[Any]:
            nonlocal position
            for position, item in enumerate(items):
                yield item

        try:
            coerced = coercer.coerce(tracked())
        except Exception as exc:
            raise PydanticCustomError(
                "collection_item_parsing",
                "Could not parse item at index {index}: {error}",
                {"index": position, "error": str(exc)},
            ) from exc

    if not coercer.is_valid(None, coerced):
        raise PydanticCustomError(
            "collection_item_type",
            "Coerced items are not valid {declared} values",
            {"declared": getattr(coercer.declared, "__name__", repr(coercer.declared))},
        )
    return coerced


def collection_param(
    declared: Any, *, as_set: bool = False, options: CoercionOptions | None = None
) -> Any:
    """Build an ``Annotated`` field type coercing raw tokens into ``declared`` values."""
    container = set[Any] if as_set else list[Any]
    return Annotated[container, CollectionParam(declared, as_set=as_set, options=options)]
