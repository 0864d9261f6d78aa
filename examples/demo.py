"""paramcoerce demo: repeated query parameters into typed lists and sets."""

from dataclasses import dataclass
from typing import Annotated, Any
from urllib.parse import parse_qs

from pydantic import BaseModel, ValidationError

import paramcoerce as pc

# ── Declared types ───────────────────────────────────────────────────


class UserId(int):
    @classmethod
    def parse(cls, raw: str) -> "UserId":
        return cls(int(raw))


@dataclass(frozen=True)
class Tag:
    name: str

    @classmethod
    def parse(cls, raw: str) -> "Tag":
        if not raw.isidentifier():
            raise ValueError(f"invalid tag: {raw!r}")
        return cls(raw.lower())

    @staticmethod
    def is_coerced(value: object) -> bool:
        return isinstance(value, Tag) and value.name.islower()


params = parse_qs("id=3&id=1&id=3&tag=News&tag=news&tag=sports")

# ── 1. Coercers: list keeps order and duplicates, set collapses ──────

ids = pc.CollectionTypeCoercer(UserId)
tags = pc.CollectionTypeCoercer(Tag, as_set=True)

print(ids.coerce(params["id"]))  # [3, 1, 3]
print(tags.coerce(params["tag"]))  # {Tag(name='news'), Tag(name='sports')}
print(tags.is_valid(None, [Tag("news")]))  # False: a list is not a set

# ── 2. All or nothing vs. opt-in reporting ───────────────────────────

try:
    ids.coerce(["1", "two", "3"])
except ValueError as exc:
    print("aborted:", exc)

report = ids.coerce_report(["1", "two", "3", "four"])
print(report.value, [(f.index, f.raw) for f in report.failures])  # [1, 3] [(1, 'two'), (3, 'four')]

# ── 3. pydantic models ───────────────────────────────────────────────


class Search(BaseModel):
    ids: Annotated[list[Any], pc.CollectionParam(UserId)]
    tags: pc.collection_param(Tag, as_set=True)  # type: ignore[valid-type]


print(Search(ids=params["id"], tags=params["tag"]))

try:
    Search(ids=["1", "x"], tags=["ok"])
except ValidationError as exc:
    print(exc)
