"""Collection coercion: shape selection, all-or-nothing batches, validity aggregation."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass

import pytest

from paramcoerce.collection import CollectionTypeCoercer
from paramcoerce.errors import DeclaredTypeError
from paramcoerce.scalar import ScalarTypeCoercer
from paramcoerce.types import CoercionReport, ItemFailure


class Integer(int):
    @classmethod
    def parse(cls, raw: str) -> Integer:
        return cls(int(raw))


@dataclass(frozen=True)
class Tag:
    name: str

    @classmethod
    def parse(cls, raw: str) -> Tag:
        if not raw.isidentifier():
            raise ValueError(f"invalid tag: {raw!r}")
        return cls(raw.lower())


class Tracking:
    """Records every parse call so aborted batches can be inspected."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def parse(self, raw: str) -> int:
        self.seen.append(raw)
        return int(raw)

    def __call__(self, value: object) -> bool:
        return isinstance(value, int)


# ===========================================================================
# Ordered output
# ===========================================================================


def test_list_preserves_order_and_duplicates():
    coercer = CollectionTypeCoercer(Integer)
    result = coercer.coerce(["1", "2", "2"])
    assert result == [1, 2, 2]
    assert isinstance(result, list)
    assert all(isinstance(item, Integer) for item in result)
    assert coercer.is_valid(None, result)


def test_list_element_matches_scalar_coercion():
    raw = ["10", "-3", "007", "10"]
    scalar = ScalarTypeCoercer(Integer)
    result = CollectionTypeCoercer(scalar).coerce(raw)
    assert len(result) == len(raw)
    assert result == [scalar.coerce(item) for item in raw]


def test_empty_input():
    assert CollectionTypeCoercer(Integer).coerce([]) == []
    assert CollectionTypeCoercer(Integer, as_set=True).coerce([]) == set()


def test_accepts_any_iterable():
    coercer = CollectionTypeCoercer(Integer)
    assert coercer.coerce(iter(["3", "1"])) == [3, 1]
    assert coercer.coerce(("5",)) == [5]


# ===========================================================================
# Set output
# ===========================================================================


def test_set_collapses_duplicates():
    coercer = CollectionTypeCoercer(Integer, as_set=True)
    result = coercer.coerce(["1", "2", "2"])
    assert result == {1, 2}
    assert isinstance(result, set)
    assert coercer.is_valid(None, result)


def test_set_dedupes_by_coerced_equality():
    # Different raw spellings that coerce to equal values collapse to one.
    coercer = CollectionTypeCoercer(Tag, as_set=True)
    assert coercer.coerce(["News", "news", "NEWS", "sports"]) == {Tag("news"), Tag("sports")}

    numbers = CollectionTypeCoercer(Integer, as_set=True)
    assert numbers.coerce(["1", "01", "001"]) == {1}


# ===========================================================================
# All-or-nothing failure
# ===========================================================================


def test_first_failure_aborts():
    coercer = CollectionTypeCoercer(Integer)
    with pytest.raises(ValueError):
        coercer.coerce(["1", "x"])


def test_failure_stops_at_failing_item():
    declared = Tracking()
    coercer = CollectionTypeCoercer(declared)
    with pytest.raises(ValueError):
        coercer.coerce(["1", "bad", "3"])
    assert declared.seen == ["1", "bad"]


def test_failure_propagates_declared_types_exception():
    coercer = CollectionTypeCoercer(Tag, as_set=True)
    with pytest.raises(ValueError, match="invalid tag: '1st'"):
        coercer.coerce(["ok", "1st"])


def test_failure_leaves_coercer_usable():
    coercer = CollectionTypeCoercer(Integer)
    with pytest.raises(ValueError):
        coercer.coerce(["x"])
    assert coercer.coerce(["4"]) == [4]


# ===========================================================================
# Validity
# ===========================================================================


class TestIsValid:
    def test_list_passed_to_set_coercer_is_invalid(self):
        coercer = CollectionTypeCoercer(Integer, as_set=True)
        assert not coercer.is_valid(None, [Integer(1), Integer(2)])

    def test_set_passed_to_list_coercer_is_invalid(self):
        coercer = CollectionTypeCoercer(Integer)
        assert not coercer.is_valid(None, {Integer(1)})

    def test_tuple_is_not_a_list(self):
        coercer = CollectionTypeCoercer(Integer)
        assert not coercer.is_valid(None, (Integer(1),))

    def test_frozenset_counts_as_set(self):
        coercer = CollectionTypeCoercer(Integer, as_set=True)
        assert coercer.is_valid(None, frozenset({Integer(1)}))

    def test_shape_check_short_circuits(self):
        calls: list[object] = []

        def probe(value: object) -> bool:
            calls.append(value)
            return True

        probe.parse = int  # type: ignore[attr-defined]
        coercer = CollectionTypeCoercer(probe, as_set=True)
        assert not coercer.is_valid(None, [1, 2])
        assert calls == []

    def test_single_bad_element_fails(self):
        coercer = CollectionTypeCoercer(Integer)
        assert not coercer.is_valid(None, [Integer(1), 2, Integer(3)])

    def test_empty_collections_are_valid(self):
        assert CollectionTypeCoercer(Integer).is_valid(None, [])
        assert CollectionTypeCoercer(Integer, as_set=True).is_valid(None, set())

    def test_uses_callable_probe(self):
        coercer = CollectionTypeCoercer(Tracking())
        assert coercer.is_valid(None, coercer.coerce(["1", "2"]))
        assert not coercer.is_valid(None, ["1"])


# ===========================================================================
# Partial reporting (opt-in)
# ===========================================================================


class TestCoerceReport:
    def test_collects_every_failure(self):
        coercer = CollectionTypeCoercer(Integer)
        report = coercer.coerce_report(["1", "x", "3", "y"])
        assert isinstance(report, CoercionReport)
        assert not report.ok
        assert report.value == [1, 3]
        assert [f.index for f in report.failures] == [1, 3]
        assert [f.raw for f in report.failures] == ["x", "y"]
        assert all(isinstance(f.error, ValueError) for f in report.failures)

    def test_clean_input(self):
        coercer = CollectionTypeCoercer(Integer, as_set=True)
        report = coercer.coerce_report(["2", "2", "5"])
        assert report.ok
        assert report.failures == ()
        assert report.value == {2, 5}

    def test_item_failure_is_immutable(self):
        failure = ItemFailure(index=0, raw="x", error=ValueError("x"))
        with pytest.raises(AttributeError):
            failure.index = 1  # type: ignore[misc]


# ===========================================================================
# Construction & sharing
# ===========================================================================


def test_construction_rejects_unusable_type():
    with pytest.raises(DeclaredTypeError):
        CollectionTypeCoercer(int)


def test_accepts_prebuilt_scalar_coercer():
    scalar = ScalarTypeCoercer(Integer)
    coercer = CollectionTypeCoercer(scalar, as_set=True)
    assert coercer.scalar is scalar
    assert coercer.declared is Integer
    assert coercer.as_set is True


def test_repr_mentions_shape():
    assert repr(CollectionTypeCoercer(Integer, as_set=True)).endswith("as_set=True)")


def test_shared_instance_across_threads():
    coercer = CollectionTypeCoercer(Integer)
    batches = [[str(i), str(i + 1), str(i)] for i in range(200)]
    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(coercer.coerce, batches))
    assert results == [[i, i + 1, i] for i in range(200)]
    assert all(coercer.is_valid(None, r) for r in results)


def test_shadowed_probe_warning_points_at_caller():
    class Loose:
        @staticmethod
        def parse(raw: str) -> str:
            return raw

        @staticmethod
        def is_coerced(value: object) -> bool:
            return True

        @staticmethod
        def is_parsed(value: object) -> bool:
            return True

    with pytest.warns(UserWarning, match="several validity probes") as record:
        CollectionTypeCoercer(Loose, as_set=True)
    assert record[0].filename == __file__
