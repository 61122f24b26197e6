import math
from datetime import date, datetime

import pytest

from exdrf_tbl.column_list import ColumnList
from exdrf_tbl.column_types.api import (
    DateColumn,
    NumberColumn,
    TextColumn,
)
from exdrf_tbl.constants import SORT_ASC, SORT_DESC
from exdrf_tbl.sort import resolve_sort_column, sort_rows


def values(items, key="v"):
    return [row[key] for _, row in items]


def indexed(vals, key="v"):
    return list(enumerate({key: v, "n": i} for i, v in enumerate(vals)))


class TestNumbers:
    def test_nan_keeps_its_place(self):
        items = indexed([5, math.nan, 3])
        result = sort_rows(items, NumberColumn(id="v"), SORT_ASC)
        assert result[0][1]["v"] == 3
        assert math.isnan(result[1][1]["v"])
        assert result[2][1]["v"] == 5

    def test_nan_keeps_its_place_descending(self):
        items = indexed([3, math.nan, 5])
        result = sort_rows(items, NumberColumn(id="v"), SORT_DESC)
        assert [row["n"] for _, row in result] == [2, 1, 0]

    def test_coercion(self):
        items = indexed(["10", 9, "abc", None, 2.5])
        result = sort_rows(items, NumberColumn(id="v"), SORT_ASC)
        assert values(result) == [2.5, 9, "abc", None, "10"]

    def test_numeric_not_lexicographic(self):
        items = indexed([10, 9, 100, 1])
        result = sort_rows(items, NumberColumn(id="v"), SORT_ASC)
        assert values(result) == [1, 9, 10, 100]


class TestStability:
    @pytest.fixture
    def items(self):
        return indexed([2, 1, 2, 1, 3, 2])

    def test_ascending(self, items):
        result = sort_rows(items, NumberColumn(id="v"), SORT_ASC)
        assert [row["n"] for _, row in result] == [1, 3, 0, 2, 5, 4]

    def test_descending_is_not_reversed(self, items):
        result = sort_rows(items, NumberColumn(id="v"), SORT_DESC)
        assert [row["n"] for _, row in result] == [4, 0, 2, 5, 1, 3]

    def test_toggling_twice_gives_same_order(self, items):
        column = NumberColumn(id="v")
        first = sort_rows(items, column, SORT_ASC)
        sort_rows(items, column, SORT_DESC)
        assert sort_rows(items, column, SORT_ASC) == first

    def test_input_is_not_changed(self, items):
        before = list(items)
        sort_rows(items, NumberColumn(id="v"), SORT_DESC)
        assert items == before

    def test_keeps_original_indexes(self, items):
        result = sort_rows(items, NumberColumn(id="v"), SORT_ASC)
        assert [index for index, _ in result] == [1, 3, 0, 2, 5, 4]


class TestText:
    def test_locale_like_order(self):
        items = indexed(["banana", "Apple", "cherry", "apple", "Émile"])
        result = sort_rows(items, TextColumn(id="v"), SORT_ASC)
        assert values(result) == [
            "apple",
            "Apple",
            "banana",
            "cherry",
            "Émile",
        ]

    def test_booleans_sort_as_text(self):
        items = indexed([True, False, None])
        result = sort_rows(items, TextColumn(id="v"), SORT_ASC)
        assert values(result) == [None, False, True]


def test_dates():
    items = indexed(
        ["2024-03-01", date(2023, 1, 1), "not a date", datetime(2024, 1, 1, 12)]
    )
    result = sort_rows(items, DateColumn(id="v"), SORT_ASC)
    assert [row["n"] for _, row in result] == [1, 3, 2, 0]


class TestResolve:
    @pytest.fixture
    def cols(self):
        return ColumnList(
            [TextColumn(id="a"), TextColumn(id="b", sortable=False)]
        )

    def test_found(self, cols):
        assert resolve_sort_column(cols, "a").id == "a"

    def test_no_sort(self, cols):
        assert resolve_sort_column(cols, None) is None

    def test_missing_column(self, cols):
        assert resolve_sort_column(cols, "zzz") is None

    def test_not_sortable(self, cols):
        assert resolve_sort_column(cols, "b") is None
