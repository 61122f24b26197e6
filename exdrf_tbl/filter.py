"""Search and filter stages.

The filter map of the query state is converted to a list of field filters,
one for each column that has a non-empty value:

```json
    [
        {"fld": "status", "op": "in", "vl": ["open", "pending"]},
        {"fld": "name", "op": "ilike", "vl": "ann"}
    ]
```

The field filters are AND-ed together; the options of an `in` filter are
OR-ed. The free-text search is applied before the filters and keeps a row
if any of the searchable columns contains the text.

Both stages compare text case-insensitively and look for substrings, so a
scalar filter behaves like a search limited to one column.
"""

import logging
from typing import Any, Iterable, List, Literal, Mapping, Tuple

from attrs import define

from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_list import ColumnList
from exdrf_tbl.constants import IndexedRow
from exdrf_tbl.query import is_empty_filter, is_multi_value
from exdrf_tbl.utils import contains_text

logger = logging.getLogger(__name__)

OP_IN = "in"
OP_ILIKE = "ilike"

FilterOp = Literal["in", "ilike"]


@define
class FieldFilter:
    """Describes how the rows should be filtered by one of the columns.

    Attributes:
        fld: The id of the column to filter by.
        op: The operation to perform: `in` keeps rows whose value is one of
            the options in `vl`; `ilike` keeps rows whose text contains the
            text of `vl`, ignoring case.
        vl: The value to compare against. Its meaning depends on the
            operation.
    """

    fld: str
    op: FilterOp
    vl: Any

    def matches(
        self,
        column: TblColumn,
        row: Any,
        index: int,
        fold_accents: bool = True,
    ) -> bool:
        """Tell if the row passes this filter.

        Args:
            column: The column identified by `fld`.
            row: The row to check.
            index: The index of the row in the full data set.
            fold_accents: Also compare the accent-free forms of the text.
        """
        value = column.query_value(row, index)
        if self.op == OP_IN:
            return column.matches_options(value, self.vl)
        needle = str(self.vl).lower()
        return any(
            contains_text(text, needle, fold_accents)
            for text in column.match_texts(value)
        )


def build_field_filters(filters: Mapping[str, Any]) -> List[FieldFilter]:
    """Convert the filter map into a list of field filters.

    Empty values are skipped.

    Args:
        filters: Maps column ids to filter values.
    """
    result = []
    for fld, value in filters.items():
        if is_empty_filter(value):
            continue
        if is_multi_value(value):
            result.append(FieldFilter(fld=fld, op=OP_IN, vl=list(value)))
        else:
            result.append(FieldFilter(fld=fld, op=OP_ILIKE, vl=value))
    return result


def matches_search(
    row: Any,
    index: int,
    columns: Iterable[TblColumn],
    needle: str,
    fold_accents: bool = True,
) -> bool:
    """Tell if any of the columns contains the text.

    Args:
        row: The row to check.
        index: The index of the row in the full data set.
        columns: The searchable columns.
        needle: The lower case text to search for.
        fold_accents: Also compare the accent-free forms of the text.
    """
    for column in columns:
        value = column.query_value(row, index)
        for text in column.match_texts(value):
            if contains_text(text, needle, fold_accents):
                return True
    return False


def search_rows(
    items: List[IndexedRow],
    columns: ColumnList,
    text: str,
    fold_accents: bool = True,
) -> List[IndexedRow]:
    """Keep the rows where any searchable column contains the text.

    An empty or white-space only text keeps all rows.

    Args:
        items: The rows together with their index in the full data set.
        columns: The schema of the table.
        text: The text to search for.
        fold_accents: Also compare the accent-free forms of the text.
    """
    if not text or not text.strip():
        return items

    needle = text.lower()
    searchable = columns.searchable_columns
    return [
        (index, row)
        for index, row in items
        if matches_search(row, index, searchable, needle, fold_accents)
    ]


def filter_rows(
    items: List[IndexedRow],
    columns: ColumnList,
    filters: Mapping[str, Any],
    fold_accents: bool = True,
) -> List[IndexedRow]:
    """Keep the rows that pass all the filters.

    Filters for unknown or non-filterable columns are ignored.

    Args:
        items: The rows together with their index in the full data set.
        columns: The schema of the table.
        filters: Maps column ids to filter values.
        fold_accents: Also compare the accent-free forms of the text.
    """
    active: List[Tuple[FieldFilter, TblColumn]] = []
    for f_filter in build_field_filters(filters):
        column = columns.get_column(f_filter.fld, raise_e=False)
        if column is None or not column.filterable:
            logger.debug("Ignoring filter for column %s", f_filter.fld)
            continue
        active.append((f_filter, column))

    if not active:
        return items

    return [
        (index, row)
        for index, row in items
        if all(
            f_filter.matches(column, row, index, fold_accents)
            for f_filter, column in active
        )
    ]


def describe_filters(
    filters: Mapping[str, Any], columns: ColumnList
) -> List[Tuple[str, str]]:
    """Create a summary of the active filters.

    Args:
        filters: Maps column ids to filter values.
        columns: The schema of the table.

    Returns:
        A list of (column title, value text) pairs. Options of multi-select
        filters are shown using their labels where available.
    """
    result = []
    for f_filter in build_field_filters(filters):
        column = columns.get_column(f_filter.fld, raise_e=False)
        if column is None:
            title = f_filter.fld
        else:
            title = column.title

        if f_filter.op == OP_IN:
            parts = []
            for option in f_filter.vl:
                label = column.option_label(option) if column else None
                parts.append(str(option) if label is None else label)
            text = ", ".join(parts)
        else:
            text = str(f_filter.vl)
        result.append((title, text))
    return result
