import logging
from typing import List, Optional

from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_list import ColumnList
from exdrf_tbl.constants import SORT_DESC, IndexedRow, SortDirection

logger = logging.getLogger(__name__)


def resolve_sort_column(
    columns: ColumnList, sort_column: Optional[str]
) -> Optional[TblColumn]:
    """Find the column used for sorting.

    Args:
        columns: The schema of the table.
        sort_column: The id of the column or None.

    Returns:
        The column or None if there is no active sort. A column that is not
        in the schema or is not sortable means no active sort.
    """
    if not sort_column:
        return None
    column = columns.get_column(sort_column, raise_e=False)
    if column is None:
        logger.debug("Sort column %s is not in the schema", sort_column)
        return None
    if not column.sortable:
        logger.debug("Column %s is not sortable", sort_column)
        return None
    return column


def sort_rows(
    items: List[IndexedRow],
    column: TblColumn,
    direction: SortDirection,
) -> List[IndexedRow]:
    """Sort the rows by the value of a column.

    The sort is stable: rows with equal keys keep their relative order in
    both directions (the descending order compares the keys the other way
    around; it does not reverse the ascending result).

    Rows whose value cannot be compared (see `TblColumn.sort_key()`) are
    equal to everything. They stay at their position and the comparable
    rows are sorted in the remaining positions.

    Args:
        items: The rows together with their index in the full data set.
        column: The column to sort by.
        direction: Either `asc` or `desc`.

    Returns:
        A new list.
    """
    keys = [
        column.sort_key(column.query_value(row, index)) for index, row in items
    ]
    slots = [i for i, k in enumerate(keys) if k is not None]
    ordered = sorted(
        slots,
        key=lambda i: keys[i],
        reverse=direction == SORT_DESC,
    )

    result = list(items)
    for slot, source in zip(slots, ordered):
        result[slot] = items[source]
    return result
