import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_list import ColumnList
from exdrf_tbl.config import TableConfig
from exdrf_tbl.constants import IndexedRow, RowKeySpec, RowKeyType
from exdrf_tbl.filter import filter_rows, search_rows
from exdrf_tbl.paginate import paginate
from exdrf_tbl.query import QueryState
from exdrf_tbl.selection import RowKeyFunc, make_row_key
from exdrf_tbl.sort import resolve_sort_column, sort_rows
from exdrf_tbl.utils import count_label

logger = logging.getLogger(__name__)


@define(frozen=True)
class DerivedView:
    """What the table shows for a given data set and query state.

    The view is recomputed each time something changes and is never stored.

    Attributes:
        rows: The rows in the current page (or all the filtered rows if the
            pagination is disabled), in display order.
        row_indexes: The index of each row in the full data set.
        row_keys: The key of each row.
        selected: Whether each row is selected.
        columns: The visible columns, in schema order.
        total_rows: The number of rows in the full data set.
        total_filtered: The number of rows that passed search and filters.
        total_pages: The number of pages; at least 1.
        page: The current page, clamped to `[1, total_pages]`.
        page_size: The number of rows in a page.
        start_index: The index of the first row of the page in the filtered
            rows (inclusive).
        end_index: The index of the last row of the page in the filtered
            rows (exclusive).
        paginated: Whether the rows were split in pages.
    """

    rows: List[Any] = field(factory=list)
    row_indexes: List[int] = field(factory=list)
    row_keys: List[RowKeyType] = field(factory=list)
    selected: List[bool] = field(factory=list)
    columns: List[TblColumn] = field(factory=list)
    total_rows: int = 0
    total_filtered: int = 0
    total_pages: int = 1
    page: int = 1
    page_size: int = 1
    start_index: int = 0
    end_index: int = 0
    paginated: bool = True

    @property
    def row_numbers(self) -> List[int]:
        """The 1-based position of each row in the filtered rows."""
        return [self.start_index + i + 1 for i in range(len(self.rows))]

    @property
    def start_row(self) -> int:
        """The 1-based position of the first row shown; 0 if none."""
        return self.start_index + 1 if self.rows else 0

    @property
    def end_row(self) -> int:
        """The 1-based position of the last row shown; 0 if none."""
        return self.end_index if self.rows else 0

    @property
    def is_empty(self) -> bool:
        """No row passed search and filters."""
        return self.total_filtered == 0

    @property
    def has_data(self) -> bool:
        """The data set is not empty (regardless of filters)."""
        return self.total_rows > 0

    @property
    def show_pagination(self) -> bool:
        """Whether the pagination controls are useful."""
        return self.paginated and self.total_filtered > self.page_size

    @property
    def selected_rows(self) -> List[Any]:
        """The selected rows of this view."""
        return [r for r, s in zip(self.rows, self.selected) if s]

    def describe(self) -> str:
        """A short description like `Showing 11-20 of 25 rows`."""
        if self.is_empty:
            return f"No rows ({count_label(self.total_rows, 'row')} in total)"
        return (
            f"Showing {self.start_row}-{self.end_row} of "
            f"{count_label(self.total_filtered, 'row')}"
        )


def _as_column_list(
    columns: Union[ColumnList, Iterable[TblColumn]],
) -> ColumnList:
    if isinstance(columns, ColumnList):
        return columns
    return ColumnList(columns)


def filtered_rows(
    rows: Sequence[Any],
    columns: Union[ColumnList, Iterable[TblColumn]],
    state: QueryState,
    config: Optional[TableConfig] = None,
) -> List[IndexedRow]:
    """Apply search, filters and sorting.

    Args:
        rows: The full data set.
        columns: The schema of the table.
        state: The query state.
        config: The features of the table; all features are enabled by
            default.

    Returns:
        The rows that passed search and filters, sorted, together with
        their index in the full data set.
    """
    columns = _as_column_list(columns)
    config = config if config is not None else TableConfig()

    items: List[IndexedRow] = list(enumerate(rows))
    if config.searchable:
        items = search_rows(items, columns, state.search, config.fold_accents)
    if config.filterable:
        items = filter_rows(items, columns, state.filters, config.fold_accents)
    if config.sortable:
        column = resolve_sort_column(columns, state.sort_column)
        if column is not None:
            items = sort_rows(items, column, state.sort_direction)
    return items


def compute_view(
    rows: Sequence[Any],
    columns: Union[ColumnList, Iterable[TblColumn]],
    state: QueryState,
    config: Optional[TableConfig] = None,
    row_key: Union[RowKeySpec, RowKeyFunc] = "id",
) -> DerivedView:
    """Compute what the table shows.

    This is a pure function: the same arguments always produce the same
    view and none of the arguments is changed. Search, filters and sorting
    are applied first, the pagination last.

    Args:
        rows: The full data set.
        columns: The schema of the table.
        state: The query state.
        config: The features of the table; all features are enabled by
            default.
        row_key: The name of the field that identifies a row or a function
            that computes the key (see `make_row_key()`).
    """
    columns = _as_column_list(columns)
    config = config if config is not None else TableConfig()
    key_func = make_row_key(row_key)

    items = filtered_rows(rows, columns, state, config)
    total = len(items)

    if config.pagination:
        page_size = state.page_size
        if page_size < 1:
            logger.warning("Invalid page size %s; using 1", page_size)
            page_size = 1
        bounds = paginate(total, state.page, page_size)
        if bounds.page != state.page:
            logger.debug("Page %d clamped to %d", state.page, bounds.page)
        page_items = items[bounds.start : bounds.end]
        page, pages, start, end = (
            bounds.page,
            bounds.total_pages,
            bounds.start,
            bounds.end,
        )
    else:
        page_size = max(state.page_size, 1)
        page_items = items
        page, pages, start, end = 1, 1, 0, total

    keys = [key_func(row, index) for index, row in page_items]
    return DerivedView(
        rows=[row for _, row in page_items],
        row_indexes=[index for index, _ in page_items],
        row_keys=keys,
        selected=[k in state.selected for k in keys],
        columns=columns.visible_columns(state.hidden_columns),
        total_rows=len(rows),
        total_filtered=total,
        total_pages=pages,
        page=page,
        page_size=page_size,
        start_index=start,
        end_index=end,
        paginated=config.pagination,
    )
