import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from attrs import define

from exdrf_tbl.actions import BulkAction, RowAction, actions_for_row
from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_list import ColumnList
from exdrf_tbl.config import TableConfig
from exdrf_tbl.constants import (
    SORT_ASC,
    SORT_DESC,
    CheckState,
    ExportFormat,
    RowKeySpec,
    RowKeyType,
    SortDirection,
)
from exdrf_tbl.export import ExportRequest, build_export, check_export_format
from exdrf_tbl.filter import describe_filters
from exdrf_tbl.paginate import clamp_page
from exdrf_tbl.query import QueryState, is_empty_filter
from exdrf_tbl.selection import SelectionTracker, make_row_key
from exdrf_tbl.sort import resolve_sort_column
from exdrf_tbl.view import DerivedView, compute_view, filtered_rows

logger = logging.getLogger(__name__)


@define
class TableEvents:
    """Callbacks that inform the owner of the table about user actions.

    The callbacks are notifications: the engine does not wait for them and
    does not depend on their result. Errors raised by them are logged.

    Attributes:
        on_sort: Receives the column id (None when the sort is cleared)
            and the direction.
        on_filter: Receives a copy of the filter map.
        on_search: Receives the search text.
        on_row_select: Receives a copy of the set of selected keys.
        on_export: Receives the export format.
    """

    on_sort: Optional[Callable[[Optional[str], SortDirection], Any]] = None
    on_filter: Optional[Callable[[Dict[str, Any]], Any]] = None
    on_search: Optional[Callable[[str], Any]] = None
    on_row_select: Optional[Callable[[Set[RowKeyType]], Any]] = None
    on_export: Optional[Callable[[ExportFormat], Any]] = None

    def emit(self, name: str, *args: Any) -> None:
        """Call the callback with the given name, if any.

        Args:
            name: The name of the attribute (like `on_sort`).
            args: The arguments for the callback.
        """
        callback = getattr(self, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error("Error in %s callback: %s", name, e, exc_info=True)


class TableEngine:
    """The state of a data table and the operations that change it.

    The engine owns the query state and changes it only through its
    methods. The view is recomputed from the rows, the columns and the
    query state each time it is requested.

    Attributes:
        rows: The full data set.
        columns: The schema of the table.
        state: The query state.
        config: The features of the table.
        events: The callbacks for user actions.
        selection: Keeps the selected rows; shares its set with the state.
        row_key: The function that computes the identity of a row.
        actions: The actions offered for each row.
        bulk_actions: The actions offered for the selected rows.
    """

    rows: Sequence[Any]
    columns: ColumnList
    state: QueryState
    config: TableConfig
    events: TableEvents
    selection: SelectionTracker
    actions: List[RowAction]
    bulk_actions: List[BulkAction]

    def __init__(
        self,
        rows: Optional[Sequence[Any]] = None,
        columns: Optional[Union[ColumnList, Iterable[TblColumn]]] = None,
        row_key: RowKeySpec = "id",
        state: Optional[QueryState] = None,
        config: Optional[TableConfig] = None,
        events: Optional[TableEvents] = None,
        actions: Optional[List[RowAction]] = None,
        bulk_actions: Optional[List[BulkAction]] = None,
    ):
        """Initialize the engine.

        Args:
            rows: The full data set.
            columns: The schema of the table.
            row_key: The name of the field that identifies a row or a
                function that computes the key (see `make_row_key()`).
            state: The initial query state. If not provided the state
                starts with the defaults and the page size from the
                configuration. Columns marked as hidden in the schema are
                added to the hidden columns.
            config: The features of the table.
            events: The callbacks for user actions.
            actions: The actions offered for each row.
            bulk_actions: The actions offered for the selected rows.
        """
        self.config = config if config is not None else TableConfig()
        self.events = events if events is not None else TableEvents()
        self.rows = list(rows) if rows is not None else []
        self.columns = (
            columns
            if isinstance(columns, ColumnList)
            else ColumnList(columns or [])
        )
        self.row_key = make_row_key(row_key)
        self.actions = list(actions or [])
        self.bulk_actions = list(bulk_actions or [])

        if state is None:
            state = QueryState(page_size=self.config.page_size)
        self.state = state
        self.state.hidden_columns.update(self.columns.initially_hidden())
        self.selection = SelectionTracker(
            selected=self.state.selected,
            on_change=lambda keys: self.events.emit("on_row_select", keys),
        )
        self._clamp()

    def __repr__(self) -> str:
        return (
            f"<TableEngine {len(self.rows)} rows, "
            f"{len(self.columns)} columns>"
        )

    @property
    def view(self) -> DerivedView:
        """The view for the current rows, columns and query state."""
        return compute_view(
            self.rows, self.columns, self.state, self.config, self.row_key
        )

    def _clamp(self) -> None:
        """Bring the page back in range after the result set changed."""
        if not self.config.pagination:
            return
        total = len(
            filtered_rows(self.rows, self.columns, self.state, self.config)
        )
        page = clamp_page(
            self.state.page, total, max(self.state.page_size, 1)
        )
        if page != self.state.page:
            logger.debug("Page %d clamped to %d", self.state.page, page)
            self.state.page = page

    # Data and schema.

    def set_rows(self, rows: Sequence[Any]) -> None:
        """Replace the data set.

        The selection is kept; keys that no longer match a row are simply
        not shown.
        """
        self.rows = list(rows)
        self._clamp()

    def set_columns(
        self, columns: Union[ColumnList, Iterable[TblColumn]]
    ) -> None:
        """Replace the schema.

        A sort column or filters that refer to columns missing from the new
        schema are kept in the state but ignored by the pipeline.
        """
        self.columns = (
            columns if isinstance(columns, ColumnList) else ColumnList(columns)
        )
        self.state.hidden_columns.update(self.columns.initially_hidden())
        self._clamp()

    # Search and filters.

    def set_search(self, text: str) -> None:
        """Change the free-text search and go to the first page."""
        text = text or ""
        self.state.search = text
        self.state.page = 1
        logger.debug("Search changed to %r", text)
        self.events.emit("on_search", text)

    def set_filter(self, column_id: str, value: Any) -> None:
        """Change the filter of a column and go to the first page.

        Args:
            column_id: The id of the column.
            value: A scalar (partial match) or a list/set of options. Empty
                values remove the filter.
        """
        filters = dict(self.state.filters)
        if is_empty_filter(value):
            filters.pop(column_id, None)
        else:
            filters[column_id] = value
        self._set_filters(filters)

    def clear_filter(self, column_id: str) -> None:
        """Remove the filter of a column."""
        self.set_filter(column_id, None)

    def clear_filters(self) -> None:
        """Remove all filters."""
        self._set_filters({})

    def set_filters(self, filters: Dict[str, Any]) -> None:
        """Replace all filters; empty values are dropped."""
        self._set_filters(
            {k: v for k, v in filters.items() if not is_empty_filter(v)}
        )

    def _set_filters(self, filters: Dict[str, Any]) -> None:
        logger.debug(
            "Changing filters from %s to %s", self.state.filters, filters
        )
        self.state.filters = filters
        self.state.page = 1
        self.events.emit("on_filter", dict(filters))

    def active_filters(self) -> List[Tuple[str, str]]:
        """The (column title, value text) pairs of the active filters."""
        return describe_filters(self.state.filters, self.columns)

    # Sorting.

    def sort_by(self, column_id: str) -> bool:
        """Sort by a column, as when the user clicks its header.

        Clicking the column that is already sorted flips the direction;
        a new column starts in ascending order.

        Returns:
            False if the sort did not change (sorting is disabled or the
            column is unknown or not sortable).
        """
        if not self.config.sortable:
            return False
        if resolve_sort_column(self.columns, column_id) is None:
            return False

        direction: SortDirection = SORT_ASC
        if self.state.sort_column == column_id:
            if self.state.sort_direction == SORT_ASC:
                direction = SORT_DESC
        return self.set_sort(column_id, direction)

    def set_sort(self, column_id: str, direction: SortDirection) -> bool:
        """Sort by a column in the given direction.

        Returns:
            False if sorting is disabled or the column is unknown or not
            sortable.
        """
        if direction not in (SORT_ASC, SORT_DESC):
            raise ValueError(f"Unknown sort direction: {direction}")
        if not self.config.sortable:
            return False
        if resolve_sort_column(self.columns, column_id) is None:
            return False
        self.state.sort_column = column_id
        self.state.sort_direction = direction
        logger.debug("Sorting by %s %s", column_id, direction)
        self.events.emit("on_sort", column_id, direction)
        return True

    def clear_sort(self) -> None:
        """Show the rows in their original order.

        Emits `on_sort` with `None` as the column id.
        """
        if self.state.sort_column is None:
            return
        self.state.sort_column = None
        self.state.sort_direction = SORT_ASC
        logger.debug("Sorting cleared")
        self.events.emit("on_sort", None, SORT_ASC)

    # Pagination.

    def set_page(self, page: int) -> int:
        """Go to a page; out of range values are clamped.

        Returns:
            The page that is now current.
        """
        self.state.page = page
        self._clamp()
        return self.state.page

    def first_page(self) -> int:
        return self.set_page(1)

    def previous_page(self) -> int:
        return self.set_page(self.state.page - 1)

    def next_page(self) -> int:
        return self.set_page(self.state.page + 1)

    def last_page(self) -> int:
        return self.set_page(self.view.total_pages)

    def set_page_size(self, page_size: int) -> None:
        """Change the number of rows in a page and go to the first page.

        Raises:
            ValueError: The page size is not positive or is not one of the
                `page_size_options` of the configuration (when there are
                any).
        """
        if page_size < 1:
            raise ValueError(
                f"The page size must be positive, not {page_size}"
            )
        options = self.config.page_size_options
        if options and page_size not in options:
            raise ValueError(
                f"Page size {page_size} is not one of "
                f"{', '.join(str(o) for o in options)}"
            )
        self.state.page_size = page_size
        self.state.page = 1
        logger.debug("Page size changed to %d", page_size)

    # Column visibility.

    def set_column_visible(self, column_id: str, visible: bool) -> None:
        """Show or hide a column; the schema itself is not changed."""
        if visible:
            self.state.hidden_columns.discard(column_id)
        else:
            self.state.hidden_columns.add(column_id)

    def hide_column(self, column_id: str) -> None:
        self.set_column_visible(column_id, False)

    def show_column(self, column_id: str) -> None:
        self.set_column_visible(column_id, True)

    def toggle_column(self, column_id: str) -> bool:
        """Flip the visibility of a column.

        Returns:
            True if the column is now visible.
        """
        visible = column_id in self.state.hidden_columns
        self.set_column_visible(column_id, visible)
        return visible

    def is_column_visible(self, column_id: str) -> bool:
        return column_id not in self.state.hidden_columns

    @property
    def visible_columns(self) -> List[TblColumn]:
        """The columns that are not hidden, in schema order."""
        return self.columns.visible_columns(self.state.hidden_columns)

    # Selection.

    def _visible_keys(self, whole_filtered: bool) -> List[RowKeyType]:
        if whole_filtered:
            return [
                self.row_key(row, index)
                for index, row in filtered_rows(
                    self.rows, self.columns, self.state, self.config
                )
            ]
        return self.view.row_keys

    def toggle_row(self, key: RowKeyType) -> bool:
        """Change the selection state of a row.

        Returns:
            The new state of the row.
        """
        if not self.config.selectable:
            return False
        return self.selection.toggle(key)

    def set_row_selected(self, key: RowKeyType, value: bool) -> None:
        if not self.config.selectable:
            return
        self.selection.set_selected(key, value)

    def select_all(self, whole_filtered: bool = False) -> None:
        """Select the rows the user can see.

        Args:
            whole_filtered: If False (default) only the rows in the current
                page are selected. If True all the rows that passed search
                and filters are selected. Rows excluded by the filters are
                never selected.
        """
        if not self.config.selectable:
            return
        self.selection.select_all(self._visible_keys(whole_filtered))

    def deselect_all(self, whole_filtered: bool = False) -> None:
        """Deselect the rows the user can see; see `select_all()`."""
        if not self.config.selectable:
            return
        self.selection.deselect_all(self._visible_keys(whole_filtered))

    def clear_selection(self) -> None:
        """Deselect all rows, including those hidden by filters."""
        self.selection.clear_all()

    def is_selected(self, key: RowKeyType) -> bool:
        return self.selection.is_selected(key)

    def header_check_state(self) -> CheckState:
        """The state of the "select all" check box of the current page."""
        return self.selection.check_state(self.view.row_keys)

    def selected_rows(self) -> List[Any]:
        """The selected rows, looked up in the full data set."""
        return self.selection.resolve(self.rows, self.row_key)

    # Actions and export.

    def row_actions(self, row: Any) -> List[RowAction]:
        """The actions offered for a row."""
        return actions_for_row(self.actions, row)

    def run_bulk_action(self, action: BulkAction) -> Any:
        """Run an action on the selected rows.

        Returns:
            Whatever the action returns.
        """
        rows = self.selected_rows()
        logger.debug("Running %s on %d rows", action.label, len(rows))
        return action.on_click(rows)

    def export(self, fmt: str) -> ExportRequest:
        """Prepare the filtered and sorted rows for export.

        All pages are included. Writing the file is left to the caller.

        Raises:
            ValueError: The format is not known or exporting is disabled.
        """
        fmt = check_export_format(fmt)
        if not self.config.exportable:
            raise ValueError("Exporting is disabled for this table")
        items = filtered_rows(self.rows, self.columns, self.state, self.config)
        result = build_export(fmt, self.visible_columns, items)
        self.events.emit("on_export", fmt)
        return result
