from exdrf_tbl.actions import BulkAction, RowAction  # noqa: F401
from exdrf_tbl.column import ColumnInfo, TblColumn  # noqa: F401
from exdrf_tbl.column_list import ColumnList  # noqa: F401
from exdrf_tbl.column_types.api import (  # noqa: F401
    BoolColumn,
    CustomColumn,
    DateColumn,
    NumberColumn,
    SelectColumn,
    TextColumn,
    column_from_info,
    column_type_to_class,
    columns_from_dicts,
    create_column,
)
from exdrf_tbl.config import TableConfig  # noqa: F401
from exdrf_tbl.engine import TableEngine, TableEvents  # noqa: F401
from exdrf_tbl.export import ExportRequest  # noqa: F401
from exdrf_tbl.filter import (  # noqa: F401
    FieldFilter,
    build_field_filters,
    filter_rows,
    search_rows,
)
from exdrf_tbl.paginate import PageSlice, paginate  # noqa: F401
from exdrf_tbl.query import QueryInfo, QueryState  # noqa: F401
from exdrf_tbl.selection import SelectionTracker, make_row_key  # noqa: F401
from exdrf_tbl.sort import sort_rows  # noqa: F401
from exdrf_tbl.view import DerivedView, compute_view  # noqa: F401
