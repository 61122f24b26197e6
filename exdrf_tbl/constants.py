# Constants for column types
from typing import Any, Callable, Hashable, Literal, Tuple, Union

COL_TYPE_TEXT = "text"
COL_TYPE_NUMBER = "number"
COL_TYPE_DATE = "date"
COL_TYPE_BOOL = "boolean"
COL_TYPE_SELECT = "select"
COL_TYPE_CUSTOM = "custom"

COLUMN_TYPES = (
    COL_TYPE_TEXT,
    COL_TYPE_NUMBER,
    COL_TYPE_DATE,
    COL_TYPE_BOOL,
    COL_TYPE_SELECT,
    COL_TYPE_CUSTOM,
)

SortDirection = Literal["asc", "desc"]
SORT_ASC: SortDirection = "asc"
SORT_DESC: SortDirection = "desc"

Alignment = Literal["left", "center", "right"]

# The encoding of these formats is not our concern; we only hand the rows
# over to whoever knows how to write them.
ExportFormat = Literal["csv", "xlsx", "json"]
EXPORT_FORMATS = ("csv", "xlsx", "json")

CheckState = Literal["checked", "partial", "unchecked"]

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE_OPTIONS = [5, 10, 20, 50, 100]

# The placeholder shown for empty cells.
EMPTY_CELL = "-"

# A row key is whatever the caller uses to identify a row.
RowKeyType = Hashable

# Either the name of a field or a function that receives the row and its
# index in the full data set.
RowKeySpec = Union[str, Callable[[Any, int], RowKeyType]]

# A row together with its position in the full data set.
IndexedRow = Tuple[int, Any]
