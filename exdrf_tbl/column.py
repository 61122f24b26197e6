import logging
from typing import Any, Callable, Collection, List, Optional, Tuple, Union

from attrs import define, field
from pydantic import BaseModel, Field, field_validator

from exdrf_tbl.constants import (
    COL_TYPE_TEXT,
    COLUMN_TYPES,
    EMPTY_CELL,
    Alignment,
)
from exdrf_tbl.utils import fold_text, text_name

logger = logging.getLogger(__name__)

KeyType = Union[str, Callable[[Any], Any]]


def make_accessor(key: KeyType) -> Callable[[Any], Any]:
    """Create the function that projects a value out of a row.

    A string key reads the item with that name from mappings and the
    attribute with that name from any other object. Missing values are
    reported as `None`.

    Args:
        key: The name of the field or a function that receives the row.

    Returns:
        A function that receives the row and returns the value.
    """
    if callable(key):
        return key

    def accessor(row: Any) -> Any:
        if row is None:
            return None
        getter = getattr(row, "get", None)
        if callable(getter) and hasattr(row, "keys"):
            return getter(key)
        return getattr(row, key, None)

    return accessor


@define
class TblColumn:
    """A column in the table schema.

    The column knows how to extract its value out of a row and how that
    value takes part in search, filtering and sorting. Subclasses in the
    `column_types` package specialize this behaviour for each column type.

    Attributes:
        id: The unique identifier of the column inside the schema. If not
            provided, the key is used when it is a string.
        key: The name of the field in the row or a function that receives
            the row and returns the value. Defaults to the id.
        title: A string suitable to be used as a title for the column.
            Derived from the id if not provided.
        description: A longer description of the column.
        type_name: The unique type name of the column.
        sortable: Whether the user can sort the table by this column.
        filterable: Whether the user can filter the table by this column.
        searchable: Whether the column is part of the free-text search.
        exportable: Whether the column is included in exports.
        hidden: Whether the column starts hidden. The engine keeps its own
            set of hidden columns; this is only the initial state.
        resizable: Whether the user can resize the column.
        align: Horizontal alignment of the content.
        width: Preferred width of the column.
        min_width: Minimum width of the column.
        max_width: Maximum width of the column.
        sticky: Whether the column sticks to the `left` or `right` edge.
        filter_options: A list of (label, value) pairs offered by the
            filter control of this column.
        render: An optional function that receives the value, the row and
            the index of the row and returns the content of the cell.
    """

    id: str = field(default="")
    key: Optional[KeyType] = field(default=None)
    title: str = field(default="")
    description: str = field(default="")

    type_name: str = field(default=COL_TYPE_TEXT)

    sortable: bool = field(default=True)
    filterable: bool = field(default=True)
    searchable: bool = field(default=True)
    exportable: bool = field(default=True)
    hidden: bool = field(default=False)
    resizable: bool = field(default=True)
    align: Alignment = field(default="left")
    width: Optional[Union[int, str]] = field(default=None)
    min_width: Optional[Union[int, str]] = field(default=None)
    max_width: Optional[Union[int, str]] = field(default=None)
    sticky: Optional[str] = field(default=None)
    filter_options: List[Tuple[str, Any]] = field(factory=list)
    render: Optional[Callable[[Any, Any, int], Any]] = field(
        default=None, repr=False
    )

    _accessor: Callable[[Any], Any] = field(
        default=None, init=False, repr=False, eq=False
    )

    def __attrs_post_init__(self):
        if self.key is None:
            self.key = self.id
        if not self.id:
            if not isinstance(self.key, str):
                raise ValueError(
                    "A column with a function key needs an explicit id"
                )
            self.id = self.key
        if not self.title:
            self.title = text_name(self.id)
        self._accessor = make_accessor(self.key)

    def __hash__(self):
        return hash(self.id)

    def __str__(self) -> str:
        return self.__repr__()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.id})"

    def get_value(self, row: Any) -> Any:
        """Project the value of this column out of the row."""
        return self._accessor(row)

    def query_value(self, row: Any, index: int) -> Any:
        """The value used by search, filters and sorting.

        Args:
            row: The row.
            index: The index of the row in the full data set.
        """
        return self.get_value(row)

    def to_text(self, value: Any) -> str:
        """Convert the value to the text used for searching and matching.

        `None` becomes an empty string so it never matches a non-empty
        query.
        """
        if value is None:
            return ""
        return str(value)

    def match_texts(self, value: Any) -> List[str]:
        """The texts that search and partial filters look into."""
        return [self.to_text(value)]

    def sort_key(self, value: Any) -> Optional[Any]:
        """Compute the key used to order the rows.

        The default implementation approximates a locale aware comparison:
        letters are compared without regard to accents and case first, then
        lower case letters go before upper case ones.

        Returns:
            A comparable key or `None` if the value cannot be compared with
            other values (these rows keep their place when sorting).
        """
        text = self.to_text(value)
        return (fold_text(text), text.swapcase())

    def matches_options(self, value: Any, options: Collection[Any]) -> bool:
        """Tell if the value is one of the options (multi-select filter)."""
        try:
            return value in options
        except TypeError:
            # Unhashable values cannot be looked up in sets.
            return any(value == o for o in options)

    def format_value(self, value: Any) -> str:
        """Format a non-empty value for display."""
        return str(value)

    def display_text(self, row: Any, index: int) -> str:
        """The default textual content of the cell.

        Args:
            row: The row.
            index: The index of the row in the full data set.
        """
        value = self.get_value(row)
        if self.render is not None:
            value = self.render(value, row, index)
            return EMPTY_CELL if value is None else str(value)
        if value is None or value == "":
            return EMPTY_CELL
        return self.format_value(value)

    def option_label(self, value: Any) -> Optional[str]:
        """Return the label of the filter option with the given value."""
        for label, option in self.filter_options:
            if option == value:
                return label
        return None


class ColumnInfo(BaseModel):
    """Parser for the description of a column.

    We use this mechanism when the schema of the table comes from a
    declarative source like a JSON file. The attributes have the same names
    as those in the `TblColumn` class, so that they can be used to create a
    column.

    Attributes:
        id: The unique identifier of the column.
        key: The name of the field in the row; defaults to the id.
        title: The title of the column.
        type: One of the known column types.
        filter_options: A list of options, either as `{"label": ...,
            "value": ...}` dictionaries or as `[label, value]` pairs.
        extra: Additional arguments for the column class (for example
            `true_str` for boolean columns).
    """

    id: str
    key: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: str = COL_TYPE_TEXT
    sortable: Optional[bool] = None
    filterable: Optional[bool] = None
    searchable: Optional[bool] = None
    exportable: Optional[bool] = None
    hidden: Optional[bool] = None
    resizable: Optional[bool] = None
    align: Optional[Alignment] = None
    width: Optional[Union[int, str]] = None
    min_width: Optional[Union[int, str]] = None
    max_width: Optional[Union[int, str]] = None
    sticky: Optional[str] = None
    filter_options: List[Tuple[str, Any]] = Field(default_factory=list)
    extra: dict = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v not in COLUMN_TYPES:
            raise ValueError(
                f"Unknown column type {v}; expected one of "
                f"{', '.join(COLUMN_TYPES)}"
            )
        return v

    @field_validator("filter_options", mode="before")
    @classmethod
    def validate_filter_options(cls, v):
        """Accept dictionaries with `label` and `value` keys."""
        if v is None:
            return []
        result = []
        for item in v:
            if isinstance(item, dict):
                result.append((str(item.get("label", "")), item.get("value")))
            else:
                result.append(item)
        return result

    def column_kwargs(self) -> dict:
        """The arguments for creating the column."""
        result = {
            k: v
            for k, v in self.model_dump(exclude={"type", "extra"}).items()
            if v is not None
        }
        result.update(self.extra)
        return result
