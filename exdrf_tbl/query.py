from typing import Any, Dict, List, Literal, Optional, Set

from attrs import define, field
from pydantic import BaseModel, Field, field_validator

from exdrf_tbl.constants import (
    DEFAULT_PAGE_SIZE,
    SORT_ASC,
    RowKeyType,
    SortDirection,
)

MULTI_VALUE_TYPES = (list, tuple, set, frozenset)


def is_multi_value(value: Any) -> bool:
    """Tell if a filter value is a set of options (multi-select)."""
    return isinstance(value, MULTI_VALUE_TYPES)


def is_empty_filter(value: Any) -> bool:
    """Tell if a filter value means "no filter".

    `None`, the empty string and empty option sets do not filter anything.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if is_multi_value(value):
        return len(value) == 0
    return False


def _sortable_keys(keys: Set[Any]) -> List[Any]:
    return sorted(keys, key=lambda k: (type(k).__name__, str(k)))


@define
class QueryState:
    """The state of the table that is driven by the user.

    The pipeline reads this state but never changes it; the engine changes
    it through its setters.

    Attributes:
        search: The free-text search string.
        filters: Maps column ids to filter values. A value is either a
            scalar (partial, case-insensitive match) or a list/set of
            options (the row value must be one of them).
        sort_column: The id of the column used for sorting or None.
        sort_direction: Either `asc` or `desc`.
        selected: The keys of the selected rows.
        hidden_columns: The ids of the hidden columns.
        page: The current page, starting at 1.
        page_size: The number of rows in a page.
    """

    search: str = field(default="")
    filters: Dict[str, Any] = field(factory=dict)
    sort_column: Optional[str] = field(default=None)
    sort_direction: SortDirection = field(default=SORT_ASC)
    selected: Set[RowKeyType] = field(factory=set)
    hidden_columns: Set[str] = field(factory=set)
    page: int = field(default=1)
    page_size: int = field(default=DEFAULT_PAGE_SIZE)

    @property
    def active_filters(self) -> Dict[str, Any]:
        """The filters that actually filter something."""
        return {
            k: v for k, v in self.filters.items() if not is_empty_filter(v)
        }

    def copy(self) -> "QueryState":
        """Create an independent copy of the state."""
        return QueryState(
            search=self.search,
            filters={
                k: (list(v) if is_multi_value(v) else v)
                for k, v in self.filters.items()
            },
            sort_column=self.sort_column,
            sort_direction=self.sort_direction,
            selected=set(self.selected),
            hidden_columns=set(self.hidden_columns),
            page=self.page,
            page_size=self.page_size,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the state to a JSON friendly dictionary."""
        return {
            "search": self.search,
            "filters": {
                k: (
                    _sortable_keys(set(v))
                    if isinstance(v, (set, frozenset))
                    else list(v) if isinstance(v, tuple) else v
                )
                for k, v in self.filters.items()
            },
            "sort_column": self.sort_column,
            "sort_direction": self.sort_direction,
            "selected": _sortable_keys(self.selected),
            "hidden_columns": sorted(self.hidden_columns),
            "page": self.page,
            "page_size": self.page_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryState":
        """Create the state out of a dictionary produced by `to_dict()`.

        Raises:
            pydantic.ValidationError: The dictionary is not valid.
        """
        return QueryInfo.model_validate(data).to_state()


class QueryInfo(BaseModel):
    """Parser for the serialized form of the query state.

    Attributes:
        search: The free-text search string.
        filters: Maps column ids to filter values.
        sort_column: The id of the column used for sorting.
        sort_direction: Either `asc` or `desc`.
        selected: The keys of the selected rows. Lists (which are not
            hashable) are converted to tuples.
        hidden_columns: The ids of the hidden columns.
        page: The current page, starting at 1.
        page_size: The number of rows in a page.
    """

    search: str = ""
    filters: Dict[str, Any] = Field(default_factory=dict)
    sort_column: Optional[str] = None
    sort_direction: Literal["asc", "desc"] = SORT_ASC
    selected: List[Any] = Field(default_factory=list)
    hidden_columns: List[str] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v):
        return "" if v is None else v

    @field_validator("selected", mode="before")
    @classmethod
    def validate_selected(cls, v):
        if v is None:
            return []
        return [tuple(k) if isinstance(k, list) else k for k in v]

    def to_state(self) -> QueryState:
        return QueryState(
            search=self.search,
            filters={
                k: v for k, v in self.filters.items() if not is_empty_filter(v)
            },
            sort_column=self.sort_column,
            sort_direction=self.sort_direction,
            selected=set(self.selected),
            hidden_columns=set(self.hidden_columns),
            page=self.page,
            page_size=self.page_size,
        )
