from collections import OrderedDict as OrDi
from typing import Iterable, Iterator, List, Optional, OrderedDict, Set

from exdrf_tbl.column import TblColumn


class ColumnList:
    """Keeps the ordered list of columns of a table schema.

    The class is self-contained and keeps sub-lists for quick access to the
    columns that take part in each feature. The schema is never mutated by
    visibility changes; those are kept by the caller as a set of hidden ids.

    Attributes:
        _columns: All the columns as an ordered dictionary keyed by id.
        _s_s_columns: The columns that take part in the free-text search.
        _f_columns: The columns that can be used for filtering.
        _s_columns: The columns that can be used for sorting.
        _e_columns: The columns that can be exported.
    """

    _columns: OrderedDict[str, TblColumn]
    _s_s_columns: List[TblColumn]
    _f_columns: List[TblColumn]
    _s_columns: List[TblColumn]
    _e_columns: List[TblColumn]

    def __init__(self, columns: Optional[Iterable[TblColumn]] = None):
        self.columns = list(columns) if columns is not None else []

    def __iter__(self) -> Iterator[TblColumn]:
        return iter(self._columns.values())

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, key: str) -> bool:
        return key in self._columns

    def __repr__(self) -> str:
        return f"<ColumnList {', '.join(self._columns.keys())}>"

    @property
    def columns(self) -> List[TblColumn]:
        return list(self._columns.values())

    @columns.setter
    def columns(self, value: List[TblColumn]):
        """Saves the list of columns and creates sub-lists for quick access.

        Args:
            value: The list of columns.

        Raises:
            ValueError: Two columns share the same id.
        """
        columns: OrderedDict[str, TblColumn] = OrDi()
        for c in value:
            if c.id in columns:
                raise ValueError(f"Duplicate column id: {c.id}")
            columns[c.id] = c

        self._columns = columns
        self._s_s_columns = [c for c in value if c.searchable]
        self._f_columns = [c for c in value if c.filterable]
        self._s_columns = [c for c in value if c.sortable]
        self._e_columns = [c for c in value if c.exportable]

    @property
    def ids(self) -> List[str]:
        """The ids of the columns in schema order."""
        return list(self._columns.keys())

    def get_column(
        self, key: str, raise_e: Optional[bool] = True
    ) -> Optional[TblColumn]:
        """Return a column by id.

        Args:
            key: The id of the column.
            raise_e: If True, raise an error if the column is not found.

        Returns:
            The column or None if not found.
        """
        if raise_e:
            return self._columns[key]
        return self._columns.get(key)

    @property
    def searchable_columns(self) -> List[TblColumn]:
        """Return the columns that take part in the free-text search."""
        return self._s_s_columns

    @property
    def filter_columns(self) -> List[TblColumn]:
        """Return the columns that can be filtered."""
        return self._f_columns

    @property
    def sortable_columns(self) -> List[TblColumn]:
        """Return the columns that can be sorted."""
        return self._s_columns

    @property
    def exportable_columns(self) -> List[TblColumn]:
        """Return the columns that can be exported."""
        return self._e_columns

    def initially_hidden(self) -> Set[str]:
        """The ids of the columns that are marked as hidden in the schema."""
        return {c.id for c in self._columns.values() if c.hidden}

    def visible_columns(self, hidden: Iterable[str]) -> List[TblColumn]:
        """Return the columns that are not hidden, in schema order.

        Args:
            hidden: The ids of the hidden columns. Unknown ids are ignored.
        """
        hidden = set(hidden)
        return [c for c in self._columns.values() if c.id not in hidden]
