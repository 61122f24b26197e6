import inspect
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Set

from attrs import define, field

from exdrf_tbl.column import make_accessor
from exdrf_tbl.constants import CheckState, RowKeySpec, RowKeyType

logger = logging.getLogger(__name__)

RowKeyFunc = Callable[[Any, int], RowKeyType]


def _positional_count(func: Callable) -> Optional[int]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return None
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def make_row_key(spec: RowKeySpec) -> RowKeyFunc:
    """Create the function that computes the identity of a row.

    When `spec` is the name of a field, the value of that field is the key.
    Rows where the field is missing, `None` or an empty string fall back to
    their index in the full data set. That fallback is lossy: the index of a
    row changes when rows are added or removed, so selections made on such
    rows do not survive changes to the data.

    Args:
        spec: The name of a field or a function. The function receives the
            row and its index; functions that accept a single argument
            receive only the row.

    Returns:
        A function that receives the row and its index.
    """
    if callable(spec):
        if _positional_count(spec) == 1:
            return lambda row, index: spec(row)  # type: ignore
        return spec  # type: ignore

    accessor = make_accessor(spec)

    def row_key(row: Any, index: int) -> RowKeyType:
        value = accessor(row)
        if value is None or value == "":
            return index
        return value

    return row_key


@define
class SelectionTracker:
    """Keeps the keys of the selected rows.

    The selection is independent of the pagination and of the filters:
    rows that are hidden by a filter or are on another page stay selected.

    Attributes:
        selected: The keys of the selected rows.
        on_change: Called with a copy of the selection each time it changes.
    """

    selected: Set[RowKeyType] = field(factory=set)
    on_change: Optional[Callable[[Set[RowKeyType]], Any]] = field(
        default=None, repr=False
    )

    def __len__(self) -> int:
        return len(self.selected)

    def __contains__(self, key: RowKeyType) -> bool:
        return key in self.selected

    def _changed(self) -> None:
        logger.debug("Selection changed: %d rows", len(self.selected))
        if self.on_change is not None:
            self.on_change(set(self.selected))

    def is_selected(self, key: RowKeyType) -> bool:
        """Tell if the row with the given key is selected."""
        return key in self.selected

    def set_selected(self, key: RowKeyType, value: bool) -> None:
        """Select or deselect a row."""
        if value:
            if key in self.selected:
                return
            self.selected.add(key)
        else:
            if key not in self.selected:
                return
            self.selected.discard(key)
        self._changed()

    def toggle(self, key: RowKeyType) -> bool:
        """Change the selection state of a row.

        Returns:
            The new state of the row.
        """
        value = key not in self.selected
        self.set_selected(key, value)
        return value

    def select_all(self, keys: Iterable[RowKeyType]) -> None:
        """Select the given rows, keeping the rows that are selected already.

        Args:
            keys: The keys of the rows the user can see (the current page or
                the whole filtered set). Never pass rows excluded by a
                filter.
        """
        keys = set(keys)
        if keys.issubset(self.selected):
            return
        self.selected.update(keys)
        self._changed()

    def deselect_all(self, keys: Iterable[RowKeyType]) -> None:
        """Deselect the given rows; other rows stay selected."""
        keys = set(keys)
        if self.selected.isdisjoint(keys):
            return
        self.selected.difference_update(keys)
        self._changed()

    def clear_all(self) -> None:
        """Deselect all rows."""
        if not self.selected:
            return
        self.selected.clear()
        self._changed()

    def check_state(self, keys: Sequence[RowKeyType]) -> CheckState:
        """The state of a "select all" check box for the given rows.

        Returns:
            `checked` if all the rows are selected, `partial` if some are and
            `unchecked` if none is (or there are no rows).
        """
        count = sum(1 for k in keys if k in self.selected)
        if count == 0:
            return "unchecked"
        if count == len(keys):
            return "checked"
        return "partial"

    def resolve(self, rows: Sequence[Any], row_key: RowKeyFunc) -> List[Any]:
        """Find the selected rows in the full (unfiltered) data set.

        Args:
            rows: All the rows, in their original order.
            row_key: The function that computes the identity of a row.

        Returns:
            The selected rows in their original order.
        """
        if not self.selected:
            return []
        return [
            row
            for index, row in enumerate(rows)
            if row_key(row, index) in self.selected
        ]
