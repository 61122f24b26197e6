from typing import Any

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import COL_TYPE_SELECT


@define
class SelectColumn(TblColumn):
    """A column whose values come from a closed set of options.

    The options are stored in the `filter_options` attribute as
    (label, value) pairs. Search and sort use the raw value; the label is
    only used for display.
    """

    type_name: str = field(default=COL_TYPE_SELECT)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"SelectColumn({self.id})"

    def format_value(self, value: Any) -> str:
        label = self.option_label(value)
        return str(value) if label is None else label
