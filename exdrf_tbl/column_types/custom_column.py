from typing import Any

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import COL_TYPE_CUSTOM


@define
class CustomColumn(TblColumn):
    """A column that renders its content through the `render` function.

    Attributes:
        use_raw_value: If True (default) search, filters and sorting work
            with the raw value of the column. If False they work with the
            text produced by the `render` function.
    """

    type_name: str = field(default=COL_TYPE_CUSTOM)

    use_raw_value: bool = field(default=True)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"CustomColumn({self.id})"

    def query_value(self, row: Any, index: int) -> Any:
        value = self.get_value(row)
        if self.use_raw_value or self.render is None:
            return value
        rendered = self.render(value, row, index)
        return None if rendered is None else str(rendered)
