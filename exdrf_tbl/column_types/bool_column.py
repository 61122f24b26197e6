from typing import Any, List

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import COL_TYPE_BOOL


@define
class BoolColumn(TblColumn):
    """A column that holds boolean values.

    This column is not expected to resize.

    Attributes:
        true_str: The string representation of the boolean value `True`.
        false_str: The string representation of the boolean value `False`.
    """

    type_name: str = field(default=COL_TYPE_BOOL)
    resizable: bool = field(default=False)
    align: str = field(default="center")

    true_str: str = field(default="True")
    false_str: str = field(default="False")

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"BoolColumn({self.id})"

    def to_text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return self.true_str if value else self.false_str
        return str(value)

    def match_texts(self, value: Any) -> List[str]:
        """Both the label and the plain `True`/`False` text match."""
        if isinstance(value, bool):
            return [self.to_text(value), str(value)]
        return [self.to_text(value)]

    def display_text(self, row: Any, index: int) -> str:
        if self.render is not None:
            return super().display_text(row, index)
        return self.true_str if self.get_value(row) else self.false_str
