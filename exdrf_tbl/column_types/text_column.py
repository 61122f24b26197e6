from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import COL_TYPE_TEXT


@define
class TextColumn(TblColumn):
    """A column that holds free text.

    Attributes:
        multiline: Whether the text can span multiple lines.
    """

    type_name: str = field(default=COL_TYPE_TEXT)

    multiline: bool = field(default=False)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"TextColumn({self.id})"
