import math
from decimal import Decimal
from numbers import Real
from typing import Any, Optional

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import COL_TYPE_NUMBER


def to_number(value: Any) -> Optional[float]:
    """Coerce a value to a number.

    Booleans count as 0 and 1, strings are parsed after stripping the
    surrounding white space.

    Returns:
        The number or `None` if the value is missing or is not a number
        (including `NaN`).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (Real, Decimal)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip().replace("_", "")
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(result):
        return None
    return result


@define
class NumberColumn(TblColumn):
    """A column that holds numbers.

    This column is aligned to the right by default.

    Attributes:
        precision: The number of decimals shown; `None` shows the value
            as it is.
        unit_symbol: The symbol appended to the displayed value.
    """

    type_name: str = field(default=COL_TYPE_NUMBER)
    align: str = field(default="right")

    precision: Optional[int] = field(default=None)
    unit_symbol: Optional[str] = field(default=None)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"NumberColumn({self.id})"

    def to_text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def sort_key(self, value: Any) -> Optional[Any]:
        return to_number(value)

    def format_value(self, value: Any) -> str:
        number = to_number(value)
        if number is None:
            return str(value)
        if self.precision is not None:
            result = f"{number:,.{self.precision}f}"
        elif number.is_integer():
            result = f"{int(number):,}"
        else:
            result = f"{number:,}"
        if self.unit_symbol:
            result = f"{result} {self.unit_symbol}"
        return result
