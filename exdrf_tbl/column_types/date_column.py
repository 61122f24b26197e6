from datetime import date, datetime, timezone
from typing import Any, List, Optional

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_types.number_column import to_number
from exdrf_tbl.constants import COL_TYPE_DATE


def to_datetime(value: Any, formats: Optional[List[str]] = None):
    """Convert a value to a timezone aware datetime.

    Naive values are assumed to be in UTC. Strings are parsed as ISO 8601
    first, then with each of the `formats` in turn.

    Returns:
        The datetime or `None` if the value could not be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            result = datetime.fromisoformat(text)
        except ValueError:
            for fmt in formats or []:
                try:
                    result = datetime.strptime(value.strip(), fmt)
                    break
                except ValueError:
                    continue
            else:
                return None
    else:
        number = to_number(value)
        if number is None:
            return None
        try:
            return datetime.fromtimestamp(number, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


def to_timestamp(value: Any, formats: Optional[List[str]] = None):
    """Convert a value to a POSIX timestamp.

    Numbers are assumed to be timestamps already.

    Returns:
        The timestamp or `None` if the value could not be parsed.
    """
    if not isinstance(value, (str, date)):
        return None if isinstance(value, bool) else to_number(value)
    moment = to_datetime(value, formats)
    if moment is None:
        return None
    return moment.timestamp()


@define
class DateColumn(TblColumn):
    """A column that holds moments in time.

    Attributes:
        formats: Additional `strptime` formats used to parse strings that
            are not in ISO 8601 format.
        format: The `strftime` format used to display the value.
    """

    type_name: str = field(default=COL_TYPE_DATE)

    formats: List[str] = field(factory=list)
    format: str = field(default="%Y-%m-%d")

    def __hash__(self):
        return hash(self.id)

    def __repr__(self) -> str:
        return f"DateColumn({self.id})"

    def to_text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)

    def sort_key(self, value: Any) -> Optional[Any]:
        return to_timestamp(value, self.formats)

    def format_value(self, value: Any) -> str:
        moment = to_datetime(value, self.formats)
        if moment is None:
            return str(value)
        return moment.strftime(self.format)
