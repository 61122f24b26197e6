from typing import Any, Dict, Iterable, List, Type, Union

from exdrf_tbl.column import ColumnInfo, TblColumn
from exdrf_tbl.column_types.bool_column import BoolColumn  # noqa: F401
from exdrf_tbl.column_types.custom_column import CustomColumn  # noqa: F401
from exdrf_tbl.column_types.date_column import DateColumn  # noqa: F401
from exdrf_tbl.column_types.number_column import NumberColumn  # noqa: F401
from exdrf_tbl.column_types.select_column import SelectColumn  # noqa: F401
from exdrf_tbl.column_types.text_column import TextColumn  # noqa: F401
from exdrf_tbl.constants import (
    COL_TYPE_BOOL,
    COL_TYPE_CUSTOM,
    COL_TYPE_DATE,
    COL_TYPE_NUMBER,
    COL_TYPE_SELECT,
    COL_TYPE_TEXT,
)

column_type_to_class: Dict[str, Type[TblColumn]] = {
    COL_TYPE_TEXT: TextColumn,
    COL_TYPE_NUMBER: NumberColumn,
    COL_TYPE_DATE: DateColumn,
    COL_TYPE_BOOL: BoolColumn,
    COL_TYPE_SELECT: SelectColumn,
    COL_TYPE_CUSTOM: CustomColumn,
}


def column_class(type_name: str) -> Type[TblColumn]:
    """Return the class that implements a column type.

    Raises:
        ValueError: The type is not known.
    """
    try:
        return column_type_to_class[type_name]
    except KeyError:
        raise ValueError(f"Unknown column type: {type_name}") from None


def create_column(type_name: str, **kwargs: Any) -> TblColumn:
    """Create a column of the given type.

    Args:
        type_name: One of the `COL_TYPE_*` constants.
        kwargs: The attributes of the column.
    """
    return column_class(type_name)(**kwargs)


def column_from_info(info: Union[ColumnInfo, Dict[str, Any]]) -> TblColumn:
    """Create a column out of its declarative description.

    Args:
        info: Either a parsed `ColumnInfo` or a dictionary that is validated
            into one (this raises a pydantic `ValidationError` if the
            dictionary is not valid).
    """
    if not isinstance(info, ColumnInfo):
        info = ColumnInfo.model_validate(info)
    return create_column(info.type, **info.column_kwargs())


def columns_from_dicts(items: Iterable[Dict[str, Any]]) -> List[TblColumn]:
    """Create the columns of a schema out of a list of dictionaries."""
    return [column_from_info(item) for item in items]
