from typing import Any, Dict, List

from attrs import define, field

from exdrf_tbl.column import TblColumn
from exdrf_tbl.constants import EXPORT_FORMATS, ExportFormat, IndexedRow


def check_export_format(fmt: str) -> ExportFormat:
    """Make sure the export format is one we know of.

    Raises:
        ValueError: The format is not known.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(
            f"Unknown export format {fmt}; expected one of "
            f"{', '.join(EXPORT_FORMATS)}"
        )
    return fmt  # type: ignore


@define(frozen=True)
class ExportRequest:
    """The data handed to whoever writes the export file.

    Attributes:
        format: One of `csv`, `xlsx` or `json`.
        columns: The columns to export, in display order.
        rows: The filtered and sorted rows (all pages), each one as a
            dictionary that maps column ids to raw values.
    """

    format: ExportFormat
    columns: List[TblColumn] = field(factory=list)
    rows: List[Dict[str, Any]] = field(factory=list)

    @property
    def headers(self) -> List[str]:
        """The titles of the exported columns."""
        return [c.title for c in self.columns]

    def as_table(self) -> List[List[Any]]:
        """The rows as lists of values, in column order."""
        return [[row[c.id] for c in self.columns] for row in self.rows]


def build_export(
    fmt: str, columns: List[TblColumn], items: List[IndexedRow]
) -> ExportRequest:
    """Create an export request.

    Args:
        fmt: The format of the export.
        columns: The visible columns; those that are not exportable are
            left out.
        items: The rows together with their index in the full data set.
    """
    fmt = check_export_format(fmt)
    columns = [c for c in columns if c.exportable]
    return ExportRequest(
        format=fmt,
        columns=columns,
        rows=[
            {c.id: c.get_value(row) for c in columns} for _, row in items
        ],
    )
