import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import click
from dotenv import load_dotenv
from pydantic import ValidationError

from exdrf_tbl.__version__ import __version__
from exdrf_tbl.column import TblColumn
from exdrf_tbl.column_types.api import columns_from_dicts
from exdrf_tbl.config import TableConfig
from exdrf_tbl.constants import SORT_ASC, SORT_DESC
from exdrf_tbl.engine import TableEngine
from exdrf_tbl.view import DerivedView

logger = logging.getLogger(__name__)


def create_context_obj(debug: bool) -> Dict[str, Any]:
    """Sets up the logging and prepares the context for the CLI.

    Args:
        debug: If True, sets the logging level to DEBUG.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.debug("Debug mode is on")
    return {"debug": debug}


def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_schema(path: str) -> List[TblColumn]:
    """Read the columns from a JSON file.

    The file holds either a list of column descriptions or an object with
    a `columns` key.
    """
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("columns", [])
    try:
        return columns_from_dicts(data)
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid schema in {path}: {e}") from e


def load_rows(path: str) -> List[Any]:
    """Read the rows from a JSON file.

    The file holds either a list of objects or an object with a `rows` key.
    """
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("rows", [])
    if not isinstance(data, list):
        raise click.ClickException(f"No rows found in {path}")
    return data


def parse_assignments(items: Tuple[str, ...], option: str) -> Dict[str, Any]:
    """Parse `column=value` pairs.

    A column that appears more than once receives the list of values.
    """
    result: Dict[str, Any] = {}
    for item in items:
        if "=" not in item:
            raise click.BadParameter(
                f"Expected column=value, got {item}", param_hint=option
            )
        key, value = item.split("=", 1)
        key = key.strip()
        if key in result:
            previous = result[key]
            if not isinstance(previous, list):
                previous = [previous]
            result[key] = previous + [value]
        else:
            result[key] = value
    return result


def decode_value(text: str) -> Any:
    """Read a command line value as JSON (`3`, `true`) or keep the text."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def view_to_text(view: DerivedView) -> str:
    """Format the view as a text table with aligned columns."""
    header = [c.title for c in view.columns]
    body = [
        [c.display_text(row, index) for c in view.columns]
        for row, index in zip(view.rows, view.row_indexes)
    ]
    widths = [len(h) for h in header]
    for line in body:
        widths = [max(w, len(cell)) for w, cell in zip(widths, line)]

    def fmt_line(cells: List[str]) -> str:
        parts = []
        for column, cell, width in zip(view.columns, cells, widths):
            if column.align == "right":
                parts.append(cell.rjust(width))
            elif column.align == "center":
                parts.append(cell.center(width))
            else:
                parts.append(cell.ljust(width))
        return " | ".join(parts).rstrip()

    lines = [fmt_line(header), "-+-".join("-" * w for w in widths)]
    lines.extend(fmt_line(line) for line in body)
    lines.append("")
    lines.append(view.describe())
    if view.paginated:
        lines.append(f"Page {view.page} of {view.total_pages}")
    return "\n".join(lines)


def view_to_dict(view: DerivedView) -> Dict[str, Any]:
    """Convert the view to a JSON friendly dictionary."""
    return {
        "columns": [c.id for c in view.columns],
        "rows": [
            {c.id: c.get_value(row) for c in view.columns}
            for row in view.rows
        ],
        "row_keys": view.row_keys,
        "total_rows": view.total_rows,
        "total_filtered": view.total_filtered,
        "total_pages": view.total_pages,
        "page": view.page,
        "page_size": view.page_size,
        "start_row": view.start_row,
        "end_row": view.end_row,
    }


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.version_option(__version__, prog_name="exdrf-tbl")
@click.pass_context
def cli(context: click.Context, debug: bool):
    load_dotenv()
    context.obj = create_context_obj(debug)


@cli.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
def columns(schema: str):
    """Print the columns described in a schema file."""
    for column in load_schema(schema):
        flags = [
            name
            for name in ("sortable", "filterable", "searchable", "hidden")
            if getattr(column, name)
        ]
        click.echo(
            f"{column.id}: {column.type_name} - {column.title} "
            f"[{', '.join(flags)}]"
        )


@cli.command()
@click.argument("data", type=click.Path(exists=True, dir_okay=False))
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@click.option("--search", "-s", default="", help="Free-text search.")
@click.option(
    "--filter",
    "-f",
    "filters",
    multiple=True,
    help="Partial match filter as column=value.",
)
@click.option(
    "--in",
    "options",
    multiple=True,
    help="Multi-select filter as column=value; repeat to add options.",
)
@click.option("--sort", "sort_column", default=None, help="Column to sort by.")
@click.option("--desc", is_flag=True, help="Sort in descending order.")
@click.option("--page", "-p", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=None)
@click.option("--pagination/--no-pagination", default=None)
@click.option("--hide", multiple=True, help="Column to hide.")
@click.option("--row-key", default="id", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print JSON.")
def view(
    data: str,
    schema: str,
    search: str,
    filters: Tuple[str, ...],
    options: Tuple[str, ...],
    sort_column: Optional[str],
    desc: bool,
    page: int,
    page_size: Optional[int],
    pagination: Optional[bool],
    hide: Tuple[str, ...],
    row_key: str,
    as_json: bool,
):
    """Show a page of DATA (a JSON list of objects) using SCHEMA."""
    overrides: Dict[str, Any] = {}
    if pagination is not None:
        overrides["pagination"] = pagination
    if page_size is not None:
        overrides["page_size"] = page_size
    try:
        config = TableConfig.from_env(**overrides)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    engine = TableEngine(
        rows=load_rows(data),
        columns=load_schema(schema),
        row_key=row_key,
        config=config,
    )

    if search:
        engine.set_search(search)
    scalar_filters = parse_assignments(filters, "--filter")
    for key, value in scalar_filters.items():
        if isinstance(value, list):
            raise click.BadParameter(
                f"Column {key} has more than one partial filter",
                param_hint="--filter",
            )
        engine.set_filter(key, value)
    for key, value in parse_assignments(options, "--in").items():
        values = value if isinstance(value, list) else [value]
        engine.set_filter(key, [decode_value(v) for v in values])
    if sort_column:
        if not engine.set_sort(sort_column, SORT_DESC if desc else SORT_ASC):
            logger.warning("Column %s cannot be used for sorting", sort_column)
    for column_id in hide:
        engine.hide_column(column_id)
    engine.set_page(page)

    result = engine.view
    if as_json:
        click.echo(json.dumps(view_to_dict(result), indent=2, default=str))
    else:
        click.echo(view_to_text(result))

