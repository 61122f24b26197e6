import logging
import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from exdrf_tbl.constants import DEFAULT_PAGE_SIZE, DEFAULT_PAGE_SIZE_OPTIONS

logger = logging.getLogger(__name__)

ENV_PREFIX = "EXDRF_TBL_"


class TableConfig(BaseModel):
    """The features of a table.

    Disabled features are skipped by the pipeline.

    Attributes:
        searchable: Whether the free-text search is applied.
        filterable: Whether the column filters are applied.
        sortable: Whether the rows are sorted.
        selectable: Whether the user can select rows.
        pagination: Whether the rows are split in pages. If False the
            view contains all the filtered rows.
        exportable: Whether the rows can be exported.
        page_size: The initial number of rows in a page.
        page_size_options: The page sizes offered to the user.
        fold_accents: Whether search and partial filters also compare the
            accent-free forms of the text (`é` matches `e`).
    """

    searchable: bool = True
    filterable: bool = True
    sortable: bool = True
    selectable: bool = False
    pagination: bool = True
    exportable: bool = False
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    page_size_options: List[int] = Field(
        default_factory=lambda: list(DEFAULT_PAGE_SIZE_OPTIONS)
    )
    fold_accents: bool = True

    @field_validator("page_size_options", mode="before")
    @classmethod
    def validate_page_size_options(cls, v):
        """Accept a comma separated string."""
        if isinstance(v, str):
            v = [p.strip() for p in v.split(",") if p.strip()]
        return v

    @field_validator("page_size_options")
    @classmethod
    def validate_positive_options(cls, v):
        if any(p < 1 for p in v):
            raise ValueError("Page sizes must be positive")
        return sorted(set(v))

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX,
        **overrides,
    ) -> "TableConfig":
        """Create the configuration from environment variables.

        Each attribute is read from the variable with the same name in upper
        case, prefixed by `prefix` (like `EXDRF_TBL_PAGE_SIZE`).

        Args:
            environ: The variables to read; defaults to `os.environ`.
            prefix: The prefix of the variable names.
            overrides: Values that take precedence over the environment.

        Raises:
            pydantic.ValidationError: A variable has an invalid value.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            value = environ.get(f"{prefix}{name.upper()}")
            if value is not None:
                values[name] = value
        values.update(overrides)
        if values:
            logger.debug("Table configuration: %s", values)
        return cls.model_validate(values)
