import math

from attrs import define


def total_pages(total: int, page_size: int) -> int:
    """The number of pages needed to show all the rows.

    There is always at least one page, even when there are no rows.
    """
    if page_size < 1:
        raise ValueError(f"The page size must be positive, not {page_size}")
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int) -> int:
    """Bring the page in the `[1, total_pages]` range."""
    return min(max(1, page), total_pages(total, page_size))


@define(frozen=True)
class PageSlice:
    """The part of the filtered rows that is shown.

    Attributes:
        page: The current page (clamped), starting at 1.
        page_size: The number of rows in a page.
        total: The number of filtered rows.
        total_pages: The number of pages.
        start: The index of the first row in the page (inclusive).
        end: The index of the last row in the page (exclusive).
    """

    page: int
    page_size: int
    total: int
    total_pages: int
    start: int
    end: int

    @property
    def is_first(self) -> bool:
        return self.page <= 1

    @property
    def is_last(self) -> bool:
        return self.page >= self.total_pages


def paginate(total: int, page: int, page_size: int) -> PageSlice:
    """Compute the bounds of a page.

    Args:
        total: The number of filtered rows.
        page: The requested page; out of range values are clamped.
        page_size: The number of rows in a page.
    """
    pages = total_pages(total, page_size)
    page = min(max(1, page), pages)
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    return PageSlice(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=pages,
        start=start,
        end=end,
    )
