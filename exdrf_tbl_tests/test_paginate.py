import pytest

from exdrf_tbl.paginate import clamp_page, paginate, total_pages


@pytest.mark.parametrize(
    "total, size, expected",
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3)],
)
def test_total_pages(total, size, expected):
    assert total_pages(total, size) == expected


def test_invalid_page_size():
    with pytest.raises(ValueError):
        total_pages(10, 0)


def test_pages_of_25_rows():
    first = paginate(25, 1, 10)
    assert (first.start, first.end, first.total_pages) == (0, 10, 3)
    assert first.is_first and not first.is_last

    second = paginate(25, 2, 10)
    assert (second.start, second.end) == (10, 20)

    third = paginate(25, 3, 10)
    assert (third.start, third.end) == (20, 25)
    assert third.is_last


def test_clamp():
    assert clamp_page(5, 25, 10) == 3
    assert clamp_page(0, 25, 10) == 1
    assert clamp_page(-3, 25, 10) == 1
    assert clamp_page(4, 0, 10) == 1
    assert paginate(25, 9, 10).page == 3


def test_empty():
    result = paginate(0, 1, 10)
    assert (result.page, result.start, result.end) == (1, 0, 0)


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 37])
@pytest.mark.parametrize("size", [1, 5, 10])
def test_pages_cover_everything(total, size):
    rows = list(range(total))
    pages = total_pages(total, size)
    covered = []
    for page in range(1, pages + 1):
        bounds = paginate(total, page, size)
        covered.extend(rows[bounds.start : bounds.end])
    assert covered == rows
