import logging
from unittest.mock import Mock

import pytest

from exdrf_tbl.actions import BulkAction, RowAction
from exdrf_tbl.column_types.api import NumberColumn, TextColumn
from exdrf_tbl.config import TableConfig
from exdrf_tbl.engine import TableEngine, TableEvents
from exdrf_tbl.query import QueryState


def make_rows(count: int):
    return [{"id": i, "name": f"Row {i}"} for i in range(1, count + 1)]


def ids(engine):
    return [row["id"] for row in engine.view.rows]


@pytest.fixture
def events():
    return TableEvents(
        on_sort=Mock(),
        on_filter=Mock(),
        on_search=Mock(),
        on_row_select=Mock(),
        on_export=Mock(),
    )


@pytest.fixture
def engine(people, people_columns, events):
    return TableEngine(
        rows=people,
        columns=people_columns,
        config=TableConfig(selectable=True, exportable=True, page_size=2),
        events=events,
    )


@pytest.fixture
def big():
    return TableEngine(
        rows=make_rows(25),
        columns=[NumberColumn(id="id"), TextColumn(id="name")],
        config=TableConfig(selectable=True),
    )


class TestInit:
    def test_page_size_from_config(self, engine):
        assert engine.state.page_size == 2
        assert engine.view.total_pages == 3

    def test_schema_hidden_columns(self, people):
        engine = TableEngine(
            rows=people,
            columns=[NumberColumn(id="id"), TextColumn(id="name", hidden=True)],
        )
        assert not engine.is_column_visible("name")
        assert [c.id for c in engine.visible_columns] == ["id"]

    def test_initial_page_is_clamped(self, people, people_columns):
        engine = TableEngine(
            rows=people,
            columns=people_columns,
            state=QueryState(page=5, page_size=2),
        )
        assert engine.state.page == 3

    def test_repr(self, engine):
        assert repr(engine) == "<TableEngine 5 rows, 6 columns>"


class TestSearchAndFilters:
    def test_search_resets_page(self, big, events):
        big.events = events
        big.set_page(3)
        big.set_search("row 1")
        assert big.state.page == 1
        assert big.view.total_filtered == 11
        events.on_search.assert_called_once_with("row 1")

    def test_filter_resets_page(self, engine, events):
        engine.set_page(2)
        engine.set_filter("role", ["admin"])
        assert engine.state.page == 1
        assert ids(engine) == [1, 5]
        events.on_filter.assert_called_once_with({"role": ["admin"]})

    def test_filter_notification_is_a_copy(self, engine, events):
        engine.set_filter("name", "a")
        received = events.on_filter.call_args[0][0]
        received["role"] = ["guest"]
        assert engine.state.filters == {"name": "a"}

    def test_empty_filter_removes_it(self, engine):
        engine.set_filter("role", ["admin"])
        engine.set_filter("role", [])
        assert engine.state.filters == {}
        engine.set_filter("name", "bo")
        engine.clear_filter("name")
        assert engine.state.filters == {}

    def test_filters_compose(self, engine):
        engine.set_filters({"role": ["admin", "user"], "name": "an", "x": ""})
        assert engine.state.filters == {
            "role": ["admin", "user"],
            "name": "an",
        }
        engine.set_page_size(10)
        assert ids(engine) == [1, 2, 5]
        engine.clear_filters()
        assert ids(engine) == [1, 2, 3, 4, 5]

    def test_active_filters(self, engine):
        engine.set_filter("role", ["admin", "guest"])
        assert engine.active_filters() == [("Role", "Administrator, Guest")]


class TestSorting:
    def test_sort_by_toggles(self, engine, events):
        engine.set_page_size(10)
        assert engine.sort_by("age") is True
        assert engine.state.sort_direction == "asc"
        assert ids(engine) == [2, 5, 1, 4, 3]

        assert engine.sort_by("age") is True
        assert engine.state.sort_direction == "desc"
        assert ids(engine) == [3, 1, 2, 4, 5]

        assert engine.sort_by("age") is True
        assert engine.state.sort_direction == "asc"

        assert events.on_sort.call_count == 3
        events.on_sort.assert_called_with("age", "asc")

    def test_new_column_starts_ascending(self, engine):
        engine.set_sort("age", "desc")
        engine.sort_by("name")
        assert engine.state.sort_column == "name"
        assert engine.state.sort_direction == "asc"

    def test_sort_rejected(self, engine, events, people, people_columns):
        assert engine.sort_by("nope") is False
        people_columns[1].sortable = False
        engine.set_columns(people_columns)
        assert engine.sort_by("name") is False
        events.on_sort.assert_not_called()

        disabled = TableEngine(
            rows=people,
            columns=people_columns,
            config=TableConfig(sortable=False),
        )
        assert disabled.sort_by("age") is False
        assert disabled.state.sort_column is None

    def test_bad_direction(self, engine):
        with pytest.raises(ValueError):
            engine.set_sort("age", "up")

    def test_clear_sort(self, engine, events):
        engine.set_sort("name", "desc")
        engine.clear_sort()
        assert engine.state.sort_column is None
        assert engine.state.sort_direction == "asc"
        assert ids(engine) == [1, 2]
        events.on_sort.assert_called_with(None, "asc")

        engine.clear_sort()
        assert events.on_sort.call_count == 2

    def test_set_sort_when_disabled(self, people, people_columns, events):
        engine = TableEngine(
            rows=people,
            columns=people_columns,
            config=TableConfig(sortable=False),
            events=events,
        )
        assert engine.set_sort("age", "desc") is False
        assert engine.state.sort_column is None
        events.on_sort.assert_not_called()

    def test_removed_sort_column_is_ignored(self, engine, people_columns):
        engine.set_sort("name", "desc")
        engine.set_columns([c for c in people_columns if c.id != "name"])
        assert engine.state.sort_column == "name"
        assert ids(engine) == [1, 2]


class TestPagination:
    def test_navigation(self, big):
        assert big.view.total_pages == 3
        assert big.next_page() == 2
        assert big.next_page() == 3
        assert big.next_page() == 3
        assert big.previous_page() == 2
        assert big.first_page() == 1
        assert big.previous_page() == 1
        assert big.last_page() == 3
        assert [r["id"] for r in big.view.rows] == [21, 22, 23, 24, 25]

    def test_set_page_clamps(self, big):
        assert big.set_page(0) == 1
        assert big.set_page(99) == 3

    def test_page_size_resets_page(self, big):
        big.set_page(3)
        big.set_page_size(5)
        assert big.state.page == 1
        assert big.view.total_pages == 5

    def test_invalid_page_size(self, big):
        with pytest.raises(ValueError):
            big.set_page_size(0)
        assert big.state.page_size == 10

    def test_page_size_must_be_an_option(self, big):
        with pytest.raises(ValueError):
            big.set_page_size(7)
        assert big.state.page_size == 10
        big.set_page_size(20)
        assert big.state.page_size == 20

    def test_any_page_size_without_options(self, people, people_columns):
        engine = TableEngine(
            rows=people,
            columns=people_columns,
            config=TableConfig(page_size_options=[]),
        )
        engine.set_page_size(3)
        assert engine.view.total_pages == 2

    def test_fewer_rows_clamp_page(self, big):
        big.set_page(3)
        big.set_rows(make_rows(12))
        assert big.state.page == 2
        assert [r["id"] for r in big.view.rows] == [11, 12]

    def test_no_pagination(self, people, people_columns):
        engine = TableEngine(
            rows=people,
            columns=people_columns,
            config=TableConfig(pagination=False, page_size=2),
        )
        assert len(engine.view.rows) == 5
        assert engine.set_page(3) == 3
        assert engine.view.page == 1


class TestColumns:
    def test_hide_and_show(self, engine):
        engine.hide_column("age")
        assert not engine.is_column_visible("age")
        assert "age" not in [c.id for c in engine.view.columns]
        engine.show_column("age")
        assert engine.is_column_visible("age")

    def test_toggle(self, engine):
        assert engine.toggle_column("role") is False
        assert engine.toggle_column("role") is True
        assert len(engine.columns) == 6

    def test_hidden_columns_are_still_filtered(self, engine):
        engine.hide_column("role")
        engine.set_filter("role", ["guest"])
        assert ids(engine) == [4]


class TestSelection:
    def test_survives_pagination(self, big):
        big.toggle_row(2)
        big.toggle_row(4)
        big.next_page()
        assert big.view.selected == [False] * 10
        big.previous_page()
        assert big.view.selected[1]
        assert big.view.selected[3]
        assert big.state.selected == {2, 4}

    def test_survives_filters(self, engine):
        engine.toggle_row(3)
        engine.set_filter("role", ["admin"])
        assert engine.is_selected(3)
        assert 3 not in engine.view.row_keys
        engine.clear_filters()
        assert [r["id"] for r in engine.selected_rows()] == [3]

    def test_select_all_page(self, engine, events):
        engine.select_all()
        assert engine.state.selected == {1, 2}
        assert engine.header_check_state() == "checked"
        events.on_row_select.assert_called_once_with({1, 2})
        engine.next_page()
        assert engine.header_check_state() == "unchecked"

    def test_select_all_filtered(self, engine):
        engine.set_filter("role", ["user", "guest"])
        engine.select_all(whole_filtered=True)
        assert engine.state.selected == {2, 3, 4}

    def test_deselect_all_keeps_other_pages(self, big):
        big.toggle_row(15)
        big.select_all()
        big.deselect_all()
        assert big.state.selected == {15}

    def test_partial_header(self, engine):
        engine.toggle_row(2)
        assert engine.header_check_state() == "partial"

    def test_clear_selection(self, engine, events):
        engine.toggle_row(1)
        engine.toggle_row(5)
        engine.clear_selection()
        assert engine.state.selected == set()
        events.on_row_select.assert_called_with(set())

    def test_disabled(self, people, people_columns):
        engine = TableEngine(rows=people, columns=people_columns)
        assert engine.toggle_row(1) is False
        engine.select_all()
        engine.set_row_selected(2, True)
        assert engine.state.selected == set()

    def test_selection_is_shared_with_state(self, engine):
        engine.set_row_selected(4, True)
        assert engine.state.selected is engine.selection.selected
        assert engine.state.selected == {4}


class TestEvents:
    def test_callback_errors_are_logged(self, engine, caplog):
        engine.events.on_sort = Mock(side_effect=RuntimeError("boom"))
        with caplog.at_level(logging.ERROR):
            assert engine.sort_by("age") is True
        assert engine.state.sort_column == "age"
        assert "on_sort" in caplog.text
        assert "boom" in caplog.text

    def test_missing_callbacks(self, people, people_columns):
        engine = TableEngine(rows=people, columns=people_columns)
        engine.set_search("ann")
        engine.sort_by("name")
        assert ids(engine) == [2, 1]


class TestActions:
    def test_row_actions(self, engine):
        edit = RowAction(label="Edit", on_click=Mock())
        delete = RowAction(
            label="Delete",
            on_click=Mock(),
            show=lambda row: not row["active"],
            variant="destructive",
        )
        engine.actions = [edit, delete]
        assert engine.row_actions(engine.rows[0]) == [edit]
        assert engine.row_actions(engine.rows[1]) == [edit, delete]

    def test_bulk_action_uses_full_data(self, engine):
        on_click = Mock(return_value="done")
        engine.toggle_row(5)
        engine.toggle_row(1)
        engine.set_filter("role", ["guest"])
        result = engine.run_bulk_action(BulkAction("Archive", on_click))
        assert result == "done"
        rows = on_click.call_args[0][0]
        assert [r["id"] for r in rows] == [1, 5]


class TestExport:
    def test_all_pages_visible_columns(self, engine, events):
        engine.set_sort("age", "desc")
        engine.set_filter("role", ["admin", "user"])
        engine.hide_column("joined")
        engine.columns.get_column("active").exportable = False

        request = engine.export("csv")
        assert request.format == "csv"
        assert [c.id for c in request.columns] == ["id", "name", "age", "role"]
        assert [r["id"] for r in request.rows] == [3, 1, 2, 5]
        assert request.headers == ["Id", "Name", "Age", "Role"]
        assert request.as_table()[0] == [3, "Bob", 45, "user"]
        events.on_export.assert_called_once_with("csv")

    def test_unknown_format(self, engine, events):
        with pytest.raises(ValueError):
            engine.export("pdf")
        events.on_export.assert_not_called()

    def test_disabled(self, people, people_columns):
        engine = TableEngine(rows=people, columns=people_columns)
        with pytest.raises(ValueError):
            engine.export("json")
