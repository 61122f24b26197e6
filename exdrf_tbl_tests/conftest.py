import pytest

from exdrf_tbl.column_types.api import (
    BoolColumn,
    DateColumn,
    NumberColumn,
    SelectColumn,
    TextColumn,
)


@pytest.fixture
def people():
    return [
        {"id": 1, "name": "Ann", "age": 31, "joined": "2021-04-01",
         "active": True, "role": "admin"},
        {"id": 2, "name": "ann", "age": 27, "joined": "2020-01-15",
         "active": False, "role": "user"},
        {"id": 3, "name": "Bob", "age": 45, "joined": "2019-11-30",
         "active": True, "role": "user"},
        {"id": 4, "name": "Émile", "age": None, "joined": None,
         "active": True, "role": "guest"},
        {"id": 5, "name": "Dana", "age": 27, "joined": "2022-07-07",
         "active": False, "role": "admin"},
    ]


@pytest.fixture
def people_columns():
    return [
        NumberColumn(id="id", searchable=False),
        TextColumn(id="name"),
        NumberColumn(id="age"),
        DateColumn(id="joined"),
        BoolColumn(id="active", true_str="Yes", false_str="No"),
        SelectColumn(
            id="role",
            filter_options=[
                ("Administrator", "admin"),
                ("User", "user"),
                ("Guest", "guest"),
            ],
        ),
    ]
