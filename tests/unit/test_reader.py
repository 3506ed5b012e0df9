"""Unit tests for DataReader."""

from __future__ import annotations

import pytest

from db_field.core.connection import Connection
from db_field.core.exceptions import FieldNotFoundError, ReaderStateError
from db_field.core.reader import DataReader


class FakeCursor:
    """Cursor returning dict-like rows, like psycopg's dict_row."""

    def __init__(self, rows: list[dict]) -> None:
        self.description = [(name, None) for name in rows[0]] if rows else None
        self._rows = list(rows)
        self.rowcount = len(rows)
        self.closed = False

    def fetchone(self) -> dict | None:
        return self._rows.pop(0) if self._rows else None

    def close(self) -> None:
        self.closed = True


class TestDataReader:
    def test_read_rows(self, chinook: Connection) -> None:
        reader = chinook.create_command("SELECT AlbumId, Title FROM albums ORDER BY AlbumId").execute_reader()
        ids = []
        while reader.read():
            ids.append(reader.get_value(0))
        assert ids == [1, 2, 3]
        assert reader.read() is False

    def test_field_names_and_ordinals(self, chinook: Connection) -> None:
        with chinook.create_command("SELECT AlbumId, Title FROM albums").execute_reader() as reader:
            assert reader.field_count == 2
            assert reader.get_name(1) == "Title"
            assert reader.get_ordinal("Title") == 1
            assert reader.column_ordinals() == {"albumid": 0, "title": 1}

    def test_case_insensitive_lookup(self, chinook: Connection) -> None:
        with chinook.create_command("SELECT AlbumId FROM albums").execute_reader() as reader:
            assert reader.get_ordinal("albumid") == 0
            assert reader.get_ordinal("ALBUMID") == 0
            assert reader.has_field("albumID")
            assert not reader.has_field("Missing")

    def test_exact_match_wins(self) -> None:
        reader = DataReader(FakeCursor([{"name": "lower", "NAME": "upper"}]))
        assert reader.read()
        assert reader["NAME"] == "upper"
        assert reader["name"] == "lower"
        assert reader["Name"] == "lower"

    def test_unknown_field(self, chinook: Connection) -> None:
        with chinook.create_command("SELECT AlbumId FROM albums").execute_reader() as reader:
            with pytest.raises(FieldNotFoundError, match="Missing"):
                reader.get_ordinal("Missing")

    def test_indexing_and_nulls(self, chinook: Connection) -> None:
        sql = "SELECT EmployeeId, ReportsTo FROM employees WHERE EmployeeId = 1"
        with chinook.create_command(sql).execute_reader() as reader:
            assert reader.read()
            assert reader["EmployeeId"] == 1
            assert reader[1] is None
            assert reader.is_null(1)
            assert not reader.is_null(0)

    def test_value_before_read(self, chinook: Connection) -> None:
        with chinook.create_command("SELECT AlbumId FROM albums").execute_reader() as reader:
            with pytest.raises(ReaderStateError):
                reader.get_value(0)

    def test_read_after_close(self) -> None:
        cursor = FakeCursor([{"id": 1}])
        reader = DataReader(cursor)
        reader.close()
        assert cursor.closed
        assert reader.is_closed
        with pytest.raises(ReaderStateError):
            reader.read()

    def test_mapping_rows(self) -> None:
        reader = DataReader(FakeCursor([{"AlbumId": 1, "Title": "Balls to the Wall"}]))
        assert reader.read()
        assert reader.get_value(0) == 1
        assert reader["title"] == "Balls to the Wall"

    def test_no_result_set(self) -> None:
        reader = DataReader(FakeCursor([]))
        assert reader.field_count == 0
        assert reader.read() is False
