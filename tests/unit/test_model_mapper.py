"""Unit tests for ModelMapper."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional

import pytest
from pydantic import BaseModel

from db_field.core.connection import Connection
from db_field.core.exceptions import (
    ArgumentNullError,
    FieldTypeMismatchError,
    MappingConfigurationError,
    MappingDataError,
    MappingFieldNotFoundError,
    NonNullableNullAssignmentError,
)
from db_field.core.reader import DataReader
from db_field.mapping.fields import DbField, db_field
from db_field.mapping.metadata import MetadataRegistry
from db_field.mapping.model import ModelMapper
from db_field.mapping.protocol import Mapper


@dataclass
class Album:
    album_id: Annotated[int, DbField("AlbumId")] = 0
    title: Annotated[str, DbField("Title")] = ""
    artist_id: Annotated[int, DbField("ArtistId")] = 0


@dataclass
class Employee:
    employee_id: int = db_field("EmployeeId", default=0)
    last_name: str = db_field("LastName", default="")
    reports_to: Optional[int] = db_field("ReportsTo", default=None)
    hire_date: Optional[datetime] = db_field("HireDate", default=None)


@dataclass
class EmployeeStrict:
    employee_id: int = db_field("EmployeeId", default=0)
    reports_to: int = db_field("ReportsTo", default=0)


@dataclass
class InvoiceState:
    invoice_id: Annotated[int, DbField("InvoiceId")] = 0
    billing_state: Annotated[int, DbField("BillingState")] = 0


class Invoice:
    """Reads InvoiceDate as UTC and shifts it to the billing day."""

    invoice_id: Annotated[int, DbField("InvoiceId")]
    invoice_date: Annotated[datetime, DbField("InvoiceDate")]
    total: Annotated[Decimal, DbField("Total")]

    def __init__(self) -> None:
        self.seen: list[tuple[str, Any]] = []

    def should_override_hydration(self, field_name: str) -> bool:
        return field_name == "invoice_date"

    def override_hydration(self, field_name: str, value: Any) -> Any:
        self.seen.append((field_name, value))
        return value.replace(tzinfo=timezone.utc) + timedelta(hours=8)


class BooleanTest:
    id: Annotated[int, DbField("Id")]
    flag: Annotated[bool, DbField("Flag")]

    def should_override_hydration(self, field_name: str) -> bool:
        return field_name == "flag"

    def override_hydration(self, field_name: str, value: Any) -> Any:
        return value == "Y"


class NullingOverride:
    album_id: Annotated[int, DbField("AlbumId")]

    def should_override_hydration(self, field_name: str) -> bool:
        return True

    def override_hydration(self, field_name: str, value: Any) -> Any:
        return None


class HireDay:
    """Override hands back a datetime for a date attribute."""

    employee_id: Annotated[int, DbField("EmployeeId")]
    day: Annotated[date, DbField("HireDate")]

    def should_override_hydration(self, field_name: str) -> bool:
        return field_name == "day"

    def override_hydration(self, field_name: str, value: Any) -> Any:
        return datetime(2020, 1, 2, 3)


class AlbumPydantic(BaseModel):
    album_id: Annotated[int, DbField("AlbumId")]
    title: Annotated[str, DbField("Title")]


class AlbumPlain:
    def __init__(self, album_id: int, title: str) -> None:
        self.album_id = album_id
        self.title = title

    album_id: Annotated[int, DbField("albumid")]
    title: Annotated[str, DbField("TITLE")]


@dataclass(frozen=True)
class AlbumFrozen:
    album_id: Annotated[int, DbField("AlbumId")] = 0
    title: Annotated[str, DbField("Title")] = ""


class AlbumTwice:
    album_id: Annotated[int, DbField("AlbumId")]
    album_key: Annotated[str, DbField("AlbumId")]


def _reader(connection: Connection, sql: str) -> DataReader:
    return connection.create_command(sql).execute_reader()


class TestModelMapper:
    def test_map_album(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = 1")
        assert reader.read()
        album = ModelMapper(Album).map_one(reader)
        assert album == Album(1, "For Those About To Rock We Salute You", 1)

    def test_map_many(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums ORDER BY AlbumId")
        albums = ModelMapper(Album).map_many(reader)
        assert [a.album_id for a in albums] == [1, 2, 3]
        assert all(isinstance(a, Album) for a in albums)

    def test_map_many_take(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums ORDER BY AlbumId")
        albums = ModelMapper(Album).map_many(reader, take=2)
        assert [a.album_id for a in albums] == [1, 2]

    def test_map_many_take_zero_does_not_advance(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums ORDER BY AlbumId")
        assert ModelMapper(Album).map_many(reader, take=0) == []
        assert reader.read()
        assert reader["AlbumId"] == 1

    def test_map_many_empty(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = -1")
        assert ModelMapper(Album).map_many(reader) == []

    def test_nullable_field(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM employees ORDER BY EmployeeId")
        employees = ModelMapper(Employee).map_many(reader)
        assert employees[0].reports_to is None
        assert employees[1].reports_to == 1
        assert employees[0].hire_date == datetime(2002, 8, 14)

    def test_null_on_non_nullable_field(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM employees WHERE EmployeeId = 1")
        assert reader.read()
        with pytest.raises(NonNullableNullAssignmentError) as exc_info:
            ModelMapper(EmployeeStrict).map_one(reader)
        assert exc_info.value.database_field == "ReportsTo"
        assert exc_info.value.attribute == "reports_to"
        assert isinstance(exc_info.value, MappingDataError)

    def test_type_mismatch(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM invoices WHERE InvoiceId = 2")
        assert reader.read()
        with pytest.raises(FieldTypeMismatchError, match="BillingState") as exc_info:
            ModelMapper(InvoiceState).map_one(reader)
        assert exc_info.value.attribute == "billing_state"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_missing_column(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT AlbumId, Title FROM albums")
        assert reader.read()
        with pytest.raises(MappingFieldNotFoundError) as exc_info:
            ModelMapper(Album).map_one(reader)
        error = exc_info.value
        assert error.database_field == "ArtistId"
        assert error.attribute == "artist_id"
        assert "Album.artist_id" in str(error)
        assert isinstance(error, MappingConfigurationError)

    def test_extra_columns_ignored(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT a.*, 'extra' AS Note FROM albums a WHERE AlbumId = 2")
        assert reader.read()
        assert ModelMapper(Album).map_one(reader).title == "Balls to the Wall"

    def test_case_insensitive_columns(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT AlbumId, Title FROM albums WHERE AlbumId = 3")
        assert reader.read()
        album = ModelMapper(AlbumPlain).map_one(reader)
        assert isinstance(album, AlbumPlain)
        assert (album.album_id, album.title) == (3, "Restless and Wild")

    def test_same_column_twice(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT AlbumId FROM albums WHERE AlbumId = 3")
        assert reader.read()
        album = ModelMapper(AlbumTwice).map_one(reader)
        assert album.album_id == 3
        assert album.album_key == "3"

    def test_pydantic_model(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = 1")
        assert reader.read()
        album = ModelMapper(AlbumPydantic).map_one(reader)
        assert isinstance(album, AlbumPydantic)
        assert album.album_id == 1

    def test_frozen_dataclass(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = 2")
        assert reader.read()
        assert ModelMapper(AlbumFrozen).map_one(reader) == AlbumFrozen(2, "Balls to the Wall")

    def test_none_target(self) -> None:
        with pytest.raises(ArgumentNullError):
            ModelMapper(None)  # type: ignore[arg-type]


class TestHydrationOverride:
    def test_override_receives_coerced_temporal(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM invoices WHERE InvoiceId = 1")
        assert reader.read()
        invoice = ModelMapper(Invoice).map_one(reader)
        assert invoice.seen == [("invoice_date", datetime(2009, 1, 1))]
        assert invoice.invoice_date == datetime(2009, 1, 1, 8, tzinfo=timezone.utc)
        assert invoice.total == Decimal("1.98")

    def test_override_only_for_requested_fields(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM invoices WHERE InvoiceId = 2")
        assert reader.read()
        invoice = ModelMapper(Invoice).map_one(reader)
        assert [name for name, _ in invoice.seen] == ["invoice_date"]
        assert invoice.invoice_id == 2

    def test_boolean_override(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM boolean_test ORDER BY Id")
        flags = [row.flag for row in ModelMapper(BooleanTest).map_many(reader)]
        assert flags == [True, False]

    def test_override_datetime_narrowed_to_date(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM employees WHERE EmployeeId = 1")
        assert reader.read()
        hire = ModelMapper(HireDay).map_one(reader)
        assert type(hire.day) is date
        assert hire.day == date(2020, 1, 2)

    def test_override_result_checked_for_null(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = 1")
        assert reader.read()
        with pytest.raises(NonNullableNullAssignmentError):
            ModelMapper(NullingOverride).map_one(reader)


class TestPopulate:
    def test_populate_existing_instance(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums WHERE AlbumId = 3")
        assert reader.read()
        album = Album()
        result = ModelMapper(Album).populate(reader, album)
        assert result is album
        assert album.title == "Restless and Wild"

    def test_partial_population_on_failure(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT EmployeeId, ReportsTo FROM employees WHERE EmployeeId = 1")
        assert reader.read()
        employee = EmployeeStrict(employee_id=99, reports_to=42)
        with pytest.raises(NonNullableNullAssignmentError):
            ModelMapper(EmployeeStrict).populate(reader, employee)
        assert employee.employee_id == 1
        assert employee.reports_to == 42

    def test_populate_none(self, chinook: Connection) -> None:
        reader = _reader(chinook, "SELECT * FROM albums")
        assert reader.read()
        with pytest.raises(ArgumentNullError):
            ModelMapper(Album).populate(reader, None)  # type: ignore[arg-type]


class TestSharedRegistry:
    def test_implements_mapper_protocol(self) -> None:
        assert isinstance(ModelMapper(Album), Mapper)

    def test_mappers_share_metadata(self) -> None:
        registry = MetadataRegistry()
        first = ModelMapper(Album, registry).metadata()
        second = ModelMapper(Album, registry).metadata()
        assert first is second
