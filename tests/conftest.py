"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from db_field.core.connection import Connection, ConnectionConfig

# A slice of the Chinook sample database
CHINOOK_SCHEMA = """
CREATE TABLE albums (
    AlbumId INTEGER PRIMARY KEY,
    Title TEXT NOT NULL,
    ArtistId INTEGER NOT NULL
);
CREATE TABLE employees (
    EmployeeId INTEGER PRIMARY KEY,
    LastName TEXT NOT NULL,
    FirstName TEXT NOT NULL,
    ReportsTo INTEGER,
    HireDate TEXT
);
CREATE TABLE invoices (
    InvoiceId INTEGER PRIMARY KEY,
    CustomerId INTEGER NOT NULL,
    InvoiceDate TEXT NOT NULL,
    BillingState TEXT,
    Total NUMERIC NOT NULL
);
CREATE TABLE boolean_test (
    Id INTEGER PRIMARY KEY,
    Flag TEXT NOT NULL
);
INSERT INTO albums VALUES (1, 'For Those About To Rock We Salute You', 1);
INSERT INTO albums VALUES (2, 'Balls to the Wall', 2);
INSERT INTO albums VALUES (3, 'Restless and Wild', 2);
INSERT INTO employees VALUES (1, 'Adams', 'Andrew', NULL, '2002-08-14 00:00:00');
INSERT INTO employees VALUES (2, 'Edwards', 'Nancy', 1, '2002-05-01 00:00:00');
INSERT INTO employees VALUES (3, 'Peacock', 'Jane', 2, '2002-04-01 00:00:00');
INSERT INTO invoices VALUES (1, 2, '2009-01-01 00:00:00', NULL, 1.98);
INSERT INTO invoices VALUES (2, 4, '2009-01-02 00:00:00', 'AB', 3.96);
INSERT INTO boolean_test VALUES (1, 'Y');
INSERT INTO boolean_test VALUES (2, 'N');
"""


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def chinook(sqlite_config: ConnectionConfig) -> Iterator[Connection]:
    """Open connection to an in-memory database with Chinook-style tables."""
    connection = Connection(sqlite_config).open()
    connection.raw.executescript(CHINOOK_SCHEMA)
    yield connection
    connection.close()


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for SQL files."""
    return tmp_path / "sql"


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write SQL files into the temp directory.

    Usage:
        write_sql("albums/get_by_id.sql", "SELECT * FROM albums WHERE AlbumId = :AlbumId")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write
