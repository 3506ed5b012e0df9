"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from db_field.core.exceptions import AdapterError

if TYPE_CHECKING:
    from db_field.core.command import Parameter
    from db_field.core.connection import ConnectionConfig


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "named"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        """Open a SQLite database file (or ``:memory:``)."""
        return sqlite3.connect(config.database, **config.extra)

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params or {})

    def call_procedure(
        self,
        connection: sqlite3.Connection,
        name: str,
        parameters: list[Parameter],
    ) -> Any:
        raise AdapterError("SQLite does not support stored procedures")
