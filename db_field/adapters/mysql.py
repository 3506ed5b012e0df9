"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from db_field.adapters.protocol import positional, write_back

if TYPE_CHECKING:
    from db_field.core.command import Parameter
    from db_field.core.connection import ConnectionConfig


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            **config.extra,
        )

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor with tuple rows."""
        cursor = connection.cursor()
        cursor.execute(sql, params or {})
        return cursor

    def call_procedure(
        self,
        connection: Any,
        name: str,
        parameters: list[Parameter],
    ) -> Any:
        """Call a procedure; ``callproc`` returns the arguments with OUT values set."""
        args = positional(parameters)
        cursor = connection.cursor()
        write_back(args, cursor.callproc(name, [p.value for p in args]))
        return cursor
