"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from db_field.adapters.protocol import positional, write_back
from db_field.core.enums import ParameterDirection

if TYPE_CHECKING:
    from db_field.core.command import Parameter
    from db_field.core.connection import ConnectionConfig


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlAdapter:
    """PostgreSQL adapter using psycopg (v3+)."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg

        return psycopg.connect(_build_conninfo(config), **config.extra)

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return connection.execute(sql, params or None)

    def call_procedure(
        self,
        connection: Any,
        name: str,
        parameters: list[Parameter],
    ) -> Any:
        """Run ``CALL name(...)``; OUT/INOUT values come back as a single row."""
        from psycopg import sql

        args = positional(parameters)
        query = sql.SQL("CALL {}({})").format(
            sql.Identifier(*name.split(".")),
            sql.SQL(", ").join(sql.Placeholder() for _ in args),
        )
        cursor = connection.cursor()
        cursor.execute(query, [p.value for p in args])
        if cursor.description is not None:
            write_back(
                [p for p in args if p.direction is not ParameterDirection.INPUT],
                cursor.fetchone(),
            )
        return cursor
