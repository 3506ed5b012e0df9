"""Oracle adapter using oracledb."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from db_field.adapters.protocol import positional, write_back
from db_field.core.enums import ParameterDirection

if TYPE_CHECKING:
    from db_field.core.command import Parameter
    from db_field.core.connection import ConnectionConfig


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle DSN string from config fields (host:port/database)."""
    return f"{config.host}:{config.port}/{config.database}"


class OracleAdapter:
    """Oracle adapter using oracledb."""

    @property
    def paramstyle(self) -> str:
        return "named"

    def connect(self, config: ConnectionConfig) -> Any:
        import oracledb

        return oracledb.connect(
            user=config.user,
            password=config.password,
            dsn=_build_dsn(config),
            **config.extra,
        )

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        cursor = connection.cursor()
        cursor.execute(sql, params or {})
        return cursor

    def call_procedure(
        self,
        connection: Any,
        name: str,
        parameters: list[Parameter],
    ) -> Any:
        """Call a procedure; OUT and IN OUT parameters are bound as cursor variables."""
        args = positional(parameters)
        cursor = connection.cursor()
        values: list[Any] = []
        for parameter in args:
            if parameter.direction is ParameterDirection.INPUT:
                values.append(parameter.value)
                continue
            var_type = parameter.db_type
            if var_type is None:
                var_type = type(parameter.value) if parameter.value is not None else str
            var = cursor.var(var_type)
            if parameter.direction is ParameterDirection.INPUT_OUTPUT:
                var.setvalue(0, parameter.value)
            values.append(var)
        write_back(args, cursor.callproc(name, values))
        return cursor
