"""Connection configuration and lifecycle.

ConnectionConfig is a Pydantic model for type-safe connection config.
Connection wraps one DB-API connection opened through a driver adapter and
hands out Commands bound to it. There is no pooling: one Connection owns one
driver connection.
"""

from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Any

from pydantic import BaseModel

from db_field.core.command import Command
from db_field.core.enums import CommandType, ConnectionState, DatabaseBackend
from db_field.core.exceptions import AdapterError, ConnectionError, ConnectionStateError  # noqa: A004

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    extra: dict[str, Any] = {}
    validate_parameters: bool = False
    metadata_expiration: timedelta = timedelta(hours=4)
    metadata_cache_size: int = 1024


# Adapter module mapping: backend → (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("db_field.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("db_field.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("db_field.adapters.mysql", "MysqlAdapter"),
    DatabaseBackend.ORACLE: ("db_field.adapters.oracle", "OracleAdapter"),
}


def load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError as e:
        raise AdapterError(f"Unsupported database driver: {driver}") from e

    module_path, cls_name = _ADAPTER_MAP[backend]

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class Connection:
    """A single database connection.

    Args:
        config: Connection settings; ``config.driver`` selects the adapter.
        adapter: Optional adapter instance overriding the driver lookup.
    """

    def __init__(self, config: ConnectionConfig, adapter: Any | None = None) -> None:
        self.config = config
        self._adapter = adapter if adapter is not None else load_adapter(config.driver)
        self._raw: Any = None

    @classmethod
    def wrap(cls, raw_connection: Any, driver: str, **config: Any) -> Connection:
        """Wrap an already opened DB-API connection."""
        config.setdefault("database", "")
        connection = cls(ConnectionConfig(driver=driver, **config))
        connection._raw = raw_connection
        return connection

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def raw(self) -> Any:
        """The underlying DB-API connection (None while closed)."""
        return self._raw

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CLOSED if self._raw is None else ConnectionState.OPEN

    @property
    def is_open(self) -> bool:
        return self._raw is not None

    def open(self) -> Connection:
        """Open the driver connection. A no-op when already open."""
        if self._raw is None:
            try:
                self._raw = self._adapter.connect(self.config)
            except AdapterError:
                raise
            except Exception as e:
                raise ConnectionError(
                    f"Failed to connect to {self.config.driver} database "
                    f"'{self.config.database}': {e}"
                ) from e
            logger.debug("Opened %s connection to '%s'", self.config.driver, self.config.database)
        return self

    def close(self) -> None:
        """Close the driver connection."""
        if self._raw is not None:
            raw, self._raw = self._raw, None
            raw.close()
            logger.debug("Closed %s connection", self.config.driver)

    def require_open(self, operation: str) -> Any:
        """Return the raw connection or raise ConnectionStateError."""
        if self._raw is None:
            raise ConnectionStateError(operation)
        return self._raw

    def create_command(
        self,
        text: str = "",
        command_type: CommandType = CommandType.TEXT,
    ) -> Command:
        """Create a Command bound to this connection."""
        return Command(self, text, command_type)

    def commit(self) -> None:
        self.require_open("commit").commit()

    def rollback(self) -> None:
        self.require_open("rollback").rollback()

    def __enter__(self) -> Connection:
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
