"""Query execution engine.

The Engine resolves queries (inline SQL or SQLRegistry keys), builds
commands on one open Connection, binds parameters and hands readers to the
model mapper. Readers and cursors are closed before each call returns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from db_field.core.connection import Connection, ConnectionConfig
from db_field.core.enums import CommandType
from db_field.core.exceptions import ArgumentNullError
from db_field.core.params import resolve_sql
from db_field.mapping.binder import bind_parameters_from_object
from db_field.mapping.cache import SlidingCache
from db_field.mapping.metadata import MetadataRegistry
from db_field.mapping.model import ModelMapper

if TYPE_CHECKING:
    from db_field.core.command import Command
    from db_field.core.reader import DataReader
    from db_field.core.registry import SQLRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

CommandCallback = Callable[["Command"], None]


class Engine:
    """Synchronous query execution engine over a single connection.

    Args:
        connection: An open Connection.
        registry: Optional SQLRegistry used to resolve query names.
        metadata: Metadata registry shared by every mapper and binder the
            engine creates. A fresh one is used when omitted.
        validate_parameters: Check SQL parameters against bound parameters
            before every execution. Meant for development.
        autocommit: Commit after ``execute_non_query`` and the
            ``execute_for_object(s)`` writes.
    """

    def __init__(
        self,
        connection: Connection,
        registry: SQLRegistry | None = None,
        *,
        metadata: MetadataRegistry | None = None,
        validate_parameters: bool = False,
        autocommit: bool = True,
    ) -> None:
        if connection is None:
            raise ArgumentNullError("connection")
        self._connection = connection
        self._registry = registry
        self._metadata = metadata if metadata is not None else MetadataRegistry()
        self._validate_parameters = validate_parameters
        self._autocommit = autocommit

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        registry: SQLRegistry | None = None,
    ) -> Engine:
        """Open a Connection from *config* and wrap it in an Engine.

        Args:
            config: ConnectionConfig instance
            registry: SQLRegistry instance

        Returns:
            Engine instance
        """
        connection = Connection(config).open()
        metadata = MetadataRegistry(
            SlidingCache(config.metadata_expiration, config.metadata_cache_size)
        )
        return cls(
            connection,
            registry,
            metadata=metadata,
            validate_parameters=config.validate_parameters,
        )

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def registry(self) -> SQLRegistry | None:
        return self._registry

    @property
    def metadata(self) -> MetadataRegistry:
        return self._metadata

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Commands ---

    def command(self, query: str, command_callback: CommandCallback | None = None) -> Command:
        """Create a text command for *query* (inline SQL or registry key)."""
        self._connection.require_open("command")
        sql, label = resolve_sql(query, self._registry)
        command = self._connection.create_command(sql)
        command.label = label
        if command_callback is not None:
            command_callback(command)
        return command

    def stored_procedure(
        self,
        name: str,
        command_callback: CommandCallback | None = None,
    ) -> Command:
        """Create a stored procedure command."""
        if name is None:
            raise ArgumentNullError("name")
        self._connection.require_open("stored_procedure")
        command = self._connection.create_command(name, CommandType.STORED_PROCEDURE)
        if command_callback is not None:
            command_callback(command)
        return command

    def mapper(self, model: type[T]) -> ModelMapper[T]:
        """A ModelMapper for *model* sharing the engine's metadata registry."""
        return ModelMapper(model, self._metadata)

    def _prepare(self, command: Command, validate_parameters: bool | None) -> Command:
        validate = self._validate_parameters if validate_parameters is None else validate_parameters
        if validate:
            command.validate_parameters()
        return command

    def _commit(self) -> None:
        if self._autocommit:
            self._connection.commit()

    # --- Execution ---

    def execute_query(
        self,
        query: str,
        reader_callback: Callable[[DataReader], R],
        command_callback: CommandCallback | None = None,
        *,
        validate_parameters: bool | None = None,
    ) -> R:
        """Execute *query* and pass the reader to *reader_callback*.

        Returns whatever the callback returns. The reader is closed afterwards.
        """
        if reader_callback is None:
            raise ArgumentNullError("reader_callback")
        command = self._prepare(self.command(query, command_callback), validate_parameters)
        with command.execute_reader() as reader:
            return reader_callback(reader)

    def execute_non_query(
        self,
        query: str,
        command_callback: CommandCallback | None = None,
        *,
        validate_parameters: bool | None = None,
    ) -> int:
        """Execute a write query. Returns affected row count."""
        command = self._prepare(self.command(query, command_callback), validate_parameters)
        rowcount = command.execute_non_query()
        self._commit()
        return rowcount

    def execute_scalar(
        self,
        query: str,
        command_callback: CommandCallback | None = None,
        *,
        validate_parameters: bool | None = None,
    ) -> Any:
        """Fetch a single scalar value (first column of first row)."""
        command = self._prepare(self.command(query, command_callback), validate_parameters)
        return command.execute_scalar()

    def fetch_one(
        self,
        query: str,
        model: type[T],
        command_callback: CommandCallback | None = None,
        *,
        validate_parameters: bool | None = None,
    ) -> T | None:
        """Map the first row to *model*.

        Returns None if the query returns no rows. Further rows are ignored.
        """
        if model is None:
            raise ArgumentNullError("model")
        mapper = self.mapper(model)

        def read_first(reader: DataReader) -> T | None:
            if not reader.read():
                return None
            return mapper.map_one(reader)

        return self.execute_query(
            query, read_first, command_callback, validate_parameters=validate_parameters
        )

    def fetch_all(
        self,
        query: str,
        model: type[T],
        command_callback: CommandCallback | None = None,
        *,
        take: int = -1,
        validate_parameters: bool | None = None,
    ) -> list[T]:
        """Map up to *take* rows to *model* (-1 for all rows)."""
        if model is None:
            raise ArgumentNullError("model")
        mapper = self.mapper(model)
        return self.execute_query(
            query,
            lambda reader: mapper.map_many(reader, take),
            command_callback,
            validate_parameters=validate_parameters,
        )

    def execute_for_object(
        self,
        query: str,
        obj: Any,
        *,
        validate_parameters: bool | None = None,
    ) -> int:
        """Execute a write query with parameters bound from *obj*'s attributes."""
        if obj is None:
            raise ArgumentNullError("obj")
        rowcount = self._execute_bound(query, obj, validate_parameters)
        self._commit()
        return rowcount

    def execute_for_objects(
        self,
        query: str,
        objects: Iterable[Any],
        *,
        validate_parameters: bool | None = None,
    ) -> int:
        """Execute a write query once per object. Returns the total row count.

        All statements share one commit when autocommit is on.
        """
        if objects is None:
            raise ArgumentNullError("objects")
        total = 0
        for obj in objects:
            if obj is None:
                raise ArgumentNullError("obj")
            total += self._execute_bound(query, obj, validate_parameters)
        self._commit()
        return total

    def _execute_bound(self, query: str, obj: Any, validate_parameters: bool | None) -> int:
        command = self.command(query)
        bind_parameters_from_object(command, obj, self._metadata)
        self._prepare(command, validate_parameters)
        rowcount = command.execute_non_query()
        logger.debug("%s affected %d row(s)", command.label, rowcount)
        return rowcount
