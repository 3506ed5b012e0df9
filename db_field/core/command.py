"""Commands: SQL text plus a named parameter collection.

DB-API cursors take parameters per ``execute`` call; Command keeps them on
the statement instead so the binder can attach values before execution and
``validate_parameters`` can compare them with the SQL text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from db_field.core.enums import CommandType, ParameterDirection
from db_field.core.exceptions import (
    ArgumentNullError,
    DbFieldError,
    ParameterBindingError,
    ParameterMismatchError,
)
from db_field.core.params import normalize_params, parameter_names, strip_marker
from db_field.core.reader import DataReader

if TYPE_CHECKING:
    from db_field.core.connection import Connection
    from db_field.core.registry import SQLRegistry

logger = logging.getLogger(__name__)

_SENDS_VALUE = (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT)


@dataclass
class Parameter:
    """A named command parameter."""

    name: str | None = None
    value: Any = None
    direction: ParameterDirection = ParameterDirection.INPUT
    db_type: Any = None  # driver type hint for output parameters

    @property
    def bare_name(self) -> str:
        return strip_marker(self.name or "")


class Command:
    """A statement to execute on a Connection.

    Args:
        connection: Connection the command runs on.
        text: SQL text or stored procedure name.
        command_type: Whether *text* is SQL or a stored procedure name.
    """

    def __init__(
        self,
        connection: Connection,
        text: str = "",
        command_type: CommandType = CommandType.TEXT,
    ) -> None:
        self._connection = connection
        self.text = text
        self.command_type = command_type
        self.parameters: list[Parameter] = []
        self.label: str | None = None

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        if value is None:
            raise ArgumentNullError("text")
        self._text = value

    # --- Parameters ---

    def create_parameter(
        self,
        name: str | None = None,
        value: Any = None,
        direction: ParameterDirection = ParameterDirection.INPUT,
    ) -> Parameter:
        """Create a parameter without adding it to the command."""
        return Parameter(name=name, value=value, direction=direction)

    def add_parameter(
        self,
        name: str,
        value: Any,
        direction: ParameterDirection = ParameterDirection.INPUT,
        callback: Callable[[Parameter], None] | None = None,
    ) -> Parameter:
        """Add a named parameter.

        Args:
            name: Parameter name, with or without a ``:``/``@`` marker.
            value: Value to bind.
            direction: Parameter direction.
            callback: Optional hook to adjust the parameter before it is added.
        """
        if name is None:
            raise ArgumentNullError("name")
        parameter = self.create_parameter(name, value, direction)
        if callback is not None:
            callback(parameter)
        self.parameters.append(parameter)
        return parameter

    def add_output_parameter(
        self,
        name: str,
        db_type: Any = None,
        callback: Callable[[Parameter], None] | None = None,
    ) -> Parameter:
        """Add an output parameter; its value is filled in after execution."""
        if name is None:
            raise ArgumentNullError("name")
        parameter = self.create_parameter(name, None, ParameterDirection.OUTPUT)
        parameter.db_type = db_type
        if callback is not None:
            callback(parameter)
        self.parameters.append(parameter)
        return parameter

    def remove_parameter(self, name: str) -> None:
        """Remove the first parameter whose name matches, ignoring case and markers."""
        if name is None:
            raise ArgumentNullError("name")
        key = strip_marker(name).lower()
        for i, parameter in enumerate(self.parameters):
            if parameter.bare_name.lower() == key:
                del self.parameters[i]
                return

    def parameter_names(self) -> list[str]:
        """Names of the parameters in the collection."""
        return [p.name or "" for p in self.parameters]

    def parameter_names_from_text(self) -> list[str]:
        """Names referenced in the SQL text, markers stripped."""
        return parameter_names(self.text)

    def load_resource(self, name: str, registry: SQLRegistry) -> None:
        """Replace the command text with a query loaded from *registry*."""
        if name is None:
            raise ArgumentNullError("name")
        if registry is None:
            raise ArgumentNullError("registry")
        self.text = registry.get(name)
        self.label = name

    def validate_parameters(self) -> None:
        """Check that SQL text parameters and bound parameters match.

        Meant for development: it rescans the SQL text on every call.
        Stored procedure commands are not checked.

        Raises:
            ParameterMismatchError: Listing names on either side with no partner.
        """
        if self.command_type is not CommandType.TEXT:
            return

        unmatched_sql: dict[str, str] = {}
        for name in self.parameter_names_from_text():
            unmatched_sql.setdefault(name.lower(), name)

        unmatched_bound: list[str] = []
        for parameter in self.parameters:
            key = parameter.bare_name.lower()
            if key in unmatched_sql:
                del unmatched_sql[key]
            else:
                unmatched_bound.append(parameter.bare_name)

        if unmatched_sql or unmatched_bound:
            raise ParameterMismatchError(
                sorted(unmatched_sql.values(), key=str.lower),
                sorted(unmatched_bound, key=str.lower),
            )

    def _arguments(self) -> dict[str, Any]:
        """Bound values keyed by the spelling used in the SQL text."""
        values: dict[str, Any] = {}
        for parameter in self.parameters:
            if parameter.direction in _SENDS_VALUE:
                values.setdefault(parameter.bare_name.lower(), parameter.value)

        arguments: dict[str, Any] = {}
        for name in self.parameter_names_from_text():
            key = name.lower()
            if key in values:
                arguments[name] = values[key]
        return arguments

    # --- Execution ---

    def _label(self) -> str:
        if self.label is not None:
            return self.label
        if self.command_type is CommandType.STORED_PROCEDURE:
            return self.text
        return "<inline>"

    def _execute(self, operation: str) -> Any:
        raw = self._connection.require_open(operation)
        adapter = self._connection.adapter
        logger.debug("Executing %s (%s)", self._label(), self.command_type.value)

        try:
            if self.command_type is CommandType.STORED_PROCEDURE:
                return adapter.call_procedure(raw, self.text, self.parameters)
            sql = normalize_params(self.text, adapter.paramstyle)
            return adapter.execute(raw, sql, self._arguments())
        except DbFieldError:
            raise
        except Exception as e:
            raise ParameterBindingError(self._label(), str(e)) from e

    def execute_reader(self) -> DataReader:
        """Execute and return a reader over the result rows."""
        return DataReader(self._execute("execute_reader"))

    def execute_non_query(self) -> int:
        """Execute and return the affected row count."""
        cursor = self._execute("execute_non_query")
        try:
            return int(cursor.rowcount)
        finally:
            cursor.close()

    def execute_scalar(self) -> Any:
        """Execute and return the first column of the first row, or None."""
        cursor = self._execute("execute_scalar")
        try:
            if cursor.description is None:
                return None
            row = cursor.fetchone()
            if row is None:
                return None

            # Handle dict rows (e.g., psycopg dict_row)
            if isinstance(row, Mapping):
                return next(iter(row.values()))

            return row[0]
        finally:
            cursor.close()
