"""Database adapter protocol.

Every adapter module MUST implement this protocol so Connection and Command
can drive any backend through the same calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from db_field.core.enums import ParameterDirection

if TYPE_CHECKING:
    from db_field.core.command import Parameter
    from db_field.core.connection import ConnectionConfig

_RETURNS_VALUE = (ParameterDirection.OUTPUT, ParameterDirection.INPUT_OUTPUT)


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a DB-API connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...

    def call_procedure(
        self,
        connection: Any,
        name: str,
        parameters: list[Parameter],
    ) -> Any:
        """Call a stored procedure and return a cursor-like object.

        Output and input/output parameter values are written back onto
        *parameters*.
        """
        ...


def positional(parameters: Iterable[Parameter]) -> list[Parameter]:
    """Parameters passed to a procedure call, in order (return values excluded)."""
    return [p for p in parameters if p.direction is not ParameterDirection.RETURN_VALUE]


def write_back(parameters: Sequence[Parameter], values: Sequence[Any] | None) -> None:
    """Copy driver-returned values onto output parameters."""
    if values is None:
        return
    for parameter, value in zip(parameters, values):
        if parameter.direction in _RETURNS_VALUE:
            parameter.value = value
