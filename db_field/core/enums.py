"""Enumerations shared by the command, connection and error layers."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class CommandType(Enum):
    """How a command's text is interpreted."""

    TEXT = "text"
    STORED_PROCEDURE = "stored_procedure"


class ParameterDirection(Enum):
    """Direction of a bound command parameter."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"


class ConnectionState(Enum):
    """Open/closed state of a Connection."""

    CLOSED = "closed"
    OPEN = "open"


class ErrorKind(Enum):
    """Category tag carried by every DbFieldError.

    Lets callers tell a model/SQL mismatch (CONFIGURATION) apart from bad
    data coming back from the database (DATA) without matching on messages.
    """

    ARGUMENT = "argument"
    CONFIGURATION = "configuration"
    DATA = "data"
    EXECUTION = "execution"
    REGISTRY = "registry"
    ADAPTER = "adapter"
