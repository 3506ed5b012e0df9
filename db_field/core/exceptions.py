"""db_field exception hierarchy.

Every exception carries an ``ErrorKind`` tag. Raw driver exceptions are
never raised directly; they are chained onto a db_field exception.
"""

from __future__ import annotations

from typing import Any

from db_field.core.enums import ErrorKind


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


class DbFieldError(Exception):
    """Base exception for all db_field errors."""

    kind: ErrorKind = ErrorKind.EXECUTION


class ArgumentNullError(DbFieldError):
    """Raised when a required argument is None."""

    kind = ErrorKind.ARGUMENT

    def __init__(self, argument_name: str) -> None:
        self.argument_name = argument_name
        super().__init__(f"Argument '{argument_name}' must not be None")


# --- Mapping ---


class MappingError(DbFieldError):
    """Base for mapping errors."""


class MappingConfigurationError(MappingError):
    """The model, its annotations or the SQL do not fit together."""

    kind = ErrorKind.CONFIGURATION


class MappingDataError(MappingError):
    """A value returned by the database cannot be placed on the model."""

    kind = ErrorKind.DATA


class FieldNotFoundError(MappingConfigurationError):
    """Raised when a field name has no column in the result set."""

    def __init__(self, field_name: str, message: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message or f"Field name '{field_name}' does not exist in query result")


class MappingFieldNotFoundError(FieldNotFoundError):
    """Raised when a DbField annotation names a column missing from the result set."""

    def __init__(self, database_field: str, attribute: str, model: str) -> None:
        self.database_field = database_field
        self.attribute = attribute
        self.model = model
        super().__init__(
            database_field,
            f"The database field '{database_field}' specified by the DbField "
            f"annotation on {model}.{attribute} does not exist in query result",
        )


class ParameterMismatchError(MappingConfigurationError):
    """Raised when SQL text parameters and bound parameters differ."""

    def __init__(self, missing_in_command: list[str], missing_in_sql: list[str]) -> None:
        self.missing_in_command = missing_in_command
        self.missing_in_sql = missing_in_sql
        details = []
        if missing_in_command:
            details.append(
                "missing in command parameters or model DbField annotations: "
                + ", ".join(missing_in_command)
            )
        if missing_in_sql:
            details.append("missing in SQL text: " + ", ".join(missing_in_sql))
        super().__init__("Parameter mismatch, " + "; ".join(details))


class MetadataResolutionError(MappingConfigurationError):
    """Raised when a model's annotations cannot be evaluated."""

    def __init__(self, model: str, detail: str) -> None:
        self.model = model
        super().__init__(f"Cannot resolve field mappings for {model}: {detail}")


class NullAssignmentError(MappingDataError):
    """Raised when a database NULL is read into a non-nullable type."""

    def __init__(self, field_name: str, message: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(
            message or f"Attempting to assign NULL to a non-nullable type for field '{field_name}'"
        )


class NonNullableNullAssignmentError(NullAssignmentError):
    """Raised when hydration would put None on a non-nullable attribute."""

    def __init__(self, database_field: str, attribute: str) -> None:
        self.database_field = database_field
        self.attribute = attribute
        super().__init__(
            database_field,
            f"Attempting to assign NULL in database field '{database_field}' "
            f"to a non-nullable attribute '{attribute}'",
        )


class InvalidCastError(MappingDataError):
    """Raised when a value cannot be converted to the requested type."""

    def __init__(
        self,
        field_name: str,
        source_type: Any,
        target_type: Any,
        message: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.source_type = source_type
        self.target_type = target_type
        super().__init__(
            message
            or f"Invalid cast for field '{field_name}': cannot convert "
            f"'{_type_name(source_type)}' to '{_type_name(target_type)}'"
        )


class FieldTypeMismatchError(InvalidCastError):
    """Raised when a hydrated value does not fit the attribute's declared type."""

    def __init__(
        self,
        database_field: str,
        attribute: str,
        source_type: Any,
        target_type: Any,
        detail: str,
    ) -> None:
        self.database_field = database_field
        self.attribute = attribute
        super().__init__(
            database_field,
            source_type,
            target_type,
            f"Unable to convert database field '{database_field}' to attribute "
            f"'{attribute}'. Detail: {detail}",
        )


# --- Registry ---


class RegistryError(DbFieldError):
    """Base for SQL registry errors."""

    kind = ErrorKind.REGISTRY


class QueryNotFoundError(RegistryError):
    """Raised when a named query cannot be found in the registry."""

    def __init__(self, query_name: str) -> None:
        self.query_name = query_name
        super().__init__(f"Query not found: '{query_name}'")


class DuplicateQueryError(RegistryError):
    """Raised when two SQL files resolve to the same namespace key."""

    def __init__(self, query_name: str, path_a: str, path_b: str) -> None:
        self.query_name = query_name
        super().__init__(f"Duplicate query name '{query_name}': {path_a} and {path_b}")


class AmbiguousQueryError(RegistryError):
    """Raised when a short query name matches more than one registered query."""

    def __init__(self, query_name: str, candidates: list[str]) -> None:
        self.query_name = query_name
        self.candidates = candidates
        super().__init__(f"Query name '{query_name}' is ambiguous: {', '.join(candidates)}")


# --- Execution ---


class ExecutionError(DbFieldError):
    """Base for query execution errors."""

    kind = ErrorKind.EXECUTION


class ParameterBindingError(ExecutionError):
    """Raised when the driver rejects a statement or its parameters."""

    def __init__(self, query_name: str, detail: str) -> None:
        self.query_name = query_name
        super().__init__(f"Parameter binding error for '{query_name}': {detail}")


class ReaderStateError(ExecutionError):
    """Raised when a DataReader is used without a current row or after close."""


# --- Adapter ---


class AdapterError(DbFieldError):
    """Base for adapter errors."""

    kind = ErrorKind.ADAPTER


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class ConnectionStateError(AdapterError):
    """Raised when an operation needs an open connection and it is closed."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Connection must be open to call {operation}")
