"""db_field - attribute-driven mapping between DB-API result rows and Python objects."""

from __future__ import annotations

from db_field.core.command import Command, Parameter
from db_field.core.connection import Connection, ConnectionConfig
from db_field.core.engine import Engine
from db_field.core.enums import (
    CommandType,
    ConnectionState,
    DatabaseBackend,
    ErrorKind,
    ParameterDirection,
)
from db_field.core.exceptions import (
    AdapterError,
    AmbiguousQueryError,
    ArgumentNullError,
    ConnectionError,  # noqa: A004
    ConnectionStateError,
    DbFieldError,
    DuplicateQueryError,
    ExecutionError,
    FieldNotFoundError,
    FieldTypeMismatchError,
    InvalidCastError,
    MappingConfigurationError,
    MappingDataError,
    MappingError,
    MappingFieldNotFoundError,
    MetadataResolutionError,
    NonNullableNullAssignmentError,
    NullAssignmentError,
    ParameterBindingError,
    ParameterMismatchError,
    QueryNotFoundError,
    ReaderStateError,
    RegistryError,
)
from db_field.core.reader import DataReader
from db_field.core.registry import SQLRegistry
from db_field.mapping import (
    Cacheable,
    DbField,
    HydrationOverridable,
    MetadataRegistry,
    ModelMapper,
    SerializationOverridable,
    SlidingCache,
    bind_parameters_from_object,
    db_field,
    get_value,
)

__all__ = [
    # Connection
    "ConnectionConfig",
    "Connection",
    "Command",
    "Parameter",
    "DataReader",
    # Engine
    "Engine",
    # Registry
    "SQLRegistry",
    # Mapping
    "DbField",
    "db_field",
    "MetadataRegistry",
    "Cacheable",
    "SlidingCache",
    "ModelMapper",
    "HydrationOverridable",
    "SerializationOverridable",
    "bind_parameters_from_object",
    "get_value",
    # Enums
    "DatabaseBackend",
    "CommandType",
    "ParameterDirection",
    "ConnectionState",
    "ErrorKind",
    # Exceptions
    "DbFieldError",
    "ArgumentNullError",
    "MappingError",
    "MappingConfigurationError",
    "MappingDataError",
    "FieldNotFoundError",
    "MappingFieldNotFoundError",
    "ParameterMismatchError",
    "MetadataResolutionError",
    "NullAssignmentError",
    "NonNullableNullAssignmentError",
    "InvalidCastError",
    "FieldTypeMismatchError",
    "RegistryError",
    "QueryNotFoundError",
    "DuplicateQueryError",
    "AmbiguousQueryError",
    "ExecutionError",
    "ParameterBindingError",
    "ReaderStateError",
    "AdapterError",
    "ConnectionError",
    "ConnectionStateError",
]
