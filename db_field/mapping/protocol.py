"""Mapper and override protocols.

Models may implement ``HydrationOverridable`` and/or
``SerializationOverridable`` to customize how individual attributes are read
from or written to the database. Both are checked once per class when its
metadata is resolved; the per-attribute decision is made on the instance at
runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from db_field.core.reader import DataReader

T = TypeVar("T")


@runtime_checkable
class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, reader: DataReader) -> T:
        """Map the reader's current row to a target object."""
        ...

    def map_many(self, reader: DataReader, take: int = -1) -> list[T]:
        """Advance the reader and map up to *take* rows (-1 for all)."""
        ...


@runtime_checkable
class HydrationOverridable(Protocol):
    """Customize attribute hydration."""

    def should_override_hydration(self, field_name: str) -> bool:
        """Return True to replace the value read for *field_name*."""
        ...

    def override_hydration(self, field_name: str, value: Any) -> Any:
        """Return the value to assign instead of *value*."""
        ...


@runtime_checkable
class SerializationOverridable(Protocol):
    """Customize attribute serialization into query parameters."""

    def should_override_serialization(self, field_name: str) -> bool:
        """Return True to replace the value bound for *field_name*."""
        ...

    def override_serialization(self, field_name: str, value: Any) -> Any:
        """Return the value to bind instead of *value*."""
        ...
