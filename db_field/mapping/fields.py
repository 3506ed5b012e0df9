"""Field mapping annotations and the metadata derived from them.

Attributes are mapped to database fields with ``Annotated``::

    @dataclass
    class Album:
        album_id: Annotated[int, DbField("AlbumId")]
        title: Annotated[str, DbField("Title")]

or, on dataclasses, with the ``db_field()`` field helper::

    @dataclass
    class Album:
        album_id: int = db_field("AlbumId", default=0)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# Key used in dataclasses.field(metadata=...)
METADATA_KEY = "db_field"


@dataclass(frozen=True)
class DbField:
    """Maps an attribute to a database field.

    Args:
        name: Database field name. Defaults to the attribute name.
        parameter: SQL parameter name used when binding. Defaults to the
            database field name.
    """

    name: str | None = None
    parameter: str | None = None


def db_field(
    name: str | None = None,
    parameter: str | None = None,
    **kwargs: Any,
) -> Any:
    """``dataclasses.field`` carrying a DbField annotation.

    Remaining keyword arguments (``default``, ``default_factory``, ``repr``...)
    are passed to ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = DbField(name, parameter)
    return field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class PropertyAccessor:
    """Get/set access to one attribute of a model class."""

    name: str
    annotation: Any
    value_type: type | None
    frozen: bool = False

    def get(self, instance: Any) -> Any:
        return getattr(instance, self.name)

    def set(self, instance: Any, value: Any) -> None:
        if self.frozen:
            object.__setattr__(instance, self.name, value)
        else:
            setattr(instance, self.name, value)


@dataclass(frozen=True)
class FieldMapping:
    """One annotated attribute: database field, accessor and nullability."""

    database_field: str
    accessor: PropertyAccessor
    is_nullable: bool
    sql_parameter_name: str

    @property
    def attribute(self) -> str:
        return self.accessor.name


@dataclass(frozen=True)
class TypeMetadata:
    """Ordered field mappings for one model class.

    Created once per class and never mutated. ``hydration_overridable`` and
    ``serialization_overridable`` record whether the class implements the
    override hooks so hydration does not re-check per field.
    """

    model: type
    key: str
    mappings: tuple[FieldMapping, ...]
    hydration_overridable: bool = False
    serialization_overridable: bool = False
    factory: Callable[[], Any] | None = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.mappings)

    def new_instance(self) -> Any:
        """Create an empty instance of the model."""
        if self.factory is None:
            return self.model()
        return self.factory()


def type_key(model: type) -> str:
    """Stable cache key for a class."""
    return f"{model.__module__}.{model.__qualname__}"


def is_frozen_dataclass(model: type) -> bool:
    params = getattr(model, "__dataclass_params__", None)
    return dataclasses.is_dataclass(model) and bool(params and params.frozen)
