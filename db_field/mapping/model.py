"""Row-to-model hydration driven by DbField annotations.

Supports dataclasses, Pydantic models, and plain classes. Only annotated
attributes are populated; extra result columns are ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from db_field.core.exceptions import (
    ArgumentNullError,
    FieldNotFoundError,
    FieldTypeMismatchError,
    MappingFieldNotFoundError,
    NonNullableNullAssignmentError,
)
from db_field.mapping.coercion import CONVERSION_ERRORS, TEMPORAL_TYPES, coerce, coerce_temporal
from db_field.mapping.metadata import MetadataRegistry

if TYPE_CHECKING:
    from db_field.core.reader import DataReader
    from db_field.mapping.fields import FieldMapping, TypeMetadata

T = TypeVar("T")

_ASSIGNMENT_ERRORS = (AttributeError, *CONVERSION_ERRORS)


class ModelMapper(Generic[T]):
    """Maps DataReader rows to instances of *target_class*.

    For every annotated attribute, in declaration order:

    1. find the column by database field name (case-insensitive)
    2. database NULL becomes None
    3. date/datetime/time attributes get temporal coercion
    4. the model's hydration override runs, if it asks for this attribute
    5. None on a non-nullable attribute is rejected
    6. the value is coerced to the declared type and assigned

    Args:
        target_class: The class to construct from row data.
        registry: Metadata registry to resolve field mappings from. Pass a
            shared registry when creating mappers repeatedly; a fresh one is
            created when omitted and rescans the class on first use.
            ``Engine`` shares one registry across all of its mappers.
    """

    def __init__(
        self,
        target_class: type[T],
        registry: MetadataRegistry | None = None,
    ) -> None:
        if target_class is None:
            raise ArgumentNullError("target_class")
        self._target_class = target_class
        self._registry = registry if registry is not None else MetadataRegistry()

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def metadata(self) -> TypeMetadata:
        return self._registry.resolve(self._target_class)

    def map_one(self, reader: DataReader) -> T:
        """Map the reader's current row to a new instance."""
        return self._hydrate(reader, self.metadata())

    def map_many(self, reader: DataReader, take: int = -1) -> list[T]:
        """Advance *reader* and map up to *take* rows (-1 maps all of them)."""
        metadata = self.metadata()
        results: list[T] = []
        while (take < 0 or len(results) < take) and reader.read():
            results.append(self._hydrate(reader, metadata))
        return results

    def populate(self, reader: DataReader, instance: T) -> T:
        """Populate an existing instance from the reader's current row.

        Attributes assigned before a failing one keep their new values.
        """
        if instance is None:
            raise ArgumentNullError("instance")
        self._populate(reader, instance, self.metadata())
        return instance

    def _hydrate(self, reader: DataReader, metadata: TypeMetadata) -> T:
        instance = metadata.new_instance()
        self._populate(reader, instance, metadata)
        return instance  # type: ignore[no-any-return]

    def _populate(self, reader: DataReader, instance: Any, metadata: TypeMetadata) -> None:
        for mapping in metadata.mappings:
            value = self._read(reader, mapping, metadata)

            if metadata.hydration_overridable and instance.should_override_hydration(
                mapping.attribute
            ):
                value = instance.override_hydration(mapping.attribute, value)

            if value is None and not mapping.is_nullable:
                raise NonNullableNullAssignmentError(mapping.database_field, mapping.attribute)

            self._assign(instance, mapping, value)

    def _read(self, reader: DataReader, mapping: FieldMapping, metadata: TypeMetadata) -> Any:
        try:
            ordinal = reader.get_ordinal(mapping.database_field)
        except FieldNotFoundError as e:
            raise MappingFieldNotFoundError(
                mapping.database_field, mapping.attribute, metadata.model.__qualname__
            ) from e

        if reader.is_null(ordinal):
            return None

        value = reader.get_value(ordinal)
        target = mapping.accessor.value_type
        if target is not None and issubclass(target, TEMPORAL_TYPES):
            try:
                value = coerce_temporal(value, target)
            except CONVERSION_ERRORS as e:
                raise FieldTypeMismatchError(
                    mapping.database_field, mapping.attribute, type(value), target, str(e)
                ) from e
        return value

    def _assign(self, instance: Any, mapping: FieldMapping, value: Any) -> None:
        target = mapping.accessor.value_type
        try:
            # datetime subclasses date, so only an exact type match skips coercion
            if value is not None and target is not None and type(value) is not target:
                value = coerce(value, target)
            mapping.accessor.set(instance, value)
        except _ASSIGNMENT_ERRORS as e:
            raise FieldTypeMismatchError(
                mapping.database_field, mapping.attribute, type(value), target, str(e)
            ) from e
