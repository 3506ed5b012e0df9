"""Mapping layer - DbField annotations, metadata and row hydration."""

from __future__ import annotations

from db_field.mapping.binder import bind_parameters_from_object
from db_field.mapping.cache import Cacheable, SlidingCache
from db_field.mapping.coercion import coerce, coerce_temporal, get_value
from db_field.mapping.fields import DbField, FieldMapping, PropertyAccessor, TypeMetadata, db_field
from db_field.mapping.metadata import MetadataRegistry, build_metadata
from db_field.mapping.model import ModelMapper
from db_field.mapping.protocol import HydrationOverridable, Mapper, SerializationOverridable

__all__ = [
    "DbField",
    "db_field",
    "FieldMapping",
    "PropertyAccessor",
    "TypeMetadata",
    "Cacheable",
    "SlidingCache",
    "MetadataRegistry",
    "build_metadata",
    "ModelMapper",
    "Mapper",
    "HydrationOverridable",
    "SerializationOverridable",
    "bind_parameters_from_object",
    "get_value",
    "coerce",
    "coerce_temporal",
]
