"""Field metadata registry.

Scans a model class once for ``DbField`` annotations and caches the result
per class. Scanning walks base classes first and keeps declaration order.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
from collections.abc import Callable
from typing import Annotated, Any, ClassVar, get_origin

from db_field.core.exceptions import ArgumentNullError, MetadataResolutionError
from db_field.mapping.cache import Cacheable, SlidingCache
from db_field.mapping.coercion import is_nullable_type, strip_annotated, value_type
from db_field.mapping.fields import (
    METADATA_KEY,
    DbField,
    FieldMapping,
    PropertyAccessor,
    TypeMetadata,
    is_frozen_dataclass,
    type_key,
)
from db_field.mapping.protocol import HydrationOverridable, SerializationOverridable

logger = logging.getLogger(__name__)

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    from pydantic import BaseModel

    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _class_hints(model: type) -> dict[str, Any]:
    """Evaluated annotations of *model* and its bases, bases first."""
    hints: dict[str, Any] = {}
    for klass in reversed(model.__mro__):
        if klass is object or klass.__module__.startswith("pydantic"):
            continue
        try:
            annotations = inspect.get_annotations(klass, eval_str=True)
        except (NameError, TypeError, SyntaxError, AttributeError) as e:
            raise MetadataResolutionError(model.__qualname__, str(e)) from e
        hints.update(annotations)
    return hints


def _annotation_db_field(annotation: Any) -> DbField | None:
    if get_origin(annotation) is Annotated:
        for meta in annotation.__metadata__:
            if isinstance(meta, DbField):
                return meta
    return None


def _dataclass_db_fields(model: type) -> dict[str, DbField]:
    if not dataclasses.is_dataclass(model):
        return {}
    found: dict[str, DbField] = {}
    for f in dataclasses.fields(model):
        meta = f.metadata.get(METADATA_KEY)
        if isinstance(meta, DbField):
            found[f.name] = meta
    return found


def _bare_instance(model: type) -> Any:
    """Instance created without calling ``__init__``; dataclass defaults applied."""
    instance = model.__new__(model)
    if dataclasses.is_dataclass(model):
        for f in dataclasses.fields(model):
            if f.default is not dataclasses.MISSING:
                object.__setattr__(instance, f.name, f.default)
            elif f.default_factory is not dataclasses.MISSING:
                object.__setattr__(instance, f.name, f.default_factory())
    return instance


def _instance_factory(model: type) -> Callable[[], Any]:
    if _is_pydantic_model(model):
        return model.model_construct  # type: ignore[attr-defined, no-any-return]
    try:
        signature = inspect.signature(model)
    except (TypeError, ValueError):
        return model
    required = [
        p
        for p in signature.parameters.values()
        if p.kind in _REQUIRED_KINDS and p.default is inspect.Parameter.empty
    ]
    if not required:
        return model
    return functools.partial(_bare_instance, model)


def build_metadata(model: type) -> TypeMetadata:
    """Scan *model* for DbField annotations.

    Attributes without a DbField annotation are ignored. A class without any
    yields an empty mapping list.

    Raises:
        MetadataResolutionError: If annotations cannot be evaluated.
    """
    hints = _class_hints(model)
    dataclass_fields = _dataclass_db_fields(model)
    frozen = is_frozen_dataclass(model)

    mappings: list[FieldMapping] = []
    for attribute, annotation in hints.items():
        if get_origin(strip_annotated(annotation)) is ClassVar:
            continue
        annotated = _annotation_db_field(annotation)
        meta = annotated if annotated is not None else dataclass_fields.get(attribute)
        if meta is None:
            continue
        database_field = meta.name or attribute
        accessor = PropertyAccessor(
            name=attribute,
            annotation=annotation,
            value_type=value_type(annotation),
            frozen=frozen,
        )
        mappings.append(
            FieldMapping(
                database_field=database_field,
                accessor=accessor,
                is_nullable=is_nullable_type(annotation),
                sql_parameter_name=meta.parameter or database_field,
            )
        )

    return TypeMetadata(
        model=model,
        key=type_key(model),
        mappings=tuple(mappings),
        hydration_overridable=issubclass(model, HydrationOverridable),
        serialization_overridable=issubclass(model, SerializationOverridable),
        factory=_instance_factory(model),
    )


class MetadataRegistry:
    """Resolves and caches TypeMetadata per model class.

    Args:
        cache: Store for resolved metadata. Defaults to a new SlidingCache
            owned by this registry.
    """

    def __init__(self, cache: Cacheable[TypeMetadata] | None = None) -> None:
        self._cache: Cacheable[TypeMetadata] = cache if cache is not None else SlidingCache()

    @property
    def cache(self) -> Cacheable[TypeMetadata]:
        return self._cache

    def resolve(self, model: type) -> TypeMetadata:
        """Return the field mappings of *model*, scanning it on a cache miss."""
        if model is None:
            raise ArgumentNullError("model")

        key = type_key(model)
        cached = self._cache.get(key)
        if cached is not None and cached.model is model:
            return cached

        metadata = build_metadata(model)
        logger.debug("Scanned %s: %d mapped field(s)", key, len(metadata))
        self._cache.set(key, metadata)
        return metadata
