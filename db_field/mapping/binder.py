"""Bind model attribute values as command parameters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from db_field.core.exceptions import ArgumentNullError
from db_field.core.params import strip_marker
from db_field.mapping.metadata import MetadataRegistry

if TYPE_CHECKING:
    from db_field.core.command import Command, Parameter

logger = logging.getLogger(__name__)


def bind_parameters_from_object(
    command: Command,
    model: Any,
    registry: MetadataRegistry | None = None,
) -> list[Parameter]:
    """Add a parameter for every annotated attribute the command text references.

    A mapping is bound when its SQL parameter name (markers stripped,
    case-insensitive) appears as ``:name`` or ``@name`` in ``command.text``.
    Mappings the text does not reference are skipped.

    Args:
        command: Command whose text determines which parameters are needed.
        model: Object supplying the values.
        registry: Metadata registry. Pass the same registry on repeated
            calls; a fresh one is used when omitted, so the model class is
            rescanned every time. ``Engine`` passes its shared registry.

    Returns:
        The parameters added, in mapping order.
    """
    if command is None:
        raise ArgumentNullError("command")
    if model is None:
        raise ArgumentNullError("model")

    registry = registry if registry is not None else MetadataRegistry()
    metadata = registry.resolve(type(model))
    referenced = {name.lower() for name in command.parameter_names_from_text()}

    added: list[Parameter] = []
    for mapping in metadata.mappings:
        parameter_name = strip_marker(mapping.sql_parameter_name)
        if parameter_name.lower() not in referenced:
            continue

        value = mapping.accessor.get(model)
        if metadata.serialization_overridable and model.should_override_serialization(
            mapping.attribute
        ):
            value = model.override_serialization(mapping.attribute, value)

        added.append(command.add_parameter(parameter_name, value))
        logger.debug(
            "%s [%s] <-> database field %s",
            mapping.attribute,
            type(value).__name__,
            mapping.database_field,
        )
    return added
