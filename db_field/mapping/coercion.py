"""Value coercion between database values and declared Python types.

``get_value`` reads one typed column from a DataReader without any model
metadata. ``coerce`` / ``coerce_temporal`` are the conversions shared with
row hydration.

Timezone policy: values are never shifted to local time. Naive datetimes are
returned naive; timezone-aware datetimes are converted to UTC. Models that
need another policy use a hydration override.
"""

from __future__ import annotations

import enum
import types
import uuid
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin

import dateutil.parser

from db_field.core.exceptions import ArgumentNullError, InvalidCastError, NullAssignmentError

if TYPE_CHECKING:
    from db_field.core.reader import DataReader

# Types that cannot hold None unless wrapped in Optional
VALUE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    Decimal,
    date,
    time,
    timedelta,
    uuid.UUID,
    enum.Enum,
)

TEMPORAL_TYPES: tuple[type, ...] = (datetime, date, time)

# What a failed conversion raises
CONVERSION_ERRORS: tuple[type[BaseException], ...] = (TypeError, ValueError, ArithmeticError)

_NONE_TYPE = type(None)
_TRUE = frozenset({"true", "t", "yes", "y", "1"})
_FALSE = frozenset({"false", "f", "no", "n", "0"})
_ISO_PARSER = dateutil.parser.isoparser()


# ---------------------------------------------------------------------------
# Type inspection
# ---------------------------------------------------------------------------


def strip_annotated(tp: Any) -> Any:
    """Return the type wrapped by ``Annotated[...]``."""
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Split ``Optional[X]`` into ``(X, True)``; other types give ``(tp, False)``."""
    tp = strip_annotated(tp)
    if get_origin(tp) in (Union, types.UnionType):
        args = get_args(tp)
        members = [a for a in args if a is not _NONE_TYPE]
        optional = len(members) != len(args)
        if len(members) == 1:
            return strip_annotated(members[0]), optional
        return tp, optional
    return tp, False


def value_type(tp: Any) -> type | None:
    """The concrete class values are coerced to, or None when there is none."""
    inner, _ = unwrap_optional(tp)
    if inner is Any or get_origin(inner) is not None:
        return None
    if isinstance(inner, type):
        return inner
    return None


def is_nullable_type(tp: Any) -> bool:
    """True if *tp* may legally hold None.

    Optional types and anything that is not a value type (str, bytes,
    containers, model classes, Any) are nullable.
    """
    inner, optional = unwrap_optional(tp)
    if optional:
        return True
    cls = value_type(inner)
    if cls is None:
        return True
    return not issubclass(cls, VALUE_TYPES)


# ---------------------------------------------------------------------------
# Temporal coercion
# ---------------------------------------------------------------------------


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is not None and value.utcoffset() is not None:
        return value.astimezone(timezone.utc)
    return value


def _parse_temporal(text: str, target: type) -> datetime | time:
    text = text.strip()
    if issubclass(target, time):
        try:
            return _ISO_PARSER.parse_isotime(text)
        except ValueError:
            pass
    try:
        return dateutil.parser.isoparse(text)
    except ValueError:
        return dateutil.parser.parse(text)


def coerce_temporal(value: Any, target: type) -> Any:
    """Coerce a driver value to ``datetime``, ``date`` or ``time``.

    Drivers hand back temporal columns as ISO strings (SQLite), epoch numbers
    or native objects; all of them end up as *target*.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8")
    if isinstance(value, str):
        value = _parse_temporal(value, target)
    elif isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        value = datetime.fromtimestamp(float(value), tz=timezone.utc)

    if issubclass(target, datetime):
        if isinstance(value, datetime):
            return _to_utc(value)
        if isinstance(value, date):
            return datetime.combine(value, time())
    elif issubclass(target, date):
        if isinstance(value, datetime):
            return _to_utc(value).date()
        if isinstance(value, date):
            return value
    elif issubclass(target, time):
        if isinstance(value, datetime):
            return _to_utc(value).timetz()
        if isinstance(value, time):
            return value

    raise TypeError(f"Cannot convert {type(value).__name__} to {target.__name__}")


# ---------------------------------------------------------------------------
# General coercion
# ---------------------------------------------------------------------------


def _to_bool(value: Any, cls: type) -> Any:
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TRUE:
            return True
        if key in _FALSE:
            return False
        raise ValueError(f"'{value}' is not a boolean value")
    if isinstance(value, (int, float, Decimal)):
        return bool(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to bool")


def _to_int(value: Any, cls: type) -> Any:
    if isinstance(value, (float, Decimal)):
        if value != int(value):
            raise ValueError(f"{value!r} cannot be converted to {cls.__name__} without loss")
        return cls(int(value))
    if isinstance(value, (int, str)):
        return cls(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to {cls.__name__}")


def _to_number(value: Any, cls: type) -> Any:
    if isinstance(value, (int, float, Decimal, str)):
        return cls(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to {cls.__name__}")


def _to_decimal(value: Any, cls: type) -> Any:
    if isinstance(value, float):
        return cls(str(value))
    return _to_number(value, cls)


def _to_str(value: Any, cls: type) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return cls(bytes(value), "utf-8")
    return cls(value)


def _to_bytes(value: Any, cls: type) -> Any:
    if isinstance(value, str):
        return cls(value.encode("utf-8"))
    if isinstance(value, (bytearray, memoryview)):
        return cls(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to {cls.__name__}")


def _to_uuid(value: Any, cls: type) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return cls(bytes=bytes(value))
    if isinstance(value, str):
        return cls(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to UUID")


def _to_timedelta(value: Any, cls: type) -> Any:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return cls(seconds=float(value))
    raise TypeError(f"Cannot convert {type(value).__name__} to timedelta")


def _to_enum(value: Any, cls: type[enum.Enum]) -> Any:
    try:
        return cls(value)
    except ValueError:
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        raise


_CONVERTERS: dict[type, Callable[[Any, type], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: _to_number,
    complex: _to_number,
    Decimal: _to_decimal,
    str: _to_str,
    bytes: _to_bytes,
    uuid.UUID: _to_uuid,
    timedelta: _to_timedelta,
}


def coerce(value: Any, target: Any) -> Any:
    """Convert *value* to the declared *target* type.

    None passes through. Values that already are instances of the target are
    returned unchanged (temporal values still get the UTC normalization).

    Raises:
        TypeError, ValueError, ArithmeticError: When no conversion applies.
    """
    if value is None:
        return None
    cls = value_type(target)
    if cls is None or cls is object:
        return value
    if issubclass(cls, TEMPORAL_TYPES):
        return coerce_temporal(value, cls)
    if isinstance(value, cls):
        return value
    if issubclass(cls, enum.Enum):
        return _to_enum(value, cls)
    for base in cls.__mro__:
        converter = _CONVERTERS.get(base)
        if converter is not None:
            return converter(value, cls)
    raise TypeError(f"No conversion from {type(value).__name__} to {cls.__name__}")


def get_value(reader: DataReader, field_name: str, target_type: Any = object) -> Any:
    """Read one column of the current row as *target_type*.

    Args:
        reader: Reader positioned on a row.
        field_name: Column name (case-insensitive).
        target_type: Requested type; ``Optional[X]`` allows NULL.

    Raises:
        ArgumentNullError: If *field_name* is None.
        FieldNotFoundError: If the result set has no such column.
        NullAssignmentError: If the column is NULL and *target_type* is a
            non-optional value type.
        InvalidCastError: If the value cannot be converted.
    """
    if field_name is None:
        raise ArgumentNullError("field_name")

    ordinal = reader.get_ordinal(field_name)

    if reader.is_null(ordinal):
        if not is_nullable_type(target_type):
            raise NullAssignmentError(field_name)
        return None

    value = reader.get_value(ordinal)
    inner, _ = unwrap_optional(target_type)
    try:
        return coerce(value, inner)
    except CONVERSION_ERRORS as e:
        raise InvalidCastError(field_name, type(value), inner) from e
