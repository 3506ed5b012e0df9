"""Forward-only reader over a DB-API cursor.

Gives the mapping layer ordinal/name access to the current row regardless of
whether the driver returns tuples or dict-like rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from db_field.core.exceptions import FieldNotFoundError, ReaderStateError


class DataReader:
    """Reads rows from a cursor one at a time.

    Call :meth:`read` to advance; values of the current row are then available
    through :meth:`get_value` / :meth:`is_null` or ``reader["Column"]``.
    Column lookup by name is case-insensitive, exact matches win.
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        description = cursor.description or ()
        self._names: list[str] = [desc[0] for desc in description]
        self._ordinals: dict[str, int] = {}
        self._ordinals_lower: dict[str, int] = {}
        for i, name in enumerate(self._names):
            self._ordinals.setdefault(name, i)
            self._ordinals_lower.setdefault(name.lower(), i)
        self._row: tuple[Any, ...] | None = None
        self._closed = False

    @property
    def field_count(self) -> int:
        return len(self._names)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def rowcount(self) -> int:
        return int(getattr(self._cursor, "rowcount", -1))

    def read(self) -> bool:
        """Advance to the next row. Returns False when the rows are exhausted."""
        if self._closed:
            raise ReaderStateError("Cannot read from a closed reader")
        if not self._names:
            self._row = None
            return False
        row = self._cursor.fetchone()
        if row is None:
            self._row = None
            return False
        if isinstance(row, Mapping):
            row = tuple(row[name] for name in self._names)
        self._row = tuple(row)
        return True

    def get_name(self, ordinal: int) -> str:
        return self._names[ordinal]

    def get_ordinal(self, name: str) -> int:
        """Return the column ordinal for *name*.

        Raises:
            FieldNotFoundError: If the result set has no such column.
        """
        ordinal = self._ordinals.get(name)
        if ordinal is None:
            ordinal = self._ordinals_lower.get(name.lower())
        if ordinal is None:
            raise FieldNotFoundError(name)
        return ordinal

    def has_field(self, name: str) -> bool:
        return name in self._ordinals or name.lower() in self._ordinals_lower

    def column_ordinals(self) -> dict[str, int]:
        """Lower-cased column name to ordinal mapping."""
        return dict(self._ordinals_lower)

    def _current(self) -> tuple[Any, ...]:
        if self._row is None:
            raise ReaderStateError("No current row; call read() first")
        return self._row

    def get_value(self, ordinal: int) -> Any:
        return self._current()[ordinal]

    def is_null(self, ordinal: int) -> bool:
        return self._current()[ordinal] is None

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, str):
            key = self.get_ordinal(key)
        return self.get_value(key)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._row = None
            self._cursor.close()

    def __enter__(self) -> DataReader:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
