"""SQL parameter scanning and normalization.

Commands are written with ``:name`` or ``@name`` markers. This module finds
the names referenced by a statement and rewrites the markers into the
driver's paramstyle. String literals, comments and PostgreSQL ``::typecast`` syntax
are left alone.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import lru_cache
from typing import TYPE_CHECKING

from db_field.core.exceptions import ArgumentNullError, QueryNotFoundError

if TYPE_CHECKING:
    from db_field.core.registry import SQLRegistry

PARAMETER_MARKERS = ":@"

# Matches :name or @name but not ::typecast, @@variable or mid-word markers
_PARAM_PATTERN = re.compile(r"(?<![:@\w])[:@]([a-zA-Z_]\w*)")

# Matches text never scanned for parameters: single-quoted literals ('' is an
# escaped quote), -- line comments and /* block comments */
_SKIPPED_PATTERN = re.compile(r"'(?:[^']|'')*'|--[^\n]*|/\*.*?\*/", re.DOTALL)


def _segments(sql: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_skipped, text)`` pieces of *sql*."""
    last_end = 0
    for match in _SKIPPED_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            yield False, sql[last_end:start]
        yield True, match.group()
        last_end = end
    if last_end < len(sql):
        yield False, sql[last_end:]


def strip_marker(name: str) -> str:
    """Remove leading ``:``/``@`` markers from a parameter name."""
    return name.lstrip(PARAMETER_MARKERS)


@lru_cache(maxsize=256)
def _scan(sql: str) -> tuple[str, ...]:
    names: list[str] = []
    for is_skipped, text in _segments(sql):
        if not is_skipped:
            names.extend(_PARAM_PATTERN.findall(text))
    return tuple(names)


def parameter_names(sql: str) -> list[str]:
    """Return the parameter names referenced in *sql*, markers stripped.

    Names are returned in order of appearance; a name used twice appears twice.
    """
    return list(_scan(sql))


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert ``:name``/``@name`` parameters to the target param style.

    Args:
        sql: SQL string with ``:name`` or ``@name`` parameters.
        paramstyle: Target style - 'named' (``:name``) or 'pyformat' (``%(name)s``).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return _convert(sql, r":\1")
    return _convert(sql, r"%(\1)s")


@lru_cache(maxsize=256)
def _convert(sql: str, replacement: str) -> str:
    """Rewrite parameter markers outside string literals."""
    return "".join(
        text if is_skipped else _PARAM_PATTERN.sub(replacement, text)
        for is_skipped, text in _segments(sql)
    )


def is_raw_sql(query: str) -> bool:
    """Return True if query is an inline SQL string rather than a registry key.

    Registry keys use dot-notation (e.g. ``albums.get_all``) and never
    contain whitespace.  Any SQL statement will contain at least one space.
    """
    return any(c.isspace() for c in query)


def resolve_sql(query: str, registry: SQLRegistry | None = None) -> tuple[str, str]:
    """Return ``(sql_text, label)`` for *query*.

    If *query* is an inline SQL string (contains whitespace) it is returned
    unchanged.  Otherwise it is looked up in *registry* by name.  *label* is
    used in error messages and logs.

    Raises:
        ArgumentNullError: If *query* is None.
        QueryNotFoundError: If *query* is a registry key and no registry is
            available or it has no such query.
    """
    if query is None:
        raise ArgumentNullError("query")
    if is_raw_sql(query):
        return query, "<inline>"
    if registry is None:
        raise QueryNotFoundError(query)
    return registry.get(query), query
