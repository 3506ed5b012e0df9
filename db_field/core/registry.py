"""SQL Registry - loads and caches SQL files shipped as resources.

Namespace convention:
    sql/albums/get_all.sql        -> "albums.get_all"
    sql/billing/invoice/list.sql  -> "billing.invoice.list"

Queries can be loaded from a filesystem directory or from the resource tree
of an importable package, so SQL can ship inside a wheel next to the code
that runs it.
"""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from db_field.core.exceptions import (
    AmbiguousQueryError,
    ArgumentNullError,
    DuplicateQueryError,
    QueryNotFoundError,
)

_SUFFIX = ".sql"


class SQLRegistry:
    """Loads and caches SQL files from a directory structure.

    The registry is immutable after loading: load once at startup, then
    read-only access for the lifetime of the application.

    Args:
        root_dir: Root directory (or package resource tree) containing SQL files.

    Raises:
        DuplicateQueryError: If two files resolve to the same namespace key.
    """

    def __init__(self, root_dir: Path | str | Traversable) -> None:
        self._root_dir = Path(root_dir) if isinstance(root_dir, str) else root_dir
        self._queries: dict[str, str] = {}
        self._query_paths: dict[str, str] = {}
        if self._root_dir.is_dir():
            self._load(self._root_dir, ())

    @classmethod
    def from_package(cls, package: str, subdirectory: str = "") -> SQLRegistry:
        """Load SQL resources bundled inside an importable package.

        Args:
            package: Dotted package name, e.g. ``"myapp.queries"``.
            subdirectory: Optional directory below the package root.
        """
        root = resources.files(package)
        for part in Path(subdirectory).parts:
            root = root.joinpath(part)
        return cls(root)

    def _load(self, directory: Traversable, prefix: tuple[str, ...]) -> None:
        """Recursively load all .sql files below *directory*."""
        for entry in sorted(directory.iterdir(), key=lambda e: e.name):
            if entry.is_dir():
                self._load(entry, (*prefix, entry.name))
                continue
            if not entry.name.endswith(_SUFFIX):
                continue

            query_name = ".".join((*prefix, entry.name.removesuffix(_SUFFIX)))
            location = "/".join((*prefix, entry.name))

            if query_name in self._queries:
                raise DuplicateQueryError(query_name, self._query_paths[query_name], location)

            self._queries[query_name] = entry.read_text(encoding="utf-8").strip()
            self._query_paths[query_name] = location

    def _resolve(self, query_name: str) -> str | None:
        """Map a query name spelling onto a registered key."""
        if query_name in self._queries:
            return query_name

        name = query_name.replace("\\", "/").strip("/").removesuffix(_SUFFIX).replace("/", ".")
        if name in self._queries:
            return name

        candidates = [key for key in self._queries if key.endswith("." + name)]
        if len(candidates) > 1:
            raise AmbiguousQueryError(query_name, sorted(candidates))
        return candidates[0] if candidates else None

    def get(self, query_name: str) -> str:
        """Look up SQL text by name.

        Args:
            query_name: Dot-separated query name (e.g. "albums.get_all"), a
                path spelling ("albums/get_all.sql") or a unique trailing part
                of a registered name ("get_all").

        Returns:
            The SQL text content of the file.

        Raises:
            ArgumentNullError: If *query_name* is None.
            QueryNotFoundError: If no query matches the given name.
            AmbiguousQueryError: If a short name matches several queries.
        """
        if query_name is None:
            raise ArgumentNullError("query_name")
        key = self._resolve(query_name)
        if key is None:
            raise QueryNotFoundError(query_name)
        return self._queries[key]

    def has(self, query_name: str) -> bool:
        """Check if a query name is registered."""
        try:
            return self._resolve(query_name) is not None
        except AmbiguousQueryError:
            return True

    @property
    def query_names(self) -> list[str]:
        """List all registered query names, sorted alphabetically."""
        return sorted(self._queries.keys())

    def __len__(self) -> int:
        """Number of registered queries."""
        return len(self._queries)
