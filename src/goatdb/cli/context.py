"""CLI context management for database connections and shared state."""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field
from typing import Any

from goatdb import GoatDatabase
from goatdb.core.types import StorageMode
from goatdb.types.graph_type import GraphType

DEFAULT_DATABASE_URL = "sqlite:///./goatdb.db"


def get_database_url(url: str | None) -> str:
    """Resolve database URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. GOATDB_URL environment variable
    3. Default: sqlite:///./goatdb.db
    """
    if url:
        return url
    if env_url := os.getenv("GOATDB_URL"):
        return env_url
    return DEFAULT_DATABASE_URL


def load_types(target: str) -> list[type[GraphType]]:
    """Import the entity types named by ``module:attribute``.

    The attribute may be a single GraphType subclass or a list/tuple of them.

    Raises:
        ValueError: If the target is malformed or does not name entity types
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got '{target}'")

    module = importlib.import_module(module_name)
    try:
        value: Any = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from None

    types = list(value) if isinstance(value, list | tuple) else [value]
    for type_cls in types:
        if not (isinstance(type_cls, type) and issubclass(type_cls, GraphType)):
            raise ValueError(f"'{target}' contains {type_cls!r}, which is not a GraphType")
    return types


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Holds connection settings and output preferences; commands open a
    database for the types they load.
    """

    database_url: str
    echo: bool
    json_output: bool
    storage_mode: StorageMode = StorageMode.SINGLE_TABLE
    _db: GoatDatabase | None = field(default=None, init=False, repr=False)

    def get_db(self, types: list[type[GraphType]]) -> GoatDatabase:
        """Create the database for a set of types (not yet initialised)."""
        if self._db is None:
            self._db = GoatDatabase(
                url=self.database_url,
                types=types,
                storage_mode=self.storage_mode,
                echo=self.echo,
            )
        return self._db

    async def close(self) -> None:
        """Close database connection if open."""
        if self._db is not None:
            await self._db.close()
            self._db = None
