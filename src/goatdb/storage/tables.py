"""Table definitions for goatdb.

Entity rows live in the shared ``objects`` table (single-table mode) or in
one table per type name (multi-table mode). Edges live in ``associations``
and every indexed field gets its own ``index__<type>__<field>`` table.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Column, DateTime, Index, Integer, MetaData, String, Table, Text

from goatdb.core.types import StorageMode

OBJECTS_TABLE = "objects"
ASSOCIATIONS_TABLE = "associations"
RESERVED_TABLE_NAMES = frozenset({OBJECTS_TABLE, ASSOCIATIONS_TABLE})


def to_snake_case(name: str) -> str:
    """Convert PascalCase/camelCase to snake_case.

    Args:
        name: The name (e.g., "TodoItem")

    Returns:
        snake_case name (e.g., "todo_item")
    """
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    safe_name = "".join(result).replace(" ", "_").replace("-", "_")
    while "__" in safe_name:
        safe_name = safe_name.replace("__", "_")
    return safe_name


def index_table_name(type_name: str, field_name: str) -> str:
    """Name of the index table for one field of a type."""
    return f"index__{to_snake_case(type_name)}__{field_name}"


def edge_key(type_name: str, edge_name: str) -> str:
    """Relationship tag stored in ``associations.assoc_type_name``."""
    return f"{to_snake_case(type_name)}__{edge_name}"


def _object_columns() -> list[Column[Any]]:
    return [
        Column("id", String(64), primary_key=True),
        Column("type_name", String(255), nullable=False, index=True),
        Column("visibility", Integer, nullable=False, default=1),
        Column("creator_id", String(255), nullable=True),
        Column("data", Text, nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("updated_at", DateTime(timezone=True), nullable=False),
    ]


class TableManager:
    """Builds the SQLAlchemy Table objects for a database's storage mode.

    Tables are only declared here; GraphStorage creates the missing ones.
    """

    def __init__(self, storage_mode: StorageMode) -> None:
        self._storage_mode = storage_mode
        self._metadata = MetaData()
        self._type_tables: dict[str, Table] = {}
        self._index_tables: dict[tuple[str, str], Table] = {}

        self.associations = Table(
            ASSOCIATIONS_TABLE,
            self._metadata,
            Column("id1", String(64), nullable=False),
            Column("id2", String(64), nullable=False),
            Column("assoc_type_name", String(255), nullable=False),
            Column("id2_type", String(255), nullable=False),
            Column("creator_id", String(255), nullable=True),
            Column("created_at", DateTime(timezone=True), nullable=False),
            Column("updated_at", DateTime(timezone=True), nullable=False),
            Index("ix_associations_id1_type", "id1", "assoc_type_name"),
            Index("ix_associations_id2_type", "id2", "assoc_type_name"),
        )
        self.objects: Table | None = None
        if storage_mode == StorageMode.SINGLE_TABLE:
            self.objects = Table(OBJECTS_TABLE, self._metadata, *_object_columns())

    @property
    def storage_mode(self) -> StorageMode:
        return self._storage_mode

    @property
    def tables(self) -> list[Table]:
        """All declared tables, in creation order."""
        return list(self._metadata.sorted_tables)

    def define_type(self, type_name: str, indexed_fields: list[str]) -> None:
        """Declare the tables a type needs.

        Args:
            type_name: The type's TYPE_NAME
            indexed_fields: Fields that get an index table

        Raises:
            ValueError: If the type name collides with a shared table
        """
        if self._storage_mode == StorageMode.MULTI_TABLE and type_name not in self._type_tables:
            if type_name in RESERVED_TABLE_NAMES:
                raise ValueError(
                    f"Type name '{type_name}' collides with a reserved table name "
                    "in multi_table mode"
                )
            self._type_tables[type_name] = Table(type_name, self._metadata, *_object_columns())

        for field_name in indexed_fields:
            key = (type_name, field_name)
            if key in self._index_tables:
                continue
            name = index_table_name(type_name, field_name)
            self._index_tables[key] = Table(
                name,
                self._metadata,
                Column("key", Text, nullable=True),
                Column("id", String(64), nullable=False),
                Index(f"ix_{name}_key", "key"),
                Index(f"ix_{name}_id", "id"),
            )

    def object_table(self, type_name: str) -> Table:
        """Table that holds rows of the given type."""
        if self.objects is not None:
            return self.objects
        try:
            return self._type_tables[type_name]
        except KeyError:
            raise KeyError(f"No table declared for type '{type_name}'") from None

    def object_table_name(self, type_name: str) -> str:
        if self._storage_mode == StorageMode.SINGLE_TABLE:
            return OBJECTS_TABLE
        return type_name

    def index_table(self, type_name: str, field_name: str) -> Table:
        """Index table for one field of a type."""
        try:
            return self._index_tables[(type_name, field_name)]
        except KeyError:
            raise KeyError(f"No index declared for '{type_name}.{field_name}'") from None
