"""Relational storage backend for goatdb.

Wraps a SQLAlchemy AsyncEngine with the handful of statements the entity
layer needs: create missing tables, insert/update/delete object rows,
association rows and index rows, and run select statements built by queries.
Backend errors propagate unmodified.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any

from sqlalchemy import Select, delete, inspect, insert, or_, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncConnection

from goatdb.core.connection import DatabaseConnection
from goatdb.core.types import to_index_key
from goatdb.storage.tables import TableManager

logger = logging.getLogger(__name__)


class GraphStorage:
    """Executes storage calls for every type registered on one database."""

    def __init__(self, connection: DatabaseConnection, tables: TableManager) -> None:
        """Initialize storage.

        Args:
            connection: Database connection owning the engine
            tables: Declared tables for the database's storage mode
        """
        self._connection = connection
        self._tables = tables
        # In-memory SQLite runs on one shared connection
        self._lock: asyncio.Lock | contextlib.nullcontext[None] = (
            asyncio.Lock() if connection.shares_single_connection else contextlib.nullcontext()
        )

    @property
    def tables(self) -> TableManager:
        return self._tables

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """Open a connection with a transaction committed on exit."""
        async with self._lock:
            async with self._connection.engine.begin() as conn:
                yield conn

    async def ensure_tables(self) -> list[str]:
        """Create every declared table that does not exist yet.

        Returns:
            Names of the tables that were created
        """
        created: list[str] = []
        async with self.transaction() as conn:
            for table in self._tables.tables:
                exists = await conn.run_sync(
                    lambda sync_conn, name=table.name: inspect(sync_conn).has_table(name)
                )
                if exists:
                    logger.debug(f"Table already exists: {table.name}")
                    continue
                await conn.run_sync(table.create)
                created.append(table.name)
                logger.info(f"Created table: {table.name}")
        return created

    async def has_table(self, table_name: str) -> bool:
        async with self.transaction() as conn:
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table(table_name))

    # === Objects ===

    async def insert_object(self, type_name: str, values: dict[str, Any]) -> None:
        table = self._tables.object_table(type_name)
        async with self.transaction() as conn:
            await conn.execute(insert(table).values(type_name=type_name, **values))
        logger.debug(f"Inserted {type_name} {values['id']}")

    async def update_object(self, type_name: str, object_id: str, values: dict[str, Any]) -> None:
        table = self._tables.object_table(type_name)
        stmt = (
            update(table)
            .where(table.c.id == object_id)
            .where(table.c.type_name == type_name)
            .values(**values)
        )
        async with self.transaction() as conn:
            await conn.execute(stmt)
        logger.debug(f"Updated {type_name} {object_id}")

    async def purge_objects(
        self, type_name: str, object_ids: Sequence[str], indexed_fields: Iterable[str]
    ) -> int:
        """Delete object rows with their index rows and association rows.

        Args:
            type_name: Type of the objects
            object_ids: IDs to delete
            indexed_fields: The type's indexed fields

        Returns:
            Number of object rows deleted
        """
        if not object_ids:
            return 0
        ids = list(object_ids)
        table = self._tables.object_table(type_name)
        assoc = self._tables.associations
        async with self.transaction() as conn:
            result = await conn.execute(
                delete(table).where(table.c.id.in_(ids)).where(table.c.type_name == type_name)
            )
            for field_name in indexed_fields:
                index = self._tables.index_table(type_name, field_name)
                await conn.execute(delete(index).where(index.c.id.in_(ids)))
            await conn.execute(delete(assoc).where(or_(assoc.c.id1.in_(ids), assoc.c.id2.in_(ids))))
            deleted = result.rowcount
        logger.debug(f"Deleted {deleted} {type_name} row(s)")
        return deleted

    def select_objects(self, type_name: str) -> Select[Any]:
        """Base select over a type's rows."""
        table = self._tables.object_table(type_name)
        return select(table).where(table.c.type_name == type_name)

    async def fetch_rows(self, statement: Select[Any]) -> list[RowMapping]:
        async with self.transaction() as conn:
            result = await conn.execute(statement)
            return list(result.mappings().all())

    # === Associations ===

    async def insert_associations(self, rows: list[dict[str, Any]]) -> None:
        if not rows:
            return
        async with self.transaction() as conn:
            await conn.execute(insert(self._tables.associations), rows)
        logger.debug(f"Inserted {len(rows)} association row(s)")

    async def delete_associations(
        self,
        assoc_type_name: str,
        *,
        id1: str | None = None,
        id2: str | None = None,
        id1_in: Sequence[str] | None = None,
        id2_in: Sequence[str] | None = None,
    ) -> int:
        """Delete association rows with the given tag matching every filter given."""
        assoc = self._tables.associations
        stmt = delete(assoc).where(assoc.c.assoc_type_name == assoc_type_name)
        if id1 is not None:
            stmt = stmt.where(assoc.c.id1 == id1)
        if id2 is not None:
            stmt = stmt.where(assoc.c.id2 == id2)
        if id1_in is not None:
            stmt = stmt.where(assoc.c.id1.in_(list(id1_in)))
        if id2_in is not None:
            stmt = stmt.where(assoc.c.id2.in_(list(id2_in)))
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return result.rowcount

    # === Indexes ===

    async def replace_index_entry(
        self, type_name: str, field_name: str, object_id: str, value: Any
    ) -> None:
        """Delete then re-insert the index row of one object for one field."""
        index = self._tables.index_table(type_name, field_name)
        async with self.transaction() as conn:
            await conn.execute(delete(index).where(index.c.id == object_id))
            await conn.execute(insert(index).values(key=to_index_key(value), id=object_id))

    async def fetch_index_keys(
        self, type_name: str, field_name: str, object_id: str
    ) -> list[str | None]:
        """Index keys stored for one object and field."""
        index = self._tables.index_table(type_name, field_name)
        async with self.transaction() as conn:
            result = await conn.execute(select(index.c.key).where(index.c.id == object_id))
            return [row[0] for row in result.all()]
