"""Main GoatDatabase class."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from goatdb.core.config import DatabaseConfig
from goatdb.core.connection import DatabaseConnection
from goatdb.core.logs import configure_logging
from goatdb.core.registry import TypeRegistry
from goatdb.core.types import EdgeInfo, IndexInfo, SchemaInfo, StorageMode, TypeInfo
from goatdb.exceptions import IllegalStateError
from goatdb.storage.graph_storage import GraphStorage
from goatdb.storage.tables import TableManager, index_table_name

if TYPE_CHECKING:
    from goatdb.types.graph_type import GraphType

logger = logging.getLogger(__name__)


class GoatDatabase:
    """A graph of typed entities persisted in one relational database.

    Example:
        db = GoatDatabase(url="sqlite:///./app.db", types=[TodoItem])
        await db.initialise()
        item = await TodoItem.create(db, {"title": "Write docs"}, viewer)
        await db.close()

    Or as an async context manager:
        async with GoatDatabase(config) as db:
            ...
    """

    def __init__(self, config: DatabaseConfig | None = None, **kwargs: Any) -> None:
        """Initialize the database.

        Args:
            config: Database configuration
            **kwargs: DatabaseConfig fields, used when config is not given
        """
        if config is not None and kwargs:
            raise TypeError("Pass either a DatabaseConfig or keyword options, not both")
        self._config = config if config is not None else DatabaseConfig(**kwargs)
        configure_logging(self._config.minimum_log_level)

        self._connection = DatabaseConnection(self._config.url, echo=self._config.echo)
        self._tables = TableManager(self._config.storage_mode)
        self._registry = TypeRegistry()
        self._storage: GraphStorage | None = None

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def connection(self) -> DatabaseConnection:
        return self._connection

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def storage_mode(self) -> StorageMode:
        return self._config.storage_mode

    @property
    def is_initialised(self) -> bool:
        return self._storage is not None

    @property
    def storage(self) -> GraphStorage:
        """Storage backend.

        Raises:
            IllegalStateError: If initialise() has not completed
        """
        if self._storage is None:
            raise IllegalStateError(
                "The database has not been initialised. Await initialise() before "
                "accessing storage."
            )
        return self._storage

    def storage_for(self, type_name: str) -> GraphStorage:
        """Storage bound to a registered type.

        Raises:
            IllegalStateError: If initialise() has not completed
            TypeNotRegisteredError: If the type is not registered here
        """
        if self._storage is None:
            raise IllegalStateError(
                f"Cannot access storage for type '{type_name}': the database has not "
                "been initialised. Await initialise() first.",
                {"type_name": type_name},
            )
        return self._registry.resolve(type_name).storage

    async def initialise(self) -> list[str]:
        """Register the configured types and create missing tables.

        Safe to call more than once; later calls do nothing.

        Returns:
            Names of the tables that were created
        """
        if self._storage is not None:
            return []

        storage = GraphStorage(self._connection, self._tables)
        for type_cls in self._config.types:
            prototype = type_cls(self)
            self._tables.define_type(type_cls.TYPE_NAME, prototype.get_indexed_fields())
            self._registry.register(type_cls, storage)

        created = await storage.ensure_tables()
        self._registry.seal()
        self._storage = storage
        logger.info(
            f"Initialised {len(self._registry)} type(s) in {self.storage_mode} mode"
        )
        return created

    async def close(self) -> None:
        """Dispose of the engine."""
        await self._connection.close()

    async def __aenter__(self) -> GoatDatabase:
        await self.initialise()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    # === Schema discovery ===

    def describe_type(self, type_cls: type[GraphType]) -> TypeInfo:
        """Describe one entity type as registered on this database."""
        prototype = type_cls(self)
        type_name = type_cls.TYPE_NAME
        rules = prototype.get_access_rules()
        return TypeInfo(
            name=type_name,
            table_name=self._tables.object_table_name(type_name),
            fields=list(prototype.get_initial_value()),
            validators={
                name: validator.describe()
                for name, validator in prototype.get_validators().items()
            },
            indexes=[
                IndexInfo(field=field, table_name=index_table_name(type_name, field))
                for field in prototype.get_indexed_fields()
            ],
            edges=[
                EdgeInfo(
                    name=name,
                    connected_type=config.connected_type_name,
                    relationship=prototype.get_edge_key(name),
                    undirected=config.undirected,
                    one_to_one=config.one_to_one_edge,
                    connected_id_field=config.connected_id_field,
                )
                for name, config in prototype.get_edge_configs().items()
            ],
            rules={
                "create": len(rules.on_create),
                "read": len(rules.on_query),
                "update": len(rules.on_update),
                "delete": len(rules.on_delete),
            },
        )

    def describe(self) -> SchemaInfo:
        """Describe every configured type."""
        types = {
            type_cls.TYPE_NAME: self.describe_type(type_cls) for type_cls in self._config.types
        }
        return SchemaInfo(storage_mode=self.storage_mode, types=types, total_types=len(types))
