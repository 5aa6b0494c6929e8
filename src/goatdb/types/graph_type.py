"""Entity base class: lifecycle, mutation tracking, edges and queries.

Subclass GraphType to declare an entity type:

    class TodoItem(GraphType):
        TYPE_NAME = "TodoItem"

        def get_initial_value(self) -> dict[str, Any]:
            return {"title": "", "completed": False}

        def get_indexed_fields(self) -> list[str]:
            return ["completed"]

    async with GoatDatabase(url="sqlite:///./todo.db", types=[TodoItem]) as db:
        item = await TodoItem.create(db, {"title": "Write docs"}, viewer)
        done = await TodoItem.query_by(db, "completed", IndexQuery.equals(True), viewer)
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Self

from ulid import ULID

from goatdb.access_control.evaluator import PermissionEvaluator
from goatdb.access_control.rules import AccessRules
from goatdb.core.types import Action, IndexQuery
from goatdb.exceptions import (
    EdgeConfigurationError,
    EdgeNotFoundError,
    IllegalStateError,
    ObjectNotFoundError,
    UnsupportedQueryError,
    ValidationError,
)
from goatdb.query.by_id import GraphIDQuery
from goatdb.query.by_index import GraphIndexQuery
from goatdb.query.edges import GraphEdgeQuery
from goatdb.query.select_all import GraphSelectAllQuery
from goatdb.types.edge import EdgeConfig, edge_key

if TYPE_CHECKING:
    from sqlalchemy.engine import RowMapping

    from goatdb.access_control.viewer import GraphViewer
    from goatdb.core.database import GoatDatabase
    from goatdb.data_types.base import DataType
    from goatdb.storage.graph_storage import GraphStorage

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Globally unique, lexicographically time-ordered ID."""
    return str(ULID())


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops the offset)."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


@dataclass
class Metadata:
    id: str
    creator_id: str
    created_time: datetime
    modified_time: datetime


class GraphType(ABC):
    """A persisted entity.

    ``get(field)`` reads the last-saved value; ``set(field, value)`` stages a
    change that ``save()`` writes. Access rules are enforced on create,
    update and delete, and applied as a filter on reads.
    """

    TYPE_NAME: ClassVar[str]

    def __init__(self, db: GoatDatabase, viewer: GraphViewer | None = None) -> None:
        self._db = db
        self._viewer = viewer
        self._is_new_object = True
        self._is_deleted = False

        initial_value = self.get_initial_value()
        self.data: dict[str, Any] = dict(initial_value)
        self.mutable_data: dict[str, Any] = dict(initial_value)
        self.dirty_fields: list[str] = []

        now = utc_now()
        self.metadata = Metadata(
            id=generate_id(),
            creator_id=(viewer.id or "") if viewer is not None else "",
            created_time=now,
            modified_time=now,
        )

    # === Type declaration (override in subclasses) ===

    @abstractmethod
    def get_initial_value(self) -> dict[str, Any]:
        """Field defaults for a new entity."""

    def get_validators(self) -> dict[str, DataType]:
        return {}

    def get_edge_configs(self) -> dict[str, EdgeConfig]:
        return {}

    def get_indexed_fields(self) -> list[str]:
        return []

    def get_access_rules(self) -> AccessRules:
        return AccessRules()

    # === Lifecycle hooks ===

    async def on_before_create(self, viewer: GraphViewer | None, changeset: dict[str, Any]) -> None:
        pass

    async def on_after_create(self, viewer: GraphViewer | None) -> None:
        pass

    async def on_before_update(self, viewer: GraphViewer | None, changeset: dict[str, Any]) -> None:
        pass

    async def on_after_update(self, viewer: GraphViewer | None) -> None:
        pass

    async def on_before_delete(self, viewer: GraphViewer | None) -> None:
        pass

    # === Accessors ===

    @property
    def db(self) -> GoatDatabase:
        return self._db

    @property
    def viewer(self) -> GraphViewer | None:
        return self._viewer

    @property
    def is_new(self) -> bool:
        return self._is_new_object

    @property
    def is_deleted(self) -> bool:
        return self._is_deleted

    def get_id(self) -> str:
        return self.metadata.id

    def get_metadata(self, key: str) -> Any:
        """Read ``id``, ``creator_id``, ``created_time`` or ``modified_time``."""
        self._ensure_not_deleted()
        return getattr(self.metadata, key)

    def get(self, field: str, include_unsaved_changes: bool = False) -> Any:
        """Read a field.

        Args:
            field: Field name
            include_unsaved_changes: Return the staged value if the field is dirty

        Raises:
            IllegalStateError: If the entity was deleted
        """
        self._ensure_not_deleted()
        if include_unsaved_changes and field in self.dirty_fields:
            return self.mutable_data.get(field)
        return self.data.get(field)

    def set(self, field: str, value: Any) -> Self:
        """Stage a field change.

        Raises:
            IllegalStateError: If the entity was deleted
            ValidationError: If the field's validator rejects the value
        """
        self._ensure_not_deleted()
        validator = self.get_validators().get(field)
        if validator is not None and not validator.is_valid(value):
            if not validator.substitutes(value):
                raise ValidationError(
                    f"Invalid value {value!r} for field '{field}' on type '{self.TYPE_NAME}'. "
                    f"Expected {validator.describe()}.",
                    {field: validator.describe()},
                )
            value = validator.get_validated_value(value)
        self.mutable_data[field] = value
        if field not in self.dirty_fields:
            self.dirty_fields.append(field)
        return self

    def set_many(self, values: dict[str, Any]) -> Self:
        for field, value in values.items():
            self.set(field, value)
        return self

    def has_unsaved_changes(self) -> bool:
        return self._is_new_object or bool(self.dirty_fields)

    def get_modified_fields(self) -> list[str]:
        return list(self.dirty_fields)

    # === Persistence ===

    def _ensure_not_deleted(self) -> None:
        if self._is_deleted:
            raise IllegalStateError(
                f"{self.TYPE_NAME} {self.metadata.id} has been deleted",
                {"type_name": self.TYPE_NAME, "object_id": self.metadata.id},
            )

    def _storage(self) -> GraphStorage:
        return self._db.storage_for(self.TYPE_NAME)

    def _enforce(self, action: Action) -> None:
        PermissionEvaluator(self, action, self._viewer).enforce_can_perform_action()

    def _compute_payload(self) -> dict[str, Any]:
        payload = dict(self.data)
        for field in self.dirty_fields:
            payload[field] = self.mutable_data[field]
        return payload

    def _serialize_payload(self, payload: dict[str, Any]) -> str:
        validators = self.get_validators()
        serialized = {
            key: validators[key].serialize(value) if key in validators else value
            for key, value in payload.items()
        }
        return json.dumps(serialized, default=str)

    async def save(self) -> Self:
        """Persist staged changes (insert if new, otherwise update).

        Raises:
            IllegalStateError: If the entity was deleted or its type is not
                registered on an initialised database
            PermissionError: If the create or update rule chain denies
        """
        self._ensure_not_deleted()
        storage = self._storage()
        is_creation = self._is_new_object

        if is_creation:
            self._enforce(Action.CREATE)
            await self.on_before_create(self._viewer, self._compute_payload())
        else:
            self._enforce(Action.UPDATE)
            await self.on_before_update(self._viewer, self._compute_payload())

        # Hooks may have staged more changes
        payload = self._compute_payload()
        now = utc_now()
        if is_creation:
            self.metadata.created_time = now
            self.metadata.modified_time = now
            await storage.insert_object(
                self.TYPE_NAME,
                {
                    "id": self.metadata.id,
                    "visibility": 1,
                    "creator_id": self.metadata.creator_id,
                    "data": self._serialize_payload(payload),
                    "created_at": now,
                    "updated_at": now,
                },
            )
        else:
            self.metadata.modified_time = now
            await storage.update_object(
                self.TYPE_NAME,
                self.metadata.id,
                {"data": self._serialize_payload(payload), "updated_at": now},
            )

        self._is_new_object = False
        self.data = payload
        self.mutable_data = dict(payload)
        self.dirty_fields = []

        await self._rebuild_indexes(storage)

        if is_creation:
            await self.on_after_create(self._viewer)
        else:
            await self.on_after_update(self._viewer)
        return self

    async def _rebuild_indexes(self, storage: GraphStorage) -> None:
        await asyncio.gather(
            *(
                storage.replace_index_entry(
                    self.TYPE_NAME, field, self.metadata.id, self.data.get(field)
                )
                for field in self.get_indexed_fields()
            )
        )

    async def delete(self) -> None:
        """Delete the entity with its index rows and edges. No-op if never saved.

        Raises:
            IllegalStateError: If the entity was already deleted
            PermissionError: If the delete rule chain denies
        """
        self._ensure_not_deleted()
        if self._is_new_object:
            return
        storage = self._storage()
        self._enforce(Action.DELETE)
        await self.on_before_delete(self._viewer)

        await storage.purge_objects(self.TYPE_NAME, [self.metadata.id], self.get_indexed_fields())

        initial_value = self.get_initial_value()
        self.data = dict(initial_value)
        self.mutable_data = dict(initial_value)
        self.dirty_fields = []
        self._is_deleted = True

    # === Construction and queries ===

    @classmethod
    def _from_row(
        cls, db: GoatDatabase, row: RowMapping, viewer: GraphViewer | None = None
    ) -> Self:
        """Hydrate a persisted entity from a storage row."""
        obj = cls(db, viewer)
        validators = obj.get_validators()
        stored = json.loads(row["data"])
        loaded = {
            key: validators[key].deserialize(value) if key in validators else value
            for key, value in stored.items()
        }
        obj.data = {**obj.get_initial_value(), **loaded}
        obj.mutable_data = dict(obj.data)
        obj.metadata = Metadata(
            id=row["id"],
            creator_id=row["creator_id"] or "",
            created_time=as_utc(row["created_at"]),
            modified_time=as_utc(row["updated_at"]),
        )
        obj._is_new_object = False
        return obj

    @classmethod
    async def create(
        cls,
        db: GoatDatabase,
        values: dict[str, Any] | None = None,
        viewer: GraphViewer | None = None,
    ) -> Self:
        """Construct, set values and save a new entity."""
        obj = cls(db, viewer)
        if values:
            obj.set_many(values)
        return await obj.save()

    @classmethod
    def query_by_id(
        cls, db: GoatDatabase, object_id: str, viewer: GraphViewer | None = None
    ) -> GraphIDQuery[Self]:
        """Awaitable resolving to the entity, or None if missing or unreadable."""
        return GraphIDQuery(db, cls, object_id, viewer)

    @classmethod
    async def get_by_id(
        cls, db: GoatDatabase, object_id: str, viewer: GraphViewer | None = None
    ) -> Self:
        """Like query_by_id but raises if nothing readable is found.

        Raises:
            ObjectNotFoundError: If missing or unreadable
        """
        obj = await cls.query_by_id(db, object_id, viewer)
        if obj is None:
            raise ObjectNotFoundError(object_id, cls.TYPE_NAME)
        return obj

    @classmethod
    def query_all(
        cls, db: GoatDatabase, viewer: GraphViewer | None = None
    ) -> GraphSelectAllQuery[Self]:
        return GraphSelectAllQuery(db, cls, viewer)

    @classmethod
    def query_by(
        cls,
        db: GoatDatabase,
        field: str,
        index_query: IndexQuery,
        viewer: GraphViewer | None = None,
    ) -> GraphIndexQuery[Self]:
        """Query through the index of one field.

        Raises:
            UnsupportedQueryError: If the field is not indexed
        """
        indexed_fields = cls(db).get_indexed_fields()
        if field not in indexed_fields:
            raise UnsupportedQueryError(field, cls.TYPE_NAME, indexed_fields)
        return GraphIndexQuery(db, cls, field, index_query, viewer)

    @classmethod
    async def delete_with_id(
        cls, db: GoatDatabase, object_id: str, viewer: GraphViewer | None = None
    ) -> None:
        """Delete the entity if it exists and is readable."""
        obj = await cls.query_by_id(db, object_id, viewer)
        if obj is not None:
            await obj.delete()

    # === Edges ===

    def _get_edge_config(self, edge_name: str) -> EdgeConfig:
        configs = self.get_edge_configs()
        try:
            return configs[edge_name]
        except KeyError:
            raise EdgeNotFoundError(edge_name, self.TYPE_NAME, sorted(configs)) from None

    def get_edge_key(self, edge_name: str) -> str:
        return edge_key(self.TYPE_NAME, edge_name)

    async def add_edges(self, edge_name: str, targets: Sequence[GraphType]) -> None:
        """Connect this entity to targets under an edge.

        Raises:
            PermissionError: If the update rule chain denies
            EdgeNotFoundError: If the edge is not declared
            EdgeConfigurationError: If the targets conflict with the edge's configuration
        """
        if not targets:
            return
        self._enforce(Action.UPDATE)
        config = self._get_edge_config(edge_name)
        relationship = self.get_edge_key(edge_name)

        for target in targets:
            if not isinstance(target, config.connected_type):
                raise EdgeConfigurationError(
                    edge_name,
                    self.TYPE_NAME,
                    f"expected {config.connected_type_name} targets, got {target.TYPE_NAME}",
                )
        if config.undirected:
            for target in targets:
                if target.TYPE_NAME != self.TYPE_NAME:
                    raise EdgeConfigurationError(
                        edge_name,
                        self.TYPE_NAME,
                        "undirected edges must connect entities of the same type",
                    )

        storage = self._storage()
        if config.one_to_one_edge:
            if len(targets) > 1:
                raise EdgeConfigurationError(
                    edge_name, self.TYPE_NAME, "one-to-one edges accept a single target"
                )
            if config.connected_id_field is not None:
                await self.set(config.connected_id_field, targets[0].get_id()).save()
                return
            await storage.delete_associations(relationship, id1=self.get_id())

        await asyncio.gather(*(t.save() for t in targets if t.has_unsaved_changes()))

        now = utc_now()
        creator_id = self._viewer.id if self._viewer is not None else None
        rows = []
        for target in targets:
            rows.append(
                {
                    "id1": self.get_id(),
                    "id2": target.get_id(),
                    "assoc_type_name": relationship,
                    "id2_type": target.TYPE_NAME,
                    "creator_id": creator_id,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            if config.undirected:
                rows.append(
                    {
                        "id1": target.get_id(),
                        "id2": self.get_id(),
                        "assoc_type_name": relationship,
                        "id2_type": self.TYPE_NAME,
                        "creator_id": creator_id,
                        "created_at": now,
                        "updated_at": now,
                    }
                )
        await storage.insert_associations(rows)

    async def add_edge(self, edge_name: str, target: GraphType) -> None:
        await self.add_edges(edge_name, [target])

    def query_edges(self, edge_name: str) -> GraphEdgeQuery[Any]:
        """Awaitable query over the entities connected under an edge.

        Raises:
            EdgeNotFoundError: If the edge is not declared
        """
        config = self._get_edge_config(edge_name)
        return GraphEdgeQuery(self._db, type(self), self, edge_name, config, self._viewer)

    @classmethod
    def query_inverse_of_edge(
        cls,
        db: GoatDatabase,
        edge_name: str,
        connected_object: GraphType,
        viewer: GraphViewer | None = None,
    ) -> GraphEdgeQuery[Self]:
        """Entities of this type that point at ``connected_object`` under an edge.

        Raises:
            EdgeNotFoundError: If the edge is not declared on this type
            UnsupportedQueryError: If the edge is field-backed
        """
        config = cls(db)._get_edge_config(edge_name)
        return GraphEdgeQuery(db, cls, connected_object, edge_name, config, viewer, inverse=True)

    async def delete_edges(
        self,
        edge_name: str,
        targets: Iterable[GraphType | str],
        also_delete_connected: bool = False,
    ) -> None:
        """Disconnect targets (entities or IDs) from this entity under an edge.

        Args:
            edge_name: Declared edge name
            targets: Connected entities or their IDs
            also_delete_connected: Also delete the connected entities' rows

        Raises:
            PermissionError: If the update rule chain denies
            EdgeNotFoundError: If the edge is not declared
        """
        self._enforce(Action.UPDATE)
        target_ids = [t if isinstance(t, str) else t.get_id() for t in targets]
        if not target_ids:
            return
        config = self._get_edge_config(edge_name)
        storage = self._storage()

        if config.is_field_backed:
            connected_id = self.get(config.connected_id_field)
            if connected_id is None or str(connected_id) not in target_ids:
                return
            if also_delete_connected:
                await self._purge_connected(config, [str(connected_id)])
            await self.set(config.connected_id_field, None).save()
            return

        relationship = self.get_edge_key(edge_name)
        await storage.delete_associations(relationship, id1=self.get_id(), id2_in=target_ids)
        if config.undirected:
            await storage.delete_associations(relationship, id2=self.get_id(), id1_in=target_ids)
        if also_delete_connected:
            await self._purge_connected(config, target_ids)

    async def delete_edge(
        self, edge_name: str, target: GraphType | str, also_delete_connected: bool = False
    ) -> None:
        await self.delete_edges(edge_name, [target], also_delete_connected)

    async def _purge_connected(self, config: EdgeConfig, object_ids: list[str]) -> None:
        connected_type = config.connected_type
        storage = self._db.storage_for(connected_type.TYPE_NAME)
        indexed_fields = connected_type(self._db).get_indexed_fields()
        await storage.purge_objects(connected_type.TYPE_NAME, object_ids, indexed_fields)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.metadata.id}>"
