"""Base query: select rows, hydrate entities, filter by read permission."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Generator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, Table

from goatdb.access_control.evaluator import PermissionEvaluator
from goatdb.core.types import Action

if TYPE_CHECKING:
    from sqlalchemy.engine import RowMapping

    from goatdb.access_control.viewer import GraphViewer
    from goatdb.core.database import GoatDatabase
    from goatdb.storage.graph_storage import GraphStorage
    from goatdb.types.graph_type import GraphType

T = TypeVar("T", bound="GraphType")
R = TypeVar("R")


class GraphObjectQuery(ABC, Generic[T, R]):
    """A lazily executed query over one entity type.

    Await the query (or call ``fetch()``) to run it. Rows the viewer may not
    read are dropped silently.
    """

    def __init__(
        self, db: GoatDatabase, object_type: type[T], viewer: GraphViewer | None = None
    ) -> None:
        self.db = db
        self.object_type = object_type
        self.viewer = viewer

    @property
    def type_name(self) -> str:
        return self.object_type.TYPE_NAME

    @property
    def storage(self) -> GraphStorage:
        return self.db.storage_for(self.type_name)

    @property
    def table(self) -> Table:
        return self.storage.tables.object_table(self.type_name)

    def get_base_type_query(self) -> Select[Any]:
        return self.storage.select_objects(self.type_name)

    @abstractmethod
    def construct_query(self) -> Select[Any]:
        """Build the select statement for this query shape."""

    @abstractmethod
    def get_final_result(self, results: list[T]) -> R:
        """Shape the permitted entities into the query's result."""

    def hydrate(self, rows: list[RowMapping]) -> list[T]:
        return [self.object_type._from_row(self.db, row, self.viewer) for row in rows]

    def apply_permission_rule_filter(self, results: list[T]) -> list[T]:
        return [
            obj
            for obj in results
            if PermissionEvaluator(obj, Action.READ, self.viewer).can_perform_action()
        ]

    async def fetch_permitted(self) -> list[T]:
        rows = await self.storage.fetch_rows(self.construct_query())
        return self.apply_permission_rule_filter(self.hydrate(rows))

    async def fetch(self) -> R:
        return self.get_final_result(await self.fetch_permitted())

    def __await__(self) -> Generator[Any, None, R]:
        return self.fetch().__await__()
