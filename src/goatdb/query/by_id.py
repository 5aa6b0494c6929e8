"""Query a single entity by ID."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select

from goatdb.query.base import GraphObjectQuery, T

if TYPE_CHECKING:
    from goatdb.access_control.viewer import GraphViewer
    from goatdb.core.database import GoatDatabase


class GraphIDQuery(GraphObjectQuery[T, T | None]):
    """Resolves to the entity, or None if missing or unreadable."""

    def __init__(
        self,
        db: GoatDatabase,
        object_type: type[T],
        object_id: str,
        viewer: GraphViewer | None = None,
    ) -> None:
        super().__init__(db, object_type, viewer)
        self.object_id = object_id

    def construct_query(self) -> Select[Any]:
        return self.get_base_type_query().where(self.table.c.id == self.object_id)

    def get_final_result(self, results: list[T]) -> T | None:
        return results[0] if results else None
