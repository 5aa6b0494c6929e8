"""Edge traversal queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select

from goatdb.exceptions import UnsupportedQueryError
from goatdb.query.base import GraphObjectQuery, T
from goatdb.query.by_id import GraphIDQuery
from goatdb.storage.tables import edge_key

if TYPE_CHECKING:
    from goatdb.access_control.viewer import GraphViewer
    from goatdb.core.database import GoatDatabase
    from goatdb.types.edge import EdgeConfig
    from goatdb.types.graph_type import GraphType


class GraphEdgeQuery(GraphObjectQuery[T, list[T]]):
    """Entities connected to an anchor entity under one edge.

    Forward queries start from the entity that declares the edge and return
    connected entities. Inverse queries start from a connected entity and
    return the declaring type's entities that point at it.
    """

    def __init__(
        self,
        db: GoatDatabase,
        declaring_type: type[GraphType],
        anchor: GraphType,
        edge_name: str,
        edge_config: EdgeConfig,
        viewer: GraphViewer | None = None,
        inverse: bool = False,
    ) -> None:
        result_type = declaring_type if inverse else edge_config.connected_type
        super().__init__(db, result_type, viewer)
        self.declaring_type = declaring_type
        self.anchor = anchor
        self.edge_name = edge_name
        self.edge_config = edge_config
        self.inverse = inverse

        if inverse and edge_config.is_field_backed:
            raise UnsupportedQueryError(
                edge_config.connected_id_field or edge_name,
                declaring_type.TYPE_NAME,
                reason=f"edge '{edge_name}' is field-backed and has no inverse",
            )

    @property
    def relationship(self) -> str:
        return edge_key(self.declaring_type.TYPE_NAME, self.edge_name)

    def construct_query(self) -> Select[Any]:
        table = self.table
        assoc = self.storage.tables.associations
        if self.inverse:
            join_column, anchor_column = assoc.c.id1, assoc.c.id2
        else:
            join_column, anchor_column = assoc.c.id2, assoc.c.id1
        return (
            self.get_base_type_query()
            .join(assoc, join_column == table.c.id)
            .where(anchor_column == self.anchor.get_id())
            .where(assoc.c.assoc_type_name == self.relationship)
            .order_by(assoc.c.created_at, table.c.id)
        )

    async def fetch_permitted(self) -> list[T]:
        if self.edge_config.is_field_backed:
            connected_id = self.anchor.get(self.edge_config.connected_id_field)
            if connected_id is None:
                return []
            match = await GraphIDQuery(
                self.db, self.object_type, str(connected_id), self.viewer
            ).fetch()
            return [match] if match is not None else []
        return await super().fetch_permitted()

    def get_final_result(self, results: list[T]) -> list[T]:
        return results

    async def get_first(self) -> T | None:
        results = await self.fetch()
        return results[0] if results else None

    async def get_first_n(self, n: int) -> list[T]:
        results = await self.fetch()
        return results[:n]
