"""Query entities through a secondary index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select

from goatdb.core.types import IndexOperation, IndexQuery
from goatdb.query.base import GraphObjectQuery, T

if TYPE_CHECKING:
    from goatdb.access_control.viewer import GraphViewer
    from goatdb.core.database import GoatDatabase


class GraphIndexQuery(GraphObjectQuery[T, list[T]]):
    """Inner-joins the type's rows with the index table of one field.

    The caller is expected to have checked the field is indexed.
    """

    def __init__(
        self,
        db: GoatDatabase,
        object_type: type[T],
        field_name: str,
        index_query: IndexQuery,
        viewer: GraphViewer | None = None,
    ) -> None:
        super().__init__(db, object_type, viewer)
        self.field_name = field_name
        self.index_query = index_query

    def construct_query(self) -> Select[Any]:
        table = self.table
        index = self.storage.tables.index_table(self.type_name, self.field_name)
        stmt = self.get_base_type_query().join(index, index.c.id == table.c.id)

        keys = self.index_query.index_keys()
        operation = self.index_query.operation
        if operation == IndexOperation.EQUALS:
            if keys[0] is None:
                stmt = stmt.where(index.c.key.is_(None))
            else:
                stmt = stmt.where(index.c.key == keys[0])
        elif operation == IndexOperation.IN_ARRAY:
            stmt = stmt.where(index.c.key.in_(keys))
        elif operation == IndexOperation.IN_RANGE:
            stmt = stmt.where(index.c.key.between(keys[0], keys[1]))
        elif operation == IndexOperation.LIKE:
            stmt = stmt.where(index.c.key.like(keys[0]))
        return stmt.order_by(table.c.id)

    def get_final_result(self, results: list[T]) -> list[T]:
        return results
