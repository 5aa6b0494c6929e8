"""Query every entity of a type."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select

from goatdb.query.base import GraphObjectQuery, T


class GraphSelectAllQuery(GraphObjectQuery[T, list[T]]):
    def construct_query(self) -> Select[Any]:
        return self.get_base_type_query().order_by(self.table.c.id)

    def get_final_result(self, results: list[T]) -> list[T]:
        return results
