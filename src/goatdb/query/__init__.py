"""Query shapes: by ID, full scan, by index and edge traversal."""

from goatdb.query.base import GraphObjectQuery
from goatdb.query.by_id import GraphIDQuery
from goatdb.query.by_index import GraphIndexQuery
from goatdb.query.edges import GraphEdgeQuery
from goatdb.query.select_all import GraphSelectAllQuery

__all__ = [
    "GraphEdgeQuery",
    "GraphIDQuery",
    "GraphIndexQuery",
    "GraphObjectQuery",
    "GraphSelectAllQuery",
]
