"""Relational storage for goatdb entities, edges and indexes."""

from goatdb.storage.graph_storage import GraphStorage
from goatdb.storage.tables import (
    ASSOCIATIONS_TABLE,
    OBJECTS_TABLE,
    TableManager,
    edge_key,
    index_table_name,
    to_snake_case,
)

__all__ = [
    "ASSOCIATIONS_TABLE",
    "OBJECTS_TABLE",
    "GraphStorage",
    "TableManager",
    "edge_key",
    "index_table_name",
    "to_snake_case",
]
