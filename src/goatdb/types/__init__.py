"""Entity type base class and edge declarations."""

from goatdb.types.edge import EdgeConfig, edge_key
from goatdb.types.graph_type import GraphType, Metadata, generate_id

__all__ = ["EdgeConfig", "GraphType", "Metadata", "edge_key", "generate_id"]
