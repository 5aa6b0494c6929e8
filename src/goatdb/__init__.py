"""goatdb - Object-graph persistence over a relational store.

Define typed entities with fields, edges, secondary indexes and access rules,
then create, query, mutate and delete them while goatdb manages
serialization, association tables, index tables and permission checks.

Example:
    from goatdb import GoatDatabase, GraphType, GraphViewer, IndexQuery

    class TodoItem(GraphType):
        TYPE_NAME = "TodoItem"

        def get_initial_value(self):
            return {"title": "", "completed": False}

        def get_indexed_fields(self):
            return ["completed"]

    async def main():
        async with GoatDatabase(url="sqlite:///./todo.db", types=[TodoItem]) as db:
            viewer = GraphViewer(is_logged_in=True, id="user-1")
            item = await TodoItem.create(db, {"title": "Write docs"}, viewer)
            open_items = await TodoItem.query_by(
                db, "completed", IndexQuery.equals(False), viewer
            )
"""

from goatdb.access_control import (
    AccessRules,
    Decision,
    GraphViewer,
    PermissionEvaluator,
    SystemViewer,
    allow_always,
    allow_if,
    allow_if_system_viewer,
    allow_if_viewer_is_creator,
    deny_always,
    deny_if,
    deny_if_logged_out,
)
from goatdb.core import (
    Action,
    DatabaseConfig,
    GoatDatabase,
    IndexOperation,
    IndexQuery,
    LogLevel,
    SchemaInfo,
    StorageMode,
    TypeRegistry,
)
from goatdb.data_types import (
    BooleanType,
    DataType,
    DateTimeType,
    EnumType,
    FloatType,
    IntegerType,
    NumberType,
    StringType,
)
from goatdb.exceptions import (
    ConnectionError,
    EdgeConfigurationError,
    EdgeNotFoundError,
    GoatDBError,
    IllegalStateError,
    NotFoundError,
    ObjectNotFoundError,
    PermissionError,
    TypeNotRegisteredError,
    UnsupportedQueryError,
    ValidationError,
)
from goatdb.query import (
    GraphEdgeQuery,
    GraphIDQuery,
    GraphIndexQuery,
    GraphObjectQuery,
    GraphSelectAllQuery,
)
from goatdb.types import EdgeConfig, GraphType

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "GoatDatabase",
    "DatabaseConfig",
    "TypeRegistry",
    "GraphType",
    "EdgeConfig",
    # Types
    "Action",
    "IndexOperation",
    "IndexQuery",
    "LogLevel",
    "SchemaInfo",
    "StorageMode",
    # Access control
    "AccessRules",
    "Decision",
    "GraphViewer",
    "PermissionEvaluator",
    "SystemViewer",
    "allow_always",
    "allow_if",
    "allow_if_system_viewer",
    "allow_if_viewer_is_creator",
    "deny_always",
    "deny_if",
    "deny_if_logged_out",
    # Validators
    "DataType",
    "StringType",
    "EnumType",
    "BooleanType",
    "DateTimeType",
    "NumberType",
    "IntegerType",
    "FloatType",
    # Queries
    "GraphObjectQuery",
    "GraphIDQuery",
    "GraphSelectAllQuery",
    "GraphIndexQuery",
    "GraphEdgeQuery",
    # Exceptions
    "GoatDBError",
    "ConnectionError",
    "ValidationError",
    "PermissionError",
    "IllegalStateError",
    "TypeNotRegisteredError",
    "NotFoundError",
    "ObjectNotFoundError",
    "EdgeNotFoundError",
    "EdgeConfigurationError",
    "UnsupportedQueryError",
]
