"""Core components for goatdb."""

from goatdb.core.config import DatabaseConfig
from goatdb.core.connection import DatabaseConnection
from goatdb.core.database import GoatDatabase
from goatdb.core.logs import configure_logging
from goatdb.core.registry import RegisteredType, TypeRegistry
from goatdb.core.types import (
    Action,
    EdgeInfo,
    IndexInfo,
    IndexOperation,
    IndexQuery,
    LogLevel,
    SchemaInfo,
    StorageMode,
    TypeInfo,
)

__all__ = [
    "Action",
    "DatabaseConfig",
    "DatabaseConnection",
    "EdgeInfo",
    "GoatDatabase",
    "IndexInfo",
    "IndexOperation",
    "IndexQuery",
    "LogLevel",
    "RegisteredType",
    "SchemaInfo",
    "StorageMode",
    "TypeInfo",
    "TypeRegistry",
    "configure_logging",
]
