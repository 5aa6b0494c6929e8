"""Database configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from goatdb.core.types import LogLevel, StorageMode


class DatabaseConfig(BaseModel):
    """Configuration for a GoatDatabase.

    Example:
        config = DatabaseConfig(
            url="sqlite:///./app.db",
            types=[TodoItem, PrivateTodoItem],
            storage_mode=StorageMode.MULTI_TABLE,
        )
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        default="sqlite:///:memory:",
        description="SQLAlchemy database URL (SQLite or PostgreSQL)",
    )
    types: list[Any] = Field(
        default_factory=list, description="GraphType subclasses to register"
    )
    storage_mode: StorageMode = Field(
        default=StorageMode.SINGLE_TABLE,
        description="single_table (shared objects table) or multi_table (table per type)",
    )
    minimum_log_level: LogLevel = Field(
        default=LogLevel.ERROR, description="Minimum level for goatdb diagnostics"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")

    @field_validator("types")
    @classmethod
    def validate_types(cls, v: list[Any]) -> list[Any]:
        from goatdb.types.graph_type import GraphType

        for type_cls in v:
            if not (isinstance(type_cls, type) and issubclass(type_cls, GraphType)):
                raise ValueError(f"{type_cls!r} is not a GraphType subclass")
            if not getattr(type_cls, "TYPE_NAME", None):
                raise ValueError(f"{type_cls.__name__} does not define TYPE_NAME")
        return v
