"""Core types and schema descriptions for goatdb.

Enums and pydantic models shared across the package. The schema description
models are designed to be JSON-serializable for the CLI's ``--json`` mode.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class StorageMode(StrEnum):
    """Physical layout of entity rows."""

    SINGLE_TABLE = "single_table"  # All entities in the shared `objects` table
    MULTI_TABLE = "multi_table"  # One table per type name

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid storage mode values."""
        return [m.value for m in cls]


class Action(StrEnum):
    """Actions a rule chain can be consulted for."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class LogLevel(IntEnum):
    """Minimum diagnostic level, mapped onto stdlib logging levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR


class IndexOperation(StrEnum):
    """Operations supported against a secondary index key."""

    EQUALS = "=="
    IN_ARRAY = "in_array"
    IN_RANGE = "in_range"
    LIKE = "like"


def to_index_key(value: Any) -> str | None:
    """Convert a field value to the text stored in an index table's key column."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class IndexQuery(BaseModel):
    """A single predicate against one indexed field.

    Values are compared as index keys (text), so ``in_range`` bounds compare
    lexicographically.
    """

    operation: IndexOperation
    value: Any = None

    @model_validator(mode="after")
    def validate_value_shape(self) -> IndexQuery:
        """Check the value matches what the operation expects."""
        if self.operation == IndexOperation.IN_ARRAY:
            if isinstance(self.value, str | bytes) or not isinstance(self.value, Sequence):
                raise ValueError("in_array expects a list of values")
        elif self.operation == IndexOperation.IN_RANGE:
            if isinstance(self.value, str | bytes) or not isinstance(self.value, Sequence):
                raise ValueError("in_range expects a (low, high) pair")
            if len(self.value) != 2:
                raise ValueError("in_range expects exactly two bounds")
        elif self.operation == IndexOperation.LIKE and not isinstance(self.value, str):
            raise ValueError("like expects a string pattern")
        return self

    @classmethod
    def equals(cls, value: Any) -> IndexQuery:
        return cls(operation=IndexOperation.EQUALS, value=value)

    @classmethod
    def in_array(cls, values: Sequence[Any]) -> IndexQuery:
        return cls(operation=IndexOperation.IN_ARRAY, value=list(values))

    @classmethod
    def in_range(cls, low: Any, high: Any) -> IndexQuery:
        return cls(operation=IndexOperation.IN_RANGE, value=[low, high])

    @classmethod
    def like(cls, pattern: str) -> IndexQuery:
        return cls(operation=IndexOperation.LIKE, value=pattern)

    def index_keys(self) -> list[str | None]:
        """Return the query value(s) converted to index keys."""
        if self.operation in (IndexOperation.IN_ARRAY, IndexOperation.IN_RANGE):
            return [to_index_key(v) for v in self.value]
        return [to_index_key(self.value)]


class IndexInfo(BaseModel):
    """Secondary index on one field."""

    field: str = Field(..., description="Indexed field name")
    table_name: str = Field(..., description="Index table name")


class EdgeInfo(BaseModel):
    """Declared edge on a type."""

    name: str = Field(..., description="Edge name")
    connected_type: str = Field(..., description="TYPE_NAME of the connected type")
    relationship: str = Field(..., description="Tag stored in assoc_type_name")
    undirected: bool = False
    one_to_one: bool = False
    connected_id_field: str | None = Field(
        default=None, description="Backing ID field for field-backed one-to-one edges"
    )


class TypeInfo(BaseModel):
    """Information about a registered entity type."""

    name: str
    table_name: str
    fields: list[str] = Field(default_factory=list)
    validators: dict[str, str] = Field(default_factory=dict)
    indexes: list[IndexInfo] = Field(default_factory=list)
    edges: list[EdgeInfo] = Field(default_factory=list)
    rules: dict[str, int] = Field(
        default_factory=dict, description="Number of rules per action"
    )


class SchemaInfo(BaseModel):
    """Complete schema information for a database."""

    storage_mode: StorageMode
    types: dict[str, TypeInfo] = Field(default_factory=dict)
    total_types: int = 0
