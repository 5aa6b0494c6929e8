"""Edge declarations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from goatdb.storage.tables import edge_key

__all__ = ["EdgeConfig", "edge_key"]


class EdgeConfig(BaseModel):
    """How a type connects to another type under one edge name.

    Example:
        EdgeConfig(connected_type=TodoItem, undirected=True)
        EdgeConfig(connected_type=User, one_to_one_edge=True, connected_id_field="owner_id")
    """

    model_config = ConfigDict(frozen=True)

    connected_type: Any
    undirected: bool = False
    one_to_one_edge: bool = False
    connected_id_field: str | None = None

    @field_validator("connected_type")
    @classmethod
    def validate_connected_type(cls, v: Any) -> Any:
        from goatdb.types.graph_type import GraphType

        if not (isinstance(v, type) and issubclass(v, GraphType)):
            raise ValueError(f"{v!r} is not a GraphType subclass")
        return v

    @model_validator(mode="after")
    def validate_field_backing(self) -> EdgeConfig:
        if self.connected_id_field is not None:
            if not self.one_to_one_edge:
                raise ValueError("connected_id_field is only valid for one-to-one edges")
            if self.undirected:
                raise ValueError("field-backed edges cannot be undirected")
        return self

    @property
    def is_field_backed(self) -> bool:
        return self.one_to_one_edge and self.connected_id_field is not None

    @property
    def connected_type_name(self) -> str:
        return self.connected_type.TYPE_NAME
