"""Enumerated-options validator."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from goatdb.data_types.base import DataType


class EnumType(DataType):
    """Accepts one of a fixed set of options."""

    db_type = "enum"

    def __init__(self, options: Iterable[Any]) -> None:
        super().__init__()
        self.options = list(options)

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return not (self.is_non_null or self.default_value is not None)
        return value in self.options

    def _constraints(self) -> list[str]:
        return [f"options={self.options!r}", *super()._constraints()]
