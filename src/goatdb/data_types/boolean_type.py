"""Boolean validator."""

from __future__ import annotations

from typing import Any

from goatdb.data_types.base import DataType


class BooleanType(DataType):
    db_type = "boolean"

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return not (self.is_non_null or self.default_value is not None)
        return isinstance(value, bool)
