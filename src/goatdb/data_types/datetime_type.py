"""Datetime validator.

Values are ``datetime`` instances in memory and ISO 8601 strings in the
stored JSON payload.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from goatdb.data_types.base import DataType


class DateTimeType(DataType):
    db_type = "datetime"

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return not (self.is_non_null or self.default_value is not None)
        return isinstance(value, datetime)

    def serialize(self, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value

    def deserialize(self, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return value
        return value
