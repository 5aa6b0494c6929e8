"""String validator."""

from __future__ import annotations

from typing import Any, Self

from goatdb.data_types.base import DataType


class StringType(DataType):
    db_type = "string"

    def __init__(self) -> None:
        super().__init__()
        self.is_non_empty = False
        self.max_length: int | None = None
        self.truncate_if_too_long = False

    def should_be_non_empty(self) -> Self:
        self.is_non_empty = True
        return self

    def should_have_max_length(self, max_length: int, truncate: bool = False) -> Self:
        """Limit the length; with truncate=True longer values are cut instead of rejected."""
        self.max_length = max_length
        self.truncate_if_too_long = truncate
        return self

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return not (self.is_non_null or self.default_value is not None)
        if not isinstance(value, str):
            return False
        if self.is_non_empty and value == "":
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        return True

    def get_validated_value(self, value: Any) -> Any:
        if value is None:
            if self.default_value is not None:
                return self.default_value
            return "" if self.is_non_null else None
        if isinstance(value, str) and self.max_length is not None and self.truncate_if_too_long:
            return value[: self.max_length]
        return value

    def substitutes(self, value: Any) -> bool:
        if super().substitutes(value):
            return True
        return (
            isinstance(value, str)
            and self.truncate_if_too_long
            and self.max_length is not None
            and len(value) > self.max_length
        )

    def _constraints(self) -> list[str]:
        constraints = super()._constraints()
        if self.is_non_empty:
            constraints.append("non-empty")
        if self.max_length is not None:
            suffix = ", truncated" if self.truncate_if_too_long else ""
            constraints.append(f"max_length={self.max_length}{suffix}")
        return constraints
