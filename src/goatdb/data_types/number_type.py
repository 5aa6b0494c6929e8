"""Numeric validators."""

from __future__ import annotations

import math
from typing import Any, Self

from goatdb.data_types.base import DataType


class NumberType(DataType):
    """Accepts ints and floats (never bools), optionally bounded."""

    db_type = "number"

    def __init__(self) -> None:
        super().__init__()
        self.min_value: float | None = None
        self.max_value: float | None = None

    def should_have_min(self, min_value: float) -> Self:
        self.min_value = min_value
        return self

    def should_have_max(self, max_value: float) -> Self:
        self.max_value = max_value
        return self

    def _accepts_kind(self, value: Any) -> bool:
        return isinstance(value, int | float) and not isinstance(value, bool)

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return not (self.is_non_null or self.default_value is not None)
        if not self._accepts_kind(value):
            return False
        if isinstance(value, float) and math.isnan(value):
            return False
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True

    def _constraints(self) -> list[str]:
        constraints = super()._constraints()
        if self.min_value is not None:
            constraints.append(f"min={self.min_value}")
        if self.max_value is not None:
            constraints.append(f"max={self.max_value}")
        return constraints


class IntegerType(NumberType):
    db_type = "integer"

    def _accepts_kind(self, value: Any) -> bool:
        if isinstance(value, float):
            return value.is_integer()
        return super()._accepts_kind(value)

    def get_validated_value(self, value: Any) -> Any:
        value = super().get_validated_value(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class FloatType(NumberType):
    db_type = "float"

    def get_validated_value(self, value: Any) -> Any:
        value = super().get_validated_value(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value
