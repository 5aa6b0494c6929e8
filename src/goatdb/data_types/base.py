"""Base class for field validators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Self


class DataType(ABC):
    """Validator for one entity field.

    Builders return ``self`` so declarations read fluently:

        StringType().should_be_non_null().should_have_max_length(120)
    """

    db_type: ClassVar[str] = "text"

    def __init__(self) -> None:
        self.default_value: Any = None
        self.is_non_null = False

    def should_default_to(self, value: Any) -> Self:
        self.default_value = value
        return self

    def should_be_non_null(self) -> Self:
        self.is_non_null = True
        return self

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """Whether the value can be stored as-is."""

    def get_validated_value(self, value: Any) -> Any:
        """Coerce a value into one this validator accepts."""
        if value is None:
            return self.default_value
        return value

    def substitutes(self, value: Any) -> bool:
        """Whether an invalid value is replaced by get_validated_value() instead of rejected."""
        return value is None and self.default_value is not None

    def serialize(self, value: Any) -> Any:
        """Convert a value to its JSON payload form."""
        return value

    def deserialize(self, value: Any) -> Any:
        """Convert a JSON payload value back to its field form."""
        return value

    def _constraints(self) -> list[str]:
        constraints = []
        if self.is_non_null:
            constraints.append("non-null")
        if self.default_value is not None:
            constraints.append(f"default={self.default_value!r}")
        return constraints

    def describe(self) -> str:
        """Readable summary, e.g. ``string(non-null, max_length=120)``."""
        constraints = self._constraints()
        if not constraints:
            return self.db_type
        return f"{self.db_type}({', '.join(constraints)})"

    def __str__(self) -> str:
        return self.describe()
