"""Type registry: the binding from type names to storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goatdb.exceptions import IllegalStateError, TypeNotRegisteredError

if TYPE_CHECKING:
    from goatdb.storage.graph_storage import GraphStorage
    from goatdb.types.graph_type import GraphType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredType:
    """A type bound to the storage that holds its rows."""

    type_name: str
    type_cls: type[GraphType]
    storage: GraphStorage


class TypeRegistry:
    """Type-name to storage bindings for one database.

    Written only while the database initialises, then sealed.
    """

    def __init__(self) -> None:
        self._types: dict[str, RegisteredType] = {}
        self._sealed = False

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def register(self, type_cls: type[GraphType], storage: GraphStorage) -> RegisteredType:
        """Bind a type to storage.

        Raises:
            IllegalStateError: If the registry is sealed or the name is taken
                by a different class
        """
        type_name = type_cls.TYPE_NAME
        if self._sealed:
            raise IllegalStateError(
                f"Cannot register type '{type_name}': the registry is sealed after initialise()",
                {"type_name": type_name},
            )
        existing = self._types.get(type_name)
        if existing is not None and existing.type_cls is not type_cls:
            raise IllegalStateError(
                f"Type name '{type_name}' is already registered by "
                f"{existing.type_cls.__name__}",
                {"type_name": type_name},
            )
        registered = RegisteredType(type_name=type_name, type_cls=type_cls, storage=storage)
        self._types[type_name] = registered
        logger.info(f"Registered type: {type_name}")
        return registered

    def seal(self) -> None:
        self._sealed = True

    def resolve(self, type_name: str) -> RegisteredType:
        """Look up a registered type.

        Raises:
            TypeNotRegisteredError: If the name is not registered
        """
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeNotRegisteredError(type_name, self.type_names()) from None

    def type_names(self) -> list[str]:
        return list(self._types)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __iter__(self):
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
