"""Custom exceptions for goatdb.

Every exception carries an actionable message and a JSON-serializable
``context`` dict so callers (and the CLI's ``--json`` mode) can report
failures without parsing strings.
"""

from __future__ import annotations

from typing import Any


class GoatDBError(Exception):
    """Base exception for all goatdb errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(GoatDBError):
    """Failed to connect to the storage backend."""

    pass


class ValidationError(GoatDBError):
    """A field value failed its validator."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message, {"field_errors": field_errors or {}})
        self.field_errors = field_errors or {}


class PermissionError(GoatDBError):
    """A rule chain denied a create, update or delete."""

    def __init__(self, viewer_id: str | None, action: str, type_name: str) -> None:
        message = (
            f"Insufficient permission: viewer with ID {viewer_id or 'null'} "
            f"cannot perform action '{action}' on type '{type_name}'."
        )
        super().__init__(
            message, {"viewer_id": viewer_id, "action": action, "type_name": type_name}
        )
        self.viewer_id = viewer_id
        self.action = action
        self.type_name = type_name


class IllegalStateError(GoatDBError):
    """Operation attempted in a state that does not allow it."""

    pass


class TypeNotRegisteredError(IllegalStateError):
    """An entity type was used against a database it is not registered on."""

    def __init__(self, type_name: str, registered_types: list[str] | None = None) -> None:
        registered = registered_types or []
        if registered:
            message = (
                f"Type '{type_name}' is not registered. "
                f"Registered types: {', '.join(registered)}"
            )
        else:
            message = (
                f"Type '{type_name}' is not registered. "
                "Add it to the database's types and call initialise()."
            )
        super().__init__(message, {"type_name": type_name, "registered_types": registered})
        self.type_name = type_name
        self.registered_types = registered


class NotFoundError(GoatDBError):
    """A requested object or edge does not exist."""

    pass


class ObjectNotFoundError(NotFoundError):
    """No readable object with the given ID exists."""

    def __init__(self, object_id: str, type_name: str) -> None:
        message = f"No valid object of type '{type_name}' found with ID '{object_id}'."
        super().__init__(message, {"object_id": object_id, "type_name": type_name})
        self.object_id = object_id
        self.type_name = type_name


class EdgeNotFoundError(NotFoundError):
    """Edge name is not declared on the type."""

    def __init__(
        self, edge_name: str, type_name: str, available_edges: list[str] | None = None
    ) -> None:
        available = available_edges or []
        if available:
            message = (
                f"Edge '{edge_name}' not found on type '{type_name}'. "
                f"Available edges: {', '.join(available)}"
            )
        else:
            message = f"Edge '{edge_name}' not found on type '{type_name}'. No edges defined."

        super().__init__(
            message,
            {"edge_name": edge_name, "type_name": type_name, "available_edges": available},
        )
        self.edge_name = edge_name
        self.type_name = type_name
        self.available_edges = available


class EdgeConfigurationError(GoatDBError):
    """Edge operation conflicts with the edge's declared configuration."""

    def __init__(self, edge_name: str, type_name: str, reason: str) -> None:
        message = f"Edge '{edge_name}' on type '{type_name}': {reason}"
        super().__init__(message, {"edge_name": edge_name, "type_name": type_name})
        self.edge_name = edge_name
        self.type_name = type_name


class UnsupportedQueryError(GoatDBError):
    """Query shape is not supported for this type (e.g. field has no index)."""

    def __init__(
        self,
        field_name: str,
        type_name: str,
        indexed_fields: list[str] | None = None,
        reason: str | None = None,
    ) -> None:
        indexed = indexed_fields or []
        if reason:
            message = (
                f"Querying by field '{field_name}' on type '{type_name}' is not supported: "
                f"{reason}"
            )
        else:
            message = (
                f"Querying by field '{field_name}' on type '{type_name}' is not supported as "
                "this is not an indexed field. To query by a field, add it to "
                "get_indexed_fields()."
            )
        super().__init__(
            message,
            {"field_name": field_name, "type_name": type_name, "indexed_fields": indexed},
        )
        self.field_name = field_name
        self.type_name = type_name
        self.indexed_fields = indexed
