"""Viewers: the identity on whose behalf an operation runs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

SYSTEM_USER_ROLE = "__system_user__"


@dataclass(frozen=True)
class GraphViewer:
    """Immutable identity, roles and capability tokens of a caller."""

    is_logged_in: bool
    id: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)
    tokens: tuple[str, ...] = field(default_factory=tuple)
    pseudonym: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable (e.g. a list) but store tuples
        object.__setattr__(self, "roles", tuple(self.roles))
        object.__setattr__(self, "tokens", tuple(self.tokens))

    @classmethod
    def anonymous(cls) -> GraphViewer:
        """A logged-out viewer with no ID, roles or tokens."""
        return cls(is_logged_in=False)

    def get_id(self) -> str | None:
        return self.id

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_token(self, token: str) -> bool:
        return token in self.tokens

    def has_any_token(self, tokens: Iterable[str]) -> bool:
        return any(token in self.tokens for token in tokens)

    @property
    def is_system_viewer(self) -> bool:
        return self.has_role(SYSTEM_USER_ROLE)


class SystemViewer(GraphViewer):
    """Logged-in viewer carrying the reserved system role."""

    def __init__(self) -> None:
        super().__init__(is_logged_in=True, id=None, roles=(SYSTEM_USER_ROLE,))
