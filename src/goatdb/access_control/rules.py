"""Access rules and the composable rule constructors.

A rule is any callable ``(viewer, entity) -> Decision``. Rule chains are
evaluated in order and the first decision other than ``DEFER`` wins.

Example:
    def get_access_rules(self) -> AccessRules:
        return AccessRules(
            on_create=[deny_if_logged_out, allow_always],
            on_query=[allow_if_viewer_is_creator, deny_always],
        )
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from goatdb.core.types import Action

if TYPE_CHECKING:
    from goatdb.access_control.viewer import GraphViewer
    from goatdb.types.graph_type import GraphType


class Decision(Enum):
    """Outcome of a single rule."""

    ALLOW = "allow"
    DENY = "deny"
    DEFER = "defer"


Rule = Callable[["GraphViewer", "GraphType"], Decision]
Predicate = Callable[["GraphViewer", "GraphType"], bool]


@dataclass(frozen=True)
class AccessRules:
    """Rule chains per action. Empty chains allow."""

    on_create: Sequence[Rule] = field(default_factory=tuple)
    on_query: Sequence[Rule] = field(default_factory=tuple)
    on_update: Sequence[Rule] = field(default_factory=tuple)
    on_delete: Sequence[Rule] = field(default_factory=tuple)

    def for_action(self, action: Action) -> Sequence[Rule]:
        """Return the chain that governs an action (reads use on_query)."""
        if action == Action.CREATE:
            return self.on_create
        if action == Action.READ:
            return self.on_query
        if action == Action.UPDATE:
            return self.on_update
        return self.on_delete


def allow_always(viewer: GraphViewer, obj: GraphType) -> Decision:
    return Decision.ALLOW


def deny_always(viewer: GraphViewer, obj: GraphType) -> Decision:
    return Decision.DENY


def allow_if(predicate: Predicate) -> Rule:
    """Build a rule that allows when the predicate holds and defers otherwise."""

    def rule(viewer: GraphViewer, obj: GraphType) -> Decision:
        return Decision.ALLOW if predicate(viewer, obj) else Decision.DEFER

    rule.__name__ = f"allow_if({getattr(predicate, '__name__', 'predicate')})"
    return rule


def deny_if(predicate: Predicate) -> Rule:
    """Build a rule that denies when the predicate holds and defers otherwise."""

    def rule(viewer: GraphViewer, obj: GraphType) -> Decision:
        return Decision.DENY if predicate(viewer, obj) else Decision.DEFER

    rule.__name__ = f"deny_if({getattr(predicate, '__name__', 'predicate')})"
    return rule


def _is_logged_out(viewer: GraphViewer, obj: GraphType) -> bool:
    return not viewer.is_logged_in


def _is_system_viewer(viewer: GraphViewer, obj: GraphType) -> bool:
    return viewer.is_system_viewer


def _is_creator(viewer: GraphViewer, obj: GraphType) -> bool:
    return viewer.id is not None and obj.get_metadata("creator_id") == viewer.id


deny_if_logged_out = deny_if(_is_logged_out)
allow_if_system_viewer = allow_if(_is_system_viewer)
allow_if_viewer_is_creator = allow_if(_is_creator)
