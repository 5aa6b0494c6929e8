"""Rule-chain evaluation for one entity, action and viewer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from goatdb.access_control.rules import Decision
from goatdb.access_control.viewer import GraphViewer
from goatdb.core.types import Action
from goatdb.exceptions import PermissionError

if TYPE_CHECKING:
    from goatdb.types.graph_type import GraphType

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Evaluates the rule chain an entity declares for an action.

    A missing viewer is evaluated as an anonymous, logged-out viewer.
    """

    def __init__(self, obj: GraphType, action: Action, viewer: GraphViewer | None = None) -> None:
        self.obj = obj
        self.action = action
        self.viewer = viewer if viewer is not None else GraphViewer.anonymous()
        self.rules = list(obj.get_access_rules().for_action(action))

    def can_perform_action(self) -> bool:
        """Walk the chain; the first ALLOW or DENY decides, otherwise allow."""
        for position, rule in enumerate(self.rules):
            decision = rule(self.viewer, self.obj)
            logger.debug(
                f"Rule {position} ({getattr(rule, '__name__', repr(rule))}) for "
                f"{self.action} on {self.obj.TYPE_NAME} {self.obj.get_id()}: {decision.value}"
            )
            if decision is Decision.ALLOW:
                return True
            if decision is Decision.DENY:
                return False
        return True

    def enforce_can_perform_action(self) -> None:
        """Raise PermissionError unless the chain allows the action.

        Raises:
            PermissionError: If a rule denied the action
        """
        if not self.can_perform_action():
            raise PermissionError(self.viewer.id, str(self.action), self.obj.TYPE_NAME)
