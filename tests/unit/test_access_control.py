"""Tests for viewers, rule constructors and rule-chain evaluation."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import pytest

from goatdb import (
    AccessRules,
    Action,
    Decision,
    GoatDatabase,
    GraphType,
    GraphViewer,
    PermissionError,
    PermissionEvaluator,
    SystemViewer,
    allow_always,
    allow_if,
    allow_if_system_viewer,
    allow_if_viewer_is_creator,
    deny_always,
    deny_if,
    deny_if_logged_out,
)
from goatdb.access_control import SYSTEM_USER_ROLE


def defer(viewer, obj) -> Decision:
    return Decision.DEFER


class Probe(GraphType):
    TYPE_NAME = "Probe"

    def __init__(self, db, viewer=None, rules: AccessRules | None = None) -> None:
        super().__init__(db, viewer)
        self.rules = rules or AccessRules()

    def get_initial_value(self) -> dict[str, Any]:
        return {}

    def get_access_rules(self) -> AccessRules:
        return self.rules


@pytest.fixture
def unbound_db() -> GoatDatabase:
    """A database that is never initialised; rule evaluation needs no storage."""
    return GoatDatabase()


class TestViewer:
    """Test viewer construction."""

    def test_anonymous_viewer(self):
        """Anonymous viewer is logged out with no identity."""
        viewer = GraphViewer.anonymous()
        assert viewer.is_logged_in is False
        assert viewer.id is None
        assert viewer.roles == ()

    def test_roles_and_tokens_are_tuples(self):
        """Lists passed in are stored as tuples."""
        viewer = GraphViewer(True, "u1", roles=["admin"], tokens=["t1", "t2"])
        assert viewer.roles == ("admin",)
        assert viewer.has_role("admin")
        assert viewer.has_token("t2")
        assert viewer.has_any_token(["x", "t1"])
        assert not viewer.has_any_token(["x"])

    def test_viewer_is_immutable(self):
        """Viewer attributes cannot be reassigned."""
        viewer = GraphViewer(True, "u1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            viewer.id = "u2"  # type: ignore[misc]

    def test_system_viewer(self):
        """SystemViewer is logged in and carries the reserved role."""
        viewer = SystemViewer()
        assert viewer.is_logged_in is True
        assert viewer.has_role(SYSTEM_USER_ROLE)
        assert SYSTEM_USER_ROLE == "__system_user__"
        assert viewer.is_system_viewer
        assert not GraphViewer(True, "u1").is_system_viewer


class TestRules:
    """Test the provided rule constructors."""

    def test_constant_rules(self, unbound_db):
        """allow_always and deny_always ignore their inputs."""
        probe = Probe(unbound_db)
        assert allow_always(GraphViewer.anonymous(), probe) is Decision.ALLOW
        assert deny_always(GraphViewer.anonymous(), probe) is Decision.DENY

    def test_deny_if_logged_out(self, unbound_db):
        """Logged-out viewers are denied; others defer."""
        probe = Probe(unbound_db)
        assert deny_if_logged_out(GraphViewer.anonymous(), probe) is Decision.DENY
        assert deny_if_logged_out(GraphViewer(True, "u1"), probe) is Decision.DEFER

    def test_allow_if_system_viewer(self, unbound_db):
        """Only the system viewer is allowed."""
        probe = Probe(unbound_db)
        assert allow_if_system_viewer(SystemViewer(), probe) is Decision.ALLOW
        assert allow_if_system_viewer(GraphViewer(True, "u1"), probe) is Decision.DEFER

    def test_allow_if_viewer_is_creator(self, unbound_db):
        """The creator is allowed; other viewers defer."""
        creator = GraphViewer(True, "u1")
        probe = Probe(unbound_db, creator)
        assert allow_if_viewer_is_creator(creator, probe) is Decision.ALLOW
        assert allow_if_viewer_is_creator(GraphViewer(True, "u2"), probe) is Decision.DEFER
        assert allow_if_viewer_is_creator(GraphViewer.anonymous(), probe) is Decision.DEFER

    def test_anonymous_creator_never_matches(self, unbound_db):
        """An entity created without a viewer has no creator to match."""
        probe = Probe(unbound_db)
        assert probe.get_metadata("creator_id") == ""
        assert allow_if_viewer_is_creator(GraphViewer.anonymous(), probe) is Decision.DEFER

    def test_predicate_rules(self, unbound_db):
        """allow_if/deny_if are decisive only when the predicate holds."""
        probe = Probe(unbound_db)
        is_admin = lambda viewer, obj: viewer.has_role("admin")  # noqa: E731
        admin = GraphViewer(True, "a", roles=["admin"])
        user = GraphViewer(True, "u")

        assert allow_if(is_admin)(admin, probe) is Decision.ALLOW
        assert allow_if(is_admin)(user, probe) is Decision.DEFER
        assert deny_if(is_admin)(admin, probe) is Decision.DENY
        assert deny_if(is_admin)(user, probe) is Decision.DEFER

    def test_rules_for_action(self):
        """Reads are governed by the on_query chain."""
        rules = AccessRules(
            on_create=[allow_always],
            on_query=[deny_always],
            on_update=[defer],
            on_delete=[deny_if_logged_out],
        )
        assert list(rules.for_action(Action.CREATE)) == [allow_always]
        assert list(rules.for_action(Action.READ)) == [deny_always]
        assert list(rules.for_action(Action.UPDATE)) == [defer]
        assert list(rules.for_action(Action.DELETE)) == [deny_if_logged_out]


class TestPermissionEvaluator:
    """Test rule-chain evaluation."""

    def test_empty_chain_allows(self, unbound_db):
        """No rules means allowed."""
        probe = Probe(unbound_db)
        assert PermissionEvaluator(probe, Action.UPDATE).can_perform_action() is True

    def test_all_defer_allows(self, unbound_db):
        """A chain where every rule defers allows."""
        probe = Probe(unbound_db, rules=AccessRules(on_update=[defer, defer]))
        assert PermissionEvaluator(probe, Action.UPDATE).can_perform_action() is True

    def test_first_decider_wins(self, unbound_db):
        """The first non-DEFER decision decides, later rules are not consulted."""
        calls: list[str] = []

        def tracking_allow(viewer, obj):
            calls.append("allow")
            return Decision.ALLOW

        rules = AccessRules(on_update=[defer, deny_always, tracking_allow])
        denied = Probe(unbound_db, rules=rules)
        assert PermissionEvaluator(denied, Action.UPDATE).can_perform_action() is False
        assert calls == []

        allowed = Probe(unbound_db, rules=AccessRules(on_update=[allow_always, deny_always]))
        assert PermissionEvaluator(allowed, Action.UPDATE).can_perform_action() is True

    def test_missing_viewer_is_anonymous(self, unbound_db):
        """A missing viewer is treated as logged out."""
        probe = Probe(unbound_db, rules=AccessRules(on_create=[deny_if_logged_out]))
        evaluator = PermissionEvaluator(probe, Action.CREATE, None)
        assert evaluator.viewer.is_logged_in is False
        assert evaluator.can_perform_action() is False

    def test_enforce_raises_permission_error(self, unbound_db):
        """Denial raises with viewer id, action and type name."""
        probe = Probe(unbound_db, rules=AccessRules(on_delete=[deny_always]))
        viewer = GraphViewer(True, "u42")
        with pytest.raises(PermissionError) as exc_info:
            PermissionEvaluator(probe, Action.DELETE, viewer).enforce_can_perform_action()

        error = exc_info.value
        assert error.viewer_id == "u42"
        assert error.action == "delete"
        assert error.type_name == "Probe"
        assert "u42" in str(error)
        assert error.to_dict()["error"] == "PermissionError"

    def test_enforce_allows_silently(self, unbound_db):
        """Allowed actions return None."""
        probe = Probe(unbound_db, rules=AccessRules(on_update=[allow_always]))
        assert PermissionEvaluator(probe, Action.UPDATE).enforce_can_perform_action() is None

    def test_each_decision_is_logged(self, unbound_db, caplog):
        """Every consulted rule emits a debug line."""
        caplog.set_level(logging.DEBUG, logger="goatdb")
        probe = Probe(unbound_db, rules=AccessRules(on_update=[defer, deny_always]))
        PermissionEvaluator(probe, Action.UPDATE).can_perform_action()

        messages = [r.getMessage() for r in caplog.records if r.name.startswith("goatdb")]
        assert len(messages) == 2
        assert "defer" in messages[0]
        assert "deny" in messages[1]
