"""Viewers, rule chains and permission evaluation."""

from goatdb.access_control.evaluator import PermissionEvaluator
from goatdb.access_control.rules import (
    AccessRules,
    Decision,
    Predicate,
    Rule,
    allow_always,
    allow_if,
    allow_if_system_viewer,
    allow_if_viewer_is_creator,
    deny_always,
    deny_if,
    deny_if_logged_out,
)
from goatdb.access_control.viewer import SYSTEM_USER_ROLE, GraphViewer, SystemViewer

__all__ = [
    "SYSTEM_USER_ROLE",
    "AccessRules",
    "Decision",
    "GraphViewer",
    "PermissionEvaluator",
    "Predicate",
    "Rule",
    "SystemViewer",
    "allow_always",
    "allow_if",
    "allow_if_system_viewer",
    "allow_if_viewer_is_creator",
    "deny_always",
    "deny_if",
    "deny_if_logged_out",
]
