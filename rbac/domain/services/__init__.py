"""Domain services for the RBAC engine.

Usage:
    from rbac.domain.services import HierarchyGraph, RuleRegistry
"""

from rbac.domain.services.hierarchy_graph import HierarchyGraph
from rbac.domain.services.rule_registry import FunctionRule, RuleRegistry

__all__ = [
    "FunctionRule",
    "HierarchyGraph",
    "RuleRegistry",
]
