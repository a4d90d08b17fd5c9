"""Rule evaluation policy along a granting path.

Controls which ruled items must pass for a path from an assigned role to
the checked item to grant access.

Policies:
    ALL_ALONG_PATH: Every item on the path that declares a rule (the
        assigned role, intermediate items and the target) must pass.
        Default; a failing rule anywhere blocks everything beneath it.
    TARGET_ONLY: Only the checked item's own rule is evaluated;
        intermediate rules are ignored.
"""

from enum import Enum


class RulePathPolicy(str, Enum):
    """Which ruled items on a path are evaluated."""

    ALL_ALONG_PATH = "all_along_path"
    TARGET_ONLY = "target_only"
