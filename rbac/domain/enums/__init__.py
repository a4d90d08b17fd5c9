"""Domain enums for authorization logic.

Available Enums:
    - ItemType: role or permission
    - RulePathPolicy: which ruled items on a granting path are evaluated
"""

from rbac.domain.enums.item_type import ItemType
from rbac.domain.enums.rule_path_policy import RulePathPolicy

__all__ = ["ItemType", "RulePathPolicy"]
