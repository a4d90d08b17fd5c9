"""RbacItem domain entity.

An item is a node of the authorization hierarchy: either a role or a
permission. Item names are unique across both types, so ``admin`` cannot
be a role and a permission at the same time.

An item may reference a rule by name. The reference is weak: the rule's
executable logic lives in the RuleRegistry and is resolved at check time.
"""

from dataclasses import dataclass

from rbac.domain.enums import ItemType


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacItem:
    """Role or permission node.

    Attributes:
        name: Globally unique item name.
        type: ItemType.ROLE or ItemType.PERMISSION.
        rule: Optional name of the rule gating this item.
        description: Optional free-form description.

    Example:
        >>> item = RbacItem(
        ...     name="updateOwnProfile",
        ...     type=ItemType.PERMISSION,
        ...     rule="IsOwnProfile",
        ... )
        >>> item.is_permission
        True
    """

    name: str
    type: ItemType
    rule: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        """Validate item after initialization.

        Raises:
            ValueError: If name or rule is blank, or type is unknown.
        """
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Item name must be a non-empty string")

        if not isinstance(self.type, ItemType):
            # Accept raw "role"/"permission" strings from adapters.
            object.__setattr__(self, "type", ItemType(self.type))

        if self.rule is not None and not self.rule.strip():
            raise ValueError("Item rule must be None or a non-empty string")

    @property
    def is_role(self) -> bool:
        """True for role items."""
        return self.type == ItemType.ROLE

    @property
    def is_permission(self) -> bool:
        """True for permission items."""
        return self.type == ItemType.PERMISSION

    @property
    def has_rule(self) -> bool:
        """True when the item is gated by a rule."""
        return self.rule is not None
