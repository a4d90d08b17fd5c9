"""Item types of the authorization hierarchy.

Roles and permissions share one namespace and one hierarchy: a role may
contain permissions and other roles, and a permission may contain more
specific permissions (``updateOwnProfile`` -> ``updateProfile``).

Usage:
    from rbac.domain.enums import ItemType

    await manager.add_item("admin", ItemType.ROLE)
"""

from enum import Enum


class ItemType(str, Enum):
    """Kind of hierarchy item.

    String Enum:
        Inherits from str so values serialize as plain strings in adapters.
    """

    ROLE = "role"
    PERMISSION = "permission"
