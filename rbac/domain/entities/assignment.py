"""RbacAssignment domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacAssignment:
    """Direct grant of an item (normally a role) to a user.

    Attributes:
        user_id: Opaque user identifier.
        role: Name of the assigned item.
    """

    user_id: str
    role: str

    def __post_init__(self) -> None:
        """Validate assignment fields.

        Raises:
            ValueError: If user_id or role is blank.
        """
        if not self.user_id or not self.role:
            raise ValueError("Assignment user_id and role must be non-empty strings")
