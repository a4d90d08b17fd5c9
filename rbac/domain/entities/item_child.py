"""RbacItemChild domain entity (hierarchy edge)."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacItemChild:
    """Directed "parent grants child" edge.

    Attributes:
        parent: Name of the granting item.
        child: Name of the granted item.
    """

    parent: str
    child: str

    def __post_init__(self) -> None:
        """Validate edge endpoints.

        Raises:
            ValueError: If either endpoint is blank.
        """
        if not self.parent or not self.child:
            raise ValueError("Edge parent and child must be non-empty strings")
