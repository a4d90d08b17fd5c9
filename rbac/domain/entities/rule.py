"""RbacRule domain entity (persisted rule metadata).

Executable predicates are not portable data, so adapters persist only the
rule name. The RuleRegistry maps that name to code in the running process.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RbacRule:
    """Rule metadata.

    Attributes:
        name: Unique rule name referenced by RbacItem.rule.
    """

    name: str

    def __post_init__(self) -> None:
        """Validate rule name.

        Raises:
            ValueError: If name is blank.
        """
        if not self.name or not self.name.strip():
            raise ValueError("Rule name must be a non-empty string")
