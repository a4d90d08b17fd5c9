"""Rule Registry: maps rule names to executable predicates.

Items reference rules by name only. The registry resolves the name at
check time and runs the predicate, turning every way a rule can go wrong
into a RuleError so a faulty rule is never mistaken for a denial.

Usage:
    registry = RuleRegistry()
    registry.register("IsOwnProfile", IsOwnProfile())

    result = await registry.evaluate("IsOwnProfile", "bob", item, {"targetUserId": "bob"})
    match result:
        case Success(value=passed):
            ...
        case Failure(error=error):
            ...  # RULE_NOT_FOUND or RULE_EVALUATION_FAILED
"""

import inspect
from collections.abc import Mapping
from typing import Any

from rbac.core.enums import ErrorCode
from rbac.core.result import Failure, Result, Success
from rbac.domain.entities import RbacItem
from rbac.domain.errors import RuleError
from rbac.domain.protocols.rule_protocol import RbacRuleProtocol, RulePredicate


class FunctionRule:
    """Adapts a plain callable to RbacRuleProtocol.

    Args:
        predicate: ``(user_id, item, params) -> bool`` (sync or async).
    """

    def __init__(self, predicate: RulePredicate) -> None:
        self._predicate = predicate

    def evaluate(self, user_id: str, item: RbacItem, params: Mapping[str, Any]):
        return self._predicate(user_id, item, params)

    def __repr__(self) -> str:
        name = getattr(self._predicate, "__qualname__", repr(self._predicate))
        return f"FunctionRule({name})"


class RuleRegistry:
    """Name -> rule mapping.

    The only state is the mapping itself. Registration replaces silently so
    re-registering a rule (hot reload, tests) is idempotent.
    """

    def __init__(self) -> None:
        self._rules: dict[str, RbacRuleProtocol] = {}

    def register(self, name: str, rule: RbacRuleProtocol | RulePredicate) -> None:
        """Register or replace a rule.

        Args:
            name: Rule name referenced by items.
            rule: Object with an ``evaluate`` method, or a plain callable.

        Raises:
            ValueError: If name is blank.
            TypeError: If rule is neither a rule object nor callable.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Rule name must be a non-empty string")

        if callable(getattr(rule, "evaluate", None)):
            self._rules[name] = rule  # type: ignore[assignment]
        elif callable(rule):
            self._rules[name] = FunctionRule(rule)
        else:
            raise TypeError(
                f"Rule '{name}' must define evaluate() or be callable, "
                f"got {type(rule).__name__}"
            )

    def unregister(self, name: str) -> bool:
        """Remove a rule. Returns False when it was not registered."""
        return self._rules.pop(name, None) is not None

    def contains(self, name: str) -> bool:
        """True when ``name`` is registered."""
        return name in self._rules

    def get(self, name: str) -> RbacRuleProtocol | None:
        """Return the registered rule object, if any."""
        return self._rules.get(name)

    def names(self) -> list[str]:
        """Registered rule names, sorted."""
        return sorted(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    async def evaluate(
        self,
        name: str,
        user_id: str,
        item: RbacItem,
        params: Mapping[str, Any],
    ) -> Result[bool, RuleError]:
        """Run a rule.

        Args:
            name: Rule name.
            user_id: User being checked.
            item: Item carrying the rule.
            params: Runtime parameters of the query.

        Returns:
            Success(True/False) with the rule's verdict.
            Failure(RULE_NOT_FOUND) if the rule is not registered.
            Failure(RULE_EVALUATION_FAILED) if the rule raised or returned
            something other than a bool.
        """
        rule = self._rules.get(name)
        if rule is None:
            return Failure(
                error=RuleError(
                    code=ErrorCode.RULE_NOT_FOUND,
                    message=f"Rule '{name}' is not registered",
                    rule_name=name,
                    item_name=item.name,
                )
            )

        try:
            verdict = rule.evaluate(user_id, item, params)
            if inspect.isawaitable(verdict):
                verdict = await verdict
        except Exception as e:
            return Failure(
                error=RuleError(
                    code=ErrorCode.RULE_EVALUATION_FAILED,
                    message=f"Rule '{name}' raised while evaluating '{item.name}'",
                    rule_name=name,
                    item_name=item.name,
                    details={"error": str(e), "type": type(e).__name__},
                )
            )

        if not isinstance(verdict, bool):
            return Failure(
                error=RuleError(
                    code=ErrorCode.RULE_EVALUATION_FAILED,
                    message=f"Rule '{name}' returned {type(verdict).__name__}, expected bool",
                    rule_name=name,
                    item_name=item.name,
                    details={"type": type(verdict).__name__},
                )
            )

        return Success(value=verdict)
