"""Rule protocol (port) for dynamic authorization rules.

A rule is a named predicate that gates an item at check time using the
runtime parameters of the query (e.g. "is the profile being edited the
caller's own?").

Rules MUST be pure functions of their inputs: checks run concurrently and
the engine memoises each rule's result for the duration of one check.

Usage:
    class IsOwnProfile:
        def evaluate(self, user_id, item, params):
            return params.get("targetUserId") == user_id

    registry.register("IsOwnProfile", IsOwnProfile())

    # Plain callables (sync or async) are accepted too
    registry.register("IsOwnProfile", lambda user_id, item, params: ...)
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from rbac.domain.entities import RbacItem

# Plain-function form of a rule.
RulePredicate = Callable[[str, RbacItem, Mapping[str, Any]], bool | Awaitable[bool]]


class RbacRuleProtocol(Protocol):
    """Protocol for executable rules."""

    def evaluate(
        self,
        user_id: str,
        item: RbacItem,
        params: Mapping[str, Any],
    ) -> bool | Awaitable[bool]:
        """Decide whether the rule passes.

        Args:
            user_id: User being checked.
            item: Item whose rule is being evaluated.
            params: Runtime parameters of the query.

        Returns:
            bool (or awaitable bool): True when the rule passes.
        """
        ...
