"""RbacManager: the authorization engine.

Answers "may this user perform this item?" and manages the hierarchy,
assignments and rules while enforcing every model invariant.

Check semantics:
    A user is granted an item when some assigned role reaches it through
    child edges and the rules along the way pass. With
    RulePathPolicy.ALL_ALONG_PATH every ruled item on the path (the target
    included) must pass; with TARGET_ONLY only the target's rule is
    evaluated. A failing rule prunes every path through its item.

    A rule that cannot be evaluated (unregistered, raised, non-bool) prunes
    its branch too, but is not a denial: if no other path grants access
    the check returns the first recorded RuleError instead of
    ``Success(value=False)``. Backend failures abort the check.

Concurrency:
    One ReadWriteLock per manager. Mutations hold the exclusive side for
    their whole check-then-write sequence, so two concurrent ``add_child``
    calls can never jointly close a cycle and no check observes half a
    cascade. Checks and queries hold the shared side unless the adapter
    declares ``supports_snapshot_isolation``.

Usage:
    manager = RbacManager(
        adapter=InMemoryRbacAdapter(),
        rule_registry=RuleRegistry(),
        event_bus=event_bus,
        logger=logger,
    )
    await manager.add_role("admin")
    await manager.add_permission("updateProfile")
    await manager.add_child("admin", "updateProfile")
    await manager.assign("alice", "admin")

    match await manager.check_permission("alice", "updateProfile"):
        case Success(value=True):
            ...
"""

import asyncio
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from rbac.core.enums import ErrorCode
from rbac.core.errors import DomainError, ValidationError
from rbac.core.locks import ReadWriteLock
from rbac.core.result import Failure, Result, Success
from rbac.domain.entities import (
    RbacAssignment,
    RbacItem,
    RbacItemChild,
    RbacRule,
    RbacSnapshot,
    RemovalImpact,
)
from rbac.domain.enums import ItemType, RulePathPolicy
from rbac.domain.errors import (
    AssignmentError,
    CheckCancelledError,
    HierarchyError,
    ItemError,
    RuleError,
)
from rbac.domain.events import (
    AllRolesRevoked,
    RbacItemAdded,
    RbacItemChildAdded,
    RbacItemChildRemoved,
    RbacItemRemoved,
    RbacRuleAdded,
    RbacRuleRemoved,
    RoleAssignmentAttempted,
    RoleAssignmentFailed,
    RoleAssignmentSucceeded,
    RoleRevocationAttempted,
    RoleRevocationFailed,
    RoleRevocationSucceeded,
)
from rbac.domain.protocols.cache_protocol import CacheProtocol
from rbac.domain.protocols.event_bus_protocol import EventBusProtocol
from rbac.domain.protocols.logger_protocol import LoggerProtocol
from rbac.domain.protocols.rbac_adapter_protocol import RbacAdapterProtocol
from rbac.domain.protocols.rule_protocol import RbacRuleProtocol, RulePredicate
from rbac.domain.services.hierarchy_graph import CACHE_TTL_SECONDS, HierarchyGraph
from rbac.domain.services.rule_registry import RuleRegistry


def _blank(field: str, value: object) -> Failure[ValidationError] | None:
    if isinstance(value, str) and value.strip():
        return None
    return Failure(
        error=ValidationError(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"{field} must be a non-empty string",
            field=field,
        )
    )


class RbacManager:
    """Authorization engine over a pluggable persistence adapter.

    Attributes:
        _adapter: Persistence adapter (system of record).
        _rules: Rule Registry resolving rule names to predicates.
        _graph: Hierarchy Graph over the adapter.
        _event_bus: Domain event publisher.
        _logger: Structured logger.
        _policy: Which ruled items on a granting path must pass.
        _check_timeout: Default deadline (seconds) for check_permission.
        _lock: Shared/exclusive lock for checks and mutations.
    """

    def __init__(
        self,
        adapter: RbacAdapterProtocol,
        rule_registry: RuleRegistry,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        *,
        cache: CacheProtocol | None = None,
        cache_ttl: int = CACHE_TTL_SECONDS,
        rule_path_policy: RulePathPolicy = RulePathPolicy.ALL_ALONG_PATH,
        check_timeout_seconds: float | None = None,
    ) -> None:
        self._adapter = adapter
        self._rules = rule_registry
        self._graph = HierarchyGraph(adapter=adapter, logger=logger, cache=cache, cache_ttl=cache_ttl)
        self._event_bus = event_bus
        self._logger = logger
        self._policy = RulePathPolicy(rule_path_policy)
        self._check_timeout = check_timeout_seconds
        self._lock = ReadWriteLock()

    @property
    def graph(self) -> HierarchyGraph:
        return self._graph

    @property
    def rule_registry(self) -> RuleRegistry:
        return self._rules

    @property
    def rule_path_policy(self) -> RulePathPolicy:
        return self._policy

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[None]:
        if self._adapter.supports_snapshot_isolation:
            yield
        else:
            async with self._lock.read():
                yield

    # =========================================================================
    # Permission checks
    # =========================================================================

    async def check_permission(
        self,
        user_id: str,
        item_name: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[bool, DomainError]:
        """Decide whether ``user_id`` is granted ``item_name``.

        Args:
            user_id: User being checked.
            item_name: Role or permission being checked.
            params: Runtime parameters passed to every evaluated rule.
            timeout: Deadline in seconds; defaults to the manager's
                ``check_timeout_seconds``.

        Returns:
            Success(True) when granted, Success(False) when denied.
            Failure(ItemError UNKNOWN_ITEM) if the item does not exist.
            Failure(RuleError) if a rule fault left the check undecidable.
            Failure(CheckCancelledError CHECK_CANCELLED) on deadline expiry.
            Failure(BackendUnavailableError) on backend failure.

        Raises:
            asyncio.CancelledError: Propagated when the caller's task is
                cancelled.
        """
        for field, value in (("user_id", user_id), ("item_name", item_name)):
            if (invalid := _blank(field, value)) is not None:
                return invalid

        query = dict(params) if params is not None else {}
        deadline = timeout if timeout is not None else self._check_timeout

        try:
            async with asyncio.timeout(deadline):
                async with self._reading():
                    result = await self._check(user_id, item_name, query)
        except TimeoutError:
            self._logger.warning(
                "authorization_check_cancelled",
                user_id=user_id,
                item=item_name,
                timeout_seconds=deadline,
            )
            return Failure(
                error=CheckCancelledError(
                    code=ErrorCode.CHECK_CANCELLED,
                    message=f"Permission check exceeded {deadline}s deadline",
                    user_id=user_id,
                    item_name=item_name,
                )
            )

        match result:
            case Success(value=allowed):
                self._logger.info(
                    "authorization_check",
                    user_id=user_id,
                    item=item_name,
                    allowed=allowed,
                )
            case Failure(error=error):
                self._logger.warning(
                    "authorization_check_failed",
                    user_id=user_id,
                    item=item_name,
                    error_code=error.code.value,
                    error_message=error.message,
                )
        return result

    async def _check(
        self,
        user_id: str,
        item_name: str,
        params: Mapping[str, Any],
    ) -> Result[bool, DomainError]:
        target = await self._adapter.get_item(item_name)
        if isinstance(target, Failure):
            return target
        if target.value is None:
            return Failure(
                error=ItemError(
                    code=ErrorCode.UNKNOWN_ITEM,
                    message=f"Item '{item_name}' does not exist",
                    item_name=item_name,
                )
            )
        target_item = target.value

        roles = await self._adapter.list_by_user(user_id)
        if isinstance(roles, Failure):
            return roles
        if not roles.value:
            return Success(value=False)

        # Only rules on a path to the target take part in the decision.
        ancestors = await self._graph.ancestors(item_name)
        if isinstance(ancestors, Failure):
            return ancestors
        relevant = {item_name, *ancestors.value}

        faults: list[RuleError] = []

        async def admit(name: str) -> Result[bool, DomainError]:
            # The shared visited set makes this run at most once per item.
            if name == item_name:
                node = target_item
            elif self._policy is RulePathPolicy.TARGET_ONLY:
                return Success(value=True)
            else:
                found = await self._adapter.get_item(name)
                if isinstance(found, Failure):
                    return found
                if found.value is None:
                    self._logger.warning("dangling_hierarchy_reference", item=name)
                    return Success(value=False)
                node = found.value

            if node.rule is None:
                return Success(value=True)

            verdict = await self._rules.evaluate(node.rule, user_id, node, params)
            match verdict:
                case Success(value=passed):
                    self._logger.debug(
                        "rule_evaluated",
                        user_id=user_id,
                        item=node.name,
                        rule=node.rule,
                        passed=passed,
                    )
                    return verdict
                case Failure(error=error):
                    faults.append(error)
                    self._logger.error(
                        "rule_evaluation_error",
                        user_id=user_id,
                        item=node.name,
                        rule=node.rule,
                        error_code=error.code.value,
                        details=error.details,
                    )
            return Success(value=False)

        visited: set[str] = set()
        for role in roles.value:
            found = await self._graph.search(
                role, item_name, admit=admit, visited=visited, within=relevant
            )
            if isinstance(found, Failure):
                return found
            if found.value:
                return Success(value=True)

        if faults:
            return Failure(error=faults[0])
        return Success(value=False)

    # =========================================================================
    # Assignments
    # =========================================================================

    async def assign(self, user_id: str, role: str) -> Result[bool, DomainError]:
        """Assign an item (normally a role) to a user. Idempotent.

        Returns:
            Success(True) when the assignment was created, Success(False)
            when the user already held it.
            Failure(AssignmentError INVALID_REFERENCE) if the item is unknown.
        """
        for field, value in (("user_id", user_id), ("role", role)):
            if (invalid := _blank(field, value)) is not None:
                return invalid

        await self._event_bus.publish(RoleAssignmentAttempted(user_id=user_id, role=role))

        async with self._lock.write():
            result = await self._assign(user_id, role)

        match result:
            case Success(value=created):
                await self._event_bus.publish(
                    RoleAssignmentSucceeded(user_id=user_id, role=role, created=created)
                )
                self._logger.info("role_assigned", user_id=user_id, role=role, created=created)
            case Failure(error=error):
                await self._event_bus.publish(
                    RoleAssignmentFailed(user_id=user_id, role=role, reason=error.code.value)
                )
                self._logger.warning(
                    "role_assignment_rejected",
                    user_id=user_id,
                    role=role,
                    error_code=error.code.value,
                )
        return result

    async def _assign(self, user_id: str, role: str) -> Result[bool, DomainError]:
        existing = await self._adapter.get_assignment(user_id, role)
        if isinstance(existing, Failure):
            return existing
        if existing.value is not None:
            return Success(value=False)

        item = await self._adapter.get_item(role)
        if isinstance(item, Failure):
            return item
        if item.value is None:
            return Failure(
                error=AssignmentError(
                    code=ErrorCode.INVALID_REFERENCE,
                    message=f"Item '{role}' does not exist",
                    user_id=user_id,
                    role=role,
                )
            )

        stored = await self._adapter.put_assignment(user_id, role)
        if isinstance(stored, Failure):
            return stored
        return Success(value=True)

    async def revoke(self, user_id: str, role: str) -> Result[None, DomainError]:
        """Remove one assignment.

        Returns:
            Failure(AssignmentError ASSIGNMENT_NOT_FOUND) if absent.
        """
        for field, value in (("user_id", user_id), ("role", role)):
            if (invalid := _blank(field, value)) is not None:
                return invalid

        await self._event_bus.publish(RoleRevocationAttempted(user_id=user_id, role=role))

        async with self._lock.write():
            result = await self._adapter.delete_assignment(user_id, role)

        match result:
            case Success():
                await self._event_bus.publish(RoleRevocationSucceeded(user_id=user_id, role=role))
                self._logger.info("role_revoked", user_id=user_id, role=role)
            case Failure(error=error):
                await self._event_bus.publish(
                    RoleRevocationFailed(user_id=user_id, role=role, reason=error.code.value)
                )
                self._logger.warning(
                    "role_revocation_rejected",
                    user_id=user_id,
                    role=role,
                    error_code=error.code.value,
                )
        return result

    async def revoke_all(self, user_id: str) -> Result[int, DomainError]:
        """Remove every assignment of a user; returns how many were removed."""
        if (invalid := _blank("user_id", user_id)) is not None:
            return invalid

        async with self._lock.write():
            result = await self._adapter.delete_all_for_user(user_id)

        if isinstance(result, Success):
            await self._event_bus.publish(AllRolesRevoked(user_id=user_id, count=result.value))
            self._logger.info("roles_revoked", user_id=user_id, count=result.value)
        return result

    # =========================================================================
    # Items
    # =========================================================================

    async def add_item(
        self,
        name: str,
        item_type: ItemType | str,
        *,
        rule: str | None = None,
        description: str | None = None,
    ) -> Result[RbacItem, DomainError]:
        """Create a role or permission.

        Returns:
            Failure(ItemError DUPLICATE_ITEM) if the name is taken.
            Failure(ItemError INVALID_REFERENCE) if ``rule`` is not registered.
            Failure(ValidationError) on malformed input.
        """
        try:
            item = RbacItem(name=name, type=item_type, rule=rule, description=description)
        except (TypeError, ValueError) as e:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message=str(e),
                    field="item",
                )
            )

        async with self._lock.write():
            if item.rule is not None and not self._rules.contains(item.rule):
                result: Result[RbacItem, DomainError] = Failure(
                    error=ItemError(
                        code=ErrorCode.INVALID_REFERENCE,
                        message=f"Rule '{item.rule}' is not registered",
                        item_name=item.name,
                        details={"rule": item.rule},
                    )
                )
            else:
                result = await self._adapter.put_item(item)

        match result:
            case Success():
                await self._event_bus.publish(
                    RbacItemAdded(item_name=item.name, item_type=item.type.value, rule=item.rule)
                )
                self._logger.info(
                    "item_created",
                    item=item.name,
                    item_type=item.type.value,
                    rule=item.rule,
                )
            case Failure(error=error):
                self._logger.warning(
                    "item_creation_rejected",
                    item=item.name,
                    error_code=error.code.value,
                )
        return result

    async def add_role(
        self,
        name: str,
        *,
        rule: str | None = None,
        description: str | None = None,
    ) -> Result[RbacItem, DomainError]:
        return await self.add_item(name, ItemType.ROLE, rule=rule, description=description)

    async def add_permission(
        self,
        name: str,
        *,
        rule: str | None = None,
        description: str | None = None,
    ) -> Result[RbacItem, DomainError]:
        return await self.add_item(name, ItemType.PERMISSION, rule=rule, description=description)

    async def remove_item(
        self,
        name: str,
        *,
        dry_run: bool = False,
    ) -> Result[RemovalImpact, DomainError]:
        """Remove an item with every edge and assignment that references it.

        Args:
            name: Item to remove.
            dry_run: Report the impact without deleting anything.

        Returns:
            Success(RemovalImpact) listing the cascaded records.
            Failure(ItemError UNKNOWN_ITEM) if the item does not exist.
        """
        if (invalid := _blank("name", name)) is not None:
            return invalid

        async with self._lock.write():
            result = await self._remove_item(name, dry_run=dry_run)

        match result:
            case Success(value=impact) if not impact.dry_run:
                await self._event_bus.publish(
                    RbacItemRemoved(
                        item_name=name,
                        edges_removed=len(impact.edges_removed),
                        assignments_removed=len(impact.assignments_removed),
                    )
                )
                self._logger.info(
                    "item_removed",
                    item=name,
                    edges_removed=len(impact.edges_removed),
                    assignments_removed=len(impact.assignments_removed),
                )
            case Failure(error=error):
                self._logger.warning(
                    "item_removal_rejected",
                    item=name,
                    error_code=error.code.value,
                )
        return result

    async def _remove_item(self, name: str, *, dry_run: bool) -> Result[RemovalImpact, DomainError]:
        found = await self._adapter.get_item(name)
        if isinstance(found, Failure):
            return found
        if found.value is None:
            return Failure(
                error=ItemError(
                    code=ErrorCode.UNKNOWN_ITEM,
                    message=f"Item '{name}' does not exist",
                    item_name=name,
                )
            )
        item = found.value

        if dry_run:
            edges = await self._adapter.list_edges()
            if isinstance(edges, Failure):
                return edges
            assignments = await self._adapter.list_assignments()
            if isinstance(assignments, Failure):
                return assignments
            return Success(
                value=RemovalImpact(
                    item=item,
                    edges_removed=tuple(e for e in edges.value if name in (e.parent, e.child)),
                    assignments_removed=tuple(a for a in assignments.value if a.role == name),
                    dry_run=True,
                )
            )

        try:
            edges_removed = await self._adapter.delete_edges_for_item(name)
            if isinstance(edges_removed, Failure):
                return edges_removed
            assignments_removed = await self._adapter.delete_assignments_for_role(name)
            if isinstance(assignments_removed, Failure):
                return assignments_removed
            deleted = await self._adapter.delete_item(name)
            if isinstance(deleted, Failure):
                return deleted
        finally:
            # Edges may be gone even when a later step failed.
            await self._graph.invalidate()

        return Success(
            value=RemovalImpact(
                item=item,
                edges_removed=tuple(edges_removed.value),
                assignments_removed=tuple(assignments_removed.value),
            )
        )

    # =========================================================================
    # Hierarchy
    # =========================================================================

    async def add_child(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        """Make ``parent`` grant ``child``.

        Returns:
            Failure(HierarchyError INVALID_REFERENCE / CYCLE_DETECTED /
            DUPLICATE_EDGE) when an invariant would break.
        """
        for field, value in (("parent", parent), ("child", child)):
            if (invalid := _blank(field, value)) is not None:
                return invalid

        async with self._lock.write():
            result = await self._graph.add_edge(parent, child)

        match result:
            case Success():
                await self._event_bus.publish(RbacItemChildAdded(parent=parent, child=child))
                self._logger.info("child_added", parent=parent, child=child)
            case Failure(error=error):
                self._logger.warning(
                    "child_addition_rejected",
                    parent=parent,
                    child=child,
                    error_code=error.code.value,
                )
        return result

    async def remove_child(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        """Remove the edge parent -> child (no cascade).

        Returns:
            Failure(HierarchyError EDGE_NOT_FOUND) if the edge is absent.
        """
        for field, value in (("parent", parent), ("child", child)):
            if (invalid := _blank(field, value)) is not None:
                return invalid

        async with self._lock.write():
            result = await self._graph.remove_edge(parent, child)

        match result:
            case Success():
                await self._event_bus.publish(RbacItemChildRemoved(parent=parent, child=child))
                self._logger.info("child_removed", parent=parent, child=child)
            case Failure(error=error):
                self._logger.warning(
                    "child_removal_rejected",
                    parent=parent,
                    child=child,
                    error_code=error.code.value,
                )
        return result

    async def validate_hierarchy(self) -> Result[list[RbacItemChild], DomainError]:
        """Stored edges that reference missing items or close a cycle."""
        async with self._reading():
            return await self._graph.validate()

    # =========================================================================
    # Rules
    # =========================================================================

    async def add_rule(
        self,
        name: str,
        rule: RbacRuleProtocol | RulePredicate,
    ) -> Result[RbacRule, DomainError]:
        """Register a rule predicate and persist its metadata.

        Re-adding a name replaces the predicate.
        """
        try:
            metadata = RbacRule(name=name)
        except (TypeError, ValueError) as e:
            return Failure(
                error=ValidationError(code=ErrorCode.VALIDATION_FAILED, message=str(e), field="name")
            )

        async with self._lock.write():
            previous = self._rules.get(name)
            try:
                self._rules.register(name, rule)
            except (TypeError, ValueError) as e:
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.VALIDATION_FAILED,
                        message=str(e),
                        field="rule",
                    )
                )

            result = await self._adapter.put_rule(metadata)
            if isinstance(result, Failure):
                if previous is None:
                    self._rules.unregister(name)
                else:
                    self._rules.register(name, previous)

        match result:
            case Success():
                await self._event_bus.publish(RbacRuleAdded(rule_name=name))
                self._logger.info("rule_registered", rule=name, replaced=previous is not None)
            case Failure(error=error):
                self._logger.warning("rule_registration_rejected", rule=name, error_code=error.code.value)
        return result

    async def remove_rule(self, name: str) -> Result[None, DomainError]:
        """Unregister a rule and delete its metadata.

        Returns:
            Failure(RuleError RULE_IN_USE) while any item references it.
            Failure(RuleError RULE_NOT_FOUND) if it is neither registered
            nor persisted.
        """
        if (invalid := _blank("name", name)) is not None:
            return invalid

        async with self._lock.write():
            result = await self._remove_rule(name)

        match result:
            case Success():
                await self._event_bus.publish(RbacRuleRemoved(rule_name=name))
                self._logger.info("rule_unregistered", rule=name)
            case Failure(error=error):
                self._logger.warning("rule_removal_rejected", rule=name, error_code=error.code.value)
        return result

    async def _remove_rule(self, name: str) -> Result[None, DomainError]:
        persisted = await self._adapter.list_rule_names()
        if isinstance(persisted, Failure):
            return persisted
        if not self._rules.contains(name) and name not in persisted.value:
            return Failure(
                error=RuleError(
                    code=ErrorCode.RULE_NOT_FOUND,
                    message=f"Rule '{name}' is not registered",
                    rule_name=name,
                )
            )

        items = await self._adapter.list_items()
        if isinstance(items, Failure):
            return items
        users = [item.name for item in items.value if item.rule == name]
        if users:
            return Failure(
                error=RuleError(
                    code=ErrorCode.RULE_IN_USE,
                    message=f"Rule '{name}' is referenced by {len(users)} item(s)",
                    rule_name=name,
                    details={"items": users},
                )
            )

        deleted = await self._adapter.delete_rule(name)
        if isinstance(deleted, Failure):
            return deleted
        self._rules.unregister(name)
        return Success(value=None)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_item(self, name: str) -> Result[RbacItem | None, DomainError]:
        async with self._reading():
            return await self._adapter.get_item(name)

    async def get_items(
        self, item_type: ItemType | None = None
    ) -> Result[list[RbacItem], DomainError]:
        """Every item, or every item of one type."""
        async with self._reading():
            if item_type is None:
                return await self._adapter.list_items()
            return await self._adapter.list_items_by_type(ItemType(item_type))

    async def get_assignment(
        self, user_id: str, role: str
    ) -> Result[RbacAssignment | None, DomainError]:
        async with self._reading():
            return await self._adapter.get_assignment(user_id, role)

    async def get_assignments(self, user_id: str) -> Result[list[RbacAssignment], DomainError]:
        """Direct assignments of a user in assignment order."""
        async with self._reading():
            roles = await self._adapter.list_by_user(user_id)
        if isinstance(roles, Failure):
            return roles
        return Success(value=[RbacAssignment(user_id=user_id, role=r) for r in roles.value])

    async def get_roles_for_user(self, user_id: str) -> Result[list[RbacItem], DomainError]:
        """Role items directly assigned to a user."""
        async with self._reading():
            roles = await self._adapter.list_by_user(user_id)
            if isinstance(roles, Failure):
                return roles
            found: list[RbacItem] = []
            for name in roles.value:
                item = await self._adapter.get_item(name)
                if isinstance(item, Failure):
                    return item
                if item.value is not None and item.value.is_role:
                    found.append(item.value)
        return Success(value=found)

    async def get_permissions_for_user(self, user_id: str) -> Result[list[RbacItem], DomainError]:
        """Permissions reachable from the user's assignments, ignoring rules.

        Useful for listing what a user could be granted; use
        ``check_permission`` to decide an actual request.
        """
        async with self._reading():
            roles = await self._adapter.list_by_user(user_id)
            if isinstance(roles, Failure):
                return roles

            seen: set[str] = set()
            permissions: list[RbacItem] = []
            for role in roles.value:
                if role in seen:
                    continue
                reachable = await self._graph.descendants(role)
                match reachable:
                    case Failure(error=error) if error.code == ErrorCode.UNKNOWN_ITEM:
                        self._logger.warning("dangling_assignment", user_id=user_id, role=role)
                        continue
                    case Failure():
                        return reachable
                for name in (role, *reachable.value):
                    if name in seen:
                        continue
                    seen.add(name)
                    item = await self._adapter.get_item(name)
                    if isinstance(item, Failure):
                        return item
                    if item.value is not None and item.value.is_permission:
                        permissions.append(item.value)
        return Success(value=permissions)

    async def get_children(self, name: str) -> Result[list[str], DomainError]:
        """Direct children of an item in insertion order.

        Returns:
            Failure(ItemError UNKNOWN_ITEM) if the item does not exist.
        """
        async with self._reading():
            found = await self._adapter.get_item(name)
            if isinstance(found, Failure):
                return found
            if found.value is None:
                return Failure(
                    error=ItemError(
                        code=ErrorCode.UNKNOWN_ITEM,
                        message=f"Item '{name}' does not exist",
                        item_name=name,
                    )
                )
            return await self._graph.children(name)

    # =========================================================================
    # Bulk
    # =========================================================================

    async def load_snapshot(self) -> Result[RbacSnapshot, DomainError]:
        """Read the whole authorization state."""
        async with self._reading():
            items = await self._adapter.list_items()
            if isinstance(items, Failure):
                return items
            edges = await self._adapter.list_edges()
            if isinstance(edges, Failure):
                return edges
            assignments = await self._adapter.list_assignments()
            if isinstance(assignments, Failure):
                return assignments
            rules = await self._adapter.list_rule_names()
            if isinstance(rules, Failure):
                return rules

        return Success(
            value=RbacSnapshot(
                items=tuple(items.value),
                item_children=tuple(edges.value),
                assignments=tuple(assignments.value),
                rules=tuple(RbacRule(name=n) for n in rules.value),
            )
        )

    async def import_snapshot(self, snapshot: RbacSnapshot) -> Result[int, DomainError]:
        """Merge a snapshot into the current state.

        The whole snapshot is validated against the current state before
        anything is written: item names must be new, referenced rules
        registered, edge endpoints known, the merged hierarchy acyclic and
        assignment roles known. Nothing is written when validation fails.

        Returns:
            Success with the number of records written.
        """
        async with self._lock.write():
            result = await self._import_snapshot(snapshot)

        match result:
            case Success(value=count):
                self._logger.info(
                    "snapshot_imported",
                    records=count,
                    items=len(snapshot.items),
                    edges=len(snapshot.item_children),
                    assignments=len(snapshot.assignments),
                )
            case Failure(error=error):
                self._logger.warning("snapshot_import_rejected", error_code=error.code.value)
        return result

    async def _import_snapshot(self, snapshot: RbacSnapshot) -> Result[int, DomainError]:
        validated = await self._validate_snapshot(snapshot)
        if isinstance(validated, Failure):
            return validated

        written = 0
        try:
            for rule in snapshot.rules:
                stored = await self._adapter.put_rule(rule)
                if isinstance(stored, Failure):
                    return stored
                written += 1
            for item in snapshot.items:
                stored = await self._adapter.put_item(item)
                if isinstance(stored, Failure):
                    return stored
                written += 1
            for edge in snapshot.item_children:
                stored = await self._adapter.put_edge(edge.parent, edge.child)
                if isinstance(stored, Failure):
                    return stored
                written += 1
            for assignment in snapshot.assignments:
                stored = await self._adapter.put_assignment(assignment.user_id, assignment.role)
                if isinstance(stored, Failure):
                    return stored
                written += 1
        finally:
            await self._graph.invalidate()
        return Success(value=written)

    async def _validate_snapshot(self, snapshot: RbacSnapshot) -> Result[None, DomainError]:
        current = await self._adapter.list_items()
        if isinstance(current, Failure):
            return current
        current_edges = await self._adapter.list_edges()
        if isinstance(current_edges, Failure):
            return current_edges

        known = {item.name for item in current.value}
        for item in snapshot.items:
            if item.name in known:
                return Failure(
                    error=ItemError(
                        code=ErrorCode.DUPLICATE_ITEM,
                        message=f"Item '{item.name}' already exists",
                        item_name=item.name,
                    )
                )
            if item.rule is not None and not self._rules.contains(item.rule):
                return Failure(
                    error=ItemError(
                        code=ErrorCode.INVALID_REFERENCE,
                        message=f"Rule '{item.rule}' is not registered",
                        item_name=item.name,
                        details={"rule": item.rule},
                    )
                )
            known.add(item.name)

        adjacency: dict[str, list[str]] = {}
        for edge in current_edges.value:
            adjacency.setdefault(edge.parent, []).append(edge.child)
        for edge in snapshot.item_children:
            for endpoint in (edge.parent, edge.child):
                if endpoint not in known:
                    return Failure(
                        error=HierarchyError(
                            code=ErrorCode.INVALID_REFERENCE,
                            message=f"Item '{endpoint}' does not exist",
                            parent=edge.parent,
                            child=edge.child,
                        )
                    )
            children = adjacency.setdefault(edge.parent, [])
            if edge.child in children:
                return Failure(
                    error=HierarchyError(
                        code=ErrorCode.DUPLICATE_EDGE,
                        message=f"Edge '{edge.parent}' -> '{edge.child}' already exists",
                        parent=edge.parent,
                        child=edge.child,
                    )
                )
            children.append(edge.child)

        cycle = _find_cycle_edge(adjacency)
        if cycle is not None:
            return Failure(
                error=HierarchyError(
                    code=ErrorCode.CYCLE_DETECTED,
                    message=f"Edge '{cycle.parent}' -> '{cycle.child}' closes a cycle",
                    parent=cycle.parent,
                    child=cycle.child,
                )
            )

        for assignment in snapshot.assignments:
            if assignment.role not in known:
                return Failure(
                    error=AssignmentError(
                        code=ErrorCode.INVALID_REFERENCE,
                        message=f"Item '{assignment.role}' does not exist",
                        user_id=assignment.user_id,
                        role=assignment.role,
                    )
                )
        return Success(value=None)


def _find_cycle_edge(adjacency: dict[str, list[str]]) -> RbacItemChild | None:
    """An edge lying on a cycle, or None when the graph is a DAG."""
    indegree: dict[str, int] = {}
    for parent, children in adjacency.items():
        indegree.setdefault(parent, 0)
        for child in children:
            indegree[child] = indegree.get(child, 0) + 1

    # Kahn's algorithm: whatever keeps a positive in-degree sits on or below a cycle.
    ready = [node for node, degree in indegree.items() if degree == 0]
    while ready:
        node = ready.pop()
        for child in adjacency.get(node, ()):
            indegree[child] -= 1
            if indegree[child] == 0:
                ready.append(child)

    remaining = {node for node, degree in indegree.items() if degree > 0}
    if not remaining:
        return None

    parents_of: dict[str, str] = {}
    for parent, children in adjacency.items():
        if parent in remaining:
            for child in children:
                if child in remaining:
                    parents_of.setdefault(child, parent)

    # Every remaining node has a remaining parent; walking upwards must repeat.
    walked: set[str] = set()
    node = next(iter(remaining))
    while node not in walked:
        walked.add(node)
        below, node = node, parents_of[node]
    return RbacItemChild(parent=node, child=below)
