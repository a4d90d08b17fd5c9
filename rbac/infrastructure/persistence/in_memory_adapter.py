"""In-memory persistence adapter for the authorization model.

Reference backend implementing RbacAdapterProtocol with insertion-ordered
dicts. Suitable for tests and single-process deployments; remote backends
(HTTP, document store, relational) implement the same protocol elsewhere.

Lifecycle:
    The adapter starts connected unless ``auto_connect=False``. While
    disconnected every operation returns BackendUnavailableError, which
    lets callers exercise the engine's backend-failure paths.

Architecture:
    - Implements RbacAdapterProtocol without inheritance (structural typing)
    - Returns Result types for all operations
    - No snapshot isolation: the engine serializes checks against mutations
"""

from rbac.core.enums import ErrorCode
from rbac.core.errors import DomainError
from rbac.core.result import Failure, Result, Success
from rbac.domain.entities import RbacAssignment, RbacItem, RbacItemChild, RbacRule
from rbac.domain.enums import ItemType
from rbac.domain.errors import AssignmentError, HierarchyError, ItemError
from rbac.infrastructure.enums import InfrastructureErrorCode
from rbac.infrastructure.errors import BackendUnavailableError


class InMemoryRbacAdapter:
    """Dictionary-backed RBAC store.

    Attributes:
        supports_snapshot_isolation: Always False.
        _items: name -> item, in creation order.
        _children: parent -> ordered set of children.
        _edges: ordered set of (parent, child) across all parents.
        _user_roles: user_id -> ordered set of roles.
        _assignments: ordered set of (user_id, role) across all users.
        _rules: rule name -> metadata.
    """

    supports_snapshot_isolation: bool = False

    def __init__(self, *, auto_connect: bool = True) -> None:
        self._items: dict[str, RbacItem] = {}
        self._children: dict[str, dict[str, None]] = {}
        self._edges: dict[tuple[str, str], None] = {}
        self._user_roles: dict[str, dict[str, None]] = {}
        self._assignments: dict[tuple[str, str], None] = {}
        self._rules: dict[str, RbacRule] = {}
        self._connected = auto_connect

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    def clear(self) -> None:
        """Drop all stored records (connection state is kept)."""
        self._items.clear()
        self._children.clear()
        self._edges.clear()
        self._user_roles.clear()
        self._assignments.clear()
        self._rules.clear()

    def _unavailable(self, operation: str) -> Failure[BackendUnavailableError] | None:
        if self._connected:
            return None
        return Failure(
            error=BackendUnavailableError(
                code=ErrorCode.BACKEND_UNAVAILABLE,
                infrastructure_code=InfrastructureErrorCode.BACKEND_DISCONNECTED,
                message=f"In-memory backend is disconnected ({operation})",
                operation=operation,
            )
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def list_items(self) -> Result[list[RbacItem], DomainError]:
        if (failure := self._unavailable("list_items")) is not None:
            return failure
        return Success(value=list(self._items.values()))

    async def list_items_by_type(
        self, item_type: ItemType
    ) -> Result[list[RbacItem], DomainError]:
        if (failure := self._unavailable("list_items_by_type")) is not None:
            return failure
        return Success(value=[i for i in self._items.values() if i.type == item_type])

    async def get_item(self, name: str) -> Result[RbacItem | None, DomainError]:
        if (failure := self._unavailable("get_item")) is not None:
            return failure
        return Success(value=self._items.get(name))

    async def put_item(self, item: RbacItem) -> Result[RbacItem, DomainError]:
        if (failure := self._unavailable("put_item")) is not None:
            return failure
        if item.name in self._items:
            return Failure(
                error=ItemError(
                    code=ErrorCode.DUPLICATE_ITEM,
                    message=f"Item '{item.name}' already exists",
                    item_name=item.name,
                )
            )
        self._items[item.name] = item
        return Success(value=item)

    async def delete_item(self, name: str) -> Result[bool, DomainError]:
        """Delete the item record only; callers remove its edges first."""
        if (failure := self._unavailable("delete_item")) is not None:
            return failure
        return Success(value=self._items.pop(name, None) is not None)

    # ------------------------------------------------------------------
    # Item children
    # ------------------------------------------------------------------

    async def list_edges(self) -> Result[list[RbacItemChild], DomainError]:
        if (failure := self._unavailable("list_edges")) is not None:
            return failure
        return Success(
            value=[RbacItemChild(parent=p, child=c) for p, c in self._edges]
        )

    async def list_edges_by_parent(self, parent: str) -> Result[list[str], DomainError]:
        if (failure := self._unavailable("list_edges_by_parent")) is not None:
            return failure
        return Success(value=list(self._children.get(parent, ())))

    async def put_edge(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        if (failure := self._unavailable("put_edge")) is not None:
            return failure
        for endpoint in (parent, child):
            if endpoint not in self._items:
                return Failure(
                    error=HierarchyError(
                        code=ErrorCode.INVALID_REFERENCE,
                        message=f"Item '{endpoint}' does not exist",
                        parent=parent,
                        child=child,
                    )
                )
        if (parent, child) in self._edges:
            return Failure(
                error=HierarchyError(
                    code=ErrorCode.DUPLICATE_EDGE,
                    message=f"Edge '{parent}' -> '{child}' already exists",
                    parent=parent,
                    child=child,
                )
            )
        self._edges[(parent, child)] = None
        self._children.setdefault(parent, {})[child] = None
        return Success(value=RbacItemChild(parent=parent, child=child))

    async def delete_edge(self, parent: str, child: str) -> Result[bool, DomainError]:
        if (failure := self._unavailable("delete_edge")) is not None:
            return failure
        if (parent, child) not in self._edges:
            return Success(value=False)
        self._drop_edge(parent, child)
        return Success(value=True)

    async def delete_edges_for_item(
        self, name: str
    ) -> Result[list[RbacItemChild], DomainError]:
        if (failure := self._unavailable("delete_edges_for_item")) is not None:
            return failure
        removed = [(p, c) for p, c in self._edges if name in (p, c)]
        for parent, child in removed:
            self._drop_edge(parent, child)
        return Success(value=[RbacItemChild(parent=p, child=c) for p, c in removed])

    def _drop_edge(self, parent: str, child: str) -> None:
        del self._edges[(parent, child)]
        siblings = self._children[parent]
        del siblings[child]
        if not siblings:
            del self._children[parent]

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    async def list_assignments(self) -> Result[list[RbacAssignment], DomainError]:
        if (failure := self._unavailable("list_assignments")) is not None:
            return failure
        return Success(
            value=[RbacAssignment(user_id=u, role=r) for u, r in self._assignments]
        )

    async def list_by_user(self, user_id: str) -> Result[list[str], DomainError]:
        if (failure := self._unavailable("list_by_user")) is not None:
            return failure
        return Success(value=list(self._user_roles.get(user_id, ())))

    async def get_assignment(
        self, user_id: str, role: str
    ) -> Result[RbacAssignment | None, DomainError]:
        if (failure := self._unavailable("get_assignment")) is not None:
            return failure
        if (user_id, role) not in self._assignments:
            return Success(value=None)
        return Success(value=RbacAssignment(user_id=user_id, role=role))

    async def put_assignment(
        self, user_id: str, role: str
    ) -> Result[RbacAssignment, DomainError]:
        if (failure := self._unavailable("put_assignment")) is not None:
            return failure
        if role not in self._items:
            return Failure(
                error=AssignmentError(
                    code=ErrorCode.INVALID_REFERENCE,
                    message=f"Item '{role}' does not exist",
                    user_id=user_id,
                    role=role,
                )
            )
        if (user_id, role) not in self._assignments:
            self._assignments[(user_id, role)] = None
            self._user_roles.setdefault(user_id, {})[role] = None
        return Success(value=RbacAssignment(user_id=user_id, role=role))

    async def delete_assignment(self, user_id: str, role: str) -> Result[None, DomainError]:
        if (failure := self._unavailable("delete_assignment")) is not None:
            return failure
        if (user_id, role) not in self._assignments:
            return Failure(
                error=AssignmentError(
                    code=ErrorCode.ASSIGNMENT_NOT_FOUND,
                    message=f"User '{user_id}' is not assigned '{role}'",
                    user_id=user_id,
                    role=role,
                )
            )
        self._drop_assignment(user_id, role)
        return Success(value=None)

    async def delete_all_for_user(self, user_id: str) -> Result[int, DomainError]:
        if (failure := self._unavailable("delete_all_for_user")) is not None:
            return failure
        roles = list(self._user_roles.get(user_id, ()))
        for role in roles:
            self._drop_assignment(user_id, role)
        return Success(value=len(roles))

    async def delete_assignments_for_role(
        self, role: str
    ) -> Result[list[RbacAssignment], DomainError]:
        if (failure := self._unavailable("delete_assignments_for_role")) is not None:
            return failure
        removed = [(u, r) for u, r in self._assignments if r == role]
        for user_id, _ in removed:
            self._drop_assignment(user_id, role)
        return Success(value=[RbacAssignment(user_id=u, role=r) for u, r in removed])

    def _drop_assignment(self, user_id: str, role: str) -> None:
        del self._assignments[(user_id, role)]
        roles = self._user_roles[user_id]
        del roles[role]
        if not roles:
            del self._user_roles[user_id]

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    async def list_rule_names(self) -> Result[list[str], DomainError]:
        if (failure := self._unavailable("list_rule_names")) is not None:
            return failure
        return Success(value=list(self._rules))

    async def put_rule(self, rule: RbacRule) -> Result[RbacRule, DomainError]:
        if (failure := self._unavailable("put_rule")) is not None:
            return failure
        self._rules[rule.name] = rule
        return Success(value=rule)

    async def delete_rule(self, name: str) -> Result[bool, DomainError]:
        if (failure := self._unavailable("delete_rule")) is not None:
            return failure
        return Success(value=self._rules.pop(name, None) is not None)
