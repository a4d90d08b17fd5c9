"""Hierarchy Graph: traversal and invariant checks over item edges.

The graph is a view over the persistence adapter; it holds no edge state
of its own apart from the optional child-list cache. Every traversal
visits each reachable node exactly once, however many paths lead to it.

Concurrency:
    The graph does not lock. Callers serialize mutations and run
    ``add_edge`` (reachability check + write) under an exclusive lock so two
    concurrent inserts cannot jointly close a cycle. RbacManager does this.

Cache:
    With a CacheProtocol the graph caches each parent's child list as JSON
    under ``rbac:children:<parent>``. Any successful mutation must call
    ``invalidate()`` before releasing the lock. Cache faults fall back to the
    adapter (fail-open).
    A child list read across an ``invalidate()`` is never written back, so
    lock-free readers cannot repopulate the cache with pre-mutation data.

Usage:
    graph = HierarchyGraph(adapter=adapter, logger=logger)
    result = await graph.add_edge("admin", "manager")
    descendants = await graph.descendants("admin")
"""

from collections import deque
from collections.abc import Awaitable, Callable

from rbac.core.enums import ErrorCode
from rbac.core.errors import DomainError
from rbac.core.result import Failure, Result, Success
from rbac.domain.entities import RbacItemChild
from rbac.domain.errors import HierarchyError, ItemError
from rbac.domain.protocols.cache_protocol import CacheProtocol
from rbac.domain.protocols.logger_protocol import LoggerProtocol
from rbac.domain.protocols.rbac_adapter_protocol import RbacAdapterProtocol

CACHE_PREFIX = "rbac:children"
CACHE_TTL_SECONDS = 300

# Decides whether traversal may enter a node (and therefore go past it).
Admission = Callable[[str], Awaitable[Result[bool, DomainError]]]


class HierarchyGraph:
    """Adapter-backed DAG of roles and permissions.

    Attributes:
        _adapter: Persistence adapter (system of record for edges).
        _logger: Structured logger.
        _cache: Optional child-list cache.
        _cache_ttl: TTL for cached child lists.
        _generation: Bumped by every invalidate(); a read that spans a bump
            does not populate the cache.
    """

    def __init__(
        self,
        adapter: RbacAdapterProtocol,
        logger: LoggerProtocol,
        cache: CacheProtocol | None = None,
        cache_ttl: int = CACHE_TTL_SECONDS,
    ) -> None:
        self._adapter = adapter
        self._logger = logger
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._generation = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def children(self, name: str) -> Result[list[str], DomainError]:
        """Direct children of ``name`` in edge insertion order."""
        cache_key = f"{CACHE_PREFIX}:{name}"
        if self._cache is not None:
            cached = await self._cache.get_json(cache_key)
            match cached:
                case Success(value=list() as child_names):
                    self._logger.debug("hierarchy_cache_hit", item=name)
                    return Success(value=[str(c) for c in child_names])
                case Failure(error=error):
                    self._logger.warning(
                        "hierarchy_cache_get_failed",
                        item=name,
                        error=str(error),
                    )

        generation = self._generation
        result = await self._adapter.list_edges_by_parent(name)
        if isinstance(result, Failure) or self._cache is None:
            return result

        # A mutation committed during the read; the list may predate it.
        if generation != self._generation:
            self._logger.debug("hierarchy_cache_write_skipped", item=name)
            return result

        stored = await self._cache.set_json(cache_key, result.value, ttl=self._cache_ttl)
        if isinstance(stored, Failure):
            self._logger.warning(
                "hierarchy_cache_set_failed",
                item=name,
                error=str(stored.error),
            )
        elif generation != self._generation:
            # Invalidated while the write was in flight; drop what we wrote.
            await self.invalidate()
        return result

    async def has_edge(self, parent: str, child: str) -> Result[bool, DomainError]:
        """True when the edge parent -> child exists."""
        result = await self.children(parent)
        if isinstance(result, Failure):
            return result
        return Success(value=child in result.value)

    async def has_path(self, source: str, target: str) -> Result[bool, DomainError]:
        """True when ``target`` is reachable from ``source`` (or equal to it)."""
        if source == target:
            return Success(value=True)

        visited = {source}
        frontier = deque([source])
        while frontier:
            current = frontier.popleft()
            result = await self.children(current)
            if isinstance(result, Failure):
                return result
            for child in result.value:
                if child == target:
                    return Success(value=True)
                if child not in visited:
                    visited.add(child)
                    frontier.append(child)
        return Success(value=False)

    async def descendants(self, name: str) -> Result[list[str], DomainError]:
        """Every item reachable from ``name`` via child edges (BFS order).

        ``name`` itself is not included.

        Returns:
            Failure(ItemError UNKNOWN_ITEM) if ``name`` does not exist.
        """
        exists = await self._require_item(name)
        if isinstance(exists, Failure):
            return exists

        order: list[str] = []
        visited = {name}
        frontier = deque([name])
        while frontier:
            current = frontier.popleft()
            result = await self.children(current)
            if isinstance(result, Failure):
                return result
            for child in result.value:
                if child not in visited:
                    visited.add(child)
                    order.append(child)
                    frontier.append(child)
        return Success(value=order)

    async def ancestors(self, name: str) -> Result[list[str], DomainError]:
        """Every item from which ``name`` is reachable (BFS order).

        ``name`` itself is not included.

        Returns:
            Failure(ItemError UNKNOWN_ITEM) if ``name`` does not exist.
        """
        exists = await self._require_item(name)
        if isinstance(exists, Failure):
            return exists

        edges = await self._adapter.list_edges()
        if isinstance(edges, Failure):
            return edges

        parents_of: dict[str, list[str]] = {}
        for edge in edges.value:
            parents_of.setdefault(edge.child, []).append(edge.parent)

        order: list[str] = []
        visited = {name}
        frontier = deque([name])
        while frontier:
            current = frontier.popleft()
            for parent in parents_of.get(current, ()):
                if parent not in visited:
                    visited.add(parent)
                    order.append(parent)
                    frontier.append(parent)
        return Success(value=order)

    async def search(
        self,
        source: str,
        target: str,
        *,
        admit: Admission,
        visited: set[str] | None = None,
        within: set[str] | None = None,
    ) -> Result[bool, DomainError]:
        """Depth-first search for an admitted path from source to target.

        Nodes are entered in edge insertion order. A node is entered only if
        ``admit(node)`` succeeds with True; a rejected node prunes every path
        through it. Each node is offered to ``admit`` at most once per
        ``visited`` set, so sharing one set across several sources (the
        roles of one user) never re-explores a subgraph.

        Args:
            source: Start node (an assigned role).
            target: Node being looked for.
            admit: Async gate for entering a node.
            visited: Shared visited set; a fresh one is used when omitted.
            within: Nodes that can still reach ``target``. Anything outside
                it is skipped without being offered to ``admit``.

        Returns:
            Success(True) once an admitted target is reached,
            Success(False) when the reachable admitted subgraph is exhausted,
            or the first Failure returned by ``admit`` or the adapter.
        """
        seen = set() if visited is None else visited
        stack = [source]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            if within is not None and current not in within:
                continue

            admitted = await admit(current)
            if isinstance(admitted, Failure):
                return admitted
            if not admitted.value:
                continue
            if current == target:
                return Success(value=True)

            result = await self.children(current)
            if isinstance(result, Failure):
                return result
            # Reverse so the first-inserted child is popped first.
            stack.extend(child for child in reversed(result.value) if child not in seen)
        return Success(value=False)

    async def validate(self) -> Result[list[RbacItemChild], DomainError]:
        """Scan the stored edge set for invariant violations.

        Useful after importing data written by another process.

        Returns:
            Success with the offending edges: edges whose endpoints do not
            exist, and edges that close a cycle. Empty list when the stored
            hierarchy is a valid DAG.
        """
        items = await self._adapter.list_items()
        if isinstance(items, Failure):
            return items
        edges = await self._adapter.list_edges()
        if isinstance(edges, Failure):
            return edges

        known = {item.name for item in items.value}
        offending: list[RbacItemChild] = []
        adjacency: dict[str, list[str]] = {}
        for edge in edges.value:
            if edge.parent not in known or edge.child not in known:
                offending.append(edge)
                continue
            adjacency.setdefault(edge.parent, []).append(edge.child)

        # Iterative three-colour DFS; a grey -> grey edge closes a cycle.
        white, grey, black = 0, 1, 2
        colour = dict.fromkeys(known, white)
        for root in known:
            if colour[root] != white:
                continue
            colour[root] = grey
            stack = [(root, iter(adjacency.get(root, ())))]
            while stack:
                node, pending = stack[-1]
                child = next(pending, None)
                if child is None:
                    colour[node] = black
                    stack.pop()
                elif colour[child] == grey:
                    offending.append(RbacItemChild(parent=node, child=child))
                elif colour[child] == white:
                    colour[child] = grey
                    stack.append((child, iter(adjacency.get(child, ()))))
        return Success(value=offending)

    # ------------------------------------------------------------------
    # Mutations (callers hold the exclusive lock)
    # ------------------------------------------------------------------

    async def add_edge(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        """Insert parent -> child after checking every hierarchy invariant.

        Returns:
            Failure(HierarchyError INVALID_REFERENCE) if an endpoint is unknown.
            Failure(HierarchyError CYCLE_DETECTED) if child already reaches
                parent (self loops included).
            Failure(HierarchyError DUPLICATE_EDGE) if the edge exists.
            Success(RbacItemChild) once persisted.
        """
        for endpoint in (parent, child):
            found = await self._adapter.get_item(endpoint)
            if isinstance(found, Failure):
                return found
            if found.value is None:
                return Failure(
                    error=HierarchyError(
                        code=ErrorCode.INVALID_REFERENCE,
                        message=f"Item '{endpoint}' does not exist",
                        parent=parent,
                        child=child,
                    )
                )

        reachable = await self.has_path(child, parent)
        if isinstance(reachable, Failure):
            return reachable
        if reachable.value:
            return Failure(
                error=HierarchyError(
                    code=ErrorCode.CYCLE_DETECTED,
                    message=f"Adding '{parent}' -> '{child}' would create a cycle",
                    parent=parent,
                    child=child,
                )
            )

        exists = await self.has_edge(parent, child)
        if isinstance(exists, Failure):
            return exists
        if exists.value:
            return Failure(
                error=HierarchyError(
                    code=ErrorCode.DUPLICATE_EDGE,
                    message=f"Edge '{parent}' -> '{child}' already exists",
                    parent=parent,
                    child=child,
                )
            )

        result = await self._adapter.put_edge(parent, child)
        if isinstance(result, Success):
            await self.invalidate()
        return result

    async def remove_edge(self, parent: str, child: str) -> Result[RbacItemChild, DomainError]:
        """Delete parent -> child. Never cascades to other edges.

        Returns:
            Failure(HierarchyError EDGE_NOT_FOUND) if the edge is absent.
            Success(RbacItemChild) with the removed edge.
        """
        deleted = await self._adapter.delete_edge(parent, child)
        if isinstance(deleted, Failure):
            return deleted
        if not deleted.value:
            return Failure(
                error=HierarchyError(
                    code=ErrorCode.EDGE_NOT_FOUND,
                    message=f"Edge '{parent}' -> '{child}' does not exist",
                    parent=parent,
                    child=child,
                )
            )
        await self.invalidate()
        return Success(value=RbacItemChild(parent=parent, child=child))

    async def invalidate(self) -> None:
        """Drop every cached child list."""
        self._generation += 1
        if self._cache is None:
            return
        result = await self._cache.delete_pattern(f"{CACHE_PREFIX}:*")
        match result:
            case Success(value=count):
                self._logger.debug("hierarchy_cache_invalidated", keys=count)
            case Failure(error=error):
                self._logger.warning("hierarchy_cache_invalidation_failed", error=str(error))

    async def _require_item(self, name: str) -> Result[None, DomainError]:
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
        return Success(value=None)
