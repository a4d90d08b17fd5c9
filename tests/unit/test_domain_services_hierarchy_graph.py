"""Unit tests for HierarchyGraph.

Tests cover:
- Edge insertion invariants (references, self loops, cycles, duplicates)
- Edge removal without cascade
- Traversals (descendants/ancestors/has_path) visiting nodes once
- Admission-gated search
- Integrity scan of externally written edges
- Child-list cache (hits, writes, invalidation, fail-open)
- Cache coherence across concurrent mutations
- Search restricted to nodes that reach the target
- Randomized acyclicity
"""

import asyncio
import random
from collections import Counter
from unittest.mock import AsyncMock, MagicMock

import pytest

from rbac.core.enums import ErrorCode
from rbac.core.errors import DomainError
from rbac.core.result import Failure, Success
from rbac.domain.entities import RbacItem, RbacItemChild
from rbac.domain.enums import ItemType
from rbac.domain.services.hierarchy_graph import HierarchyGraph
from rbac.infrastructure.persistence.in_memory_adapter import InMemoryRbacAdapter
from tests.conftest import DictCache


class CountingAdapter(InMemoryRbacAdapter):
    """In-memory adapter recording child-list lookups."""

    def __init__(self) -> None:
        super().__init__()
        self.child_lookups: Counter[str] = Counter()

    async def list_edges_by_parent(self, parent):
        self.child_lookups[parent] += 1
        return await super().list_edges_by_parent(parent)


async def seed(adapter, names, edges=()):
    for name in names:
        await adapter.put_item(RbacItem(name=name, type=ItemType.ROLE))
    for parent, child in edges:
        await adapter.put_edge(parent, child)


@pytest.fixture
def graph_adapter():
    return CountingAdapter()


@pytest.fixture
def graph(graph_adapter, mock_logger):
    return HierarchyGraph(adapter=graph_adapter, logger=mock_logger)


@pytest.mark.unit
class TestAddEdge:
    """Test add_edge invariants."""

    @pytest.mark.asyncio
    async def test_adds_edge(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin", "manager"])

        result = await graph.add_edge("admin", "manager")

        assert result == Success(value=RbacItemChild(parent="admin", child="manager"))
        assert await graph.children("admin") == Success(value=["manager"])

    @pytest.mark.asyncio
    async def test_unknown_endpoint_is_invalid_reference(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin"])

        result = await graph.add_edge("admin", "ghost")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_REFERENCE

    @pytest.mark.asyncio
    async def test_self_loop_is_cycle(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin"])

        result = await graph.add_edge("admin", "admin")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CYCLE_DETECTED

    @pytest.mark.asyncio
    async def test_back_edge_is_cycle(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin", "manager", "user"], [("admin", "manager"), ("manager", "user")])

        result = await graph.add_edge("user", "admin")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CYCLE_DETECTED
        assert (result.error.parent, result.error.child) == ("user", "admin")
        assert await graph.children("user") == Success(value=[])

    @pytest.mark.asyncio
    async def test_duplicate_edge(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin", "manager"], [("admin", "manager")])

        result = await graph.add_edge("admin", "manager")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.DUPLICATE_EDGE

    @pytest.mark.asyncio
    async def test_diamond_is_not_a_cycle(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b", "c", "d"], [("a", "b"), ("a", "c"), ("b", "d")])

        result = await graph.add_edge("c", "d")

        assert isinstance(result, Success)


@pytest.mark.unit
class TestRemoveEdge:
    """Test remove_edge."""

    @pytest.mark.asyncio
    async def test_missing_edge(self, graph, graph_adapter):
        await seed(graph_adapter, ["admin", "manager"])

        result = await graph.remove_edge("admin", "manager")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.EDGE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_removal_does_not_cascade(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b", "c"], [("a", "b"), ("b", "c")])

        result = await graph.remove_edge("a", "b")

        assert isinstance(result, Success)
        assert await graph.children("b") == Success(value=["c"])
        assert await graph.descendants("a") == Success(value=[])


@pytest.mark.unit
class TestTraversal:
    """Test traversal helpers."""

    @pytest.mark.asyncio
    async def test_descendants_visit_shared_nodes_once(self, graph, graph_adapter):
        await seed(
            graph_adapter,
            ["a", "b", "c", "d", "e"],
            [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"), ("d", "e")],
        )

        result = await graph.descendants("a")

        assert result == Success(value=["b", "c", "d", "e"])
        assert all(count == 1 for count in graph_adapter.child_lookups.values())

    @pytest.mark.asyncio
    async def test_ancestors(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b", "c", "d"], [("a", "b"), ("b", "d"), ("c", "d")])

        result = await graph.ancestors("d")

        assert result == Success(value=["b", "c", "a"])

    @pytest.mark.asyncio
    async def test_unknown_item(self, graph):
        result = await graph.descendants("ghost")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.UNKNOWN_ITEM

    @pytest.mark.asyncio
    async def test_has_path(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b", "c"], [("a", "b"), ("b", "c")])

        assert await graph.has_path("a", "c") == Success(value=True)
        assert await graph.has_path("c", "a") == Success(value=False)
        assert await graph.has_path("b", "b") == Success(value=True)


@pytest.mark.unit
class TestSearch:
    """Test admission-gated search."""

    @pytest.mark.asyncio
    async def test_rejected_node_prunes_paths_through_it(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "gate", "target"], [("a", "gate"), ("gate", "target")])

        async def admit(name: str):
            return Success(value=name != "gate")

        assert await graph.search("a", "target", admit=admit) == Success(value=False)

    @pytest.mark.asyncio
    async def test_alternative_path_grants(self, graph, graph_adapter):
        await seed(
            graph_adapter,
            ["a", "gate", "open", "target"],
            [("a", "gate"), ("a", "open"), ("gate", "target"), ("open", "target")],
        )

        async def admit(name: str):
            return Success(value=name != "gate")

        assert await graph.search("a", "target", admit=admit) == Success(value=True)

    @pytest.mark.asyncio
    async def test_depth_first_in_insertion_order(self, graph, graph_adapter):
        await seed(
            graph_adapter,
            ["r", "x", "x1", "y", "target"],
            [("r", "x"), ("r", "y"), ("x", "x1"), ("y", "target")],
        )
        offered: list[str] = []

        async def admit(name: str):
            offered.append(name)
            return Success(value=True)

        await graph.search("r", "target", admit=admit)

        assert offered == ["r", "x", "x1", "y", "target"]

    @pytest.mark.asyncio
    async def test_shared_visited_set_skips_explored_nodes(self, graph, graph_adapter):
        await seed(graph_adapter, ["r1", "r2", "shared", "target"], [("r1", "shared"), ("r2", "shared")])
        offered: list[str] = []

        async def admit(name: str):
            offered.append(name)
            return Success(value=True)

        visited: set[str] = set()
        await graph.search("r1", "target", admit=admit, visited=visited)
        await graph.search("r2", "target", admit=admit, visited=visited)

        assert offered == ["r1", "shared", "r2"]

    @pytest.mark.asyncio
    async def test_admission_failure_aborts(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b"], [("a", "b")])
        error = DomainError(code=ErrorCode.BACKEND_UNAVAILABLE, message="down")

        async def admit(name: str):
            return Failure(error=error)

        assert await graph.search("a", "b", admit=admit) == Failure(error=error)


@pytest.mark.unit
class TestValidate:
    """Test integrity scan."""

    @pytest.mark.asyncio
    async def test_clean_hierarchy(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b"], [("a", "b")])

        assert await graph.validate() == Success(value=[])

    @pytest.mark.asyncio
    async def test_reports_cycle_and_dangling_edges(self, graph, graph_adapter):
        await seed(graph_adapter, ["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")])
        await graph_adapter.put_item(RbacItem(name="gone", type=ItemType.ROLE))
        await graph_adapter.put_edge("a", "gone")
        await graph_adapter.delete_item("gone")

        result = await graph.validate()

        assert isinstance(result, Success)
        assert RbacItemChild(parent="a", child="gone") in result.value
        cycle_edges = [e for e in result.value if e.child != "gone"]
        assert len(cycle_edges) == 1
        assert cycle_edges[0] in {
            RbacItemChild(parent="a", child="b"),
            RbacItemChild(parent="b", child="c"),
            RbacItemChild(parent="c", child="a"),
        }


@pytest.mark.unit
class TestChildListCache:
    """Test the optional cache."""

    @pytest.fixture
    def cache(self):
        cache = MagicMock()
        cache.get_json = AsyncMock(return_value=Success(value=None))
        cache.set_json = AsyncMock(return_value=Success(value=None))
        cache.delete_pattern = AsyncMock(return_value=Success(value=3))
        return cache

    @pytest.mark.asyncio
    async def test_miss_reads_adapter_and_stores(self, graph_adapter, mock_logger, cache):
        await seed(graph_adapter, ["a", "b"], [("a", "b")])
        graph = HierarchyGraph(adapter=graph_adapter, logger=mock_logger, cache=cache, cache_ttl=60)

        result = await graph.children("a")

        assert result == Success(value=["b"])
        cache.set_json.assert_awaited_once_with("rbac:children:a", ["b"], ttl=60)

    @pytest.mark.asyncio
    async def test_hit_skips_adapter(self, graph_adapter, mock_logger, cache):
        cache.get_json.return_value = Success(value=["cached"])
        graph = HierarchyGraph(adapter=graph_adapter, logger=mock_logger, cache=cache)

        result = await graph.children("a")

        assert result == Success(value=["cached"])
        assert graph_adapter.child_lookups["a"] == 0

    @pytest.mark.asyncio
    async def test_cache_fault_falls_back_to_adapter(self, graph_adapter, mock_logger, cache):
        await seed(graph_adapter, ["a", "b"], [("a", "b")])
        cache.get_json.return_value = Failure(
            error=DomainError(code=ErrorCode.BACKEND_UNAVAILABLE, message="redis down")
        )
        graph = HierarchyGraph(adapter=graph_adapter, logger=mock_logger, cache=cache)

        result = await graph.children("a")

        assert result == Success(value=["b"])
        mock_logger.warning.assert_any_call(
            "hierarchy_cache_get_failed", item="a", error="backend_unavailable: redis down"
        )

    @pytest.mark.asyncio
    async def test_mutations_invalidate(self, graph_adapter, mock_logger, cache):
        await seed(graph_adapter, ["a", "b"])
        graph = HierarchyGraph(adapter=graph_adapter, logger=mock_logger, cache=cache)

        await graph.add_edge("a", "b")
        await graph.remove_edge("a", "b")

        assert cache.delete_pattern.await_count == 2
        cache.delete_pattern.assert_awaited_with("rbac:children:*")


@pytest.mark.unit
class TestRestrictedSearch:
    """Test search limited to nodes that can reach the target."""

    @pytest.mark.asyncio
    async def test_nodes_outside_within_are_never_admitted(self, graph, graph_adapter):
        await seed(
            graph_adapter,
            ["r", "side", "mid", "target"],
            [("r", "side"), ("r", "mid"), ("mid", "target")],
        )
        offered: list[str] = []

        async def admit(name: str):
            offered.append(name)
            return Success(value=True)

        result = await graph.search(
            "r", "target", admit=admit, within={"r", "mid", "target"}
        )

        assert result == Success(value=True)
        assert offered == ["r", "mid", "target"]

    @pytest.mark.asyncio
    async def test_source_outside_within_is_denied(self, graph, graph_adapter):
        await seed(graph_adapter, ["r", "target"])

        async def admit(name: str):
            raise AssertionError("admit must not be called")

        result = await graph.search("r", "target", admit=admit, within={"target"})

        assert result == Success(value=False)


class StallingAdapter(InMemoryRbacAdapter):
    """Pauses the first child-list read of ``parent`` after reading it."""

    def __init__(self, parent: str) -> None:
        super().__init__()
        self.parent = parent
        self.reading = asyncio.Event()
        self.release = asyncio.Event()

    async def list_edges_by_parent(self, parent):
        result = await super().list_edges_by_parent(parent)
        if parent == self.parent and not self.reading.is_set():
            self.reading.set()
            await self.release.wait()
        return result


class StallingCache(DictCache):
    """Pauses the first set_json before storing the value."""

    def __init__(self) -> None:
        super().__init__()
        self.writing = asyncio.Event()
        self.release = asyncio.Event()

    async def set_json(self, key, value, ttl=None):
        if not self.writing.is_set():
            self.writing.set()
            await self.release.wait()
        return await super().set_json(key, value, ttl=ttl)


@pytest.mark.unit
class TestCacheCoherence:
    """Reads overlapping a mutation never leave stale child lists behind."""

    @pytest.mark.asyncio
    async def test_read_spanning_mutation_is_not_cached(self, mock_logger):
        adapter = StallingAdapter(parent="a")
        await seed(adapter, ["a", "b"])
        cache = DictCache()
        graph = HierarchyGraph(adapter=adapter, logger=mock_logger, cache=cache)

        stale_read = asyncio.create_task(graph.children("a"))
        await asyncio.wait_for(adapter.reading.wait(), timeout=1)

        assert isinstance(await graph.add_edge("a", "b"), Success)

        adapter.release.set()
        assert await stale_read == Success(value=[])

        assert "rbac:children:a" not in cache.values
        assert await graph.children("a") == Success(value=["b"])
        assert cache.values["rbac:children:a"] == ["b"]

    @pytest.mark.asyncio
    async def test_write_in_flight_during_invalidation_is_dropped(self, mock_logger):
        adapter = InMemoryRbacAdapter()
        await seed(adapter, ["a", "b"], [("a", "b")])
        cache = StallingCache()
        graph = HierarchyGraph(adapter=adapter, logger=mock_logger, cache=cache)

        read = asyncio.create_task(graph.children("a"))
        await asyncio.wait_for(cache.writing.wait(), timeout=1)

        await graph.invalidate()
        cache.release.set()
        await read

        assert "rbac:children:a" not in cache.values


@pytest.mark.unit
class TestAcyclicity:
    """No sequence of add_edge calls can produce a cycle."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed_value", [3, 17, 42])
    async def test_random_edge_attempts_keep_dag(self, graph, graph_adapter, seed_value):
        rng = random.Random(seed_value)
        names = [f"n{i}" for i in range(7)]
        await seed(graph_adapter, names)
        added = 0

        for _ in range(120):
            parent, child = rng.choice(names), rng.choice(names)
            result = await graph.add_edge(parent, child)
            match result:
                case Success():
                    added += 1
                case Failure(error=error) if error.code == ErrorCode.CYCLE_DETECTED:
                    assert await graph.has_path(child, parent) == Success(value=True)
                case Failure(error=error):
                    assert error.code == ErrorCode.DUPLICATE_EDGE

        assert await graph.validate() == Success(value=[])
        assert len((await graph_adapter.list_edges()).value) == added
