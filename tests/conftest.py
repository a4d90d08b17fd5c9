"""Shared pytest fixtures.

Provides:
1. Mocked collaborators (logger, event bus) for unit tests
2. Fresh in-memory adapter, registry and manager per test
3. The reference hierarchy used across authorization tests:

       admin ──► manager ──► user ──► updateOwnProfile* ──► updateProfile
         └──────────────────────────────────────────────────────▲

   (* gated by rule IsOwnProfile: params["targetUserId"] == user_id)
"""

from fnmatch import fnmatch
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from rbac.application.services.rbac_manager import RbacManager
from rbac.core.config import get_settings
from rbac.core.result import Success
from rbac.domain.services.rule_registry import RuleRegistry
from rbac.infrastructure.persistence.in_memory_adapter import InMemoryRbacAdapter


def is_own_profile(user_id, item, params):
    return params.get("targetUserId") == user_id


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru-cached; tests that patch env need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_logger():
    """Logger double satisfying LoggerProtocol."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest.fixture
def mock_event_bus():
    """Event bus double; ``publish`` is awaitable."""
    bus = MagicMock()
    bus.publish = AsyncMock()
    return bus


@pytest.fixture
def adapter():
    return InMemoryRbacAdapter()


@pytest.fixture
def registry():
    return RuleRegistry()


@pytest.fixture
def manager(adapter, registry, mock_event_bus, mock_logger):
    return RbacManager(
        adapter=adapter,
        rule_registry=registry,
        event_bus=mock_event_bus,
        logger=mock_logger,
    )


async def build_reference_hierarchy(manager: RbacManager) -> None:
    """Populate ``manager`` with the reference hierarchy and assignments."""
    await manager.add_rule("IsOwnProfile", is_own_profile)
    for role in ("admin", "manager", "user"):
        await manager.add_role(role)
    await manager.add_permission("updateProfile")
    await manager.add_permission("updateOwnProfile", rule="IsOwnProfile")

    for parent, child in (
        ("admin", "manager"),
        ("manager", "user"),
        ("user", "updateOwnProfile"),
        ("updateOwnProfile", "updateProfile"),
        ("admin", "updateProfile"),
    ):
        await manager.add_child(parent, child)

    await manager.assign("alice", "admin")
    await manager.assign("bob", "user")


@pytest_asyncio.fixture
async def reference_manager(manager):
    """Manager pre-loaded with the reference hierarchy."""
    await build_reference_hierarchy(manager)
    return manager


class DictCache:
    """In-process CacheProtocol double keeping JSON values in a dict."""

    def __init__(self) -> None:
        self.values: dict[str, object] = {}

    async def get_json(self, key):
        return Success(value=self.values.get(key))

    async def set_json(self, key, value, ttl=None):
        self.values[key] = value
        return Success(value=None)

    async def delete_pattern(self, pattern):
        doomed = [key for key in self.values if fnmatch(key, pattern)]
        for key in doomed:
            del self.values[key]
        return Success(value=len(doomed))
