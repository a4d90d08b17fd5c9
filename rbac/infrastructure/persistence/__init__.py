"""Persistence adapters implementing RbacAdapterProtocol."""

from rbac.infrastructure.persistence.in_memory_adapter import InMemoryRbacAdapter

__all__ = ["InMemoryRbacAdapter"]
