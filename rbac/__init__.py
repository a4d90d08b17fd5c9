"""Hierarchical role-based access control engine.

Layers:
    rbac.core            Result types, errors, settings, container, locks
    rbac.domain          Entities, events, protocols, Rule Registry, Hierarchy Graph
    rbac.application     RbacManager (authorization engine)
    rbac.infrastructure  Logging, events, persistence and cache adapters
"""
