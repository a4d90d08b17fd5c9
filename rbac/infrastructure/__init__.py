"""Infrastructure layer - Adapters for the authorization engine.

This layer contains implementations of domain protocols (ports):
- Persistence (in-memory reference backend)
- Cache (Redis hierarchy cache)
- Logging (structlog console adapter)
- Events (in-memory bus, logging handler)
"""
