"""Domain layer - pure authorization logic.

Structure:
- entities/: Items, edges, assignments, rule metadata, snapshots
- enums/: ItemType, RulePathPolicy
- errors/: RbacError taxonomy
- events/: Domain events (things that happened to the model)
- protocols/: Ports (persistence adapter, rule, logger, event bus, cache)
- services/: RuleRegistry and HierarchyGraph

The domain layer has NO dependencies on any framework or infrastructure.
"""
