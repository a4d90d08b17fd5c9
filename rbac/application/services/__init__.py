"""Application services."""

from rbac.application.services.rbac_manager import RbacManager

__all__ = ["RbacManager"]
