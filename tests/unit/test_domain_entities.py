"""Unit tests for authorization domain entities and value objects."""

import pytest

from rbac.domain.entities import (
    RbacAssignment,
    RbacItem,
    RbacItemChild,
    RbacRule,
    RemovalImpact,
)
from rbac.domain.enums import ItemType


@pytest.mark.unit
class TestRbacItem:
    """Test RbacItem validation and helpers."""

    def test_permission_with_rule(self):
        item = RbacItem(name="updateOwnProfile", type=ItemType.PERMISSION, rule="IsOwnProfile")

        assert item.is_permission is True
        assert item.is_role is False
        assert item.has_rule is True

    def test_string_type_is_coerced(self):
        item = RbacItem(name="admin", type="role")

        assert item.type is ItemType.ROLE
        assert item.is_role is True

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, name):
        with pytest.raises(ValueError, match="name"):
            RbacItem(name=name, type=ItemType.ROLE)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            RbacItem(name="admin", type="group")

    def test_blank_rule_rejected(self):
        with pytest.raises(ValueError, match="rule"):
            RbacItem(name="admin", type=ItemType.ROLE, rule=" ")

    def test_items_compare_by_value(self):
        assert RbacItem(name="a", type=ItemType.ROLE) == RbacItem(name="a", type="role")


@pytest.mark.unit
class TestRelationshipEntities:
    """Test edge, assignment and rule entities."""

    def test_edge_requires_both_endpoints(self):
        with pytest.raises(ValueError):
            RbacItemChild(parent="admin", child="")

    def test_assignment_requires_user_and_role(self):
        with pytest.raises(ValueError):
            RbacAssignment(user_id="", role="admin")

    def test_rule_requires_name(self):
        with pytest.raises(ValueError):
            RbacRule(name="")

    def test_edges_are_hashable(self):
        edges = {RbacItemChild(parent="a", child="b"), RbacItemChild(parent="a", child="b")}

        assert len(edges) == 1


@pytest.mark.unit
class TestRemovalImpact:
    """Test RemovalImpact."""

    def test_affected_count(self):
        impact = RemovalImpact(
            item=RbacItem(name="user", type=ItemType.ROLE),
            edges_removed=(
                RbacItemChild(parent="manager", child="user"),
                RbacItemChild(parent="user", child="updateOwnProfile"),
            ),
            assignments_removed=(RbacAssignment(user_id="bob", role="user"),),
        )

        assert impact.affected_count == 3
        assert impact.dry_run is False
