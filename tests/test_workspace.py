"""Test the in-memory workspace that answers graph events."""

import pytest

from kinforce.models import ALL_RELATIONSHIP_TYPES, RelationshipType, TreeData
from kinforce.ui.workspace import ConnectionKind, TreeWorkspace
from tests.factories import parent, person, spouse


@pytest.fixture
def workspace():
    tree = TreeData(
        people=[person("a"), person("b"), person("c")],
        relationships=[parent("a", "b")],
    )
    return TreeWorkspace(tree)


class TestProximityDrop:
    """Tests for connection proposals."""

    def test_connected_pair_ignored(self, workspace):
        """A and B share a parent edge; dropping either way proposes nothing."""
        assert not workspace.handle_proximity_drop("a", "b")
        assert not workspace.handle_proximity_drop("b", "a")
        assert workspace.pending is None

    def test_self_drop_ignored(self, workspace):
        assert not workspace.handle_proximity_drop("c", "c")
        assert workspace.pending is None

    def test_unconnected_pair_pending(self, workspace):
        assert workspace.handle_proximity_drop("a", "c")
        assert workspace.pending == ("a", "c")

    def test_confirm_parent(self, workspace):
        workspace.handle_proximity_drop("c", "b")
        rel = workspace.confirm_connection(ConnectionKind.PARENT)
        assert (rel.source, rel.target, rel.type) == ("c", "b", RelationshipType.PARENT)
        assert workspace.pending is None

    def test_confirm_child_reverses(self, workspace):
        workspace.handle_proximity_drop("c", "a")
        rel = workspace.confirm_connection("child")
        assert (rel.source, rel.target) == ("a", "c")

    def test_confirm_spouse_and_sibling(self, workspace):
        workspace.handle_proximity_drop("a", "c")
        assert workspace.confirm_connection("SPOUSE").type == RelationshipType.SPOUSE
        workspace.handle_proximity_drop("b", "c")
        assert workspace.confirm_connection(ConnectionKind.SIBLING).type == RelationshipType.SIBLING

    def test_confirm_without_pending(self, workspace):
        assert workspace.confirm_connection(ConnectionKind.SPOUSE) is None

    def test_cancel(self, workspace):
        workspace.handle_proximity_drop("a", "c")
        workspace.cancel_connection()
        assert workspace.pending is None

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ConnectionKind.parse("cousin")


class TestRelationships:
    """Tests for adding and removing relationships."""

    def test_duplicate_rejected(self, workspace):
        assert workspace.add_relationship("a", "b", RelationshipType.PARENT) is None
        assert len(workspace.tree.relationships) == 1

    def test_reversed_spouse_rejected(self):
        ws = TreeWorkspace(TreeData(people=[person("a"), person("b")], relationships=[spouse("a", "b")]))
        assert ws.add_relationship("b", "a", RelationshipType.SPOUSE) is None

    def test_remove(self, workspace):
        rel_id = workspace.tree.relationships[0].id
        assert workspace.remove_relationship(rel_id)
        assert not workspace.remove_relationship(rel_id)

    def test_relationships_of_then_remove(self, workspace):
        """The detail panel lists a person's links and can delete them."""
        workspace.add_relationship("c", "a", RelationshipType.SIBLING)
        assert [r.target for r in workspace.relationships_of("a")] == ["b", "a"]
        for rel in workspace.relationships_of("a"):
            workspace.remove_relationship(rel.id)
        assert workspace.relationships_of("a") == []
        assert workspace.tree.relationships == []

    def test_on_change_called(self):
        calls = []
        ws = TreeWorkspace(TreeData(people=[person("a"), person("b")]), on_change=lambda: calls.append(1))
        ws.add_relationship("a", "b", RelationshipType.SIBLING)
        ws.select("a")
        assert len(calls) == 2


class TestFilters:
    """Tests for visibility toggles."""

    def test_toggle_off_and_on_keeps_order(self, workspace):
        workspace.toggle_rel_type(RelationshipType.PARENT)
        assert RelationshipType.PARENT not in workspace.visible_types
        workspace.toggle_rel_type(RelationshipType.PARENT)
        assert workspace.visible_types == list(ALL_RELATIONSHIP_TYPES)

    def test_select(self, workspace):
        workspace.select("b")
        assert workspace.selected_id == "b"
