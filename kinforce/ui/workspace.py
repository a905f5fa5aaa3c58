"""In-memory tree holder that reacts to graph view events."""

import logging
import uuid
from enum import Enum
from typing import Callable, Optional

from kinforce.graph.proximity import are_connected
from kinforce.models import ALL_RELATIONSHIP_TYPES, Relationship, RelationshipType, TreeData

logger = logging.getLogger(__name__)


class ConnectionKind(str, Enum):
    """How the dragged person relates to the person it was dropped on."""
    PARENT = "PARENT"    # dragged is parent of target
    CHILD = "CHILD"      # dragged is child of target
    SPOUSE = "SPOUSE"
    SIBLING = "SIBLING"

    @classmethod
    def parse(cls, value: str) -> "ConnectionKind":
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"Unknown connection kind: {value!r}") from None


class TreeWorkspace:
    """
    Owns the authoritative tree while the graph view only proposes changes.

    Usage:
        ws = TreeWorkspace(tree)
        ws.handle_proximity_drop("a", "b")
        if ws.pending:
            ws.confirm_connection(ConnectionKind.SPOUSE)
    """

    def __init__(self, tree: Optional[TreeData] = None, on_change: Optional[Callable[[], None]] = None):
        self.tree = tree or TreeData()
        self.selected_id: Optional[str] = None
        self.visible_types: list[RelationshipType] = list(ALL_RELATIONSHIP_TYPES)
        self.dark = False
        self.pending: Optional[tuple[str, str]] = None
        self.on_change = on_change

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()

    def select(self, person_id: Optional[str]) -> None:
        self.selected_id = person_id
        self._changed()

    def toggle_rel_type(self, rel_type: RelationshipType) -> None:
        """Flip a type's visibility, keeping the canonical type order."""
        if rel_type in self.visible_types:
            self.visible_types = [t for t in self.visible_types if t != rel_type]
        else:
            self.visible_types = [t for t in ALL_RELATIONSHIP_TYPES if t in self.visible_types or t == rel_type]
        self._changed()

    def set_dark(self, dark: bool) -> None:
        self.dark = dark
        self._changed()

    def handle_proximity_drop(self, source_id: str, target_id: str) -> bool:
        """Store a connection proposal unless the pair is trivial or already linked."""
        if source_id == target_id:
            return False
        if are_connected(self.tree.relationships, source_id, target_id):
            logger.debug(f"Ignoring drop: {source_id} and {target_id} already connected")
            return False
        self.pending = (source_id, target_id)
        return True

    def confirm_connection(self, kind) -> Optional[Relationship]:
        """Turn the pending proposal into a relationship of the chosen kind."""
        if self.pending is None:
            return None
        if not isinstance(kind, ConnectionKind):
            kind = ConnectionKind.parse(kind)
        source, target = self.pending
        self.pending = None

        if kind == ConnectionKind.PARENT:
            return self.add_relationship(source, target, RelationshipType.PARENT)
        if kind == ConnectionKind.CHILD:
            return self.add_relationship(target, source, RelationshipType.PARENT)
        if kind == ConnectionKind.SPOUSE:
            return self.add_relationship(source, target, RelationshipType.SPOUSE)
        return self.add_relationship(source, target, RelationshipType.SIBLING)

    def cancel_connection(self) -> None:
        self.pending = None

    def add_relationship(self, source: str, target: str, rel_type: RelationshipType) -> Optional[Relationship]:
        """Append a relationship unless the same one (or a reversed spouse link) exists."""
        for r in self.tree.relationships:
            if r.source == source and r.target == target and r.type == rel_type:
                return None
            if rel_type == RelationshipType.SPOUSE and r.source == target and r.target == source:
                return None

        rel = Relationship(id=uuid.uuid4().hex[:12], source=source, target=target, type=rel_type)
        self.tree.relationships.append(rel)
        logger.info(f"Added {rel_type.value} relationship {source} -> {target}")
        self._changed()
        return rel

    def relationships_of(self, person_id: str) -> list[Relationship]:
        return [r for r in self.tree.relationships if person_id in (r.source, r.target)]

    def remove_relationship(self, rel_id: str) -> bool:
        before = len(self.tree.relationships)
        self.tree.relationships = [r for r in self.tree.relationships if r.id != rel_id]
        removed = len(self.tree.relationships) != before
        if removed:
            self._changed()
        return removed
