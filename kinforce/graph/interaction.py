"""Drag gestures, proximity proposals and zoom/pan for the graph view."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from kinforce.config import InteractionSettings
from kinforce.graph.models import ProximityCandidate, SnapIndicator, ViewTransform
from kinforce.graph.proximity import find_proximity_candidate
from kinforce.graph.simulation.engine import ForceSimulation
from kinforce.models import RelationshipType

logger = logging.getLogger(__name__)


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    PROXIMITY_ARMED = "proximity_armed"


@dataclass
class GraphEvents:
    """Callbacks fired toward the collaborator owning the tree data."""
    on_select_person: Optional[Callable[[str], None]] = None
    on_toggle_rel_type: Optional[Callable[[RelationshipType], None]] = None
    on_proximity_drop: Optional[Callable[[str, str], None]] = None

    def select_person(self, person_id: str) -> None:
        if self.on_select_person:
            self.on_select_person(person_id)

    def toggle_rel_type(self, rel_type: RelationshipType) -> None:
        if self.on_toggle_rel_type:
            self.on_toggle_rel_type(rel_type)

    def proximity_drop(self, source_id: str, target_id: str) -> None:
        if self.on_proximity_drop:
            self.on_proximity_drop(source_id, target_id)


class DragController:
    """
    State machine for a single drag gesture.

    IDLE -> DRAGGING on ``start``; every ``move`` re-evaluates the proximity
    candidate and switches between DRAGGING and PROXIMITY_ARMED; ``end``
    releases the pin, fires ``on_proximity_drop`` when armed, and returns to
    IDLE. A gesture that never moved past ``click_tolerance`` is a click.
    """

    def __init__(self, simulation: ForceSimulation, events: GraphEvents,
                 settings: Optional[InteractionSettings] = None):
        self.simulation = simulation
        self.events = events
        self.settings = settings or InteractionSettings()
        self._reset()

    def _reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.node_id: Optional[str] = None
        self.candidate: Optional[ProximityCandidate] = None
        self.snap: Optional[SnapIndicator] = None
        self._origin = (0.0, 0.0)
        self._offset = (0.0, 0.0)
        self._moved = False

    @property
    def active(self) -> bool:
        return self.phase != DragPhase.IDLE

    def start(self, node_id: str, x: float, y: float) -> None:
        """Grab a node: pin it where it is and heat the simulation.

        The pointer may grab the disc off-centre; that offset is kept for the
        whole gesture so the node does not jump under the pointer.
        """
        if self.active:
            self.cancel()
        self.phase = DragPhase.DRAGGING
        self.node_id = node_id
        self._origin = (x, y)
        self._moved = False
        nx, ny = self.simulation.position(node_id)
        self._offset = (nx - x, ny - y)
        self.simulation.pin(node_id, nx, ny)
        self.simulation.reheat()

    def move(self, x: float, y: float) -> Optional[ProximityCandidate]:
        """Move the pin and recompute the proximity candidate."""
        if not self.active:
            return None
        if not self._moved:
            ox, oy = self._origin
            if math.hypot(x - ox, y - oy) < self.settings.click_tolerance:
                return self.candidate
            self._moved = True

        nx, ny = x + self._offset[0], y + self._offset[1]
        self.simulation.pin(self.node_id, nx, ny)
        self.candidate = find_proximity_candidate(
            self.simulation.state, self.node_id, nx, ny, self.settings.proximity_threshold,
        )
        if self.candidate:
            cx, cy = self.simulation.position(self.candidate.node_id)
            self.snap = SnapIndicator(nx, ny, cx, cy)
            self.phase = DragPhase.PROXIMITY_ARMED
        else:
            self.snap = None
            self.phase = DragPhase.DRAGGING
        return self.candidate

    def end(self) -> None:
        """Release the pin and emit a click or a connection proposal."""
        if not self.active:
            return
        node_id = self.node_id
        candidate = self.candidate
        moved = self._moved

        self.simulation.unpin(node_id)
        self.simulation.release_heat()

        try:
            if not moved:
                self.events.select_person(node_id)
            elif candidate is not None:
                logger.debug(f"Proximity drop {node_id} -> {candidate.node_id}")
                self.events.proximity_drop(node_id, candidate.node_id)
        finally:
            self._reset()

    def cancel(self) -> None:
        """Drop the gesture without emitting anything."""
        if self.node_id is not None and self.node_id in self.simulation.state.index:
            self.simulation.unpin(self.node_id)
            self.simulation.release_heat()
        self._reset()

    def toggle_rel_type(self, rel_type: RelationshipType) -> None:
        self.events.toggle_rel_type(rel_type)


class ZoomPan:
    """Screen <-> graph transform with bounded scale."""

    def __init__(self, settings: Optional[InteractionSettings] = None):
        self.settings = settings or InteractionSettings()
        self.transform = ViewTransform()

    def _clamp(self, k: float) -> float:
        return min(max(k, self.settings.zoom_min), self.settings.zoom_max)

    def zoom_at(self, px: float, py: float, factor: float) -> ViewTransform:
        """Scale by ``factor`` keeping the screen point (px, py) fixed."""
        t = self.transform
        gx, gy = t.invert(px, py)
        k = self._clamp(t.k * factor)
        self.transform = ViewTransform(k=k, x=px - gx * k, y=py - gy * k)
        return self.transform

    def wheel_factor(self, delta_y: float) -> float:
        return math.pow(2, -delta_y * self.settings.wheel_step)

    def wheel(self, px: float, py: float, delta_y: float) -> ViewTransform:
        return self.zoom_at(px, py, self.wheel_factor(delta_y))

    def pan(self, dx: float, dy: float) -> ViewTransform:
        t = self.transform
        self.transform = ViewTransform(k=t.k, x=t.x + dx, y=t.y + dy)
        return self.transform

    def invert(self, px: float, py: float) -> tuple[float, float]:
        return self.transform.invert(px, py)

    def reset(self) -> ViewTransform:
        self.transform = ViewTransform()
        return self.transform
