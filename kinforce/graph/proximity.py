"""Nearest-node detection for drag-to-connect."""

import math
from typing import Iterable, Optional

from kinforce.graph.models import ProximityCandidate
from kinforce.graph.simulation.engine import SimulationState
from kinforce.models import Relationship


def find_proximity_candidate(
    state: SimulationState,
    dragged_id: str,
    px: float,
    py: float,
    threshold: float,
) -> Optional[ProximityCandidate]:
    """
    Return the node nearest to ``(px, py)`` strictly within ``threshold``.

    The dragged node itself is never a candidate. Nodes are scanned in input
    order and only a strictly smaller distance replaces the current best, so
    ties go to the first node found.
    """
    best: Optional[ProximityCandidate] = None
    best_distance = threshold
    for i, node_id in enumerate(state.ids):
        if node_id == dragged_id:
            continue
        distance = math.hypot(float(state.x[i]) - px, float(state.y[i]) - py)
        if distance < best_distance:
            best_distance = distance
            best = ProximityCandidate(node_id=node_id, distance=distance)
    return best


def are_connected(relationships: Iterable[Relationship], a: str, b: str) -> bool:
    """True if any relationship already joins a and b, in either direction."""
    return any(r.connects(a, b) for r in relationships)


def node_at(state: SimulationState, gx: float, gy: float, radius: float) -> Optional[str]:
    """Id of the node whose disc contains graph point (gx, gy), nearest first."""
    hit = find_proximity_candidate(state, "", gx, gy, radius)
    return hit.node_id if hit else None
