"""Graph package - layout, simulation and interaction for the family graph."""

from kinforce.graph.models import LayoutLink, LayoutNode, ProximityCandidate, RenderView, ViewTransform
from kinforce.graph.simulation.engine import ForceSimulation
from kinforce.graph.interaction import DragController, DragPhase, GraphEvents, ZoomPan

__all__ = [
    "LayoutLink",
    "LayoutNode",
    "ProximityCandidate",
    "RenderView",
    "ViewTransform",
    "ForceSimulation",
    "DragController",
    "DragPhase",
    "GraphEvents",
    "ZoomPan",
]
