"""Force simulation engine."""
from kinforce.graph.simulation.engine import (
    ForceSimulation,
    SimulationState,
    advance,
    build_state,
    default_forces,
    step,
)

__all__ = ["ForceSimulation", "SimulationState", "advance", "build_state", "default_forces", "step"]
