"""Tick-driven force simulation over the family layout."""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from kinforce.config import ForceSettings, LayoutSettings
from kinforce.graph.layout.generations import band_y, level_band_y, resolve_generations
from kinforce.graph.layout.initial import initial_positions
from kinforce.graph.models import LayoutLink, LayoutNode
from kinforce.graph.simulation.forces import (
    CollideForce,
    Force,
    LinkForce,
    ManyBodyForce,
    PositionXForce,
    PositionYForce,
)
from kinforce.models import Person, Relationship, RelationshipType, TreeData

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """Everything one tick reads and writes.

    The engine owns ``x``/``y``/``vx``/``vy``. The interaction layer only
    writes the ``fx``/``fy`` override slots (NaN when a node is free).
    """
    ids: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    levels: list[int] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)
    links: list[LayoutLink] = field(default_factory=list)

    x: np.ndarray = field(default_factory=lambda: np.zeros(0))
    y: np.ndarray = field(default_factory=lambda: np.zeros(0))
    vx: np.ndarray = field(default_factory=lambda: np.zeros(0))
    vy: np.ndarray = field(default_factory=lambda: np.zeros(0))
    fx: np.ndarray = field(default_factory=lambda: np.zeros(0))
    fy: np.ndarray = field(default_factory=lambda: np.zeros(0))
    target_x: np.ndarray = field(default_factory=lambda: np.zeros(0))
    target_y: np.ndarray = field(default_factory=lambda: np.zeros(0))

    alpha: float = 1.0
    alpha_target: float = 0.0
    alpha_min: float = 0.001
    alpha_decay: float = 0.0228
    velocity_decay: float = 0.4
    running: bool = True
    tick_count: int = 0
    pending: float = 0.0
    rng: np.random.Generator = field(default_factory=lambda: np.random.default_rng(0))

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def empty(self) -> bool:
        return not self.ids

    def pinned(self, i: int) -> bool:
        return not (math.isnan(self.fx[i]) or math.isnan(self.fy[i]))


def _link_params(rel_type: RelationshipType, forces: ForceSettings) -> tuple[float, float]:
    if rel_type == RelationshipType.SPOUSE:
        return forces.spouse_distance, forces.spouse_strength
    if rel_type == RelationshipType.SIBLING:
        return forces.sibling_distance, forces.sibling_strength
    return forces.parent_distance, forces.parent_strength


def build_state(
    people: list[Person],
    relationships: list[Relationship],
    visible_types: Iterable[RelationshipType],
    width: float,
    height: float,
    layout: Optional[LayoutSettings] = None,
    forces: Optional[ForceSettings] = None,
) -> SimulationState:
    """
    Build a fresh simulation state from the input data set.

    Levels and initial positions always use every relationship; only the
    links handed to the link force are filtered by ``visible_types``.
    """
    layout = layout or LayoutSettings()
    forces = forces or ForceSettings()
    state = SimulationState(
        alpha_min=forces.alpha_min,
        alpha_decay=forces.alpha_decay,
        velocity_decay=forces.velocity_decay,
        rng=np.random.default_rng(forces.seed),
    )
    if not people:
        state.running = False
        return state

    levels = resolve_generations(people, relationships)
    start_y, min_level = level_band_y(levels, height, layout.generation_gap)
    placed = initial_positions(people, relationships, levels, width, height, layout)

    state.ids = [p.id for p in people]
    state.people = list(people)
    state.levels = [levels[p.id] for p in people]
    state.index = {pid: i for i, pid in enumerate(state.ids)}

    state.target_x = np.array([placed[p.id][0] for p in people], dtype=float)
    state.target_y = np.array(
        [band_y(levels[p.id], start_y, min_level, layout.generation_gap) for p in people],
        dtype=float,
    )
    state.x = state.target_x.copy()
    state.y = state.target_y.copy()
    n = len(people)
    state.vx = np.zeros(n)
    state.vy = np.zeros(n)
    state.fx = np.full(n, np.nan)
    state.fy = np.full(n, np.nan)

    visible = set(visible_types)
    skipped = 0
    for r in relationships:
        if r.type not in visible:
            continue
        s = state.index.get(r.source)
        t = state.index.get(r.target)
        if s is None or t is None:
            skipped += 1
            continue
        if s == t:
            logger.debug(f"Skipping self-loop relationship {r.id} on {r.source}")
            continue
        distance, strength = _link_params(r.type, forces)
        state.links.append(LayoutLink(r.id, s, t, r.type, distance, strength))
    if skipped:
        logger.debug(f"Skipped {skipped} relationships with unknown endpoints")

    return state


def default_forces(forces: Optional[ForceSettings] = None) -> list[Force]:
    forces = forces or ForceSettings()
    return [
        LinkForce(),
        ManyBodyForce(forces.charge_strength),
        CollideForce(forces.collide_radius, forces.collide_iterations),
        PositionYForce(forces.y_strength),
        PositionXForce(forces.x_strength),
    ]


def initialize_forces(state: SimulationState, forces: list[Force]) -> None:
    for force in forces:
        force.initialize(state)


def step(state: SimulationState, forces: list[Force]) -> SimulationState:
    """Run exactly one tick."""
    if state.empty:
        return state

    state.alpha += (state.alpha_target - state.alpha) * state.alpha_decay

    x, y, vx, vy = state.x, state.y, state.vx, state.vy
    dvx = np.zeros_like(x)
    dvy = np.zeros_like(y)
    for force in forces:
        fx, fy = force.apply(state, x, y, vx, vy, state.alpha)
        dvx += fx
        dvy += fy

    keep = 1 - state.velocity_decay
    new_vx = (vx + dvx) * keep
    new_vy = (vy + dvy) * keep
    new_x = x + new_vx
    new_y = y + new_vy

    pinned_x = ~np.isnan(state.fx)
    pinned_y = ~np.isnan(state.fy)
    new_x[pinned_x] = state.fx[pinned_x]
    new_vx[pinned_x] = 0.0
    new_y[pinned_y] = state.fy[pinned_y]
    new_vy[pinned_y] = 0.0

    state.x, state.y, state.vx, state.vy = new_x, new_y, new_vx, new_vy
    state.tick_count += 1
    return state


def advance(
    state: SimulationState,
    dt: float,
    forces: list[Force],
    settings: Optional[ForceSettings] = None,
) -> SimulationState:
    """
    Advance the simulation by ``dt`` seconds of wall time.

    Whole ticks are run at ``tick_rate`` Hz; the fractional remainder carries
    over to the next call. At most ``max_ticks_per_advance`` ticks run per call
    so a stalled host does not trigger a long catch-up burst. Once cooled
    (alpha below alpha_min with no alpha target) the state stops and further
    calls are no-ops until reheated.

    Callable from any host loop: a UI timer, a thread or a test.
    """
    settings = settings or ForceSettings()
    if not state.running or state.empty:
        return state

    state.pending += max(dt, 0.0) * settings.tick_rate
    ticks = int(state.pending)
    state.pending -= ticks
    ticks = min(ticks, settings.max_ticks_per_advance)

    for _ in range(ticks):
        step(state, forces)
        if state.alpha < state.alpha_min and state.alpha_target <= 0:
            state.running = False
            state.pending = 0.0
            logger.debug(f"Simulation cooled after {state.tick_count} ticks")
            break
    return state


class ForceSimulation:
    """
    Facade over the simulation state and its forces.

    Usage:
        sim = ForceSimulation()
        sim.load(tree, visible_types, width=1200, height=800)
        sim.advance(1 / 60)
        sim.pin("p1", 100, 200)
    """

    def __init__(self, layout: Optional[LayoutSettings] = None, forces: Optional[ForceSettings] = None):
        self.layout = layout or LayoutSettings()
        self.force_settings = forces or ForceSettings()
        self.state = SimulationState(running=False)
        self.forces: list[Force] = []

    # ─────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────

    def load(self, tree: TreeData, visible_types: Iterable[RelationshipType],
             width: float, height: float) -> SimulationState:
        """Discard all previous state and rebuild from the data set."""
        self.state = build_state(
            tree.people, tree.relationships, visible_types, width, height,
            self.layout, self.force_settings,
        )
        self.forces = default_forces(self.force_settings)
        initialize_forces(self.state, self.forces)
        logger.info(f"Loaded {len(self.state)} nodes and {len(self.state.links)} links")
        return self.state

    def advance(self, dt: float) -> SimulationState:
        return advance(self.state, dt, self.forces, self.force_settings)

    def tick(self, n: int = 1) -> SimulationState:
        """Run ``n`` ticks regardless of the running flag."""
        for _ in range(n):
            step(self.state, self.forces)
        return self.state

    def stop(self) -> None:
        self.state.running = False

    def reheat(self, alpha_target: Optional[float] = None) -> None:
        """Set an alpha target and resume ticking."""
        if alpha_target is None:
            alpha_target = self.force_settings.drag_alpha_target
        self.state.alpha_target = alpha_target
        self.state.running = not self.state.empty

    def release_heat(self) -> None:
        """Drop the alpha target so the layout cools down again."""
        self.state.alpha_target = 0.0

    @property
    def running(self) -> bool:
        return self.state.running

    # ─────────────────────────────────────────
    # Pin overrides (written by the interaction layer)
    # ─────────────────────────────────────────

    def pin(self, node_id: str, x: float, y: float) -> None:
        i = self.state.index[node_id]
        self.state.fx[i] = x
        self.state.fy[i] = y

    def unpin(self, node_id: str) -> None:
        i = self.state.index[node_id]
        self.state.fx[i] = np.nan
        self.state.fy[i] = np.nan

    # ─────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────

    def position(self, node_id: str) -> tuple[float, float]:
        i = self.state.index[node_id]
        return float(self.state.x[i]), float(self.state.y[i])

    def positions(self) -> dict[str, tuple[float, float]]:
        s = self.state
        return {pid: (float(s.x[i]), float(s.y[i])) for i, pid in enumerate(s.ids)}

    def level(self, node_id: str) -> int:
        return self.state.levels[self.state.index[node_id]]

    def node(self, node_id: str) -> LayoutNode:
        return snapshot_node(self.state, self.state.index[node_id])

    def nodes(self) -> list[LayoutNode]:
        return [snapshot_node(self.state, i) for i in range(len(self.state))]

    def layout_links(self) -> list[LayoutLink]:
        return list(self.state.links)


def snapshot_node(state: SimulationState, i: int) -> LayoutNode:
    """Copy one node's arrays into a LayoutNode record."""
    fx = None if math.isnan(state.fx[i]) else float(state.fx[i])
    fy = None if math.isnan(state.fy[i]) else float(state.fy[i])
    return LayoutNode(
        id=state.ids[i],
        person=state.people[i],
        x=float(state.x[i]),
        y=float(state.y[i]),
        vx=float(state.vx[i]),
        vy=float(state.vy[i]),
        fx=fx,
        fy=fy,
        level=state.levels[i],
        target_x=float(state.target_x[i]),
        target_y=float(state.target_y[i]),
    )
