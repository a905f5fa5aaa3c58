"""Force kernels for the layout simulation.

Every force reads the same start-of-tick snapshot (positions and velocities)
and returns velocity deltas; none of them writes to the state. The engine sums
the deltas and integrates once per tick.
"""

from typing import Protocol, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from kinforce.graph.simulation.engine import SimulationState


Deltas = tuple[np.ndarray, np.ndarray]


def jiggle(rng: np.random.Generator, size=None):
    """Tiny random offset used to separate coincident nodes."""
    return (rng.random(size) - 0.5) * 1e-6


class Force(Protocol):
    def initialize(self, state: "SimulationState") -> None: ...

    def apply(self, state: "SimulationState", x: np.ndarray, y: np.ndarray,
              vx: np.ndarray, vy: np.ndarray, alpha: float) -> Deltas: ...


class LinkForce:
    """Pull linked endpoints toward each link's target distance."""

    def __init__(self):
        self._source = np.zeros(0, dtype=int)
        self._target = np.zeros(0, dtype=int)
        self._distance = np.zeros(0)
        self._strength = np.zeros(0)
        self._bias = np.zeros(0)

    def initialize(self, state: "SimulationState") -> None:
        links = state.links
        n = len(state.ids)
        self._source = np.array([l.source for l in links], dtype=int)
        self._target = np.array([l.target for l in links], dtype=int)
        self._distance = np.array([l.distance for l in links], dtype=float)
        self._strength = np.array([l.strength for l in links], dtype=float)

        # Low-degree endpoints move more, so hubs stay put
        count = np.bincount(np.concatenate([self._source, self._target]), minlength=n).astype(float)
        if len(links):
            cs = count[self._source]
            self._bias = cs / (cs + count[self._target])
        else:
            self._bias = np.zeros(0)

    def apply(self, state, x, y, vx, vy, alpha) -> Deltas:
        dvx = np.zeros_like(x)
        dvy = np.zeros_like(y)
        if not len(self._source):
            return dvx, dvy

        s, t = self._source, self._target
        dx = x[t] + vx[t] - x[s] - vx[s]
        dy = y[t] + vy[t] - y[s] - vy[s]
        zero_x = dx == 0
        zero_y = dy == 0
        if zero_x.any():
            dx[zero_x] = jiggle(state.rng, int(zero_x.sum()))
        if zero_y.any():
            dy[zero_y] = jiggle(state.rng, int(zero_y.sum()))

        length = np.sqrt(dx * dx + dy * dy)
        factor = (length - self._distance) / length * alpha * self._strength
        dx *= factor
        dy *= factor

        np.add.at(dvx, t, -dx * self._bias)
        np.add.at(dvy, t, -dy * self._bias)
        np.add.at(dvx, s, dx * (1 - self._bias))
        np.add.at(dvy, s, dy * (1 - self._bias))
        return dvx, dvy


class ManyBodyForce:
    """All-pairs repulsion (negative strength) or attraction."""

    def __init__(self, strength: float = -800.0, distance_min: float = 1.0):
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def initialize(self, state) -> None:
        pass

    def apply(self, state, x, y, vx, vy, alpha) -> Deltas:
        n = len(x)
        if n < 2:
            return np.zeros_like(x), np.zeros_like(y)

        # dx[i, j] points from node i to node j
        dx = x[np.newaxis, :] - x[:, np.newaxis]
        dy = y[np.newaxis, :] - y[:, np.newaxis]
        off_diag = ~np.eye(n, dtype=bool)

        coincident = off_diag & (dx == 0) & (dy == 0)
        if coincident.any():
            k = int(coincident.sum())
            dx[coincident] = jiggle(state.rng, k)
            dy[coincident] = jiggle(state.rng, k)

        d2 = np.maximum(dx * dx + dy * dy, self.distance_min2)
        w = np.where(off_diag, self.strength * alpha / d2, 0.0)
        return (dx * w).sum(axis=1), (dy * w).sum(axis=1)


class CollideForce:
    """Push overlapping discs apart, several passes per tick."""

    def __init__(self, radius: float = 50.0, iterations: int = 2, strength: float = 1.0):
        self.radius = radius
        self.iterations = iterations
        self.strength = strength

    def initialize(self, state) -> None:
        pass

    def apply(self, state, x, y, vx, vy, alpha) -> Deltas:
        n = len(x)
        if n < 2:
            return np.zeros_like(x), np.zeros_like(y)

        reach = self.radius * 2
        upper = np.triu(np.ones((n, n), dtype=bool), k=1)
        wvx = vx.copy()
        wvy = vy.copy()

        for _ in range(self.iterations):
            px = x + wvx
            py = y + wvy
            # dx[i, j] points from node j to node i
            dx = px[:, np.newaxis] - px[np.newaxis, :]
            dy = py[:, np.newaxis] - py[np.newaxis, :]
            d2 = dx * dx + dy * dy
            overlap = upper & (d2 < reach * reach)
            if not overlap.any():
                break

            zero_x = overlap & (dx == 0)
            zero_y = overlap & (dy == 0)
            if zero_x.any():
                dx[zero_x] = jiggle(state.rng, int(zero_x.sum()))
            if zero_y.any():
                dy[zero_y] = jiggle(state.rng, int(zero_y.sum()))
            d2 = dx * dx + dy * dy

            length = np.sqrt(np.where(overlap, d2, 1.0))
            push = np.where(overlap, (reach - length) / length * self.strength, 0.0)
            # Equal radii: each disc takes half of the correction
            cx = dx * push * 0.5
            cy = dy * push * 0.5
            wvx += cx.sum(axis=1) - cx.sum(axis=0)
            wvy += cy.sum(axis=1) - cy.sum(axis=0)

        return wvx - vx, wvy - vy


class PositionXForce:
    """Weak pull toward each node's heuristic x."""

    def __init__(self, strength: float = 0.2):
        self.strength = strength

    def initialize(self, state) -> None:
        pass

    def apply(self, state, x, y, vx, vy, alpha) -> Deltas:
        return (state.target_x - x) * self.strength * alpha, np.zeros_like(y)


class PositionYForce:
    """Strong pull toward each node's generation band."""

    def __init__(self, strength: float = 3.0):
        self.strength = strength

    def initialize(self, state) -> None:
        pass

    def apply(self, state, x, y, vx, vy, alpha) -> Deltas:
        return np.zeros_like(x), (state.target_y - y) * self.strength * alpha
