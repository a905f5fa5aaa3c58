"""Runtime-only layout records shared by the engine and the view."""

from dataclasses import dataclass, field
from typing import Optional

from kinforce.models import Person, RelationshipType


@dataclass
class LayoutNode:
    """A person with its simulated and pinned coordinates."""
    id: str
    person: Person
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None  # pinned while dragged
    fy: Optional[float] = None
    level: int = 0
    target_x: float = 0.0
    target_y: float = 0.0

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None


@dataclass
class LayoutLink:
    """A visible relationship participating in the link force."""
    id: str
    source: int  # node index
    target: int
    type: RelationshipType
    distance: float
    strength: float


@dataclass
class ProximityCandidate:
    """Nearest other node to the one being dragged."""
    node_id: str
    distance: float


@dataclass
class SnapIndicator:
    """Transient line from the dragged node to the candidate."""
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class ViewTransform:
    """Zoom/pan transform applied to the whole render group."""
    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, gx: float, gy: float) -> tuple[float, float]:
        return gx * self.k + self.x, gy * self.k + self.y

    def invert(self, px: float, py: float) -> tuple[float, float]:
        return (px - self.x) / self.k, (py - self.y) / self.k

    def to_svg(self) -> str:
        return f"translate({self.x:.2f},{self.y:.2f}) scale({self.k:.4f})"


@dataclass
class RenderView:
    """Per-frame inputs for drawing; none of this is ambient state."""
    width: int
    height: int
    selected_id: Optional[str] = None
    dark: bool = False
    transform: ViewTransform = field(default_factory=ViewTransform)
    candidate: Optional[ProximityCandidate] = None
    snap: Optional[SnapIndicator] = None
