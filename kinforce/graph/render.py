"""SVG scene generation from simulation state."""

from dataclasses import dataclass
from html import escape

from kinforce.graph.models import LayoutLink, RenderView
from kinforce.graph.simulation.engine import SimulationState
from kinforce.models import Gender, RelationshipType


@dataclass(frozen=True)
class Theme:
    """Colour constants; dark mode only swaps these."""
    text: str
    link: str
    node_stroke: str
    label_background: str
    spouse: str = "#ec4899"
    selected_fill: str = "#facc15"
    selected_stroke: str = "#ea580c"
    candidate: str = "#22c55e"
    female_fill: str = "#fbcfe8"
    male_fill: str = "#bfdbfe"
    other_fill: str = "#e5e7eb"
    background: str = "#fafafa"

    @classmethod
    def for_mode(cls, dark: bool) -> "Theme":
        if dark:
            return cls(
                text="#e5e7eb",
                link="#94a3b8",
                node_stroke="#1f2937",
                label_background="rgba(31, 41, 55, 0.8)",
                background="#111827",
            )
        return cls(
            text="#333333",
            link="#64748b",
            node_stroke="#fff",
            label_background="rgba(255, 255, 255, 0.8)",
        )

    def gender_fill(self, gender: Gender) -> str:
        if gender == Gender.FEMALE:
            return self.female_fill
        if gender == Gender.MALE:
            return self.male_fill
        return self.other_fill


def edge_path(link_type: RelationshipType, sx: float, sy: float, tx: float, ty: float,
              node_radius: float = 30.0) -> str:
    """
    SVG path data for one edge.

    Spouse edges are straight segments. Every other edge is a cubic curve
    whose control points sit on the vertical midpoint, giving the chart its
    drop look; it starts below the source disc and ends above the target disc.
    """
    if link_type == RelationshipType.SPOUSE:
        return f"M{sx:.1f},{sy:.1f} L{tx:.1f},{ty:.1f}"
    mid_y = (sy + ty) / 2
    return (
        f"M{sx:.1f},{sy + node_radius:.1f} "
        f"C{sx:.1f},{mid_y:.1f} {tx:.1f},{mid_y:.1f} {tx:.1f},{ty - node_radius:.1f}"
    )


def _edge(link: LayoutLink, state: SimulationState, theme: Theme, node_radius: float) -> str:
    sx, sy = float(state.x[link.source]), float(state.y[link.source])
    tx, ty = float(state.x[link.target]), float(state.y[link.target])
    d = edge_path(link.type, sx, sy, tx, ty, node_radius)
    if link.type == RelationshipType.SPOUSE:
        return f'<path d="{d}" stroke="{theme.spouse}" stroke-width="2" stroke-dasharray="5,5"/>'
    if link.type == RelationshipType.PARENT:
        return f'<path d="{d}" stroke="{theme.link}" stroke-width="2" marker-end="url(#arrowhead)"/>'
    return f'<path d="{d}" stroke="{theme.link}" stroke-width="2"/>'


def _node(i: int, state: SimulationState, view: RenderView, theme: Theme, node_radius: float) -> str:
    person = state.people[i]
    node_id = state.ids[i]
    selected = node_id == view.selected_id
    candidate = view.candidate is not None and view.candidate.node_id == node_id

    fill = theme.selected_fill if selected else theme.gender_fill(person.gender)
    if selected:
        stroke, stroke_width = theme.selected_stroke, 3
    else:
        stroke, stroke_width = theme.node_stroke, 1.5
    if candidate:
        stroke, stroke_width = theme.candidate, 4

    x, y = float(state.x[i]), float(state.y[i])
    return (
        f'<g id="node-{escape(node_id)}" data-id="{escape(node_id)}" '
        f'transform="translate({x:.1f},{y:.1f})" cursor="grab">'
        f'<circle class="node-circle" r="{node_radius:g}" fill="{fill}" '
        f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
        f'<rect rx="4" ry="4" x="-40" y="{node_radius + 5:g}" width="80" height="20" '
        f'fill="{theme.label_background}" stroke="none"/>'
        f'<text x="0" y="{node_radius + 18:g}" text-anchor="middle" font-size="10px" '
        f'font-weight="bold" fill="{theme.text}" stroke="none">{escape(person.display_name)}</text>'
        f'</g>'
    )


def render_scene(state: SimulationState, view: RenderView, node_radius: float = 30.0) -> str:
    """
    Inner SVG markup for one frame: edges, nodes, then the snap indicator on
    top, all under the zoom/pan transform. Empty state yields only the
    background.
    """
    theme = Theme.for_mode(view.dark)
    parts = [f'<rect width="100%" height="100%" fill="{theme.background}"/>']
    if state.empty:
        return "".join(parts)

    parts.append(
        '<defs><marker id="arrowhead" viewBox="0 -5 10 10" refX="8" refY="0" '
        'markerWidth="5" markerHeight="5" orient="auto">'
        f'<path d="M0,-5L10,0L0,5" fill="{theme.link}"/></marker></defs>'
    )
    parts.append(f'<g transform="{view.transform.to_svg()}">')

    parts.append('<g class="links" fill="none">')
    parts.extend(_edge(link, state, theme, node_radius) for link in state.links)
    parts.append("</g>")

    parts.append('<g class="nodes">')
    parts.extend(_node(i, state, view, theme, node_radius) for i in range(len(state)))
    parts.append("</g>")

    parts.append('<g class="interaction">')
    if view.snap is not None:
        s = view.snap
        parts.append(
            f'<line class="snap-line" x1="{s.x1:.1f}" y1="{s.y1:.1f}" x2="{s.x2:.1f}" y2="{s.y2:.1f}" '
            f'stroke="{theme.candidate}" stroke-width="3" stroke-dasharray="8,4" stroke-linecap="round"/>'
        )
    parts.append("</g>")

    parts.append("</g>")
    return "".join(parts)


def render_svg(state: SimulationState, view: RenderView, node_radius: float = 30.0) -> str:
    """Standalone SVG document for the current frame."""
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{view.width}" height="{view.height}" '
        f'viewBox="0 0 {view.width} {view.height}">'
        f"{render_scene(state, view, node_radius)}</svg>"
    )
