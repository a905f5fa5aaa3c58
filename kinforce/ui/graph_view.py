"""Interactive force-directed family graph rendered with NiceGUI."""

import logging
import time
from typing import Optional

from nicegui import events, ui

from kinforce.config import Settings, settings as default_settings
from kinforce.graph.interaction import DragController, GraphEvents, ZoomPan
from kinforce.graph.models import RenderView
from kinforce.graph.proximity import node_at
from kinforce.graph.render import Theme, render_scene
from kinforce.graph.simulation.engine import ForceSimulation
from kinforce.models import ALL_RELATIONSHIP_TYPES, RelationshipType, TreeData

logger = logging.getLogger(__name__)

LEGEND_LABELS = {
    RelationshipType.PARENT: "Parent → Child",
    RelationshipType.SPOUSE: "Spouses",
    RelationshipType.SIBLING: "Siblings",
}

# The image is scaled by CSS, so the pointer is sent as a fraction of the
# displayed box and mapped back to image pixels on the server.
WHEEL_JS = """(e) => {
    e.preventDefault();
    const r = e.currentTarget.getBoundingClientRect();
    emit({
        deltaY: e.deltaY,
        fx: r.width ? (e.clientX - r.left) / r.width : 0.5,
        fy: r.height ? (e.clientY - r.top) / r.height : 0.5,
    });
}"""


class GraphView:
    """Force-simulated family graph with drag-to-connect.

    The view never mutates the tree: clicks, legend toggles and proximity
    drops are forwarded through ``GraphEvents`` and the owner re-supplies data
    with ``set_data``.
    """

    def __init__(self, graph_events: GraphEvents, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.width = self.config.ui.width
        self.height = self.config.ui.height
        self.simulation = ForceSimulation(self.config.layout, self.config.forces)
        self.controller = DragController(self.simulation, graph_events, self.config.interaction)
        self.zoom = ZoomPan(self.config.interaction)

        self.selected_id: Optional[str] = None
        self.visible_types: list[RelationshipType] = list(ALL_RELATIONSHIP_TYPES)
        self.dark = False

        self.image = None
        self.legend = None
        self.timer = None
        self._last_frame = 0.0
        self._pan_from: Optional[tuple[float, float]] = None
        self._dirty = True

    # ─────────────────────────────────────────
    # Layout
    # ─────────────────────────────────────────

    def render(self):
        """Build the elements. Call inside a NiceGUI container."""
        with ui.column().classes("w-full relative") as self.container:
            self.image = ui.interactive_image(
                size=(self.width, self.height),
                on_mouse=self._on_mouse,
                events=["mousedown", "mousemove", "mouseup", "mouseleave"],
                cross=False,
            ).classes("w-full border rounded-lg")
            self.image.on("wheel", self._on_wheel, js_handler=WHEEL_JS)
            self.image.on("dblclick", lambda: self.reset_view())

            self.legend = ui.column().classes("absolute bottom-4 left-4 p-3 rounded-lg shadow-lg gap-1 text-xs")
        self._render_legend()
        return self

    def _render_legend(self):
        if self.legend is None:
            return
        theme = Theme.for_mode(self.dark)
        self.legend.clear()
        self.legend.style(f"background: {theme.background}; color: {theme.text}")
        with self.legend:
            ui.label("Legend (filter)").classes("font-bold")
            with ui.row().classes("items-center gap-2"):
                ui.html(f'<span style="display:inline-block;width:12px;height:12px;border-radius:50%;background:{theme.male_fill}"></span>', sanitize=False)
                ui.label("Male")
            with ui.row().classes("items-center gap-2"):
                ui.html(f'<span style="display:inline-block;width:12px;height:12px;border-radius:50%;background:{theme.female_fill}"></span>', sanitize=False)
                ui.label("Female")
            for rel_type in ALL_RELATIONSHIP_TYPES:
                active = rel_type in self.visible_types
                ui.button(
                    LEGEND_LABELS[rel_type],
                    on_click=lambda t=rel_type: self.controller.toggle_rel_type(t),
                ).props("flat dense no-caps size=sm").style(
                    "opacity: 1; font-weight: bold" if active else "opacity: 0.5"
                )

    # ─────────────────────────────────────────
    # Data
    # ─────────────────────────────────────────

    def set_data(self, tree: TreeData, selected_id: Optional[str] = None,
                 visible_types: Optional[list[RelationshipType]] = None, dark: bool = False):
        """Stop the running loop, drop transient state and rebuild the layout."""
        self._stop_timer()
        self.controller.cancel()
        self._pan_from = None

        self.selected_id = selected_id
        self.visible_types = list(visible_types) if visible_types is not None else list(ALL_RELATIONSHIP_TYPES)
        self.dark = dark
        self.simulation.load(tree, self.visible_types, self.width, self.height)
        self._render_legend()
        self._dirty = True

        if self.image is None or self.simulation.state.empty:
            self._draw()
            return
        self._last_frame = time.monotonic()
        with self.container:
            self.timer = ui.timer(self.config.ui.frame_interval, self._on_frame)

    def set_selection(self, selected_id: Optional[str]):
        """Change the highlighted person without rebuilding the layout."""
        self.selected_id = selected_id
        self._dirty = True
        self._draw()

    def reset_view(self):
        self.zoom.reset()
        self._dirty = True
        self._draw()

    def close(self):
        self._stop_timer()
        self.controller.cancel()

    def _stop_timer(self):
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    # ─────────────────────────────────────────
    # Frame loop
    # ─────────────────────────────────────────

    def _on_frame(self):
        now = time.monotonic()
        dt = now - self._last_frame
        self._last_frame = now
        was_running = self.simulation.running
        self.simulation.advance(dt)
        if was_running or self._dirty:
            self._draw()

    def _draw(self):
        if self.image is None:
            return
        view = RenderView(
            width=self.width,
            height=self.height,
            selected_id=self.selected_id,
            dark=self.dark,
            transform=self.zoom.transform,
            candidate=self.controller.candidate,
            snap=self.controller.snap,
        )
        self.image.content = render_scene(self.simulation.state, view, self.config.interaction.node_radius)
        self._dirty = False

    # ─────────────────────────────────────────
    # Gestures
    # ─────────────────────────────────────────

    def _on_mouse(self, e: events.MouseEventArguments):
        gx, gy = self.zoom.invert(e.image_x, e.image_y)

        if e.type == "mousedown":
            node_id = node_at(self.simulation.state, gx, gy, self.config.interaction.node_radius)
            if node_id is not None:
                self.controller.start(node_id, gx, gy)
            else:
                self._pan_from = (e.image_x, e.image_y)
        elif e.type == "mousemove":
            if self.controller.active:
                self.controller.move(gx, gy)
            elif self._pan_from is not None:
                px, py = self._pan_from
                self.zoom.pan(e.image_x - px, e.image_y - py)
                self._pan_from = (e.image_x, e.image_y)
            else:
                return
        elif e.type == "mouseup":
            self._pan_from = None
            self.controller.end()
        elif e.type == "mouseleave":
            self._pan_from = None
            self.controller.cancel()

        self._dirty = True
        self._draw()

    def _on_wheel(self, e: events.GenericEventArguments):
        args = e.args or {}
        px = float(args.get("fx", 0.5)) * self.width
        py = float(args.get("fy", 0.5)) * self.height
        self.zoom.wheel(px, py, float(args.get("deltaY", 0)))
        self._dirty = True
        self._draw()
