"""Main NiceGUI application: family graph with selection and drag-to-connect."""

import logging
from typing import Optional

from nicegui import ui

from kinforce.config import Settings, settings as default_settings
from kinforce.graph.interaction import GraphEvents
from kinforce.models import TreeData
from kinforce.ui.graph_view import GraphView
from kinforce.ui.sample_data import sample_tree
from kinforce.ui.workspace import ConnectionKind, TreeWorkspace

logger = logging.getLogger(__name__)

CONNECTION_LABELS = {
    ConnectionKind.PARENT: "is parent of",
    ConnectionKind.CHILD: "is child of",
    ConnectionKind.SPOUSE: "is spouse of",
    ConnectionKind.SIBLING: "is sibling of",
}


class FamilyGraphApp:
    """Page controller wiring the workspace to the graph view."""

    def __init__(self, tree: Optional[TreeData] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.workspace = TreeWorkspace(tree or sample_tree())
        self.view = GraphView(
            GraphEvents(
                on_select_person=self._on_select,
                on_toggle_rel_type=self._on_toggle,
                on_proximity_drop=self._on_proximity_drop,
            ),
            self.config,
        )
        self.detail = None
        self.dialog = None

    def setup(self):
        """Setup the main UI."""
        with ui.row().classes("w-full items-center mb-4"):
            ui.label("🌳 Family Graph").classes("text-3xl font-bold")
            ui.switch("Dark", on_change=lambda e: self._on_dark(e.value)).classes("ml-8")
            ui.button("Reset view", on_click=self.view.reset_view).props("flat dense")

        with ui.row().classes("w-full gap-4 no-wrap"):
            with ui.column().classes("flex-1"):
                self.view.render()
            with ui.card().classes("w-72 p-3"):
                self.detail = ui.column().classes("w-full gap-1")

        self.dialog = ui.dialog()
        self._reload()
        self._render_detail()

    # ─────────────────────────────────────────
    # Graph events
    # ─────────────────────────────────────────

    def _on_select(self, person_id: str):
        self.workspace.select(person_id)
        self.view.set_selection(person_id)
        self._render_detail()

    def _on_toggle(self, rel_type):
        self.workspace.toggle_rel_type(rel_type)
        self._reload()

    def _on_dark(self, dark: bool):
        self.workspace.set_dark(dark)
        self._reload()

    def _on_proximity_drop(self, source_id: str, target_id: str):
        if not self.workspace.handle_proximity_drop(source_id, target_id):
            return
        self._show_connection_dialog(source_id, target_id)

    # ─────────────────────────────────────────
    # Rendering helpers
    # ─────────────────────────────────────────

    def _reload(self):
        ws = self.workspace
        self.view.set_data(ws.tree, ws.selected_id, ws.visible_types, ws.dark)

    def _show_connection_dialog(self, source_id: str, target_id: str):
        source = self.workspace.tree.person(source_id)
        target = self.workspace.tree.person(target_id)
        if source is None or target is None:
            self.workspace.cancel_connection()
            return

        self.dialog.clear()
        with self.dialog, ui.card().classes("w-96"):
            ui.label("New connection").classes("text-lg font-bold")
            ui.label(f"{source.display_name} … {target.display_name}").classes("text-gray-600")
            with ui.grid(columns=2).classes("w-full gap-2"):
                for kind, label in CONNECTION_LABELS.items():
                    ui.button(label, on_click=lambda k=kind: self._confirm(k)).props("no-caps")
            ui.button("Cancel", on_click=self._cancel).props("flat").classes("w-full")
        self.dialog.open()

    def _confirm(self, kind: ConnectionKind):
        rel = self.workspace.confirm_connection(kind)
        self.dialog.close()
        if rel is not None:
            ui.notify("Connection added", type="positive")
            self._reload()

    def _remove(self, rel_id: str):
        if self.workspace.remove_relationship(rel_id):
            ui.notify("Connection removed", type="info")
            self._reload()
            self._render_detail()

    def _cancel(self):
        self.workspace.cancel_connection()
        self.dialog.close()

    def _render_detail(self):
        if self.detail is None:
            return
        self.detail.clear()
        with self.detail:
            person = None
            if self.workspace.selected_id:
                person = self.workspace.tree.person(self.workspace.selected_id)
            if person is None:
                ui.label("Click a person to see details. Drag a person onto another to connect them.").classes("text-gray-500")
                return
            ui.label(person.display_name).classes("text-xl font-bold")
            for label, value in (
                ("Gender", person.gender.value.title()),
                ("Born", person.birth_date),
                ("Died", person.death_date),
                ("Birthplace", person.birth_place),
                ("Occupation", person.occupation),
            ):
                if value:
                    with ui.row().classes("gap-2"):
                        ui.label(f"{label}:").classes("font-semibold")
                        ui.label(value)
            ui.label(f"Generation: {self.view.simulation.level(person.id)}").classes("text-sm text-gray-500")

            rels = self.workspace.relationships_of(person.id)
            if rels:
                ui.separator()
                ui.label("Relationships").classes("font-semibold")
            for rel in rels:
                other_id = rel.target if rel.source == person.id else rel.source
                other = self.workspace.tree.person(other_id)
                with ui.row().classes("w-full items-center justify-between no-wrap"):
                    ui.label(f"{rel.type.value.title()}: {other.display_name if other else other_id}").classes("text-sm")
                    ui.button(icon="delete", on_click=lambda r=rel.id: self._remove(r)).props("flat dense round size=sm color=negative")


def create_app(tree: Optional[TreeData] = None, config: Optional[Settings] = None):
    """Register the main page."""

    @ui.page("/")
    def main_page():
        app_instance = FamilyGraphApp(tree, config)
        app_instance.setup()
        ui.context.client.on_disconnect(app_instance.view.close)

    return main_page


def run_app(config: Optional[Settings] = None):
    config = config or default_settings
    create_app(config=config)
    ui.run(title=config.ui.title, port=config.ui.port, reload=False)
