"""Test configuration and the NiceGUI view wiring."""

import pytest


class TestConfiguration:
    """Test configuration loading."""

    def test_settings_import(self):
        """Settings module should import without error."""
        from kinforce.config import settings
        assert settings is not None

    def test_defaults(self):
        """Tuned constants have their documented defaults."""
        from kinforce.config import ForceSettings, InteractionSettings, LayoutSettings
        assert LayoutSettings().generation_gap == 160
        assert LayoutSettings().node_spacing == 140
        forces = ForceSettings()
        assert forces.charge_strength == -800
        assert forces.collide_radius == 50
        assert forces.y_strength > forces.x_strength
        interaction = InteractionSettings()
        assert interaction.proximity_threshold == 150
        assert (interaction.zoom_min, interaction.zoom_max) == (0.1, 4)

    def test_env_override(self, monkeypatch):
        """Constants can be tuned from the environment."""
        from kinforce.config import InteractionSettings
        monkeypatch.setenv("INTERACTION_PROXIMITY_THRESHOLD", "90")
        assert InteractionSettings().proximity_threshold == 90


class TestGraphView:
    """Test the view without a running NiceGUI client."""

    def test_graph_view_import(self):
        """GraphView should be importable."""
        from kinforce.ui.graph_view import GraphView
        assert GraphView is not None

    def test_app_import(self):
        from kinforce.ui.app import FamilyGraphApp, create_app
        assert FamilyGraphApp is not None
        assert create_app is not None

    def test_set_data_before_render(self, family_tree):
        """Loading data without elements builds the layout but starts no timer."""
        from kinforce.graph.interaction import GraphEvents
        from kinforce.models import RelationshipType
        from kinforce.ui.graph_view import GraphView

        view = GraphView(GraphEvents())
        view.set_data(family_tree, selected_id="dad", visible_types=[RelationshipType.PARENT])
        assert view.timer is None
        assert len(view.simulation.state) == len(family_tree.people)
        assert all(l.type == RelationshipType.PARENT for l in view.simulation.layout_links())
        view.close()

    def test_wheel_anchor_in_image_pixels(self, family_tree):
        """A wheel at the middle of the displayed image zooms about the image centre."""
        from types import SimpleNamespace

        from kinforce.graph.interaction import GraphEvents
        from kinforce.ui.graph_view import GraphView

        view = GraphView(GraphEvents())
        view.set_data(family_tree)
        anchor = (view.width / 2, view.height / 2)
        before = view.zoom.invert(*anchor)
        view._on_wheel(SimpleNamespace(args={"deltaY": -200, "fx": 0.5, "fy": 0.5}))
        assert view.zoom.transform.k > 1
        assert view.zoom.invert(*anchor) == pytest.approx(before)
        view.close()

    def test_sample_tree_is_consistent(self):
        """Every sample relationship points at a sample person."""
        from kinforce.ui.sample_data import sample_tree
        tree = sample_tree()
        ids = {p.id for p in tree.people}
        for r in tree.relationships:
            assert r.source in ids and r.target in ids


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
