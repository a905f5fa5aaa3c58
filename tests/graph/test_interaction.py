"""Test proximity detection, drag gestures and zoom/pan."""

import math

import numpy as np
import pytest

from kinforce.graph.interaction import DragController, DragPhase, GraphEvents, ZoomPan
from kinforce.graph.proximity import are_connected, find_proximity_candidate, node_at
from kinforce.graph.simulation.engine import ForceSimulation, SimulationState
from kinforce.models import ALL_RELATIONSHIP_TYPES, RelationshipType, TreeData
from tests.factories import parent, person


def scattered(points):
    """State with nodes at fixed coordinates, named n0, n1, ..."""
    ids = [f"n{i}" for i in range(len(points))]
    return SimulationState(
        ids=ids,
        people=[person(i) for i in ids],
        levels=[0] * len(ids),
        index={pid: i for i, pid in enumerate(ids)},
        x=np.array([p[0] for p in points], dtype=float),
        y=np.array([p[1] for p in points], dtype=float),
    )


class Recorder:
    """Collects emitted graph events."""

    def __init__(self):
        self.selected = []
        self.toggled = []
        self.drops = []

    def events(self):
        return GraphEvents(
            on_select_person=self.selected.append,
            on_toggle_rel_type=self.toggled.append,
            on_proximity_drop=lambda s, t: self.drops.append((s, t)),
        )


class TestProximity:
    """Tests for nearest-candidate detection."""

    def test_picks_nearest_within_threshold(self):
        state = scattered([(0, 0), (100, 0), (40, 0)])
        hit = find_proximity_candidate(state, "n0", 60, 0, 150)
        assert hit.node_id == "n2"
        assert hit.distance == pytest.approx(20)

    def test_none_when_all_beyond_threshold(self):
        state = scattered([(0, 0), (500, 0), (0, 400)])
        assert find_proximity_candidate(state, "n0", 0, 0, 150) is None

    def test_threshold_is_strict(self):
        state = scattered([(0, 0), (150, 0)])
        assert find_proximity_candidate(state, "n0", 0, 0, 150) is None

    def test_dragged_node_excluded(self):
        """The node being dragged never proposes itself."""
        state = scattered([(0, 0), (120, 0)])
        hit = find_proximity_candidate(state, "n0", 0, 0, 150)
        assert hit.node_id == "n1"

    def test_tie_goes_to_first_in_input_order(self):
        state = scattered([(0, 0), (50, 0), (-50, 0)])
        hit = find_proximity_candidate(state, "n0", 0, 0, 150)
        assert hit.node_id == "n1"

    def test_candidate_follows_pointer(self):
        state = scattered([(0, 0), (100, 0), (300, 0)])
        assert find_proximity_candidate(state, "n0", 110, 0, 150).node_id == "n1"
        assert find_proximity_candidate(state, "n0", 290, 0, 150).node_id == "n2"

    def test_node_at(self):
        state = scattered([(0, 0), (100, 100)])
        assert node_at(state, 95, 102, 30) == "n1"
        assert node_at(state, 50, 50, 30) is None

    def test_are_connected(self):
        rels = [parent("a", "b")]
        assert are_connected(rels, "a", "b")
        assert are_connected(rels, "b", "a")
        assert not are_connected(rels, "a", "c")


class TestDragController:
    """Tests for the drag gesture state machine."""

    @pytest.fixture
    def recorder(self):
        return Recorder()

    @pytest.fixture
    def sim(self, loose_trio):
        """a, b, c on one row at x = 290, 430, 570 and y = 400."""
        sim = ForceSimulation()
        sim.load(loose_trio, ALL_RELATIONSHIP_TYPES, 1000, 800)
        return sim

    @pytest.fixture
    def drag(self, sim, recorder):
        return DragController(sim, recorder.events())

    def test_start_pins_and_heats(self, sim, drag):
        drag.start("a", 290, 400)
        assert drag.phase == DragPhase.DRAGGING
        assert sim.node("a").fx == pytest.approx(290)
        assert sim.node("a").fy == pytest.approx(400)
        assert sim.state.alpha_target == pytest.approx(0.3)
        assert sim.running

    def test_drop_near_single_node_emits_once(self, sim, drag, recorder):
        """Dragging a onto c alone proposes (a, c) exactly once."""
        drag.start("a", 290, 400)
        drag.move(575, 520)
        assert drag.phase == DragPhase.PROXIMITY_ARMED
        assert drag.candidate.node_id == "c"
        assert drag.snap is not None
        drag.end()
        assert recorder.drops == [("a", "c")]
        assert recorder.selected == []
        assert drag.phase == DragPhase.IDLE

    def test_end_clears_state(self, sim, drag):
        drag.start("a", 290, 400)
        drag.move(575, 520)
        drag.end()
        assert drag.candidate is None
        assert drag.snap is None
        assert not sim.node("a").pinned
        assert sim.state.alpha_target == 0.0

    def test_drop_without_candidate(self, drag, recorder):
        drag.start("a", 290, 400)
        drag.move(290, 750)
        assert drag.phase == DragPhase.DRAGGING
        assert drag.candidate is None
        assert drag.snap is None
        drag.end()
        assert recorder.drops == []
        assert recorder.selected == []

    def test_candidate_updates_every_move(self, drag):
        drag.start("a", 290, 400)
        assert drag.move(420, 400).node_id == "b"
        assert drag.move(560, 400).node_id == "c"
        assert drag.move(290, 750) is None
        assert drag.phase == DragPhase.DRAGGING

    def test_move_updates_pin(self, sim, drag):
        drag.start("a", 290, 400)
        drag.move(300, 700)
        node = sim.node("a")
        assert (node.fx, node.fy) == (300, 700)

    def test_grab_offset_kept(self, sim, drag):
        """Grabbing off-centre moves the node by the pointer delta, not onto it."""
        drag.start("a", 300, 410)
        drag.move(320, 450)
        node = sim.node("a")
        assert (node.fx, node.fy) == pytest.approx((310, 440))
        assert drag.candidate.node_id == "b"
        assert (drag.snap.x1, drag.snap.y1) == pytest.approx((310, 440))

    def test_click_selects(self, drag, recorder):
        """A gesture that never moves is a click."""
        drag.start("b", 430, 400)
        drag.move(431, 401)
        drag.end()
        assert recorder.selected == ["b"]
        assert recorder.drops == []

    def test_cancel_emits_nothing(self, sim, drag, recorder):
        drag.start("a", 290, 400)
        drag.move(575, 520)
        drag.cancel()
        assert recorder.drops == [] and recorder.selected == []
        assert not sim.node("a").pinned
        assert drag.phase == DragPhase.IDLE

    def test_end_when_idle_is_noop(self, drag, recorder):
        drag.end()
        assert recorder.drops == [] and recorder.selected == []

    def test_toggle_forwarded(self, drag, recorder):
        drag.toggle_rel_type(RelationshipType.SIBLING)
        assert recorder.toggled == [RelationshipType.SIBLING]

    def test_missing_callbacks_ignored(self, sim):
        drag = DragController(sim, GraphEvents())
        drag.start("a", 290, 400)
        drag.move(575, 520)
        drag.end()
        assert drag.phase == DragPhase.IDLE

    def test_simulation_relaxes_around_pin(self, sim, drag):
        """Other nodes keep moving while one is held."""
        drag.start("a", 290, 400)
        drag.move(350, 400)
        before = sim.position("b")
        sim.tick(3)
        assert sim.position("a") == (350, 400)
        assert sim.position("b") != before


class TestZoomPan:
    """Tests for the view transform."""

    def test_zoom_keeps_pointer_fixed(self):
        zoom = ZoomPan()
        zoom.pan(30, -20)
        before = zoom.invert(200, 150)
        zoom.zoom_at(200, 150, 2.0)
        after = zoom.invert(200, 150)
        assert after == pytest.approx(before)
        assert zoom.transform.k == pytest.approx(2.0)

    def test_scale_is_clamped(self):
        zoom = ZoomPan()
        assert zoom.zoom_at(0, 0, 100).k == pytest.approx(4.0)
        assert zoom.zoom_at(0, 0, 1e-6).k == pytest.approx(0.1)

    def test_pan_and_reset(self):
        zoom = ZoomPan()
        t = zoom.pan(10, 5)
        assert (t.x, t.y) == (10, 5)
        assert zoom.invert(10, 5) == (0, 0)
        assert zoom.reset().k == 1.0

    def test_wheel_direction(self):
        zoom = ZoomPan()
        assert zoom.wheel_factor(-100) > 1 > zoom.wheel_factor(100)
        assert zoom.wheel(0, 0, -100).k > 1
