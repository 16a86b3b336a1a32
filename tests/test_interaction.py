"""
Tests for the InteractionController state machine.

Drag, connect and label editing scenarios run against a real GraphModel
with a fixed container origin, the same way the NiceGUI host drives it.
"""

import random

import pytest

from mindmap.edit import (
    InteractionController, InteractionMode, InteractionState, PointerEvent, PointerEventBus,
)
from mindmap.graph_model import GraphModel


@pytest.fixture
def model():
    return GraphModel(rng=random.Random(7))


@pytest.fixture
def origin():
    """Mutable container origin so tests can unmount/remount the board."""
    return {'value': (10.0, 20.0)}


@pytest.fixture
def controller(model, origin):
    return InteractionController(model, origin_provider=lambda: origin['value'])


@pytest.fixture
def bus(controller):
    bus = PointerEventBus()
    controller.start(bus)
    return bus


class TestDragging:
    """Pointer down on a node, move, release."""

    def test_drag_moves_node_centered_under_pointer(self, controller, model):
        controller.pointer_down((0, 0), node_id='1')
        assert controller.state.mode == InteractionMode.DRAGGING
        assert controller.state.node_id == '1'

        controller.pointer_move((300, 300))
        assert model.get_node('1').position == (250.0, 240.0)

        controller.pointer_up((300, 300))
        assert controller.state.is_idle
        assert model.get_node('1').position == (250.0, 240.0)

    def test_every_move_updates_model(self, controller, model):
        versions = []
        model.on_change(lambda m: versions.append(m.version))
        controller.pointer_down((0, 0), node_id='1')
        for x in (100, 110, 120):
            controller.pointer_move((x, 100))
        assert len(versions) == 3
        assert model.get_node('1').position == (70.0, 40.0)

    def test_hit_test_without_node_id(self, model):
        controller = InteractionController(model, origin_provider=lambda: (0, 0))
        controller.pointer_down((240, 240))
        assert controller.state.mode == InteractionMode.DRAGGING
        assert controller.state.node_id == '1'
        assert controller.state.drag_origin == (240, 240)

    def test_background_down_stays_idle(self, controller):
        controller.pointer_down((900, 900))
        assert controller.state.is_idle

    def test_move_while_idle_is_ignored(self, controller, model):
        controller.pointer_move((300, 300))
        assert model.version == 0

    def test_unknown_explicit_node_is_background(self, controller):
        controller.pointer_down((50, 50), node_id='ghost')
        assert controller.state.is_idle

    def test_pointer_up_while_idle_is_noop(self, controller):
        assert controller.pointer_up() == InteractionState()


class TestMissingOrigin:
    """Hosts may deliver events before the board container is mounted."""

    def test_hit_test_down_is_dropped(self, controller, origin):
        origin['value'] = None
        controller.start_connect('1')
        controller.pointer_down((1000, 1000))
        # Dropped, so connect mode is not cancelled
        assert controller.state.mode == InteractionMode.CONNECT_SOURCE

    def test_moves_are_dropped(self, controller, model, origin):
        origin['value'] = None
        controller.pointer_down((0, 0), node_id='1')
        assert controller.state.mode == InteractionMode.DRAGGING

        controller.pointer_move((300, 300))
        assert model.get_node('1').position == (200.0, 200.0)

        origin['value'] = (10.0, 20.0)
        controller.pointer_move((300, 300))
        assert model.get_node('1').position == (250.0, 240.0)

    def test_no_provider_at_all(self, model):
        controller = InteractionController(model)
        controller.pointer_down((240, 240))
        assert controller.state.is_idle
        assert model.version == 0


class TestConnect:
    def test_connect_adds_edge_and_returns_to_idle(self, controller, model):
        child = model.spawn_child('1')
        controller.start_connect('1')
        assert controller.state == InteractionState(InteractionMode.CONNECT_SOURCE, '1')

        controller.pointer_down((0, 0), node_id=child)

        assert controller.state.is_idle
        assert [(e.source_id, e.target_id) for e in model.edges] == [('1', child), ('1', child)]

    def test_connect_to_self_keeps_waiting(self, controller, model):
        controller.start_connect('1')
        controller.pointer_down((0, 0), node_id='1')
        assert controller.state.mode == InteractionMode.CONNECT_SOURCE
        assert model.edges == []

    def test_background_click_cancels(self, controller, model):
        model.spawn_child('1')
        controller.start_connect('1')
        controller.pointer_down((1000, 1000))
        assert controller.state.is_idle
        assert len(model.edges) == 1

    def test_escape_cancels(self, controller):
        controller.start_connect('1')
        controller.handle_key('Escape')
        assert controller.state.is_idle

    def test_start_connect_replaces_pending_source(self, controller, model):
        child = model.spawn_child('1')
        controller.start_connect('1')
        controller.start_connect(child)
        assert controller.state.node_id == child

    def test_start_connect_unknown_node_is_noop(self, controller):
        controller.start_connect('ghost')
        assert controller.state.is_idle

    def test_connect_does_not_start_drag(self, controller, model):
        child = model.spawn_child('1')
        controller.start_connect('1')
        controller.pointer_down((0, 0), node_id=child)
        controller.pointer_move((500, 500))
        assert model.get_node(child).position != (450.0, 440.0)


class TestLabelEditing:
    def test_spawn_opens_label_editor(self, controller):
        new_id = controller.spawn_child('1')
        assert controller.state == InteractionState(InteractionMode.EDITING_LABEL, new_id)
        assert controller.session is not None
        assert controller.session.node_id == new_id

    def test_spawn_without_editor(self, controller):
        controller.spawn_child('1', edit_label=False)
        assert controller.state.is_idle
        assert controller.session is None

    def test_typing_writes_live(self, controller, model):
        controller.start_edit_label('1')
        controller.edit_text('Ro')
        assert model.get_node('1').label == 'Ro'
        controller.edit_text('Root')
        assert model.get_node('1').label == 'Root'

    def test_enter_commits(self, controller, model):
        controller.start_edit_label('1')
        controller.edit_text('Done')
        controller.handle_key('Enter')
        assert controller.state.is_idle
        assert controller.session is None
        assert model.get_node('1').label == 'Done'

    def test_escape_keeps_typed_text(self, controller, model):
        controller.start_edit_label('1')
        controller.edit_text('Kept')
        controller.handle_key('Escape')
        assert controller.state.is_idle
        assert model.get_node('1').label == 'Kept'

    def test_pointer_down_blurs_editor(self, controller):
        controller.start_edit_label('1')
        controller.pointer_down((0, 0), node_id='1')
        assert controller.session is None
        assert controller.state.mode == InteractionMode.DRAGGING

    def test_edit_text_without_session(self, controller, model):
        assert controller.edit_text('nothing') is False
        assert model.version == 0

    def test_edit_unknown_node(self, controller):
        assert controller.start_edit_label('ghost') is None
        assert controller.state.is_idle

    def test_other_keys_are_ignored(self, controller):
        controller.start_edit_label('1')
        controller.handle_key('a')
        assert controller.state.mode == InteractionMode.EDITING_LABEL


class TestModelOperations:
    def test_remove_node_in_use_returns_to_idle(self, controller, model):
        child = controller.spawn_child('1')
        controller.remove_node(child)
        assert controller.state.is_idle
        assert controller.session is None
        assert not model.has_node(child)

    def test_remove_other_node_keeps_state(self, controller, model):
        child = model.spawn_child('1')
        controller.start_connect('1')
        controller.remove_node(child)
        assert controller.state.mode == InteractionMode.CONNECT_SOURCE

    def test_reset_clears_interaction(self, controller, model):
        controller.start_connect('1')
        new_root = controller.reset()
        assert controller.state.is_idle
        assert [n.id for n in model.nodes] == [new_root]

    def test_passthrough_operations(self, controller, model):
        model.spawn_child('1')
        assert controller.set_color('1', '#10b981') is True
        assert controller.set_glyph('1', '🔥') is True
        assert controller.toggle_shape('1') is True
        assert controller.toggle_edge_style(0) is True
        assert controller.recenter((0, 0)) is True
        node = model.get_node('1')
        assert (node.color, node.glyph, node.shape, node.position) == ('#10b981', '🔥', 'rect', (0.0, 0.0))
        assert model.edges[0].style == 'dashed'


class TestEventSource:
    def test_bus_drives_controller(self, bus, controller, model):
        bus.down(0, 0, node_id='1')
        bus.move(300, 300)
        bus.up(300, 300)
        assert controller.state.is_idle
        assert model.get_node('1').position == (250.0, 240.0)

    def test_stop_unsubscribes(self, bus, controller, model):
        controller.start_connect('1')
        controller.stop()
        assert bus.subscriber_count == 0
        assert controller.state.is_idle

        bus.down(0, 0, node_id='1')
        assert controller.state.is_idle

    def test_start_twice_subscribes_once(self, bus, controller):
        controller.start(bus)
        assert bus.subscriber_count == 1

    def test_start_switches_source(self, bus, controller):
        other = PointerEventBus()
        controller.start(other)
        assert bus.subscriber_count == 0
        assert other.subscriber_count == 1

    def test_unknown_event_kind_rejected(self):
        with pytest.raises(ValueError):
            PointerEvent('wheel', (0, 0))

    def test_state_change_callback(self, controller):
        seen = []
        controller.set_on_state_change(lambda s: seen.append(s.mode))
        controller.start_connect('1')
        controller.start_connect('1')
        controller.cancel()
        assert seen == [InteractionMode.CONNECT_SOURCE, InteractionMode.IDLE]
