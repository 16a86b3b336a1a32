"""
Interaction Controller - Single source of truth for board interaction state.

This controller turns pointer/gesture events into GraphModel mutations:
- pointer down/move/up drive node dragging
- "start connect" + a click on another node adds an edge
- "edit label" opens a live LabelEditSession

The model is updated on every pointer move rather than on release, so the
renderer always shows the real model state.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from mindmap.edit.constants import CANCEL_KEY
from mindmap.edit.coordinates import CoordinateSpace, ContainerOriginProvider, Point
from mindmap.edit.label_session import LabelEditSession
from mindmap.edit.pointer import (
    PointerEvent, PointerEventSource,
    POINTER_DOWN, POINTER_MOVE, POINTER_UP,
)
from mindmap.graph import ROOT_POSITION
from mindmap.graph_model import GraphModel

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    IDLE = 'idle'
    DRAGGING = 'dragging'
    CONNECT_SOURCE = 'connect_source'
    EDITING_LABEL = 'editing_label'


@dataclass
class InteractionState:
    """Immutable snapshot of current interaction state."""
    mode: InteractionMode = InteractionMode.IDLE
    node_id: Optional[str] = None
    drag_origin: Optional[Tuple[float, float]] = None

    @property
    def is_idle(self) -> bool:
        return self.mode == InteractionMode.IDLE


class InteractionController:
    """Interprets pointer and gesture events and applies them to a GraphModel."""

    def __init__(self, model: GraphModel,
                 coordinates: Optional[CoordinateSpace] = None,
                 origin_provider: Optional[ContainerOriginProvider] = None):
        self.model = model
        self.coordinates = coordinates or CoordinateSpace(origin_provider)
        if coordinates is not None and origin_provider is not None:
            self.coordinates.set_origin_provider(origin_provider)
        self._state = InteractionState()
        self._session: Optional[LabelEditSession] = None
        self._source: Optional[PointerEventSource] = None
        self._on_state_change: Optional[Callable[[InteractionState], None]] = None

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def session(self) -> Optional[LabelEditSession]:
        """The open label session, if any."""
        return self._session

    def set_on_state_change(self, callback: Optional[Callable[[InteractionState], None]]):
        self._on_state_change = callback

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self._state)

    def _set_state(self, mode: InteractionMode, node_id: Optional[str] = None,
                   drag_origin: Optional[Tuple[float, float]] = None) -> InteractionState:
        new_state = InteractionState(mode=mode, node_id=node_id, drag_origin=drag_origin)
        if new_state != self._state:
            logger.debug(f"Interaction {self._state.mode.value} -> {mode.value} ({node_id})")
            self._state = new_state
            self._notify_change()
        return self._state

    # --- Event source lifecycle ---

    def start(self, source: PointerEventSource) -> None:
        """Subscribe to a pointer event source (replacing any previous one)."""
        if self._source is source:
            return
        self.stop()
        source.subscribe(self.handle_pointer)
        self._source = source

    def stop(self) -> None:
        """Unsubscribe from the current source and drop any active interaction."""
        if self._source is not None:
            self._source.unsubscribe(self.handle_pointer)
            self._source = None
        self._close_session()
        self._set_state(InteractionMode.IDLE)

    def handle_pointer(self, event: PointerEvent) -> InteractionState:
        if event.kind == POINTER_DOWN:
            return self.pointer_down(event.position, event.node_id)
        if event.kind == POINTER_MOVE:
            return self.pointer_move(event.position)
        if event.kind == POINTER_UP:
            return self.pointer_up(event.position)
        raise ValueError(f"Unknown pointer event kind: {event.kind!r}")

    # --- Pointer events ---

    def _resolve_target(self, position: Point, node_id: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Find the node under the pointer.

        Returns (dropped, node_id). An explicit node id from the host wins;
        otherwise hit-test in model space. dropped is True when hit-testing
        was needed but the host has no container origin yet.
        """
        if node_id is not None:
            return False, node_id if self.model.has_node(node_id) else None

        corner = self.coordinates.resolve(position)
        if corner is None:
            return True, None
        point = self.coordinates.center_of(corner)
        return False, self.model.node_at(point, self.coordinates.half_extent)

    def pointer_down(self, position: Point, node_id: Optional[str] = None) -> InteractionState:
        dropped, target = self._resolve_target(position, node_id)
        if dropped:
            return self._state

        # Clicking anywhere blurs the label input
        if self._state.mode == InteractionMode.EDITING_LABEL:
            self.commit_label()

        if self._state.mode == InteractionMode.CONNECT_SOURCE:
            source = self._state.node_id
            if target is None:
                logger.debug(f"Background click cancels connect from {source}")
                return self._set_state(InteractionMode.IDLE)
            if target == source:
                return self._state
            self.model.add_edge(source, target)
            return self._set_state(InteractionMode.IDLE)

        if target is None:
            return self._set_state(InteractionMode.IDLE)
        return self._set_state(InteractionMode.DRAGGING, target, drag_origin=tuple(position))

    def pointer_move(self, position: Point) -> InteractionState:
        if self._state.mode != InteractionMode.DRAGGING:
            return self._state

        corner = self.coordinates.resolve(position)
        if corner is not None:
            self.model.update_node(self._state.node_id, position=corner)
        return self._state

    def pointer_up(self, position: Optional[Point] = None) -> InteractionState:
        if self._state.mode != InteractionMode.DRAGGING:
            return self._state
        return self._set_state(InteractionMode.IDLE)

    # --- Gestures ---

    def start_connect(self, node_id: str) -> InteractionState:
        """Mark node_id as the source of the next connection (replaces any pending one)."""
        if not self.model.has_node(node_id):
            return self._state
        self._close_session()
        return self._set_state(InteractionMode.CONNECT_SOURCE, node_id)

    def cancel(self) -> InteractionState:
        """Abandon connect-mode or a drag; an open label session is closed as-is."""
        self._close_session()
        return self._set_state(InteractionMode.IDLE)

    def start_edit_label(self, node_id: str) -> Optional[LabelEditSession]:
        """Open a live label editor on node_id, closing any other one."""
        if not self.model.has_node(node_id):
            return None
        self._close_session()
        self._session = LabelEditSession(self.model, node_id)
        self._set_state(InteractionMode.EDITING_LABEL, node_id)
        return self._session

    def edit_text(self, text: str) -> bool:
        """Forward the current input text to the open session."""
        if self._session is None:
            return False
        return self._session.update(text)

    def commit_label(self) -> InteractionState:
        """Blur or confirm: end label editing. Always returns to Idle."""
        if self._state.mode != InteractionMode.EDITING_LABEL:
            return self._state
        self._close_session()
        return self._set_state(InteractionMode.IDLE)

    def handle_key(self, key: str) -> InteractionState:
        if self._state.mode == InteractionMode.EDITING_LABEL and self._session is not None:
            if self._session.handle_key(key):
                return self.commit_label()
        if key == CANCEL_KEY and not self._state.is_idle:
            return self.cancel()
        return self._state

    def _close_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    # --- Model operations that must keep the state machine consistent ---

    def spawn_child(self, parent_id: str, overrides: Optional[Dict[str, Any]] = None,
                    edit_label: bool = True) -> Optional[str]:
        """Spawn a child and, by default, open its label for editing."""
        new_id = self.model.spawn_child(parent_id, overrides)
        if new_id is not None and edit_label:
            self.start_edit_label(new_id)
        return new_id

    def remove_node(self, node_id: str) -> bool:
        removed = self.model.remove_node(node_id)
        if removed and self._state.node_id == node_id:
            self._close_session()
            self._set_state(InteractionMode.IDLE)
        return removed

    def set_color(self, node_id: str, color: str) -> bool:
        return self.model.update_node(node_id, color=color)

    def set_glyph(self, node_id: str, glyph: str) -> bool:
        return self.model.update_node(node_id, glyph=glyph)

    def toggle_shape(self, node_id: str) -> bool:
        return self.model.toggle_shape(node_id)

    def toggle_edge_style(self, edge_index: int) -> bool:
        return self.model.toggle_edge_style(edge_index)

    def recenter(self, anchor: Point = ROOT_POSITION) -> bool:
        return self.model.recenter(anchor)

    def reset(self) -> str:
        """Clear the board. Hosts confirm with the user before calling this."""
        self._close_session()
        self._set_state(InteractionMode.IDLE)
        return self.model.reset()
