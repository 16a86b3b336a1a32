"""
Board Handlers - Event handlers for the NiceGUI host in app.py

This module extracts the board's event handling from app.py to keep the
main application file focused on layout. Handlers normalise NiceGUI event
payloads and forward them to the PointerEventBus / InteractionController.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from mindmap.edit.controller import InteractionController
from mindmap.edit.pointer import PointerEventBus

logger = logging.getLogger(__name__)


def pointer_xy(event: Any) -> Optional[Tuple[float, float]]:
    """Extract (clientX, clientY) from a NiceGUI event or a raw payload."""
    raw = event.args if hasattr(event, 'args') else event

    if isinstance(raw, (list, tuple)) and len(raw) >= 2:
        x, y = raw[0], raw[1]
    elif isinstance(raw, dict):
        x = raw.get('clientX', raw.get('x'))
        y = raw.get('clientY', raw.get('y'))
    else:
        return None

    try:
        return float(x), float(y)
    except (TypeError, ValueError):
        return None


def rect_origin(raw: Any) -> Optional[Tuple[float, float]]:
    """Extract the top-left corner from a DOMRect-like dict."""
    if not isinstance(raw, dict):
        return None
    left = raw.get('left', raw.get('x'))
    top = raw.get('top', raw.get('y'))
    try:
        return float(left), float(top)
    except (TypeError, ValueError):
        return None


def key_name(event: Any) -> str:
    """Key name from a NiceGUI KeyEventArguments (or a plain string)."""
    key = getattr(event, 'key', event)
    return getattr(key, 'name', None) or str(key)


def setup_board_handlers(
    state: Dict[str, Any],
    controller: InteractionController,
    bus: PointerEventBus,
    refresh_board: Callable[[], None],
):
    """
    Set up all board event handlers.

    Args:
        state: App state dictionary; 'container_origin' holds the board's
            top-left corner in client coordinates once it is known
        controller: InteractionController driving the GraphModel
        bus: Pointer event source the controller is subscribed to
        refresh_board: Function to re-render the board after a change

    Returns:
        Dict with handler functions for binding to UI events
    """

    def origin_provider() -> Optional[Tuple[float, float]]:
        return state.get('container_origin')

    controller.coordinates.set_origin_provider(origin_provider)
    controller.start(bus)

    def on_model_change(_model):
        # The label input already shows what was typed; re-rendering would steal focus
        if state.get('suppress_refresh'):
            return
        refresh_board()

    def on_state_change(_state):
        refresh_board()

    controller.model.on_change(on_model_change)
    controller.set_on_state_change(on_state_change)

    def handle_container_rect(raw):
        """Record the board container's bounding rect (from getBoundingClientRect)."""
        origin = rect_origin(raw)
        if origin is None:
            logger.debug(f"Ignoring malformed container rect: {raw!r}")
            return
        state['container_origin'] = origin

    def handle_mouse_down(event):
        """Pointer pressed on the board; the controller hit-tests nodes."""
        pos = pointer_xy(event)
        if pos is None:
            return
        bus.down(*pos)

    def handle_mouse_move(event):
        pos = pointer_xy(event)
        if pos is None:
            return
        bus.move(*pos)

    def handle_mouse_up(event):
        pos = pointer_xy(event)
        if pos is None:
            pos = (0.0, 0.0)
        bus.up(*pos)

    def handle_keyboard(event):
        """Global keys (Escape cancels connect-mode). Input fields handle their own keys."""
        action = getattr(event, 'action', None)
        if action is not None and not getattr(action, 'keydown', True):
            return
        controller.handle_key(key_name(event))

    def handle_label_input(node_id: str, value: str):
        """Live label edit: every keystroke goes straight to the model."""
        session = controller.session
        if session is None or session.node_id != node_id:
            return
        state['suppress_refresh'] = True
        try:
            controller.edit_text(value)
        finally:
            state['suppress_refresh'] = False

    def handle_label_commit(_event=None):
        """Blur or Enter on the label input."""
        controller.commit_label()

    return {
        'origin_provider': origin_provider,
        'handle_container_rect': handle_container_rect,
        'handle_mouse_down': handle_mouse_down,
        'handle_mouse_move': handle_mouse_move,
        'handle_mouse_up': handle_mouse_up,
        'handle_keyboard': handle_keyboard,
        'handle_label_input': handle_label_input,
        'handle_label_commit': handle_label_commit,
    }
