"""
Interactive editing layer for the mind-map board.

This package provides pointer-driven editing on top of GraphModel:
- InteractionController: State machine (drag, connect, label edit)
- CoordinateSpace: Pointer -> model space conversion
- LabelEditSession: Live label editing bound to one node
- PointerEventBus: In-process pointer event source
- setup_board_handlers: Event handlers for app.py integration

Usage:
    from mindmap.edit import InteractionController, PointerEventBus
    from mindmap.edit.handlers import setup_board_handlers
"""

from mindmap.edit.constants import (
    NODE_SIZE,
    HALF_EXTENT,
    CONFIRM_KEY,
    CANCEL_KEY,
)
from mindmap.edit.coordinates import CoordinateSpace
from mindmap.edit.label_session import LabelEditSession
from mindmap.edit.pointer import PointerEvent, PointerEventBus, PointerEventSource
from mindmap.edit.controller import InteractionController, InteractionMode, InteractionState
from mindmap.edit.handlers import setup_board_handlers

__all__ = [
    'InteractionController',
    'InteractionMode',
    'InteractionState',
    'CoordinateSpace',
    'LabelEditSession',
    'PointerEvent',
    'PointerEventBus',
    'PointerEventSource',
    'setup_board_handlers',
    'NODE_SIZE',
    'HALF_EXTENT',
    'CONFIRM_KEY',
    'CANCEL_KEY',
]
