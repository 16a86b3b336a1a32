"""
Pointer event source abstraction.

The controller never listens to a window or canvas directly. Hosts push
PointerEvents into something that satisfies PointerEventSource; the
controller subscribes when it starts and unsubscribes when it stops.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, Callable, List, Optional, Tuple, runtime_checkable

logger = logging.getLogger(__name__)

POINTER_DOWN = 'down'
POINTER_MOVE = 'move'
POINTER_UP = 'up'
POINTER_KINDS = frozenset([POINTER_DOWN, POINTER_MOVE, POINTER_UP])


@dataclass
class PointerEvent:
    """A pointer sample in host coordinates, optionally naming the node under it."""
    kind: str
    position: Tuple[float, float]
    node_id: Optional[str] = None

    def __post_init__(self):
        if self.kind not in POINTER_KINDS:
            raise ValueError(f"Unknown pointer event kind: {self.kind!r}")


PointerHandler = Callable[[PointerEvent], None]


@runtime_checkable
class PointerEventSource(Protocol):
    """Anything that can deliver pointer events to subscribers."""

    def subscribe(self, handler: PointerHandler) -> None:
        """Start delivering events to handler."""
        ...

    def unsubscribe(self, handler: PointerHandler) -> None:
        """Stop delivering events to handler."""
        ...


class PointerEventBus:
    """
    In-process PointerEventSource.

    Hosts call emit() from their UI callbacks; delivery is synchronous, so an
    event is fully handled before emit() returns.
    """

    def __init__(self):
        self._handlers: List[PointerHandler] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: PointerHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: PointerHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: PointerEvent) -> None:
        for handler in list(self._handlers):
            handler(event)

    def down(self, x: float, y: float, node_id: Optional[str] = None) -> None:
        self.emit(PointerEvent(POINTER_DOWN, (x, y), node_id))

    def move(self, x: float, y: float) -> None:
        self.emit(PointerEvent(POINTER_MOVE, (x, y)))

    def up(self, x: float, y: float) -> None:
        self.emit(PointerEvent(POINTER_UP, (x, y)))
