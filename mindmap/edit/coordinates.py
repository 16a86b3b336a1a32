"""
Conversion between host pointer positions and model space.

Hosts report pointer positions in their own (page/client) coordinates.
A node's model position is its top-left corner relative to the board
container, so converting a pointer means subtracting the container origin
and half a node footprint.
"""

import logging
from typing import Callable, Optional

from mindmap.edit.constants import HALF_EXTENT
from mindmap.graph import Point

logger = logging.getLogger(__name__)

ContainerOriginProvider = Callable[[], Optional[Point]]


class CoordinateSpace:
    """Maps pointer positions to node positions for one board container."""

    def __init__(self, origin_provider: Optional[ContainerOriginProvider] = None,
                 half_extent: float = HALF_EXTENT):
        self.half_extent = half_extent
        self._origin_provider = origin_provider

    def set_origin_provider(self, origin_provider: Optional[ContainerOriginProvider]) -> None:
        self._origin_provider = origin_provider

    def to_model(self, pointer: Point, container_origin: Point) -> Point:
        """Pointer position -> top-left corner of a node centered under it."""
        return (
            pointer[0] - container_origin[0] - self.half_extent,
            pointer[1] - container_origin[1] - self.half_extent,
        )

    def center_of(self, position: Point) -> Point:
        """Center of a node footprint in model space."""
        return (position[0] + self.half_extent, position[1] + self.half_extent)

    def current_origin(self) -> Optional[Point]:
        """Ask the host for the container origin; None if it is not mounted yet."""
        if self._origin_provider is None:
            return None
        origin = self._origin_provider()
        if origin is None:
            return None
        return (float(origin[0]), float(origin[1]))

    def resolve(self, pointer: Point) -> Optional[Point]:
        """
        Convert using the host's current container origin.
        Returns None (event should be dropped) when no origin is available.
        """
        origin = self.current_origin()
        if origin is None:
            logger.debug(f"No container origin; dropping pointer at {pointer}")
            return None
        return self.to_model(pointer, origin)
