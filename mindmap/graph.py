"""
Node and edge types for the mind-map board.

Nodes and edges are plain dataclasses mutated in place by GraphModel.
Positions are (x, y) tuples in model space; the node's footprint extends
from its position (top-left corner) by NODE_SIZE on both axes.

Coordinates are snapped to a 1/256 grid. Sums and differences of grid
values are exact in binary floating point, so translating the whole graph
never changes the offset between two nodes.
"""

from dataclasses import dataclass
from typing import Dict, Any, Tuple

Point = Tuple[float, float]

SHAPE_CIRCLE = 'circle'
SHAPE_RECT = 'rect'
NODE_SHAPES = frozenset([SHAPE_CIRCLE, SHAPE_RECT])

STYLE_SOLID = 'solid'
STYLE_DASHED = 'dashed'
EDGE_STYLES = frozenset([STYLE_SOLID, STYLE_DASHED])

# Root node construction contract
ROOT_LABEL = 'Central Idea'
ROOT_GLYPH = '💡'
ROOT_COLOR = '#3b82f6'
ROOT_POSITION: Point = (200.0, 200.0)

CHILD_LABEL = 'New Point'

POSITION_GRID = 256


def snap_point(point) -> Point:
    """Convert an (x, y) pair to floats on the position grid."""
    x, y = point
    return (
        round(float(x) * POSITION_GRID) / POSITION_GRID,
        round(float(y) * POSITION_GRID) / POSITION_GRID,
    )


@dataclass
class Node:
    id: str
    label: str
    position: Point
    color: str
    shape: str = SHAPE_RECT
    glyph: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'position': tuple(self.position),
            'color': self.color,
            'shape': self.shape,
            'glyph': self.glyph,
        }


@dataclass
class Edge:
    source_id: str
    target_id: str
    style: str = STYLE_SOLID

    def touches(self, node_id: str) -> bool:
        return self.source_id == node_id or self.target_id == node_id

    def to_dict(self) -> Dict[str, Any]:
        return {'source': self.source_id, 'target': self.target_id, 'style': self.style}


def make_node(node_id: str, label: str = CHILD_LABEL, position: Point = (0.0, 0.0),
              color: str = ROOT_COLOR, shape: str = SHAPE_RECT, glyph: str = '') -> Node:
    """
    Create a node with grid-snapped coordinates.
    Shape falls back to rect when an unknown variant is passed.
    """
    if shape not in NODE_SHAPES:
        shape = SHAPE_RECT
    return Node(
        id=node_id,
        label=label,
        position=snap_point(position),
        color=color,
        shape=shape,
        glyph=glyph,
    )


def make_root(node_id: str) -> Node:
    """Create the single node a fresh graph starts from."""
    return make_node(
        node_id,
        label=ROOT_LABEL,
        position=ROOT_POSITION,
        color=ROOT_COLOR,
        shape=SHAPE_CIRCLE,
        glyph=ROOT_GLYPH,
    )
