import logging
import random
from dataclasses import replace
from typing import Callable, Dict, Any, List, Optional

import networkx as nx

from mindmap.graph import (
    Node, Edge, Point,
    EDGE_STYLES, NODE_SHAPES,
    SHAPE_CIRCLE, SHAPE_RECT, STYLE_SOLID, STYLE_DASHED,
    ROOT_POSITION, CHILD_LABEL,
    make_node, make_root, snap_point,
)
from mindmap.palette import Palette

logger = logging.getLogger(__name__)

# Child placement relative to its parent
SPAWN_OFFSET_X = 150.0
SPAWN_JITTER = 50.0

# Attributes a caller may preset on a spawned child
SPAWN_OVERRIDES = frozenset(['label', 'color', 'shape', 'glyph'])


class GraphModel:
    """
    Owns the mind-map nodes and edges and keeps them consistent.

    Invariants (hold after every call):
    - node ids are unique and never reused
    - every edge references two existing, distinct nodes
    - at least one node exists

    Every operation is total: bad ids or structurally invalid requests are
    silent no-ops that leave the graph untouched. Observers registered with
    on_change() are called once per effective mutation, after the graph is
    consistent again.
    """

    def __init__(self, palette: Optional[Palette] = None, rng: Optional[random.Random] = None):
        self.palette = palette or Palette()
        self._rng = rng or random.Random()
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        self._next_id = 1
        self._version = 0
        self._observers: List[Callable[['GraphModel'], None]] = []

        root = make_root(self._allocate_id())
        self._nodes[root.id] = root

    # --- Read surface ---

    @property
    def version(self) -> int:
        """Incremented once per effective mutation; hosts can poll it."""
        return self._version

    @property
    def nodes(self) -> List[Node]:
        """Copies of all nodes in creation order."""
        return [replace(n) for n in self._nodes.values()]

    @property
    def edges(self) -> List[Edge]:
        """Copies of all edges in insertion order."""
        return [replace(e) for e in self._edges]

    @property
    def root_id(self) -> str:
        """The oldest surviving node; recenter() anchors on it."""
        return next(iter(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def has_node(self, node_id: Optional[str]) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[Node]:
        node = self._nodes.get(node_id)
        return replace(node) if node else None

    def node_at(self, point: Point, half_extent: float) -> Optional[str]:
        """
        Return the id of the topmost node whose footprint contains point.
        Later nodes are drawn above earlier ones, so search newest first.
        """
        px, py = point
        size = 2 * half_extent
        for node in reversed(list(self._nodes.values())):
            x, y = node.position
            if x <= px <= x + size and y <= py <= y + size:
                return node.id
        return None

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the graph for renderers and tests."""
        return {
            'nodes': [n.to_dict() for n in self._nodes.values()],
            'edges': [e.to_dict() for e in self._edges],
        }

    def to_networkx(self) -> nx.MultiDiGraph:
        """
        Export the graph as a MultiDiGraph.
        Parallel edges are allowed, so each edge is keyed by its index.
        """
        G = nx.MultiDiGraph()
        for node in self._nodes.values():
            G.add_node(node.id, **node.to_dict())
        for index, edge in enumerate(self._edges):
            G.add_edge(edge.source_id, edge.target_id, key=index, index=index, style=edge.style)
        return G

    # --- Observers ---

    def on_change(self, callback: Callable[['GraphModel'], None]) -> None:
        """Register a callback invoked after every effective mutation."""
        if callback not in self._observers:
            self._observers.append(callback)

    def off_change(self, callback: Callable[['GraphModel'], None]) -> None:
        """Remove a previously registered change callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _commit(self) -> None:
        self._version += 1
        for callback in list(self._observers):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in graph change observer {callback!r}: {e}")

    def _allocate_id(self) -> str:
        node_id = str(self._next_id)
        self._next_id += 1
        return node_id

    # --- Write operations ---

    def spawn_child(self, parent_id: str, overrides: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """
        Create a child of parent_id and link parent -> child with a solid edge.

        The child sits SPAWN_OFFSET_X to the right of its parent with a random
        vertical jitter, inherits the parent's color, is a rect and gets a
        random glyph from the palette. `overrides` may replace the label, color,
        shape or glyph; None values keep the default.
        Returns the new node id, or None if the parent does not exist.
        """
        parent = self._nodes.get(parent_id)
        if parent is None:
            logger.debug(f"spawn_child: unknown parent {parent_id!r}")
            return None

        overrides = {k: v for k, v in (overrides or {}).items()
                     if k in SPAWN_OVERRIDES and v is not None}

        px, py = parent.position
        jitter = self._rng.uniform(-SPAWN_JITTER, SPAWN_JITTER)
        glyph = overrides.get('glyph')
        if glyph is None:
            glyph = self._rng.choice(self.palette.glyphs)

        child = make_node(
            self._allocate_id(),
            label=overrides.get('label', CHILD_LABEL),
            position=(px + SPAWN_OFFSET_X, py + jitter),
            color=overrides.get('color', parent.color),
            shape=overrides.get('shape', SHAPE_RECT),
            glyph=glyph,
        )
        self._nodes[child.id] = child
        self._edges.append(Edge(parent_id, child.id, STYLE_SOLID))
        logger.debug(f"Spawned node {child.id} from {parent_id}")
        self._commit()
        return child.id

    def remove_node(self, node_id: str) -> bool:
        """
        Delete a node together with every edge touching it.
        The last remaining node cannot be removed.
        """
        if node_id not in self._nodes:
            logger.debug(f"remove_node: unknown node {node_id!r}")
            return False
        if len(self._nodes) <= 1:
            logger.debug(f"remove_node: refusing to remove last node {node_id!r}")
            return False

        # Build the surviving edge list first so both collections swap together
        remaining = [e for e in self._edges if not e.touches(node_id)]
        del self._nodes[node_id]
        self._edges = remaining
        logger.info(f"Removed node {node_id}")
        self._commit()
        return True

    def add_edge(self, source_id: str, target_id: str, style: str = STYLE_SOLID) -> Optional[int]:
        """
        Append an edge source -> target and return its index.
        Parallel edges are allowed; self-loops and unknown ids are not.
        """
        if source_id not in self._nodes or target_id not in self._nodes:
            logger.debug(f"add_edge: unknown endpoint in {source_id!r} -> {target_id!r}")
            return None
        if source_id == target_id:
            logger.debug(f"add_edge: rejecting self-loop on {source_id!r}")
            return None
        if style not in EDGE_STYLES:
            logger.debug(f"add_edge: unknown style {style!r}")
            return None

        self._edges.append(Edge(source_id, target_id, style))
        self._commit()
        return len(self._edges) - 1

    def toggle_edge_style(self, edge_index: int) -> bool:
        """Flip the edge at edge_index between solid and dashed."""
        if not isinstance(edge_index, int) or not 0 <= edge_index < len(self._edges):
            logger.debug(f"toggle_edge_style: index {edge_index!r} out of range")
            return False

        edge = self._edges[edge_index]
        edge.style = STYLE_DASHED if edge.style == STYLE_SOLID else STYLE_SOLID
        self._commit()
        return True

    def update_node(self, node_id: str, attributes: Optional[Dict[str, Any]] = None, **changes) -> bool:
        """
        Merge attribute changes into a node.

        Changes may be passed as a mapping, as keyword arguments, or both
        (keywords win). Accepted keys: label, color, shape, glyph, position.
        Unknown keys, unknown shapes and malformed positions are ignored.
        Returns True only if a value actually changed.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"update_node: unknown node {node_id!r}")
            return False

        changes = {**(attributes or {}), **changes}
        updates: Dict[str, Any] = {}
        if changes.get('label') is not None:
            updates['label'] = str(changes['label'])
        if changes.get('color'):
            updates['color'] = changes['color']
        if changes.get('glyph') is not None:
            updates['glyph'] = changes['glyph']
        if 'shape' in changes:
            if changes['shape'] in NODE_SHAPES:
                updates['shape'] = changes['shape']
            else:
                logger.debug(f"update_node: ignoring shape {changes['shape']!r}")
        if 'position' in changes:
            try:
                updates['position'] = snap_point(changes['position'])
            except (TypeError, ValueError, OverflowError):
                logger.debug(f"update_node: ignoring position {changes['position']!r}")

        changed = False
        for field, value in updates.items():
            if getattr(node, field) != value:
                setattr(node, field, value)
                changed = True

        if changed:
            self._commit()
        return changed

    def toggle_shape(self, node_id: str) -> bool:
        """Switch a node between circle and rect."""
        node = self._nodes.get(node_id)
        if node is None:
            return False
        shape = SHAPE_RECT if node.shape == SHAPE_CIRCLE else SHAPE_CIRCLE
        return self.update_node(node_id, shape=shape)

    def reset(self) -> str:
        """
        Drop everything and start over from a single default root.
        The new root gets a fresh id. Returns that id.
        """
        root = make_root(self._allocate_id())
        self._nodes = {root.id: root}
        self._edges = []
        logger.info(f"Graph reset; new root {root.id}")
        self._commit()
        return root.id

    def recenter(self, anchor: Point = ROOT_POSITION) -> bool:
        """
        Translate every node so the root lands on anchor.
        Relative offsets between nodes are preserved exactly: the anchor is
        snapped to the position grid, so every shift stays on it.
        """
        root = self._nodes[self.root_id]
        ax, ay = snap_point(anchor)
        dx = ax - root.position[0]
        dy = ay - root.position[1]
        if dx == 0 and dy == 0:
            return False

        for node in self._nodes.values():
            x, y = node.position
            node.position = (x + dx, y + dy)
        logger.info(f"Recentered graph on {root.id} by ({dx:.1f}, {dy:.1f})")
        self._commit()
        return True
