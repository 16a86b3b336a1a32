"""
Scene builder for the mind-map board.

Converts a GraphModel plus the current interaction state into a plain dict
that any renderer can draw:

    {
      "nodes": [{"id", "label", "glyph", "shape", "color", "left", "top",
                 "size", "is_connect_source", "is_dragging", "is_editing"}, ...],
      "edges": [{"index", "source", "target", "style", "x1", "y1", "x2", "y2",
                 "stroke", "dash_array", "opacity", "width"}, ...],
      "mode": "<interaction mode>"
    }

Edges run between node centers, take their color from the source node and
keep their model index so a click can be routed to toggle_edge_style().
"""

from typing import Any, Dict, Optional

from mindmap.edit.constants import NODE_SIZE, EDGE_DASH_ARRAY, EDGE_OPACITY, EDGE_WIDTH
from mindmap.edit.controller import InteractionMode, InteractionState
from mindmap.graph import STYLE_DASHED
from mindmap.graph_model import GraphModel

_FALLBACK_STROKE = '#888888'


def node_to_scene(attrs: Dict[str, Any], state: InteractionState) -> Dict[str, Any]:
    """Scene entry for one node (attrs as stored on the networkx graph)."""
    node_id = attrs['id']
    left, top = attrs['position']
    return {
        'id': node_id,
        'label': attrs.get('label', ''),
        'glyph': attrs.get('glyph', ''),
        'shape': attrs.get('shape'),
        'color': attrs.get('color'),
        'left': left,
        'top': top,
        'size': NODE_SIZE,
        'is_connect_source': state.mode == InteractionMode.CONNECT_SOURCE and state.node_id == node_id,
        'is_dragging': state.mode == InteractionMode.DRAGGING and state.node_id == node_id,
        'is_editing': state.mode == InteractionMode.EDITING_LABEL and state.node_id == node_id,
    }


def build_scene(model: GraphModel, state: Optional[InteractionState] = None) -> Dict[str, Any]:
    state = state or InteractionState()
    G = model.to_networkx()
    half = NODE_SIZE / 2

    nodes = [node_to_scene(attrs, state) for _, attrs in G.nodes(data=True)]

    edges = []
    for src, tgt, key, data in G.edges(keys=True, data=True):
        # Only draw edges whose endpoints both exist
        if src not in G.nodes or tgt not in G.nodes:
            continue
        sx, sy = G.nodes[src]['position']
        tx, ty = G.nodes[tgt]['position']
        stroke = G.nodes[src].get('color') or _FALLBACK_STROKE
        edges.append({
            'index': key,
            'source': src,
            'target': tgt,
            'style': data.get('style'),
            'x1': sx + half,
            'y1': sy + half,
            'x2': tx + half,
            'y2': ty + half,
            'stroke': stroke,
            'dash_array': EDGE_DASH_ARRAY if data.get('style') == STYLE_DASHED else '0',
            'opacity': EDGE_OPACITY,
            'width': EDGE_WIDTH,
        })

    # networkx groups edges by source; renderers want insertion order
    edges.sort(key=lambda e: e['index'])
    return {'nodes': nodes, 'edges': edges, 'mode': state.mode.value}
