"""
Freeform mind-map board.

The package holds the graph data model (GraphModel) and the pointer-driven
editing layer in mindmap.edit. Rendering hosts read snapshots and call the
operations; nothing here depends on a specific UI toolkit.
"""

__version__ = "0.1.0"
