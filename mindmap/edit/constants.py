"""
Shared constants for the board's editing layer.

These values are used by both Python (controller, coordinates, scene)
and the host's node markup. Keep them in sync!
"""

# Visual footprint of a node card in pixels (square)
NODE_SIZE = 80.0

# Half the footprint: pointer positions are shifted by this so a dragged
# node stays centered under the cursor
HALF_EXTENT = NODE_SIZE / 2

# Edge rendering
EDGE_DASH_ARRAY = '6,6'
EDGE_OPACITY = 0.6
EDGE_WIDTH = 2

# Keys that end or cancel an interaction
CONFIRM_KEY = 'Enter'
CANCEL_KEY = 'Escape'
