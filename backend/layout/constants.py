"""
Layout constants for the pipeline editor canvas.
Sizes are logical canvas units and match the node card drawn by the frontend.
"""

# Node card dimensions
DEFAULT_NODE_W = 180
DEFAULT_NODE_H = 80

# Gap between neighbouring nodes in the same rank
DEFAULT_NODE_SEP = 100

# Gap between ranks (along the layout direction)
DEFAULT_RANK_SEP = 100

DEFAULT_DIRECTION = "LR"
DIRECTIONS = ("LR", "RL", "TB", "BT")

# Fixed pass counts keep the layout reproducible
CROSSING_PASSES = 24
ALIGN_PASSES = 12
