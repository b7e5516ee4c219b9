"""Constants for the hierarchic finite elements."""

# Relative size of the smallest pivot of the node matrix below which the
# evaluation nodes are treated as degenerate
RANK_TOLERANCE = 1e-12

DEFAULT_DEGREE = 3
PLOT_RESOLUTION = 41  # Sample points per axis
