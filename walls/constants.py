"""Wall engine tuning constants.

All lengths in canvas pixels unless noted.
"""

DEFAULT_THICKNESS = 20               # boundary and partition wall thickness
MAX_THICKNESS = 100                  # largest thickness update_thickness accepts
DEFAULT_MAGNET_DISTANCE = 8          # snap radius

MIN_SEGMENT_LENGTH = 3               # shortest partition piece a split may leave
ON_WALL_TOLERANCE = 0.1              # "point lies on a wall" distance
POINT_EPS = 1e-4                     # duplicate intersection test
SHARED_POINT_EPS = 1e-3              # shared partition endpoint test

ENDPOINT_PRIORITY = 0.5              # endpoints weigh distances by this factor
ENDPOINT_CATCH_FACTOR = 2            # endpoints snap within this many magnet radii
TANGENT_RADIUS = 50                  # offset of tangent candidates from the cursor
TANGENT_CATCH_FACTOR = 2             # tangent candidates within this many magnet radii
ORTHO_SNAP_DEG = 3                   # degrees off-axis still treated as aligned

PARTITION_EXTEND = 10000             # drag re-snap line half-length
MAX_PROPAGATION_PASSES = 64          # bound on boundary drag cascade rounds

DEFAULT_SOFA_WIDTH = 100             # furniture defaults
DEFAULT_SOFA_HEIGHT = 50
FURNITURE_NORMAL_PROBE = 10          # distance of inside/outside probe point
