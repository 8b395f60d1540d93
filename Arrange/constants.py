# Centralized constants and defaults for furniture arrangement

VERSION = "v1"

# Classification thresholds (feet / square feet), evaluated in this order
LARGE_MIN_LENGTH = 5.0
LARGE_MIN_WIDTH = 3.0
LARGE_MIN_AREA = 15.0
MEDIUM_MIN_AREA = 6.0
MEDIUM_MIN_LENGTH = 2.0
MEDIUM_MIN_WIDTH = 1.5
SMALL_MIN_AREA = 2.0
ACCENT_WALL_DISTANCE = 1.0

# Symmetry
SYMMETRY_CATEGORIES = frozenset({"nightstand", "side-table", "end-table", "table-lamp", "floor-lamp"})
SYMMETRY_NAME_HINTS = ("nightstand", "side table", "table lamp")
SYMMETRY_EXCLUDED_CATEGORIES = frozenset({"accent-chair", "dining-chair"})
SYMMETRY_EXCLUDED_NAME_HINTS = ("accent chair", "dining chair")
SYMMETRY_MARGIN = 1.0
BED_CATEGORY = "bed-frame"
DRESSER_CATEGORY = "dresser"

# Fallback planner
MIN_CLEARANCE_DEFAULT = 0.25
COLLISION_MAX_ATTEMPTS = 10
COLLISION_SHIFT_STEP = 2.0
COLLISION_DIAGONAL_Y_STEP = 1.0
WALL_MARGIN = 1.0
ROW_SPACING = 3.0

# Space utilization band considered comfortable (percent)
UTILIZATION_OPTIMAL_MIN = 15.0
UTILIZATION_OPTIMAL_MAX = 40.0

# Rendering
SVG_SCALE_DEFAULT = 40
