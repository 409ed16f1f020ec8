"""
Advanced Array Tool - Constants and Configuration

This module contains all constant values used throughout the tool:
- Default generation parameters for grid and circle arrays
- Randomization ranges for per-instance jitter
- Settings store keys and naming formats
- Built-in prefab library
"""

# ======================================================================
# GRID DEFAULTS
# ======================================================================

DEFAULT_ROWS = 1
DEFAULT_COLUMNS = 1
DEFAULT_LAYERS = 1
DEFAULT_SPACING = 1.0

# ======================================================================
# CIRCLE DEFAULTS
# ======================================================================

DEFAULT_OBJECT_COUNT = 10
DEFAULT_RADIUS = 5.0

# ======================================================================
# MODIFIER DEFAULTS
# ======================================================================

DEFAULT_POSITION_OFFSET = (0.0, 0.0, 0.0)
DEFAULT_ROTATION_OFFSET = (0.0, 0.0, 0.0)  # Euler degrees
DEFAULT_SCALE_MULTIPLIER = (1.0, 1.0, 1.0)

# ======================================================================
# RANDOMIZATION RANGES
# ======================================================================
# Each Euler component is drawn independently (not uniform on SO(3))
RANDOM_ROTATION_MIN = 0.0
RANDOM_ROTATION_MAX = 360.0

RANDOM_SCALE_MIN = 0.5
RANDOM_SCALE_MAX = 1.5

# ======================================================================
# PERSISTENCE
# ======================================================================

SETTINGS_KEY_ARRAY_SETS = 'ArrayToolData'
SETTINGS_KEY_SCENE = 'SceneData'
SETTINGS_FILENAME = 'settings.json'
CONFIG_DIR_NAME = '.prefab_array_tool'

# ======================================================================
# NAMING
# ======================================================================

ARRAY_SET_NAME_FORMAT = "Array_Set_{index}"

# ======================================================================
# EDITOR
# ======================================================================

MAX_HISTORY_ENTRIES = 50

# Spin box limits for the settings form
MAX_COUNT = 1000
MAX_DISTANCE = 100000.0

# Larger arrays are not drawn in the preview
MAX_PREVIEW_PLACEMENTS = 10000

# Preview random draws are reseeded on every redraw
PREVIEW_RANDOM_SEED = 0

# Built-in prefabs available in every session: asset_id -> (name, local scale)
BUILTIN_PREFABS = {
    'primitive_cube':     ('Cube',     (1.0, 1.0, 1.0)),
    'primitive_sphere':   ('Sphere',   (1.0, 1.0, 1.0)),
    'primitive_cylinder': ('Cylinder', (1.0, 2.0, 1.0)),
    'primitive_pillar':   ('Pillar',   (0.5, 4.0, 0.5)),
    'primitive_crate':    ('Crate',    (0.8, 0.8, 0.8)),
}
