"""
Pasteup Layer Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Blend modes (the fixed compositing set)
- Default layer and viewport settings
- Min/max values and constraints
- Interaction tuning (zoom factors, nudge steps)
- Persistence names and format versions
"""

# ======================================================================
# BLEND MODES
# ======================================================================
# Listed in the order they appear in the layer panel dropdown

BLEND_MODES = (
    'normal',
    'multiply',
    'screen',
    'overlay',
    'darken',
    'lighten',
    'color-dodge',
    'color-burn',
    'hard-light',
    'soft-light',
    'difference',
    'exclusion',
    'hue',
    'saturation',
    'color',
    'luminosity',
    'plus-darker',
    'plus-lighter',
)

DEFAULT_BLEND_MODE = 'normal'

# ======================================================================
# LAYER DEFAULTS
# ======================================================================

DEFAULT_LAYER_X = 0.0
DEFAULT_LAYER_Y = 0.0
DEFAULT_ROTATION = 0.0
DEFAULT_OPACITY = 1.0
DEFAULT_VISIBLE = True
DEFAULT_LOCKED = False

# Name template for newly ingested layers (1-based stack position)
LAYER_NAME_TEMPLATE = "Layer {index}"

# Fields that only move/transform a layer (blocked while locked)
GEOMETRY_FIELDS = frozenset({'x', 'y', 'width', 'height', 'rotation'})

# ======================================================================
# VIEWPORT
# ======================================================================

DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600

# Canonical viewbox used on first start, reset and import without viewBox
DEFAULT_VIEWBOX = {'x': 0.0, 'y': 0.0, 'w': 800.0, 'h': 600.0}

# Wheel zoom: one notch scales the viewbox width by this factor
ZOOM_OUT_FACTOR = 1.1
ZOOM_IN_FACTOR = 0.9

# Zoom limits relative to the initial canvas width
# (viewbox width may range from initial/10 to initial*10)
MAX_ZOOM_IN = 10.0
MAX_ZOOM_OUT = 10.0

# ======================================================================
# INTERACTION
# ======================================================================

# Scale gestures never shrink a layer below this size (plane units)
MIN_LAYER_SIZE = 10

# Arrow key nudge distance in screen units (divided by zoom)
ARROW_KEY_MOVE_NORMAL = 1
ARROW_KEY_MOVE_COARSE = 10   # With the secondary modifier held

# ======================================================================
# PERSISTENCE
# ======================================================================

PROJECT_FORMAT_VERSION = 1

METADATA_FILENAME = "metadata.json"
IMAGE_STORE_DIRNAME = "images"
IMAGE_RECORD_SUFFIX = ".dataurl"

DEFAULT_DATA_DIR = "~/.pasteup"
DATA_DIR_ENV_VAR = "PASTEUP_DATA_DIR"
CONFIG_FILENAME = "config.json"
