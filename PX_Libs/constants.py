"""
Constants and configuration values for Pixels.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editor.
"""

# Edit history
HISTORY_LIMIT = 20

# Crop tool
MIN_CROP_SIZE = 50
CROP_INSET_RATIO = 0.1
CROP_HANDLE_TOLERANCE = 10.0
CROP_HANDLES = ("n", "s", "e", "w", "ne", "nw", "se", "sw")

# Geometry
MAX_DIMENSION = 32767

# Blur: sigma in pixels per slider unit, kernel support in sigmas
BLUR_SIGMA_PER_UNIT = 1.0
BLUR_TRUNCATE = 3.0

# Saturation luma weights (Rec. 601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Filter defaults and accepted ranges
FILTER_DEFAULTS = {
    "brightness": 100.0,
    "contrast": 100.0,
    "saturation": 100.0,
    "blur": 0.0,
    "hue": 0.0,
    "rotate": 0.0,
    "opacity": 100.0,
    "sharpen": 0.0,
}

FILTER_RANGES = {
    "brightness": (0.0, 200.0),
    "contrast": (0.0, 200.0),
    "saturation": (0.0, 200.0),
    "blur": (0.0, 20.0),
    "hue": (0.0, 360.0),
    "rotate": (0.0, 360.0),
    "opacity": (0.0, 100.0),
    "sharpen": (0.0, 100.0),
}

# Preset table: brightness, contrast, saturation, blur, hue
PRESET_VALUES = {
    "none": {"brightness": 100.0, "contrast": 100.0, "saturation": 100.0, "blur": 0.0, "hue": 0.0},
    "grayscale": {"brightness": 100.0, "contrast": 100.0, "saturation": 0.0, "blur": 0.0, "hue": 0.0},
    "sepia": {"brightness": 110.0, "contrast": 90.0, "saturation": 80.0, "blur": 0.0, "hue": 20.0},
    "vintage": {"brightness": 95.0, "contrast": 85.0, "saturation": 70.0, "blur": 0.5, "hue": 10.0},
    "cold": {"brightness": 105.0, "contrast": 110.0, "saturation": 120.0, "blur": 0.0, "hue": 200.0},
    "warm": {"brightness": 110.0, "contrast": 105.0, "saturation": 130.0, "blur": 0.0, "hue": 30.0},
}

# File naming
EXPORT_FILE_PREFIX = "pixels-edited-"
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
DEFAULT_OUTPUT_FORMAT = "PNG"
EXPORT_MIME_TYPE = "image/png"

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
STANDARD_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp)"

# Snapshot labels
SNAPSHOT_LOAD = "load"
SNAPSHOT_FILTERS = "filters"
SNAPSHOT_FLIP_HORIZONTAL = "flip_horizontal"
SNAPSHOT_FLIP_VERTICAL = "flip_vertical"
SNAPSHOT_PRESET = "preset"
SNAPSHOT_RESET = "reset"
SNAPSHOT_RESIZE = "resize"
SNAPSHOT_CROP = "crop"

# UI constants
APP_NAME = "Pixels Photo Editor"
DEFAULT_WINDOW_WIDTH = 1400
DEFAULT_WINDOW_HEIGHT = 850
PREVIEW_MIN_SIZE = 600
