"""
ImageEditingLib - Core image editing functionality

This module provides the raster model, transforms, filters and codecs
used by the Pixels editor. The Qt window lives in image_editor_window and
is not imported here.
"""

from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, RgbaColor
from PX_Libs.ImageEditingLib.transform_engine import (
    CropRect,
    apply_geometry,
    crop,
    derive_resize_dimensions,
    flip,
    resize,
    rotate,
)
from PX_Libs.ImageEditingLib.filter_pipeline import FilterState, apply_filters
from PX_Libs.ImageEditingLib.sharpen_kernel import sharpen
from PX_Libs.ImageEditingLib.render_pipeline import render
from PX_Libs.ImageEditingLib.presets import FilterPreset, get_preset, list_presets
from PX_Libs.ImageEditingLib.image_codec import (
    ExportResult,
    decode_image,
    encode_png,
    export_filename,
)

__all__ = [
    "PixelBuffer",
    "RgbaColor",
    "CropRect",
    "apply_geometry",
    "crop",
    "derive_resize_dimensions",
    "flip",
    "resize",
    "rotate",
    "FilterState",
    "apply_filters",
    "sharpen",
    "render",
    "FilterPreset",
    "get_preset",
    "list_presets",
    "ExportResult",
    "decode_image",
    "encode_png",
    "export_filename",
]
