"""
Render composition: geometry, then color filters, then sharpen.
"""

import logging

from PX_Libs.ImageEditingLib.filter_pipeline import FilterState, apply_filters
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.ImageEditingLib.sharpen_kernel import sharpen
from PX_Libs.ImageEditingLib.transform_engine import apply_geometry

logger = logging.getLogger(__name__)


def render(buffer: PixelBuffer, state: FilterState) -> PixelBuffer:
    """
    Produce the displayed image for ``buffer`` under ``state``.

    The sharpen pass reads the filtered (pre-sharpen) buffer. The input is
    never modified.
    """
    result = apply_geometry(
        buffer,
        flip_horizontal=state.flip_horizontal,
        flip_vertical=state.flip_vertical,
        degrees=state.rotate,
    )
    result = apply_filters(result, state)
    if state.sharpen > 0:
        result = sharpen(result, state.sharpen)

    logger.debug(f"Rendered {result.width}x{result.height}")
    return result
