"""
Geometric transform operations for Pixels.

Every function takes a PixelBuffer and returns a new one; inputs are never
modified.

Functions:
    flip: Mirror across the horizontal and/or vertical axis
    rotate: Rotate about the canvas centre without changing dimensions
    resize: Lanczos resample to exact dimensions
    derive_resize_dimensions: Fill in a missing resize dimension by aspect ratio
    crop: Extract a sub-rectangle
    apply_geometry: Flip and rotate in canvas transform order
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PX_Libs.constants import MAX_DIMENSION, MIN_CROP_SIZE
from PX_Libs.errors import InvalidDimensions, InvalidRect
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.pillow_compat import Resampling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in image pixel coordinates.

    Attributes:
        x: Left edge
        y: Top edge
        width: Rectangle width
        height: Rectangle height
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def to_box(self) -> Tuple[int, int, int, int]:
        """
        Round the edges to whole pixels.

        Edges are rounded independently with round-half-up, which commutes
        with integer offsets, so a rect at least 50 wide stays at least 50
        wide and a rect inside the canvas stays inside it.

        Returns:
            (left, top, right, bottom) integer box
        """
        return (
            _round_half_up(self.x),
            _round_half_up(self.y),
            _round_half_up(self.right),
            _round_half_up(self.bottom),
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def min_crop_size(canvas_width: int, canvas_height: int) -> Tuple[int, int]:
    """Minimum crop size for a canvas; canvases under 50px use their own size."""
    return min(MIN_CROP_SIZE, canvas_width), min(MIN_CROP_SIZE, canvas_height)


def flip(buffer: PixelBuffer, horizontal: bool = False, vertical: bool = False) -> PixelBuffer:
    """
    Mirror the buffer through its centre.

    Args:
        buffer: Source buffer
        horizontal: Mirror left-right
        vertical: Mirror top-bottom

    Returns:
        New PixelBuffer; flipping the same axis twice restores the original exactly
    """
    data = buffer.data
    if horizontal:
        data = data[:, ::-1]
    if vertical:
        data = data[::-1, :]
    return PixelBuffer(data.copy())


def rotate(buffer: PixelBuffer, degrees: float) -> PixelBuffer:
    """
    Rotate about the canvas centre by an arbitrary angle.

    Positive angles turn clockwise on screen (y axis pointing down). The
    canvas keeps its dimensions: corners that leave it are clipped and
    uncovered areas become transparent.

    Args:
        buffer: Source buffer
        degrees: Rotation angle; multiples of 360 return an exact copy

    Returns:
        New PixelBuffer of the same size
    """
    angle = float(degrees) % 360.0
    if angle == 0.0:
        return buffer.copy()

    image = buffer.to_image()
    # PIL rotates counter-clockwise
    rotated = image.rotate(
        -angle,
        resample=Resampling.BICUBIC,
        expand=False,
        fillcolor=(0, 0, 0, 0),
    )
    return PixelBuffer.from_image(rotated)


def resize(buffer: PixelBuffer, new_width: Optional[int], new_height: Optional[int]) -> PixelBuffer:
    """
    Resample to exactly ``new_width x new_height`` with a Lanczos filter.

    Raises:
        InvalidDimensions: If either dimension is missing, not positive or
            larger than the maximum supported dimension
    """
    if new_width is None or new_height is None:
        raise InvalidDimensions(f"Resize needs both dimensions, got {new_width}x{new_height}")

    if new_width <= 0 or new_height <= 0:
        raise InvalidDimensions(
            f"Resize dimensions must be positive: width={new_width}, height={new_height}"
        )

    if new_width > MAX_DIMENSION or new_height > MAX_DIMENSION:
        raise InvalidDimensions(
            f"Resize dimensions exceed maximum ({MAX_DIMENSION}): "
            f"width={new_width}, height={new_height}"
        )

    new_width = int(new_width)
    new_height = int(new_height)
    if (new_width, new_height) == buffer.size:
        return buffer.copy()

    image = buffer.to_image()
    resized = image.resize((new_width, new_height), Resampling.LANCZOS)
    logger.debug(f"Resized {buffer.width}x{buffer.height} -> {new_width}x{new_height}")
    return PixelBuffer.from_image(resized)


def derive_resize_dimensions(
    original_width: int,
    original_height: int,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Complete a resize request where the caller only gave one dimension.

    The missing dimension is derived from the original aspect ratio and
    rounded to the nearest integer. When both are given they are returned
    unchanged; when neither is given InvalidDimensions is raised.

    Example:
        >>> derive_resize_dimensions(200, 100, width=50)
        (50, 25)
    """
    if width and not height:
        return int(width), max(1, _round_half_up(width * original_height / original_width))
    if height and not width:
        return max(1, _round_half_up(height * original_width / original_height)), int(height)
    if width and height:
        return int(width), int(height)
    raise InvalidDimensions("Please enter valid dimensions")


def validate_crop_rect(buffer: PixelBuffer, rect: CropRect) -> Tuple[int, int, int, int]:
    """
    Check a crop rect against the buffer and return its integer box.

    Raises:
        InvalidRect: If the rect lies outside the buffer or is below the
            minimum crop size
    """
    left, top, right, bottom = rect.to_box()
    min_width, min_height = min_crop_size(buffer.width, buffer.height)

    if left < 0 or top < 0:
        raise InvalidRect(f"Crop coordinates cannot be negative: x={left}, y={top}")

    if right > buffer.width:
        raise InvalidRect(f"Crop exceeds image width: {right} > {buffer.width}")

    if bottom > buffer.height:
        raise InvalidRect(f"Crop exceeds image height: {bottom} > {buffer.height}")

    if right - left < min_width or bottom - top < min_height:
        raise InvalidRect(
            f"Crop must be at least {min_width}x{min_height}, got {right - left}x{bottom - top}"
        )

    return left, top, right, bottom


def crop(buffer: PixelBuffer, rect: CropRect) -> PixelBuffer:
    """
    Extract ``rect`` into a new buffer of exactly ``rect.width x rect.height``.

    Pixel (0, 0) of the result is pixel (rect.x, rect.y) of the source.

    Raises:
        InvalidRect: If rect violates its invariants relative to buffer
    """
    left, top, right, bottom = validate_crop_rect(buffer, rect)
    return PixelBuffer(buffer.data[top:bottom, left:right].copy())


def apply_geometry(
    buffer: PixelBuffer,
    flip_horizontal: bool = False,
    flip_vertical: bool = False,
    degrees: float = 0.0,
) -> PixelBuffer:
    """
    Apply flips and rotation the way a canvas composes them.

    The transform is translate(centre) -> scale(+/-1) -> rotate ->
    translate(-centre). Applied to the pixels that means the image is
    rotated first and the rotated image is then mirrored.
    """
    result = buffer
    if float(degrees) % 360.0 != 0.0:
        result = rotate(result, degrees)
    if flip_horizontal or flip_vertical:
        result = flip(result, flip_horizontal, flip_vertical)
    if result is buffer:
        result = buffer.copy()
    return result
