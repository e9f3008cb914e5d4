"""
Color Filter Pipeline.

Applies the editor's color adjustments to a PixelBuffer in a fixed order:

1. brightness  - channel * brightness / 100
2. contrast    - (channel - 128) * contrast / 100 + 128
3. saturation  - mix each channel with the pixel's Rec. 601 luma
4. blur        - separable Gaussian, sigma proportional to the blur value
5. hue-rotate  - rotate the HSL hue angle
6. opacity     - scale the alpha channel

Intermediate values stay in floating point and are clamped to 0-255 after
every stage; the result is rounded once at the end. A stage whose parameter
is at its identity value is skipped, which gives the same result as running it.

Example:
    >>> state = FilterState().with_value("brightness", 150)
    >>> brighter = apply_filters(buffer, state)
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Tuple

import numpy as np
from scipy import ndimage

from PX_Libs.constants import (
    BLUR_SIGMA_PER_UNIT,
    BLUR_TRUNCATE,
    FILTER_DEFAULTS,
    FILTER_RANGES,
    LUMA_WEIGHTS,
)
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer

FLIP_FIELDS = ("flip_horizontal", "flip_vertical")


@dataclass(frozen=True)
class FilterState:
    """Adjustment values for one render.

    Attributes:
        brightness: Percent, 100 = unchanged (0-200)
        contrast: Percent, 100 = unchanged (0-200)
        saturation: Percent, 100 = unchanged, 0 = grayscale (0-200)
        blur: Gaussian sigma proxy in pixels (0-20)
        hue: Hue rotation in degrees (0-360)
        rotate: Canvas rotation in degrees (0-360)
        opacity: Alpha percent (0-100)
        sharpen: Sharpen amount percent (0-100)
        flip_horizontal: Mirror left-right
        flip_vertical: Mirror top-bottom
    """
    brightness: float = FILTER_DEFAULTS["brightness"]
    contrast: float = FILTER_DEFAULTS["contrast"]
    saturation: float = FILTER_DEFAULTS["saturation"]
    blur: float = FILTER_DEFAULTS["blur"]
    hue: float = FILTER_DEFAULTS["hue"]
    rotate: float = FILTER_DEFAULTS["rotate"]
    opacity: float = FILTER_DEFAULTS["opacity"]
    sharpen: float = FILTER_DEFAULTS["sharpen"]
    flip_horizontal: bool = False
    flip_vertical: bool = False

    def with_value(self, name: str, value: Any) -> "FilterState":
        """
        Return a copy with one field changed.

        Args:
            name: Field name (e.g. "brightness", "flip_horizontal")
            value: New value; numeric fields must lie within their range

        Raises:
            ValueError: If name is unknown or value is out of range
            TypeError: If a numeric field receives a non-number
        """
        if name in FLIP_FIELDS:
            return replace(self, **{name: bool(value)})

        if name not in FILTER_RANGES:
            raise ValueError(
                f"Unknown filter: {name}. "
                f"Valid filters: {', '.join(list(FILTER_RANGES) + list(FLIP_FIELDS))}"
            )

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{name} must be a number, got {type(value)}")

        low, high = FILTER_RANGES[name]
        if not (low <= value <= high):
            raise ValueError(f"{name} must be {low:g}-{high:g}, got {value}")

        return replace(self, **{name: float(value)})

    def with_values(self, values: Dict[str, Any]) -> "FilterState":
        state = self
        for name, value in values.items():
            state = state.with_value(name, value)
        return state

    def reset(self) -> "FilterState":
        """Every field back to its default, flips cleared."""
        return FilterState()

    @property
    def is_default(self) -> bool:
        return self == FilterState()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterState":
        """Create from dictionary."""
        known = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls().with_values(filtered)


# ============================================================================
# Stages (float arrays, channel values 0-255)
# ============================================================================

def adjust_brightness(rgb: np.ndarray, brightness: float) -> np.ndarray:
    return np.clip(rgb * (brightness / 100.0), 0.0, 255.0)


def adjust_contrast(rgb: np.ndarray, contrast: float) -> np.ndarray:
    return np.clip((rgb - 128.0) * (contrast / 100.0) + 128.0, 0.0, 255.0)


def adjust_saturation(rgb: np.ndarray, saturation: float) -> np.ndarray:
    luma = rgb @ np.asarray(LUMA_WEIGHTS, dtype=rgb.dtype)
    luma = luma[..., np.newaxis]
    return np.clip(luma + (rgb - luma) * (saturation / 100.0), 0.0, 255.0)


def gaussian_blur(rgba: np.ndarray, blur: float) -> np.ndarray:
    """
    Separable Gaussian blur over an RGBA float array.

    Colour is blurred premultiplied by alpha so transparent pixels do not
    darken their neighbours. The kernel is cut off at BLUR_TRUNCATE sigmas
    and edge pixels are extended.

    Args:
        rgba: Float array (height, width, 4), values 0-255
        blur: Slider value; sigma = blur * BLUR_SIGMA_PER_UNIT

    Returns:
        Blurred float array of the same shape
    """
    sigma = float(blur) * BLUR_SIGMA_PER_UNIT
    if sigma <= 0:
        return rgba

    alpha = rgba[..., 3:4] / 255.0
    premultiplied = np.concatenate([rgba[..., :3] * alpha, rgba[..., 3:4]], axis=-1)

    blurred = ndimage.gaussian_filter(
        premultiplied,
        sigma=(sigma, sigma, 0),
        truncate=BLUR_TRUNCATE,
        mode="nearest",
    )

    out_alpha = np.broadcast_to(blurred[..., 3:4] / 255.0, blurred[..., :3].shape)
    rgb = np.divide(
        blurred[..., :3],
        out_alpha,
        out=np.zeros_like(blurred[..., :3]),
        where=out_alpha > 1e-6,
    )
    return np.clip(np.concatenate([rgb, blurred[..., 3:4]], axis=-1), 0.0, 255.0)


def rgb_to_hsl(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert an array of RGB values (0-1) to hue (degrees), saturation and
    lightness (0-1). Achromatic pixels get hue 0.
    """
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    maxc = rgb.max(axis=-1)
    minc = rgb.min(axis=-1)
    delta = maxc - minc
    lightness = (maxc + minc) / 2.0

    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.divide(delta, denom, out=np.zeros_like(delta), where=denom > 1e-12)

    chromatic = delta > 1e-12
    safe_delta = np.where(chromatic, delta, 1.0)
    hue = np.where(
        maxc == r,
        ((g - b) / safe_delta) % 6.0,
        np.where(maxc == g, (b - r) / safe_delta + 2.0, (r - g) / safe_delta + 4.0),
    )
    hue = np.where(chromatic, hue * 60.0, 0.0)
    return hue, saturation, lightness


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """Inverse of rgb_to_hsl; returns RGB values 0-1 stacked on the last axis."""
    chroma = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    sector_pos = (hue % 360.0) / 60.0
    x = chroma * (1.0 - np.abs(sector_pos % 2.0 - 1.0))
    m = lightness - chroma / 2.0
    sector = np.floor(sector_pos).astype(np.int64) % 6
    zero = np.zeros_like(chroma)

    conditions = [sector == i for i in range(6)]
    r = np.select(conditions, [chroma, x, zero, zero, x, chroma])
    g = np.select(conditions, [x, chroma, chroma, x, zero, zero])
    b = np.select(conditions, [zero, zero, x, chroma, chroma, x])
    return np.stack([r + m, g + m, b + m], axis=-1)


def rotate_hue(rgb: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate the HSL hue of 0-255 RGB values by ``degrees``."""
    hue, saturation, lightness = rgb_to_hsl(rgb / 255.0)
    rotated = hsl_to_rgb((hue + degrees) % 360.0, saturation, lightness)
    return np.clip(rotated * 255.0, 0.0, 255.0)


def adjust_opacity(alpha: np.ndarray, opacity: float) -> np.ndarray:
    return np.clip(alpha * (opacity / 100.0), 0.0, 255.0)


# ============================================================================
# Pipeline
# ============================================================================

def apply_filters(buffer: PixelBuffer, state: FilterState) -> PixelBuffer:
    """
    Run the color stages of ``state`` over ``buffer``.

    Geometry (flip, rotate) and sharpen are not part of this pipeline; see
    render_pipeline.render for the full composition.

    Args:
        buffer: Source buffer (not modified)
        state: Filter values

    Returns:
        New PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    work = buffer.data.astype(np.float64)
    changed = False

    if state.brightness != 100:
        work[..., :3] = adjust_brightness(work[..., :3], state.brightness)
        changed = True

    if state.contrast != 100:
        work[..., :3] = adjust_contrast(work[..., :3], state.contrast)
        changed = True

    if state.saturation != 100:
        work[..., :3] = adjust_saturation(work[..., :3], state.saturation)
        changed = True

    if state.blur > 0:
        work = gaussian_blur(work, state.blur)
        changed = True

    if state.hue % 360 != 0:
        work[..., :3] = rotate_hue(work[..., :3], state.hue)
        changed = True

    if state.opacity != 100:
        work[..., 3] = adjust_opacity(work[..., 3], state.opacity)
        changed = True

    if not changed:
        return buffer.copy()

    return PixelBuffer.from_float(work)
