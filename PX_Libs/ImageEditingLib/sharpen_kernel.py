"""
Sharpen kernel.

A 3x3 four-neighbour sharpening convolution applied after the color
filters. For every interior pixel and each RGB channel:

    sum = N + S + E + W
    out = clamp(center + amount * (5 * center - sum), 0, 255)

Border pixels are copied unchanged and alpha is never touched.
"""

import numpy as np

from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer


def sharpen(buffer: PixelBuffer, amount_percent: float) -> PixelBuffer:
    """
    Sharpen the interior of ``buffer``.

    Args:
        buffer: Source buffer (not modified)
        amount_percent: Strength 0-100; 0 returns an exact copy

    Returns:
        New PixelBuffer

    Raises:
        ValueError: If amount_percent is negative
    """
    if amount_percent < 0:
        raise ValueError(f"sharpen amount must be >= 0, got {amount_percent}")

    result = buffer.array()
    if amount_percent == 0 or buffer.width < 3 or buffer.height < 3:
        return PixelBuffer(result)

    amount = amount_percent / 100.0
    src = buffer.data[..., :3].astype(np.float64)

    center = src[1:-1, 1:-1]
    neighbours = src[:-2, 1:-1] + src[2:, 1:-1] + src[1:-1, :-2] + src[1:-1, 2:]
    sharpened = center + amount * (5.0 * center - neighbours)

    result[1:-1, 1:-1, :3] = np.clip(np.rint(sharpened), 0, 255).astype(np.uint8)
    return PixelBuffer(result)
