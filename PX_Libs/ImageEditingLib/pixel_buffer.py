"""
Pixel buffer data model for Pixels.

This module defines the raster container every editing operation consumes
and produces.

Classes:
    PixelBuffer: A width x height RGBA raster backed by a numpy array

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from typing import Any, Tuple

import numpy as np

from PX_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]


class PixelBuffer:
    """
    A width x height RGBA raster.

    Pixels are stored as a ``uint8`` array of shape ``(height, width, 4)``,
    so the flat byte length is always ``width * height * 4``. Transform
    functions never write into a buffer they were given; they return a new
    one. ``set_pixel`` and ``clamp_channels`` are the only in-place writes.

    Example:
        >>> buffer = PixelBuffer.new(4, 2, (255, 0, 0, 255))
        >>> buffer.get_pixel(3, 1)
        (255, 0, 0, 255)
        >>> len(buffer.to_bytes())
        32
    """

    __slots__ = ("_data",)

    def __init__(self, data: np.ndarray) -> None:
        """
        Wrap an existing array (no copy).

        Args:
            data: ``uint8`` array of shape (height, width, 4)

        Raises:
            TypeError: If data is not a numpy array
            ValueError: If the shape, dtype or dimensions are invalid
        """
        if not isinstance(data, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(data)}")
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"Pixel data must have shape (height, width, 4), got {data.shape}")
        if data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {data.dtype}")
        if data.shape[0] <= 0 or data.shape[1] <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {data.shape[1]}x{data.shape[0]}")
        self._data = data

    @classmethod
    def new(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[:, :] = color
        return cls(data)

    @classmethod
    def from_bytes(cls, width: int, height: int, pixels: bytes) -> "PixelBuffer":
        """
        Build a buffer from raw RGBA bytes.

        Raises:
            ValueError: If ``len(pixels) != width * height * 4``
        """
        expected = width * height * 4
        if len(pixels) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(pixels)}"
            )
        data = np.frombuffer(bytes(pixels), dtype=np.uint8).reshape(height, width, 4).copy()
        return cls(data)

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """Build a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the pixel array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def array(self) -> np.ndarray:
        """Return a writable copy of the pixel array."""
        return self._data.copy()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self._data.copy())

    def to_bytes(self) -> bytes:
        return self._data.tobytes()

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image holding a copy of the pixels."""
        return Image.fromarray(self._data.copy())

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def get_pixel(self, x: int, y: int) -> RgbaColor:
        """
        Read one pixel.

        Raises:
            IndexError: If (x, y) is outside the buffer
        """
        self._check_bounds(x, y)
        r, g, b, a = self._data[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, color: RgbaColor) -> None:
        """
        Write one pixel in place. Channel values are clamped to 0-255.

        Raises:
            IndexError: If (x, y) is outside the buffer
            ValueError: If color does not have 4 channels
        """
        self._check_bounds(x, y)
        if len(color) != 4:
            raise ValueError(f"Expected RGBA color with 4 channels, got {color}")
        self._data[y, x] = [max(0, min(255, int(round(c)))) for c in color]

    @staticmethod
    def clamp_channels(values: np.ndarray) -> np.ndarray:
        """Clamp a float array to the channel range in place and return it."""
        return np.clip(values, 0.0, 255.0, out=values)

    @classmethod
    def from_float(cls, values: np.ndarray) -> "PixelBuffer":
        """Round, clamp and pack a float (height, width, 4) array."""
        rounded = np.rint(values)
        cls.clamp_channels(rounded)
        return cls(rounded.astype(np.uint8))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
