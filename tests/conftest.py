"""
Pytest configuration and shared fixtures for Pixels tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer


def make_gradient(width, height):
    """
    Build a buffer whose red channel runs along x and green along y.

    Every pixel is distinct in (r, g) for images up to 256px on a side,
    which makes mirrored and cropped results easy to check.
    """
    data = np.zeros((height, width, 4), dtype=np.uint8)
    xs = np.linspace(0, 255, width).round().astype(np.uint8)
    ys = np.linspace(0, 255, height).round().astype(np.uint8)
    data[..., 0] = xs[np.newaxis, :]
    data[..., 1] = ys[:, np.newaxis]
    data[..., 2] = 64
    data[..., 3] = 255
    return PixelBuffer(data)


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def gradient_buffer():
    """A 200x100 opaque gradient buffer."""
    return make_gradient(200, 100)


@pytest.fixture
def small_buffer():
    """A 4x3 buffer with a distinct color per pixel."""
    data = np.arange(4 * 3 * 4, dtype=np.uint8).reshape(3, 4, 4) * 5
    data[..., 3] = 255
    return PixelBuffer(data)


@pytest.fixture
def png_bytes():
    """PNG file contents of a 40x30 opaque orange image."""
    output = BytesIO()
    Image.new("RGBA", (40, 30), (240, 140, 20, 255)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def make_buffer():
    """Factory fixture: make_buffer(width, height) -> gradient PixelBuffer."""
    return make_gradient
