"""
Unit tests for the sharpen_kernel module.
"""

import numpy as np
import pytest

from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.ImageEditingLib.sharpen_kernel import sharpen


def spike_buffer():
    """5x5 grey buffer with one brighter pixel in the middle."""
    data = np.full((5, 5, 4), 100, dtype=np.uint8)
    data[..., 3] = 200
    data[2, 2, :3] = 120
    return PixelBuffer(data)


class TestSharpen:
    """Tests for sharpen."""

    def test_zero_amount_is_identity(self, gradient_buffer):
        """Should return an identical buffer for amount 0."""
        assert sharpen(gradient_buffer, 0) == gradient_buffer

    def test_negative_amount_rejected(self, gradient_buffer):
        """Should reject negative amounts."""
        with pytest.raises(ValueError):
            sharpen(gradient_buffer, -1)

    def test_amplifies_center(self):
        """Center = 120, neighbours = 100: out = 120 + 0.5 * (600 - 400) = 220."""
        result = sharpen(spike_buffer(), 50)

        assert result.get_pixel(2, 2) == (220, 220, 220, 200)

    def test_neighbour_of_spike(self):
        """Center 100, neighbours 100 + 120 + 100 + 100 = 420: out = 100 + (500 - 420) = 180."""
        result = sharpen(spike_buffer(), 100)

        assert result.get_pixel(2, 1)[:3] == (180, 180, 180)

    def test_borders_unchanged(self):
        """Should copy the outermost rows and columns unchanged."""
        buffer = spike_buffer()
        buffer.set_pixel(0, 2, (255, 0, 0, 200))

        result = sharpen(buffer, 100)

        for x in range(5):
            assert result.get_pixel(x, 0) == buffer.get_pixel(x, 0)
            assert result.get_pixel(x, 4) == buffer.get_pixel(x, 4)
        for y in range(5):
            assert result.get_pixel(0, y) == buffer.get_pixel(0, y)
            assert result.get_pixel(4, y) == buffer.get_pixel(4, y)

    def test_alpha_untouched(self):
        """Should never change the alpha channel."""
        result = sharpen(spike_buffer(), 100)

        assert np.all(result.data[..., 3] == 200)

    def test_flat_interior_scaled(self):
        """On a flat image 5 * center - sum equals center, so amount 100 doubles the interior."""
        buffer = PixelBuffer.new(6, 6, (30, 60, 90, 255))

        result = sharpen(buffer, 100)

        assert result.get_pixel(2, 3) == (60, 120, 180, 255)
        assert result.get_pixel(0, 0) == (30, 60, 90, 255)

    def test_clamps_to_255(self):
        """Bright interiors should saturate at 255."""
        buffer = PixelBuffer.new(4, 4, (200, 200, 200, 255))

        assert sharpen(buffer, 100).get_pixel(1, 1) == (255, 255, 255, 255)

    def test_tiny_buffer_copied(self):
        """Buffers without interior pixels should be returned unchanged."""
        buffer = PixelBuffer.new(2, 8, (1, 2, 3, 4))

        assert sharpen(buffer, 80) == buffer

    def test_input_not_modified(self):
        """Should never write into the source buffer."""
        buffer = spike_buffer()
        before = buffer.copy()

        sharpen(buffer, 100)

        assert buffer == before
