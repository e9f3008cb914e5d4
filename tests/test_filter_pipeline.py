"""
Tests for the Color Filter Pipeline.

Tests cover:
- FilterState validation and serialization
- Brightness, contrast and saturation arithmetic
- Gaussian blur behaviour on flat and transparent regions
- Hue rotation against the standard library's HLS conversion
- Opacity
- Identity behaviour of default filters
"""

import colorsys
import unittest

import numpy as np

from PX_Libs.ImageEditingLib.filter_pipeline import (
    FilterState,
    apply_filters,
    gaussian_blur,
    hsl_to_rgb,
    rgb_to_hsl,
)
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer


def solid(color, width=8, height=8):
    return PixelBuffer.new(width, height, color)


class TestFilterState(unittest.TestCase):
    """Test FilterState value handling."""

    def test_defaults_are_identity(self):
        """Test that the default state reports itself as default."""
        state = FilterState()

        self.assertTrue(state.is_default)
        self.assertEqual(state.brightness, 100)
        self.assertEqual(state.opacity, 100)
        self.assertFalse(state.flip_horizontal)

    def test_with_value_returns_new_state(self):
        """Test that with_value leaves the original state unchanged."""
        state = FilterState()
        changed = state.with_value("contrast", 150)

        self.assertEqual(state.contrast, 100)
        self.assertEqual(changed.contrast, 150.0)

    def test_with_value_unknown_name(self):
        """Test that an unknown filter raises ValueError."""
        with self.assertRaises(ValueError):
            FilterState().with_value("gamma", 1)

    def test_with_value_out_of_range(self):
        """Test that values outside the slider range raise ValueError."""
        with self.assertRaises(ValueError):
            FilterState().with_value("brightness", 201)
        with self.assertRaises(ValueError):
            FilterState().with_value("opacity", -1)

    def test_with_value_non_numeric(self):
        """Test that a non-numeric value raises TypeError."""
        with self.assertRaises(TypeError):
            FilterState().with_value("blur", "3")

    def test_flip_fields_coerced_to_bool(self):
        """Test that flip fields accept truthy values."""
        state = FilterState().with_value("flip_vertical", 1)

        self.assertIs(state.flip_vertical, True)

    def test_reset(self):
        """Test that reset returns every field to its default."""
        state = FilterState().with_values({"hue": 90, "flip_horizontal": True, "sharpen": 40})

        self.assertEqual(state.reset(), FilterState())

    def test_dict_round_trip(self):
        """Test to_dict / from_dict preserve every field."""
        state = FilterState().with_values({"saturation": 30, "rotate": 45, "flip_vertical": True})

        self.assertEqual(FilterState.from_dict(state.to_dict()), state)

    def test_from_dict_ignores_unknown_keys(self):
        """Test that from_dict skips keys it does not know."""
        state = FilterState.from_dict({"blur": 2, "legacy": 7})

        self.assertEqual(state.blur, 2.0)


class TestColorStages(unittest.TestCase):
    """Test the per-pixel color stages."""

    def test_default_state_is_exact_identity(self):
        """Test that default filters return the input bytes unchanged."""
        buffer = PixelBuffer(np.random.default_rng(1).integers(0, 256, (12, 9, 4), dtype=np.uint8))

        self.assertEqual(apply_filters(buffer, FilterState()), buffer)

    def test_brightness_scales_channels(self):
        """Test brightness 150 multiplies RGB by 1.5 and clamps."""
        buffer = solid((100, 200, 0, 255))

        result = apply_filters(buffer, FilterState().with_value("brightness", 150))

        self.assertEqual(result.get_pixel(0, 0), (150, 255, 0, 255))

    def test_brightness_zero_is_black(self):
        """Test brightness 0 turns every color black but keeps alpha."""
        result = apply_filters(solid((90, 120, 200, 180)), FilterState().with_value("brightness", 0))

        self.assertEqual(result.get_pixel(3, 3), (0, 0, 0, 180))

    def test_contrast_pivots_on_128(self):
        """Test contrast scales the distance from mid-grey."""
        buffer = solid((128, 178, 78, 255))

        result = apply_filters(buffer, FilterState().with_value("contrast", 200))

        self.assertEqual(result.get_pixel(0, 0), (128, 228, 28, 255))

    def test_saturation_zero_gives_luma(self):
        """Test saturation 0 replaces each channel with Rec. 601 luma."""
        r, g, b = 200, 100, 50
        expected = round(0.299 * r + 0.587 * g + 0.114 * b)

        result = apply_filters(solid((r, g, b, 255)), FilterState().with_value("saturation", 0))

        self.assertEqual(result.get_pixel(0, 0), (expected, expected, expected, 255))

    def test_opacity_scales_alpha_only(self):
        """Test opacity 50 halves alpha and leaves color alone."""
        result = apply_filters(solid((10, 20, 30, 200)), FilterState().with_value("opacity", 50))

        self.assertEqual(result.get_pixel(0, 0), (10, 20, 30, 100))

    def test_input_not_modified(self):
        """Test that apply_filters never writes into its input."""
        buffer = solid((100, 100, 100, 255))
        before = buffer.copy()

        apply_filters(buffer, FilterState().with_values({"brightness": 180, "blur": 3, "hue": 120}))

        self.assertEqual(buffer, before)

    def test_channels_stay_in_range(self):
        """Test extreme settings keep every channel within 0-255."""
        buffer = PixelBuffer(np.random.default_rng(7).integers(0, 256, (10, 10, 4), dtype=np.uint8))
        state = FilterState().with_values(
            {"brightness": 200, "contrast": 200, "saturation": 200, "hue": 300, "blur": 1.5}
        )

        data = apply_filters(buffer, state).data

        self.assertEqual(data.dtype, np.uint8)
        self.assertEqual(data.shape, (10, 10, 4))


class TestBlur(unittest.TestCase):
    """Test the Gaussian blur stage."""

    def test_flat_region_unchanged(self):
        """Test that blurring a solid color leaves it unchanged."""
        buffer = solid((40, 80, 160, 255), 20, 20)

        result = apply_filters(buffer, FilterState().with_value("blur", 4))

        self.assertEqual(result, buffer)

    def test_blur_spreads_edges(self):
        """Test that a hard edge gets intermediate values after blurring."""
        data = np.zeros((10, 20, 4), dtype=np.uint8)
        data[..., 3] = 255
        data[:, 10:, :3] = 255
        buffer = PixelBuffer(data)

        result = apply_filters(buffer, FilterState().with_value("blur", 2))
        red = result.get_pixel(10, 5)[0]

        self.assertGreater(red, 0)
        self.assertLess(red, 255)

    def test_transparent_neighbours_do_not_darken(self):
        """Test that transparent black pixels do not bleed into opaque color."""
        rgba = np.zeros((10, 20, 4), dtype=np.float64)
        rgba[:, :10] = (200.0, 100.0, 50.0, 255.0)

        blurred = gaussian_blur(rgba, 2.0)

        np.testing.assert_allclose(blurred[5, 9, :3], (200.0, 100.0, 50.0), atol=1e-6)
        self.assertLess(blurred[5, 9, 3], 255.0)

    def test_zero_blur_returns_input(self):
        """Test that blur 0 is a no-op."""
        rgba = np.ones((3, 3, 4))

        self.assertIs(gaussian_blur(rgba, 0), rgba)


class TestHueRotation(unittest.TestCase):
    """Test HSL conversion and hue rotation."""

    def setUp(self):
        """Create a set of sample colors in 0-1."""
        rng = np.random.default_rng(3)
        self.colors = rng.random((50, 3))

    def test_hsl_matches_colorsys(self):
        """Test rgb_to_hsl agrees with colorsys.rgb_to_hls."""
        hue, saturation, lightness = rgb_to_hsl(self.colors)

        for i, (r, g, b) in enumerate(self.colors):
            h, l, s = colorsys.rgb_to_hls(r, g, b)
            self.assertAlmostEqual(hue[i], h * 360.0, places=6)
            self.assertAlmostEqual(lightness[i], l, places=6)
            self.assertAlmostEqual(saturation[i], s, places=6)

    def test_hsl_round_trip(self):
        """Test hsl_to_rgb inverts rgb_to_hsl."""
        restored = hsl_to_rgb(*rgb_to_hsl(self.colors))

        np.testing.assert_allclose(restored, self.colors, atol=1e-9)

    def test_rotate_red_to_green(self):
        """Test a 120 degree rotation turns pure red into pure green."""
        result = apply_filters(solid((255, 0, 0, 255)), FilterState().with_value("hue", 120))

        self.assertEqual(result.get_pixel(0, 0), (0, 255, 0, 255))

    def test_full_turn_is_identity(self):
        """Test that a 360 degree rotation changes nothing."""
        buffer = solid((12, 200, 99, 255))

        self.assertEqual(apply_filters(buffer, FilterState().with_value("hue", 360)), buffer)

    def test_grey_unaffected(self):
        """Test that achromatic pixels keep their value under rotation."""
        buffer = solid((90, 90, 90, 255))

        self.assertEqual(apply_filters(buffer, FilterState().with_value("hue", 200)), buffer)


if __name__ == "__main__":
    unittest.main()
