"""
Tests for red-eye detection and correction.

Tests cover:
- Candidate detection thresholds
- Correction strength and falloff
- Locality of the brush
- Clipping at surface bounds
- Error handling
"""

import unittest
from PIL import Image

from OR_Libs.ImageEditingLib.red_eye import (
    apply_red_eye_removal,
    brush_bounds,
    correct_pixel,
    is_red_eye_candidate,
)


class TestCandidateDetection(unittest.TestCase):
    """Test the red-dominance rule."""

    def test_strong_red_is_candidate(self):
        self.assertTrue(is_red_eye_candidate(200, 20, 20))

    def test_dim_red_is_not_candidate(self):
        self.assertFalse(is_red_eye_candidate(80, 10, 10))

    def test_red_must_dominate_both_channels(self):
        self.assertFalse(is_red_eye_candidate(200, 150, 20))
        self.assertFalse(is_red_eye_candidate(200, 20, 150))

    def test_gray_is_not_candidate(self):
        self.assertFalse(is_red_eye_candidate(128, 128, 128))


class TestCorrectPixel(unittest.TestCase):
    """Test the single-pixel correction formula."""

    def test_centre_pixel(self):
        """At the centre red drops to the green/blue average, then darkens by 0.7."""
        self.assertEqual(correct_pixel(200, 20, 20, 0.0), (14, 14, 14))

    def test_rim_pixel_only_darkens_by_one(self):
        self.assertEqual(correct_pixel(200, 20, 20, 1.0), (200, 20, 20))


class TestApplyRedEyeRemoval(unittest.TestCase):
    """Test brush application on a surface."""

    def setUp(self):
        """Create a uniformly red surface."""
        self.surface = Image.new("RGBA", (100, 100), (200, 20, 20, 255))

    def test_centre_corrected(self):
        changed = apply_red_eye_removal(self.surface, 50, 50, 10)
        self.assertGreater(changed, 0)
        self.assertEqual(self.surface.getpixel((50, 50)), (14, 14, 14, 255))

    def test_pixels_outside_radius_unchanged(self):
        apply_red_eye_removal(self.surface, 50, 50, 10)
        self.assertEqual(self.surface.getpixel((50, 61)), (200, 20, 20, 255))
        self.assertEqual(self.surface.getpixel((0, 0)), (200, 20, 20, 255))

    def test_correction_fades_toward_rim(self):
        apply_red_eye_removal(self.surface, 50, 50, 10)
        near = self.surface.getpixel((53, 50))
        far = self.surface.getpixel((57, 50))
        self.assertLessEqual(near[0], far[0])
        self.assertLessEqual(near[1], far[1])
        self.assertEqual(near[:3], (29, 16, 16))
        self.assertEqual(far[:3], (98, 18, 18))

    def test_matches_scalar_formula(self):
        apply_red_eye_removal(self.surface, 50, 50, 10)
        expected = correct_pixel(200, 20, 20, 0.5)
        self.assertEqual(self.surface.getpixel((55, 50))[:3], expected)

    def test_non_candidates_untouched(self):
        surface = Image.new("RGB", (20, 20), (30, 120, 200))
        self.assertEqual(apply_red_eye_removal(surface, 10, 10, 8), 0)
        self.assertEqual(surface.getpixel((10, 10)), (30, 120, 200))

    def test_alpha_preserved(self):
        surface = Image.new("RGBA", (20, 20), (200, 20, 20, 90))
        apply_red_eye_removal(surface, 10, 10, 5)
        self.assertEqual(surface.getpixel((10, 10))[3], 90)

    def test_brush_partly_outside_surface(self):
        changed = apply_red_eye_removal(self.surface, 0, 0, 5)
        self.assertGreater(changed, 0)
        self.assertEqual(self.surface.getpixel((0, 0)), (14, 14, 14, 255))

    def test_brush_entirely_outside_surface(self):
        before = self.surface.tobytes()
        self.assertEqual(apply_red_eye_removal(self.surface, -50, -50, 5), 0)
        self.assertEqual(self.surface.tobytes(), before)

    def test_invalid_radius(self):
        with self.assertRaises(ValueError):
            apply_red_eye_removal(self.surface, 50, 50, 0)

    def test_unsupported_mode(self):
        with self.assertRaises(ValueError):
            apply_red_eye_removal(Image.new("L", (10, 10)), 5, 5, 3)

    def test_invalid_input_type(self):
        with self.assertRaises(TypeError):
            apply_red_eye_removal("not_an_image", 5, 5, 3)


def test_only_pixels_near_click_change(red_eye_surface):
    """A click on (50, 50) with radius 10 leaves (50, 80) alone."""
    untouched = red_eye_surface.getpixel((50, 80))

    apply_red_eye_removal(red_eye_surface, 50, 50, 10)

    assert red_eye_surface.getpixel((50, 50)) != (200, 20, 20, 255)
    assert red_eye_surface.getpixel((50, 80)) == untouched


def test_brush_bounds_clipped():
    assert brush_bounds(2, 3, 5, (100, 100)) == (0, 0, 8, 9)
    assert brush_bounds(98, 98, 5, (100, 100)) == (93, 93, 100, 100)


if __name__ == "__main__":
    unittest.main()
