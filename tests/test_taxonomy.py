"""
Tests for the named-color taxonomy.
"""

import pytest

from color.taxonomy import (
    COLOR_HEX,
    ColorName,
    UNKNOWN_HEX,
    classify_hsl,
    classify_rgb,
    color_hex,
    rgb_to_hsl,
)


class TestRgbToHsl:
    """Tests for the RGB -> HSL conversion."""

    def test_primaries(self):
        assert rgb_to_hsl(255, 0, 0) == pytest.approx((0.0, 1.0, 0.5))
        assert rgb_to_hsl(0, 255, 0) == pytest.approx((120.0, 1.0, 0.5))
        assert rgb_to_hsl(0, 0, 255) == pytest.approx((240.0, 1.0, 0.5))

    def test_achromatic_has_zero_hue_and_saturation(self):
        h, s, l = rgb_to_hsl(128, 128, 128)
        assert h == 0.0
        assert s == 0.0
        assert l == pytest.approx(128 / 255)

    def test_hue_wraps_below_360(self):
        """Magenta-ish red (b > g) lands in [300, 360)."""
        h, _, _ = rgb_to_hsl(255, 0, 40)
        assert 300 <= h < 360


class TestClassifyHsl:
    """Tests for the decision table (first match wins)."""

    def test_black_before_everything(self):
        assert classify_hsl(0, 1.0, 0.11) == ColorName.BLACK

    def test_white_needs_low_saturation(self):
        assert classify_hsl(0, 0.1, 0.9) == ColorName.WHITE
        assert classify_hsl(0, 0.5, 0.9) != ColorName.WHITE

    def test_grayscale_buckets(self):
        assert classify_hsl(0, 0.05, 0.86) == ColorName.PEARL_WHITE
        assert classify_hsl(0, 0.05, 0.8) == ColorName.SILVER
        assert classify_hsl(0, 0.05, 0.5) == ColorName.GRAY
        assert classify_hsl(0, 0.05, 0.3) == ColorName.CHARCOAL
        assert classify_hsl(0, 0.05, 0.2) == ColorName.BLACK

    def test_red_band_starts_at_340(self):
        assert classify_hsl(340, 0.5, 0.5) == ColorName.RED
        assert classify_hsl(339.999, 0.5, 0.5) == ColorName.FUCHSIA

    def test_red_band_wraps_through_zero(self):
        assert classify_hsl(5, 0.6, 0.5) == ColorName.RED
        assert classify_hsl(5, 0.6, 0.3) == ColorName.DARK_RED
        assert classify_hsl(5, 0.6, 0.2) == ColorName.MAROON

    def test_brown_checked_before_orange(self):
        """Low-saturation warm hues are browns; saturated ones fall through to orange."""
        assert classify_hsl(30, 0.3, 0.5) == ColorName.LIGHT_BROWN
        assert classify_hsl(30, 0.5, 0.5) == ColorName.BURNT_ORANGE

    def test_lightness_thresholds_are_strict(self):
        # 0.45 is not above the Red threshold
        assert classify_hsl(0, 0.6, 0.45) == ColorName.CRIMSON

    def test_green_sub_bands(self):
        assert classify_hsl(80, 0.5, 0.75) == ColorName.LIME
        assert classify_hsl(100, 0.5, 0.45) == ColorName.EMERALD
        assert classify_hsl(160, 0.5, 0.55) == ColorName.CYAN
        assert classify_hsl(160, 0.5, 0.3) == ColorName.DARK_TEAL

    def test_blue_and_purple_sub_bands(self):
        assert classify_hsl(220, 0.6, 0.35) == ColorName.NAVY
        assert classify_hsl(240, 0.6, 0.2) == ColorName.DARK_BLUE
        assert classify_hsl(270, 0.6, 0.55) == ColorName.PURPLE
        assert classify_hsl(290, 0.6, 0.45) == ColorName.PURPLE

    def test_unmatched_saturation_window_is_mixed(self):
        """Blue needs s >= 0.15; below that (but above gray) nothing matches."""
        assert classify_hsl(200, 0.1, 0.5) == ColorName.MIXED


class TestClassifyRgb:
    def test_deterministic(self):
        assert classify_rgb(210, 35, 35) == classify_rgb(210, 35, 35) == ColorName.RED

    def test_dark_pixel_is_black(self):
        assert classify_rgb(20, 20, 20) == ColorName.BLACK


class TestColorHex:
    def test_every_name_has_a_hex(self):
        for name in ColorName:
            assert name in COLOR_HEX
            assert COLOR_HEX[name].startswith("#")
            assert len(COLOR_HEX[name]) == 7

    def test_lookup_by_enum_and_string(self):
        assert color_hex(ColorName.RED) == "#DC143C"
        assert color_hex("Navy") == "#000080"

    def test_unknown_name_maps_to_gray(self):
        assert color_hex("Ultraviolet") == UNKNOWN_HEX == "#808080"
