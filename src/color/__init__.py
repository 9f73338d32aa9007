"""
Color taxonomy and vehicle color extraction.
"""

from .taxonomy import ColorName, COLOR_HEX, classify_hsl, classify_rgb, color_hex, rgb_to_hsl

__all__ = [
    "ColorName",
    "COLOR_HEX",
    "classify_hsl",
    "classify_rgb",
    "color_hex",
    "rgb_to_hsl",
]
