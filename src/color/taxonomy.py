"""
Named-color taxonomy for vehicle paint.

Pixels are converted from RGB to HSL and classified with a fixed decision
table evaluated top to bottom (first match wins). Every color name has a
single canonical hex code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional, Sequence, Tuple


class ColorName(str, Enum):
    """Closed set of color names produced by the taxonomy."""

    # Grayscale spectrum
    PEARL_WHITE = "Pearl White"
    WHITE = "White"
    SILVER = "Silver"
    LIGHT_GRAY = "Light Gray"
    MEDIUM_GRAY = "Medium Gray"
    GRAY = "Gray"
    DARK_GRAY = "Dark Gray"
    CHARCOAL = "Charcoal"
    BLACK = "Black"

    # Brown/Tan spectrum
    CREAM = "Cream"
    BEIGE = "Beige"
    TAN = "Tan"
    LIGHT_BROWN = "Light Brown"
    BROWN = "Brown"
    DARK_BROWN = "Dark Brown"
    CHOCOLATE = "Chocolate"

    # Red spectrum
    LIGHT_PINK = "Light Pink"
    ROSE = "Rose"
    LIGHT_RED = "Light Red"
    RED = "Red"
    CRIMSON = "Crimson"
    DARK_RED = "Dark Red"
    MAROON = "Maroon"

    # Pink/Magenta spectrum
    PINK = "Pink"
    HOT_PINK = "Hot Pink"
    FUCHSIA = "Fuchsia"
    MAGENTA = "Magenta"
    DEEP_PINK = "Deep Pink"

    # Orange spectrum
    PEACH = "Peach"
    LIGHT_ORANGE = "Light Orange"
    ORANGE = "Orange"
    BURNT_ORANGE = "Burnt Orange"
    DARK_ORANGE = "Dark Orange"
    RUST = "Rust"

    # Yellow spectrum
    LIGHT_YELLOW = "Light Yellow"
    YELLOW = "Yellow"
    GOLD = "Gold"
    MUSTARD = "Mustard"
    AMBER = "Amber"

    # Green spectrum
    LIME = "Lime"
    MINT_GREEN = "Mint Green"
    LIGHT_GREEN = "Light Green"
    GREEN = "Green"
    FOREST_GREEN = "Forest Green"
    EMERALD = "Emerald"
    SEAFOAM = "Seafoam"
    TEAL = "Teal"
    DARK_TEAL = "Dark Teal"
    TURQUOISE = "Turquoise"
    CYAN = "Cyan"
    DARK_GREEN = "Dark Green"

    # Blue spectrum
    SKY_BLUE = "Sky Blue"
    LIGHT_BLUE = "Light Blue"
    BLUE = "Blue"
    ROYAL_BLUE = "Royal Blue"
    COBALT = "Cobalt"
    NAVY = "Navy"
    DARK_NAVY = "Dark Navy"
    MIDNIGHT_BLUE = "Midnight Blue"
    PERIWINKLE = "Periwinkle"
    INDIGO = "Indigo"
    DARK_BLUE = "Dark Blue"

    # Purple spectrum
    LAVENDER = "Lavender"
    LIGHT_PURPLE = "Light Purple"
    PURPLE = "Purple"
    VIOLET = "Violet"
    PLUM = "Plum"
    DARK_PURPLE = "Dark Purple"

    MIXED = "Mixed"

    def __str__(self) -> str:
        return self.value


_C = ColorName

UNKNOWN_HEX = "#808080"

COLOR_HEX: Dict[ColorName, str] = {
    _C.PEARL_WHITE: "#F8F8FF",
    _C.WHITE: "#FFFFFF",
    _C.SILVER: "#C0C0C0",
    _C.LIGHT_GRAY: "#D3D3D3",
    _C.MEDIUM_GRAY: "#A9A9A9",
    _C.GRAY: "#808080",
    _C.DARK_GRAY: "#505050",
    _C.CHARCOAL: "#36454F",
    _C.BLACK: "#1C1C1C",

    _C.CREAM: "#FFFDD0",
    _C.BEIGE: "#F5F5DC",
    _C.TAN: "#D2B48C",
    _C.LIGHT_BROWN: "#CD853F",
    _C.BROWN: "#8B4513",
    _C.DARK_BROWN: "#654321",
    _C.CHOCOLATE: "#7B3F00",

    _C.LIGHT_PINK: "#FFB6C1",
    _C.ROSE: "#FF69B4",
    _C.LIGHT_RED: "#FF6B6B",
    _C.RED: "#DC143C",
    _C.CRIMSON: "#DC143C",
    _C.DARK_RED: "#8B0000",
    _C.MAROON: "#800000",

    _C.PINK: "#FFC0CB",
    _C.HOT_PINK: "#FF1493",
    _C.FUCHSIA: "#FF00FF",
    _C.MAGENTA: "#FF00FF",
    _C.DEEP_PINK: "#FF1493",

    _C.PEACH: "#FFCBA4",
    _C.LIGHT_ORANGE: "#FFA500",
    _C.ORANGE: "#FF8C00",
    _C.BURNT_ORANGE: "#CC5500",
    _C.DARK_ORANGE: "#FF8C00",
    _C.RUST: "#B7410E",

    _C.LIGHT_YELLOW: "#FFFFE0",
    _C.YELLOW: "#FFD700",
    _C.GOLD: "#FFD700",
    _C.MUSTARD: "#FFDB58",
    _C.AMBER: "#FFBF00",

    _C.LIME: "#00FF00",
    _C.MINT_GREEN: "#98FB98",
    _C.LIGHT_GREEN: "#90EE90",
    _C.GREEN: "#228B22",
    _C.FOREST_GREEN: "#228B22",
    _C.EMERALD: "#50C878",
    _C.SEAFOAM: "#9FE2BF",
    _C.TEAL: "#008080",
    _C.DARK_TEAL: "#003D3D",
    _C.TURQUOISE: "#40E0D0",
    _C.CYAN: "#00FFFF",
    _C.DARK_GREEN: "#006400",

    _C.SKY_BLUE: "#87CEEB",
    _C.LIGHT_BLUE: "#ADD8E6",
    _C.BLUE: "#4169E1",
    _C.ROYAL_BLUE: "#4169E1",
    _C.COBALT: "#0047AB",
    _C.NAVY: "#000080",
    _C.DARK_NAVY: "#000080",
    _C.MIDNIGHT_BLUE: "#191970",
    _C.PERIWINKLE: "#CCCCFF",
    _C.INDIGO: "#4B0082",
    _C.DARK_BLUE: "#00008B",

    _C.LAVENDER: "#E6E6FA",
    _C.LIGHT_PURPLE: "#DDA0DD",
    _C.PURPLE: "#800080",
    _C.VIOLET: "#8A2BE2",
    _C.PLUM: "#DDA0DD",
    _C.DARK_PURPLE: "#4B0082",

    _C.MIXED: "#808080",
}

# (threshold, name) pairs: the first threshold strictly below the lightness wins.
Buckets = Sequence[Tuple[float, ColorName]]


@dataclass(frozen=True)
class _SubBand:
    hue_min: float
    hue_max: float
    buckets: Buckets
    darkest: ColorName


@dataclass(frozen=True)
class _HueBand:
    """A hue range gated by a saturation window, split into lightness buckets."""

    name: str
    hue_ranges: Tuple[Tuple[float, float], ...]
    min_saturation: float
    max_saturation: Optional[float] = None
    buckets: Buckets = ()
    darkest: Optional[ColorName] = None
    sub_bands: Tuple[_SubBand, ...] = ()

    def matches(self, h: float, s: float) -> bool:
        if s < self.min_saturation:
            return False
        if self.max_saturation is not None and s >= self.max_saturation:
            return False
        return any(lo <= h < hi for lo, hi in self.hue_ranges)

    def classify(self, h: float, l: float) -> Optional[ColorName]:
        if not self.sub_bands:
            return _bucket(l, self.buckets, self.darkest)
        for band in self.sub_bands:
            if band.hue_min <= h < band.hue_max:
                return _bucket(l, band.buckets, band.darkest)
        return None


def _bucket(l: float, buckets: Buckets, darkest: ColorName) -> ColorName:
    for threshold, name in buckets:
        if l > threshold:
            return name
    return darkest


GRAYSCALE_BUCKETS: Buckets = (
    (0.85, _C.PEARL_WHITE),
    (0.75, _C.SILVER),
    (0.65, _C.LIGHT_GRAY),
    (0.55, _C.MEDIUM_GRAY),
    (0.45, _C.GRAY),
    (0.35, _C.DARK_GRAY),
    (0.25, _C.CHARCOAL),
)

HUE_BANDS: Tuple[_HueBand, ...] = (
    _HueBand(
        name="brown",
        hue_ranges=((15, 55),),
        min_saturation=0.08,
        max_saturation=0.4,
        buckets=(
            (0.7, _C.CREAM),
            (0.6, _C.BEIGE),
            (0.5, _C.TAN),
            (0.4, _C.LIGHT_BROWN),
            (0.3, _C.BROWN),
            (0.2, _C.DARK_BROWN),
        ),
        darkest=_C.CHOCOLATE,
    ),
    _HueBand(
        name="red",
        hue_ranges=((340, 360), (0, 20)),
        min_saturation=0.12,
        buckets=(
            (0.75, _C.LIGHT_PINK),
            (0.65, _C.ROSE),
            (0.55, _C.LIGHT_RED),
            (0.45, _C.RED),
            (0.35, _C.CRIMSON),
            (0.25, _C.DARK_RED),
        ),
        darkest=_C.MAROON,
    ),
    _HueBand(
        name="pink",
        hue_ranges=((300, 340),),
        min_saturation=0.15,
        buckets=(
            (0.75, _C.LIGHT_PINK),
            (0.65, _C.PINK),
            (0.55, _C.HOT_PINK),
            (0.45, _C.FUCHSIA),
            (0.35, _C.MAGENTA),
        ),
        darkest=_C.DEEP_PINK,
    ),
    _HueBand(
        name="orange",
        hue_ranges=((10, 40),),
        min_saturation=0.2,
        buckets=(
            (0.75, _C.PEACH),
            (0.65, _C.LIGHT_ORANGE),
            (0.55, _C.ORANGE),
            (0.45, _C.BURNT_ORANGE),
            (0.35, _C.DARK_ORANGE),
        ),
        darkest=_C.RUST,
    ),
    _HueBand(
        name="yellow",
        hue_ranges=((40, 70),),
        min_saturation=0.2,
        buckets=(
            (0.8, _C.CREAM),
            (0.7, _C.LIGHT_YELLOW),
            (0.6, _C.YELLOW),
            (0.5, _C.GOLD),
            (0.4, _C.MUSTARD),
        ),
        darkest=_C.AMBER,
    ),
    _HueBand(
        name="green",
        hue_ranges=((70, 170),),
        min_saturation=0.1,
        sub_bands=(
            _SubBand(70, 90, ((0.7, _C.LIME), (0.6, _C.LIGHT_GREEN), (0.5, _C.GREEN), (0.4, _C.FOREST_GREEN)), _C.DARK_GREEN),
            _SubBand(90, 120, ((0.7, _C.MINT_GREEN), (0.6, _C.LIGHT_GREEN), (0.5, _C.GREEN), (0.4, _C.EMERALD)), _C.DARK_GREEN),
            _SubBand(120, 150, ((0.7, _C.SEAFOAM), (0.6, _C.LIGHT_GREEN), (0.5, _C.TEAL), (0.4, _C.GREEN)), _C.DARK_TEAL),
            _SubBand(150, 170, ((0.6, _C.TURQUOISE), (0.5, _C.CYAN), (0.4, _C.TEAL)), _C.DARK_TEAL),
        ),
    ),
    _HueBand(
        name="blue",
        hue_ranges=((170, 260),),
        min_saturation=0.15,
        sub_bands=(
            _SubBand(170, 200, ((0.7, _C.LIGHT_BLUE), (0.6, _C.SKY_BLUE), (0.5, _C.BLUE), (0.4, _C.ROYAL_BLUE), (0.3, _C.NAVY)), _C.DARK_NAVY),
            _SubBand(200, 230, ((0.7, _C.LIGHT_BLUE), (0.6, _C.BLUE), (0.5, _C.COBALT), (0.4, _C.BLUE), (0.3, _C.NAVY)), _C.MIDNIGHT_BLUE),
            _SubBand(230, 260, ((0.7, _C.PERIWINKLE), (0.6, _C.LIGHT_BLUE), (0.5, _C.BLUE), (0.4, _C.INDIGO)), _C.DARK_BLUE),
        ),
    ),
    _HueBand(
        name="purple",
        hue_ranges=((260, 300),),
        min_saturation=0.15,
        sub_bands=(
            _SubBand(260, 280, ((0.7, _C.LAVENDER), (0.6, _C.LIGHT_PURPLE), (0.5, _C.PURPLE), (0.4, _C.VIOLET)), _C.DARK_PURPLE),
            _SubBand(280, 300, ((0.7, _C.LIGHT_PURPLE), (0.6, _C.PURPLE), (0.5, _C.PLUM), (0.4, _C.PURPLE)), _C.DARK_PURPLE),
        ),
    ),
)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert 8-bit RGB to HSL.

    Returns:
        (hue in [0, 360), saturation in [0, 1], lightness in [0, 1])
    """
    rf = r / 255
    gf = g / 255
    bf = b / 255

    mx = max(rf, gf, bf)
    mn = min(rf, gf, bf)
    diff = mx - mn

    h = 0.0
    s = 0.0
    l = (mx + mn) / 2

    if diff != 0:
        s = diff / (2 - mx - mn) if l > 0.5 else diff / (mx + mn)
        if mx == rf:
            h = ((gf - bf) / diff + (6 if gf < bf else 0)) / 6
        elif mx == gf:
            h = ((bf - rf) / diff + 2) / 6
        else:
            h = ((rf - gf) / diff + 4) / 6

    return h * 360, s, l


def classify_hsl(h: float, s: float, l: float) -> ColorName:
    """Map an HSL triple to a color name."""
    if l < 0.12:
        return _C.BLACK
    if l > 0.88 and s < 0.15:
        return _C.WHITE

    if s < 0.08:
        return _bucket(l, GRAYSCALE_BUCKETS, _C.BLACK)

    for band in HUE_BANDS:
        if band.matches(h, s):
            name = band.classify(h, l)
            if name is not None:
                return name

    return _C.MIXED


@lru_cache(maxsize=65536)
def classify_rgb(r: int, g: int, b: int) -> ColorName:
    """Map an 8-bit RGB triple to a color name."""
    return classify_hsl(*rgb_to_hsl(r, g, b))


def color_hex(name) -> str:
    """
    Canonical hex code for a color name.

    Accepts a ColorName or its display string; unknown names map to
    neutral gray.
    """
    if isinstance(name, ColorName):
        return COLOR_HEX[name]
    try:
        return COLOR_HEX[ColorName(name)]
    except ValueError:
        return UNKNOWN_HEX
