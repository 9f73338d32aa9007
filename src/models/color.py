"""
Color sample model produced by the color extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from color.taxonomy import ColorName


class ExtractionMethod(str, Enum):
    """How a color sample was obtained."""
    PIXEL_ANALYSIS = "pixel-analysis"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ColorSample:
    """
    Dominant color of one detected vehicle.

    Attributes:
        color_name: Classified color name.
        hex_code: Display hex code for the color.
        confidence: Extraction confidence (0-1).
        method: Pixel analysis or class-default fallback.
        diagnostic: Human-readable description of the path that produced the result.
    """
    color_name: ColorName
    hex_code: str
    confidence: float
    method: ExtractionMethod
    diagnostic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color_name": self.color_name.value,
            "hex_code": self.hex_code,
            "confidence": self.confidence,
            "method": self.method.value,
            "diagnostic": self.diagnostic,
        }
