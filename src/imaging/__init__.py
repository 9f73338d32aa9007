"""
Frame standardization and coordinate back-mapping.
"""

from .standardize import StandardizedFrame, standardize_image, rescale_bbox, fit_within

__all__ = ["StandardizedFrame", "standardize_image", "rescale_bbox", "fit_within"]
