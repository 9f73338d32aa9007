"""
Still-image loading.
"""

from __future__ import annotations

import logging
import os

import cv2
import numpy as np


def load_image(path: str) -> np.ndarray:
    """
    Load a still image from disk in OpenCV channel order.

    Alpha channels are kept; 16-bit images are reduced to 8 bits and
    grayscale images are expanded to BGR.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be decoded as an image.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)

    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError(f"Could not decode image: {path}")

    if image.dtype == np.uint16:
        image = (image / 257).astype(np.uint8)
    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

    logging.info(f"Image loaded: {path} ({image.shape[1]}x{image.shape[0]})")
    return image
