"""
Still-image standardization and coordinate back-mapping.

Still images are scaled to fit a canonical working resolution before
detection so the detector sees consistently sized inputs. Boxes found on
the standardized frame are mapped back to original-image pixels with the
stored scale factors. Video frames skip this step entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from models.detection import BoundingBox

DEFAULT_TARGET_SIZE: Tuple[int, int] = (800, 600)


@dataclass(frozen=True)
class StandardizedFrame:
    """
    A standardized image plus the factors that map it back to the original.

    Attributes:
        image: Canonical-size BGR buffer (target_height x target_width), white background.
        new_width: Width of the scaled image drawn at the buffer origin.
        new_height: Height of the scaled image drawn at the buffer origin.
        scale_x: original_width / new_width.
        scale_y: original_height / new_height.
    """
    image: np.ndarray
    new_width: int
    new_height: int
    scale_x: float
    scale_y: float


def fit_within(width: int, height: int, target_width: int, target_height: int) -> Tuple[int, int]:
    """
    Largest size with the source aspect ratio that fits in the target box.
    """
    aspect = width / height
    if aspect > target_width / target_height:
        new_width = target_width
        new_height = target_width / aspect
    else:
        new_height = target_height
        new_width = target_height * aspect
    return max(1, int(round(new_width))), max(1, int(round(new_height)))


def _to_bgr_on_white(image: np.ndarray) -> np.ndarray:
    """Flatten gray, BGR or BGRA pixels to BGR, blending alpha over white."""
    if image.ndim == 2 or image.shape[2] == 1:
        return cv2.cvtColor(image.reshape(image.shape[:2]), cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 3:
        return image
    alpha = image[:, :, 3:4].astype(np.float32) / 255.0
    bgr = image[:, :, :3].astype(np.float32)
    blended = bgr * alpha + 255.0 * (1.0 - alpha)
    return np.clip(np.round(blended), 0, 255).astype(np.uint8)


def standardize_image(
    image: np.ndarray,
    target_width: int = DEFAULT_TARGET_SIZE[0],
    target_height: int = DEFAULT_TARGET_SIZE[1],
) -> StandardizedFrame:
    """
    Scale an image into a canonical-size, white-filled buffer.

    The aspect ratio is preserved and the image is never cropped; the
    scaled image is drawn at the top-left corner so no offset is needed
    when mapping coordinates back.

    Args:
        image: Source image (gray, BGR or BGRA).
        target_width: Canonical buffer width.
        target_height: Canonical buffer height.

    Raises:
        ValueError: If the image or target size is empty.
    """
    if image is None or image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError("Cannot standardize an empty image")
    if target_width <= 0 or target_height <= 0:
        raise ValueError(f"Invalid target size {target_width}x{target_height}")

    orig_h, orig_w = image.shape[:2]
    new_w, new_h = fit_within(orig_w, orig_h, target_width, target_height)

    interpolation = cv2.INTER_AREA if new_w < orig_w else cv2.INTER_LINEAR
    resized = cv2.resize(image, (new_w, new_h), interpolation=interpolation)

    canvas = np.full((target_height, target_width, 3), 255, dtype=np.uint8)
    canvas[:new_h, :new_w] = _to_bgr_on_white(resized)

    logging.debug(f"Image standardized: {orig_w}x{orig_h} -> {new_w}x{new_h}")

    return StandardizedFrame(
        image=canvas,
        new_width=new_w,
        new_height=new_h,
        scale_x=orig_w / new_w,
        scale_y=orig_h / new_h,
    )


def rescale_bbox(bbox: BoundingBox, scale_x: float, scale_y: float) -> BoundingBox:
    """Map a box from standardized-frame space back to original-image space."""
    return bbox.scale(scale_x, scale_y)
