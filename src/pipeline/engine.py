"""
Detection pipeline for the vehicle analysis system.

One pass runs:
    (standardize) -> detector -> (rescale) -> clip -> color extraction -> records

Still images are standardized before detection and their boxes are mapped
back to original pixels; video frames are analyzed at native resolution.
"""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from color.extractor import ColorExtractor
from detection.base import VEHICLE_CLASSES, Detector, coerce_detections, filter_vehicles
from detection.records import VehicleRecordBuilder
from imaging.standardize import DEFAULT_TARGET_SIZE, rescale_bbox, standardize_image
from models.color import ColorSample
from models.detection import RawDetection
from models.errors import DetectorFailure
from models.vehicle import VehicleRecord


@dataclass
class PipelineConfig:
    """
    Configuration for the detection pipeline.

    Attributes:
        standardize_width: Canonical still-image width.
        standardize_height: Canonical still-image height.
        vehicle_classes: Detector classes kept as vehicles.
    """
    standardize_width: int = DEFAULT_TARGET_SIZE[0]
    standardize_height: int = DEFAULT_TARGET_SIZE[1]
    vehicle_classes: Sequence[str] = field(default_factory=lambda: list(VEHICLE_CLASSES))


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    pass_count: int = 0
    failed_passes: int = 0
    vehicle_count: int = 0
    last_pass_duration: Optional[float] = None


class DetectionPipeline:
    """
    Runs single detection passes over still images and video frames.

    Example:
        pipeline = DetectionPipeline(detector)
        records = await pipeline.analyze_image(image)
    """

    def __init__(
        self,
        detector: Detector,
        config: Optional[PipelineConfig] = None,
        extractor: Optional[ColorExtractor] = None,
        builder: Optional[VehicleRecordBuilder] = None,
    ):
        self.detector = detector
        self.config = config or PipelineConfig()
        self.extractor = extractor or ColorExtractor()
        self.builder = builder or VehicleRecordBuilder()
        self.stats = PipelineStats()

    async def analyze_image(self, image: np.ndarray) -> Tuple[VehicleRecord, ...]:
        """
        Detect vehicles in a still image.

        The detector sees the standardized image; boxes and colors are
        expressed against the original image.

        Raises:
            DetectorFailure: If the detector call fails.
        """
        standardized = standardize_image(
            image,
            self.config.standardize_width,
            self.config.standardize_height,
        )
        detections = await self._detect(standardized.image)
        rescaled = [
            d.with_bbox(rescale_bbox(d.bbox, standardized.scale_x, standardized.scale_y))
            for d in detections
        ]
        return self._build_records(image, rescaled)

    async def analyze_frame(self, frame: np.ndarray) -> Tuple[VehicleRecord, ...]:
        """
        Detect vehicles in a video frame at native resolution.

        Raises:
            DetectorFailure: If the detector call fails.
        """
        detections = await self._detect(frame)
        return self._build_records(frame, detections)

    async def _detect(self, frame: np.ndarray) -> List[RawDetection]:
        started = time.monotonic()
        self.stats.pass_count += 1
        try:
            result = self.detector.detect(frame)
            if inspect.isawaitable(result):
                result = await result
            detections = coerce_detections(result)
        except Exception as e:
            self.stats.failed_passes += 1
            raise DetectorFailure(str(e)) from e
        finally:
            self.stats.last_pass_duration = time.monotonic() - started

        vehicles = filter_vehicles(detections, self.config.vehicle_classes)
        logging.debug(f"Raw detections: {len(detections)}, vehicles: {len(vehicles)}")
        return vehicles

    def _build_records(
        self,
        frame: np.ndarray,
        detections: Sequence[RawDetection],
    ) -> Tuple[VehicleRecord, ...]:
        frame_h, frame_w = frame.shape[:2]
        items: List[Tuple[RawDetection, ColorSample]] = []
        for detection in detections:
            clipped = detection.bbox.clip(frame_w, frame_h)
            if clipped is None:
                logging.warning(
                    f"Dropping {detection.class_name} detection outside the frame: "
                    f"{detection.bbox.as_tuple()}"
                )
                continue
            detection = detection.with_bbox(clipped)
            color = self.extractor.extract(frame, clipped, detection.class_name)
            items.append((detection, color))

        records = self.builder.build_all(items)
        self.stats.vehicle_count += len(records)
        for record in records:
            logging.info(
                f"Vehicle {record.id}: {record.class_name} {record.score}% "
                f"color={record.color.color_name.value} ({record.color_confidence}%, "
                f"{record.color.method.value})"
            )
        return records
