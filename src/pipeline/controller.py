"""
Analysis controller: the control surface over one active media item.

Owns the detection session, the notice board and (for videos) the
continuous scheduler, and guarantees that detection passes for the
session never interleave.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Optional

import numpy as np

from detection.base import Detector
from media.base import MediaKind, VideoSurface, detect_media_kind
from media.image import load_image
from media.opencv_video import OpenCVVideoSurface
from models.config import Config
from models.errors import DetectorFailure, VehicleLensError
from models.notice import NoticeBoard, Severity
from session.session import DetectionSession, SessionSnapshot
from .engine import DetectionPipeline, PipelineConfig
from .scheduler import ContinuousDetectionScheduler, FrameClock, LoopFrameClock

NO_VEHICLES_IMAGE = "No vehicles detected in this image."
NO_VEHICLES_FRAME = "No vehicles detected in this frame."
IMAGE_DETECTION_ERROR = "An error occurred during detection. Please try another image."
VIDEO_DETECTION_ERROR = "An error occurred during detection."
PASS_IN_FLIGHT = "A detection pass is already running."


class AnalysisController:
    """
    Loads media and runs one-shot or continuous detection.

    Example:
        controller = AnalysisController(DetectionPipeline(detector))
        controller.open_media("street.jpg")
        snapshot = await controller.detect_once()
    """

    def __init__(
        self,
        pipeline: DetectionPipeline,
        frame_clock: Optional[FrameClock] = None,
        notices: Optional[NoticeBoard] = None,
        video_factory: Callable[[str], VideoSurface] = OpenCVVideoSurface,
    ):
        self.pipeline = pipeline
        self.frame_clock = frame_clock or LoopFrameClock()
        self.notices = notices or NoticeBoard()
        self.session = DetectionSession()
        self._video_factory = video_factory
        self._image: Optional[np.ndarray] = None
        self._video: Optional[VideoSurface] = None
        self._scheduler: Optional[ContinuousDetectionScheduler] = None
        self._in_flight: Optional[int] = None

    @property
    def video(self) -> Optional[VideoSurface]:
        return self._video

    @property
    def scheduler(self) -> Optional[ContinuousDetectionScheduler]:
        return self._scheduler

    @property
    def continuous(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    def snapshot(self) -> SessionSnapshot:
        return self.session.snapshot()

    def open_media(self, path: str) -> SessionSnapshot:
        """Load a local image or video, chosen by its extension."""
        if detect_media_kind(path) is MediaKind.VIDEO:
            return self.load_video(self._video_factory(path), path)
        return self.load_image(load_image(path), path)

    def load_image(self, image: np.ndarray, media_url: str) -> SessionSnapshot:
        self._release_current()
        self._image = image
        self.session.load_media(media_url, is_video=False)
        return self.snapshot()

    def load_video(self, surface: VideoSurface, media_url: str) -> SessionSnapshot:
        self._release_current()
        self._video = surface
        self._scheduler = ContinuousDetectionScheduler(
            surface,
            self.frame_clock,
            functools.partial(self._run_video_pass, scheduled=True),
            on_error=lambda message: self.notices.post(message, Severity.ERROR),
        )
        self.session.load_media(media_url, is_video=True)
        return self.snapshot()

    def unload(self) -> None:
        self._release_current()
        self.session.clear()

    async def detect_once(self) -> SessionSnapshot:
        """
        Run one detection pass on the still image or the current video frame.

        A request made while another pass is in flight is rejected with a
        warning notice.

        Raises:
            RuntimeError: If no media is loaded.
        """
        if self._image is None and self._video is None:
            raise RuntimeError("No media loaded")
        if self._in_flight is not None:
            self.notices.post(PASS_IN_FLIGHT, Severity.WARNING)
            return self.snapshot()
        if self._video is not None:
            await self._run_video_pass()
        else:
            await self._run_image_pass()
        return self.snapshot()

    async def start_continuous(self) -> bool:
        if self._scheduler is None:
            raise RuntimeError("Continuous detection requires a video")
        return await self._scheduler.start()

    def stop_continuous(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()

    def release_media(self) -> None:
        """Stop detection and pause the video; current records stay visible."""
        self.stop_continuous()
        if self._video is not None and not self._video.paused:
            self._video.pause()

    async def _run_image_pass(self) -> None:
        image = self._image
        token = self.session.begin_pass()
        self._in_flight = token
        try:
            records = await self.pipeline.analyze_image(image)
        except (DetectorFailure, ValueError) as e:
            logging.error(f"Error during detection: {e}")
            if self.session.fail_pass(token):
                self.notices.post(IMAGE_DETECTION_ERROR, Severity.ERROR)
            return
        finally:
            self._end_pass(token)

        if self.session.complete_pass(token, records) and not records:
            self.notices.post(NO_VEHICLES_IMAGE, Severity.INFO)

    async def _run_video_pass(self, scheduled: bool = False) -> None:
        if self._in_flight is not None:
            logging.debug("Skipping frame: a detection pass is still running")
            return
        surface = self._video
        token = self.session.begin_pass(scheduled=scheduled)
        self._in_flight = token
        try:
            frame_data = surface.read_frame()
            records = await self.pipeline.analyze_frame(frame_data.frame)
        except VehicleLensError as e:
            logging.error(f"Error during video detection: {e}")
            if self.session.fail_pass(token):
                self.notices.post(VIDEO_DETECTION_ERROR, Severity.ERROR)
            return
        finally:
            self._end_pass(token)

        if self.session.complete_pass(token, records, timestamp=frame_data.timestamp) and not records:
            self.notices.post(NO_VEHICLES_FRAME, Severity.INFO)

    def _end_pass(self, token: int) -> None:
        # a pass superseded by a media change must not clear its successor's flag
        if self._in_flight == token:
            self._in_flight = None

    def _release_current(self) -> None:
        if self._scheduler is not None:
            self._scheduler.close()
            self._scheduler = None
        if self._video is not None:
            self._video.close()
            self._video = None
        self._image = None
        self._in_flight = None


def create_controller_from_config(
    config: Dict[str, Any],
    detector: Optional[Detector] = None,
) -> AnalysisController:
    """
    Factory function to create an AnalysisController from a config dict.

    Args:
        config: Full application config dict.
        detector: Detector to use; built from ``detection.yolo`` when omitted.
    """
    cfg = Config.from_dict(config)
    if detector is None:
        from detection.yolo_detector import YoloDetector, YoloDetectorConfig

        yolo = cfg.detection.yolo
        detector = YoloDetector(
            YoloDetectorConfig(
                model=yolo.model,
                conf_threshold=yolo.conf_threshold,
                iou_threshold=yolo.iou_threshold,
                classes=yolo.classes,
            )
        )

    pipeline_config = PipelineConfig(
        standardize_width=cfg.standardize.width,
        standardize_height=cfg.standardize.height,
        vehicle_classes=list(cfg.detection.vehicle_classes),
    )
    clock = LoopFrameClock(fps=cfg.scheduler.fps)

    return AnalysisController(DetectionPipeline(detector, pipeline_config), frame_clock=clock)
