"""
Ultralytics YOLO detector adapter.

Models are loaded lazily, once per weights path, and shared process-wide.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from models.detection import BoundingBox, RawDetection

_MODEL_CACHE: Dict[str, Any] = {}
_MODEL_LOCK = threading.Lock()


def load_model(model_path: str) -> Any:
    """Load (or return the cached) YOLO model for a weights path."""
    with _MODEL_LOCK:
        model = _MODEL_CACHE.get(model_path)
        if model is not None:
            return model
        try:
            from ultralytics import YOLO  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "Ultralytics is not installed. Install with `pip install ultralytics`."
            ) from e
        logging.info(f"Loading detection model: {model_path}")
        model = YOLO(model_path)
        _MODEL_CACHE[model_path] = model
        return model


def clear_model_cache() -> None:
    """Drop all cached models; the next load re-initializes them."""
    with _MODEL_LOCK:
        _MODEL_CACHE.clear()


@dataclass(frozen=True)
class YoloDetectorConfig:
    model: str
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    classes: Optional[Sequence[int]] = None


class YoloDetector:
    def __init__(self, cfg: YoloDetectorConfig):
        self.cfg = cfg
        self._model: Any = None

    @property
    def model(self) -> Any:
        if self._model is None:
            self._model = load_model(self.cfg.model)
        return self._model

    def detect(self, frame: np.ndarray) -> List[RawDetection]:
        results = self.model.predict(
            source=frame,
            conf=self.cfg.conf_threshold,
            iou=self.cfg.iou_threshold,
            classes=list(self.cfg.classes) if self.cfg.classes is not None else None,
            verbose=False,
        )
        if not results:
            return []

        r0 = results[0]
        names = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        xyxy = boxes.xyxy.cpu().numpy() if hasattr(boxes.xyxy, "cpu") else np.asarray(boxes.xyxy)
        conf = boxes.conf.cpu().numpy() if hasattr(boxes.conf, "cpu") else np.asarray(boxes.conf)
        cls = boxes.cls.cpu().numpy() if hasattr(boxes.cls, "cpu") else np.asarray(boxes.cls)

        out: List[RawDetection] = []
        for (x1, y1, x2, y2), c, k in zip(xyxy, conf, cls):
            class_id = int(k)
            out.append(
                RawDetection(
                    class_name=str(names.get(class_id, class_id)),
                    score=float(c),
                    bbox=BoundingBox.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                )
            )

        return out
