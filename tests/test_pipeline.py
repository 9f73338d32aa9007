"""
Tests for the detection pipeline.
"""

import asyncio
import sys
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from color.taxonomy import ColorName
from detection.yolo_detector import YoloDetector, YoloDetectorConfig, clear_model_cache, load_model
from models.color import ExtractionMethod
from models.errors import DetectorFailure
from pipeline.controller import AnalysisController
from pipeline.engine import DetectionPipeline, PipelineConfig
from session.session import SessionState

from helpers import AsyncFakeDetector, FakeDetector, ManualFrameClock, car


class TestAnalyzeImage:
    """Still images are standardized for detection and mapped back."""

    def test_detector_sees_canonical_size_and_boxes_map_back(self):
        image = np.zeros((1200, 1600, 3), dtype=np.uint8)
        detector = FakeDetector([car(100, 100, 200, 150)])
        pipeline = DetectionPipeline(detector)

        records = asyncio.run(pipeline.analyze_image(image))

        assert detector.calls == [(600, 800, 3)]
        assert len(records) == 1
        assert records[0].bbox.as_tuple() == pytest.approx((200, 200, 400, 300))
        assert records[0].class_name == "Car"
        assert records[0].score == 90

    def test_colors_sampled_from_original_image(self, red_car_frame):
        # 200x200 original -> 600x600 on the canvas, scale 1/3
        detector = FakeDetector([car(0, 0, 600, 600)])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(red_car_frame))

        assert records[0].bbox.as_tuple() == pytest.approx((0, 0, 200, 200))
        assert records[0].color.color_name == ColorName.RED

    def test_non_vehicles_filtered_before_ids(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        detector = FakeDetector([
            car(0, 0, 50, 50, class_name="person"),
            car(100, 100, 50, 50, class_name="truck"),
        ])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(image))

        assert [(r.id, r.class_name) for r in records] == [(0, "Truck")]

    def test_configured_vehicle_classes(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        detector = FakeDetector([car(0, 0, 50, 50), car(0, 0, 50, 50, class_name="bus")])
        pipeline = DetectionPipeline(detector, PipelineConfig(vehicle_classes=["bus"]))
        records = asyncio.run(pipeline.analyze_image(image))
        assert [r.class_name for r in records] == ["Bus"]

    def test_boxes_clipped_and_empty_ones_dropped(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        detector = FakeDetector([car(-20, 500, 100, 200), car(900, 700, 40, 40)])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(image))

        assert len(records) == 1
        assert records[0].bbox.as_tuple() == pytest.approx((0, 500, 80, 100))

    def test_dict_predictions_accepted(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        detector = FakeDetector([{"class": "car", "score": 0.5, "bbox": [10, 10, 40, 40]}])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(image))
        assert records[0].score == 50

    def test_async_detector_awaited(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        detector = AsyncFakeDetector([car(10, 10, 40, 40)])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(image))
        assert len(records) == 1

    def test_detector_error_wrapped(self):
        image = np.zeros((600, 800, 3), dtype=np.uint8)
        pipeline = DetectionPipeline(FakeDetector(error=RuntimeError("model missing")))

        with pytest.raises(DetectorFailure):
            asyncio.run(pipeline.analyze_image(image))
        assert pipeline.stats.failed_passes == 1


class TestAnalyzeFrame:
    def test_native_resolution(self):
        frame = np.zeros((720, 1280, 3), dtype=np.uint8)
        detector = FakeDetector([car(100, 100, 300, 200)])
        records = asyncio.run(DetectionPipeline(detector).analyze_frame(frame))

        assert detector.calls == [(720, 1280, 3)]
        assert records[0].bbox.as_tuple() == pytest.approx((100, 100, 300, 200))


class _Tensor:
    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float32)

    def cpu(self):
        return self

    def numpy(self):
        return self._values


class _Boxes:
    def __init__(self, xyxy, conf, cls):
        self.xyxy = _Tensor(xyxy)
        self.conf = _Tensor(conf)
        self.cls = _Tensor(cls)


class _Result:
    def __init__(self, boxes, names):
        self.boxes = boxes
        self.names = names


class _Model:
    def __init__(self, results):
        self.results = results
        self.kwargs = None

    def predict(self, **kwargs):
        self.kwargs = kwargs
        return self.results


class TestYoloDetector:
    def test_results_converted_to_pixel_boxes(self):
        detector = YoloDetector(YoloDetectorConfig(model="yolov8n.pt", conf_threshold=0.3))
        detector._model = _Model([
            _Result(_Boxes([[10, 20, 110, 220]], [0.8], [2]), {2: "car"}),
        ])

        detections = detector.detect(np.zeros((480, 640, 3), dtype=np.uint8))

        assert len(detections) == 1
        assert detections[0].class_name == "car"
        assert detections[0].score == pytest.approx(0.8)
        assert detections[0].bbox.as_tuple() == pytest.approx((10, 20, 100, 200))
        assert detector._model.kwargs["conf"] == 0.3

    def test_no_results(self):
        detector = YoloDetector(YoloDetectorConfig(model="yolov8n.pt"))
        detector._model = _Model([])
        assert detector.detect(np.zeros((10, 10, 3), dtype=np.uint8)) == []

    def test_model_loaded_once_per_path(self):
        yolo_cls = MagicMock()
        with patch.dict(sys.modules, {"ultralytics": MagicMock(YOLO=yolo_cls)}):
            clear_model_cache()
            first = load_model("weights.pt")
            second = load_model("weights.pt")
        clear_model_cache()

        assert first is second
        yolo_cls.assert_called_once_with("weights.pt")


class TestEndToEnd:
    """One car over a body that is 60% red and 40% neutral gray."""

    @staticmethod
    def _street():
        image = np.full((600, 800, 3), 128, dtype=np.uint8)
        columns = np.arange(800) % 5 < 3
        image[:, columns] = (35, 35, 210)  # BGR red
        return image

    def _assert_red_car(self, record):
        assert record.id == 0
        assert record.class_name == "Car"
        assert record.score == 91
        assert record.bbox.as_tuple() == pytest.approx((100, 100, 200, 150))
        assert record.color.color_name == ColorName.RED
        assert record.color.hex_code == "#DC143C"
        assert record.color.method == ExtractionMethod.PIXEL_ANALYSIS

    def test_pipeline(self):
        detector = FakeDetector([car(100, 100, 200, 150, score=0.91)])
        records = asyncio.run(DetectionPipeline(detector).analyze_image(self._street()))

        assert len(records) == 1
        self._assert_red_car(records[0])

    def test_controller(self):
        detector = FakeDetector([car(100, 100, 200, 150, score=0.91)])
        controller = AnalysisController(DetectionPipeline(detector), frame_clock=ManualFrameClock())
        controller.load_image(self._street(), "street.jpg")

        snapshot = asyncio.run(controller.detect_once())

        assert snapshot.state == SessionState.ANALYZED
        assert snapshot.vehicle_count == 1
        self._assert_red_car(snapshot.records[0])
        assert controller.notices.active() == []
