"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
detection:
  backend: "yolo"
  yolo:
    model: "yolov8n.pt"
    conf_threshold: 0.25
    iou_threshold: 0.45

standardize:
  width: 800
  height: 600

scheduler:
  fps: 30

web:
  host: "127.0.0.1"
  port: 8000

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "detection": {
            "backend": "yolo",
            "yolo": {
                "model": "yolov8n.pt",
                "conf_threshold": 0.25,
                "iou_threshold": 0.45,
            },
            "vehicle_classes": ["car", "truck", "bus"],
        },
        "standardize": {"width": 800, "height": 600},
        "scheduler": {"fps": 30},
        "web": {"host": "127.0.0.1", "port": 8000},
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def red_car_frame():
    """
    200x200 BGR frame: top 60% crimson paint (RGB 210,35,35), bottom 40%
    near-black (RGB 20,20,20).
    """
    frame = np.zeros((200, 200, 3), dtype=np.uint8)
    frame[:120] = (35, 35, 210)
    frame[120:] = (20, 20, 20)
    return frame
