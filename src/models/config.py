"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_VEHICLE_CLASSES = ["car", "truck", "bus", "motorcycle", "bicycle", "airplane", "boat", "train"]


@dataclass
class YoloConfig:
    """YOLO detector configuration."""
    model: str = "yolov8n.pt"
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    classes: Optional[List[int]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "YoloConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            conf_threshold=d.get("conf_threshold", 0.25),
            iou_threshold=d.get("iou_threshold", 0.45),
            classes=d.get("classes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "model": self.model,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
        }
        if self.classes is not None:
            d["classes"] = self.classes
        return d


@dataclass
class DetectionConfig:
    """Detection configuration."""
    backend: str = "yolo"
    yolo: YoloConfig = field(default_factory=YoloConfig)
    vehicle_classes: List[str] = field(default_factory=lambda: list(DEFAULT_VEHICLE_CLASSES))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            backend=d.get("backend", "yolo"),
            yolo=YoloConfig.from_dict(d.get("yolo") or {}),
            vehicle_classes=list(d.get("vehicle_classes") or DEFAULT_VEHICLE_CLASSES),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "yolo": self.yolo.to_dict(),
            "vehicle_classes": list(self.vehicle_classes),
        }


@dataclass
class StandardizeConfig:
    """Canonical still-image size used before detection."""
    width: int = 800
    height: int = 600

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StandardizeConfig":
        return cls(width=d.get("width", 800), height=d.get("height", 600))

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height}


@dataclass
class SchedulerConfig:
    """Continuous detection frame clock."""
    fps: float = 30

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SchedulerConfig":
        return cls(fps=d.get("fps", 30))

    def to_dict(self) -> Dict[str, Any]:
        return {"fps": self.fps}


@dataclass
class WebConfig:
    """HTTP control surface."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            host=d.get("host", "0.0.0.0"),
            port=int(d.get("port", 8000)),
            cors_origins=list(d.get("cors_origins") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port, "cors_origins": list(self.cors_origins)}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    standardize: StandardizeConfig = field(default_factory=StandardizeConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/vehicle_lens.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            standardize=StandardizeConfig.from_dict(d.get("standardize") or {}),
            scheduler=SchedulerConfig.from_dict(d.get("scheduler") or {}),
            web=WebConfig.from_dict(d.get("web") or {}),
            log_path=d.get("log_path", "logs/vehicle_lens.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "detection": self.detection.to_dict(),
            "standardize": self.standardize.to_dict(),
            "scheduler": self.scheduler.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
