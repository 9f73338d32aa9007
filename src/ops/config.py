"""
Layered YAML configuration loading and validation.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import yaml

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        if (
            os.path.exists(config_path)
            and os.path.abspath(config_path) != os.path.abspath(local_overrides_path)
            and os.path.abspath(config_path) != os.path.abspath(base_path)
        ):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ["detection", "log_path", "log_level"]
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Validate detection settings
    detection = config.get("detection") or {}
    backend = detection.get("backend", "yolo")
    if backend != "yolo":
        return False, "detection.backend must be: yolo"
    yolo_cfg = detection.get("yolo") or {}
    if not isinstance(yolo_cfg.get("model"), str) or not yolo_cfg.get("model"):
        return False, "detection.yolo.model is required when detection.backend is 'yolo'"
    for key in ("conf_threshold", "iou_threshold"):
        if key in yolo_cfg:
            if not _is_number(yolo_cfg[key]) or not (0 <= yolo_cfg[key] <= 1):
                return False, f"detection.yolo.{key} must be a number between 0 and 1"

    if "vehicle_classes" in detection:
        classes = detection["vehicle_classes"]
        if not isinstance(classes, list) or not classes or not all(isinstance(c, str) for c in classes):
            return False, "detection.vehicle_classes must be a non-empty list of class names"

    # Optional standardize settings
    standardize = config.get("standardize") or {}
    for key in ("width", "height"):
        if key in standardize and not _is_positive_int(standardize[key]):
            return False, f"standardize.{key} must be a positive integer"

    # Optional scheduler settings
    scheduler = config.get("scheduler") or {}
    if "fps" in scheduler:
        if not _is_number(scheduler["fps"]) or scheduler["fps"] <= 0:
            return False, "scheduler.fps must be a positive number"

    # Optional web settings
    web = config.get("web") or {}
    if "port" in web:
        if not _is_positive_int(web["port"]) or web["port"] > 65535:
            return False, "web.port must be an integer between 1 and 65535"
    if "host" in web and not isinstance(web["host"], str):
        return False, "web.host must be a string"
    origins = web.get("cors_origins")
    if origins is not None and (
        not isinstance(origins, list) or not all(isinstance(o, str) for o in origins)
    ):
        return False, "web.cors_origins must be a list of strings"

    # Validate log settings
    if not isinstance(config["log_path"], str) or not config["log_path"]:
        return False, "log_path must be a non-empty string"
    if config["log_level"] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None
