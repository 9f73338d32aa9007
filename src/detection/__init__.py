"""
Vehicle Lens - Detection Module

Detector interface, vehicle class filtering and record assembly.
"""

from .base import Detector, VEHICLE_CLASSES, filter_vehicles, coerce_detections
from .records import VehicleRecordBuilder, normalize_class_name

__all__ = [
    'Detector',
    'VEHICLE_CLASSES',
    'filter_vehicles',
    'coerce_detections',
    'VehicleRecordBuilder',
    'normalize_class_name',
]
