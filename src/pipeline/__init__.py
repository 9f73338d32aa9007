"""
Pipeline module for the vehicle analysis system.

The pipeline orchestrates one analysis flow:
- Standardization and detection (DetectionPipeline)
- Color extraction and record assembly
- One-shot and continuous passes over the active media (AnalysisController)
"""

from .engine import DetectionPipeline, PipelineConfig, PipelineStats
from .scheduler import ContinuousDetectionScheduler, LoopFrameClock, SchedulerState
from .controller import AnalysisController, create_controller_from_config

__all__ = [
    "DetectionPipeline",
    "PipelineConfig",
    "PipelineStats",
    "ContinuousDetectionScheduler",
    "LoopFrameClock",
    "SchedulerState",
    "AnalysisController",
    "create_controller_from_config",
]
