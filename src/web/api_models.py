from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ColorSampleModel(BaseModel):
    color_name: str
    hex_code: str
    confidence: float = Field(..., description="Raw color confidence in [0, 1]")
    method: str = Field(..., description="pixel-analysis|fallback")
    diagnostic: Optional[str] = None


class VehicleRecordModel(BaseModel):
    id: int
    class_name: str
    score: int = Field(..., description="Detector confidence as an integer percentage")
    raw_score: float
    bbox: List[float] = Field(..., description="[x, y, width, height] in original image pixels")
    color: ColorSampleModel
    color_confidence: int = Field(..., description="Color confidence as an integer percentage")


class SessionResponse(BaseModel):
    """
    Snapshot of the active detection session.
    Records always belong to the media item named by media_url.
    """
    generation: int
    state: str = Field(..., description="idle|ready|detecting|analyzed")
    media_url: Optional[str] = None
    is_video: bool = False
    records: List[VehicleRecordModel] = Field(default_factory=list)
    vehicle_count: int = 0
    has_attempted_detection: bool = False
    last_timestamp: Optional[float] = Field(None, description="Seconds into the video of the last pass")
    last_timestamp_label: Optional[str] = None
    continuous: bool = False
    in_flight: bool = False


class MediaRequest(BaseModel):
    path: str = Field(..., description="Local image or video path")


class ContinuousResponse(BaseModel):
    running: bool
    frame_counter: int = 0


class NoticeModel(BaseModel):
    id: int
    message: str
    severity: str = Field(..., description="info|success|warning|error")
    created_at: float
