"""
Media layer: still images and video playback surfaces.
"""

from .base import VideoSurface, MediaKind, detect_media_kind, VIDEO_EXTENSIONS, PLAY, PAUSE, ENDED
from .image import load_image
from .opencv_video import OpenCVVideoSurface

__all__ = [
    "VideoSurface",
    "MediaKind",
    "detect_media_kind",
    "VIDEO_EXTENSIONS",
    "PLAY",
    "PAUSE",
    "ENDED",
    "load_image",
    "OpenCVVideoSurface",
]
