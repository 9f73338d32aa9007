"""
Detection session state for the active media item.
"""

from .session import DetectionSession, SessionSnapshot, SessionState, format_video_time

__all__ = ["DetectionSession", "SessionSnapshot", "SessionState", "format_video_time"]
