"""
User-facing notices (dismissible text messages with a severity tag).
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    id: int
    message: str
    severity: Severity
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "severity": self.severity.value,
            "created_at": self.created_at,
        }


class NoticeBoard:
    """Holds notices until they are dismissed."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._notices: Dict[int, Notice] = {}

    def post(self, message: str, severity: Severity = Severity.INFO) -> Notice:
        notice = Notice(id=next(self._ids), message=message, severity=severity)
        self._notices[notice.id] = notice
        return notice

    def dismiss(self, notice_id: int) -> bool:
        """Remove a notice. Returns False if no such notice is active."""
        return self._notices.pop(notice_id, None) is not None

    def active(self) -> List[Notice]:
        return list(self._notices.values())

    def latest(self) -> Optional[Notice]:
        if not self._notices:
            return None
        return next(reversed(self._notices.values()))

    def clear(self) -> None:
        self._notices.clear()
