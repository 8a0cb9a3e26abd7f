"""Relay Service — request/response models."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

FORWARDED_ROLES = ("user", "assistant")


class HistoryEntry(BaseModel):
    role: Optional[str] = None
    content: Any = None


class ChatRequest(BaseModel):
    history: Optional[List[HistoryEntry]] = None

    def forwarded_history(self) -> List[dict]:
        """User/assistant turns in their original order, content untouched."""
        return [
            {"role": entry.role, "content": entry.content}
            for entry in self.history or []
            if entry.role in FORWARDED_ROLES
        ]


class ChatResponse(BaseModel):
    reply: str


class TranscribeResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    service: str


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "RunStatus":
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_pending(self) -> bool:
        return self in (RunStatus.QUEUED, RunStatus.IN_PROGRESS)
