# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain types for cadences, windows, delivery keys and readiness.
"""

from datetime import date, datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field


class Cadence(str, Enum):
    """Configured prompt frequency for a group."""
    TESTING = "testing"
    HOURLY = "hourly"
    EVERY_THREE_HOURS = "every_3_hours"
    EVERY_SIX_HOURS = "every_6_hours"


class TimeWindow(Enum):
    """Time-of-day bucket with its hour range and minimum spacing (minutes)."""
    MORNING = ("morning", 7, 11, 60)
    AFTERNOON = ("afternoon", 12, 16, 60)
    NIGHT = ("night", 17, 21, 60)

    def __init__(self, label: str, start: int, end: int, minimum_spacing: int) -> None:
        self.label = label
        self.start = start
        self.end = end
        self.minimum_spacing = minimum_spacing

    @classmethod
    def for_hour(cls, hour: int) -> "TimeWindow":
        if hour < 12:
            return cls.MORNING
        if hour < 17:
            return cls.AFTERNOON
        return cls.NIGHT


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"
    ACTIVE_RESPONDER = "active_responder"


class Tone(str, Enum):
    READY = "ready"
    RECENT_ACTIVITY = "recent_activity"
    WAITING = "waiting"


class Member(BaseModel):
    """A single group member."""
    id: str = Field(..., min_length=1, max_length=255, description="Member id")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")


class ScheduledSlot(NamedTuple):
    """A reserved fire time and the window it was reserved under."""
    fire_at: datetime
    window: TimeWindow


class DeliveryKey(NamedTuple):
    """Structured identity of one delivery request."""
    group_id: str
    role: str
    day: date
    slot_index: int

    @property
    def prefix(self) -> tuple[str, str]:
        return (self.group_id, self.role)


class DeliveryRequest(BaseModel):
    key: DeliveryKey
    recipient_id: str
    fire_at: datetime
    title: str
    body: str


class ActivityEvent(BaseModel):
    """Latest recorded response of a group's active responder."""
    timestamp: datetime
    prompt: str = ""


class ProjectionResult(BaseModel):
    status_message: str
    is_ready: bool
    tone: Tone
    next_eligible_at: Optional[datetime] = None
    time_remaining: str = ""
