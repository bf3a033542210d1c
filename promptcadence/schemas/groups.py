# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP request and response contracts for groups, entries and schedules.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from promptcadence.models.domain import Member


# ── Group Schemas ──

class GroupCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Group name")
    members: list[Member] = Field(..., min_length=1, description="Initial members")
    admin_id: Optional[str] = Field(
        default=None, description="Administrator member id (defaults to the first member)"
    )
    cadence: Optional[str] = Field(default=None, description="Prompt cadence")


class MembersAddRequest(BaseModel):
    members: list[Member] = Field(..., min_length=1, description="Members to add")


class CadenceUpdateRequest(BaseModel):
    cadence: str = Field(..., min_length=1, description="New prompt cadence")


class GroupMemberResponse(BaseModel):
    id: str
    name: str
    role: str


class GroupResponse(BaseModel):
    id: str
    name: str
    admin_id: str
    active_responder_id: str
    cadence: str
    members: list[GroupMemberResponse]
    created_at: str
    updated_at: Optional[str] = None


class MemberRemovedResponse(BaseModel):
    status: str
    group_id: str
    group: Optional[GroupResponse] = None


# ── Entry Schemas ──

class EntryCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1, max_length=1000)
    response: str = Field(default="", max_length=5000)


class EntryResponse(BaseModel):
    id: str
    user_id: str
    prompt: str
    response: str
    timestamp: datetime
    notified: int = 0
    failed: int = 0


# ── Schedule / Readiness Schemas ──

class CadenceOption(BaseModel):
    value: str
    label: str
    interval_minutes: int
    target_event_count: int


class ScheduleResponse(BaseModel):
    group_id: str
    cadence: str
    active_responder_id: str
    scheduled: list[datetime]
    target: int = 0
    dropped: int = 0
    failed: int = 0
    cancelled: int = 0
    superseded: bool = False
    completed_at: Optional[str] = None


class ReadinessResponse(BaseModel):
    group_id: str
    member_id: str
    status_message: str
    is_ready: bool
    tone: str
    next_eligible_at: Optional[datetime] = None
    time_remaining: str = ""
