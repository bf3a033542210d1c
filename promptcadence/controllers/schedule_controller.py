# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Cadences, schedules, readiness and history endpoints.
Thin HTTP layer; every rule lives in GroupService.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from promptcadence.core.config import settings
from promptcadence.core.dependencies import get_group_service, get_history_repo
from promptcadence.repositories.history_repository import HistoryRepository
from promptcadence.schemas.groups import (
    CadenceOption,
    ReadinessResponse,
    ScheduleResponse,
)
from promptcadence.services import cadence as cadence_model
from promptcadence.services.group_service import GroupService

router = APIRouter(prefix="/api/v1", tags=["Schedules"])


@router.get("/cadences", response_model=list[CadenceOption])
def list_cadences():
    """Cadences a group may select. The testing cadence only appears in debug mode."""
    return [
        {
            "value": c.value,
            "label": cadence_model.display_name(c),
            "interval_minutes": cadence_model.interval_minutes(c),
            "target_event_count": cadence_model.target_event_count(c),
        }
        for c in cadence_model.available_cadences(settings.ENABLE_TESTING_CADENCE)
    ]


@router.get("/groups/{group_id}/schedule", response_model=ScheduleResponse)
def get_schedule(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Outcome of the group's latest scheduling run."""
    try:
        return service.get_schedule(group_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/groups/{group_id}/schedule/rebuild", response_model=ScheduleResponse)
async def rebuild_schedule(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Cancel and regenerate the group's prompt schedule."""
    try:
        return await service.rebuild_schedule(group_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/groups/{group_id}/readiness", response_model=ReadinessResponse)
def get_readiness(
    group_id: str,
    member_id: str = Query(..., description="Member viewing the group"),
    service: GroupService = Depends(get_group_service),
):
    """Whether the next prompt is open, with a status line for display."""
    try:
        result = service.readiness(group_id, member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"group_id": group_id, "member_id": member_id, **result.model_dump(mode="json")}


@router.get("/history")
def get_history(
    group_id: Optional[str] = None,
    event_type: Optional[str] = None,
    limit: int = Query(default=None, ge=1, description="Max results"),
    since: Optional[datetime] = Query(default=None, description="Only events at or after this time"),
    history_repo: HistoryRepository = Depends(get_history_repo),
):
    """Audit log for group, role and schedule events."""
    if since is not None and since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    try:
        return history_repo.get_all(
            group_id=group_id, event_type=event_type, limit=limit, since=since
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
