# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Group, membership, rotation and entry endpoints.
Thin HTTP layer; every rule lives in GroupService.
"""

from fastapi import APIRouter, Depends, HTTPException

from promptcadence.core.dependencies import get_group_service
from promptcadence.schemas.groups import (
    CadenceUpdateRequest,
    EntryCreateRequest,
    EntryResponse,
    GroupCreateRequest,
    GroupResponse,
    MemberRemovedResponse,
    MembersAddRequest,
)
from promptcadence.services.group_service import GroupService

router = APIRouter(prefix="/api/v1", tags=["Groups"])


@router.post("/groups", status_code=201, response_model=GroupResponse)
async def create_group(
    payload: GroupCreateRequest,
    service: GroupService = Depends(get_group_service),
):
    """Create a group; a random member becomes the first active responder."""
    try:
        return await service.create_group(
            name=payload.name,
            members=[m.model_dump() for m in payload.members],
            admin_id=payload.admin_id,
            cadence=payload.cadence,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/groups")
def list_groups(
    service: GroupService = Depends(get_group_service),
):
    """List all groups."""
    return service.list_groups()


@router.get("/groups/{group_id}", response_model=GroupResponse)
def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Get a single group with its member role tags."""
    try:
        return service.get_group(group_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Delete a group and cancel its prompt schedule."""
    try:
        return await service.delete_group(group_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Membership ──

@router.post("/groups/{group_id}/members", response_model=GroupResponse)
def add_members(
    group_id: str,
    payload: MembersAddRequest,
    service: GroupService = Depends(get_group_service),
):
    """Add members to a group. Existing member ids are ignored."""
    try:
        return service.add_members(group_id, [m.model_dump() for m in payload.members])
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/groups/{group_id}/members/{member_id}", response_model=MemberRemovedResponse)
async def remove_member(
    group_id: str,
    member_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Remove a member (or leave). Deletes the group when nobody remains."""
    try:
        return await service.remove_member(group_id, member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Rotation & cadence ──

@router.post("/groups/{group_id}/rotate", response_model=GroupResponse)
async def rotate(
    group_id: str,
    service: GroupService = Depends(get_group_service),
):
    """Hand the active-responder role to another random member."""
    try:
        return await service.rotate(group_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/groups/{group_id}/cadence", response_model=GroupResponse)
async def change_cadence(
    group_id: str,
    payload: CadenceUpdateRequest,
    service: GroupService = Depends(get_group_service),
):
    """Change the prompt cadence and rebuild the schedule."""
    try:
        return await service.change_cadence(group_id, payload.cadence)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ── Entries ──

@router.post("/groups/{group_id}/entries", status_code=201, response_model=EntryResponse)
async def record_entry(
    group_id: str,
    payload: EntryCreateRequest,
    service: GroupService = Depends(get_group_service),
):
    """Record a posted response; the responder's posts notify the group."""
    try:
        return await service.record_entry(
            group_id,
            user_id=payload.user_id,
            prompt=payload.prompt,
            response=payload.response,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
