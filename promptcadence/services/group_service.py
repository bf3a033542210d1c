# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Group lifecycle.
Coordinates registry writes with role rotation, rescheduling,
readiness projection and history.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from promptcadence.core.config import settings
from promptcadence.core.logging import get_logger
from promptcadence.metrics.prometheus import (
    ACTIVE_GROUPS,
    READINESS_QUERIES,
    ROLE_ROTATIONS,
)
from promptcadence.models.domain import ActivityEvent, Cadence, ProjectionResult
from promptcadence.repositories.entry_repository import EntryRepository
from promptcadence.repositories.group_repository import GroupRepository
from promptcadence.repositories.history_repository import HistoryRepository
from promptcadence.services.cadence import parse_cadence
from promptcadence.services.readiness import ReadinessProjector
from promptcadence.services.rotation import RoleRotator, assign_roles
from promptcadence.services.scheduler_facade import SchedulerFacade

logger = get_logger(__name__)


class GroupService:
    """Business logic for groups, their active responder and their cadence."""

    def __init__(
        self,
        group_repo: GroupRepository,
        entry_repo: EntryRepository,
        history_repo: HistoryRepository,
        rotator: RoleRotator,
        scheduler: SchedulerFacade,
        projector: ReadinessProjector,
        allow_testing: Optional[bool] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._groups = group_repo
        self._entries = entry_repo
        self._history = history_repo
        self._rotator = rotator
        self._scheduler = scheduler
        self._projector = projector
        self._allow_testing = (
            settings.ENABLE_TESTING_CADENCE if allow_testing is None else allow_testing
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── Commands ──

    async def create_group(
        self,
        name: str,
        members: list[dict[str, Any]],
        admin_id: str | None = None,
        cadence: str | None = None,
    ) -> dict[str, Any]:
        """Create a group with a random first responder. Raises ValueError on bad input."""
        selected = self.parse_cadence(cadence or settings.DEFAULT_CADENCE)
        unique = self._dedupe(members)
        if not unique:
            raise ValueError("A group needs at least one member")

        member_ids = [m["id"] for m in unique]
        admin = admin_id or member_ids[0]
        if admin not in member_ids:
            raise ValueError(f"Admin '{admin}' is not a member of the group")

        active = self._rotator.initial_pick(member_ids)
        group_id = str(uuid.uuid4())
        group: dict[str, Any] = {
            "id": group_id,
            "name": name,
            "admin_id": admin,
            "active_responder_id": active,
            "cadence": selected.value,
            "members": assign_roles(unique, active, admin),
            "created_at": self._now().isoformat(),
            "updated_at": None,
        }
        self._groups.save(group_id, group)

        ACTIVE_GROUPS.set(self._groups.count())
        ROLE_ROTATIONS.labels(reason="group_created").inc()
        self._history.record(
            group_id,
            "group_created",
            members_count=len(unique),
            cadence=selected.value,
            active_responder_id=active,
        )
        logger.info(
            "Group created: group=%s, members=%d, responder=%s",
            group_id, len(unique), active, extra={"group_id": group_id},
        )

        await self._scheduler.reschedule(group_id, selected, active)
        return group

    def add_members(self, group_id: str, members: list[dict[str, Any]]) -> dict[str, Any]:
        """Add members; ids already in the group are ignored. Raises KeyError."""
        group = self.get_group(group_id)
        existing = {m["id"] for m in group["members"]}
        added = [m for m in self._dedupe(members) if m["id"] not in existing]
        if not added:
            return group

        group["members"] = assign_roles(
            group["members"] + added, group["active_responder_id"], group["admin_id"]
        )
        self._touch(group)
        self._history.record(group_id, "member_added", member_ids=[m["id"] for m in added])
        logger.info(
            "Members added: group=%s, added=%d", group_id, len(added),
            extra={"group_id": group_id},
        )
        return group

    async def remove_member(self, group_id: str, member_id: str) -> dict[str, Any]:
        """
        Remove (or let leave) a member.
        The active responder is handed over before the removal is final;
        removing the last member deletes the group.
        Raises KeyError if the group or the member is unknown.
        """
        group = self.get_group(group_id)
        member_ids = [m["id"] for m in group["members"]]
        if member_id not in member_ids:
            raise KeyError(f"Member '{member_id}' is not in group '{group_id}'")

        was_active = member_id == group["active_responder_id"]
        if was_active:
            successor = self._rotator.reassign(excluding=member_id, among=member_ids)
            if successor is None:
                await self.delete_group(group_id, reason="last_member_left")
                return {"status": "group_deleted", "group_id": group_id, "group": None}
            group["active_responder_id"] = successor

        remaining = [m for m in group["members"] if m["id"] != member_id]
        if not remaining:
            await self.delete_group(group_id, reason="last_member_left")
            return {"status": "group_deleted", "group_id": group_id, "group": None}

        if group["admin_id"] == member_id:
            group["admin_id"] = remaining[0]["id"]
        group["members"] = assign_roles(
            remaining, group["active_responder_id"], group["admin_id"]
        )
        self._touch(group)
        self._history.record(
            group_id, "member_removed", member_id=member_id, was_active_responder=was_active
        )
        logger.info(
            "Member removed: group=%s, member=%s", group_id, member_id,
            extra={"group_id": group_id},
        )

        if was_active:
            self._record_rotation(group, member_id, reason="responder_left")
            await self._scheduler.reschedule(
                group_id, Cadence(group["cadence"]), group["active_responder_id"]
            )
        return {"status": "member_removed", "group_id": group_id, "group": group}

    async def rotate(self, group_id: str) -> dict[str, Any]:
        """Hand the active-responder role to another random member. Raises KeyError / ValueError."""
        group = self.get_group(group_id)
        previous = group["active_responder_id"]
        successor = self._rotator.reassign(
            excluding=previous, among=[m["id"] for m in group["members"]]
        )
        if successor is None:
            raise ValueError(f"Group '{group_id}' has no other member to rotate to")

        group["active_responder_id"] = successor
        group["members"] = assign_roles(group["members"], successor, group["admin_id"])
        self._touch(group)
        self._record_rotation(group, previous, reason="manual")

        await self._scheduler.reschedule(group_id, Cadence(group["cadence"]), successor)
        return group

    async def change_cadence(self, group_id: str, cadence: str) -> dict[str, Any]:
        """Switch the group's cadence and rebuild its schedule. Raises KeyError / ValueError."""
        group = self.get_group(group_id)
        selected = self.parse_cadence(cadence)
        previous = group["cadence"]
        group["cadence"] = selected.value
        self._touch(group)
        self._history.record(group_id, "cadence_changed", old=previous, new=selected.value)
        logger.info(
            "Cadence changed: group=%s, %s -> %s", group_id, previous, selected.value,
            extra={"group_id": group_id},
        )

        await self._scheduler.reschedule(group_id, selected, group["active_responder_id"])
        return group

    async def rebuild_schedule(self, group_id: str) -> dict[str, Any]:
        group = self.get_group(group_id)
        result = await self._scheduler.reschedule(
            group_id, Cadence(group["cadence"]), group["active_responder_id"]
        )
        self._history.record(
            group_id,
            "schedule_rebuilt",
            scheduled=len(result["scheduled"]),
            failed=result["failed"],
        )
        return result

    async def delete_group(self, group_id: str, reason: str = "deleted") -> dict[str, str]:
        """Delete a group and cancel its schedule. Raises KeyError."""
        if not self._groups.exists(group_id):
            raise KeyError(f"No group found with id '{group_id}'")

        await self._scheduler.cancel(group_id)
        self._groups.delete(group_id)
        self._entries.delete_group(group_id)

        ACTIVE_GROUPS.set(self._groups.count())
        self._history.record(group_id, "group_deleted", reason=reason)
        logger.info(
            "Group deleted: group=%s, reason=%s", group_id, reason,
            extra={"group_id": group_id},
        )
        return {"status": "deleted", "group_id": group_id}

    async def record_entry(
        self,
        group_id: str,
        user_id: str,
        prompt: str,
        response: str = "",
    ) -> dict[str, Any]:
        """
        Store a posted response. When the active responder posts, every
        other member is notified. Raises KeyError / ValueError.
        """
        group = self.get_group(group_id)
        author = self._member(group, user_id)
        if author is None:
            raise ValueError(f"User '{user_id}' is not a member of group '{group_id}'")

        entry: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "prompt": prompt,
            "response": response,
            "timestamp": self._now(),
        }
        self._entries.append(group_id, entry)
        self._history.record(group_id, "entry_recorded", user_id=user_id)

        fanout = {"notified": 0, "failed": 0}
        if user_id == group["active_responder_id"]:
            recipients = [m["id"] for m in group["members"] if m["id"] != user_id]
            fanout = await self._scheduler.notify_members(group_id, author["name"], recipients)
        return {**entry, **fanout}

    # ── Queries ──

    def list_groups(self) -> list[dict[str, Any]]:
        return self._groups.get_all()

    def get_group(self, group_id: str) -> dict[str, Any]:
        group = self._groups.get_by_id(group_id)
        if group is None:
            raise KeyError(f"No group found with id '{group_id}'")
        return group

    def readiness(self, group_id: str, member_id: str) -> ProjectionResult:
        """Project the prompt status as seen by `member_id`. Raises KeyError."""
        group = self.get_group(group_id)
        if self._member(group, member_id) is None:
            raise KeyError(f"Member '{member_id}' is not in group '{group_id}'")

        responder_id = group["active_responder_id"]
        latest = self._entries.latest(group_id, user_id=responder_id)
        last_activity = (
            ActivityEvent(timestamp=latest["timestamp"], prompt=latest["prompt"])
            if latest
            else None
        )
        responder = self._member(group, responder_id)
        result = self._projector.project(
            last_activity,
            Cadence(group["cadence"]),
            is_self_active_responder=member_id == responder_id,
            responder_name=responder["name"] if responder else None,
        )
        READINESS_QUERIES.labels(tone=result.tone.value).inc()
        return result

    def get_schedule(self, group_id: str) -> dict[str, Any]:
        group = self.get_group(group_id)
        last = self._scheduler.last_result(group_id)
        if last is None:
            return {
                "group_id": group_id,
                "cadence": group["cadence"],
                "active_responder_id": group["active_responder_id"],
                "scheduled": [],
            }
        return last

    def parse_cadence(self, value: str) -> Cadence:
        return parse_cadence(value, allow_testing=self._allow_testing)

    # ── Internal ──

    def _now(self) -> datetime:
        return self._clock()

    def _touch(self, group: dict[str, Any]) -> None:
        group["updated_at"] = self._now().isoformat()
        self._groups.save(group["id"], group)

    def _record_rotation(self, group: dict[str, Any], previous: str, reason: str) -> None:
        ROLE_ROTATIONS.labels(reason=reason).inc()
        self._history.record(
            group["id"],
            "role_rotated",
            old_responder_id=previous,
            new_responder_id=group["active_responder_id"],
            reason=reason,
        )
        logger.info(
            "Active responder rotated: group=%s, %s -> %s (%s)",
            group["id"], previous, group["active_responder_id"], reason,
            extra={"group_id": group["id"]},
        )

    @staticmethod
    def _member(group: dict[str, Any], member_id: str) -> Optional[dict[str, Any]]:
        return next((m for m in group["members"] if m["id"] == member_id), None)

    @staticmethod
    def _dedupe(members: list[dict[str, Any]]) -> list[dict[str, Any]]:
        seen: set[str] = set()
        unique = []
        for member in members:
            if member["id"] not in seen:
                seen.add(member["id"])
                unique.append({"id": member["id"], "name": member["name"]})
        return unique
