# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Audit history.
Bounded log of what happened to each group: membership, responder
handovers, cadence changes and schedule rebuilds. Oldest first.
"""

import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from promptcadence.core.config import settings

GROUP_EVENTS: frozenset[str] = frozenset({
    "group_created",
    "group_deleted",
    "member_added",
    "member_removed",
    "role_rotated",
    "cadence_changed",
    "schedule_rebuilt",
    "entry_recorded",
})


class HistoryRepository:
    """Per-group audit trail; once MAX_HISTORY_SIZE is reached the oldest entries drop off."""

    def __init__(self, max_size: Optional[int] = None) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=max_size or settings.MAX_HISTORY_SIZE)

    # ── Read ──

    def get_all(
        self,
        group_id: Optional[str] = None,
        event_type: Optional[str] = None,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> list[dict[str, Any]]:
        """Newest `limit` matching events, returned in the order they happened."""
        if event_type is not None and event_type not in GROUP_EVENTS:
            raise ValueError(f"Unknown event type '{event_type}'")

        trail = [
            e for e in self._events
            if (group_id is None or e["group_id"] == group_id)
            and (event_type is None or e["event_type"] == event_type)
            and (since is None or e["at"] >= since)
        ]
        trail = trail[-(limit or settings.DEFAULT_HISTORY_LIMIT):]
        return [{**e, "at": e["at"].isoformat()} for e in trail]

    def count(self) -> int:
        return len(self._events)

    # ── Write ──

    def record(self, group_id: str, event_type: str, **details: Any) -> None:
        """Append one group event. Raises ValueError for an event type outside GROUP_EVENTS."""
        if event_type not in GROUP_EVENTS:
            raise ValueError(f"Unknown event type '{event_type}'")
        self._events.append({
            "event_id": str(uuid.uuid4()),
            "group_id": group_id,
            "event_type": event_type,
            "at": datetime.now(timezone.utc),
            "details": details,
        })

    def clear(self) -> None:
        self._events.clear()
