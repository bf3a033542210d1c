# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""First-fit spacing guard for one scheduling run."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from promptcadence.models.domain import ScheduledSlot, TimeWindow


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CollisionGuard:
    """
    Keeps the slots accepted so far and rejects any candidate that sits
    closer than a reservation's minimum spacing. Rejected candidates are
    discarded; nothing is shifted or retried.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utc_now
        self._reserved: list[ScheduledSlot] = []

    def try_reserve(self, candidate: datetime, window: TimeWindow) -> bool:
        now = self._clock()
        self._reserved = [s for s in self._reserved if s.fire_at >= now]

        for slot in self._reserved:
            spacing = timedelta(minutes=slot.window.minimum_spacing)
            if abs(candidate - slot.fire_at) < spacing:
                return False

        self._reserved.append(ScheduledSlot(candidate, window))
        return True

    def clear(self) -> None:
        self._reserved.clear()

    @property
    def reserved(self) -> list[ScheduledSlot]:
        return list(self._reserved)
