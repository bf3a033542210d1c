# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Schedule generation.
Turns a cadence into the concrete fire times for one active day,
packing them through a CollisionGuard.
"""

import random
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional

from promptcadence.core.logging import get_logger
from promptcadence.models.domain import Cadence, ScheduledSlot, TimeWindow
from promptcadence.services import cadence as cadence_model
from promptcadence.services.collision_guard import CollisionGuard

logger = get_logger(__name__)


class ScheduleGenerator:
    """Builds ordered fire times for a cadence. Each call re-reads "now"."""

    def __init__(
        self,
        tz: tzinfo = timezone.utc,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._rng = rng or random.Random()

    def now(self) -> datetime:
        return self._clock().astimezone(self._tz)

    def generate(
        self,
        cadence: Cadence,
        guard: CollisionGuard,
        reference_day: Optional[date] = None,
    ) -> list[datetime]:
        return [slot.fire_at for slot in self.generate_slots(cadence, guard, reference_day)]

    def generate_slots(
        self,
        cadence: Cadence,
        guard: CollisionGuard,
        reference_day: Optional[date] = None,
    ) -> list[ScheduledSlot]:
        now = self.now()

        if cadence is Cadence.TESTING:
            # Dense packing on purpose: the guard is not consulted
            slots = []
            for i in range(cadence_model.target_event_count(cadence)):
                fire_at = now + timedelta(minutes=i + 1)
                slots.append(ScheduledSlot(fire_at, TimeWindow.for_hour(fire_at.hour)))
            return slots

        day = reference_day or now.date()
        step = cadence_model.interval_hours(cadence)
        count = cadence_model.ACTIVE_DAY_HOURS // step

        slots: list[ScheduledSlot] = []
        dropped = 0
        for i in range(count):
            hour = cadence_model.ACTIVE_DAY_START + i * step
            window = TimeWindow.for_hour(hour)
            minute = self._rng.randint(0, 59)
            fire_at = self._at(day, hour, minute)
            if fire_at < now:
                fire_at = self._at(day + timedelta(days=1), hour, minute)

            if guard.try_reserve(fire_at, window):
                slots.append(ScheduledSlot(fire_at, window))
            else:
                dropped += 1

        slots.sort(key=lambda s: s.fire_at)
        if dropped:
            logger.info(
                "Dropped %d colliding slot(s): cadence=%s, produced=%d, target=%d",
                dropped, cadence.value, len(slots), count,
            )
        return slots

    def _at(self, day: date, hour: int, minute: int) -> datetime:
        return datetime.combine(day, time(hour, minute), tzinfo=self._tz)
