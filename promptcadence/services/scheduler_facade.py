# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Scheduling orchestration.
Cancels a group's outstanding prompt deliveries, generates the new
schedule and submits it to the delivery channel.

One run per group at a time; a newer call supersedes an older one.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from promptcadence.core.config import settings
from promptcadence.core.logging import get_logger
from promptcadence.metrics.prometheus import (
    DELIVERY_FAILURES,
    RESCHEDULES_TOTAL,
    SLOTS_DROPPED,
    SLOTS_SCHEDULED,
)
from promptcadence.models.domain import (
    Cadence,
    DeliveryKey,
    DeliveryRequest,
    ScheduledSlot,
)
from promptcadence.services import cadence as cadence_model
from promptcadence.services.collision_guard import CollisionGuard
from promptcadence.services.delivery_client import DeliveryChannel
from promptcadence.services.prompt_bank import PromptBank
from promptcadence.services.schedule_generator import ScheduleGenerator

logger = get_logger(__name__)

PROMPT_ROLE = "prompt"
RESPONSE_ROLE = "response"
FALLBACK_PROMPT = "Share a moment from your day."


class SchedulerFacade:
    """Business logic for (re)building a group's prompt schedule."""

    def __init__(
        self,
        generator: ScheduleGenerator,
        channel: DeliveryChannel,
        prompt_bank: PromptBank,
        guard_factory: Optional[Callable[[], CollisionGuard]] = None,
        submit_timeout: Optional[float] = None,
    ) -> None:
        self._generator = generator
        self._channel = channel
        self._prompts = prompt_bank
        self._guard_factory = guard_factory or (lambda: CollisionGuard(clock=generator.now))
        self._timeout = submit_timeout or settings.DELIVERY_TIMEOUT
        self._locks: dict[str, asyncio.Lock] = {}
        self._generations: dict[str, int] = {}
        self._last_results: dict[str, dict[str, Any]] = {}
        self._fanout_seq: dict[str, int] = {}

    # ── Commands ──

    async def reschedule(
        self,
        group_id: str,
        cadence: Cadence,
        active_responder_id: str,
    ) -> dict[str, Any]:
        """
        Replace the group's prompt schedule.
        Returns once every submission has resolved; individual failures
        are counted in the result, never raised.
        """
        generation = self._next_generation(group_id)
        lock = self._locks.setdefault(group_id, asyncio.Lock())

        async with lock:
            if self._is_stale(group_id, generation):
                logger.info(
                    "Reschedule superseded before start: group=%s",
                    group_id, extra={"group_id": group_id},
                )
                return self._result(group_id, cadence, active_responder_id, superseded=True)

            RESCHEDULES_TOTAL.labels(cadence=cadence.value).inc()
            guard = self._guard_factory()
            guard.clear()

            cancelled = await self._channel.cancel((group_id, PROMPT_ROLE))
            slots = self._generator.generate_slots(cadence, guard)
            requests = [
                self._prompt_request(group_id, active_responder_id, index, slot)
                for index, slot in enumerate(slots)
            ]
            outcomes = await asyncio.gather(
                *(self._submit(request, generation) for request in requests)
            )

            sent = [r.fire_at for r, o in zip(requests, outcomes) if o == "sent"]
            failed = outcomes.count("failed")
            skipped = outcomes.count("skipped")
            target = cadence_model.target_event_count(cadence)
            dropped = max(target - len(slots), 0)

            SLOTS_SCHEDULED.labels(cadence=cadence.value).inc(len(sent))
            if dropped:
                SLOTS_DROPPED.labels(cadence=cadence.value).inc(dropped)

            result = self._result(
                group_id,
                cadence,
                active_responder_id,
                scheduled=sent,
                target=target,
                dropped=dropped,
                failed=failed,
                cancelled=cancelled,
                superseded=skipped > 0 or self._is_stale(group_id, generation),
            )
            if not result["superseded"]:
                self._last_results[group_id] = result
            logger.info(
                "Schedule rebuilt: group=%s, cadence=%s, scheduled=%d, failed=%d, dropped=%d",
                group_id, cadence.value, len(sent), failed, dropped,
                extra={"group_id": group_id},
            )
            return result

    async def cancel(self, group_id: str) -> int:
        """
        Drop the group's prompt schedule for good (group deletion).
        Waits for an in-flight run to finish submitting, so its deliveries
        are cancelled too, then forgets the group's per-group state.
        """
        generation = self._next_generation(group_id)
        lock = self._locks.setdefault(group_id, asyncio.Lock())

        async with lock:
            self._last_results.pop(group_id, None)
            cancelled = await self._channel.cancel((group_id, PROMPT_ROLE))

        # A reschedule queued after this cancel still needs its lock and generation
        if not self._is_stale(group_id, generation):
            self._locks.pop(group_id, None)
            self._generations.pop(group_id, None)
            self._fanout_seq.pop(group_id, None)

        logger.info(
            "Schedule cancelled: group=%s, cancelled=%d",
            group_id, cancelled, extra={"group_id": group_id},
        )
        return cancelled

    async def notify_members(
        self,
        group_id: str,
        responder_name: str,
        recipient_ids: list[str],
    ) -> dict[str, int]:
        """Tell the other members that the active responder just posted."""
        now = self._generator.now()
        requests = []
        for offset, recipient_id in enumerate(recipient_ids):
            seq = self._fanout_seq.get(group_id, 0)
            self._fanout_seq[group_id] = seq + 1
            requests.append(DeliveryRequest(
                key=DeliveryKey(group_id, RESPONSE_ROLE, now.date(), seq),
                recipient_id=recipient_id,
                fire_at=now + timedelta(seconds=5 + offset),
                title="New DIML Post!",
                body=f"{responder_name} just shared their day in my life!",
            ))
        outcomes = await asyncio.gather(*(self._submit(r) for r in requests))
        return {"notified": outcomes.count("sent"), "failed": outcomes.count("failed")}

    # ── Queries ──

    def last_result(self, group_id: str) -> Optional[dict[str, Any]]:
        return self._last_results.get(group_id)

    # ── Internal ──

    def _next_generation(self, group_id: str) -> int:
        generation = self._generations.get(group_id, 0) + 1
        self._generations[group_id] = generation
        return generation

    def _is_stale(self, group_id: str, generation: int) -> bool:
        return self._generations.get(group_id) != generation

    def _prompt_request(
        self,
        group_id: str,
        recipient_id: str,
        index: int,
        slot: ScheduledSlot,
    ) -> DeliveryRequest:
        return DeliveryRequest(
            key=DeliveryKey(group_id, PROMPT_ROLE, slot.fire_at.date(), index),
            recipient_id=recipient_id,
            fire_at=slot.fire_at,
            title=f"Time for your {slot.window.label} reflection!",
            body=self._prompts.random_prompt(slot.window) or FALLBACK_PROMPT,
        )

    async def _submit(self, request: DeliveryRequest, generation: Optional[int] = None) -> str:
        group_id = request.key.group_id
        if generation is not None and self._is_stale(group_id, generation):
            return "skipped"
        try:
            await asyncio.wait_for(self._channel.submit(request), timeout=self._timeout)
            return "sent"
        except asyncio.TimeoutError:
            logger.warning(
                "Delivery timed out: group=%s, role=%s, slot=%d",
                group_id, request.key.role, request.key.slot_index,
                extra={"group_id": group_id},
            )
        except Exception as exc:
            logger.warning(
                "Delivery failed: group=%s, role=%s, slot=%d: %s",
                group_id, request.key.role, request.key.slot_index, exc,
                extra={"group_id": group_id},
            )
        DELIVERY_FAILURES.labels(role=request.key.role).inc()
        return "failed"

    def _result(
        self,
        group_id: str,
        cadence: Cadence,
        responder_id: str,
        scheduled: Optional[list[datetime]] = None,
        target: int = 0,
        dropped: int = 0,
        failed: int = 0,
        cancelled: int = 0,
        superseded: bool = False,
    ) -> dict[str, Any]:
        return {
            "group_id": group_id,
            "cadence": cadence.value,
            "active_responder_id": responder_id,
            "scheduled": scheduled or [],
            "target": target,
            "dropped": dropped,
            "failed": failed,
            "cancelled": cancelled,
            "superseded": superseded,
            "completed_at": datetime.now(timezone.utc).isoformat(),
        }
