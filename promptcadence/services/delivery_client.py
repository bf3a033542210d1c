# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Delivery channel clients.
Hands timed notification requests to the external delivery channel
and cancels them in bulk by (group, role).
"""

from typing import Optional

import httpx

from promptcadence.core.config import settings
from promptcadence.core.logging import get_logger
from promptcadence.models.domain import DeliveryKey, DeliveryRequest

logger = get_logger(__name__)


class DeliveryChannel:
    """Interface of the external channel. Submission errors propagate."""

    async def submit(self, request: DeliveryRequest) -> None:
        raise NotImplementedError

    async def cancel(self, prefix: tuple[str, str]) -> int:
        """Cancel every request under (group_id, role); returns how many."""
        raise NotImplementedError


class InMemoryDeliveryChannel(DeliveryChannel):
    """Pending requests held in process, keyed by DeliveryKey."""

    def __init__(self) -> None:
        self._pending: dict[DeliveryKey, DeliveryRequest] = {}

    async def submit(self, request: DeliveryRequest) -> None:
        # Same key replaces, so repeated runs never double-deliver
        self._pending[request.key] = request

    async def cancel(self, prefix: tuple[str, str]) -> int:
        doomed = [key for key in self._pending if key.prefix == prefix]
        for key in doomed:
            del self._pending[key]
        return len(doomed)

    def pending(
        self,
        group_id: Optional[str] = None,
        role: Optional[str] = None,
    ) -> list[DeliveryRequest]:
        result = [
            r for r in self._pending.values()
            if (group_id is None or r.key.group_id == group_id)
            and (role is None or r.key.role == role)
        ]
        return sorted(result, key=lambda r: r.fire_at)

    def clear(self) -> None:
        self._pending.clear()


class HttpDeliveryChannel(DeliveryChannel):
    """Delivery via the notification service's scheduled-delivery API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.DELIVERY_SERVICE_URL).rstrip("/")
        self._timeout = timeout or settings.DELIVERY_TIMEOUT

    async def submit(self, request: DeliveryRequest) -> None:
        payload = {
            "group_id": request.key.group_id,
            "role": request.key.role,
            "day": request.key.day.isoformat(),
            "slot_index": request.key.slot_index,
            "recipient": request.recipient_id,
            "fire_at": request.fire_at.isoformat(),
            "title": request.title,
            "body": request.body,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(f"{self._base_url}/api/v1/scheduled", json=payload)
            resp.raise_for_status()
        logger.info(
            "Delivery submitted: group=%s, role=%s, slot=%d, fire_at=%s",
            request.key.group_id,
            request.key.role,
            request.key.slot_index,
            request.fire_at.isoformat(),
        )

    async def cancel(self, prefix: tuple[str, str]) -> int:
        """Failures are logged but never raised; they count as zero cancelled."""
        group_id, role = prefix
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.delete(
                    f"{self._base_url}/api/v1/scheduled",
                    params={"group_id": group_id, "role": role},
                )
                resp.raise_for_status()
            return int(resp.json().get("cancelled", 0))
        except Exception as exc:
            logger.warning("Delivery cancel failed: group=%s, role=%s: %s", group_id, role, exc)
            return 0
