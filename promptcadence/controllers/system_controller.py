# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints (health, readiness, metrics).
No group logic here.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from promptcadence.core.config import settings
from promptcadence.core.dependencies import (
    get_delivery_channel,
    get_entry_repo,
    get_group_repo,
    get_history_repo,
)
from promptcadence.services.delivery_client import InMemoryDeliveryChannel

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe with store sizes."""
    payload = {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "groups_count": get_group_repo().count(),
        "entries_count": get_entry_repo().count(),
        "history_events": get_history_repo().count(),
    }
    channel = get_delivery_channel()
    if isinstance(channel, InMemoryDeliveryChannel):
        payload["pending_deliveries"] = len(channel.pending())
    return payload


@router.get("/health/ready")
def readiness_check():
    """Readiness probe: reports where deliveries go and which clock schedules use."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "delivery_backend": settings.DELIVERY_BACKEND,
        "timezone": settings.TIMEZONE,
        "testing_cadence": settings.ENABLE_TESTING_CADENCE,
    }


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
