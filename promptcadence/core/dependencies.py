# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Wires repositories, the delivery channel and services for FastAPI.
"""

from zoneinfo import ZoneInfo

from promptcadence.core.config import settings
from promptcadence.repositories.entry_repository import EntryRepository
from promptcadence.repositories.group_repository import GroupRepository
from promptcadence.repositories.history_repository import HistoryRepository
from promptcadence.services.delivery_client import (
    DeliveryChannel,
    HttpDeliveryChannel,
    InMemoryDeliveryChannel,
)
from promptcadence.services.group_service import GroupService
from promptcadence.services.prompt_bank import PromptBank
from promptcadence.services.readiness import ReadinessProjector
from promptcadence.services.rotation import RoleRotator
from promptcadence.services.schedule_generator import ScheduleGenerator
from promptcadence.services.scheduler_facade import SchedulerFacade


def _build_channel() -> DeliveryChannel:
    if settings.DELIVERY_BACKEND == "http":
        return HttpDeliveryChannel()
    return InMemoryDeliveryChannel()


def _build_prompt_bank() -> PromptBank:
    if settings.PROMPTS_CSV_PATH:
        return PromptBank.from_csv(settings.PROMPTS_CSV_PATH)
    return PromptBank()


# ── Singleton repository instances (in-memory stores) ──
_group_repo = GroupRepository()
_entry_repo = EntryRepository()
_history_repo = HistoryRepository()
_delivery_channel = _build_channel()

# ── Service instances (with injected dependencies) ──
_scheduler = SchedulerFacade(
    generator=ScheduleGenerator(tz=ZoneInfo(settings.TIMEZONE)),
    channel=_delivery_channel,
    prompt_bank=_build_prompt_bank(),
)
_group_service = GroupService(
    group_repo=_group_repo,
    entry_repo=_entry_repo,
    history_repo=_history_repo,
    rotator=RoleRotator(),
    scheduler=_scheduler,
    projector=ReadinessProjector(),
)


# ── FastAPI dependency functions ──
def get_group_service() -> GroupService:
    return _group_service


def get_delivery_channel() -> DeliveryChannel:
    return _delivery_channel


def get_group_repo() -> GroupRepository:
    return _group_repo


def get_entry_repo() -> EntryRepository:
    return _entry_repo


def get_history_repo() -> HistoryRepository:
    return _history_repo
