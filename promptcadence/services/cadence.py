# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Cadence model. Pure lookups over the cadence table.
Maps each cadence to its interval, daily target and label.
"""

from promptcadence.models.domain import Cadence

ACTIVE_DAY_START = 7
ACTIVE_DAY_END = 21
ACTIVE_DAY_HOURS = ACTIVE_DAY_END - ACTIVE_DAY_START

TESTING_EVENT_COUNT = 10

# cadence -> (interval minutes, label)
_CADENCE_TABLE: dict[Cadence, tuple[int, str]] = {
    Cadence.TESTING: (1, "Testing (every minute)"),
    Cadence.HOURLY: (60, "Every hour"),
    Cadence.EVERY_THREE_HOURS: (180, "Every 3 hours"),
    Cadence.EVERY_SIX_HOURS: (360, "Every 6 hours"),
}


def interval_minutes(cadence: Cadence) -> int:
    return _CADENCE_TABLE[cadence][0]


def interval_hours(cadence: Cadence) -> int:
    """Whole-hour interval. Testing has none and reports 0."""
    return interval_minutes(cadence) // 60


def target_event_count(cadence: Cadence) -> int:
    if cadence is Cadence.TESTING:
        return TESTING_EVENT_COUNT
    # Integer division: a trailing partial interval is dropped
    return ACTIVE_DAY_HOURS // interval_hours(cadence)


def display_name(cadence: Cadence) -> str:
    return _CADENCE_TABLE[cadence][1]


def parse_cadence(value: str | Cadence, allow_testing: bool = False) -> Cadence:
    """
    Boundary check for configured cadences.
    Raises ValueError for unknown values, and for the testing cadence
    unless the debug flag allows it.
    """
    try:
        cadence = Cadence(value)
    except ValueError:
        allowed = ", ".join(c.value for c in available_cadences(allow_testing))
        raise ValueError(f"Unknown cadence '{value}'. Expected one of: {allowed}") from None
    if cadence is Cadence.TESTING and not allow_testing:
        raise ValueError("The testing cadence is only available in debug mode")
    return cadence


def available_cadences(allow_testing: bool = False) -> list[Cadence]:
    return [c for c in Cadence if allow_testing or c is not Cadence.TESTING]
