# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Readiness projection. Pure computation over the injected clock.
Answers "is the next prompt open?" from the last activity and the cadence,
and renders the status line shown next to a group.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from promptcadence.models.domain import ActivityEvent, Cadence, ProjectionResult, Tone
from promptcadence.services import cadence as cadence_model

RECENT_CUTOFF = timedelta(hours=1)

# Checked in order; the first topic with a keyword in the prompt wins
TOPIC_SUMMARIES: list[tuple[tuple[str, ...], str]] = [
    (("breakfast", "lunch", "dinner", "snack", "food", "eat", "meal", "cook"), "shared a meal"),
    (("coffee", "tea", "drink"), "grabbed a drink"),
    (("workout", "gym", "run", "exercise", "walk", "yoga", "sport"), "got moving"),
    (("work", "study", "class", "desk", "meeting", "project"), "got some work done"),
    (("friend", "family", "people", "hang"), "spent time with their people"),
    (("outside", "view", "sky", "nature", "weather", "sunset"), "stepped outside"),
    (("pet", "dog", "cat"), "hung out with a pet"),
    (("outfit", "wear", "fit", "style"), "showed off their outfit"),
    (("music", "song", "listen", "read", "book", "watch"), "shared what they're into"),
    (("morning", "wake", "woke"), "started their morning"),
    (("night", "evening", "bed", "sleep"), "wound down for the night"),
]
FALLBACK_SUMMARY = "shared their day"


def summarize_prompt(prompt: str) -> str:
    """Friendly one-line description of what a prompt asked for."""
    text = prompt.lower()
    for keywords, summary in TOPIC_SUMMARIES:
        for keyword in keywords:
            if re.search(rf"\b{keyword}(s|es|d|ed|ing|ning)?\b", text):
                return summary
    return FALLBACK_SUMMARY


def elapsed_label(elapsed: timedelta) -> str:
    """Coarse "Nh ago" / "Nd ago"; empty under one hour."""
    if elapsed < RECENT_CUTOFF:
        return ""
    hours = int(elapsed.total_seconds() // 3600)
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_countdown(remaining: timedelta) -> str:
    """Countdown as "Xh Ym" or "Ym"; empty once nothing remains."""
    seconds = int(remaining.total_seconds())
    if seconds <= 0:
        return ""
    hours, minutes = seconds // 3600, seconds % 3600 // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def next_eligible_at(last_activity: ActivityEvent, cadence: Cadence) -> datetime:
    if cadence is Cadence.TESTING:
        return last_activity.timestamp + timedelta(minutes=1)
    return last_activity.timestamp + timedelta(hours=cadence_model.interval_hours(cadence))


class ReadinessProjector:
    """Derives a ProjectionResult on every call; holds no state besides the clock."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def project(
        self,
        last_activity: Optional[ActivityEvent],
        cadence: Cadence,
        is_self_active_responder: bool,
        responder_name: Optional[str] = None,
    ) -> ProjectionResult:
        if last_activity is None:
            if is_self_active_responder:
                return ProjectionResult(
                    status_message="You may start: your first prompt is ready.",
                    is_ready=True,
                    tone=Tone.READY,
                )
            return ProjectionResult(
                status_message=(
                    f"No activity yet. Waiting on {responder_name or 'the active responder'}."
                ),
                is_ready=False,
                tone=Tone.WAITING,
            )

        now = self._clock()
        eligible_at = next_eligible_at(last_activity, cadence)

        if now >= eligible_at:
            message = (
                "Your next prompt is ready."
                if is_self_active_responder
                else "Check for new updates."
            )
            return ProjectionResult(
                status_message=message,
                is_ready=True,
                tone=Tone.READY,
                next_eligible_at=eligible_at,
            )

        elapsed = now - last_activity.timestamp
        tone = Tone.RECENT_ACTIVITY if elapsed < RECENT_CUTOFF else Tone.WAITING
        message = f"{responder_name or 'They'} {summarize_prompt(last_activity.prompt)}"
        ago = elapsed_label(elapsed)
        if ago:
            message = f"{message} · {ago}"

        return ProjectionResult(
            status_message=message,
            is_ready=False,
            tone=tone,
            next_eligible_at=eligible_at,
            time_remaining=format_countdown(eligible_at - now),
        )
