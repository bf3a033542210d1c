# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Prompt bank.
Per time-of-day prompt lists with no-repeat random selection.
"""

import csv
import random
from pathlib import Path
from typing import Optional

from promptcadence.core.logging import get_logger
from promptcadence.models.domain import TimeWindow

logger = get_logger(__name__)

DEFAULT_PROMPTS: dict[TimeWindow, list[str]] = {
    TimeWindow.MORNING: [
        "What does your breakfast look like today?",
        "Show us the first thing you see this morning.",
        "What's your morning coffee or tea situation?",
        "What are you wearing today?",
        "What's on your desk right now?",
    ],
    TimeWindow.AFTERNOON: [
        "What did you have for lunch?",
        "Where are you working from this afternoon?",
        "Show us the view outside right now.",
        "What's keeping you busy today?",
        "Snap your afternoon snack.",
    ],
    TimeWindow.NIGHT: [
        "What's for dinner tonight?",
        "How are you winding down this evening?",
        "What are you watching or reading tonight?",
        "Show us your night sky.",
        "Who did you spend time with today?",
    ],
}


class PromptBank:
    """Random prompt per window, without repeats until the window runs dry."""

    def __init__(
        self,
        prompts: Optional[dict[TimeWindow, list[str]]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        source = prompts if prompts is not None else DEFAULT_PROMPTS
        self._prompts: dict[TimeWindow, list[str]] = {
            window: list(source.get(window, [])) for window in TimeWindow
        }
        self._used: set[str] = set()
        self._rng = rng or random.Random()

    @classmethod
    def from_csv(cls, path: str | Path, rng: Optional[random.Random] = None) -> "PromptBank":
        """
        Load prompts from a CSV with morning, afternoon and night columns.
        The header row is skipped and empty cells are ignored.
        """
        prompts: dict[TimeWindow, list[str]] = {w: [] for w in TimeWindow}
        columns = (TimeWindow.MORNING, TimeWindow.AFTERNOON, TimeWindow.NIGHT)
        with open(path, newline="", encoding="utf-8") as fh:
            reader = csv.reader(fh)
            next(reader, None)
            for row in reader:
                for window, cell in zip(columns, row):
                    cell = cell.strip()
                    if cell:
                        prompts[window].append(cell)
        logger.info(
            "Loaded prompts from %s: morning=%d, afternoon=%d, night=%d",
            path,
            len(prompts[TimeWindow.MORNING]),
            len(prompts[TimeWindow.AFTERNOON]),
            len(prompts[TimeWindow.NIGHT]),
        )
        return cls(prompts, rng=rng)

    def random_prompt(self, window: TimeWindow) -> Optional[str]:
        prompts = self._prompts[window]
        if not prompts:
            return None

        available = [p for p in prompts if p not in self._used]
        if not available:
            # Window exhausted: start over
            self._used.difference_update(prompts)
            return self._rng.choice(prompts)

        prompt = self._rng.choice(available)
        self._used.add(prompt)
        return prompt

    def remaining(self, window: TimeWindow) -> int:
        return sum(1 for p in self._prompts[window] if p not in self._used)

    def reset(self) -> None:
        self._used.clear()
