"""
Selection State

Single source of truth for what the viewer shows right now:
- expanded_id: the open whisper, None when the viewer is closed
- slide_direction: set only while an outward slide animation plays
- timer_progress: percentage (0-100) of the dwell time already elapsed

The state is deliberately dumb. Sequencing (when to begin or commit a
transition, when the countdown runs) belongs to the NavigationController.
"""

from dataclasses import dataclass
from enum import Enum


class SlideDirection(str, Enum):
    LEFT = "left"    # next and random
    RIGHT = "right"  # previous


@dataclass
class SelectionState:
    expanded_id: str | None = None
    slide_direction: SlideDirection | None = None
    timer_progress: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.expanded_id is not None

    @property
    def in_transition(self) -> bool:
        return self.slide_direction is not None

    def open(self, whisper_id: str) -> None:
        """
        Show a whisper without any transition.

        Accepted from any state, even for ids the current store doesn't
        contain; the surface renders such a selection as closed.
        """
        self.expanded_id = whisper_id
        self.timer_progress = 0.0

    def close(self) -> None:
        self.expanded_id = None
        self.slide_direction = None
        self.timer_progress = 0.0

    def begin_transition(self, direction) -> None:
        """
        Start the outward slide. Must be followed by commit_transition().

        Raises:
            ValueError: If direction is not a SlideDirection value
        """
        self.slide_direction = SlideDirection(direction)

    def commit_transition(self, whisper_id: str) -> None:
        """Swap in the new whisper once the slide animation has played."""
        self.expanded_id = whisper_id
        self.slide_direction = None
        self.timer_progress = 0.0
