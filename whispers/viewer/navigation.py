"""
Navigation Controller

Turns "next", "previous" and "random" requests into a target whisper and
sequences the selection change:

1. begin_transition() right away ("right" for previous, "left" otherwise)
2. commit_transition(target) TRANSITION_MS later, once the outward slide
   animation has played

The controller also keeps the auto-rotation timer in step with the
selection: it runs only while a whisper is open and the store holds more than
one whisper, and its countdown restarts whenever the visible whisper changes.

Overlapping navigations resolve as "last call wins": a new navigate() cancels
the commit still pending from an earlier one.
"""

import logging
import random
from enum import Enum
from typing import Callable

from whispers.viewer.selection import SelectionState, SlideDirection
from whispers.viewer.store import WhisperStore
from whispers.viewer.timer import AutoRotationTimer, Scheduler

logger = logging.getLogger(__name__)


# Length of the outward slide animation before the content swaps
TRANSITION_MS = 400


class NavigateDirection(str, Enum):
    NEXT = "next"
    PREV = "prev"
    RANDOM = "random"


class NavigationController:
    """
    Owns the store snapshot, the selection state and the rotation timer.

    Args:
        store: Initial whisper snapshot
        scheduler: Event loop (or compatible) used for every delayed callback
        dwell_ms: Auto-rotation dwell time in milliseconds
        rng: Random source for random navigation
        on_change: Called with the selection after every state change,
                   including every timer tick
    """

    def __init__(
        self,
        store: WhisperStore,
        scheduler: Scheduler,
        dwell_ms: int,
        rng: random.Random | None = None,
        on_change: Callable[[SelectionState], None] | None = None,
    ):
        self.store = store
        self.selection = SelectionState()
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._on_change = on_change
        self._pending_commit = None
        self.disposed = False
        self.timer = AutoRotationTimer(
            scheduler,
            dwell_ms,
            on_tick=self._on_timer_tick,
            on_expire=lambda: self.navigate(NavigateDirection.RANDOM),
        )

    @property
    def current(self):
        """The open whisper, or None when closed or the id no longer resolves."""
        if self.selection.expanded_id is None:
            return None
        return self.store.find_by_id(self.selection.expanded_id)

    @property
    def has_pending_transition(self) -> bool:
        return self._pending_commit is not None

    def open(self, whisper_id: str) -> None:
        """Open a whisper directly, without a slide transition."""
        if self.disposed:
            return
        self._cancel_pending_commit()
        self.selection.slide_direction = None
        self.selection.open(whisper_id)
        self.timer.reset()
        self._sync_timer()
        self._notify()

    def close(self) -> None:
        self._cancel_pending_commit()
        self.timer.stop()
        self.selection.close()
        self._notify()

    def navigate(self, direction) -> None:
        """
        Move to the next, previous or a random other whisper.

        Silently ignored when nothing is open, when the open id no longer
        resolves, or when the store holds one whisper or fewer.

        Raises:
            ValueError: If direction is not a NavigateDirection value
        """
        direction = NavigateDirection(direction)
        if self.disposed:
            return
        expanded_id = self.selection.expanded_id
        if expanded_id is None or self.store.size() <= 1:
            return

        current_index = self.store.index_of(expanded_id)
        if current_index is None:
            return

        target = self._resolve_target(direction, current_index)
        if target is None:
            return

        # Last call wins
        self._cancel_pending_commit()

        self.selection.begin_transition(
            SlideDirection.RIGHT if direction is NavigateDirection.PREV else SlideDirection.LEFT
        )
        logger.debug(f"Navigating {direction.value} from {expanded_id} to {target.id}")
        self._pending_commit = self._scheduler.call_later(
            TRANSITION_MS / 1000, self._commit, target.id
        )
        self._notify()

    def replace_store(self, store: WhisperStore) -> None:
        """
        Swap in a new snapshot, e.g. after a refresh.

        An open whisper missing from the new snapshot closes the viewer.
        """
        if self.disposed:
            return
        self.store = store
        expanded_id = self.selection.expanded_id
        if expanded_id is not None and expanded_id not in store:
            logger.info(f"Whisper {expanded_id} is gone after refresh, closing viewer")
            self.close()
            return
        self._sync_timer()
        self._notify()

    def dispose(self) -> None:
        """
        Cancel everything scheduled and clear the selection for good.

        Used when the surface unmounts. Later open, navigate and
        replace_store calls are ignored, so nothing can restart the timer.
        """
        self.close()
        self.disposed = True

    def _resolve_target(self, direction: NavigateDirection, current_index: int):
        size = self.store.size()
        if direction is NavigateDirection.NEXT:
            return self.store[(current_index + 1) % size]
        if direction is NavigateDirection.PREV:
            return self.store[(current_index - 1 + size) % size]

        pool = [w for i, w in enumerate(self.store) if i != current_index]
        if not pool:
            return None
        return self._rng.choice(pool)

    def _commit(self, whisper_id: str) -> None:
        self._pending_commit = None
        if whisper_id not in self.store:
            logger.info(f"Whisper {whisper_id} is gone before the transition ended, closing viewer")
            self.close()
            return
        self.selection.commit_transition(whisper_id)
        self.timer.reset()
        self._sync_timer()
        self._notify()

    def _sync_timer(self) -> None:
        if self.current is not None and self.store.size() > 1:
            self.timer.start()
        else:
            self.timer.stop()
            self.selection.timer_progress = 0.0

    def _cancel_pending_commit(self) -> None:
        if self._pending_commit is not None:
            self._pending_commit.cancel()
            self._pending_commit = None

    def _on_timer_tick(self, progress: float) -> None:
        self.selection.timer_progress = progress
        self._notify()

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self.selection)
