"""
Presentation Surface - the Whisper Viewer

WhisperViewer is the one viewer shared by the landing page and the profile
feed. It renders the expanded whisper with its overlay and controls, and
translates user gestures into NavigationController calls:

- clicking a card opens that whisper (no slide animation)
- Escape, the close button or a click on the backdrop closes it
- ArrowLeft / the previous button goes back, ArrowRight / Space / the next
  button goes forward
- clicks on the card itself never reach the backdrop

While a whisper is open the viewer holds two resources on its Document: a
keydown listener and the body scroll lock. Both are acquired together in an
ExitStack and released together on every exit path (close, unmount, or the
open whisper disappearing from a refreshed store).

An open id that doesn't resolve in the current store is rendered as closed:
render() returns an empty string and no navigation happens.
"""

import logging
import math
import random
from contextlib import ExitStack, contextmanager
from typing import Callable, Iterable

from whispers.config import settings
from whispers.schemas import Whisper
from whispers.templating import templates
from whispers.viewer.navigation import NavigationController, NavigateDirection
from whispers.viewer.selection import SelectionState
from whispers.viewer.store import WhisperStore
from whispers.viewer.timer import Scheduler, default_scheduler

logger = logging.getLogger(__name__)


# Countdown ring geometry (SVG user units)
RING_RADIUS = 15
RING_CIRCUMFERENCE = 2 * math.pi * RING_RADIUS

# Class put on <body> while the viewer is open
EXPANDED_BODY_CLASS = "whisper-expanded"

NAVIGATION_KEYS = {
    "ArrowLeft": NavigateDirection.PREV,
    "ArrowRight": NavigateDirection.NEXT,
    " ": NavigateDirection.NEXT,
}


def ring_offset(progress: float) -> float:
    """
    Stroke offset of the countdown ring for a progress percentage.

    0 shows the full circle, 100 an empty arc.
    """
    return RING_CIRCUMFERENCE * (1 - progress / 100)


def render_viewer(
    whisper: Whisper | None,
    slide_direction=None,
    progress: float = 0.0,
    site_name: str | None = None,
) -> str:
    """
    Render the expanded viewer modal.

    Also used by the pages to render a whisper already open (?whisper=<id>).

    Returns:
        The modal HTML, or an empty string when there is nothing to show
    """
    if whisper is None:
        return ""

    site_name = site_name or settings.SITE_TITLE
    return templates.get_template("partials/whisper_modal.html").render(
        whisper=whisper,
        author_name=whisper.author_name or site_name,
        slide_class=f"slide-{slide_direction.value}" if slide_direction else "",
        ring_circumference=RING_CIRCUMFERENCE,
        ring_offset=ring_offset(progress),
    )


class Document:
    """
    The page-level surface the viewer attaches to.

    Keeps the keydown listeners and body state a browser document would;
    the embedding page forwards key presses through dispatch_key().
    """

    def __init__(self):
        self._key_listeners = []
        self.body_classes = set()
        self.scroll_locked = False

    @property
    def listener_count(self) -> int:
        return len(self._key_listeners)

    @contextmanager
    def key_listener(self, handler: Callable[[str], bool]):
        """Subscribe to key presses for the duration of the block."""
        self._key_listeners.append(handler)
        try:
            yield handler
        finally:
            self._key_listeners.remove(handler)

    @contextmanager
    def body_lock(self, css_class: str = EXPANDED_BODY_CLASS):
        """Suspend page scrolling for the duration of the block."""
        self.body_classes.add(css_class)
        self.scroll_locked = True
        try:
            yield
        finally:
            self.body_classes.discard(css_class)
            self.scroll_locked = False

    def dispatch_key(self, key: str) -> bool:
        """
        Deliver a key press to the current listeners.

        Returns:
            True if a listener consumed the key (preventDefault)
        """
        consumed = False
        # Copy: a listener may unsubscribe itself (Escape closes the viewer)
        for handler in list(self._key_listeners):
            consumed = bool(handler(key)) or consumed
        return consumed


class WhisperViewer:
    """
    Store-agnostic whisper viewer.

    Args:
        whispers: Initial whispers in display order
        document: Document to attach listeners to (a new one by default)
        scheduler: Event loop used for ticks and transitions
                   (the running asyncio loop by default)
        dwell_ms: Auto-rotation dwell time (settings.dwell_ms by default)
        rng: Random source for auto-rotation
        site_name: Author label for whispers without an author
        on_render: Called with fresh HTML after every state change
    """

    def __init__(
        self,
        whispers: Iterable[Whisper] = (),
        *,
        document: Document | None = None,
        scheduler: Scheduler | None = None,
        dwell_ms: int | None = None,
        rng: random.Random | None = None,
        site_name: str | None = None,
        on_render: Callable[[str], None] | None = None,
    ):
        self.document = document or Document()
        self.site_name = site_name or settings.SITE_TITLE
        self._on_render = on_render
        self._scope = None
        self.controller = NavigationController(
            WhisperStore(whispers),
            scheduler or default_scheduler(),
            settings.dwell_ms if dwell_ms is None else dwell_ms,
            rng=rng,
            on_change=self._on_state_change,
        )

    @property
    def selection(self) -> SelectionState:
        return self.controller.selection

    @property
    def store(self) -> WhisperStore:
        return self.controller.store

    @property
    def expanded_whisper(self) -> Whisper | None:
        return self.controller.current

    @property
    def is_open(self) -> bool:
        return self.expanded_whisper is not None

    def open(self, whisper_id: str) -> None:
        """Entry point for clicks on whisper cards."""
        if self.controller.disposed:
            return
        if whisper_id not in self.store:
            logger.info(f"Ignoring open of unknown whisper {whisper_id}")
            self.close()
            return
        self.controller.open(whisper_id)

    def close(self) -> None:
        self.controller.close()

    def navigate(self, direction) -> None:
        self.controller.navigate(direction)

    def replace_store(self, whispers: Iterable[Whisper]) -> None:
        """Refresh entry point: swap in a new whisper snapshot."""
        self.controller.replace_store(WhisperStore(whispers))

    def unmount(self) -> None:
        """
        Tear the viewer down for good.

        Clears the selection, cancels the tick interval and any pending
        commit, and releases the key listener and scroll lock. Calls that
        arrive later, such as a refresh still in flight, change nothing.
        """
        self.controller.dispose()
        self._release_scope()

    def handle_key(self, key: str) -> bool:
        """
        React to a key press while open.

        Returns:
            True if the key was consumed
        """
        if not self.is_open:
            return False
        if key == "Escape":
            self.close()
            return True
        direction = NAVIGATION_KEYS.get(key)
        if direction is None:
            return False
        self.navigate(direction)
        return True

    def click(self, target: str) -> None:
        """
        React to a click on one of the viewer's elements.

        Targets: "backdrop", "close", "prev", "next" and "card". Clicks on
        the card stop there and never close the viewer.
        """
        if target == "card":
            return
        if target in ("backdrop", "close"):
            self.close()
        elif target == "prev":
            self.navigate(NavigateDirection.PREV)
        elif target == "next":
            self.navigate(NavigateDirection.NEXT)
        else:
            raise ValueError(f"Unknown click target: {target}")

    def render(self) -> str:
        return render_viewer(
            self.expanded_whisper,
            slide_direction=self.selection.slide_direction,
            progress=self.selection.timer_progress,
            site_name=self.site_name,
        )

    def _on_state_change(self, selection: SelectionState) -> None:
        if self.controller.disposed:
            return
        if self.is_open:
            self._acquire_scope()
        else:
            if selection.expanded_id is not None:
                # Dangling id: degrade to a closed viewer
                self.controller.close()
                return
            self._release_scope()

        if self._on_render:
            self._on_render(self.render())

    def _acquire_scope(self) -> None:
        if self._scope is not None:
            return
        scope = ExitStack()
        scope.enter_context(self.document.key_listener(self.handle_key))
        scope.enter_context(self.document.body_lock())
        self._scope = scope

    def _release_scope(self) -> None:
        if self._scope is None:
            return
        scope, self._scope = self._scope, None
        scope.close()
