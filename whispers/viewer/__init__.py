"""
Whisper Viewer Package

The expanded-whisper modal shared by every page listing whispers:

- store.py: WhisperStore, the immutable snapshot being browsed
- selection.py: SelectionState, what is shown right now
- timer.py: AutoRotationTimer, the dwell countdown
- navigation.py: NavigationController, next/prev/random sequencing
- surface.py: WhisperViewer, rendering and user input
"""

from whispers.viewer.navigation import NavigateDirection, NavigationController, TRANSITION_MS
from whispers.viewer.selection import SelectionState, SlideDirection
from whispers.viewer.store import WhisperStore
from whispers.viewer.surface import Document, WhisperViewer, render_viewer, ring_offset
from whispers.viewer.timer import AutoRotationTimer, TICK_MS, TimerState

__all__ = [
    "AutoRotationTimer",
    "Document",
    "NavigateDirection",
    "NavigationController",
    "SelectionState",
    "SlideDirection",
    "TICK_MS",
    "TRANSITION_MS",
    "TimerState",
    "WhisperStore",
    "WhisperViewer",
    "render_viewer",
    "ring_offset",
]
