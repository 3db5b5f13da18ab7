import random
from unittest.mock import patch

import pytest

from whispers.config import settings
from whispers.viewer import (
    Document,
    SlideDirection,
    TRANSITION_MS,
    WhisperViewer,
    ring_offset,
)
from whispers.viewer.surface import RING_CIRCUMFERENCE


@pytest.fixture()
def document():
    return Document()


@pytest.fixture()
def viewer(scheduler, whispers, document):
    return WhisperViewer(
        whispers,
        document=document,
        scheduler=scheduler,
        dwell_ms=5000,
        rng=random.Random(7),
        site_name="Night Notes",
    )


class TestOpenClose:
    def test_closed_viewer_renders_nothing(self, viewer, document):
        assert viewer.render() == ""
        assert document.listener_count == 0
        assert not document.scroll_locked

    def test_open_acquires_listener_and_scroll_lock(self, viewer, document):
        viewer.open("B")
        assert viewer.is_open
        assert viewer.expanded_whisper.id == "B"
        assert document.listener_count == 1
        assert document.scroll_locked
        assert "whisper-expanded" in document.body_classes

    def test_open_has_no_transition(self, viewer):
        viewer.open("B")
        assert viewer.selection.slide_direction is None

    def test_navigation_keeps_a_single_listener(self, viewer, document, scheduler):
        viewer.open("A")
        document.dispatch_key("ArrowRight")
        scheduler.advance(TRANSITION_MS)
        assert viewer.expanded_whisper.id == "B"
        assert document.listener_count == 1

    @pytest.mark.parametrize("close", [
        lambda v, d: d.dispatch_key("Escape"),
        lambda v, d: v.click("backdrop"),
        lambda v, d: v.click("close"),
        lambda v, d: v.unmount(),
    ])
    def test_every_exit_path_releases_resources(self, viewer, document, scheduler, close):
        viewer.open("A")
        close(viewer, document)
        assert document.listener_count == 0
        assert not document.scroll_locked
        assert document.body_classes == set()

        progress = viewer.selection.timer_progress
        scheduler.advance(60000)
        assert viewer.selection.timer_progress == progress
        assert scheduler.pending == []

    def test_nothing_restarts_after_unmount(self, viewer, document, scheduler, whispers):
        renders = []
        viewer._on_render = renders.append
        viewer.open("A")
        scheduler.advance(500)
        viewer.unmount()
        assert viewer.selection.expanded_id is None
        assert viewer.selection.timer_progress == 0
        assert renders[-1] == ""
        renders.clear()

        # A refresh that was still in flight lands after teardown
        viewer.replace_store(whispers)
        viewer.open("B")
        viewer.navigate("next")
        viewer.click("next")
        scheduler.advance(1000)

        assert not viewer.controller.timer.is_running
        assert not viewer.controller.has_pending_transition
        assert scheduler.pending == []
        assert document.listener_count == 0
        assert not document.scroll_locked
        assert not viewer.is_open
        assert viewer.selection.timer_progress == 0
        assert renders == []

    def test_unmount_mid_transition_cancels_commit(self, viewer, document, scheduler):
        viewer.open("A")
        viewer.navigate("next")
        viewer.unmount()
        scheduler.advance(TRANSITION_MS * 2)
        assert viewer.selection.expanded_id is None
        assert viewer.selection.slide_direction is None
        assert scheduler.pending == []

    def test_explicit_zero_dwell_is_rejected(self, scheduler, whispers):
        with pytest.raises(ValueError):
            WhisperViewer(whispers, scheduler=scheduler, dwell_ms=0)

    def test_default_dwell_comes_from_settings(self, scheduler, whispers):
        with patch.object(settings, "WHISPER_DWELL_MS", 1200):
            viewer = WhisperViewer(whispers, scheduler=scheduler)
        assert viewer.controller.timer.dwell_ms == 1200

    def test_card_click_does_not_close(self, viewer):
        viewer.open("A")
        viewer.click("card")
        assert viewer.is_open

    def test_unknown_click_target(self, viewer):
        with pytest.raises(ValueError):
            viewer.click("footer")

    def test_open_unknown_id_stays_closed(self, viewer, document):
        viewer.open("nope")
        assert not viewer.is_open
        assert viewer.selection.expanded_id is None
        assert viewer.render() == ""
        assert document.listener_count == 0


class TestKeys:
    def test_arrow_left_goes_back(self, viewer, document, scheduler):
        viewer.open("A")
        assert document.dispatch_key("ArrowLeft") is True
        assert viewer.selection.slide_direction is SlideDirection.RIGHT
        scheduler.advance(TRANSITION_MS)
        assert viewer.expanded_whisper.id == "C"

    @pytest.mark.parametrize("key", ["ArrowRight", " "])
    def test_forward_keys(self, viewer, document, scheduler, key):
        viewer.open("B")
        assert document.dispatch_key(key) is True
        scheduler.advance(TRANSITION_MS)
        assert viewer.expanded_whisper.id == "C"

    def test_other_keys_are_not_consumed(self, viewer, document):
        viewer.open("B")
        assert document.dispatch_key("a") is False
        assert viewer.selection.slide_direction is None

    def test_keys_ignored_while_closed(self, viewer, document):
        assert document.dispatch_key("ArrowRight") is False
        assert viewer.handle_key("Escape") is False


class TestDanglingSelection:
    def test_replaced_store_without_selection_closes(self, viewer, document, whisper_factory):
        viewer.open("A")
        viewer.replace_store([whisper_factory("X"), whisper_factory("Y")])
        assert not viewer.is_open
        assert viewer.render() == ""
        assert document.listener_count == 0
        assert not document.scroll_locked

    def test_replaced_store_keeping_selection_stays_open(self, viewer, whispers, whisper_factory):
        viewer.open("A")
        viewer.replace_store([whisper_factory("Z")] + whispers)
        assert viewer.expanded_whisper.id == "A"


class TestRender:
    def test_ring_offset(self):
        assert ring_offset(0) == pytest.approx(RING_CIRCUMFERENCE)
        assert ring_offset(50) == pytest.approx(RING_CIRCUMFERENCE / 2)
        assert ring_offset(100) == pytest.approx(0)

    def test_render_contains_whisper_and_author(self, viewer):
        viewer.open("B")
        html = viewer.render()
        assert "Whisper B" in html
        assert "Night Notes" in html
        assert 'data-whisper-id="B"' in html

    def test_render_slide_class_during_transition(self, viewer):
        viewer.open("B")
        viewer.click("next")
        assert "slide-left" in viewer.render()

    def test_ring_updates_every_tick(self, scheduler, whispers, document):
        renders = []
        viewer = WhisperViewer(
            whispers, document=document, scheduler=scheduler, dwell_ms=5000, on_render=renders.append,
        )
        viewer.open("A")
        scheduler.advance(100)
        assert len(renders) == 3
        assert f'stroke-dashoffset="{ring_offset(2.0):.4f}"' in renders[-1]

    def test_content_is_escaped(self, scheduler, document, whisper_factory):
        viewer = WhisperViewer(
            [whisper_factory("x", content="<script>alert(1)</script>")],
            document=document, scheduler=scheduler, dwell_ms=5000,
        )
        viewer.open("x")
        assert "<script>" not in viewer.render()
