"""Tests for AnchoredOverlay: lifecycle, placement and cleanup together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from perch.anchored import AnchoredOverlay, FixedAnchor, OverlayDisposedError
from perch.events import EVENT_POINTER_DOWN, EventSurface
from perch.geometry import PlacementResult, Rect, Side, Size
from perch.lifecycle.state import VisibilityState
from perch.lifecycle.timers import FrameScheduler
from perch.lifecycle.watcher import DISMISS_OUTSIDE_POINTER, DISMISS_SCROLL
from perch.overlay.config import Interaction, OverlayConfig, TriggerMode

if TYPE_CHECKING:
    from tests.conftest import RecordingSurface

OverlayFactory = Callable[..., AnchoredOverlay]


def show_now(overlay: AnchoredOverlay, scheduler: FrameScheduler) -> None:
    overlay.show(immediate=True)
    scheduler.advance(0)
    assert overlay.is_visible


class TestHoverTrigger:
    def test_shows_after_hover_delay(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay()
        assert overlay.delay_ms == 500
        assert overlay.pointer_enter()
        assert overlay.state is VisibilityState.PENDING_SHOW

        scheduler.advance(0.25)
        assert not overlay.is_visible
        assert surface.frames == []

        scheduler.advance(0.25)
        assert overlay.is_visible
        assert overlay.is_rendered
        assert overlay.placement == PlacementResult(x=420, y=40, side=Side.BOTTOM)
        assert surface.frame is not None
        assert surface.frame.box == Rect(x=420, y=40, width=200, height=80)

    def test_leave_before_delay_never_shows(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay()
        overlay.pointer_enter()
        scheduler.advance(0.25)
        overlay.pointer_leave()
        scheduler.advance(5)

        assert overlay.state is VisibilityState.IDLE
        assert surface.frames == []
        assert scheduler.pending_count == 0

    def test_leave_after_show_hides_and_detaches(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay()
        overlay.pointer_enter()
        scheduler.advance(0.5)
        assert events.receiver_count() == 2

        overlay.pointer_leave()
        assert overlay.state is VisibilityState.IDLE
        assert overlay.placement is None
        assert not surface.mounted
        assert not overlay.watcher.active
        assert events.receiver_count() == 0

    def test_hover_ignores_click_and_focus(self, make_overlay: OverlayFactory) -> None:
        overlay = make_overlay()
        assert not overlay.click()
        assert not overlay.focus()
        assert overlay.state is VisibilityState.IDLE

    def test_hover_does_not_watch_pointer_down(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
    ) -> None:
        overlay = make_overlay()
        show_now(overlay, scheduler)
        assert events.receiver_count(EVENT_POINTER_DOWN) == 0
        events.pointer_down(0, 599)
        assert overlay.is_visible

    def test_explicit_delay_overrides_default(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay(config=OverlayConfig(content="Body", delay_ms=0))
        overlay.pointer_enter()
        scheduler.advance(0)
        assert overlay.is_visible


class TestClickTrigger:
    def test_click_toggles(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay(trigger="click")
        assert overlay.trigger is TriggerMode.CLICK
        assert overlay.delay_ms == 0

        overlay.click()
        scheduler.advance(0)
        assert overlay.is_visible
        overlay.click()
        assert overlay.state is VisibilityState.IDLE

    def test_outside_pointer_down_hides_in_same_turn(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay(trigger=TriggerMode.CLICK)
        overlay.click()
        scheduler.advance(0)
        assert overlay.is_visible

        events.pointer_down(50, 500)

        assert overlay.state is VisibilityState.IDLE
        hidden = [
            t for t in overlay.machine.history if t.target is VisibilityState.HIDDEN
        ]
        assert hidden[-1].reason == DISMISS_OUTSIDE_POINTER
        assert not surface.mounted
        assert events.receiver_count() == 0

    @pytest.mark.parametrize(
        "point",
        [(510, 15), (520, 100), (420, 40)],
        ids=["trigger", "overlay", "overlay-corner"],
    )
    def test_pointer_down_inside_keeps_overlay(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        point: tuple[float, float],
    ) -> None:
        overlay = make_overlay(trigger=TriggerMode.CLICK)
        overlay.click()
        scheduler.advance(0)

        events.pointer_down(*point)
        assert overlay.is_visible


class TestFocusTrigger:
    def test_focus_and_blur(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay(trigger="focus")
        assert not overlay.pointer_enter()

        overlay.focus()
        scheduler.advance(0)
        assert overlay.is_visible
        overlay.blur()
        assert overlay.state is VisibilityState.IDLE

    def test_unknown_trigger_falls_back_to_hover(
        self, make_overlay: OverlayFactory
    ) -> None:
        overlay = make_overlay(trigger="longpress")
        assert overlay.trigger is TriggerMode.HOVER

    def test_unknown_interaction_ignored(self, make_overlay: OverlayFactory) -> None:
        overlay = make_overlay()
        assert not overlay.handle("double_click")
        assert overlay.handle(Interaction.POINTER_ENTER.value)


class TestEnvironment:
    def test_scroll_dismisses(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
    ) -> None:
        overlay = make_overlay()
        show_now(overlay, scheduler)

        events.scroll(source="results-panel")
        assert overlay.state is VisibilityState.IDLE
        assert overlay.machine.history[-1].reason == DISMISS_SCROLL

    def test_scroll_while_hidden_is_ignored(
        self, make_overlay: OverlayFactory, events: EventSurface
    ) -> None:
        overlay = make_overlay()
        events.scroll()
        assert overlay.machine.history == ()

    def test_resize_repositions_and_may_change_side(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
        anchor: FixedAnchor,
    ) -> None:
        overlay = make_overlay()
        show_now(overlay, scheduler)
        assert overlay.placement is not None
        assert overlay.placement.side is Side.BOTTOM

        anchor.move(Rect(x=500, y=500, width=40, height=20))
        events.resize(800, 600)

        assert overlay.is_visible
        assert overlay.placement == PlacementResult(x=420, y=410, side=Side.TOP)
        assert len(surface.frames) == 2

    def test_resize_uses_new_viewport(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay()
        show_now(overlay, scheduler)

        surface.viewport = Size(width=500, height=600)
        events.resize(500, 600)
        assert overlay.placement is not None
        assert overlay.placement.x == 290

    def test_unmeasured_trigger_is_visible_but_not_rendered(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
        anchor: FixedAnchor,
    ) -> None:
        anchor.move(Rect(x=500, y=10, width=0, height=0))
        overlay = make_overlay()
        show_now(overlay, scheduler)

        assert overlay.placement is not None
        assert not overlay.placement.ready
        assert not overlay.is_rendered
        assert surface.frames == []

        anchor.move(Rect(x=500, y=10, width=40, height=20))
        events.resize(800, 600)
        assert overlay.is_rendered

    def test_detached_anchor_is_not_rendered(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        surface: RecordingSurface,
        anchor: FixedAnchor,
    ) -> None:
        anchor.move(None)
        overlay = make_overlay(trigger="click")
        show_now(overlay, scheduler)
        assert not overlay.is_rendered
        assert overlay.measure() is None
        assert surface.frames == []

    def test_oversized_overlay_logs_overflow(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        surface: RecordingSurface,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        surface.overlay_size = Size(width=900, height=80)
        overlay = make_overlay(overlay_id="wide")
        with caplog.at_level(logging.WARNING, logger="perch.anchored"):
            show_now(overlay, scheduler)

        assert overlay.placement is not None
        assert overlay.placement.x == 10
        assert "wide: overlay" in caplog.text
        assert "overflows on x" in caplog.text


class TestDisabled:
    def test_disabled_ignores_show(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay(disabled=True)
        assert not overlay.pointer_enter()
        assert not overlay.show(immediate=True)
        scheduler.advance(1)
        assert overlay.state is VisibilityState.IDLE

    def test_disabling_while_visible_still_allows_hide(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay()
        show_now(overlay, scheduler)
        overlay.disabled = True
        assert overlay.pointer_leave()
        assert overlay.state is VisibilityState.IDLE


class TestUnmount:
    def test_unmount_while_visible_releases_everything(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay(trigger="click")
        show_now(overlay, scheduler)
        assert events.receiver_count() == 3

        overlay.unmount()
        assert not overlay.mounted
        assert events.receiver_count() == 0
        assert scheduler.pending_count == 0
        assert not surface.mounted
        assert overlay.placement is None

    def test_unmount_while_pending_cancels_timer(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        surface: RecordingSurface,
    ) -> None:
        overlay = make_overlay()
        overlay.pointer_enter()
        overlay.unmount()

        assert scheduler.pending_count == 0
        scheduler.advance(1)
        assert overlay.state is VisibilityState.IDLE
        assert surface.frames == []

    def test_unmount_is_idempotent(self, make_overlay: OverlayFactory) -> None:
        overlay = make_overlay()
        overlay.unmount()
        overlay.unmount()
        assert not overlay.mounted

    def test_use_after_unmount(self, make_overlay: OverlayFactory) -> None:
        overlay = make_overlay()
        overlay.unmount()
        assert not overlay.pointer_enter()
        with pytest.raises(OverlayDisposedError):
            overlay.show()
        with pytest.raises(OverlayDisposedError):
            overlay.hide()

    def test_context_manager_unmounts(
        self,
        anchor: FixedAnchor,
        surface: RecordingSurface,
        events: EventSurface,
        scheduler: FrameScheduler,
    ) -> None:
        with AnchoredOverlay(
            OverlayConfig(content="Body"),
            anchor,
            surface=surface,
            events=events,
            scheduler=scheduler,
        ) as overlay:
            show_now(overlay, scheduler)
            assert events.receiver_count() == 2
        assert not overlay.mounted
        assert events.receiver_count() == 0

    def test_many_cycles_leave_no_listeners(
        self,
        make_overlay: OverlayFactory,
        scheduler: FrameScheduler,
        events: EventSurface,
    ) -> None:
        overlay = make_overlay(trigger="click")
        for _ in range(25):
            overlay.click()
            scheduler.advance(0)
            events.scroll()
        assert overlay.state is VisibilityState.IDLE
        assert events.receiver_count() == 0
        assert scheduler.pending_count == 0


class TestOptions:
    def test_generated_overlay_id(self, make_overlay: OverlayFactory) -> None:
        first, second = make_overlay(), make_overlay()
        assert first.overlay_id.startswith("overlay-")
        assert first.overlay_id != second.overlay_id

    def test_negative_margin_floored(self, make_overlay: OverlayFactory) -> None:
        assert make_overlay(margin=-5).margin == 0

    def test_margin_used_for_placement(
        self, make_overlay: OverlayFactory, scheduler: FrameScheduler
    ) -> None:
        overlay = make_overlay(margin=20)
        show_now(overlay, scheduler)
        assert overlay.placement == PlacementResult(x=420, y=50, side=Side.BOTTOM)
