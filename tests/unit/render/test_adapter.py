"""Tests for the render adapter and overlay styling."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from perch.geometry import PlacementResult, Rect, Side, Size
from perch.lifecycle.state import VisibilityState
from perch.overlay.config import OverlayConfig, OverlayKind
from perch.render.adapter import (
    STYLES,
    RenderAdapter,
    indicator_polygon,
    style_for,
)

if TYPE_CHECKING:
    from tests.conftest import RecordingSurface

BOX = Rect(x=100, y=100, width=200, height=80)
READY = PlacementResult(x=100, y=100, side=Side.BOTTOM)
OVERLAY = Size(width=200, height=80)


class TestStyles:
    def test_every_kind_has_a_style(self) -> None:
        assert set(STYLES) == set(OverlayKind)

    @pytest.mark.parametrize(
        ("kind", "icon"),
        [
            (OverlayKind.INFO, "i"),
            (OverlayKind.HELP, "?"),
            (OverlayKind.WARNING, "!"),
            (OverlayKind.EXPLANATION, "i"),
        ],
    )
    def test_icons(self, kind: OverlayKind, icon: str) -> None:
        assert style_for(kind).icon == icon


class TestIndicatorPolygon:
    def test_top_placement_points_down(self) -> None:
        assert indicator_polygon(Side.TOP, BOX, 6) == [
            (194, 180),
            (206, 180),
            (200, 186),
        ]

    def test_bottom_placement_points_up(self) -> None:
        assert indicator_polygon(Side.BOTTOM, BOX, 6) == [
            (194, 100),
            (206, 100),
            (200, 94),
        ]

    def test_left_placement_points_right(self) -> None:
        assert indicator_polygon(Side.LEFT, BOX, 6) == [
            (300, 134),
            (300, 146),
            (306, 140),
        ]

    def test_right_placement_points_left(self) -> None:
        assert indicator_polygon(Side.RIGHT, BOX, 6) == [
            (100, 134),
            (100, 146),
            (94, 140),
        ]


class TestRenderAdapter:
    @pytest.fixture
    def config(self) -> OverlayConfig:
        return OverlayConfig(title="Title", content="Body", kind=OverlayKind.HELP)

    def test_visible_and_ready_mounts_frame(
        self, surface: RecordingSurface, config: OverlayConfig
    ) -> None:
        adapter = RenderAdapter(surface)
        assert adapter.sync(VisibilityState.VISIBLE, READY, config, OVERLAY)

        frame = surface.frame
        assert frame is not None
        assert frame.box == BOX
        assert frame.side is Side.BOTTOM
        assert frame.style == style_for(OverlayKind.HELP)
        assert frame.indicator == indicator_polygon(Side.BOTTOM, BOX, 6)

    @pytest.mark.parametrize(
        "state",
        [VisibilityState.IDLE, VisibilityState.PENDING_SHOW, VisibilityState.HIDDEN],
    )
    def test_not_visible_unmounts(
        self,
        surface: RecordingSurface,
        config: OverlayConfig,
        state: VisibilityState,
    ) -> None:
        adapter = RenderAdapter(surface)
        adapter.sync(VisibilityState.VISIBLE, READY, config, OVERLAY)
        assert not adapter.sync(state, READY, config, OVERLAY)
        assert not surface.mounted

    def test_not_ready_placement_never_mounts(
        self, surface: RecordingSurface, config: OverlayConfig
    ) -> None:
        adapter = RenderAdapter(surface)
        assert not adapter.sync(
            VisibilityState.VISIBLE, PlacementResult.not_ready(), config, OVERLAY
        )
        assert surface.frames == []

    def test_missing_size_never_mounts(
        self, surface: RecordingSurface, config: OverlayConfig
    ) -> None:
        adapter = RenderAdapter(surface)
        assert not adapter.sync(VisibilityState.VISIBLE, READY, config, None)
        assert surface.frames == []

    def test_measure_delegates_to_surface(
        self, surface: RecordingSurface, config: OverlayConfig
    ) -> None:
        assert RenderAdapter(surface).measure(config) == surface.overlay_size

    def test_clear(self, surface: RecordingSurface, config: OverlayConfig) -> None:
        adapter = RenderAdapter(surface)
        adapter.sync(VisibilityState.VISIBLE, READY, config, OVERLAY)
        adapter.clear()
        assert not surface.mounted
