"""
Tests for preview/export rendering.

Tests cover:
- Preview and export sizes and the render scale
- Recording red-eye clicks in source coordinates
- Replaying retouches across filters, orientation and export
- Selection indicator excluded from exports
"""

import pytest
from PIL import Image

from OR_Libs.ImageEditingLib.image_models import (
    FilterState,
    OrientationState,
    RetouchOperation,
    TextLayer,
)
from OR_Libs.SessionLib.render_coordinator import (
    RenderState,
    export_size,
    preview_size,
    render_export,
    render_preview,
    render_scale,
    render_surface,
    replay_retouches,
    retouch_from_click,
    viewport_limits,
)


def _is_red(pixel):
    r, g, b = pixel[:3]
    return r > 150 and g < 80 and b < 80


class TestTargetSizes:
    """Tests for target size helpers."""

    def test_viewport_limits_subtract_padding(self):
        assert viewport_limits(864, 664, 64) == (800, 600)
        assert viewport_limits(30, 30, 64) == (0, 0)

    def test_preview_and_export_sizes(self, portrait_source):
        state = RenderState(source=portrait_source)

        assert preview_size(state, 300, 200) == (300, 200)
        assert export_size(state) == (1200, 800)

    def test_export_size_follows_rotation(self, portrait_source):
        state = RenderState(source=portrait_source, orientation=OrientationState(90))

        assert export_size(state) == (800, 1200)
        assert preview_size(state, 300, 300) == (200, 300)

    def test_render_scale(self):
        assert render_scale(1200, 300) == 4.0
        assert render_scale(1200, 0) == 1.0

    def test_no_image(self):
        state = RenderState()

        assert preview_size(state, 300, 200) == (0, 0)
        assert export_size(state) == (0, 0)
        assert render_surface(state, (10, 10)) is None
        assert render_export(state, 300) is None


class TestRetouchRecording:
    """Tests for converting clicks into retouch records."""

    def test_click_stored_in_source_coordinates(self):
        op = retouch_from_click(149.5, 99.5, 20, (300, 200), OrientationState(), (1200, 800))

        assert op.u == pytest.approx(0.5)
        assert op.v == pytest.approx(0.5)
        assert op.radius == pytest.approx(80.0)

    def test_click_on_rotated_surface(self):
        """Top-right of a clockwise-rotated preview is the source's top-left."""
        op = retouch_from_click(199, 0, 20, (200, 300), OrientationState(90), (1200, 800))

        assert op.u < 0.01
        assert op.v < 0.01
        assert op.radius == pytest.approx(80.0)

    def test_replay_without_retouches(self):
        surface = Image.new("RGBA", (10, 10), (200, 20, 20, 255))

        assert replay_retouches(surface, [], OrientationState(), (10, 10)) == 0
        assert surface.getpixel((5, 5)) == (200, 20, 20, 255)


class TestRetouchReplay:
    """Tests for retouches surviving re-renders."""

    def _retouched_state(self, source, **kwargs):
        op = retouch_from_click(150, 100, 20, (300, 200), OrientationState(), (1200, 800))
        return RenderState(source=source, retouches=[op], **kwargs)

    def test_preview_is_corrected(self, portrait_source):
        plain = render_preview(RenderState(source=portrait_source), 300, 200)
        retouched = render_preview(self._retouched_state(portrait_source), 300, 200)

        assert _is_red(plain.getpixel((150, 100)))
        assert not _is_red(retouched.getpixel((150, 100)))

    def test_correction_survives_filter_change(self, portrait_source):
        state = self._retouched_state(portrait_source, filters=FilterState(brightness=120))

        preview = render_preview(state, 300, 200)

        assert not _is_red(preview.getpixel((150, 100)))

    def test_correction_reaches_export(self, portrait_source):
        plain = render_export(RenderState(source=portrait_source), 300)
        retouched = render_export(self._retouched_state(portrait_source), 300)

        assert retouched.size == (1200, 800)
        assert _is_red(plain.getpixel((600, 400)))
        assert not _is_red(retouched.getpixel((600, 400)))

    def test_correction_follows_rotation(self, portrait_source):
        state = self._retouched_state(portrait_source, orientation=OrientationState(90))

        exported = render_export(state, 200)

        assert exported.size == (800, 1200)
        assert not _is_red(exported.getpixel((400, 600)))

    def test_skin_outside_brush_untouched(self, portrait_source):
        state = RenderState(
            source=portrait_source,
            retouches=[RetouchOperation(u=0.5, v=0.5, radius=80.0)],
        )

        exported = render_export(state, 300)

        assert exported.getpixel((50, 50)) == (220, 180, 150, 255)


class TestExportText:
    """Tests for text layers in exports."""

    def test_selection_indicator_not_exported(self, portrait_source):
        layers = [TextLayer(content="Caption")]
        selected = render_export(
            RenderState(source=portrait_source, layers=layers, selected_index=0), 300
        )
        unselected = render_export(
            RenderState(source=portrait_source, layers=layers, selected_index=None), 300
        )

        assert selected.tobytes() == unselected.tobytes()

    def test_selection_indicator_on_preview(self, portrait_source):
        layers = [TextLayer(content="Caption")]
        selected = render_preview(
            RenderState(source=portrait_source, layers=layers, selected_index=0), 300, 200
        )
        unselected = render_preview(
            RenderState(source=portrait_source, layers=layers, selected_index=None), 300, 200
        )

        assert selected.tobytes() != unselected.tobytes()

    def test_rendering_does_not_mutate_source(self, portrait_source):
        before = portrait_source.image.tobytes()
        state = RenderState(
            source=portrait_source,
            filters=FilterState(sepia=80),
            layers=[TextLayer(content="Caption")],
            retouches=[RetouchOperation(u=0.5, v=0.5, radius=80.0)],
        )

        render_export(state, 300)

        assert portrait_source.image.tobytes() == before
