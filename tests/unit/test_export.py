"""Unit tests for scene export."""

import json
import os
import tempfile

from PIL import Image

from plexscene.export import (
    SCENE_BACKGROUND,
    SCENE_SOURCE,
    SceneExporter,
    _rgba,
    scene_bounds,
)
from plexscene.primitives import Primitive, PrimitiveType, TextStyle, make_text


def rectangle(x, y, width, height, **kwargs):
    return Primitive(
        id=f"r-{x}-{y}",
        type=PrimitiveType.RECTANGLE,
        x=x,
        y=y,
        width=width,
        height=height,
        **kwargs,
    )


class TestSceneBounds:
    """Tests for scene_bounds."""

    def test_empty(self):
        """Test empty."""
        assert scene_bounds([]) == (0.0, 0.0, 0.0, 0.0)

    def test_shapes(self):
        """Test shapes."""
        elements = [rectangle(10, 20, 30, 40), rectangle(-5, 0, 10, 10)]
        assert scene_bounds(elements) == (-5, 0, 40, 60)

    def test_arrow_uses_points(self):
        """Test arrow uses points."""
        arrow = Primitive(
            id="a",
            type=PrimitiveType.ARROW,
            x=100,
            y=100,
            width=50,
            height=50,
            points=[(0, 0), (-50, -50)],
        )
        assert scene_bounds([arrow]) == (50, 50, 100, 100)


class TestRgba:
    """Tests for color parsing."""

    def test_transparent(self):
        """Test transparent."""
        assert _rgba("transparent") is None
        assert _rgba(None) is None

    def test_opacity(self):
        """Test opacity."""
        assert _rgba("#ff0000", 50) == (255, 0, 0, 127)

    def test_alpha_suffix(self):
        """Test alpha suffix."""
        assert _rgba("#00ff0080") == (0, 255, 0, 128)


class TestToScene:
    """Tests for the Excalidraw scene document."""

    def test_document(self):
        """Test document."""
        scene = SceneExporter().to_scene([rectangle(0, 0, 10, 10)])

        assert scene["type"] == "excalidraw"
        assert scene["version"] == 2
        assert scene["source"] == SCENE_SOURCE
        assert scene["appState"]["viewBackgroundColor"] == SCENE_BACKGROUND
        assert scene["files"] == {}
        assert scene["elements"][0]["id"] == "r-0-0"

    def test_empty(self):
        """Test empty."""
        assert SceneExporter().to_scene([])["elements"] == []


class TestSaveJson:
    """Tests for writing scene files."""

    def test_round_trip(self):
        """Test round trip."""
        elements = [
            rectangle(0, 0, 10, 10),
            make_text("t", "Label", 0, 20, 50, 15, TextStyle()),
        ]

        with tempfile.NamedTemporaryFile(suffix=".excalidraw", delete=False) as f:
            output_path = f.name

        try:
            SceneExporter().save_json(elements, output_path)
            with open(output_path, encoding="utf-8") as f:
                data = json.load(f)
            assert [e["id"] for e in data["elements"]] == ["r-0-0", "t"]
            assert data["elements"][1]["text"] == "Label"
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)


class TestSavePng:
    """Tests for PNG previews."""

    def test_every_primitive_type(self):
        """Rectangles, ellipses, diamonds, text and arrows all render."""
        elements = [
            rectangle(0, 0, 200, 100, background_color="#10b98120", roundness=3),
            rectangle(10, 10, 50, 20, stroke_color="#dc2626"),
            Primitive(
                id="e",
                type=PrimitiveType.ELLIPSE,
                x=20,
                y=20,
                width=40,
                height=40,
                background_color="#10b981",
            ),
            Primitive(
                id="d", type=PrimitiveType.DIAMOND, x=100, y=20, width=60, height=40
            ),
            make_text("t", "Hello\nWorld", 20, 70, 100, 30, TextStyle()),
            make_text(
                "c", "Centered", 20, 70, 100, 15, TextStyle(text_align="center")
            ),
            Primitive(
                id="a",
                type=PrimitiveType.ARROW,
                x=0,
                y=0,
                width=100,
                height=50,
                points=[(0, 0), (100, 50)],
                end_arrowhead="arrow",
            ),
        ]

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            size = SceneExporter().save_png(elements, output_path, padding=10)
            assert size == (220, 120)
            with Image.open(output_path) as img:
                assert img.size == size
                assert img.mode == "RGB"
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_scale(self):
        """Test scale."""
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            size = SceneExporter().save_png(
                [rectangle(0, 0, 200, 100)], output_path, scale=2, padding=0
            )
            assert size == (400, 200)
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_empty_scene_has_minimum_size(self):
        """Test empty scene has minimum size."""
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            assert SceneExporter().save_png([], output_path) == (100, 100)
            assert os.path.getsize(output_path) > 0
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_missing_font_falls_back(self):
        """An unknown default font still produces an image."""
        exporter = SceneExporter(default_font="NoSuchFont-Regular")
        elements = [make_text("t", "Text", 0, 0, 100, 20, TextStyle())]

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            exporter.save_png(elements, output_path)
            assert os.path.exists(output_path)
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)

    def test_fonts_are_cached(self):
        """Test fonts are cached."""
        exporter = SceneExporter()
        assert exporter._font(12, False) is exporter._font(12, False)
