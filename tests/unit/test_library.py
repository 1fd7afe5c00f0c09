"""Unit tests for shape library parsing and the library provider."""

import json

import pytest

from plexscene.library import (
    LibraryError,
    LibraryShapeProvider,
    NullShapeProvider,
    SemanticType,
    ShapeLibrary,
    match_semantic_type,
    primitive_from_element,
)
from plexscene.primitives import PrimitiveType


class TestMatchSemanticType:
    """Tests for library item name matching."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Groundplex", SemanticType.ON_PREM_CLUSTER),
            ("cloudplex large", SemanticType.CLOUD_CLUSTER),
            ("JCC Node", SemanticType.CONTROL_NODE),
            ("Big FeedMaster", SemanticType.FEED_NODE),
            ("Corporate API Gateway", SemanticType.GATEWAY),
            ("Load Balancer", SemanticType.LOAD_BALANCER),
            ("Fast Ultra Pipeline", SemanticType.PIPELINE),
            ("Environment frame", SemanticType.ENVIRONMENT),
            ("Zone", SemanticType.ZONE),
            ("REST endpoint", SemanticType.ENDPOINT),
            ("Generic node", SemanticType.CONTROL_NODE),
        ],
    )
    def test_patterns(self, name, expected):
        """Test patterns."""
        assert match_semantic_type(name) is expected

    def test_no_match(self):
        """Test no match."""
        assert match_semantic_type("Company logo") is None

    def test_priority_order(self):
        """Earlier patterns win over later ones."""
        assert match_semantic_type("groundplex node") is SemanticType.ON_PREM_CLUSTER


class TestPrimitiveFromElement:
    """Tests for converting Excalidraw element dicts."""

    def test_text_element(self):
        """Test text element."""
        primitive = primitive_from_element(
            {"id": "t", "type": "text", "x": 1, "y": 2, "text": "Hi", "fontSize": 16}
        )
        assert primitive.type is PrimitiveType.TEXT
        assert primitive.text == "Hi"
        assert primitive.font_size == 16

    def test_roundness(self):
        """Test roundness."""
        primitive = primitive_from_element(
            {"id": "r", "type": "rectangle", "roundness": {"type": 3}}
        )
        assert primitive.roundness == 3
        assert primitive.width == 0

    def test_unsupported_type(self):
        """Test unsupported type."""
        assert primitive_from_element({"id": "f", "type": "freedraw"}) is None


class TestShapeLibrary:
    """Tests for ShapeLibrary parsing and cloning."""

    def test_from_dict(self, library_data):
        """Test from dict."""
        library = ShapeLibrary.from_dict(library_data)

        assert library.item_count == 3
        assert library.has(SemanticType.CLOUD_CLUSTER)
        assert library.has(SemanticType.CONTROL_NODE)
        assert not library.has(SemanticType.ENDPOINT)
        assert len(library.items[SemanticType.CLOUD_CLUSTER]) == 2

    def test_first_match_wins(self, library_data):
        """Test first match wins."""
        library_data["libraryItems"].append(
            {"id": "x", "name": "Cloudplex v2", "elements": []}
        )
        library = ShapeLibrary.from_dict(library_data)
        assert len(library.items[SemanticType.CLOUD_CLUSTER]) == 2

    def test_legacy_library_key(self, library_data):
        """Test legacy library key."""
        data = {"type": "excalidrawlib", "library": library_data["libraryItems"]}
        assert ShapeLibrary.from_dict(data).has(SemanticType.CLOUD_CLUSTER)

    def test_wrong_type(self):
        """Test wrong type."""
        with pytest.raises(LibraryError):
            ShapeLibrary.from_dict({"type": "excalidraw"})

    def test_items_not_a_list(self):
        """Test items not a list."""
        with pytest.raises(LibraryError):
            ShapeLibrary.from_dict({"type": "excalidrawlib", "libraryItems": {}})

    def test_invalid_json(self):
        """Test invalid json."""
        with pytest.raises(LibraryError):
            ShapeLibrary.from_json("{not json")

    def test_missing_file(self, tmp_path):
        """Test missing file."""
        with pytest.raises(LibraryError):
            ShapeLibrary.from_file(str(tmp_path / "missing.excalidrawlib"))

    def test_clone_moves_bounding_box(self, library_data):
        """Cloned shapes keep relative offsets with the box at (x, y)."""
        library = ShapeLibrary.from_dict(library_data)
        rect, text = library.clone(SemanticType.CLOUD_CLUSTER, 10, 20)

        assert (rect.x, rect.y) == (10, 20)
        assert (text.x, text.y) == (30, 30)
        assert rect.id == "cloud-cluster-0"
        assert text.id == "cloud-cluster-1"

    def test_clone_does_not_mutate_template(self, library_data):
        """Test clone does not mutate template."""
        library = ShapeLibrary.from_dict(library_data)
        library.clone(SemanticType.CLOUD_CLUSTER, 0, 0)
        assert library.items[SemanticType.CLOUD_CLUSTER][0].x == 100

    def test_clone_missing(self, library_data):
        """Test clone missing."""
        library = ShapeLibrary.from_dict(library_data)
        assert library.clone(SemanticType.GATEWAY, 0, 0) == []


class TestProviders:
    """Tests for LibraryShapeProvider and NullShapeProvider."""

    def test_null_provider(self):
        """Test null provider."""
        provider = NullShapeProvider()
        assert provider.is_available() is False
        assert provider.get_shape(SemanticType.ENDPOINT, 0, 0) == []

    def test_unloaded_provider(self):
        """Test unloaded provider."""
        provider = LibraryShapeProvider()
        assert provider.is_available() is False
        assert provider.get_shape(SemanticType.ENDPOINT, 0, 0) == []

    def test_load(self, tmp_path, library_data):
        """Test load."""
        path = tmp_path / "shapes.excalidrawlib"
        path.write_text(json.dumps(library_data), encoding="utf-8")

        provider = LibraryShapeProvider()
        assert provider.load(str(path)) is True
        assert provider.is_available() is True
        assert len(provider.get_shape(SemanticType.CONTROL_NODE, 5, 5)) == 1

    def test_load_failure_leaves_provider_unavailable(self, tmp_path):
        """A broken library is logged and never raises."""
        path = tmp_path / "broken.excalidrawlib"
        path.write_text("garbage", encoding="utf-8")

        provider = LibraryShapeProvider()
        assert provider.load(str(path)) is False
        assert provider.is_available() is False
