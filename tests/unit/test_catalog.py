"""Unit tests for the bundled catalog and its schema."""

import pytest

from visionary.core import catalog
from visionary.core.models import AUTO, CONTROL_DIMENSIONS
from visionary.utils.exceptions import ConfigurationError

_ENHANCERS_YAML = "\n".join(
    f"  {dim}:\n    label: {dim}\n    options: [Auto, One]" for dim in CONTROL_DIMENSIONS
)


def _yaml(extra: str = "") -> str:
    return f"enhancers:\n{_ENHANCERS_YAML}\n{extra}"


@pytest.mark.unit
class TestBundledCatalog:
    def test_every_dimension_has_options(self):
        options = catalog.enhancer_options()
        assert list(options) == list(CONTROL_DIMENSIONS)
        for values in options.values():
            assert values[0] == AUTO
            assert len(values) > 1

    def test_aspect_ratio_options_are_strings(self):
        assert "16:9" in catalog.enhancer_options()["AspectRatio"]

    def test_labels(self):
        assert catalog.enhancer_label("CameraAngle") == "Camera Angle"

    def test_initial_categories(self):
        names = [c.name for c in catalog.initial_categories()]
        assert names == [
            "Character",
            "Place",
            "Object",
            "Outfit",
            "Art Style",
            "Lighting",
            "Mood",
            "Color Palette",
            "Composition",
        ]

    def test_starter_asset(self):
        (asset,) = catalog.starter_assets()
        assert asset.id == "1"
        assert asset.category == "Character"
        assert asset.image is None
        assert "samurai" in asset.prompt_snippet

    def test_image_models_bundled_order(self):
        assert catalog.image_models() == ["gemini-2.5-flash-image", "gemini-3-pro-image-preview"]

    def test_image_models_given_default_first(self):
        models = catalog.image_models("gemini-3-pro-image-preview")
        assert models == ["gemini-3-pro-image-preview", "gemini-2.5-flash-image"]

    def test_image_models_unknown_default_added(self):
        models = catalog.image_models("my-tuned-image-model")
        assert models[0] == "my-tuned-image-model"
        assert len(models) == 3


@pytest.mark.unit
class TestParseCatalog:
    def test_minimal(self):
        parsed = catalog.parse_catalog(_yaml())
        assert parsed.image_models == []
        assert parsed.categories == []

    def test_malformed_yaml(self):
        with pytest.raises(ConfigurationError):
            catalog.parse_catalog("enhancers: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            catalog.parse_catalog("- a\n- b\n")

    def test_missing_dimension(self):
        with pytest.raises(ConfigurationError) as exc_info:
            catalog.parse_catalog("enhancers: {}\n")
        assert "Style" in str(exc_info.value)

    def test_auto_must_be_first(self):
        bad = _yaml().replace("options: [Auto, One]", "options: [One, Auto]", 1)
        with pytest.raises(ConfigurationError):
            catalog.parse_catalog(bad)

    def test_starter_asset_unknown_category(self):
        extra = (
            "categories:\n  - name: Place\n"
            "starter_assets:\n  - id: x\n    name: X\n    category: Character\n    prompt_snippet: x\n"
        )
        with pytest.raises(ConfigurationError) as exc_info:
            catalog.parse_catalog(_yaml(extra))
        assert "unknown category" in str(exc_info.value)
