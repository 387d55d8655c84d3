from __future__ import annotations

import pytest

from photoprep.config import ConfigError, ConfigManager, OutputCatalog, DEFAULT_CONFIG


def test_defaults_describe_three_sizes_and_two_formats() -> None:
    config = ConfigManager.from_overrides()
    catalog = OutputCatalog.from_config(config)

    assert [size.px for size in catalog.sizes] == [500, 1000, 2000]
    assert [size.label for size in catalog.sizes] == ["500px", "1000px", "2000px"]
    assert [fmt.extension for fmt in catalog.formats] == ["jpeg", "webp"]
    assert catalog.formats[0].options == {"quality": 80, "progressive": True, "optimize": True}
    assert catalog.formats[1].options == {"quality": 80, "method": 6}
    assert catalog.suffix == "-resize"


def test_overrides_merge_without_touching_defaults() -> None:
    config = ConfigManager.from_overrides({"processing": {"workers": 9}})

    assert config.get("processing.workers") == 9
    assert config.get("manifest.genre") == "Travel Photography"
    assert DEFAULT_CONFIG["processing"]["workers"] == 4


def test_get_and_set_use_dot_notation() -> None:
    config = ConfigManager.from_overrides()
    config.set("manifest.genre", "Street")

    assert config.get("manifest.genre") == "Street"
    assert config.get("missing.key", "fallback") == "fallback"


def test_catalog_is_immutable() -> None:
    catalog = OutputCatalog.default()

    with pytest.raises(Exception):
        catalog.suffix = "-other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        catalog.formats[0].options["quality"] = 10  # type: ignore[index]


@pytest.mark.parametrize(
    "overrides",
    [
        {"output": {"sizes": []}},
        {"output": {"sizes": [{"label": "big", "px": 0}]}},
        {"output": {"sizes": [{"label": "a", "px": 10}, {"label": "a", "px": 20}]}},
        {"output": {"formats": [{"format": "gif"}]}},
        {"processing": {"workers": 0}},
    ],
)
def test_invalid_overrides_raise(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        ConfigManager.from_overrides(overrides)
