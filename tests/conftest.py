from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest
from PIL import Image

from photoprep.config import ConfigManager, OutputCatalog


def write_jpeg(
    path: Path,
    size: tuple[int, int] = (800, 600),
    exif: Optional[Image.Exif] = None,
    color: tuple[int, int, int] = (30, 120, 200),
) -> Path:
    img = Image.new("RGB", size, color)
    if exif is not None:
        img.save(path, "JPEG", exif=exif.tobytes())
    else:
        img.save(path, "JPEG")
    return path


@pytest.fixture
def catalog() -> OutputCatalog:
    return OutputCatalog.default()


@pytest.fixture
def config() -> ConfigManager:
    return ConfigManager.from_overrides({"processing": {"workers": 2}})


@pytest.fixture
def make_jpeg(tmp_path: Path):
    def _make(name: str, size: tuple[int, int] = (800, 600), **kwargs) -> Path:
        return write_jpeg(tmp_path / name, size, **kwargs)
    return _make
