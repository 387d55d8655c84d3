from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from photoprep.imaging import ResizeEngine, VariantPlanner, compute_target_size
from photoprep.imaging.engine import _prepare_mode


@pytest.mark.parametrize(
    "width, height, px, expected",
    [
        (4000, 3000, 500, (500, 375)),
        (4000, 3000, 6000, (4000, 3000)),
        (3000, 4000, 500, (375, 500)),
        (1000, 1000, 500, (500, 500)),
        (300, 200, 500, (300, 200)),
        (200, 300, 500, (200, 300)),
        (5000, 10, 500, (500, 1)),
    ],
)
def test_compute_target_size(width: int, height: int, px: int, expected) -> None:
    assert compute_target_size(width, height, px) == expected


@pytest.mark.parametrize("size", [(4000, 3000), (640, 480), (480, 640), (512, 512), (90, 3000)])
@pytest.mark.parametrize("px", [500, 1000, 2000])
def test_long_edge_never_upscaled(size, px: int) -> None:
    width, height = size
    target_width, target_height = compute_target_size(width, height, px)

    if width >= height:
        assert target_width <= width and target_width <= px
        assert (target_width == width) == (width <= px)
    else:
        assert target_height <= height and target_height <= px
        assert (target_height == height) == (height <= px)


def test_invalid_dimensions_raise() -> None:
    with pytest.raises(ValueError):
        compute_target_size(0, 100, 500)


def test_render_all_writes_every_variant(make_jpeg, catalog) -> None:
    source = make_jpeg("beach.jpg", (1200, 900))
    planned = VariantPlanner(catalog).plan(source)

    results = ResizeEngine().render_all(planned)

    assert all(r.success for r in results)
    sizes = {(r.size_label, r.format): (r.width, r.height) for r in results}
    assert sizes[("500px", "jpeg")] == (500, 375)
    assert sizes[("1000px", "webp")] == (1000, 750)
    assert sizes[("2000px", "jpeg")] == (1200, 900)
    assert [r.capped for r in results] == [False, False, False, False, True, True]

    with Image.open(source.with_name("beach-500px-resize.jpeg")) as img:
        assert img.format == "JPEG"
        assert img.size == (500, 375)
    with Image.open(source.with_name("beach-2000px-resize.webp")) as img:
        assert img.format == "WEBP"
        assert img.size == (1200, 900)


def test_portrait_is_resized_by_height(make_jpeg, catalog) -> None:
    source = make_jpeg("tower.jpg", (600, 1200))

    results = ResizeEngine().render_all(VariantPlanner(catalog).plan(source))

    assert (results[0].width, results[0].height) == (250, 500)
    assert (results[2].width, results[2].height) == (500, 1000)
    assert (results[4].width, results[4].height) == (600, 1200)


def test_undecodable_source_fails_every_variant(tmp_path: Path, catalog) -> None:
    source = tmp_path / "broken.jpg"
    source.write_bytes(b"not an image")

    results = ResizeEngine().render_all(VariantPlanner(catalog).plan(source))

    assert len(results) == 6
    assert not any(r.success for r in results)
    assert all(r.error for r in results)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["broken.jpg"]


class WebpFailingEngine(ResizeEngine):
    def encode(self, image, output_format):
        if output_format.extension == "webp":
            raise OSError("encoder exploded")
        return super().encode(image, output_format)


def test_one_failing_variant_does_not_stop_siblings(make_jpeg, catalog, tmp_path: Path) -> None:
    source = make_jpeg("beach.jpg", (800, 600))

    results = WebpFailingEngine().render_all(VariantPlanner(catalog).plan(source))

    assert [r.success for r in results] == [True, False] * 3
    assert all("encoder exploded" in r.error for r in results if not r.success)
    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == [
        "beach-1000px-resize.jpeg",
        "beach-2000px-resize.jpeg",
        "beach-500px-resize.jpeg",
        "beach.jpg",
    ]


def test_failed_write_leaves_no_partial_file(tmp_path: Path) -> None:
    target = tmp_path / "missing-dir" / "out.jpeg"

    with pytest.raises(OSError):
        ResizeEngine().write(target, b"data")

    assert not target.exists()


def test_write_replaces_existing_output(tmp_path: Path) -> None:
    target = tmp_path / "out.jpeg"
    target.write_bytes(b"old")

    ResizeEngine().write(target, b"new")

    assert target.read_bytes() == b"new"
    assert [p.name for p in tmp_path.iterdir()] == ["out.jpeg"]


def test_prepare_mode_flattens_alpha_for_jpeg() -> None:
    rgba = Image.new("RGBA", (4, 4), (255, 0, 0, 0))

    assert _prepare_mode(rgba, "JPEG").mode == "RGB"
    assert _prepare_mode(rgba, "WEBP").mode == "RGBA"
    assert _prepare_mode(Image.new("CMYK", (4, 4)), "WEBP").mode == "RGB"
    assert _prepare_mode(Image.new("CMYK", (4, 4)), "JPEG").mode == "CMYK"
