from __future__ import annotations

from pathlib import Path

from photoprep.imaging import VariantPlanner


def test_plan_is_full_cross_product(catalog) -> None:
    planned = VariantPlanner(catalog).plan(Path("/photos/beach.jpg"))

    assert len(planned) == 6
    assert [p.output_path.name for p in planned] == [
        "beach-500px-resize.jpeg",
        "beach-500px-resize.webp",
        "beach-1000px-resize.jpeg",
        "beach-1000px-resize.webp",
        "beach-2000px-resize.jpeg",
        "beach-2000px-resize.webp",
    ]
    assert all(p.output_path.parent == Path("/photos") for p in planned)


def test_plan_strips_any_source_extension(catalog) -> None:
    planner = VariantPlanner(catalog)

    assert planner.plan("/p/IMG_0001.HEIC")[0].output_path.name == "IMG_0001-500px-resize.jpeg"
    assert planner.plan("/p/trip.day1.jpeg")[0].output_path.name == "trip.day1-500px-resize.jpeg"


def test_planner_shares_catalog_variants(catalog) -> None:
    planner = VariantPlanner(catalog)
    first = planner.plan("/p/a.jpg")
    second = planner.plan("/p/b.jpg")

    assert [p.variant for p in first] == [p.variant for p in second]
    assert {v.name for v in planner.variants} == {
        "500px/jpeg", "500px/webp", "1000px/jpeg",
        "1000px/webp", "2000px/jpeg", "2000px/webp",
    }
