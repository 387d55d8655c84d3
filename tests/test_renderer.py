from __future__ import annotations

from photoprep.metadata import MetadataRenderer

FULL_TAGS = {
    "title": "Sunset at Praia",
    "description": "Waves rolling in",
    "subject": "beach, sunset, portugal",
    "GPSLatitude": "38.7",
    "GPSLatitudeRef": "North latitude",
    "GPSLongitude": "9.14",
    "GPSLongitudeRef": "West longitude",
    "GPSAltitude": "12",
    "City": "Lisbon",
    "Province/State": "Lisboa",
    "Country/Primary Location Code": "PT",
    "DateCreated": "2023-06-01T19:45:00",
    "OffsetTime": "+01:00",
    "ModifyDate": "2023-06-02T08:00:00",
}


def test_render_maps_every_field() -> None:
    fragment = MetadataRenderer().render(FULL_TAGS, "beach.jpg")

    assert fragment.src == "beach.jpg"
    assert (fragment.width, fragment.height) == (2000, 1500)
    assert fragment.title == "Sunset at Praia"
    assert fragment.caption == "Waves rolling in"
    assert fragment.genre == "Travel Photography"
    assert fragment.latitude == "38.7"
    assert fragment.longitude == "-9.14"
    assert fragment.altitude_meters == "12"
    assert fragment.location == "Lisbon, Lisboa, PT"
    assert fragment.keywords == "beach, sunset, portugal"
    assert fragment.date_created == "2023-06-01T19:45:00+01:00"
    assert fragment.date_modified == "2023-06-02T08:00:00"


def test_text_block_shape() -> None:
    text = MetadataRenderer().render(FULL_TAGS, "beach.jpg").text

    lines = text.splitlines()
    assert lines[1] == "{{< img"
    assert lines[2] == '    src="beach.jpg"'
    assert '    width="2000"' in lines
    assert '    longitude="-9.14"' in lines
    assert '    location="Lisbon, Lisboa, PT"' in lines
    assert lines[-1] == ">}}"
    names = [line.split("=")[0].strip() for line in lines[2:-1]]
    assert names == [
        "src", "width", "height", "title", "caption", "genre", "latitude",
        "longitude", "altitudeMeters", "location", "keywords", "dateCreated",
        "dateModified",
    ]


def test_south_reference_negates_latitude() -> None:
    fragment = MetadataRenderer().render(
        {"GPSLatitude": "10", "GPSLatitudeRef": "South"}, "a.jpg"
    )
    assert fragment.latitude == "-10"


def test_reference_match_is_case_insensitive() -> None:
    fragment = MetadataRenderer().render(
        {
            "GPSLatitude": "33.9",
            "GPSLatitudeRef": "SOUTH latitude",
            "GPSLongitude": "151.2",
            "GPSLongitudeRef": "east longitude",
        },
        "a.jpg",
    )
    assert fragment.latitude == "-33.9"
    assert fragment.longitude == "151.2"


def test_missing_reference_leaves_magnitude_unsigned() -> None:
    fragment = MetadataRenderer().render(
        {"GPSLatitude": "10", "GPSLongitude": "20"}, "a.jpg"
    )
    assert (fragment.latitude, fragment.longitude) == ("10", "20")


def test_missing_location_parts_render_placeholders() -> None:
    fragment = MetadataRenderer().render(
        {"City": "Paris", "Country/Primary Location Code": "FR"}, "a.jpg"
    )
    assert fragment.location == "Paris, undefined, FR"


def test_date_without_offset() -> None:
    fragment = MetadataRenderer().render({"DateCreated": "2023-06-01"}, "a.jpg")
    assert fragment.date_created == "2023-06-01"


def test_iptc_names_are_used_when_xmp_is_absent() -> None:
    fragment = MetadataRenderer().render(
        {
            "Object Name": "Harbour",
            "Caption/Abstract": "Boats",
            "Keywords": "boats, sea",
            "Date Created": "2021-05-04",
        },
        "a.jpg",
    )
    assert (fragment.title, fragment.caption, fragment.keywords) == ("Harbour", "Boats", "boats, sea")
    assert fragment.date_created == "2021-05-04"


def test_empty_tags_render_every_field_as_undefined() -> None:
    fragment = MetadataRenderer().render(None, "a.jpg")

    assert fragment.title == "undefined"
    assert fragment.latitude == "undefined"
    assert fragment.location == "undefined, undefined, undefined"
    assert fragment.date_created == "undefined"


def test_rendering_is_pure() -> None:
    renderer = MetadataRenderer()
    tags = dict(FULL_TAGS)

    first = renderer.render(tags, "beach.jpg")
    second = renderer.render(tags, "beach.jpg")

    assert first == second
    assert first.text == second.text
    assert tags == FULL_TAGS


def test_quotes_are_escaped() -> None:
    text = MetadataRenderer().render_text({"title": 'The "Big" One'}, "a.jpg")
    assert '    title="The &quot;Big&quot; One"' in text.splitlines()


def test_display_constants_come_from_config(config) -> None:
    config.set("manifest.display_width", 1600)
    config.set("manifest.genre", "Street")

    fragment = MetadataRenderer.from_config(config).render({}, "a.jpg")

    assert fragment.width == 1600
    assert fragment.height == 1500
    assert fragment.genre == "Street"


def test_sign_follows_reference_only() -> None:
    fragment = MetadataRenderer().render(
        {
            "GPSLatitude": "-10",
            "GPSLatitudeRef": "North latitude",
            "GPSLongitude": "-20",
            "GPSLongitudeRef": "West longitude",
        },
        "a.jpg",
    )
    assert fragment.latitude == "10"
    assert fragment.longitude == "-20"
