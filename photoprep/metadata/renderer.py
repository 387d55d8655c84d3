"""Render decoded tags into a static-site image shortcode."""

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from photoprep.config import ConfigManager

logger = logging.getLogger(__name__)

# Rendered in place of any tag the source does not carry
MISSING = "undefined"

_SOUTH = re.compile(r"south", re.IGNORECASE)
_WEST = re.compile(r"west", re.IGNORECASE)

# Manifest field -> candidate tags, most preferred first
FIELD_SOURCES = {
    "title": ("title", "Object Name", "Headline"),
    "caption": ("description", "Caption/Abstract", "ImageDescription"),
    "keywords": ("subject", "Keywords"),
    "city": ("City",),
    "region": ("Province/State", "State"),
    "country_code": ("Country/Primary Location Code", "CountryCode"),
    "date_created": ("DateCreated", "Date Created", "DateTimeOriginal"),
    "date_modified": ("ModifyDate", "DateTime"),
}


@dataclass(frozen=True)
class MetadataFragment:
    """Rendered manifest entry for one source image.

    Attributes are the shortcode fields in template order. ``text`` gives
    the rendered block.
    """
    src: str
    width: int
    height: int
    title: str
    caption: str
    genre: str
    latitude: str
    longitude: str
    altitude_meters: str
    location: str
    keywords: str
    date_created: str
    date_modified: str

    def fields(self) -> Tuple[Tuple[str, str], ...]:
        """Return (shortcode attribute, value) pairs in template order."""
        return (
            ("src", self.src),
            ("width", str(self.width)),
            ("height", str(self.height)),
            ("title", self.title),
            ("caption", self.caption),
            ("genre", self.genre),
            ("latitude", self.latitude),
            ("longitude", self.longitude),
            ("altitudeMeters", self.altitude_meters),
            ("location", self.location),
            ("keywords", self.keywords),
            ("dateCreated", self.date_created),
            ("dateModified", self.date_modified),
        )

    @property
    def text(self) -> str:
        """The fragment as a ``{{< img ... >}}`` block."""
        lines = ["", "{{< img"]
        lines.extend(f'    {name}="{_escape(value)}"' for name, value in self.fields())
        lines.append(">}}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.text


class MetadataRenderer:
    """Maps a tag mapping onto the fixed manifest template.

    Rendering has no I/O and depends only on its inputs and the display
    constants given at construction.

    Attributes:
        display_width: Width written into every fragment
        display_height: Height written into every fragment
        genre: Genre written into every fragment
    """

    def __init__(
        self,
        display_width: int = 2000,
        display_height: int = 1500,
        genre: str = "Travel Photography"
    ) -> None:
        self.display_width = display_width
        self.display_height = display_height
        self.genre = genre

    @classmethod
    def from_config(cls, config: ConfigManager) -> "MetadataRenderer":
        """Create a renderer from the ``manifest`` configuration section."""
        return cls(
            display_width=config.get("manifest.display_width", 2000),
            display_height=config.get("manifest.display_height", 1500),
            genre=config.get("manifest.genre", "Travel Photography"),
        )

    def render(self, tags: Optional[Mapping[str, str]], filename: str) -> MetadataFragment:
        """Render one fragment.

        Args:
            tags: Decoded tags; None or empty renders every tag field as missing
            filename: Source filename written as ``src``

        Returns:
            MetadataFragment
        """
        tags = tags or {}

        location = ", ".join((
            self._lookup(tags, "city"),
            self._lookup(tags, "region"),
            self._lookup(tags, "country_code"),
        ))

        return MetadataFragment(
            src=filename,
            width=self.display_width,
            height=self.display_height,
            title=self._lookup(tags, "title"),
            caption=self._lookup(tags, "caption"),
            genre=self.genre,
            latitude=signed_coordinate(
                tags.get("GPSLatitude"), tags.get("GPSLatitudeRef"), _SOUTH
            ),
            longitude=signed_coordinate(
                tags.get("GPSLongitude"), tags.get("GPSLongitudeRef"), _WEST
            ),
            altitude_meters=_value(tags.get("GPSAltitude")),
            location=location,
            keywords=self._lookup(tags, "keywords"),
            date_created=capture_date(tags),
            date_modified=self._lookup(tags, "date_modified"),
        )

    def render_text(self, tags: Optional[Mapping[str, str]], filename: str) -> str:
        """Render one fragment straight to text."""
        return self.render(tags, filename).text

    @staticmethod
    def _lookup(tags: Mapping[str, str], field: str) -> str:
        for name in FIELD_SOURCES[field]:
            value = tags.get(name)
            if value not in (None, ""):
                return str(value)
        return MISSING


def signed_coordinate(
    magnitude: Optional[str],
    reference: Optional[str],
    negative: "re.Pattern[str]"
) -> str:
    """Prefix a coordinate magnitude with "-" when its reference matches.

    Args:
        magnitude: Coordinate magnitude as described by the decoder
        reference: Hemisphere reference tag (e.g. "South latitude")
        negative: Pattern that marks the negative hemisphere

    Returns:
        Signed coordinate, the unsigned magnitude when the reference is
        absent or not negative, or the missing placeholder when there is
        no magnitude

    Examples:
        >>> signed_coordinate("10", "South", re.compile("south", re.I))
        '-10'
    """
    if magnitude in (None, ""):
        return MISSING
    magnitude = str(magnitude).strip().lstrip("-")
    if reference and negative.search(str(reference)):
        return f"-{magnitude}"
    return magnitude


def capture_date(tags: Mapping[str, str]) -> str:
    """Date created with the UTC offset appended verbatim when present."""
    date = MetadataRenderer._lookup(tags, "date_created")
    offset = tags.get("OffsetTime")
    if offset and date != MISSING:
        return f"{date}{offset}"
    return date


def _value(value: Optional[str]) -> str:
    if value in (None, ""):
        return MISSING
    return str(value)


def _escape(value: str) -> str:
    return str(value).replace('"', "&quot;")
