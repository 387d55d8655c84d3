"""Tag extraction from raw image bytes.

EXIF and GPS tags come from exifread, IPTC records and XMP packets from
Pillow. The result is a flat tag-name to description mapping; binary maker
notes and embedded thumbnails never make it into the mapping.
"""

import io
import logging
from typing import Any, Dict, Optional

import exifread
from PIL import Image, IptcImagePlugin, UnidentifiedImageError
from pillow_heif import register_heif_opener

from photoprep.metadata.exceptions import MetadataDecodeError, MetadataMissingError
from photoprep.utils.gps import (
    describe_altitude,
    describe_reference,
    dms_to_decimal,
    format_number,
)

register_heif_opener()

logger = logging.getLogger(__name__)

TagMapping = Dict[str, str]

# exifread prefixes every tag with the IFD it was found in
_EXIF_GROUPS = ("Image", "EXIF", "GPS", "Interoperability")
_SKIPPED_GROUPS = ("Thumbnail", "MakerNote")
_BINARY_TAGS = ("JPEGThumbnail", "TIFFThumbnail", "MakerNote")

IPTC_RECORDS = {
    (2, 5): "Object Name",
    (2, 25): "Keywords",
    (2, 55): "Date Created",
    (2, 60): "Time Created",
    (2, 80): "By-line",
    (2, 90): "City",
    (2, 92): "Sub-location",
    (2, 95): "Province/State",
    (2, 100): "Country/Primary Location Code",
    (2, 101): "Country/Primary Location Name",
    (2, 105): "Headline",
    (2, 116): "Copyright Notice",
    (2, 120): "Caption/Abstract",
}

XMP_FIELDS = (
    "title",
    "description",
    "subject",
    "creator",
    "rights",
    "City",
    "State",
    "Country",
    "CountryCode",
    "Headline",
    "DateCreated",
    "CreateDate",
    "ModifyDate",
)


def read_tags(data: bytes, path: Optional[str] = None) -> TagMapping:
    """Decode every metadata tag embedded in an image.

    Args:
        data: Raw bytes of a JPEG or HEIC file
        path: Source path, used only for error messages and logging

    Returns:
        Flat mapping of tag name to humanised value. XMP values win over
        IPTC values of the same name, IPTC over EXIF.

    Raises:
        MetadataDecodeError: If the container cannot be parsed
        MetadataMissingError: If the file holds no metadata at all
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            iptc = _read_iptc(img)
            xmp = _read_xmp(img)
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise MetadataDecodeError(f"Cannot parse image container: {e}", path) from e

    try:
        raw_exif = exifread.process_file(io.BytesIO(data), details=False)
    except Exception as e:
        raise MetadataDecodeError(f"Malformed EXIF block: {e}", path) from e

    tags = _normalize_exif(raw_exif)
    tags.update(iptc)
    tags.update(xmp)
    strip_binary_tags(tags)

    if not tags:
        raise MetadataMissingError("No metadata found", path)

    logger.debug(f"Decoded {len(tags)} tags from {path or 'image data'}")
    return tags


def strip_binary_tags(tags: Dict[str, Any]) -> Dict[str, Any]:
    """Remove maker notes and embedded thumbnails from a tag mapping in place.

    Maker notes can be very large; dropping them keeps memory bounded when
    many files are processed in one run.
    """
    for key in list(tags):
        if key.startswith(_BINARY_TAGS) or key.split(" ", 1)[0] in _SKIPPED_GROUPS:
            del tags[key]
    return tags


def describe_tags(tags: TagMapping) -> str:
    """Return a sorted ``name: value`` listing of a tag mapping."""
    return "\n".join(f"{key}: {tags[key]}" for key in sorted(tags))


def _normalize_exif(raw: Dict[str, Any]) -> TagMapping:
    """Flatten exifread output into humanised tag descriptions."""
    tags: TagMapping = {}
    gps: Dict[str, Any] = {}

    for key, tag in raw.items():
        group, _, name = key.partition(" ")
        if not name or group not in _EXIF_GROUPS:
            continue
        if name.startswith("MakerNote"):
            continue
        if group == "GPS":
            gps[name] = tag
            continue
        tags[name] = str(getattr(tag, "printable", tag)).strip()

    tags.update(_normalize_gps(gps))
    return tags


def _normalize_gps(gps: Dict[str, Any]) -> TagMapping:
    """Convert GPS IFD tags into decimal magnitudes and named hemispheres."""
    tags: TagMapping = {}

    for name, tag in gps.items():
        values = getattr(tag, "values", None)
        try:
            if name in ("GPSLatitude", "GPSLongitude") and values:
                tags[name] = format_number(dms_to_decimal(values))
            elif name in ("GPSLatitudeRef", "GPSLongitudeRef"):
                tags[name] = describe_reference(getattr(tag, "printable", tag))
            elif name == "GPSAltitude" and values:
                ref_tag = gps.get("GPSAltitudeRef")
                ref_values = getattr(ref_tag, "values", None)
                ref = ref_values[0] if ref_values else None
                tags[name] = describe_altitude(values, ref)
            elif name != "GPSAltitudeRef":
                tags[name] = str(getattr(tag, "printable", tag)).strip()
        except (ValueError, TypeError, ZeroDivisionError, IndexError) as e:
            logger.warning(f"Skipping unreadable GPS tag {name}: {e}")

    return tags


def _read_iptc(img: Image.Image) -> TagMapping:
    """Read IPTC application records (JPEG and TIFF only)."""
    info = IptcImagePlugin.getiptcinfo(img)
    if not info:
        return {}

    tags: TagMapping = {}
    for record, name in IPTC_RECORDS.items():
        value = info.get(record)
        if value is None:
            continue
        if isinstance(value, list):
            text = ", ".join(_decode_text(item) for item in value)
        else:
            text = _decode_text(value)
        if name == "Date Created" and len(text) == 8 and text.isdigit():
            text = f"{text[:4]}-{text[4:6]}-{text[6:]}"
        if text:
            tags[name] = text
    return tags


def _read_xmp(img: Image.Image) -> TagMapping:
    """Read the XMP fields the manifest template can use."""
    getxmp = getattr(img, "getxmp", None)
    if getxmp is None:
        return {}

    xmp = getxmp() or {}
    descriptions = xmp.get("xmpmeta", {}).get("RDF", {}).get("Description", [])
    if isinstance(descriptions, dict):
        descriptions = [descriptions]

    tags: TagMapping = {}
    for description in descriptions:
        if not isinstance(description, dict):
            continue
        for name in XMP_FIELDS:
            if name in description:
                text = _flatten_xmp_value(description[name])
                if text:
                    tags[name] = text
    return tags


def _flatten_xmp_value(value: Any) -> Optional[str]:
    """Collapse rdf:Alt/Bag/Seq containers into a plain string."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        items = [_flatten_xmp_value(item) for item in value]
        return ", ".join(item for item in items if item)
    if isinstance(value, dict):
        if "text" in value:
            return _flatten_xmp_value(value["text"])
        for container in ("Alt", "Bag", "Seq", "li"):
            if container in value:
                return _flatten_xmp_value(value[container])
    return None


def _decode_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip()
    return str(value).strip()
