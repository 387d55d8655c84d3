"""GPS value conversion for EXIF tags."""

import logging
from fractions import Fraction
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

Number = Union[int, float, Fraction]

_REFERENCE_NAMES = {
    "N": "North latitude",
    "S": "South latitude",
    "E": "East longitude",
    "W": "West longitude",
}


def _to_float(value) -> float:
    """Convert an EXIF rational (exifread Ratio, Fraction, or number) to float."""
    if hasattr(value, "num") and hasattr(value, "den"):
        if value.den == 0:
            raise ValueError("zero denominator in rational")
        return value.num / value.den
    return float(value)


def dms_to_decimal(values: Sequence[Number]) -> float:
    """Convert GPS coordinates from degrees/minutes/seconds to decimal.

    Only the magnitude is returned; the hemisphere is carried separately by
    the reference tag.

    Args:
        values: Sequence of (degrees, minutes, seconds). Shorter sequences are
            accepted and treated as zero for the missing parts.

    Returns:
        Decimal degrees

    Raises:
        ValueError: If the sequence is empty or holds a zero denominator

    Examples:
        >>> dms_to_decimal([10, 30, 0])
        10.5
    """
    parts = [_to_float(value) for value in values]
    if not parts:
        raise ValueError("empty GPS coordinate")
    while len(parts) < 3:
        parts.append(0.0)
    return parts[0] + parts[1] / 60.0 + parts[2] / 3600.0


def describe_reference(ref: str) -> str:
    """Turn a one-letter GPS reference into a readable hemisphere name.

    Unknown values are returned stripped but otherwise unchanged.
    """
    ref = str(ref).strip()
    return _REFERENCE_NAMES.get(ref.upper(), ref)


def describe_altitude(values: Sequence[Number], ref: Optional[int] = None) -> str:
    """Describe a GPS altitude as a metre figure.

    Args:
        values: exifread tag values (a single rational)
        ref: GPSAltitudeRef value; 1 means below sea level

    Returns:
        Altitude in metres, formatted without a trailing ".0" for whole values
    """
    altitude = _to_float(values[0])
    if ref == 1:
        altitude = -altitude
    return format_number(altitude)


def format_number(value: float) -> str:
    """Format a float compactly (integers without decimals, others to 6 places)."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")
