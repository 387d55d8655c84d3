"""Utility functions for photoprep."""

from photoprep.utils.gps import (
    dms_to_decimal,
    describe_altitude,
    describe_reference,
    format_number,
)

__all__ = ["dms_to_decimal", "describe_altitude", "describe_reference", "format_number"]
