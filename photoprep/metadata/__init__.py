"""Metadata extraction and manifest rendering."""

from photoprep.metadata.decoder import TagMapping, describe_tags, read_tags
from photoprep.metadata.renderer import MetadataFragment, MetadataRenderer
from photoprep.metadata.exceptions import (
    MetadataDecodeError,
    MetadataError,
    MetadataMissingError,
)

__all__ = [
    "TagMapping",
    "describe_tags",
    "read_tags",
    "MetadataFragment",
    "MetadataRenderer",
    "MetadataDecodeError",
    "MetadataError",
    "MetadataMissingError",
]
