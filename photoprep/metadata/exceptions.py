"""Custom exceptions for metadata extraction."""

from photoprep.exceptions import PhotoPrepError


class MetadataError(PhotoPrepError):
    """Base exception for metadata errors.

    Attributes:
        path: Source file the error relates to (if known)
    """

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class MetadataMissingError(MetadataError):
    """Raised when a file carries no EXIF, IPTC or XMP metadata.

    Not fatal: the file is still rendered with empty metadata fields.
    """
    pass


class MetadataDecodeError(MetadataError):
    """Raised when the image container cannot be parsed at all."""
    pass
