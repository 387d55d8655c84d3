"""Custom exceptions for pipeline runs."""

from photoprep.exceptions import PhotoPrepError


class ScanError(PhotoPrepError):
    """Raised when the source directory cannot be listed."""
    pass
