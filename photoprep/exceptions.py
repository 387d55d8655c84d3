"""Base exception for photoprep."""


class PhotoPrepError(Exception):
    """Base exception for all photoprep errors."""
    pass
