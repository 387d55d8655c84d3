"""Custom exceptions for resize and encode operations."""

from photoprep.exceptions import PhotoPrepError


class ResizeError(PhotoPrepError):
    """Raised when one output variant cannot be decoded, encoded or written.

    Attributes:
        source: Source image path
        output: Output path of the failed variant
    """

    def __init__(self, message: str, source: str = None, output: str = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.output = output

    def __str__(self) -> str:
        if self.output:
            return f"{self.message} ({self.output})"
        return self.message
