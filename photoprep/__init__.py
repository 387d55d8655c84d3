"""photoprep - batch resizing and metadata manifests for travel photography.

Scan a directory of source photographs, render their embedded capture metadata
into a static-site shortcode manifest, and produce a matrix of resized JPEG and
WebP variants without ever upscaling past the source resolution.
"""

from photoprep._version import __version__, __version_info__
from photoprep.config import ConfigManager, OutputCatalog
from photoprep.processing import PhotoPipeline, RunReport

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "OutputCatalog",
    "PhotoPipeline",
    "RunReport",
]
