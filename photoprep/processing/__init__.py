"""Processing module for orchestrating pipeline runs."""

from .pipeline import PhotoPipeline, RunReport
from .scanner import EntryKind, ScanEntry, classify, eligible_sources, scan_directory
from .exceptions import ScanError

__all__ = [
    "PhotoPipeline",
    "RunReport",
    "EntryKind",
    "ScanEntry",
    "classify",
    "eligible_sources",
    "scan_directory",
    "ScanError",
]
