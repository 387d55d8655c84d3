"""Directory scanning and source eligibility."""

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Union

from photoprep.config.catalog import OutputCatalog
from photoprep.config.defaults import SOURCE_EXTENSIONS
from photoprep.processing.exceptions import ScanError

logger = logging.getLogger(__name__)


class EntryKind(enum.Enum):
    SOURCE = "source"
    OUTPUT = "output"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ScanEntry:
    path: Path
    kind: EntryKind


def classify(
    name: str,
    catalog: OutputCatalog,
    case_sensitive: bool = False,
    source_extensions: Sequence[str] = SOURCE_EXTENSIONS
) -> EntryKind:
    """Classify a file name as source, generated output, or irrelevant.

    Generated files end in ``{suffix}.{ext}`` for any output extension and
    are never eligible again, so re-running over a directory does not resize
    its own outputs.

    Args:
        name: File name (no directory part)
        catalog: Output catalog supplying the reserved suffix and extensions
        case_sensitive: Match extensions exactly (lower case) when True
        source_extensions: Recognised source extensions, lower case

    Returns:
        EntryKind
    """
    candidate = name if case_sensitive else name.lower()
    suffix = catalog.suffix if case_sensitive else catalog.suffix.lower()

    if any(candidate.endswith(f"{suffix}{ext}") for ext in catalog.output_extensions):
        return EntryKind.OUTPUT
    if any(candidate.endswith(ext) for ext in source_extensions):
        return EntryKind.SOURCE
    return EntryKind.IGNORED


def scan_directory(
    directory: Union[str, Path],
    catalog: OutputCatalog,
    case_sensitive: bool = False
) -> Iterator[ScanEntry]:
    """Lazily classify every entry of a directory (single pass, not recursive).

    Raises:
        ScanError: If the directory cannot be listed
    """
    directory = Path(directory)
    try:
        entries = os.scandir(directory)
    except OSError as e:
        raise ScanError(f"Cannot read directory {directory}: {e}") from e

    with entries:
        for entry in entries:
            try:
                is_file = entry.is_file()
            except OSError:
                is_file = False

            if not is_file:
                yield ScanEntry(Path(entry.path), EntryKind.IGNORED)
                continue

            kind = classify(entry.name, catalog, case_sensitive)
            yield ScanEntry(Path(entry.path), kind)


def eligible_sources(
    directory: Union[str, Path],
    catalog: OutputCatalog,
    case_sensitive: bool = False
) -> List[Path]:
    """Return eligible source images in a directory, sorted by path.

    Raises:
        ScanError: If the directory cannot be listed
    """
    sources = []
    skipped_outputs = 0
    try:
        for entry in scan_directory(directory, catalog, case_sensitive):
            if entry.kind is EntryKind.SOURCE:
                sources.append(entry.path)
            elif entry.kind is EntryKind.OUTPUT:
                skipped_outputs += 1
    except OSError as e:
        raise ScanError(f"Cannot read directory {directory}: {e}") from e

    logger.info(
        f"Found {len(sources)} source image(s) in {directory}"
        + (f", skipping {skipped_outputs} generated file(s)" if skipped_outputs else "")
    )
    return sorted(sources)
