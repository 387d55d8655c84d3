"""Pipeline orchestrator: scan, render metadata, fan out variants."""

import json
import logging
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..config import ConfigManager, OutputCatalog
from ..imaging import PlannedVariant, ResizeEngine, VariantPlanner, VariantResult
from ..metadata import MetadataFragment, MetadataRenderer, TagMapping, read_tags
from ..metadata.exceptions import MetadataDecodeError, MetadataMissingError
from .scanner import eligible_sources

logger = logging.getLogger(__name__)

TagReader = Callable[[bytes, Optional[str]], TagMapping]


@dataclass
class RunReport:
    """Results of one pipeline run.

    Attributes:
        directory: Directory that was scanned
        sources: Eligible source images, sorted by path
        fragments: Rendered metadata fragment per source
        variants: Every variant result, grouped by source in path order
        missing_metadata: Sources that carried no metadata
        tags: Decoded tags per source (only kept when requested)
        total_time: Wall-clock time of the run (seconds)
    """
    directory: Path
    sources: List[Path] = field(default_factory=list)
    fragments: Dict[Path, MetadataFragment] = field(default_factory=dict)
    variants: List[VariantResult] = field(default_factory=list)
    missing_metadata: List[Path] = field(default_factory=list)
    tags: Dict[Path, TagMapping] = field(default_factory=dict)
    total_time: float = 0.0

    @property
    def manifest(self) -> str:
        """All fragments concatenated in source path order."""
        return "".join(
            self.fragments[source].text
            for source in sorted(self.fragments)
        )

    @property
    def succeeded(self) -> List[VariantResult]:
        return [result for result in self.variants if result.success]

    @property
    def failed(self) -> List[VariantResult]:
        return [result for result in self.variants if not result.success]

    def to_dict(self) -> dict:
        """Return the report as JSON-serialisable data."""
        return {
            "directory": str(self.directory),
            "sources": [str(source) for source in self.sources],
            "missing_metadata": [str(source) for source in self.missing_metadata],
            "variants": [result.to_dict() for result in self.variants],
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "total_time": round(self.total_time, 3),
        }

    def write_json(self, path: Union[str, Path]) -> None:
        """Write the report to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")


class PhotoPipeline:
    """Orchestrates a complete run over one directory.

    This class coordinates:
    - Directory scanning and eligibility filtering
    - Metadata decoding and fragment rendering per source
    - Resizing every source into every catalog variant

    Work is spread over a thread pool. ``run`` returns only after every
    dispatched unit has finished or failed.
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        catalog: Optional[OutputCatalog] = None,
        planner: Optional[VariantPlanner] = None,
        engine: Optional[ResizeEngine] = None,
        renderer: Optional[MetadataRenderer] = None,
        tag_reader: Optional[TagReader] = None,
        keep_tags: bool = False
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Configuration (defaults used if not provided)
            catalog: Output catalog (built from config if not provided)
            planner: Variant planner (created from catalog if not provided)
            engine: Resize engine (created if not provided)
            renderer: Metadata renderer (created from config if not provided)
            tag_reader: Callable decoding raw bytes into tags
            keep_tags: Keep decoded tags on the report (for tag listings)
        """
        self.config = config or ConfigManager.from_overrides()
        self.catalog = catalog or OutputCatalog.from_config(self.config)
        self.planner = planner or VariantPlanner(self.catalog)
        self.engine = engine or ResizeEngine()
        self.renderer = renderer or MetadataRenderer.from_config(self.config)
        self.tag_reader = tag_reader or read_tags
        self.keep_tags = keep_tags
        self.workers = self.config.get("processing.workers", 4)
        self.case_sensitive = bool(
            self.config.get("processing.case_sensitive_extensions", False)
        )

        logger.debug(
            f"PhotoPipeline initialized: {len(self.planner.variants)} variant(s) "
            f"per source, workers={self.workers}"
        )

    def run(self, directory: Union[str, Path]) -> RunReport:
        """Process every eligible image in a directory.

        Args:
            directory: Directory holding source photographs

        Returns:
            RunReport with the manifest and per-variant results

        Raises:
            ScanError: If the directory cannot be read
            MetadataDecodeError: If a source's metadata container is malformed
        """
        directory = Path(directory)
        start_time = time.time()
        logger.info(f"Starting run: {directory}")

        report = RunReport(directory=directory)
        report.sources = eligible_sources(directory, self.catalog, self.case_sensitive)

        if not report.sources:
            logger.warning("No source images to process")
            report.total_time = time.time() - start_time
            return report

        planned = {source: self.planner.plan(source) for source in report.sources}
        owners = claim_outputs(report.sources, planned)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            metadata_futures: Dict[Path, Future] = {}
            variant_futures: Dict[Path, Future] = {}

            for source in report.sources:
                owned = [
                    item for item in planned[source]
                    if owners[item.output_path] == source
                ]
                metadata_futures[source] = executor.submit(self._render_metadata, source)
                variant_futures[source] = executor.submit(self.engine.render_all, owned)

            all_futures = list(metadata_futures.values()) + list(variant_futures.values())
            done, pending = wait(all_futures, return_when=FIRST_EXCEPTION)
            fatal = next(
                (future for future in done if future.exception() is not None),
                None,
            )
            if fatal is not None:
                for future in pending:
                    future.cancel()
                logger.error(f"Run aborted: {fatal.exception()}")
                raise fatal.exception()

            for source in report.sources:
                fragment, tags, missing = metadata_futures[source].result()
                report.fragments[source] = fragment
                if missing:
                    report.missing_metadata.append(source)
                if self.keep_tags and tags is not None:
                    report.tags[source] = tags
                rendered = iter(variant_futures[source].result())
                for item in planned[source]:
                    owner = owners[item.output_path]
                    if owner == source:
                        report.variants.append(next(rendered))
                    else:
                        report.variants.append(_conflict_result(item, owner))

        report.total_time = time.time() - start_time
        logger.info(
            f"Run complete: {len(report.sources)} source(s), "
            f"{len(report.succeeded)} variant(s) written, "
            f"{len(report.failed)} failed "
            f"(Total time: {report.total_time:.1f}s)"
        )
        return report

    def _render_metadata(self, source: Path):
        """Decode and render one source's fragment.

        Returns:
            Tuple of (fragment, tags or None, whether metadata was missing)
        """
        try:
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise MetadataDecodeError(f"Cannot read file: {e}", str(source)) from e

        tags = None
        missing = False
        try:
            tags = self.tag_reader(data, str(source))
        except MetadataMissingError:
            logger.info(f"No metadata found in {source.name}")
            missing = True

        fragment = self.renderer.render(tags, source.name)
        logger.debug(f"Rendered metadata for {source.name}")
        return fragment, tags, missing


def claim_outputs(
    sources: List[Path],
    planned: Dict[Path, List[PlannedVariant]]
) -> Dict[Path, Path]:
    """Assign every planned output path to exactly one source.

    Sources sharing a stem (``a.jpg`` and ``a.jpeg``) derive the same output
    paths. The first source in the given order keeps each path; the others
    are logged and will report those variants as failed.

    Returns:
        Mapping of output path -> owning source
    """
    owners: Dict[Path, Path] = {}
    for source in sources:
        for item in planned[source]:
            owner = owners.setdefault(item.output_path, source)
            if owner != source:
                logger.error(
                    f"Output {item.output_path.name} of {source.name} "
                    f"collides with {owner.name}; skipping"
                )
    return owners


def _conflict_result(planned: PlannedVariant, owner: Path) -> VariantResult:
    return VariantResult(
        source=planned.source,
        output_path=planned.output_path,
        size_label=planned.variant.size.label,
        format=planned.variant.format.extension,
        error=f"Output path already claimed by {owner.name}",
    )
