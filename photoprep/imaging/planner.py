"""Fan a source image out to every size and format in the catalog."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from photoprep.config.catalog import OutputCatalog, OutputFormat, OutputSize


@dataclass(frozen=True)
class OutputVariant:
    """One (size, format) combination."""
    size: OutputSize
    format: OutputFormat

    @property
    def name(self) -> str:
        return f"{self.size.label}/{self.format.extension}"


@dataclass(frozen=True)
class PlannedVariant:
    """A variant bound to its source image and derived output path."""
    source: Path
    variant: OutputVariant
    output_path: Path


def output_path_for(source: Path, variant: OutputVariant, suffix: str = "-resize") -> Path:
    """Derive ``{dir}/{stem}-{label}{suffix}.{ext}`` for a source and variant.

    Examples:
        >>> output_path_for(Path("/p/beach.jpg"), variant)
        PosixPath('/p/beach-500px-resize.jpeg')
    """
    name = f"{source.stem}-{variant.size.label}{suffix}.{variant.format.extension}"
    return source.with_name(name)


class VariantPlanner:
    """Computes the size x format cross product for a source image.

    Attributes:
        catalog: Output catalog shared by every source in the run
    """

    def __init__(self, catalog: OutputCatalog) -> None:
        self.catalog = catalog
        self._variants = tuple(
            OutputVariant(size=size, format=fmt)
            for size in catalog.sizes
            for fmt in catalog.formats
        )

    @property
    def variants(self) -> List[OutputVariant]:
        """Every variant in size-major order."""
        return list(self._variants)

    def plan(self, source: Union[str, Path]) -> List[PlannedVariant]:
        """Plan all output variants for one source image.

        Args:
            source: Path of an eligible source image

        Returns:
            One PlannedVariant per (size, format) pair
        """
        source = Path(source)
        return [
            PlannedVariant(
                source=source,
                variant=variant,
                output_path=output_path_for(source, variant, self.catalog.suffix),
            )
            for variant in self._variants
        ]
