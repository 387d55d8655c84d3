"""Immutable output catalog: the sizes and formats every source fans out to."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from photoprep.config.defaults import SUPPORTED_FORMATS
from photoprep.config.manager import ConfigManager


@dataclass(frozen=True)
class OutputSize:
    """A long-edge pixel target.

    Attributes:
        label: Label used in output filenames (e.g. "500px")
        px: Target length of the long edge in pixels
    """
    label: str
    px: int


@dataclass(frozen=True)
class OutputFormat:
    """An output encoding.

    Attributes:
        extension: Output file extension without the dot (e.g. "webp")
        options: Encoder keyword arguments passed to ``Image.save``
    """
    extension: str
    options: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def pillow_format(self) -> str:
        """Pillow format name for the encoder."""
        return SUPPORTED_FORMATS[self.extension]


@dataclass(frozen=True)
class OutputCatalog:
    """Read-only catalog of target sizes and formats for one run.

    Attributes:
        sizes: Target sizes, in configured order
        formats: Target formats, in configured order
        suffix: Reserved marker placed before the extension of every output
    """
    sizes: Tuple[OutputSize, ...]
    formats: Tuple[OutputFormat, ...]
    suffix: str = "-resize"

    @classmethod
    def from_config(cls, config: ConfigManager) -> "OutputCatalog":
        """Build the catalog from validated configuration."""
        sizes = tuple(
            OutputSize(label=entry["label"], px=int(entry["px"]))
            for entry in config.get("output.sizes", [])
        )
        formats = tuple(
            OutputFormat(
                extension=entry["format"],
                options=entry.get("options") or {},
            )
            for entry in config.get("output.formats", [])
        )
        return cls(sizes=sizes, formats=formats, suffix=config.get("output.suffix", "-resize"))

    @classmethod
    def default(cls) -> "OutputCatalog":
        """Catalog built from ``DEFAULT_CONFIG``."""
        return cls.from_config(ConfigManager.from_overrides())

    @property
    def output_extensions(self) -> Tuple[str, ...]:
        """Extensions an already-generated file may carry (with leading dot)."""
        extensions = {f".{fmt.extension}" for fmt in self.formats}
        # Older runs wrote JPEG variants with the short extension
        extensions.add(".jpg")
        return tuple(sorted(extensions))
