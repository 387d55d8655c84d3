"""Resize and encode source images under the no-upscale policy."""

import io
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageOps
from pillow_heif import register_heif_opener

from photoprep.config.catalog import OutputFormat
from photoprep.imaging.exceptions import ResizeError
from photoprep.imaging.planner import PlannedVariant

register_heif_opener()

logger = logging.getLogger(__name__)

# Modes each encoder can store without conversion
_ENCODABLE_MODES = {
    "JPEG": ("RGB", "L", "CMYK"),
    "WEBP": ("RGB", "RGBA"),
}


@dataclass
class VariantResult:
    """Outcome of producing one output variant.

    Attributes:
        source: Source image path
        output_path: Derived output path
        size_label: Catalog size label (e.g. "500px")
        format: Output format extension
        success: Whether the file was written
        width: Final width (0 on failure)
        height: Final height (0 on failure)
        capped: Whether the target was capped at the source size
        error: Error message if failed
    """
    source: Path
    output_path: Path
    size_label: str
    format: str
    success: bool = False
    width: int = 0
    height: int = 0
    capped: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source": str(self.source),
            "output": str(self.output_path),
            "size": self.size_label,
            "format": self.format,
            "success": self.success,
            "width": self.width,
            "height": self.height,
            "capped": self.capped,
            "error": self.error,
        }


def compute_target_size(width: int, height: int, px: int) -> Tuple[int, int]:
    """Final dimensions for a long-edge target, never larger than the source.

    Landscape and square images are resized by width, portrait images by
    height. The other edge follows the source aspect ratio.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        px: Requested long-edge size

    Returns:
        (width, height) of the output

    Examples:
        >>> compute_target_size(4000, 3000, 500)
        (500, 375)
        >>> compute_target_size(4000, 3000, 6000)
        (4000, 3000)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid source dimensions {width}x{height}")

    if width >= height:
        target_width = min(px, width)
        target_height = max(1, round(height * target_width / width))
    else:
        target_height = min(px, height)
        target_width = max(1, round(width * target_height / height))
    return target_width, target_height


class ResizeEngine:
    """Produces output files for planned variants.

    Each source is decoded once; every variant is then resized, encoded and
    written independently so that one failing variant never affects its
    siblings. Output is encoded in memory and moved into place atomically,
    so a failure leaves no partial file behind.
    """

    def read_source(self, path: Path) -> bytes:
        """Read raw bytes of a source image."""
        with open(path, "rb") as f:
            return f.read()

    def decode(self, data: bytes, source: Optional[Path] = None) -> Image.Image:
        """Decode source bytes, applying the EXIF orientation.

        Raises:
            ResizeError: If the image cannot be decoded
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return ImageOps.exif_transpose(img)
        except Exception as e:
            raise ResizeError(f"Cannot decode image: {e}", source=str(source)) from e

    def render_all(
        self,
        planned: Sequence[PlannedVariant],
        data: Optional[bytes] = None
    ) -> List[VariantResult]:
        """Produce every planned variant of a single source.

        Args:
            planned: Variants of one source, as returned by ``VariantPlanner.plan``
            data: Source bytes; read from disk when not given

        Returns:
            One VariantResult per planned variant, in the same order
        """
        if not planned:
            return []

        source = planned[0].source
        try:
            if data is None:
                data = self.read_source(source)
            image = self.decode(data, source)
        except (OSError, ResizeError) as e:
            logger.error(f"Problem processing {source.name}: {e}")
            return [self._failed(item, str(e)) for item in planned]

        try:
            return [self.render(item, image) for item in planned]
        finally:
            image.close()

    def render(self, planned: PlannedVariant, image: Image.Image) -> VariantResult:
        """Resize, encode and write one variant from a decoded image.

        Never raises; failures are logged and returned as a failed result.
        """
        variant = planned.variant
        result = VariantResult(
            source=planned.source,
            output_path=planned.output_path,
            size_label=variant.size.label,
            format=variant.format.extension,
        )

        try:
            width, height = image.size
            target = compute_target_size(width, height, variant.size.px)
            if max(target) < variant.size.px:
                result.capped = True
                logger.info(
                    f"Original {max(width, height)}px of {planned.source.name} "
                    f"too small to upscale to {variant.size.px}px"
                )

            if target == image.size:
                resized = image.copy()
            else:
                resized = image.resize(target, Image.Resampling.LANCZOS)

            try:
                payload = self.encode(resized, variant.format)
            finally:
                resized.close()

            self.write(planned.output_path, payload)

            result.width, result.height = target
            result.success = True
            logger.debug(
                f"Wrote {planned.output_path.name} ({target[0]}x{target[1]})"
            )
        except Exception as e:
            logger.error(f"Problem processing {planned.source.name} -> {variant.name}: {e}")
            result.error = str(e)

        return result

    def encode(self, image: Image.Image, output_format: OutputFormat) -> bytes:
        """Encode an image with the format's fixed options."""
        pillow_format = output_format.pillow_format
        image = _prepare_mode(image, pillow_format)

        output = io.BytesIO()
        image.save(output, format=pillow_format, **dict(output_format.options))
        return output.getvalue()

    def write(self, path: Path, payload: bytes) -> None:
        """Write bytes through a temporary sibling file, then replace atomically."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    @staticmethod
    def _failed(planned: PlannedVariant, error: str) -> VariantResult:
        return VariantResult(
            source=planned.source,
            output_path=planned.output_path,
            size_label=planned.variant.size.label,
            format=planned.variant.format.extension,
            error=error,
        )


def _prepare_mode(image: Image.Image, pillow_format: str) -> Image.Image:
    """Convert an image to a mode the target encoder can store."""
    allowed = _ENCODABLE_MODES.get(pillow_format)
    if allowed is None or image.mode in allowed:
        return image

    if image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    ):
        rgba = image.convert("RGBA")
        if "RGBA" in allowed:
            return rgba
        # Flatten onto white for formats without alpha
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        return background

    return image.convert("RGB")
