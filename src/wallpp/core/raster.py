"""Pillow-backed raster operations.

:class:`RasterBackend` is the decode/encode collaborator of the pipeline:
header sniffing, full decoding, resizing, horizontal concatenation and
writing. Rasters are plain ``PIL.Image.Image`` objects in RGB mode.

Every Pillow failure is converted into one of the pipeline's own errors
(:class:`DecodeError`, :class:`ResampleError`, :class:`WriteError`) so callers
never need to know about Pillow's exception types.
"""

import logging
from pathlib import Path
from typing import Any, Literal

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError, ResampleError, WriteError

logger = logging.getLogger(__name__)

# EXIF orientations that rotate the image by 90 or 270 degrees
_TRANSPOSING_ORIENTATIONS = {5, 6, 7, 8}
_EXIF_ORIENTATION_TAG = 0x0112

ResizeMode = Literal["area", "linear"]

_RESIZE_FILTERS = {
    "area": Image.Resampling.BOX,
    "linear": Image.Resampling.BILINEAR,
}


class RasterBackend:
    """Decode, resize, concatenate and write rasters with Pillow."""

    def __init__(self, jpeg_quality: int = 95) -> None:
        self.jpeg_quality = jpeg_quality

    def sniff_size(self, path: str | Path) -> tuple[int, int]:
        """Read display dimensions from the file header without decoding pixels.

        Pillow only parses the header when opening a file, so this is cheap
        even for very large photos. Width and height are swapped when the
        EXIF orientation rotates the picture, matching what :meth:`decode`
        returns.

        Returns:
            ``(width, height)``, or ``(0, 0)`` when the header is unreadable.
        """
        try:
            with Image.open(path) as img:
                width, height = img.size
                orientation = img.getexif().get(_EXIF_ORIENTATION_TAG)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.debug(f"Header sniff failed for {path}: {e}")
            return 0, 0

        if orientation in _TRANSPOSING_ORIENTATIONS:
            width, height = height, width
        return width, height

    def decode(self, path: str | Path) -> Image.Image:
        """Fully decode an image file into an upright RGB raster.

        Raises:
            DecodeError: If the file cannot be opened or decoded
        """
        try:
            with Image.open(path) as img:
                img.load()
                upright = ImageOps.exif_transpose(img)
                return upright.convert("RGB")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError(f"Failed to decode {path}: {e}") from e

    def resize(self, raster: Image.Image, width: int, height: int, mode: ResizeMode) -> Image.Image:
        """Resize to exactly ``(width, height)``.

        Args:
            raster: Source raster
            width: Target width in pixels
            height: Target height in pixels
            mode: ``"area"`` (area averaging, for shrinking) or ``"linear"``

        Raises:
            ResampleError: If the target size is invalid or Pillow fails
        """
        if width < 1 or height < 1:
            raise ResampleError(f"Invalid target size {width}x{height}")
        try:
            return raster.resize((width, height), _RESIZE_FILTERS[mode])
        except (OSError, ValueError) as e:
            raise ResampleError(f"Failed to resize to {width}x{height}: {e}") from e

    def concat_horizontal(self, left: Image.Image, right: Image.Image) -> Image.Image:
        """Place ``left`` and ``right`` side by side.

        Both rasters must already have the same height.

        Raises:
            ResampleError: If the heights differ
        """
        if left.height != right.height:
            raise ResampleError(
                f"Cannot concatenate rasters of different heights "
                f"({left.height} and {right.height})"
            )
        canvas = Image.new("RGB", (left.width + right.width, left.height))
        canvas.paste(left, (0, 0))
        canvas.paste(right, (left.width, 0))
        return canvas

    def write(self, raster: Image.Image, path: str | Path) -> None:
        """Save a raster, choosing encoder settings from the file suffix.

        Raises:
            WriteError: If the file cannot be written
        """
        path = Path(path)
        fmt = path.suffix[1:].upper()
        if fmt == "JPG":
            fmt = "JPEG"

        save_params: dict[str, Any] = {"format": fmt}
        if fmt == "JPEG":
            save_params.update(
                {
                    "quality": self.jpeg_quality,
                    "optimize": True,
                    "progressive": True,
                }
            )
        elif fmt == "PNG":
            save_params["compress_level"] = 6

        try:
            raster.save(path, **save_params)
        except (OSError, ValueError, KeyError) as e:
            raise WriteError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {raster.width}x{raster.height} raster to {path}")
