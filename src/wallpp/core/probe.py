"""Image metadata probing and catalog construction.

:func:`probe` turns one file into an :class:`ImageRecord`. It reads the
dimensions from the file header first, which is fast even for very large
photos, and only decodes the whole file when the header does not give a
usable size.

:func:`build_catalog` probes every candidate file in a directory. A file
that cannot be probed is logged and skipped; one bad photo never stops a run.
"""

import logging
from pathlib import Path
from typing import Iterable

from .errors import DecodeError, PathError, ProbeError
from .models import ImageRecord
from .raster import RasterBackend

logger = logging.getLogger(__name__)


def probe(path: str | Path, backend: RasterBackend) -> ImageRecord:
    """Resolve ``path`` to an :class:`ImageRecord`.

    Args:
        path: Image file to probe
        backend: Raster backend used for the header sniff and decode fallback

    Returns:
        Record with the canonical path, file name and width / height ratio

    Raises:
        ProbeError: If the file cannot be opened or has no usable dimensions
    """
    try:
        resolved = Path(path).resolve(strict=True)
    except (FileNotFoundError, RuntimeError) as e:
        raise ProbeError(f"Cannot open {path}: {e}") from e

    width, height = backend.sniff_size(resolved)

    if width == 0 or height == 0:
        logger.debug(f"Header of {resolved.name} has no usable size, decoding fully")
        try:
            raster = backend.decode(resolved)
        except DecodeError as e:
            raise ProbeError(f"Cannot read dimensions of {resolved}: {e}") from e
        width, height = raster.size

    if width == 0 or height == 0:
        raise ProbeError(f"Image {resolved} has zero width or height ({width}x{height})")

    return ImageRecord(filepath=str(resolved), filename=resolved.name, ratio=width / height)


def build_catalog(
    directory: str | Path,
    backend: RasterBackend,
    extensions: Iterable[str] | None = None,
) -> list[ImageRecord]:
    """Probe every image file directly inside ``directory``.

    The listing is not recursive and is sorted by file name so the catalog
    order is stable between runs.

    Args:
        directory: Directory to scan
        backend: Raster backend passed to :func:`probe`
        extensions: Accepted file suffixes (case-insensitive); None accepts all

    Returns:
        Records for every file that probed successfully

    Raises:
        PathError: If the directory is missing or cannot be listed
    """
    directory = Path(directory)
    allowed = {ext.lower() for ext in extensions} if extensions is not None else None

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise PathError(f"Cannot read input directory {directory}: {e}") from e

    catalog: list[ImageRecord] = []
    for entry in entries:
        if not entry.is_file():
            continue
        if allowed is not None and entry.suffix.lower() not in allowed:
            logger.debug(f"Ignoring {entry.name}: unsupported extension")
            continue

        try:
            catalog.append(probe(entry, backend))
        except ProbeError as e:
            logger.warning(f"Skipping {entry.name}: {e}")

    logger.info(f"Catalog contains {len(catalog)} images from {directory}")
    return catalog
