"""Persistent record of the composites produced by earlier runs.

Layout:

- metadata lives in a single ``database.json`` file in the output directory
- composite image files live next to it (``0.jpg``, ``1.jpg``, ...)
- every wallpaper records the source images that went into it

On each run the cache is reconciled against the current catalog of source
images. A wallpaper whose sources are all still present is kept and its
sources are left out of the regeneration pool. A wallpaper with even one
missing source is invalidated: its file is deleted and its remaining sources
return to the pool.

The cache is loaded once at the start of a run and written once at the end.
Composites written by a run that fails before :meth:`WallpaperCache.persist`
are therefore left on disk without a record ("orphans"); later runs neither
reuse nor delete them. :meth:`WallpaperCache.persist` overwrites the file in
place, so a crash during the write can leave it truncated.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from .errors import CacheParseError, PathError
from .models import CacheDocument, ImageRecord, Wallpaper

logger = logging.getLogger(__name__)


class WallpaperCache:
    """In-memory list of wallpapers with load/persist helpers.

    Create instances with :meth:`load`; pass the same instance to every stage
    of a run.
    """

    def __init__(self, wallpapers: Iterable[Wallpaper] | None = None) -> None:
        self.wallpapers: list[Wallpaper] = list(wallpapers or [])

    def __len__(self) -> int:
        return len(self.wallpapers)

    @classmethod
    def load(cls, path: Path) -> WallpaperCache:
        """Load the cache file, or return an empty cache if it doesn't exist.

        Args:
            path: Path to ``database.json``.

        Returns:
            Cache holding the persisted wallpapers in persisted order.

        Raises:
            CacheParseError: If the file exists but is not a valid cache
                document.
            PathError: If the file exists but cannot be read.
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No cache at {path}, starting empty")
            return cls()

        try:
            with open(path, encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as e:
            raise CacheParseError(f"Cache file {path} is not valid JSON: {e}") from e
        except OSError as e:
            raise PathError(f"Cannot read cache file {path}: {e}") from e

        try:
            document = CacheDocument.model_validate(raw)
        except ValidationError as e:
            raise CacheParseError(f"Cache file {path} has an unexpected shape: {e}") from e

        logger.info(f"Loaded {len(document.wallpapers)} cached wallpapers from {path}")
        return cls(document.wallpapers)

    def persist(self, path: Path) -> None:
        """Write every wallpaper to ``path``, replacing its contents.

        Raises:
            PathError: If the file cannot be written.
        """
        document = CacheDocument(wallpapers=self.wallpapers)
        try:
            with open(path, "w", encoding="utf-8") as handle:
                json.dump(document.model_dump(mode="json", by_alias=True), handle, indent=2)
        except OSError as e:
            raise PathError(f"Cannot write cache file {path}: {e}") from e
        logger.info(f"Saved {len(self.wallpapers)} wallpapers to {path}")

    def delete_missing(self, catalog: Iterable[ImageRecord]) -> list[Wallpaper]:
        """Drop every wallpaper with a source that is no longer in ``catalog``.

        The composite file of each dropped wallpaper is deleted from disk.
        A single missing source invalidates the whole wallpaper, even when its
        other sources are still present.

        Args:
            catalog: Images found in the input directory this run.

        Returns:
            The dropped wallpapers, in cache order.
        """
        present = {image.filename for image in catalog}
        surviving: list[Wallpaper] = []
        dropped: list[Wallpaper] = []

        for wallpaper in self.wallpapers:
            missing = [
                image.filename for image in wallpaper.source_images if image.filename not in present
            ]
            if not missing:
                surviving.append(wallpaper)
                continue

            logger.info(
                f"Invalidating {wallpaper.composite_image.filename}: "
                f"missing sources {', '.join(missing)}"
            )
            delete_composite_file(wallpaper.composite_image)
            dropped.append(wallpaper)

        self.wallpapers = surviving
        return dropped

    def filter_regenerated(self, catalog: Iterable[ImageRecord]) -> list[ImageRecord]:
        """Return catalog images not used by any surviving wallpaper.

        These are the only images the assembler has to process this run.
        Catalog order is kept.
        """
        used: set[str] = set()
        for wallpaper in self.wallpapers:
            used |= wallpaper.source_filenames()
        return [image for image in catalog if image.filename not in used]

    def record_composite(self, wallpaper: Wallpaper) -> None:
        """Append a newly written wallpaper (in memory only)."""
        self.wallpapers.append(wallpaper)

    def take_fitting(self, max_ratio: float) -> Wallpaper | None:
        """Remove and return the first wallpaper narrower than ``max_ratio``.

        Used when a composite in progress absorbs an older one.

        Args:
            max_ratio: Exclusive upper bound on the composite's ratio.

        Returns:
            The removed wallpaper, or None if none fits.
        """
        for index, wallpaper in enumerate(self.wallpapers):
            if wallpaper.composite_image.ratio < max_ratio:
                return self.wallpapers.pop(index)
        return None


def delete_composite_file(composite: ImageRecord) -> None:
    """Delete a composite's file; a file that is already gone is only logged.

    Raises:
        PathError: If the file exists but cannot be removed.
    """
    path = Path(composite.filepath)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning(f"Composite {path} was already deleted")
        return
    except OSError as e:
        raise PathError(f"Cannot delete composite {path}: {e}") from e
    logger.info(f"Deleted composite {path}")
