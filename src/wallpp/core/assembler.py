"""Greedy collage assembly.

A composite starts from one seed image and grows to the left until its
aspect ratio reaches the target ratio ``T``. At each step the assembler
looks for something narrow enough to fit the remaining gap
``T - working_aspect``:

1. the first image in the pool whose ratio is below the gap, else
2. the first cached wallpaper whose composite ratio is below the gap. The
   older composite is absorbed: it leaves the cache, its file is deleted once
   the new composite is written, and its source images are carried over into
   the new wallpaper's provenance.

When neither exists the composite is accepted as is, even if it is still
narrower than ``T``. Matching is first-fit in iteration order, never best-fit;
with a shuffled pool this keeps each step linear in the pool size.

Any decode, resample or write failure propagates to the caller and aborts
the run.
"""

import logging
from pathlib import Path

from PIL import Image

from .models import ImageRecord, Wallpaper
from .normalizer import SizeNormalizer
from .raster import RasterBackend
from .wallpaper_cache import WallpaperCache, delete_composite_file

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".jpg"


def next_output_path(output_dir: Path, suffix: str = OUTPUT_SUFFIX) -> Path:
    """Return ``output_dir/N<suffix>`` for the smallest N not yet on disk."""
    index = 0
    while (output_dir / f"{index}{suffix}").exists():
        index += 1
    return output_dir / f"{index}{suffix}"


class CollageAssembler:
    """Build composites one at a time from a pool of images.

    Attributes:
        backend: Decoder, concatenation and writer
        normalizer: Height normalization policy
        cache: Wallpaper cache shared with the orchestrator
        output_dir: Directory receiving composites
        target_ratio: Aspect ratio every composite grows towards
        min_height: Lower edge of the seed height band
        max_height: Upper edge of the seed height band
        subsumed_count: Cached wallpapers absorbed so far
    """

    def __init__(
        self,
        backend: RasterBackend,
        normalizer: SizeNormalizer,
        cache: WallpaperCache,
        output_dir: Path,
        target_ratio: float,
        min_height: int,
        max_height: int,
    ) -> None:
        self.backend = backend
        self.normalizer = normalizer
        self.cache = cache
        self.output_dir = Path(output_dir)
        self.target_ratio = target_ratio
        self.min_height = min_height
        self.max_height = max_height
        self.subsumed_count = 0

    def assemble_next(self, pool: list[ImageRecord]) -> Wallpaper:
        """Build, write and record one composite, consuming images from ``pool``.

        Args:
            pool: Unplaced images; mutated in place. Must not be empty.

        Returns:
            The wallpaper recorded in the cache for the new composite
        """
        seed = pool.pop()
        logger.info(f"Starting composite from {seed.filename} (ratio {seed.ratio:.3f})")

        composite = self.normalizer.fit(
            self.backend.decode(seed.filepath), self.min_height, self.max_height
        )
        provenance: list[ImageRecord] = [seed]
        superseded: list[ImageRecord] = []
        working_aspect = composite.width / composite.height

        while working_aspect < self.target_ratio:
            gap = self.target_ratio - working_aspect

            candidate = self._take_from_pool(pool, gap)
            if candidate is not None:
                provenance.append(candidate)
                logger.info(f"  + {candidate.filename} (ratio {candidate.ratio:.3f})")
            else:
                absorbed = self.cache.take_fitting(gap)
                if absorbed is None:
                    logger.info(
                        f"  no candidate narrower than {gap:.3f}, accepting ratio {working_aspect:.3f}"
                    )
                    break
                candidate = absorbed.composite_image
                superseded.append(candidate)
                provenance = list(absorbed.source_images) + provenance
                logger.info(
                    f"  + cached composite {candidate.filename} "
                    f"({len(absorbed.source_images)} sources, ratio {candidate.ratio:.3f})"
                )

            composite = self._attach_left(composite, candidate)
            working_aspect = composite.width / composite.height

        output_path = next_output_path(self.output_dir)
        self.backend.write(composite, output_path)
        logger.info(
            f"Wrote {output_path} ({composite.width}x{composite.height}, "
            f"{len(provenance)} sources)"
        )

        for old in superseded:
            delete_composite_file(old)
        self.subsumed_count += len(superseded)

        wallpaper = Wallpaper(
            composite_image=ImageRecord(
                filepath=str(output_path.resolve()),
                filename=output_path.name,
                ratio=composite.width / composite.height,
            ),
            source_images=provenance,
        )
        self.cache.record_composite(wallpaper)
        return wallpaper

    def _take_from_pool(self, pool: list[ImageRecord], gap: float) -> ImageRecord | None:
        """Remove and return the first pool image with ``ratio < gap``."""
        for index, image in enumerate(pool):
            if image.ratio < gap:
                return pool.pop(index)
        return None

    def _attach_left(self, composite: Image.Image, candidate: ImageRecord) -> Image.Image:
        """Match ``candidate`` to the composite's height and place it on the left."""
        height = composite.height
        raster = self.normalizer.fit(self.backend.decode(candidate.filepath), height, height)
        return self.backend.concat_horizontal(raster, composite)
