"""Run orchestration: from a photo directory to a set of wallpapers."""

import logging
import random
from typing import Optional

from .assembler import CollageAssembler
from .config import WallppConfig
from .errors import ResampleError
from .models import RunSummary
from .normalizer import SizeNormalizer
from .probe import build_catalog
from .raster import RasterBackend
from .upscaler_adapters import UpscalerAdapterBase, upscaler_registry
from .wallpaper_cache import WallpaperCache

logger = logging.getLogger(__name__)


class WallpaperGenerator:
    """Drive one complete wallpaper generation run.

    A run performs these steps, in order:

    1. Probe the input directory into a catalog
    2. Load the cache from the output directory
    3. Invalidate cached wallpapers whose sources disappeared
    4. Shuffle the images no surviving wallpaper accounts for
    5. Assemble composites until that pool is empty
    6. Persist the cache

    Only step 6 writes the cache. If the run fails earlier, composites
    already written stay on disk without a cache record.
    """

    def __init__(
        self,
        config: WallppConfig,
        upscaler: Optional[UpscalerAdapterBase] = None,
        backend: Optional[RasterBackend] = None,
    ):
        """
        Initialize the generator.

        Args:
            config: Run configuration.
            upscaler: Upscaler to use. If None, instantiates ``config.upscaler``
                from the registry.
            backend: Raster backend. If None, a Pillow backend using
                ``config.jpeg_quality`` is created.
        """
        self.config = config
        self.backend = backend or RasterBackend(jpeg_quality=config.jpeg_quality)
        if upscaler is None:
            try:
                upscaler = upscaler_registry.instantiate(config.upscaler, config)
            except KeyError as e:
                raise ResampleError(str(e)) from e
        self.upscaler = upscaler
        self.normalizer = SizeNormalizer(self.backend, self.upscaler)

        logger.info(
            f"Initialized WallpaperGenerator: {config.input_dir} -> {config.output_dir} "
            f"(ratio {config.desired_ratio_w}:{config.desired_ratio_h}, "
            f"heights {config.minimum_height}-{config.maximum_height}, upscaler {self.upscaler.name})"
        )

    def run(self) -> RunSummary:
        """Execute the run.

        Returns:
            Counters describing what the run did

        Raises:
            WallppError: On any fatal error (see ``wallpp.core.errors``)
        """
        summary = RunSummary()

        catalog = build_catalog(self.config.input_dir, self.backend, self.config.image_extensions)
        summary.catalog_size = len(catalog)

        cache = WallpaperCache.load(self.config.cache_path)
        summary.invalidated = len(cache.delete_missing(catalog))

        pool = cache.filter_regenerated(catalog)
        random.Random(self.config.shuffle_seed).shuffle(pool)
        summary.regenerated = len(pool)
        logger.info(
            f"{len(pool)} of {len(catalog)} images need processing, "
            f"{len(cache)} cached wallpapers kept"
        )

        assembler = CollageAssembler(
            backend=self.backend,
            normalizer=self.normalizer,
            cache=cache,
            output_dir=self.config.output_dir,
            target_ratio=self.config.target_ratio,
            min_height=self.config.minimum_height,
            max_height=self.config.maximum_height,
        )

        try:
            while pool:
                assembler.assemble_next(pool)
                summary.composites_written += 1
        finally:
            self.upscaler.unload_model()

        summary.composites_subsumed = assembler.subsumed_count
        cache.persist(self.config.cache_path)

        logger.info(
            f"Done: {summary.composites_written} composites written, "
            f"{summary.composites_subsumed} absorbed, {summary.invalidated} invalidated"
        )
        return summary
