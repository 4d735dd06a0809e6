"""Lanczos upscaler adapter.

Filter-based enlargement with Pillow. It needs no model file, which makes it
the default upscaler and the one used throughout the test suite.
"""

import logging

from PIL import Image

from wallpp.core.errors import ResampleError
from wallpp.core.upscaler_adapters import UpscalerAdapterBase, upscaler_registry

logger = logging.getLogger(__name__)


class LanczosUpscaler(UpscalerAdapterBase):
    """Upscale with a Lanczos filter."""

    name = "Lanczos"
    description = "Pillow Lanczos resampling (no model required)"
    requires_model = False
    version = "1.0.0"

    def load_model(self) -> None:
        """Nothing to load for a filter-based upscaler."""
        pass

    def _upscale(self, raster: Image.Image, factor: int) -> Image.Image:
        try:
            return raster.resize(
                (raster.width * factor, raster.height * factor),
                Image.Resampling.LANCZOS,
            )
        except (OSError, ValueError) as e:
            raise ResampleError(f"Lanczos upscale failed: {e}") from e

    def unload_model(self) -> None:
        pass

    @property
    def is_loaded(self) -> bool:
        return True


upscaler_registry.register(LanczosUpscaler)
