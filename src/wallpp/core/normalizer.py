"""Height normalization for rasters entering a composite.

The policy has two stages:

1. **Upscale** with the configured upscaler. If doubling the height still
   falls short of ``min_height`` the raster is enlarged 4x, otherwise a raster
   shorter than ``min_height`` is enlarged 2x. At most one upscale is applied
   per call.
2. **Clamp** anything still outside ``[min_height, max_height]`` to exactly
   ``max_height``, keeping the aspect ratio (area averaging when shrinking,
   bilinear when enlarging).

The clamp targets ``max_height`` even when the raster is too short, so a
short raster is taken all the way to the top of the band rather than to its
bottom.

Calling :meth:`SizeNormalizer.fit` with ``min_height == max_height == h``
therefore always yields a raster exactly ``h`` pixels high; the assembler
relies on this to match a candidate to the composite it joins.
"""

import logging

from PIL import Image

from .raster import RasterBackend
from .upscaler_adapters import UpscalerAdapterBase

logger = logging.getLogger(__name__)


class SizeNormalizer:
    """Bring a raster's height into a target band."""

    def __init__(self, backend: RasterBackend, upscaler: UpscalerAdapterBase) -> None:
        self.backend = backend
        self.upscaler = upscaler

    def fit(self, raster: Image.Image, min_height: int, max_height: int) -> Image.Image:
        """Return ``raster`` rescaled into ``[min_height, max_height]``.

        Args:
            raster: Source raster
            min_height: Lower edge of the band
            max_height: Upper edge of the band, and the clamp target

        Returns:
            Normalized raster (the input itself when already in band)

        Raises:
            ResampleError: If the upscaler or resize fails
        """
        if raster.height * 2 < min_height:
            raster = self.upscaler.upscale(raster, 4)
        elif raster.height < min_height:
            raster = self.upscaler.upscale(raster, 2)

        if raster.height < min_height or raster.height > max_height:
            scale = max_height / raster.height
            new_width = max(1, round(raster.width * scale))
            mode = "area" if scale < 1 else "linear"
            logger.debug(
                f"Clamping {raster.width}x{raster.height} to {new_width}x{max_height} ({mode})"
            )
            raster = self.backend.resize(raster, new_width, max_height, mode)

        return raster
