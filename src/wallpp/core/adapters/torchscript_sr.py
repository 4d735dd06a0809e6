"""TorchScript super-resolution upscaler adapter.

This adapter runs a super-resolution network exported with TorchScript
(FSRCNN, ESPCN, Real-ESRGAN and similar models all export cleanly). The model
file is given by ``WallppConfig.upscaler_model_path``.

Model Contract
--------------
- Input: float tensor ``[1, 3, H, W]`` with values in ``[0, 1]``
- Output: float tensor ``[1, 3, H * s, W * s]`` where ``s`` is the model's
  native scale (``WallppConfig.upscaler_model_scale``)

When the requested factor differs from the native scale (a 4x model asked
for 2x), the network output is resized to exactly ``factor`` times the input
size: area averaging when shrinking, bilinear when enlarging.

Usage Example
-------------
    >>> config = WallppConfig(
    ...     upscaler="TorchScript-SR",
    ...     upscaler_model_path="models/fsrcnn_x4.pt",
    ...     device="cuda",
    ... )
    >>> upscaler = upscaler_registry.instantiate("TorchScript-SR", config)
    >>> bigger = upscaler.upscale(raster, 4)
    >>> upscaler.unload_model()  # Free VRAM/RAM
"""

import logging
from typing import TYPE_CHECKING

import numpy as np
import torch
from PIL import Image

from wallpp.core.config import WallppConfig
from wallpp.core.errors import ResampleError
from wallpp.core.upscaler_adapters import UpscalerAdapterBase, upscaler_registry

if TYPE_CHECKING:
    from torch.jit import ScriptModule

logger = logging.getLogger(__name__)

_DTYPE_MAP = {
    "bfloat16": torch.bfloat16,
    "float16": torch.float16,
    "float32": torch.float32,
}


class TorchScriptUpscaler(UpscalerAdapterBase):
    """Upscale with a TorchScript super-resolution model.

    The model is loaded lazily on the first ``upscale`` call and stays
    resident until :meth:`unload_model`.

    Attributes
    ----------
    model_path : Path | None
        TorchScript file from the configuration
    native_scale : int
        Scale factor the network was trained for
    model : ScriptModule | None
        Loaded network (None until loaded)
    """

    name = "TorchScript-SR"
    description = "Super-resolution with a TorchScript model"
    requires_model = True
    version = "1.0.0"

    def __init__(self, config: WallppConfig) -> None:
        super().__init__(config)
        self.model_path = config.upscaler_model_path
        self.native_scale = config.upscaler_model_scale
        self.model: "ScriptModule | None" = None

    def load_model(self) -> None:
        """Load the TorchScript model onto the configured device.

        Raises
        ------
        ResampleError
            If no model path is configured or loading fails
        """
        if self.model is not None:
            return

        if self.model_path is None:
            raise ResampleError("TorchScript-SR upscaler requires upscaler_model_path to be set")
        if not self.model_path.is_file():
            raise ResampleError(f"Upscaler model not found: {self.model_path}")

        logger.info(f"Loading super-resolution model {self.model_path} on {self.config.device}...")
        try:
            model = torch.jit.load(str(self.model_path), map_location=self.config.device)
            model.eval()
            self.model = model.to(dtype=_DTYPE_MAP[self.config.torch_dtype])
        except (RuntimeError, OSError, ValueError) as e:
            logger.error(f"Failed to load super-resolution model: {e}")
            self.model = None
            raise ResampleError(f"Failed to load upscaler model {self.model_path}: {e}") from e

        logger.info(f"Super-resolution model loaded (native scale {self.native_scale}x)")

    def _upscale(self, raster: Image.Image, factor: int) -> Image.Image:
        assert self.model is not None, "Model should be loaded at this point"

        pixels = np.asarray(raster.convert("RGB"), dtype=np.float32) / 255.0
        tensor = (
            torch.from_numpy(pixels)
            .permute(2, 0, 1)
            .unsqueeze(0)
            .to(device=self.config.device, dtype=_DTYPE_MAP[self.config.torch_dtype])
        )

        try:
            with torch.inference_mode():
                output = self.model(tensor)
        except RuntimeError as e:
            raise ResampleError(f"Super-resolution inference failed: {e}") from e

        result_pixels = (
            output.squeeze(0).float().clamp(0.0, 1.0).mul(255.0).round()
            .to(torch.uint8).permute(1, 2, 0).cpu().numpy()
        )
        result = Image.fromarray(np.ascontiguousarray(result_pixels))

        target = (raster.width * factor, raster.height * factor)
        if result.size != target:
            # Model scale differs from the requested factor
            resample = Image.Resampling.BOX if result.width > target[0] else Image.Resampling.BILINEAR
            result = result.resize(target, resample)
        return result

    def unload_model(self) -> None:
        """Drop the model and free GPU memory if it was on CUDA."""
        if self.model is None:
            return

        self.model = None
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
        logger.info("Super-resolution model unloaded")

    @property
    def is_loaded(self) -> bool:
        return self.model is not None


upscaler_registry.register(TorchScriptUpscaler)
