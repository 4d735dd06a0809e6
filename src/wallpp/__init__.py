"""wallpp - turn a folder of photos into fixed-aspect-ratio desktop wallpapers."""

__version__ = "0.3.0"

from wallpp.core.config import WallppConfig
from wallpp.core.pipeline import WallpaperGenerator
from wallpp.core.upscaler_adapters import UpscalerAdapterBase, upscaler_registry

# Import adapters to ensure they're registered
from wallpp.core.adapters import LanczosUpscaler, TorchScriptUpscaler  # noqa: F401

__all__ = [
    "UpscalerAdapterBase",
    "upscaler_registry",
    "WallppConfig",
    "WallpaperGenerator",
    "LanczosUpscaler",
    "TorchScriptUpscaler",
]
