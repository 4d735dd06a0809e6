"""Core functionality for wallpaper generation.

This module provides the core components of wallpp:

- **WallppConfig**: Configuration management using Pydantic Settings
- **probe / build_catalog**: Image metadata probing
- **SizeNormalizer**: Height band normalization
- **WallpaperCache**: Persistent record of produced composites
- **CollageAssembler**: Greedy composite assembly
- **WallpaperGenerator**: Run orchestration
- **upscaler_registry**: Registry of upscaler adapters

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration (WALLPP_ prefix)
   - Output directory created on initialisation

2. **Collaborator Layer** (raster.py, upscaler_adapters.py, adapters/):
   - Pillow decode / resize / concatenate / write
   - Swappable upscalers (Lanczos, TorchScript super-resolution)

3. **Algorithm Layer** (probe.py, normalizer.py, assembler.py, wallpaper_cache.py):
   - Catalog construction, height policy, greedy assembly, cache reconciliation

4. **Orchestration** (pipeline.py):
   - One run from catalog to persisted cache

Usage Example
-------------
    from wallpp.core import WallppConfig, WallpaperGenerator

    config = WallppConfig(input_dir="photos", output_dir="wallpapers")
    summary = WallpaperGenerator(config).run()
    print(summary.composites_written)
"""

# Import adapters to ensure they're registered
from wallpp.core.adapters import LanczosUpscaler, TorchScriptUpscaler  # noqa: F401
from wallpp.core.assembler import CollageAssembler
from wallpp.core.config import WallppConfig
from wallpp.core.normalizer import SizeNormalizer
from wallpp.core.pipeline import WallpaperGenerator
from wallpp.core.probe import build_catalog, probe
from wallpp.core.upscaler_adapters import UpscalerAdapterBase, upscaler_registry
from wallpp.core.wallpaper_cache import WallpaperCache

__all__ = [
    "CollageAssembler",
    "SizeNormalizer",
    "UpscalerAdapterBase",
    "upscaler_registry",
    "WallpaperCache",
    "WallpaperGenerator",
    "WallppConfig",
    "build_catalog",
    "probe",
]
