"""Configuration management for wallpp.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the WALLPP_ prefix,
and the command line layers its arguments on top as keyword overrides.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Keyword arguments (the CLI passes parsed arguments this way)
2. Environment variables (WALLPP_* prefix)
3. .env file in the working directory
4. Default values defined in WallppConfig

Example .env file:
    WALLPP_INPUT_DIR=~/Pictures/photos
    WALLPP_OUTPUT_DIR=~/Pictures/wallpapers
    WALLPP_UPSCALER=TorchScript-SR
    WALLPP_UPSCALER_MODEL_PATH=models/fsrcnn_x4.pt
    WALLPP_MINIMUM_HEIGHT=1440
    WALLPP_MAXIMUM_HEIGHT=2880

Usage Example
-------------
    from wallpp.core.config import WallppConfig

    config = WallppConfig(input_dir="photos", output_dir="wallpapers")
    print(config.target_ratio)
    print(config.cache_path)

Height Band
-----------
``minimum_height`` and ``maximum_height`` define the band every seed image is
normalized into before a composite is assembled. The defaults (1440..2880)
suit a 1440p display with room for a 2x zoom.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".bmp", ".webp", ".tif", ".tiff"]


class WallppConfig(BaseSettings):
    """Main configuration for a wallpaper generation run.

    Attributes
    ----------
    Paths:
        input_dir : Path
            Directory scanned (non-recursively) for source photos
        output_dir : Path
            Directory receiving composites and the cache file
        cache_filename : str
            Name of the cache file inside output_dir

    Upscaler:
        upscaler : str
            Registered upscaler adapter name ("Lanczos" or "TorchScript-SR")
        upscaler_model_path : Path | None
            TorchScript super-resolution model file
        upscaler_model_scale : Literal[2, 4]
            Native scale factor of the model file
        device : str
            Torch device used by model-backed upscalers
        torch_dtype : Literal["float32", "float16", "bfloat16"]
            Torch dtype used by model-backed upscalers

    Layout:
        minimum_height : int
            Lower edge of the height band
        maximum_height : int
            Upper edge of the height band (clamp target)
        desired_ratio_w, desired_ratio_h : int
            Target display aspect ratio

    Output:
        jpeg_quality : int
            JPEG quality for written composites (1-100)
        shuffle_seed : int | None
            Seed for the pool shuffle (None = non-reproducible)
        image_extensions : list[str]
            File suffixes considered when scanning input_dir

    Notes
    -----
    - output_dir is created automatically if it doesn't exist
    - input_dir is never created; a missing input directory is a fatal error
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WALLPP_",
        case_sensitive=False,
    )

    # Paths
    input_dir: Path = Field(
        default=Path("photos"),
        description="Directory scanned for source photos",
    )
    output_dir: Path = Field(
        default=Path("wallpapers"),
        description="Directory receiving composites and the cache file",
    )
    cache_filename: str = Field(
        default="database.json",
        description="Name of the cache file inside output_dir",
    )

    # Upscaler settings
    upscaler: str = Field(
        default="Lanczos",
        description="Registered upscaler adapter name",
    )
    upscaler_model_path: Path | None = Field(
        default=None,
        description="TorchScript super-resolution model file",
    )
    upscaler_model_scale: Literal[2, 4] = Field(
        default=4,
        description="Native scale factor of the super-resolution model",
    )
    device: str = Field(
        default="cpu",
        description="Device to run model-backed upscalers on (cuda/cpu)",
    )
    torch_dtype: Literal["float32", "float16", "bfloat16"] = Field(
        default="float32",
        description="Torch dtype for model-backed upscalers",
    )

    # Layout settings
    minimum_height: int = Field(default=1440, ge=1)
    maximum_height: int = Field(default=2880, ge=1)
    desired_ratio_w: int = Field(default=16, ge=1)
    desired_ratio_h: int = Field(default=9, ge=1)

    # Output settings
    jpeg_quality: int = Field(default=95, ge=1, le=100)
    shuffle_seed: int | None = Field(
        default=None,
        description="Seed for the pool shuffle (None for a random order)",
    )
    image_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS),
        description="File suffixes considered when scanning input_dir",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the output directory.

        Args:
            **kwargs: Configuration overrides (typically from the CLI)
        """
        super().__init__(**kwargs)

        self.output_dir.mkdir(parents=True, exist_ok=True)

    @model_validator(mode="after")
    def _check_height_band(self) -> "WallppConfig":
        if self.maximum_height < self.minimum_height:
            raise ValueError(
                f"maximum_height ({self.maximum_height}) must not be smaller than "
                f"minimum_height ({self.minimum_height})"
            )
        # Composites written to the input directory would be probed as sources
        if self.input_dir.resolve() == self.output_dir.resolve():
            raise ValueError("input_dir and output_dir must be different directories")
        return self

    @property
    def target_ratio(self) -> float:
        """Target aspect ratio (width / height) of every composite."""
        return self.desired_ratio_w / self.desired_ratio_h

    @property
    def cache_path(self) -> Path:
        """Location of the persisted wallpaper cache."""
        return self.output_dir / self.cache_filename
