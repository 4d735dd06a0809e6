"""Shared pytest fixtures for wallpp tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from PIL import Image

from wallpp.core.config import WallppConfig
from wallpp.core.models import ImageRecord
from wallpp.core.normalizer import SizeNormalizer
from wallpp.core.raster import RasterBackend
from wallpp.core.upscaler_adapters import UpscalerAdapterBase


class RecordingUpscaler(UpscalerAdapterBase):
    """Nearest-neighbour upscaler that remembers every factor it was asked for."""

    name = "Recording"
    description = "Test double"

    def __init__(self, config: WallppConfig) -> None:
        super().__init__(config)
        self.factors: list[int] = []
        self.unloaded = False

    def load_model(self) -> None:
        pass

    def _upscale(self, raster: Image.Image, factor: int) -> Image.Image:
        self.factors.append(factor)
        return raster.resize((raster.width * factor, raster.height * factor), Image.Resampling.NEAREST)

    def unload_model(self) -> None:
        self.unloaded = True

    @property
    def is_loaded(self) -> bool:
        return True


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> WallppConfig:
    """Create a test configuration with a small height band.

    Heights of 20..40 pixels keep every raster in the tests tiny.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        WallppConfig instance for testing
    """
    inputs_dir = temp_dir / "photos"
    inputs_dir.mkdir()

    return WallppConfig(
        input_dir=str(inputs_dir),
        output_dir=str(temp_dir / "wallpapers"),
        upscaler="Lanczos",
        minimum_height=20,
        maximum_height=40,
        desired_ratio_w=16,
        desired_ratio_h=9,
        shuffle_seed=1234,
        _env_file=None,
    )


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Factory writing a solid-colour image file.

    Returns:
        Callable ``(directory, name, size, color="red") -> Path``
    """

    def _make(directory: Path, name: str, size: tuple[int, int], color="red") -> Path:
        path = Path(directory) / name
        Image.new("RGB", size, color=color).save(path)
        return path

    return _make


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    """Factory for records that don't need a file on disk."""

    def _make(filename: str, ratio: float = 1.0, directory: str = "/photos") -> ImageRecord:
        return ImageRecord(filepath=f"{directory}/{filename}", filename=filename, ratio=ratio)

    return _make


@pytest.fixture
def backend() -> RasterBackend:
    """Pillow raster backend."""
    return RasterBackend(jpeg_quality=95)


@pytest.fixture
def recording_upscaler(test_config: WallppConfig) -> RecordingUpscaler:
    """Upscaler double that records requested factors."""
    return RecordingUpscaler(test_config)


@pytest.fixture
def normalizer(backend: RasterBackend, recording_upscaler: RecordingUpscaler) -> SizeNormalizer:
    """Size normalizer wired to the recording upscaler."""
    return SizeNormalizer(backend, recording_upscaler)
