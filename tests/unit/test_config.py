"""Tests for wallpp.core.config — configuration management.

Tests cover:
- Default values for the height band, ratio and upscaler settings.
- Environment variable overrides via the WALLPP_ prefix.
- Automatic output directory creation on initialisation.
- Pydantic validation constraints (band order, quality range, model scale).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from wallpp.core.config import WallppConfig


class TestConfigDefaults:
    """Verify that WallppConfig provides the documented defaults."""

    def test_default_height_band(self, temp_dir: Path):
        cfg = WallppConfig(output_dir=str(temp_dir / "out"), _env_file=None)
        assert cfg.minimum_height == 1440
        assert cfg.maximum_height == 2880

    def test_default_ratio_is_16_by_9(self, temp_dir: Path):
        cfg = WallppConfig(output_dir=str(temp_dir / "out"), _env_file=None)
        assert cfg.desired_ratio_w == 16
        assert cfg.desired_ratio_h == 9
        assert cfg.target_ratio == pytest.approx(16 / 9)

    def test_default_upscaler_needs_no_model(self, temp_dir: Path):
        cfg = WallppConfig(output_dir=str(temp_dir / "out"), _env_file=None)
        assert cfg.upscaler == "Lanczos"
        assert cfg.upscaler_model_path is None
        assert cfg.upscaler_model_scale == 4

    def test_cache_path_inside_output_dir(self, test_config: WallppConfig):
        assert test_config.cache_path == test_config.output_dir / "database.json"

    def test_default_extensions_include_common_formats(self, test_config: WallppConfig):
        assert ".jpg" in test_config.image_extensions
        assert ".png" in test_config.image_extensions


class TestConfigEnvironment:
    """Verify WALLPP_ environment variable overrides."""

    def test_env_overrides_heights(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("WALLPP_MINIMUM_HEIGHT", "720")
        monkeypatch.setenv("WALLPP_MAXIMUM_HEIGHT", "1080")
        cfg = WallppConfig(output_dir=str(temp_dir / "out"), _env_file=None)
        assert cfg.minimum_height == 720
        assert cfg.maximum_height == 1080

    def test_keyword_overrides_env(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("WALLPP_DESIRED_RATIO_W", "21")
        cfg = WallppConfig(output_dir=str(temp_dir / "out"), desired_ratio_w=4, _env_file=None)
        assert cfg.desired_ratio_w == 4


class TestConfigDirectoryCreation:
    """Verify that WallppConfig creates the output directory."""

    def test_output_dir_created(self, test_config: WallppConfig):
        assert test_config.output_dir.is_dir()

    def test_creates_nested_output_dir(self, temp_dir: Path):
        deep = temp_dir / "a" / "b" / "c" / "wallpapers"
        cfg = WallppConfig(output_dir=str(deep), _env_file=None)
        assert cfg.output_dir.is_dir()

    def test_input_dir_not_created(self, temp_dir: Path):
        cfg = WallppConfig(
            input_dir=str(temp_dir / "missing"),
            output_dir=str(temp_dir / "out"),
            _env_file=None,
        )
        assert not cfg.input_dir.exists()


class TestConfigValidation:
    """Verify Pydantic validation constraints on config fields."""

    def test_inverted_band_rejected(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            WallppConfig(
                output_dir=str(temp_dir / "out"),
                minimum_height=3000,
                maximum_height=2000,
                _env_file=None,
            )

    def test_equal_band_accepted(self, temp_dir: Path):
        cfg = WallppConfig(
            output_dir=str(temp_dir / "out"),
            minimum_height=1080,
            maximum_height=1080,
            _env_file=None,
        )
        assert cfg.minimum_height == cfg.maximum_height == 1080

    def test_zero_height_rejected(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            WallppConfig(output_dir=str(temp_dir / "out"), minimum_height=0, _env_file=None)

    def test_quality_out_of_range(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            WallppConfig(output_dir=str(temp_dir / "out"), jpeg_quality=101, _env_file=None)

    def test_unsupported_model_scale(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            WallppConfig(output_dir=str(temp_dir / "out"), upscaler_model_scale=3, _env_file=None)

    def test_same_input_and_output_rejected(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            WallppConfig(input_dir=str(temp_dir), output_dir=str(temp_dir), _env_file=None)
