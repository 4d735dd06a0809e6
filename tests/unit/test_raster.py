"""Tests for wallpp.core.raster — the Pillow-backed raster collaborator."""

from pathlib import Path

import pytest
from PIL import Image

from wallpp.core.errors import DecodeError, ResampleError, WriteError
from wallpp.core.raster import RasterBackend


class TestSniffSize:
    def test_reads_header_dimensions(self, backend: RasterBackend, make_image, temp_dir: Path):
        path = make_image(temp_dir, "wide.png", (30, 10))
        assert backend.sniff_size(path) == (30, 10)

    def test_garbage_file_yields_zero(self, backend: RasterBackend, temp_dir: Path):
        path = temp_dir / "broken.jpg"
        path.write_bytes(b"not an image at all")
        assert backend.sniff_size(path) == (0, 0)

    def test_rotated_exif_swaps_dimensions(self, backend: RasterBackend, temp_dir: Path):
        path = temp_dir / "rotated.jpg"
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 CW on display
        Image.new("RGB", (40, 20), "blue").save(path, exif=exif)

        assert backend.sniff_size(path) == (20, 40)
        assert backend.decode(path).size == (20, 40)


class TestDecode:
    def test_returns_rgb_raster(self, backend: RasterBackend, temp_dir: Path):
        path = temp_dir / "grey.png"
        Image.new("L", (5, 6), 128).save(path)
        raster = backend.decode(path)
        assert raster.mode == "RGB"
        assert raster.size == (5, 6)

    def test_missing_file_raises(self, backend: RasterBackend, temp_dir: Path):
        with pytest.raises(DecodeError):
            backend.decode(temp_dir / "nope.png")


class TestResize:
    def test_exact_target_size(self, backend: RasterBackend):
        raster = Image.new("RGB", (100, 50))
        assert backend.resize(raster, 40, 20, "area").size == (40, 20)
        assert backend.resize(raster, 300, 150, "linear").size == (300, 150)

    def test_zero_size_rejected(self, backend: RasterBackend):
        with pytest.raises(ResampleError):
            backend.resize(Image.new("RGB", (10, 10)), 0, 10, "area")


class TestConcatHorizontal:
    def test_left_then_right(self, backend: RasterBackend):
        left = Image.new("RGB", (3, 4), (0, 0, 255))
        right = Image.new("RGB", (5, 4), (255, 0, 0))

        result = backend.concat_horizontal(left, right)

        assert result.size == (8, 4)
        assert result.getpixel((0, 0)) == (0, 0, 255)
        assert result.getpixel((7, 3)) == (255, 0, 0)

    def test_height_mismatch_rejected(self, backend: RasterBackend):
        with pytest.raises(ResampleError):
            backend.concat_horizontal(Image.new("RGB", (3, 4)), Image.new("RGB", (3, 5)))


class TestWrite:
    def test_writes_jpeg(self, backend: RasterBackend, temp_dir: Path):
        path = temp_dir / "0.jpg"
        backend.write(Image.new("RGB", (16, 9), "green"), path)
        with Image.open(path) as img:
            assert img.format == "JPEG"
            assert img.size == (16, 9)

    def test_missing_directory_raises(self, backend: RasterBackend, temp_dir: Path):
        with pytest.raises(WriteError):
            backend.write(Image.new("RGB", (4, 4)), temp_dir / "missing" / "0.jpg")
