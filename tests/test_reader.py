"""Tests for image loading into pixel buffers."""

import numpy as np
import pytest
from PIL import Image

from dot_maker.core.errors import EmptyBuffer
from dot_maker.core.reader import MAX_SIZE, PixelBuffer, fit_size, load_image


class TestPixelBuffer:
    def test_from_bytes(self):
        raw = bytes([255, 0, 0, 255, 0, 255, 0, 255, 0, 0, 255, 255, 9, 9, 9, 0])
        buf = PixelBuffer.from_bytes(2, 2, raw)
        assert buf.data.shape == (2, 2, 4)
        assert buf.data[0, 1].tolist() == [0, 255, 0, 255]
        assert buf.data[1, 1].tolist() == [9, 9, 9, 0]

    def test_from_bytes_wrong_length(self):
        with pytest.raises(EmptyBuffer):
            PixelBuffer.from_bytes(2, 2, bytes(12))

    def test_from_bytes_empty(self):
        with pytest.raises(EmptyBuffer):
            PixelBuffer.from_bytes(0, 0, b"")

    def test_image_round_trip(self):
        img = Image.new("RGB", (5, 3), (10, 20, 30))
        buf = PixelBuffer.from_image(img)
        assert (buf.width, buf.height) == (5, 3)
        assert buf.data[..., 3].min() == 255
        back = buf.to_image()
        assert back.mode == "RGBA"
        assert back.getpixel((4, 2)) == (10, 20, 30, 255)

    def test_validate_shape_mismatch(self):
        buf = PixelBuffer(4, 4, np.zeros((4, 3, 4), dtype=np.uint8))
        with pytest.raises(EmptyBuffer, match="does not match"):
            buf.validate()


class TestFitSize:
    def test_small_unchanged(self):
        assert fit_size(640, 480) == (640, 480)

    def test_wide(self):
        assert fit_size(1600, 400) == (800, 200)

    def test_tall(self):
        assert fit_size(300, 1200, max_size=600) == (150, 600)


class TestLoadImage:
    def test_loads_png(self, tmp_path):
        path = tmp_path / "in.png"
        Image.new("RGB", (40, 30), (255, 0, 0)).save(path)
        buf = load_image(path)
        assert (buf.width, buf.height) == (40, 30)
        assert buf.data[0, 0].tolist() == [255, 0, 0, 255]

    def test_downscales_large_image(self, tmp_path):
        path = tmp_path / "big.jpg"
        Image.new("RGB", (1600, 1000), (0, 0, 255)).save(path)
        buf = load_image(path)
        assert max(buf.width, buf.height) == MAX_SIZE
        assert (buf.width, buf.height) == (800, 500)

    def test_custom_max_size(self, tmp_path):
        path = tmp_path / "in.png"
        Image.new("RGB", (100, 50)).save(path)
        buf = load_image(path, max_size=20)
        assert (buf.width, buf.height) == (20, 10)

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_image("/nonexistent/image.png")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError, match="Unsupported"):
            load_image(path)

    def test_corrupt_image(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not really a png")
        with pytest.raises(ValueError, match="Cannot decode"):
            load_image(path)
