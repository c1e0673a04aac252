import io
import logging

import numpy as np
import pytest
from PIL import Image

from conftest import make_image, encode, decode
from imgproc.services.image_processor import ImageProcessor, ImageProcessingError


def test_decode_returns_bgr_array(png_bytes):
    img = ImageProcessor.decode(png_bytes)
    assert img.dtype == np.uint8
    assert img.shape == (400, 600, 3)
    np.testing.assert_array_equal(img, make_image())


def test_decode_drops_alpha_channel():
    buf = io.BytesIO()
    Image.new("RGBA", (32, 16), (255, 0, 0, 128)).save(buf, format="PNG")
    img = ImageProcessor.decode(buf.getvalue())
    assert img.shape == (16, 32, 3)
    # red in BGR order
    assert tuple(img[0, 0]) == (0, 0, 255)


def test_decode_garbage():
    with pytest.raises(ImageProcessingError) as exc:
        ImageProcessor.decode(b"\x00\x01\x02")
    assert exc.value.message == "Failed to decode image"


def test_decode_truncated_image(png_bytes):
    with pytest.raises(ImageProcessingError):
        ImageProcessor.decode(png_bytes[: len(png_bytes) // 2])


def test_encode_unknown_extension_reports_operation():
    with pytest.raises(ImageProcessingError) as exc:
        ImageProcessor.encode(make_image(8, 8), ".nope", error="Failed to compress image size")
    assert exc.value.message == "Failed to compress image size"


@pytest.mark.parametrize("width, height, expected", [
    (1000, 1000, (1000, 1000)),
    (300, 0, (300, 200)),
    (0, 200, (300, 200)),
    (-5, 40, (60, 40)),
    (1, -1, (1, 1)),
])
def test_target_size(width, height, expected):
    assert ImageProcessor.target_size(make_image(600, 400), width, height) == expected


def test_convert_to_jpeg(png_bytes):
    out = ImageProcessor.convert_to_jpeg(png_bytes)
    assert out[:2] == b"\xff\xd8"
    assert decode(out).shape == (400, 600, 3)


def test_resize_ignores_aspect_ratio(jpeg_bytes):
    out = ImageProcessor.resize(jpeg_bytes, 1000, 1000, ".jpg")
    assert decode(out).shape == (1000, 1000, 3)


def test_compress_jpeg_is_smaller(jpeg_bytes):
    out = ImageProcessor.compress(jpeg_bytes, ".jpg")
    assert out[:2] == b"\xff\xd8"
    assert len(out) < len(jpeg_bytes)


def test_compress_png_keeps_pixels(png_bytes):
    out = ImageProcessor.compress(png_bytes, ".png")
    assert len(out) < len(png_bytes)
    # PNG compression is lossless
    np.testing.assert_array_equal(decode(out), make_image())


def test_operations_are_logged(caplog, png_bytes):
    caplog.set_level(logging.INFO, logger="imgproc.services.image_processor")
    ImageProcessor.resize(png_bytes, 60, 40, ".png")
    ImageProcessor.compress(encode(make_image(), ".jpg"), ".jpg")

    messages = [r.getMessage() for r in caplog.records]
    assert "=== RESIZER ===" in messages
    assert "Original\t: 600 x 400" in messages
    assert "Resized\t: 60 x 40" in messages
    assert "=== COMPRESSOR ===" in messages
