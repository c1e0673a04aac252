import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from imgproc.main import app


def make_image(width: int = 600, height: int = 400) -> np.ndarray:
    """Smooth BGR gradient, compresses predictably."""
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[..., 0] = np.linspace(0, 255, width, dtype=np.uint8)[None, :]
    img[..., 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, None]
    img[..., 2] = 128
    return img


def encode(img: np.ndarray, ext: str, params=None) -> bytes:
    ok, buf = cv2.imencode(ext, img, params or [])
    assert ok
    return buf.tobytes()


def decode(data: bytes) -> np.ndarray:
    return cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_COLOR)


@pytest.fixture
def client():
    # unhandled errors must come back as 500 envelopes, not re-raise
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def png_bytes() -> bytes:
    # uncompressed so level 5 always shrinks it
    return encode(make_image(), ".png", [cv2.IMWRITE_PNG_COMPRESSION, 0])


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode(make_image(), ".jpg", [cv2.IMWRITE_JPEG_QUALITY, 100])


@pytest.fixture
def svg_bytes() -> bytes:
    return (
        b'<svg xmlns="http://www.w3.org/2000/svg" width="600" height="400">'
        b'<rect width="600" height="400" fill="#ccc"/></svg>'
    )
