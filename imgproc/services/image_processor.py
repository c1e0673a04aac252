from PIL import Image, UnidentifiedImageError
import cv2
import numpy as np
import io
import logging
from typing import Tuple

logger = logging.getLogger(__name__)

JPEG_COMPRESS_QUALITY = 50
PNG_COMPRESS_LEVEL = 5

class ImageProcessingError(Exception):
    """Decode, resize or encode failure; ``message`` is returned to the client."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ImageProcessor:
    @staticmethod
    def decode(contents: bytes) -> np.ndarray:
        """Decode raw upload bytes into a BGR colour array."""
        try:
            with Image.open(io.BytesIO(contents)) as image:
                rgb = np.array(image.convert("RGB"))
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            logger.warning("Image decode failed: %s", e)
            raise ImageProcessingError("Failed to decode image") from e

        if rgb.ndim != 3 or rgb.shape[0] == 0 or rgb.shape[1] == 0:
            raise ImageProcessingError("Failed to decode image")
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    @staticmethod
    def encode(image: np.ndarray, ext: str, params=None, error: str = "Failed to encode image") -> bytes:
        try:
            ok, buf = cv2.imencode(ext, image, params or [])
        except cv2.error as e:
            logger.warning("Image encode to %s failed: %s", ext, e)
            raise ImageProcessingError(error) from e
        if not ok:
            raise ImageProcessingError(error)
        return buf.tobytes()

    @staticmethod
    def target_size(image: np.ndarray, width: int, height: int) -> Tuple[int, int]:
        """
        Resolve the requested output size.

        A non-positive side is derived from the other one so the source
        aspect ratio is kept; callers reject the case where both are <= 0.
        """
        src_h, src_w = image.shape[:2]
        if width <= 0:
            width = max(1, round(src_w * height / src_h))
        if height <= 0:
            height = max(1, round(src_h * width / src_w))
        return width, height

    @staticmethod
    def convert_to_jpeg(contents: bytes) -> bytes:
        image = ImageProcessor.decode(contents)
        result = ImageProcessor.encode(image, ".jpg", error="Failed to convert image to JPG")

        logger.info("=== CONVERTER ===")
        logger.info("From PNG to JPG")
        return result

    @staticmethod
    def resize(contents: bytes, width: int, height: int, ext: str) -> bytes:
        image = ImageProcessor.decode(contents)
        size = ImageProcessor.target_size(image, width, height)
        try:
            resized = cv2.resize(image, size, interpolation=cv2.INTER_LINEAR)
        except cv2.error as e:
            logger.warning("Image resize to %sx%s failed: %s", size[0], size[1], e)
            raise ImageProcessingError("Failed to resize image dimension") from e
        result = ImageProcessor.encode(resized, ext, error="Failed to resize image dimension")

        logger.info("=== RESIZER ===")
        logger.info("Original\t: %d x %d", image.shape[1], image.shape[0])
        logger.info("Resized\t: %d x %d", resized.shape[1], resized.shape[0])
        return result

    @staticmethod
    def compress(contents: bytes, ext: str) -> bytes:
        image = ImageProcessor.decode(contents)
        if ext == ".png":
            params = [cv2.IMWRITE_PNG_COMPRESSION, PNG_COMPRESS_LEVEL]
        else:
            params = [cv2.IMWRITE_JPEG_QUALITY, JPEG_COMPRESS_QUALITY]
        result = ImageProcessor.encode(image, ext, params, error="Failed to compress image size")

        logger.info("=== COMPRESSOR ===")
        logger.info("Before\t: %d", len(contents))
        logger.info("After\t: %d", len(result))
        return result
