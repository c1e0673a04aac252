# imgproc/utils/uploads.py
import os
import re
from typing import Optional, Iterable, Union
from fastapi import HTTPException, Request
from starlette.datastructures import UploadFile

MISSING_IMAGE = "You have to provide `image` field!"

# Declared MIME type -> OpenCV extension
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

# OpenCV extension -> response Content-Type
CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".png": "image/png",
}

FILE_EXTENSIONS = {
    ".jpg": ".jpg",
    ".jpeg": ".jpg",
    ".png": ".png",
}

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -2**63, 2**63 - 1

def require_image(image: Union[UploadFile, str, None]) -> UploadFile:
    # a plain text `image` field is not an upload
    if not isinstance(image, UploadFile):
        raise HTTPException(status_code=400, detail=MISSING_IMAGE)
    return image

def check_content_type(image: UploadFile, allowed: Iterable[str], message: str) -> str:
    # Declared type only, the bytes are not sniffed
    if image.content_type not in allowed:
        raise HTTPException(status_code=400, detail=message)
    return image.content_type

def output_extension(image: UploadFile) -> str:
    """Encode in the file extension's format, falling back to the declared type."""
    ext = os.path.splitext(image.filename or "")[1].lower()
    return FILE_EXTENSIONS.get(ext) or MIME_EXTENSIONS[image.content_type]

async def read_upload(image: UploadFile) -> bytes:
    try:
        return await image.read()
    except ValueError:
        # read on a closed spooled file
        raise HTTPException(status_code=500, detail="Failed to stream image file")
    except OSError:
        raise HTTPException(status_code=500, detail="Failed to read image file")

async def close_upload(image: Union[UploadFile, str, None]) -> None:
    if isinstance(image, UploadFile):
        await image.close()

def form_value(request: Request, value: Optional[str], key: str, default: str) -> str:
    """Query string first, then form field, then ``default``."""
    if key in request.query_params:
        return request.query_params[key]
    if value is not None:
        return value
    return default

def parse_dimension(value: str, name: str) -> int:
    if _INTEGER.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    raise HTTPException(status_code=400, detail=f"Please provide only an integer number for `{name}`!")
