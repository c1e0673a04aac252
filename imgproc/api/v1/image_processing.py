"""
Image Processing API Endpoints

PNG to JPEG conversion, exact-size resizing and fixed-quality compression.
Each route validates the multipart upload, hands the pixels to
ImageProcessor and returns the encoded bytes.
"""
from typing import Optional, Union
from fastapi import APIRouter, UploadFile, File, Form, Request, HTTPException
from fastapi.responses import Response
from imgproc.services.image_processor import ImageProcessor
from imgproc.utils.uploads import (
    require_image, check_content_type, output_extension, CONTENT_TYPES,
    read_upload, close_upload, form_value, parse_dimension,
)

router = APIRouter(tags=["image-processing"])

PNG_ONLY = "Please provide an image with PNG extension!"
JPEG_OR_PNG = "The image must be in JPEG or PNG format!"
NO_DIMENSIONS = "You must specify the dimensions using the `width` and `height` fields!"
SUPPORTED_TYPES = ("image/jpeg", "image/png")

def _image_response(content: bytes, ext: str, name: str) -> Response:
    return Response(
        content=content,
        media_type=CONTENT_TYPES[ext],
        headers={"Content-Disposition": f"inline; filename={name}{ext}"}
    )

@router.post("/converter")
async def converter(image: Union[UploadFile, str, None] = File(None)):
    """Convert an uploaded PNG into a JPEG."""
    image = require_image(image)
    try:
        check_content_type(image, ("image/png",), PNG_ONLY)
        contents = await read_upload(image)
        result = ImageProcessor.convert_to_jpeg(contents)
    finally:
        await image.close()

    return _image_response(result, ".jpg", "converted")

@router.post("/resizer")
async def resizer(
    request: Request,
    width: Optional[str] = Form(None),
    height: Optional[str] = Form(None),
    image: Union[UploadFile, str, None] = File(None),
):
    """Resize an uploaded JPEG or PNG to exactly ``width`` x ``height``."""
    try:
        width_px = parse_dimension(form_value(request, width, "width", "0"), "width")
        height_px = parse_dimension(form_value(request, height, "height", "0"), "height")
        if width_px <= 0 and height_px <= 0:
            raise HTTPException(status_code=400, detail=NO_DIMENSIONS)

        image = require_image(image)
        check_content_type(image, SUPPORTED_TYPES, JPEG_OR_PNG)
        ext = output_extension(image)
        contents = await read_upload(image)
        result = ImageProcessor.resize(contents, width_px, height_px, ext)
    finally:
        await close_upload(image)

    return _image_response(result, ext, "resized")

@router.post("/compressor")
async def compressor(image: Union[UploadFile, str, None] = File(None)):
    """Re-encode an uploaded JPEG or PNG with fixed lossy parameters."""
    image = require_image(image)
    try:
        check_content_type(image, SUPPORTED_TYPES, JPEG_OR_PNG)
        ext = output_extension(image)
        contents = await read_upload(image)
        result = ImageProcessor.compress(contents, ext)
    finally:
        await image.close()

    return _image_response(result, ext, "compressed")
