import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imgproc.config import get_settings
from imgproc.schemas import ErrorResponse, HealthResponse
from imgproc.api.v1.image_processing import router as image_router
from imgproc.services.image_processor import ImageProcessingError
from imgproc.utils.log import setup_logging
from imgproc.utils.uploads import MISSING_IMAGE

logger = logging.getLogger(__name__)

def error_response(code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=code, content=ErrorResponse(code=code, message=message).model_dump(), headers=headers)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    # a non-file value in `image` counts as a missing upload
    if any("image" in err.get("loc", ()) for err in errors):
        return error_response(400, MISSING_IMAGE)
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(400, message)

async def image_processing_handler(request: Request, exc: ImageProcessingError):
    logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    return error_response(500, exc.message)

async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error")

def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version="1.0.0")

    origins = [o.strip() for o in settings.CORS_ALLOW_ORIGINS.split(",")] if settings.CORS_ALLOW_ORIGINS else ["*"]
    app.add_middleware(CORSMiddleware, allow_origins=origins, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ImageProcessingError, image_processing_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(image_router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse()

    return app

app = create_app()
