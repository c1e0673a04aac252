import uvicorn

from imgproc.config import get_settings

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "imgproc.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
