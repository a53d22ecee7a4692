# cortana_ocr_api/main.py
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cortana_ocr_api.config import configure_logging, get_settings
from cortana_ocr_api.errors import OcrServiceError
from cortana_ocr_api.routes import ocr
from cortana_ocr_api.utils.staging import ensure_staging_dirs, sweep_staging_dirs
from cortana_ocr_api.utils.tesseract import check_tesseract_version

logger = logging.getLogger(__name__)

app = FastAPI(title="Cortana OCR API")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message}},
    )


# ---------- Lifecycle ----------
@app.on_event("startup")
def startup_event():
    settings = get_settings()
    configure_logging(settings.log_level)
    ensure_staging_dirs(settings)
    removed = sweep_staging_dirs([settings.upload_dir, settings.output_dir])
    if removed:
        logger.info(f"Removed {removed} orphaned staging files")
    check_tesseract_version(settings)
    logger.info(f"{settings.app_name} ready on port {settings.port}")


@app.on_event("shutdown")
def shutdown_event():
    settings = get_settings()
    logger.info("Shutdown received. Cleaning up staging directories...")
    sweep_staging_dirs([settings.upload_dir, settings.output_dir])


# ---------- Request size limit ----------
class BodySizeLimitMiddleware:
    """Reject request bodies larger than max_body_size with 413.

    Bodies without a Content-Length header (chunked) are buffered and
    counted before the app sees them.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = get_settings().max_body_size
        too_large = error_response(413, "Request body too large.")

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None and content_length.isdigit():
            if int(content_length) > limit:
                await too_large(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        messages: list[Message] = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                logger.info(f"{scope['path']} rejected: chunked body over {limit} bytes")
                await too_large(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)


app.add_middleware(BodySizeLimitMiddleware)


# ---------- Error handling ----------
@app.exception_handler(OcrServiceError)
async def ocr_error_handler(request: Request, exc: OcrServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.url.path} rejected: {exc.errors()}")
    return error_response(400, "Invalid request body.")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
    return error_response(500, "Internal server error")


app.include_router(ocr.router)


@app.get("/health")
def health():
    return {"status": "healthy"}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
