"""HTTP front end: one POST endpoint that runs the thumbnail pipeline."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from .core import ResizeRequest, ThumbnailerError, get_logger
from .core.services import ThumbnailService


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def create_app(service: ThumbnailService) -> FastAPI:
    """Create the FastAPI application around a configured service.

    ``POST /`` takes ``{"url", "format", "compression", "width"?, "height"?}``
    and answers ``{"url": <location>}``. Every failure is a 400 carrying the
    error message as plain text.
    """
    app = FastAPI(title="img-thumbnailer")
    logger = get_logger("img-thumbnailer.server")

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        message = f"Invalid body: {_describe_validation_error(exc)}"
        logger.warning(message)
        return PlainTextResponse(message, status_code=400)

    @app.exception_handler(ThumbnailerError)
    async def pipeline_failure(request: Request, exc: ThumbnailerError):
        return PlainTextResponse(str(exc), status_code=400)

    # Sync endpoint: FastAPI runs it on its worker threadpool, one thread per request.
    @app.post("/")
    def resize(body: ResizeRequest):
        result = service.create_thumbnail(body)
        return {"url": result.url}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
