"""Custom exceptions and error handling utilities for the thumbnailer."""

from __future__ import annotations

from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .logging_config import get_logger


class ThumbnailerError(Exception):
    """Base exception for all thumbnailer errors."""


class ValidationError(ThumbnailerError):
    """Error raised for a malformed or insufficient resize request."""


class ConfigurationError(ThumbnailerError):
    """Error raised when the service configuration cannot be loaded."""


class FetchError(ThumbnailerError):
    """Error raised when the source image cannot be retrieved.

    ``status`` carries the HTTP status code for a non-success response and
    is ``None`` for transport failures (DNS, refused connection, timeout).
    """

    def __init__(
        self, message: str, *, source_location: str, status: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.source_location = source_location
        self.status = status

    @property
    def transport(self) -> bool:
        return self.status is None


class ResizeFailure(str, Enum):
    """Stage of the engine sequence that failed."""

    INVALID_DIMENSIONS = "invalid_dimensions"
    DECODE = "decode"
    CROP = "crop"
    SCALE = "scale"
    FORMAT = "format"
    QUALITY = "quality"
    WRITE = "write"


class ResizeError(ThumbnailerError):
    """Error raised when the image engine cannot produce the thumbnail."""

    def __init__(self, message: str, *, kind: ResizeFailure) -> None:
        super().__init__(message)
        self.kind = kind


class InvalidDimensionsError(ValidationError, ResizeError):
    """Both target dimensions are unset (or negative)."""

    def __init__(
        self, message: str = "width and height of image cannot both be unset"
    ) -> None:
        ResizeError.__init__(self, message, kind=ResizeFailure.INVALID_DIMENSIONS)


class PublishFailure(str, Enum):
    """Reason an upload could not be completed."""

    LOCAL_IO = "local_io"
    CREDENTIALS = "credentials"
    STORAGE = "storage"


class PublishError(ThumbnailerError):
    """Error raised when the thumbnail cannot be uploaded."""

    def __init__(self, message: str, *, kind: PublishFailure) -> None:
        super().__init__(message)
        self.kind = kind


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function with standardized error handling.

    Thumbnailer errors are logged and re-raised untouched; anything else is
    wrapped in ``ThumbnailerError`` so a single request never takes the
    process down.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        logger = get_logger("img-thumbnailer.errors")
        try:
            return func(*args, **kwargs)
        except ThumbnailerError as exc:
            logger.error(f"{type(exc).__name__} in {func.__name__}: {exc}")
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise ThumbnailerError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]
