"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Protocol

from .models import UploadResult


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the publisher needs."""

    def put_object(
        self, Bucket: str, Key: str, Body: BinaryIO, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class SourceFetcher(ABC):
    """Retrieves a source image into a local scratch file."""

    @abstractmethod
    def fetch(self, source_location: str) -> str:
        """Return the path of a scratch file holding the source image."""
        ...


class Resizer(ABC):
    """Turns a source image file into a thumbnail file."""

    @abstractmethod
    def resize(
        self,
        source_path: str,
        output_format: str,
        width: int,
        height: int,
        compression: int,
    ) -> str:
        """Return the path of a scratch file holding the thumbnail."""
        ...


class Publisher(ABC):
    """Uploads a thumbnail to durable storage."""

    @abstractmethod
    def publish(self, bucket: str, region: str, local_path: str) -> UploadResult:
        """Upload the file and return its location."""
        ...
