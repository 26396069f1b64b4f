"""Fetch, resize and publish pipeline for one thumbnail request."""

from typing import Optional

from .exceptions import with_error_handling
from .models import ResizeRequest, UploadResult
from .observability import LogContext, MetricsCollector, timed_stage
from .protocols import LoggerProtocol, Publisher, Resizer, SourceFetcher
from .scratch import discard


class ThumbnailService:
    """Runs Fetcher -> Resizer -> Publisher and owns the scratch files.

    Each stage only starts once the previous one has returned a fully
    written file. The first failing stage aborts the request. Both scratch
    files are removed before returning, whatever the outcome.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        resizer: Resizer,
        publisher: Publisher,
        bucket: str,
        region: str,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._fetcher = fetcher
        self._resizer = resizer
        self._publisher = publisher
        self._bucket = bucket
        self._region = region
        self._logger = logger
        self._metrics_collector = metrics_collector

    def _stage(self, name: str, context: LogContext):
        return timed_stage(name, self._logger, self._metrics_collector, context)

    @with_error_handling
    def create_thumbnail(self, request: ResizeRequest) -> UploadResult:
        """Produce and upload a thumbnail for ``request``."""
        context = LogContext(component="thumbnail_service").with_metadata(
            url=request.url,
            size=f"{request.width}x{request.height}",
            format=request.format,
        )
        self._logger.info("Thumbnail requested", context)

        source_path = None
        output_path = None
        try:
            with self._stage("fetch", context):
                source_path = self._fetcher.fetch(request.url)
            with self._stage("resize", context):
                output_path = self._resizer.resize(
                    source_path,
                    request.format,
                    request.width,
                    request.height,
                    request.compression,
                )
            with self._stage("publish", context):
                result = self._publisher.publish(self._bucket, self._region, output_path)
        finally:
            discard(source_path)
            discard(output_path)

        self._logger.info("Thumbnail published", context, location=result.url)
        return result
