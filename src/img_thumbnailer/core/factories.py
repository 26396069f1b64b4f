"""Factory classes for creating configured service instances."""

from typing import Optional

from .fetcher import HttpFetcher
from .models import ServiceConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import LoggerProtocol
from .publisher import S3ClientFactoryFn, S3Publisher
from .resizer import ImageResizer
from .services import ThumbnailService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "img-thumbnailer.service") -> LoggerProtocol:
        """Create a structured logger."""
        return StructuredLogger(name)


class ThumbnailServiceFactory:
    """Factory for creating the complete thumbnail pipeline."""

    @staticmethod
    def create_service(
        config: ServiceConfig,
        logger: Optional[LoggerProtocol] = None,
        s3_client_factory: Optional[S3ClientFactoryFn] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ThumbnailService:
        """Create a fully configured thumbnail service."""
        if logger is None:
            logger = LoggerFactory.create_logger()

        fetcher = HttpFetcher(
            timeout=config.fetch_timeout, scratch_dir=config.scratch_dir
        )
        resizer = ImageResizer(scratch_dir=config.scratch_dir)
        publisher = S3Publisher(
            profile=config.credentials_profile,
            credentials_file=config.credentials_file,
            client_factory=s3_client_factory,
            connect_timeout=config.upload_connect_timeout,
            read_timeout=config.upload_read_timeout,
        )

        return ThumbnailService(
            fetcher=fetcher,
            resizer=resizer,
            publisher=publisher,
            bucket=config.bucket,
            region=config.region,
            logger=logger,
            metrics_collector=metrics_collector,
        )
