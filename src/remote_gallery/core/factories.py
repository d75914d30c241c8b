"""Factory classes for creating configured service instances."""

from dataclasses import dataclass
from typing import Optional

import requests

from .http_client import RemoteFetchClient
from .models import GalleryConfig
from .observability import StructuredLogger
from .protocols import HttpSessionProtocol, LoggerProtocol, MetadataReaderProtocol
from .services import (
    ArchiveAssemblerService,
    BulkOperationService,
    MetadataExtractorService,
    RemoteListingService,
)


@dataclass
class GalleryServices:
    """The wired set of services a front end needs."""

    config: GalleryConfig
    fetch_client: RemoteFetchClient
    listing: RemoteListingService
    archive: ArchiveAssemblerService
    bulk: BulkOperationService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(
        name: str, level: Optional[str] = None, log_file: Optional[str] = None
    ) -> LoggerProtocol:
        """Create a configured logger instance."""
        return StructuredLogger(name, level=level, log_file=log_file)


class HttpSessionFactory:
    """Factory for creating HTTP session instances."""

    @staticmethod
    def create_session() -> HttpSessionProtocol:
        """Create a requests session for the device."""
        session = requests.Session()
        session.headers.update({"Accept": "text/html,image/*;q=0.9,*/*;q=0.8"})
        return session


class GalleryServiceFactory:
    """Factory for creating the complete set of gallery services."""

    @staticmethod
    def create_services(
        config: Optional[GalleryConfig] = None,
        session: Optional[HttpSessionProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metadata_reader: Optional[MetadataReaderProtocol] = None,
    ) -> GalleryServices:
        """Create fully configured services."""

        # Create default dependencies if not provided
        if config is None:
            config = GalleryConfig()

        if session is None:
            session = HttpSessionFactory.create_session()

        if logger is None:
            logger = LoggerFactory.create_logger(
                "remote-gallery", level="DEBUG" if config.debug else None
            )

        fetch_client = RemoteFetchClient(
            session, timeout=config.request_timeout, requested_by=config.requested_by
        )
        listing = RemoteListingService(fetch_client, logger)
        archive = ArchiveAssemblerService(
            fetch_client,
            listing,
            MetadataExtractorService(metadata_reader),
            logger,
            on_image_error=config.on_image_error,
        )
        bulk = BulkOperationService(fetch_client, logger)

        return GalleryServices(
            config=config,
            fetch_client=fetch_client,
            listing=listing,
            archive=archive,
            bulk=bulk,
        )
