"""Core utilities and shared components for the remote gallery."""

from .logging_config import (
    add_file_handler,
    get_logger,
    setup_logger,
)
from .exceptions import (
    GalleryError,
    RemoteFetchError,
    TransportError,
    ExtractionError,
    EmptyFolderError,
    EmptyInputError,
    NoTargetsError,
    ConfigurationError,
    OperationCancelledError,
)
from .models import (
    ArchiveEntry,
    ArchiveResult,
    BulkOperationResult,
    FlightMetadata,
    FolderEntry,
    FolderExportReport,
    FolderExportResult,
    GalleryConfig,
    ImageEntry,
    SkippedImage,
    TargetResult,
)
from .listing import (
    filter_folders,
    natural_sort_key,
    normalize_base_url,
    parse_folders,
    parse_images,
)
from .metadata import build_flight_metadata, format_sidecar

__all__ = [
    "GalleryConfig",
    "FolderEntry",
    "ImageEntry",
    "FlightMetadata",
    "ArchiveEntry",
    "ArchiveResult",
    "SkippedImage",
    "TargetResult",
    "BulkOperationResult",
    "FolderExportResult",
    "FolderExportReport",
    "parse_folders",
    "parse_images",
    "filter_folders",
    "natural_sort_key",
    "normalize_base_url",
    "build_flight_metadata",
    "format_sidecar",
    "setup_logger",
    "get_logger",
    "add_file_handler",
    "GalleryError",
    "RemoteFetchError",
    "TransportError",
    "ExtractionError",
    "EmptyFolderError",
    "EmptyInputError",
    "NoTargetsError",
    "ConfigurationError",
    "OperationCancelledError",
]
