"""Custom exceptions for the remote gallery."""

from __future__ import annotations

from typing import Optional


class GalleryError(Exception):
    """Base exception for all remote gallery errors."""


class RemoteFetchError(GalleryError):
    """Error raised when the device answers with a non-2xx status."""

    def __init__(self, status: int, url: str = "", body: str = ""):
        self.status = status
        self.url = url
        self.body = body
        message = f"HTTP {status}"
        if url:
            message = f"{message} for {url}"
        super().__init__(message)


class TransportError(GalleryError):
    """Error raised for network level failures (DNS, refused connection, ...)."""


class ExtractionError(GalleryError):
    """Error raised when image metadata cannot be read."""


class EmptyFolderError(GalleryError):
    """Error raised when a folder listing holds no images."""

    def __init__(self, folder_url: Optional[str] = None):
        self.folder_url = folder_url
        super().__init__("No images found in folder")


class EmptyInputError(GalleryError):
    """Error raised when an explicit photo selection is empty."""

    def __init__(self, message: str = "No photos selected"):
        super().__init__(message)


class NoTargetsError(GalleryError):
    """Error raised when a bulk operation is given no targets."""

    def __init__(self, message: str = "No URLs provided"):
        super().__init__(message)


class ConfigurationError(GalleryError):
    """Error raised for invalid configuration options."""


class OperationCancelledError(GalleryError):
    """Error raised when a running batch is cancelled by the caller."""
